"""Seeder module for populating the sandbox document store.

Provides:
- Entity seeders for users, products, orders and config
- Dependency-ordered orchestration with per-entity failure isolation
- Template-driven synthetic value generation (reproducible with a seed)
"""

from app.shared.seeder.config import SeedOptions
from app.shared.seeder.core import (
    AggregateSummary,
    SeedOrchestrator,
    plan_order,
    plan_waves,
)
from app.shared.seeder.entity import EntitySeeder, SeedPhase, SeedResult
from app.shared.seeder.registry import SeederRegistry, default_registry
from app.shared.seeder.resolver import DependencyPool, DependencySpec, resolve_pool
from app.shared.seeder.templates import EntityTemplate, TemplateStore
from app.shared.seeder.values import ValueGenerator

__all__ = [
    "AggregateSummary",
    "DependencyPool",
    "DependencySpec",
    "EntitySeeder",
    "EntityTemplate",
    "SeedOptions",
    "SeedOrchestrator",
    "SeedPhase",
    "SeedResult",
    "SeederRegistry",
    "TemplateStore",
    "ValueGenerator",
    "default_registry",
    "plan_order",
    "plan_waves",
    "resolve_pool",
]
