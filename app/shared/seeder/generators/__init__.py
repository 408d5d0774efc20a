"""Record generators, one per entity type."""

from app.shared.seeder.generators.config import ConfigGenerator
from app.shared.seeder.generators.order import OrderGenerator, compute_pricing
from app.shared.seeder.generators.product import ProductGenerator
from app.shared.seeder.generators.user import UserGenerator

__all__ = [
    "ConfigGenerator",
    "OrderGenerator",
    "ProductGenerator",
    "UserGenerator",
    "compute_pricing",
]
