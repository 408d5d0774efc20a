"""Seeder error taxonomy.

Errors raised inside one entity pass are converted to a failed
``SeedResult`` at the pass boundary; only orchestration-level errors
(unknown module, dependency cycle) escape to the caller.
"""

from __future__ import annotations

from typing import Any

from app.core.exceptions import SandboxError


class SeederError(SandboxError):
    """Base class for seeding failures."""


class TemplateNotFound(SeederError):
    """No fixture template is registered for an entity type."""

    def __init__(self, entity_type: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=f"No fixture template registered for entity type '{entity_type}'",
            code="TEMPLATE_NOT_FOUND",
            status_code=404,
            details={"entity_type": entity_type, **(details or {})},
        )
        self.entity_type = entity_type


class InvalidConstraint(SeederError):
    """Generation bounds or template fields are malformed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message, code="INVALID_CONSTRAINT", status_code=422, details=details
        )


class DependencyUnavailable(SeederError):
    """Parent records could not be read while resolving a dependency pool."""

    def __init__(self, collection: str, reason: str) -> None:
        super().__init__(
            message=f"Dependency collection '{collection}' unavailable: {reason}",
            code="DEPENDENCY_UNAVAILABLE",
            status_code=503,
            details={"collection": collection},
        )
        self.collection = collection


class PersistenceFailure(SeederError):
    """A write or delete against the document store failed.

    Attributes:
        completed: Operations that did land before/alongside the failure.
        failed: Operations that were rejected.
    """

    def __init__(self, message: str, completed: int = 0, failed: int = 1) -> None:
        super().__init__(
            message=message,
            code="PERSISTENCE_FAILURE",
            status_code=502,
            details={"completed": completed, "failed": failed},
        )
        self.completed = completed
        self.failed = failed


class SeedTimeout(SeederError):
    """A gateway call exceeded the configured timeout."""

    def __init__(self, phase: str, timeout_seconds: float) -> None:
        super().__init__(
            message=f"Timed out after {timeout_seconds:g}s during {phase}",
            code="SEED_TIMEOUT",
            status_code=504,
            details={"phase": phase, "timeout_seconds": timeout_seconds},
        )
        self.phase = phase
        self.timeout_seconds = timeout_seconds


class UnknownModule(SeederError):
    """Requested entity type has no registered seeder."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            message=f"Unknown seed module '{name}'. Available: {', '.join(available)}",
            code="UNKNOWN_MODULE",
            status_code=404,
            details={"module": name, "available": available},
        )
        self.name = name


class CircularDependency(SeederError):
    """Declared dependencies between entity types form a cycle."""

    def __init__(self, modules: set[str]) -> None:
        super().__init__(
            message=f"Circular dependency between seed modules: {', '.join(sorted(modules))}",
            code="CIRCULAR_DEPENDENCY",
            status_code=500,
            details={"modules": sorted(modules)},
        )
        self.modules = modules
