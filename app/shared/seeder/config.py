"""Per-invocation seeding options."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from app.shared.seeder.errors import InvalidConstraint


@dataclass(frozen=True)
class SeedOptions:
    """Options shared by every entity pass in one invocation.

    Attributes:
        clear: Delete the entity's existing documents before seeding.
        count: Records to create per entity type; None uses each module's default.
        skip: Skip the whole invocation (nothing is attempted).
        skip_modules: Entity types to leave out of an ``all`` run.
        seed: Random seed for reproducible generation; None is non-deterministic.
        timeout_seconds: Limit for each gateway call; None disables the limit.
        max_concurrency: Upper bound on in-flight writes/deletes per pass.
        parallel: Run entity types without mutual dependencies concurrently.
    """

    clear: bool = False
    count: int | None = None
    skip: bool = False
    skip_modules: frozenset[str] = field(default_factory=frozenset)
    seed: int | None = None
    timeout_seconds: float | None = None
    max_concurrency: int = 16
    parallel: bool = False

    def __post_init__(self) -> None:
        if self.count is not None and self.count < 0:
            raise InvalidConstraint(
                f"count must be >= 0, got {self.count}", details={"count": self.count}
            )
        if self.max_concurrency < 1:
            raise InvalidConstraint(
                f"max_concurrency must be >= 1, got {self.max_concurrency}",
                details={"max_concurrency": self.max_concurrency},
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise InvalidConstraint(
                f"timeout_seconds must be > 0, got {self.timeout_seconds}",
                details={"timeout_seconds": self.timeout_seconds},
            )
        # Accept any iterable of names from callers
        if not isinstance(self.skip_modules, frozenset):
            object.__setattr__(self, "skip_modules", frozenset(self.skip_modules))

    def count_for(self, default: int) -> int:
        """Record count for a module whose default is ``default``."""
        return default if self.count is None else self.count

    def with_overrides(self, **changes: Any) -> SeedOptions:
        """Copy with some fields replaced (validation runs again)."""
        return replace(self, **changes)
