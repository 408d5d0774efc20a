"""Relationship resolver: snapshots parent records for foreign-key sampling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.core.logging import get_logger
from app.shared.gateway import GatewayError
from app.shared.seeder.errors import DependencyUnavailable, InvalidConstraint

if TYPE_CHECKING:
    from app.shared.gateway import DocumentGateway
    from app.shared.seeder.values import ValueGenerator

logger = get_logger(__name__)


@dataclass(frozen=True)
class DependencySpec:
    """A parent collection an entity type samples from.

    Attributes:
        collection: Parent collection name.
        limit: Maximum parent documents captured in the pool.
        fields: Parent fields copied into the pool (others are dropped).
    """

    collection: str
    limit: int = 50
    fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class PoolRecord:
    """Identifier plus the requested subset of a parent's fields."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


@dataclass(frozen=True)
class DependencyPool:
    """Read-only snapshot of parent records captured once per pass."""

    collection: str
    records: tuple[PoolRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(record.id for record in self.records)

    def pick_one(self, values: ValueGenerator) -> PoolRecord | None:
        """Random parent, or None when no parent is available."""
        if not self.records:
            return None
        return values.choice(self.records)

    def pick_many(self, values: ValueGenerator, count: int) -> list[PoolRecord]:
        """``count`` parents drawn with replacement; empty when the pool is."""
        if not self.records:
            return []
        return [values.choice(self.records) for _ in range(count)]


async def resolve_pool(
    gateway: DocumentGateway,
    collection: str,
    limit: int,
    fields: tuple[str, ...] = (),
) -> DependencyPool:
    """Capture up to ``limit`` existing documents of ``collection``.

    An empty collection yields an empty pool; callers substitute a null
    foreign key rather than failing.

    Raises:
        InvalidConstraint: If ``limit`` is negative.
        DependencyUnavailable: If the gateway cannot be read.
    """
    if limit < 0:
        raise InvalidConstraint(f"pool limit must be >= 0, got {limit}")
    if limit == 0:
        return DependencyPool(collection=collection)

    try:
        documents = await gateway.list_documents(collection, limit=limit)
    except GatewayError as e:
        raise DependencyUnavailable(collection, e.message) from e

    records = tuple(
        PoolRecord(
            id=doc.id,
            fields={key: doc.fields[key] for key in fields if key in doc.fields},
        )
        for doc in documents[:limit]
    )

    logger.info(
        "seeder.pool.resolved",
        collection=collection,
        limit=limit,
        size=len(records),
    )
    return DependencyPool(collection=collection, records=records)
