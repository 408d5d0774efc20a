"""Static registry of entity seeders."""

from __future__ import annotations

from app.core.logging import get_logger
from app.shared.seeder.entity import EntitySeeder
from app.shared.seeder.errors import InvalidConstraint, UnknownModule
from app.shared.seeder.generators import (
    ConfigGenerator,
    OrderGenerator,
    ProductGenerator,
    UserGenerator,
)
from app.shared.seeder.resolver import DependencySpec

logger = get_logger(__name__)


class SeederRegistry:
    """Maps entity type names to their seeders, in registration order."""

    def __init__(self) -> None:
        self._seeders: dict[str, EntitySeeder] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._seeders

    def __len__(self) -> int:
        return len(self._seeders)

    def register(self, seeder: EntitySeeder) -> EntitySeeder:
        """Add a seeder.

        Raises:
            InvalidConstraint: If the name is already taken.
        """
        if seeder.name in self._seeders:
            raise InvalidConstraint(
                f"Seed module '{seeder.name}' is already registered",
                details={"module": seeder.name},
            )
        self._seeders[seeder.name] = seeder
        logger.debug(
            "seeder.registry.registered",
            module=seeder.name,
            depends_on=[spec.collection for spec in seeder.dependencies],
        )
        return seeder

    def _collection_owners(self) -> dict[str, str]:
        return {seeder.collection: name for name, seeder in self._seeders.items()}

    def validate(self) -> None:
        """Check that every dependency points at a registered collection.

        Raises:
            InvalidConstraint: If a dependency collection has no owner.
        """
        owners = self._collection_owners()
        for seeder in self._seeders.values():
            for spec in seeder.dependencies:
                if spec.collection not in owners:
                    raise InvalidConstraint(
                        f"Seed module '{seeder.name}' depends on unregistered collection "
                        f"'{spec.collection}'",
                        details={"module": seeder.name, "collection": spec.collection},
                    )

    def get(self, name: str) -> EntitySeeder:
        """Seeder for ``name``.

        Raises:
            UnknownModule: If nothing is registered under ``name``.
        """
        try:
            return self._seeders[name]
        except KeyError:
            raise UnknownModule(name, self.names()) from None

    def names(self) -> list[str]:
        return list(self._seeders)

    def seeders(self) -> list[EntitySeeder]:
        return list(self._seeders.values())

    def dependencies_of(self, name: str) -> list[str]:
        """Entity types whose collections ``name`` samples from.

        Raises:
            UnknownModule: If ``name`` is not registered.
            InvalidConstraint: If a dependency collection has no owner.
        """
        owners = self._collection_owners()
        seeder = self.get(name)
        missing = [spec.collection for spec in seeder.dependencies if spec.collection not in owners]
        if missing:
            raise InvalidConstraint(
                f"Seed module '{name}' depends on unregistered collection '{missing[0]}'",
                details={"module": name, "collection": missing[0]},
            )
        return [owners[spec.collection] for spec in seeder.dependencies]


def default_registry(default_count: int = 10) -> SeederRegistry:
    """Registry with the built-in entity types.

    Args:
        default_count: Records per pass for users, products and orders when
            the caller leaves ``count`` unset. Config always defaults to one.
    """
    registry = SeederRegistry()
    registry.register(EntitySeeder("users", UserGenerator, default_count=default_count))
    registry.register(EntitySeeder("products", ProductGenerator, default_count=default_count))
    registry.register(
        EntitySeeder(
            "orders",
            OrderGenerator,
            dependencies=(
                DependencySpec("users", limit=50, fields=("displayName", "email")),
                DependencySpec("products", limit=100, fields=("name", "price")),
            ),
            default_count=default_count,
        )
    )
    registry.register(EntitySeeder("config", ConfigGenerator, default_count=1))
    registry.validate()
    return registry
