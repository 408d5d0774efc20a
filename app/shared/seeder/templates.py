"""Fixture template store.

Templates are hand-authored YAML documents, one per entity type, holding the
business-rule surface (enumerations, workflows, pricing tiers, tax rates).
They are loaded once per store instance and handed out read-only.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from app.core.logging import get_logger
from app.shared.seeder.errors import InvalidConstraint, TemplateNotFound

logger = get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

_MISSING = object()


def _freeze(value: Any) -> Any:
    """Recursively convert dicts/lists into read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return a mutable deep copy of a frozen template value.

    Generators use this when a template block is copied into a record.
    """
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class EntityTemplate:
    """Read-only template for one entity type.

    Unknown keys are carried but ignored; required keys are checked lazily by
    ``require`` so a missing field fails at first use.
    """

    def __init__(self, entity_type: str, data: Mapping[str, Any]) -> None:
        self.entity_type = entity_type
        self._data: Mapping[str, Any] = _freeze(data)

    def __repr__(self) -> str:
        return f"EntityTemplate({self.entity_type!r}, keys={sorted(self._data)})"

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> Any:
        return self.require(key)

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def require(self, *path: str) -> Any:
        """Fetch a required (possibly nested) field.

        Raises:
            InvalidConstraint: If any segment of the path is missing.
        """
        node: Any = self._data
        for depth, key in enumerate(path):
            value = node.get(key, _MISSING) if isinstance(node, Mapping) else _MISSING
            if value is _MISSING:
                dotted = ".".join(path[: depth + 1])
                raise InvalidConstraint(
                    f"Template '{self.entity_type}' is missing required field '{dotted}'",
                    details={"entity_type": self.entity_type, "field": dotted},
                )
            node = value
        return node

    def require_range(self, *path: str) -> tuple[float, float]:
        """Fetch a ``{min, max}`` block as a validated tuple.

        Raises:
            InvalidConstraint: If the block is missing, non-numeric or inverted.
        """
        block = self.require(*path)
        dotted = ".".join(path)
        if not isinstance(block, Mapping) or "min" not in block or "max" not in block:
            raise InvalidConstraint(
                f"Template '{self.entity_type}' field '{dotted}' must define min and max",
                details={"entity_type": self.entity_type, "field": dotted},
            )
        low, high = block["min"], block["max"]
        if isinstance(low, bool) or isinstance(high, bool) or not (
            isinstance(low, int | float) and isinstance(high, int | float)
        ):
            raise InvalidConstraint(
                f"Template '{self.entity_type}' field '{dotted}' bounds must be numeric",
                details={"entity_type": self.entity_type, "field": dotted},
            )
        if low > high:
            raise InvalidConstraint(
                f"Template '{self.entity_type}' field '{dotted}' has min {low} > max {high}",
                details={"entity_type": self.entity_type, "field": dotted},
            )
        return low, high


class TemplateStore:
    """Loads and caches entity templates from a directory of YAML files."""

    SUFFIXES = (".yaml", ".yml")

    def __init__(self, templates_dir: Path | str | None = None) -> None:
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self._cache: dict[str, EntityTemplate] = {}

    def _path_for(self, entity_type: str) -> Path | None:
        for suffix in self.SUFFIXES:
            candidate = self.templates_dir / f"{entity_type}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def available(self) -> list[str]:
        """Entity types with a template file present."""
        if not self.templates_dir.is_dir():
            return []
        return sorted(
            {p.stem for p in self.templates_dir.iterdir() if p.suffix in self.SUFFIXES}
        )

    def load_template(self, entity_type: str) -> EntityTemplate:
        """Return the template for ``entity_type``, loading it on first use.

        Raises:
            TemplateNotFound: If no template file exists for the entity type.
            InvalidConstraint: If the file is not a YAML mapping.
        """
        cached = self._cache.get(entity_type)
        if cached is not None:
            return cached

        path = self._path_for(entity_type)
        if path is None:
            raise TemplateNotFound(
                entity_type,
                details={"templates_dir": str(self.templates_dir), "available": self.available()},
            )

        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConstraint(
                f"Template '{entity_type}' is not valid YAML: {e}",
                details={"entity_type": entity_type, "path": str(path)},
            ) from e

        if not isinstance(data, Mapping):
            raise InvalidConstraint(
                f"Template '{entity_type}' must be a mapping at the top level",
                details={"entity_type": entity_type, "path": str(path)},
            )

        template = EntityTemplate(entity_type, data)
        self._cache[entity_type] = template
        logger.debug("seeder.template.loaded", entity_type=entity_type, path=str(path))
        return template
