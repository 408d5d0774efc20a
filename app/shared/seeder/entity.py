"""Entity seeder: one reset-then-populate pass for a single entity type.

A pass walks ``START -> CLEARING -> RESOLVING_DEPENDENCIES -> GENERATING ->
PERSISTING -> DONE``; any error moves it to ``FAILED``. Errors never escape
``run``: they are reported through the returned ``SeedResult``.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from app.core.exceptions import SandboxError
from app.core.logging import get_logger
from app.shared.gateway import GatewayError
from app.shared.seeder.errors import PersistenceFailure, SeedTimeout
from app.shared.seeder.resolver import DependencyPool, DependencySpec, resolve_pool

if TYPE_CHECKING:
    from app.shared.gateway import DocumentGateway
    from app.shared.seeder.config import SeedOptions
    from app.shared.seeder.templates import EntityTemplate, TemplateStore
    from app.shared.seeder.values import ValueGenerator

logger = get_logger(__name__)

T = TypeVar("T")


class SeedPhase(str, Enum):
    """Lifecycle states of one entity pass."""

    START = "start"
    CLEARING = "clearing"
    RESOLVING_DEPENDENCIES = "resolving_dependencies"
    GENERATING = "generating"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SeedResult:
    """Outcome of one entity pass.

    Attributes:
        module: Entity type name.
        created: Documents actually written (partial on a failed pass).
        updated: Documents updated in place (always 0 for insert-only passes).
        deleted: Documents removed while clearing.
        duration_ms: Wall time of the pass.
        success: Whether the pass reached DONE.
        error: Failure message; present iff ``success`` is False.
    """

    module: str
    created: int = 0
    updated: int = 0
    deleted: int = 0
    duration_ms: int = 0
    success: bool = True
    error: str | None = None

    @classmethod
    def succeeded(
        cls, module: str, created: int, deleted: int = 0, duration_ms: int = 0
    ) -> SeedResult:
        return cls(module=module, created=created, deleted=deleted, duration_ms=duration_ms)

    @classmethod
    def failed(
        cls,
        module: str,
        error: str,
        created: int = 0,
        deleted: int = 0,
        duration_ms: int = 0,
    ) -> SeedResult:
        return cls(
            module=module,
            created=created,
            deleted=deleted,
            duration_ms=duration_ms,
            success=False,
            error=error or "Unknown error",
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "module": self.module,
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "durationMs": self.duration_ms,
            "success": self.success,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


class RecordGenerator(Protocol):
    """Builds the synthetic documents for one pass."""

    def generate(self, count: int) -> list[dict[str, Any]]: ...


GeneratorFactory = Callable[
    ["ValueGenerator", "EntityTemplate", dict[str, DependencyPool]], RecordGenerator
]


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, SandboxError):
        return exc.message
    return str(exc) or type(exc).__name__


class EntitySeeder:
    """Runs clear -> resolve -> generate -> persist for one entity type."""

    def __init__(
        self,
        name: str,
        generator: GeneratorFactory,
        dependencies: tuple[DependencySpec, ...] = (),
        default_count: int = 10,
        collection: str | None = None,
        template: str | None = None,
    ) -> None:
        """Initialize the seeder.

        Args:
            name: Entity type identifier (also the result's ``module``).
            generator: Factory ``(values, template, pools) -> RecordGenerator``.
            dependencies: Parent collections sampled for foreign keys.
            default_count: Records created when options leave ``count`` unset.
            collection: Destination collection (defaults to ``name``).
            template: Template name (defaults to ``name``).
        """
        self.name = name
        self.generator = generator
        self.dependencies = dependencies
        self.default_count = default_count
        self.collection = collection or name
        self.template = template or name

    def __repr__(self) -> str:
        return f"EntitySeeder({self.name!r}, depends_on={[d.collection for d in self.dependencies]})"

    # ------------------------------------------------------------------
    # Gateway call helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _call(awaitable: Awaitable[T], phase: SeedPhase, timeout: float | None) -> T:
        if timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout)
        except TimeoutError as e:
            raise SeedTimeout(phase.value, timeout) from e

    async def _fan_out(
        self,
        calls: list[Callable[[], Awaitable[Any]]],
        phase: SeedPhase,
        options: SeedOptions,
    ) -> tuple[int, list[BaseException]]:
        """Run gateway calls concurrently, waiting for every one to settle."""
        semaphore = asyncio.Semaphore(options.max_concurrency)

        async def bounded(call: Callable[[], Awaitable[Any]]) -> Any:
            async with semaphore:
                return await self._call(call(), phase, options.timeout_seconds)

        outcomes = await asyncio.gather(*(bounded(c) for c in calls), return_exceptions=True)
        failures = [o for o in outcomes if isinstance(o, BaseException)]
        return len(outcomes) - len(failures), failures

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _clear(self, gateway: DocumentGateway, options: SeedOptions) -> int:
        try:
            documents = await self._call(
                gateway.list_documents(self.collection),
                SeedPhase.CLEARING,
                options.timeout_seconds,
            )
        except GatewayError as e:
            raise PersistenceFailure(
                f"Could not list '{self.collection}' for clearing: {e.message}", completed=0
            ) from e

        completed, failures = await self._fan_out(
            [
                lambda doc_id=doc.id: gateway.delete_document(self.collection, doc_id)
                for doc in documents
            ],
            SeedPhase.CLEARING,
            options,
        )
        if failures:
            raise PersistenceFailure(
                f"{len(failures)} of {len(documents)} deletes in '{self.collection}' failed: "
                f"{_error_message(failures[0])}",
                completed=completed,
                failed=len(failures),
            )

        logger.info("seeder.pass.clear_completed", module=self.name, deleted=completed)
        return completed

    async def _resolve(
        self, gateway: DocumentGateway, options: SeedOptions
    ) -> dict[str, DependencyPool]:
        pools: dict[str, DependencyPool] = {}
        for spec in self.dependencies:
            pools[spec.collection] = await self._call(
                resolve_pool(gateway, spec.collection, spec.limit, spec.fields),
                SeedPhase.RESOLVING_DEPENDENCIES,
                options.timeout_seconds,
            )
        return pools

    async def _persist(
        self,
        gateway: DocumentGateway,
        records: list[dict[str, Any]],
        options: SeedOptions,
    ) -> int:
        completed, failures = await self._fan_out(
            [
                lambda record=record: gateway.create_document(self.collection, record)
                for record in records
            ],
            SeedPhase.PERSISTING,
            options,
        )
        if failures:
            raise PersistenceFailure(
                f"{len(failures)} of {len(records)} writes to '{self.collection}' failed: "
                f"{_error_message(failures[0])}",
                completed=completed,
                failed=len(failures),
            )
        return completed

    # ------------------------------------------------------------------
    # Pass
    # ------------------------------------------------------------------

    async def run(
        self,
        gateway: DocumentGateway,
        options: SeedOptions,
        templates: TemplateStore,
        values: ValueGenerator,
    ) -> SeedResult:
        """Execute one pass and report its outcome.

        Args:
            gateway: Document store handle.
            options: Invocation options.
            templates: Template store (cached per run).
            values: Value generator dedicated to this entity type.

        Returns:
            SeedResult; ``success`` is False if any phase failed.
        """
        started = time.perf_counter()
        count = options.count_for(self.default_count)
        phase = SeedPhase.START
        deleted = 0
        created = 0

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        logger.info(
            "seeder.pass.started",
            module=self.name,
            collection=self.collection,
            count=count,
            clear=options.clear,
        )

        try:
            template = templates.load_template(self.template)

            if options.clear:
                phase = SeedPhase.CLEARING
                deleted = await self._clear(gateway, options)

            phase = SeedPhase.RESOLVING_DEPENDENCIES
            pools = await self._resolve(gateway, options)

            phase = SeedPhase.GENERATING
            records = self.generator(values, template, pools).generate(count)

            phase = SeedPhase.PERSISTING
            created = await self._persist(gateway, records, options)
        except Exception as e:
            if isinstance(e, PersistenceFailure):
                if phase is SeedPhase.CLEARING:
                    deleted = e.completed
                elif phase is SeedPhase.PERSISTING:
                    created = e.completed

            logger.error(
                "seeder.pass.failed",
                module=self.name,
                phase=phase.value,
                error=_error_message(e),
                error_type=type(e).__name__,
                created=created,
                deleted=deleted,
                exc_info=not isinstance(e, SandboxError),
            )
            return SeedResult.failed(
                self.name,
                _error_message(e),
                created=created,
                deleted=deleted,
                duration_ms=elapsed_ms(),
            )

        result = SeedResult.succeeded(
            self.name, created=created, deleted=deleted, duration_ms=elapsed_ms()
        )
        logger.info(
            "seeder.pass.completed",
            module=self.name,
            phase=SeedPhase.DONE.value,
            created=result.created,
            deleted=result.deleted,
            duration_ms=result.duration_ms,
        )
        return result
