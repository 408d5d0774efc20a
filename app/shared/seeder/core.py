"""Seed orchestration: dependency ordering, execution and aggregation."""

from __future__ import annotations

import asyncio
import heapq
import time
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.core.logging import get_logger, seed_run_id_ctx
from app.shared.seeder.config import SeedOptions
from app.shared.seeder.entity import SeedResult
from app.shared.seeder.errors import CircularDependency
from app.shared.seeder.registry import SeederRegistry, default_registry
from app.shared.seeder.templates import TemplateStore
from app.shared.seeder.values import ValueGenerator

if TYPE_CHECKING:
    from app.shared.gateway import DocumentGateway

logger = get_logger(__name__)

ALL = "all"


@dataclass
class AggregateSummary:
    """Outcome of one orchestrated run.

    Attributes:
        results: Per entity results in execution order.
        total_duration_ms: Wall time of the whole run.
        run_id: Correlation id attached to every log event of the run.
        seed: Random seed used (None when generation was non-deterministic).
    """

    results: list[SeedResult] = field(default_factory=list)
    total_duration_ms: int = 0
    run_id: str | None = None
    seed: int | None = None

    @property
    def total_created(self) -> int:
        return sum(r.created for r in self.results)

    @property
    def total_deleted(self) -> int:
        return sum(r.deleted for r in self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def succeeded(self) -> bool:
        return self.failure_count == 0

    def result_for(self, module: str) -> SeedResult | None:
        return next((r for r in self.results if r.module == module), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "runId": self.run_id,
            "seed": self.seed,
            "results": [r.to_dict() for r in self.results],
            "totalCreated": self.total_created,
            "totalDeleted": self.total_deleted,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "totalDurationMs": self.total_duration_ms,
            "success": self.succeeded,
        }


def resolve_requested(registry: SeederRegistry, requested: str | Iterable[str]) -> list[str]:
    """Normalise a request into registered entity type names.

    Raises:
        UnknownModule: If a requested name is not registered.
    """
    if isinstance(requested, str):
        names = registry.names() if requested == ALL else [requested]
    else:
        names = list(dict.fromkeys(requested))
    for name in names:
        registry.get(name)
    return names


def _subgraph(registry: SeederRegistry, names: list[str]) -> dict[str, set[str]]:
    """Dependencies restricted to ``names``; outside dependencies are not pulled in."""
    selected = set(names)
    return {
        name: {dep for dep in registry.dependencies_of(name) if dep in selected}
        for name in names
    }


def plan_order(registry: SeederRegistry, requested: str | Iterable[str] = ALL) -> list[str]:
    """Sort entity types so dependencies run before dependents.

    Kahn's algorithm; among entity types that are ready at the same time the
    earliest registered goes first.

    Raises:
        UnknownModule: If a requested name is not registered.
        CircularDependency: If the requested dependencies form a cycle.
    """
    names = resolve_requested(registry, requested)
    graph = _subgraph(registry, names)
    rank = {name: index for index, name in enumerate(registry.names())}

    in_degree = {name: len(deps) for name, deps in graph.items()}
    ready = [(rank[name], name) for name, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    order: list[str] = []

    while ready:
        _, name = heapq.heappop(ready)
        order.append(name)
        for other, deps in graph.items():
            if name in deps:
                in_degree[other] -= 1
                if in_degree[other] == 0:
                    heapq.heappush(ready, (rank[other], other))

    if len(order) != len(graph):
        raise CircularDependency(set(graph) - set(order))
    return order


def plan_waves(
    registry: SeederRegistry, requested: str | Iterable[str] = ALL
) -> list[list[str]]:
    """Group entity types into dependency levels.

    Every member of a wave depends only on members of earlier waves, so a
    wave can run concurrently once the previous one has finished.

    Raises:
        UnknownModule: If a requested name is not registered.
        CircularDependency: If the requested dependencies form a cycle.
    """
    names = resolve_requested(registry, requested)
    graph = _subgraph(registry, names)
    rank = {name: index for index, name in enumerate(registry.names())}

    done: set[str] = set()
    waves: list[list[str]] = []
    pending = set(graph)
    while pending:
        wave = sorted((n for n in pending if graph[n] <= done), key=rank.__getitem__)
        if not wave:
            raise CircularDependency(pending)
        waves.append(wave)
        done.update(wave)
        pending.difference_update(wave)
    return waves


class SeedOrchestrator:
    """Runs entity seeders against one gateway in dependency order.

    A failing entity type never aborts the run: its failure is recorded and
    the remaining entity types still execute.
    """

    def __init__(
        self,
        gateway: DocumentGateway,
        registry: SeederRegistry | None = None,
        templates: TemplateStore | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            gateway: Document store handle.
            registry: Entity seeders (defaults to the built-in set).
            templates: Template store (defaults to the packaged templates).
        """
        self.gateway = gateway
        self.registry = registry or default_registry()
        self.templates = templates or TemplateStore()

    async def _run_seeder(
        self,
        name: str,
        options: SeedOptions,
        values: ValueGenerator,
        completed: list[SeedResult],
    ) -> SeedResult:
        failed_deps = sorted(
            {r.module for r in completed if not r.success}
            & set(self.registry.dependencies_of(name))
        )
        if failed_deps:
            logger.warning(
                "seeder.run.dependency_failed",
                module=name,
                failed_dependencies=failed_deps,
            )

        seeder = self.registry.get(name)
        try:
            return await seeder.run(self.gateway, options, self.templates, values.derive(name))
        except Exception as e:
            logger.error("seeder.run.module_crashed", module=name, error=str(e), exc_info=True)
            return SeedResult.failed(name, str(e) or type(e).__name__)

    async def _run_sequential(
        self, order: list[str], options: SeedOptions, values: ValueGenerator
    ) -> list[SeedResult]:
        results: list[SeedResult] = []
        for name in order:
            results.append(await self._run_seeder(name, options, values, results))
        return results

    async def _run_parallel(
        self, order: list[str], options: SeedOptions, values: ValueGenerator
    ) -> list[SeedResult]:
        results: list[SeedResult] = []
        lock = asyncio.Lock()

        async def run_one(name: str) -> None:
            result = await self._run_seeder(name, options, values, list(results))
            async with lock:
                results.append(result)

        for wave in plan_waves(self.registry, order):
            logger.debug("seeder.run.wave_started", modules=wave)
            await asyncio.gather(*(run_one(name) for name in wave))
        return results

    async def run(
        self,
        requested: str | Iterable[str] = ALL,
        options: SeedOptions | None = None,
    ) -> AggregateSummary:
        """Seed the requested entity types.

        Args:
            requested: ``"all"``, a single entity type, or several entity types.
            options: Invocation options (defaults to ``SeedOptions()``).

        Returns:
            AggregateSummary with one result per executed entity type.

        Raises:
            UnknownModule: If a requested name is not registered.
            CircularDependency: If the requested dependencies form a cycle.
        """
        options = options or SeedOptions()
        run_id = uuid.uuid4().hex[:12]
        token = seed_run_id_ctx.set(run_id)
        started = time.perf_counter()

        try:
            order = plan_order(self.registry, requested)
            summary = AggregateSummary(run_id=run_id, seed=options.seed)

            if options.skip:
                logger.info("seeder.run.skipped", requested=order)
                return summary

            order = [name for name in order if name not in options.skip_modules]
            logger.info(
                "seeder.run.started",
                modules=order,
                skipped=sorted(options.skip_modules),
                clear=options.clear,
                count=options.count,
                seed=options.seed,
                parallel=options.parallel,
            )

            values = ValueGenerator(options.seed)
            if options.parallel:
                summary.results = await self._run_parallel(order, options, values)
            else:
                summary.results = await self._run_sequential(order, options, values)
            summary.total_duration_ms = int((time.perf_counter() - started) * 1000)

            log = logger.info if summary.succeeded else logger.warning
            log(
                "seeder.run.completed",
                created=summary.total_created,
                deleted=summary.total_deleted,
                succeeded=summary.success_count,
                failed=summary.failure_count,
                duration_ms=summary.total_duration_ms,
            )
            return summary
        finally:
            seed_run_id_ctx.reset(token)

    async def run_module(self, name: str, options: SeedOptions | None = None) -> SeedResult:
        """Seed one entity type without pulling in its dependencies.

        Raises:
            UnknownModule: If ``name`` is not registered.
        """
        summary = await self.run(name, options)
        return summary.result_for(name) or SeedResult.succeeded(name, created=0)

    async def reset(self, options: SeedOptions | None = None) -> AggregateSummary:
        """Clear and reseed every registered entity type."""
        options = (options or SeedOptions()).with_overrides(
            clear=True, skip=False, skip_modules=frozenset()
        )
        logger.info("seeder.reset.started", count=options.count, seed=options.seed)
        return await self.run(ALL, options)

    async def collection_counts(self) -> dict[str, int]:
        """Document count of every registered collection.

        Raises:
            GatewayError: If the document store cannot be read.
        """
        counts: dict[str, int] = {}
        for seeder in self.registry.seeders():
            counts[seeder.collection] = await self.gateway.count_documents(seeder.collection)
        return counts
