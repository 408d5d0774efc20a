"""Service layer for seeder operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.seeder import schemas
from app.shared.seeder import (
    AggregateSummary,
    SeedOptions,
    SeedOrchestrator,
    SeedResult,
    TemplateStore,
    default_registry,
)
from app.shared.seeder.core import ALL

if TYPE_CHECKING:
    from app.shared.gateway import DocumentGateway

logger = get_logger(__name__)


def build_orchestrator(gateway: DocumentGateway) -> SeedOrchestrator:
    """Orchestrator wired to the configured templates and default counts."""
    settings = get_settings()
    return SeedOrchestrator(
        gateway,
        registry=default_registry(default_count=settings.seeder_default_count),
        templates=TemplateStore(settings.seeder_templates_dir),
    )


def build_options(params: schemas.SeedOptionsParams) -> SeedOptions:
    """Convert API options into engine options, filling server defaults.

    Args:
        params: Options from the request body.

    Returns:
        SeedOptions with timeout, concurrency and seed defaulted from settings.
    """
    settings = get_settings()
    return SeedOptions(
        clear=params.clear,
        count=params.count,
        skip=params.skip,
        skip_modules=frozenset(params.skip_modules),
        seed=params.seed if params.seed is not None else settings.seeder_random_seed,
        timeout_seconds=(
            params.timeout_seconds
            if params.timeout_seconds is not None
            else settings.seeder_persist_timeout_seconds
        ),
        max_concurrency=(
            params.max_concurrency
            if params.max_concurrency is not None
            else settings.seeder_max_concurrency
        ),
        parallel=params.parallel,
    )


async def run_seed(
    gateway: DocumentGateway,
    request: schemas.SeedRequest,
) -> SeedResult | list[SeedResult]:
    """Seed one entity type or all of them.

    Args:
        gateway: Document store handle.
        request: Module selector and options.

    Returns:
        A single SeedResult for one entity type, a list for ``"all"``.

    Raises:
        UnknownModule: If the module is not registered.
    """
    orchestrator = build_orchestrator(gateway)
    options = build_options(request.options)

    logger.info("seeder.api.run_requested", module=request.module, clear=options.clear)

    if request.module == ALL:
        summary = await orchestrator.run(ALL, options)
        return summary.results
    return await orchestrator.run_module(request.module, options)


async def reset(gateway: DocumentGateway, request: schemas.ResetRequest) -> AggregateSummary:
    """Clear and reseed every entity type."""
    settings = get_settings()
    options = SeedOptions(
        count=request.count,
        seed=request.seed if request.seed is not None else settings.seeder_random_seed,
        timeout_seconds=settings.seeder_persist_timeout_seconds,
        max_concurrency=settings.seeder_max_concurrency,
    )
    return await build_orchestrator(gateway).reset(options)


def list_modules() -> list[schemas.ModuleInfo]:
    """Registered entity types in registration order."""
    registry = default_registry(default_count=get_settings().seeder_default_count)
    return [
        schemas.ModuleInfo(
            name=seeder.name,
            collection=seeder.collection,
            dependencies=registry.dependencies_of(seeder.name),
            default_count=seeder.default_count,
        )
        for seeder in registry.seeders()
    ]


async def get_status(gateway: DocumentGateway) -> schemas.CollectionStatus:
    """Document counts for every seeded collection.

    Raises:
        GatewayError: If the document store cannot be read.
    """
    counts = await build_orchestrator(gateway).collection_counts()
    status = schemas.CollectionStatus(
        backend=get_settings().gateway_backend,
        collections=counts,
        total_documents=sum(counts.values()),
    )
    logger.info("seeder.status.fetched", total_documents=status.total_documents)
    return status


def summary_response(summary: AggregateSummary) -> schemas.SeedSummaryResponse:
    """Render an AggregateSummary as its API schema."""
    return schemas.SeedSummaryResponse(
        run_id=summary.run_id,
        seed=summary.seed,
        results=[schemas.SeedResultResponse.model_validate(r) for r in summary.results],
        total_created=summary.total_created,
        total_deleted=summary.total_deleted,
        success_count=summary.success_count,
        failure_count=summary.failure_count,
        total_duration_ms=summary.total_duration_ms,
        success=summary.succeeded,
    )
