"""FastAPI routes for seeder operations.

Provides REST endpoints to seed, reset and inspect the emulated document
store used for local development.
"""

from fastapi import APIRouter, Depends, Response, status

from app.core.config import get_settings
from app.core.exceptions import ForbiddenError
from app.core.gateway import get_gateway
from app.core.logging import get_logger
from app.features.seeder import schemas, service
from app.shared.gateway import DocumentGateway

router = APIRouter(prefix="/seeder", tags=["seeder"])
logger = get_logger(__name__)


def _check_seeder_enabled() -> None:
    """Check if seeder operations are allowed in current environment.

    Raises:
        ForbiddenError: If seeder is disabled in production.
    """
    settings = get_settings()
    if not settings.seeder_allow_production and settings.app_env == "production":
        raise ForbiddenError(
            "Seeder operations are not allowed in production environment. "
            "Set SEEDER_ALLOW_PRODUCTION=true to enable (not recommended).",
            details={"app_env": settings.app_env},
        )


@router.post(
    "/run",
    response_model=schemas.SeedResultResponse | list[schemas.SeedResultResponse],
    summary="Seed entity types",
    description="Seed one entity type or 'all'. Responds 500 if any entity type failed; "
    "the body still carries every result.",
)
async def run_seed(
    request: schemas.SeedRequest,
    response: Response,
    gateway: DocumentGateway = Depends(get_gateway),
) -> schemas.SeedResultResponse | list[schemas.SeedResultResponse]:
    """Seed the requested entity type(s).

    Args:
        request: Module selector and options.

    Returns:
        One result for a single entity type, a list for ``"all"``.

    Raises:
        ForbiddenError: If blocked by the production guard.
        UnknownModule: If the module is not registered.
    """
    _check_seeder_enabled()

    outcome = await service.run_seed(gateway, request)
    results = outcome if isinstance(outcome, list) else [outcome]
    rendered = [schemas.SeedResultResponse.model_validate(r) for r in results]

    if not all(r.success for r in results):
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.warning(
            "seeder.api.run_failed",
            module=request.module,
            failed=[r.module for r in results if not r.success],
        )

    return rendered if isinstance(outcome, list) else rendered[0]


@router.post(
    "/reset",
    response_model=schemas.SeedSummaryResponse,
    summary="Reset sandbox data",
    description="Clear and reseed every entity type.",
)
async def reset_data(
    response: Response,
    request: schemas.ResetRequest | None = None,
    gateway: DocumentGateway = Depends(get_gateway),
) -> schemas.SeedSummaryResponse:
    """Clear every collection and reseed it.

    Raises:
        ForbiddenError: If blocked by the production guard.
    """
    _check_seeder_enabled()

    summary = await service.reset(gateway, request or schemas.ResetRequest())
    if not summary.succeeded:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return service.summary_response(summary)


@router.get(
    "/modules",
    response_model=list[schemas.ModuleInfo],
    summary="List seed modules",
    description="Returns registered entity types with their dependencies and default counts.",
)
async def list_modules() -> list[schemas.ModuleInfo]:
    """List registered entity types in registration order."""
    return service.list_modules()


@router.get(
    "/status",
    response_model=schemas.CollectionStatus,
    summary="Get collection status",
    description="Returns the current document count of each seeded collection.",
)
async def get_status(
    gateway: DocumentGateway = Depends(get_gateway),
) -> schemas.CollectionStatus:
    """Get current document counts per collection."""
    return await service.get_status(gateway)
