"""Document store wiring: one gateway per process, owned by the caller."""

from fastapi import Request

from app.core.config import Settings, get_settings
from app.shared.gateway import DocumentGateway, FirestoreEmulatorGateway, InMemoryGateway


def build_gateway(settings: Settings | None = None) -> DocumentGateway:
    """Construct the gateway selected by ``gateway_backend``.

    The caller owns the returned handle and must ``aclose()`` it.
    """
    settings = settings or get_settings()
    if settings.gateway_backend == "memory":
        return InMemoryGateway()
    return FirestoreEmulatorGateway(
        settings.firestore_base_url,
        timeout=settings.gateway_timeout_seconds,
    )


def get_gateway(request: Request) -> DocumentGateway:
    """Dependency returning the gateway created in the application lifespan."""
    gateway: DocumentGateway = request.app.state.gateway
    return gateway
