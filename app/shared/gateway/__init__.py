"""Persistence gateway adapters for the emulated document store."""

from app.shared.gateway.base import (
    Document,
    DocumentGateway,
    GatewayError,
    GatewayRequestError,
    GatewayUnavailable,
)
from app.shared.gateway.firestore import FirestoreEmulatorGateway
from app.shared.gateway.memory import InMemoryGateway

__all__ = [
    "Document",
    "DocumentGateway",
    "FirestoreEmulatorGateway",
    "GatewayError",
    "GatewayRequestError",
    "GatewayUnavailable",
    "InMemoryGateway",
]
