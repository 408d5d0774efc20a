"""Persistence gateway contract shared by every document store adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from app.core.exceptions import SandboxError


class GatewayError(SandboxError):
    """Base class for document store failures."""

    def __init__(
        self,
        message: str,
        code: str = "GATEWAY_ERROR",
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, status_code=status_code, details=details)


class GatewayUnavailable(GatewayError):
    """The document store could not be reached (connection refused, DNS, timeout)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message, code="SERVICE_UNAVAILABLE", status_code=503, details=details
        )


class GatewayRequestError(GatewayError):
    """The document store answered with an error status."""

    def __init__(
        self,
        message: str,
        status: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details={"upstream_status": status, **(details or {})})
        self.status = status


@dataclass(frozen=True)
class Document:
    """A persisted document: opaque identifier plus its field mapping."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class DocumentGateway(Protocol):
    """Create / bounded-list / delete operations scoped to a named collection."""

    async def create_document(self, collection: str, fields: dict[str, Any]) -> str:
        """Persist ``fields`` as a new document and return its identifier."""
        ...

    async def list_documents(self, collection: str, limit: int | None = None) -> list[Document]:
        """Return up to ``limit`` documents (all when None) in store-defined order."""
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete one document by identifier."""
        ...

    async def count_documents(self, collection: str) -> int:
        """Return the number of documents in ``collection``."""
        ...

    async def aclose(self) -> None:
        """Release any underlying connections."""
        ...
