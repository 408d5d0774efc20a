"""Firestore emulator gateway over the REST API.

Talks to ``/v1/projects/{project}/databases/{db}/documents`` with the
emulator's owner token, which bypasses security rules.
"""

from __future__ import annotations

from typing import Any

import httpx

from app.core.logging import get_logger
from app.shared.gateway.base import Document, GatewayRequestError, GatewayUnavailable
from app.shared.gateway.codec import decode_fields, encode_fields

logger = get_logger(__name__)

# Emulator maximum page size for list requests
MAX_PAGE_SIZE = 300


class FirestoreEmulatorGateway:
    """Document gateway backed by a running Firestore emulator."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Documents resource URL
                (``http://host:port/v1/projects/p/databases/(default)/documents``).
            timeout: Per-request timeout in seconds.
            client: Pre-built HTTP client (tests inject a MockTransport client).
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": "Bearer owner"},
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, json=json, params=params)
        except httpx.TimeoutException as e:
            raise GatewayUnavailable(
                f"Firestore emulator timed out on {method} {url}", details={"url": url}
            ) from e
        except httpx.TransportError as e:
            raise GatewayUnavailable(
                f"Firestore emulator unreachable: {e}", details={"url": url}
            ) from e

        if allow_not_found and response.status_code == 404:
            return {}
        if response.is_error:
            raise GatewayRequestError(
                f"Firestore emulator returned {response.status_code} for {method} {url}: "
                f"{response.text[:200]}",
                status=response.status_code,
            )
        if not response.content:
            return {}
        payload: dict[str, Any] = response.json()
        return payload

    @staticmethod
    def _document_id(name: str) -> str:
        return name.rsplit("/", 1)[-1]

    async def create_document(self, collection: str, fields: dict[str, Any]) -> str:
        payload = await self._request(
            "POST",
            f"{self.base_url}/{collection}",
            json={"fields": encode_fields(fields)},
        )
        return self._document_id(payload["name"])

    async def list_documents(self, collection: str, limit: int | None = None) -> list[Document]:
        documents: list[Document] = []
        page_token: str | None = None

        while limit is None or len(documents) < limit:
            page_size = MAX_PAGE_SIZE if limit is None else min(MAX_PAGE_SIZE, limit - len(documents))
            params: dict[str, Any] = {"pageSize": page_size}
            if page_token:
                params["pageToken"] = page_token

            payload = await self._request(
                "GET", f"{self.base_url}/{collection}", params=params, allow_not_found=True
            )
            for raw in payload.get("documents", []):
                documents.append(
                    Document(
                        id=self._document_id(raw["name"]),
                        fields=decode_fields(raw.get("fields", {})),
                    )
                )

            page_token = payload.get("nextPageToken")
            if not page_token:
                break

        return documents if limit is None else documents[:limit]

    async def delete_document(self, collection: str, document_id: str) -> None:
        # Deleting an already-missing document is not an error for the emulator
        await self._request(
            "DELETE", f"{self.base_url}/{collection}/{document_id}", allow_not_found=True
        )

    async def count_documents(self, collection: str) -> int:
        return len(await self.list_documents(collection))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
            logger.debug("gateway.firestore.closed", base_url=self.base_url)
