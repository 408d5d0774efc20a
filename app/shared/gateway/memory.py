"""In-process document store used for tests and offline runs."""

from __future__ import annotations

import asyncio
import copy
import uuid
from typing import Any

from app.shared.gateway.base import Document


class InMemoryGateway:
    """Dictionary-backed gateway with insertion-ordered collections.

    Field mappings are deep-copied on the way in and out so callers can never
    mutate stored state through a returned document.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def create_document(self, collection: str, fields: dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex[:20]
        async with self._lock:
            self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(fields)
        return document_id

    async def list_documents(self, collection: str, limit: int | None = None) -> list[Document]:
        async with self._lock:
            items = list(self._collections.get(collection, {}).items())
        if limit is not None:
            items = items[:limit]
        return [Document(id=doc_id, fields=copy.deepcopy(data)) for doc_id, data in items]

    async def delete_document(self, collection: str, document_id: str) -> None:
        async with self._lock:
            self._collections.get(collection, {}).pop(document_id, None)

    async def count_documents(self, collection: str) -> int:
        async with self._lock:
            return len(self._collections.get(collection, {}))

    async def aclose(self) -> None:
        return None
