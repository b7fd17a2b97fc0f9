"""Generic repository over one collection.

Records are returned as plain dicts with the document ID under "id".
Creates are checked against the collection's required-field table and
stamped with createdAt/updatedAt; updates are stamped with updatedAt.
"""

from __future__ import annotations

from typing import Any

from wastems.domain.exceptions import ResourceNotFoundException
from wastems.infrastructure.firebase._rest_client import DocumentNotFoundError
from wastems.infrastructure.firebase.client import DocumentStore
from wastems.infrastructure.services.schema_bootstrap import (
    COLLECTION_SCHEMAS,
    validate_document,
)
from wastems.shared.utils import generate_id, utc_now

Filter = tuple[str, str, Any]


def _with_id(doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"id": doc_id, **data}


class DocumentRepository:
    """CRUD and simple queries for one collection."""

    def __init__(self, store: DocumentStore, collection: str, label: str | None = None) -> None:
        self._store = store
        self.collection = collection
        self.label = label or collection
        self._coll = store.collection(collection)

    async def get(self, document_id: str) -> dict[str, Any] | None:
        """Return the record or None."""
        snapshot = await self._coll.document(document_id).get()
        if snapshot is None:
            return None
        return _with_id(snapshot.id, snapshot.to_dict())

    async def get_or_404(self, document_id: str) -> dict[str, Any]:
        """Return the record or raise ResourceNotFoundException."""
        record = await self.get(document_id)
        if record is None:
            raise ResourceNotFoundException(self.label, document_id)
        return record

    async def exists(self, document_id: str) -> bool:
        return await self._coll.document(document_id).get() is not None

    async def query(
        self,
        filters: list[Filter] | None = None,
        *,
        order_by: str | None = None,
        direction: str = "asc",
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return records matching every filter (field, op, value).

        Without filters or ordering the whole collection is listed.
        """
        q: Any = self._coll
        for field, op, value in filters or []:
            q = q.where(field, op, value)
        if order_by is not None:
            q = q.order_by(order_by, direction)
        if limit:
            q = q.limit(limit)
        return [_with_id(s.id, s.to_dict()) async for s in q.stream()]

    async def find_one(self, field: str, value: Any) -> dict[str, Any] | None:
        """First record whose field equals value."""
        records = await self.query([(field, "==", value)], limit=1)
        return records[0] if records else None

    async def list_recent(self, limit: int) -> list[dict[str, Any]]:
        """Up to limit records, newest first (records without createdAt are skipped)."""
        return await self.query(order_by="createdAt", direction="desc", limit=limit)

    async def count(self) -> int:
        return sum([1 async for _ in self._coll.stream()])

    async def create(
        self,
        data: dict[str, Any],
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """Validate required fields, stamp timestamps and write a new document.

        Raises:
            ValidationException: A required field is missing.
        """
        if self.collection in COLLECTION_SCHEMAS:
            validate_document(self.collection, data)
        now = utc_now()
        payload = {**data, "createdAt": now, "updatedAt": now}
        document_id = document_id or generate_id()
        await self._coll.create(document_id, payload)
        return _with_id(document_id, payload)

    async def update(self, document_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Merge top-level fields into the document and return the updated record.

        Raises:
            ResourceNotFoundException: The document does not exist.
        """
        payload = {**data, "updatedAt": utc_now()}
        try:
            await self._coll.document(document_id).update(payload)
        except DocumentNotFoundError:
            raise ResourceNotFoundException(self.label, document_id) from None
        return await self.get_or_404(document_id)

    async def delete(self, document_id: str) -> None:
        """Delete the document.

        Raises:
            ResourceNotFoundException: The document does not exist.
        """
        ref = self._coll.document(document_id)
        if await ref.get() is None:
            raise ResourceNotFoundException(self.label, document_id)
        await ref.delete()
