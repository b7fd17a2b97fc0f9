"""In-process document store with the same async API as FirestoreRESTClient.

Selected with DATABASE_BACKEND=memory. Used for local development without
credentials and by the test suite. Data lives for the lifetime of the
process only.
"""

from __future__ import annotations

import asyncio
import copy
import operator
from collections.abc import AsyncIterator, Callable
from typing import Any

from wastems.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentNotFoundError,
    DocumentSnapshot,
)
from wastems.shared.listing import get_path
from wastems.shared.utils import generate_id

_MISSING = object()


def _array_contains(left: Any, right: Any) -> bool:
    return isinstance(left, list) and right in left


def _array_contains_any(left: Any, right: Any) -> bool:
    return isinstance(left, list) and any(v in left for v in right)


_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda left, right: left in right,
    "not-in": lambda left, right: left not in right,
    "array-contains": _array_contains,
    "array-contains-any": _array_contains_any,
}


def _matches(data: dict, field: str, op: str, value: Any) -> bool:
    current = get_path(data, field, _MISSING)
    if current is _MISSING:
        # Firestore never matches documents that lack the filtered field.
        return False
    try:
        return _OPS[op](current, value)
    except TypeError:
        return False


class MemoryDocumentReference:
    def __init__(self, collection: MemoryCollectionReference, document_id: str):
        self._collection = collection
        self.id = document_id

    @property
    def _docs(self) -> dict[str, dict]:
        return self._collection._docs

    async def set(self, data: dict[str, Any]) -> None:
        async with self._collection._lock:
            self._docs[self.id] = copy.deepcopy(data)

    async def update(self, data: dict[str, Any]) -> None:
        async with self._collection._lock:
            if self.id not in self._docs:
                raise DocumentNotFoundError(f"{self._collection.id}/{self.id}")
            self._docs[self.id].update(copy.deepcopy(data))

    async def get(self) -> DocumentSnapshot | None:
        data = self._docs.get(self.id)
        if data is None:
            return None
        return DocumentSnapshot(self.id, copy.deepcopy(data))

    async def delete(self) -> None:
        async with self._collection._lock:
            self._docs.pop(self.id, None)


class MemoryQuery:
    def __init__(self, collection: MemoryCollectionReference):
        self._collection = collection
        self._filters: list[tuple[str, str, Any]] = []
        self._order_by_field: str | None = None
        self._descending = False
        self._offset = 0
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> MemoryQuery:
        if op not in _OPS:
            raise ValueError(f"Unsupported query operator: {op!r}")
        self._filters.append((field, op, value))
        return self

    def order_by(self, field: str, direction: str = "asc") -> MemoryQuery:
        self._order_by_field = field
        self._descending = direction.lower() in ("desc", "descending")
        return self

    def offset(self, n: int) -> MemoryQuery:
        self._offset = n
        return self

    def limit(self, n: int) -> MemoryQuery:
        self._limit = n
        return self

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        rows = [
            (doc_id, data)
            for doc_id, data in list(self._collection._docs.items())
            if all(_matches(data, f, op, v) for f, op, v in self._filters)
        ]
        if self._order_by_field is not None:
            field = self._order_by_field
            # Firestore drops documents missing the order-by field.
            rows = [r for r in rows if get_path(r[1], field, _MISSING) is not _MISSING]
            rows.sort(key=lambda r: _sort_key(get_path(r[1], field)), reverse=self._descending)
        rows = rows[self._offset:]
        if self._limit:
            rows = rows[: self._limit]
        for doc_id, data in rows:
            yield DocumentSnapshot(doc_id, copy.deepcopy(data))


def _sort_key(value: Any) -> tuple:
    # Firestore type order: null < bool < number < timestamp/string < others.
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    return (3, str(value))


class MemoryCollectionReference:
    def __init__(self, store: InMemoryDocumentStore, collection_id: str):
        self._store = store
        self.id = collection_id

    @property
    def _docs(self) -> dict[str, dict]:
        return self._store._data.setdefault(self.id, {})

    @property
    def _lock(self) -> asyncio.Lock:
        return self._store._lock

    def document(self, document_id: str) -> MemoryDocumentReference:
        return MemoryDocumentReference(self, document_id)

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        async with self._lock:
            if document_id in self._docs:
                raise DocumentExistsError("Document already exists")
            self._docs[document_id] = copy.deepcopy(data)

    async def add(self, data: dict[str, Any]) -> str:
        document_id = generate_id()
        await self.create(document_id, data)
        return document_id

    def where(self, field: str, op: str, value: Any) -> MemoryQuery:
        return MemoryQuery(self).where(field, op, value)

    def order_by(self, field: str, direction: str = "asc") -> MemoryQuery:
        return MemoryQuery(self).order_by(field, direction)

    def limit(self, n: int) -> MemoryQuery:
        return MemoryQuery(self).limit(n)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        async for snap in MemoryQuery(self).stream():
            yield snap


class InMemoryDocumentStore:
    """Dict-backed document store: {collection: {document_id: data}}."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict]] = {}
        self._lock = asyncio.Lock()

    def collection(self, collection_id: str) -> MemoryCollectionReference:
        return MemoryCollectionReference(self, collection_id)

    def clear(self) -> None:
        self._data.clear()

    async def aclose(self) -> None:
        return None
