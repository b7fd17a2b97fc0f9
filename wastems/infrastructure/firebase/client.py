"""Document store client (Firestore REST or in-memory).

Initialized at app startup. With DATABASE_BACKEND=firestore the service
account comes from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string, e.g. on
Vercel) or FIREBASE_SERVICE_ACCOUNT_PATH (file path) and the store talks to
the Firestore REST API with google-auth. With DATABASE_BACKEND=memory an
in-process store with the same API is used.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from wastems.core.config import get_settings
from wastems.domain.exceptions import DocumentStoreException
from wastems.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    get_credentials,
)
from wastems.infrastructure.firebase.memory import InMemoryDocumentStore

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """What repositories rely on; both backends implement it."""

    def collection(self, collection_id: str) -> Any: ...

    async def aclose(self) -> None: ...


_store: DocumentStore | None = None


def _load_key_dict() -> dict | None:
    """Return service account dict from env key or file path."""
    settings = get_settings()
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def init_document_store() -> bool:
    """Initialize the configured document store.

    Idempotent if already initialized. On missing or malformed Firestore
    credentials, logs the problem and returns False so the app can still
    start (requests touching the store then fail with INTERNAL_ERROR).

    Returns:
        True if a store is ready, False otherwise.
    """
    global _store
    if _store is not None:
        return True
    settings = get_settings()
    if settings.database_backend == "memory":
        _store = InMemoryDocumentStore()
        logger.info("Using in-memory document store")
        return True
    try:
        key_dict = _load_key_dict()
        if not key_dict:
            return False

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return False

        _store = FirestoreRESTClient(project_id, get_credentials(key_dict))
        logger.info("Firestore initialized for project %s", project_id)
        return True
    except Exception:
        logger.exception("Firebase initialization failed")
        return False


def get_document_store() -> DocumentStore:
    """Return the initialized store.

    Usage (all async):
    - await db.collection(name).document(id).set(data) / update(data) / delete()
    - await db.collection(name).document(id).get() -> DocumentSnapshot | None
    - await db.collection(name).add(data) -> id
    - async for doc in db.collection(name).where(f, op, v).order_by(f, "desc").stream()

    Raises:
        DocumentStoreException: init_document_store() has not succeeded.
    """
    if _store is None:
        raise DocumentStoreException()
    return _store


async def close_document_store() -> None:
    """Close the store's HTTP connection pool and forget it. Call from app shutdown."""
    global _store
    if _store is not None:
        await _store.aclose()
        _store = None
        logger.info("Document store closed")
