"""Firestore (REST) and in-memory document stores."""

from wastems.infrastructure.firebase.client import (
    close_document_store,
    get_document_store,
    init_document_store,
)

__all__ = [
    "close_document_store",
    "get_document_store",
    "init_document_store",
]
