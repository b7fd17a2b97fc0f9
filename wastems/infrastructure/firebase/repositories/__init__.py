"""Document-store repositories (work with either store backend)."""

from wastems.infrastructure.firebase.repositories.document_repo import DocumentRepository
from wastems.infrastructure.firebase.repositories.user_repo import UserRepository

__all__ = [
    "DocumentRepository",
    "UserRepository",
]
