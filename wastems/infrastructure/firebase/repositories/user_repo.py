"""User repository: lookup by email, registration and credential checks."""

from __future__ import annotations

import asyncio
from typing import Any

from wastems.infrastructure.firebase.client import DocumentStore
from wastems.infrastructure.firebase.collections import COLLECTION_USERS
from wastems.infrastructure.firebase.repositories.document_repo import DocumentRepository
from wastems.infrastructure.security.password import get_password_hash, verify_password
from wastems.shared.utils import utc_now

_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison (timing-attack mitigation)."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(get_password_hash, "not-a-real-password")
    return _dummy_hash_cache


def public_user(record: dict[str, Any]) -> dict[str, Any]:
    """The user fields returned to clients."""
    return {
        "id": record["id"],
        "name": record.get("name", ""),
        "email": record.get("email", ""),
        "role": record.get("role", ""),
        "permissions": list(record.get("permissions") or []),
    }


class UserRepository(DocumentRepository):
    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, COLLECTION_USERS, "User")

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        return await self.find_one("email", email.strip().lower())

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: str,
        permissions: list[str],
        profile: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Hash the password and store a new active user; returns the record."""
        hashed = await asyncio.to_thread(get_password_hash, password)
        data: dict[str, Any] = {
            "name": name,
            "email": email.strip().lower(),
            "password": hashed,
            "role": role,
            "permissions": permissions,
            "isActive": True,
        }
        if profile:
            data["profile"] = profile
        return await self.create(data)

    async def check_password(self, record: dict[str, Any] | None, password: str) -> bool:
        """Verify password against record's hash; runs a dummy hash when record is None."""
        if record is None:
            await asyncio.to_thread(verify_password, password, await _get_dummy_hash())
            return False
        return await asyncio.to_thread(verify_password, password, record.get("password"))

    async def touch_last_login(self, user_id: str) -> None:
        await self._coll.document(user_id).update({"lastLogin": utc_now()})
