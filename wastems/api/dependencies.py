"""Request dependencies: document store, repositories, auth and list parameters."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from wastems.core.config import get_settings
from wastems.core.constants import ADMIN_ONLY, SUPERVISOR_OR_ABOVE, ULB_ADMIN_OR_ABOVE
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import AuthenticationException, AuthorizationException
from wastems.infrastructure.firebase import get_document_store
from wastems.infrastructure.firebase.client import DocumentStore
from wastems.infrastructure.firebase.repositories import DocumentRepository, UserRepository
from wastems.infrastructure.security.jwt import verify_token
from wastems.shared.listing import ALL, ListQuery

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "Not authorized, no token"
TOKEN_FAILED_MESSAGE = "Not authorized, token failed"

_http_bearer = HTTPBearer(auto_error=False)


def get_store() -> DocumentStore:
    """The initialized document store (INTERNAL_ERROR when it is not configured)."""
    return get_document_store()


StoreDep = Annotated[DocumentStore, Depends(get_store)]


def get_user_repo(store: StoreDep) -> UserRepository:
    return UserRepository(store)


def repository(collection: str, label: str) -> Callable[[DocumentStore], DocumentRepository]:
    """Dependency factory: DocumentRepository for one collection."""

    def _get_repo(store: StoreDep) -> DocumentRepository:
        return DocumentRepository(store, collection, label)

    return _get_repo


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    users: Annotated[UserRepository, Depends(get_user_repo)],
) -> AuthenticatedUser:
    """Resolve the bearer token to an active stored user.

    A missing header is reported as "no token"; a bad signature, expiry,
    unknown user or deactivated account all fail the same way so callers
    cannot tell them apart.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException(NO_TOKEN_MESSAGE)
    try:
        claims = verify_token(credentials.credentials)
    except JWTError as e:
        logger.debug("Token verification failed: %s", e)
        raise AuthenticationException(TOKEN_FAILED_MESSAGE) from None
    user_id = claims.get("id") or claims["sub"]
    record = await users.get(user_id)
    if record is None or not record.get("isActive", False):
        raise AuthenticationException(TOKEN_FAILED_MESSAGE)
    record.pop("password", None)
    record.pop("id", None)
    return AuthenticatedUser.from_claims_and_record(claims, user_id, record)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


def require_roles(
    *roles: str,
) -> Callable[[AuthenticatedUser], Coroutine[Any, Any, AuthenticatedUser]]:
    """Dependency factory: authenticated user whose role is in roles."""

    async def _require(current_user: CurrentUser) -> AuthenticatedUser:
        if not current_user.has_role(*roles):
            raise AuthorizationException(roles)
        return current_user

    return _require


admin_only = require_roles(*ADMIN_ONLY)
ulb_admin_or_above = require_roles(*ULB_ADMIN_OR_ABOVE)
supervisor_or_above = require_roles(*SUPERVISOR_OR_ABOVE)


def ensure_self_or_roles(user: AuthenticatedUser, target_id: str, roles: tuple[str, ...]) -> None:
    """Allow a user to act on their own record; anyone else needs one of roles."""
    if user.id != target_id and not user.has_role(*roles):
        raise AuthorizationException(message="Access denied")


def get_list_query(
    search: Annotated[str | None, Query(max_length=100)] = None,
    filter: Annotated[str, Query(max_length=50)] = ALL,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> ListQuery:
    """Parse list parameters; limit defaults to and is capped by the page-size settings."""
    settings = get_settings()
    size = min(limit or settings.default_page_size, settings.max_page_size)
    return ListQuery(search=search.strip() if search else None, filter=filter or ALL, page=page, limit=size)


ListQueryDep = Annotated[ListQuery, Depends(get_list_query)]
