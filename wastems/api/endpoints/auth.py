"""Auth API: login, registration, token refresh, current user and logout.

Tokens are stateless JWTs; logout only tells the client to drop them.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from jose import JWTError

from wastems.api.dependencies import CurrentUser, get_user_repo
from wastems.core.constants import ULB_ADMIN_OR_ABOVE, default_permissions
from wastems.domain.exceptions import AuthenticationException, ValidationException
from wastems.infrastructure.firebase.repositories import UserRepository
from wastems.infrastructure.firebase.repositories.user_repo import public_user
from wastems.infrastructure.security.jwt import create_token_pair, verify_token
from wastems.schemas.auth import AuthResponse, LoginRequest, RefreshRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter()

UserRepoDep = Annotated[UserRepository, Depends(get_user_repo)]


def _auth_response(record: dict[str, Any]) -> AuthResponse:
    token, refresh_token = create_token_pair(record["id"], record)
    return AuthResponse(user=public_user(record), token=token, refresh_token=refresh_token)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, users: UserRepoDep) -> AuthResponse:
    """Exchange email and password for an access/refresh token pair."""
    record = await users.get_by_email(body.email)
    if not await users.check_password(record, body.password):
        raise AuthenticationException("Invalid credentials")
    if not record.get("isActive", False):
        raise AuthenticationException("Account is deactivated")
    await users.touch_last_login(record["id"])
    logger.info("User %s logged in", record["id"])
    return _auth_response(record)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, users: UserRepoDep) -> AuthResponse:
    """Create an account with the default permissions of its role."""
    if await users.get_by_email(body.email) is not None:
        raise ValidationException("User already exists with this email", field="email")
    record = await users.create_user(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role.value,
        permissions=default_permissions(body.role.value),
        profile=body.personal_info,
    )
    logger.info("Registered user %s with role %s", record["id"], body.role.value)
    if body.role.value in ULB_ADMIN_OR_ABOVE:
        logger.warning("Public registration created %s account %s", body.role.value, record["id"])
    return _auth_response(record)


@router.post("/refresh", response_model=AuthResponse)
async def refresh(body: RefreshRequest, users: UserRepoDep) -> AuthResponse:
    """Issue a new token pair from a valid refresh token."""
    if not body.refresh_token:
        raise ValidationException("Refresh token required", field="refreshToken")
    try:
        claims = verify_token(body.refresh_token)
    except JWTError:
        raise AuthenticationException("Invalid refresh token") from None
    record = await users.get(claims.get("id") or claims["sub"])
    if record is None or not record.get("isActive", False):
        raise AuthenticationException("Invalid refresh token")
    return _auth_response(record)


@router.get("/me")
async def get_me(current_user: CurrentUser) -> dict:
    """Return the authenticated user."""
    return {"success": True, "user": current_user.to_public_dict()}


@router.post("/logout")
async def logout(current_user: CurrentUser) -> dict:
    return {"success": True, "message": "Logged out successfully"}
