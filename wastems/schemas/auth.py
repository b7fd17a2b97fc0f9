"""Auth API schemas."""

from typing import Any

from pydantic import BaseModel, EmailStr, Field

from wastems.domain.enums import UserRole
from wastems.schemas.common import CamelModel


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")


class RegisterRequest(CamelModel):
    """Request body for account registration."""

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    role: UserRole
    personal_info: dict[str, Any] | None = None


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    role: str
    permissions: list[str]


class AuthResponse(BaseModel):
    """Login/register/refresh response: the user plus a token pair."""

    success: bool = True
    user: UserPublic
    token: str
    refresh_token: str = Field(..., serialization_alias="refreshToken")
