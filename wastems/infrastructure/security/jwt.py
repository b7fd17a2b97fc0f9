"""JWT token creation and verification for authentication.

Access and refresh tokens share the secret and the claim set
({sub, id, email, role, name}); only the expiry differs.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from wastems.core.config import get_settings
from wastems.shared.utils import utc_now


def token_claims(user_id: str, user: dict[str, Any]) -> dict[str, Any]:
    """Claims carried by both token kinds for a stored user record."""
    return {
        "sub": user_id,
        "id": user_id,
        "email": user.get("email", ""),
        "role": user.get("role", ""),
        "name": user.get("name", ""),
    }


def _encode(data: dict[str, Any], expires_delta: timedelta) -> str:
    settings = get_settings()
    to_encode = data.copy()
    to_encode["exp"] = utc_now() + expires_delta
    encoded = jwt.encode(
        to_encode,
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )
    return cast(str, encoded)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (see token_claims).
        expires_delta: Optional TTL; else uses settings.access_token_expire_days.

    Returns:
        Encoded JWT string.
    """
    if expires_delta is None:
        expires_delta = timedelta(days=get_settings().access_token_expire_days)
    return _encode(data, expires_delta)


def create_refresh_token(data: dict[str, Any]) -> str:
    """Create a refresh token (same claims, settings.refresh_token_expire_days)."""
    return _encode(data, timedelta(days=get_settings().refresh_token_expire_days))


def create_token_pair(user_id: str, user: dict[str, Any]) -> tuple[str, str]:
    """Return (access_token, refresh_token) for a stored user record."""
    claims = token_claims(user_id, user)
    return create_access_token(claims), create_refresh_token(claims)


def verify_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry of a JWT and return its payload.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        Decoded payload dict.

    Raises:
        JWTError: Invalid signature, malformed token, expired (ExpiredSignatureError)
            or missing exp/sub.
    """
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.jwt_secret.get_secret_value(),
        algorithms=[settings.jwt_algorithm],
        options={"require_exp": True, "require_sub": True},
    )
    if not payload.get("sub"):
        raise JWTError("Token missing required claim: sub")
    return payload
