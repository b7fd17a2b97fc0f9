"""Unit tests for JWT tokens and password hashing."""

from datetime import timedelta

import pytest
from jose import JWTError
from jose.exceptions import ExpiredSignatureError

from wastems.infrastructure.security.jwt import (
    create_access_token,
    create_token_pair,
    token_claims,
    verify_token,
)
from wastems.infrastructure.security.password import get_password_hash, verify_password

USER = {"email": "asha@example.com", "role": "supervisor", "name": "Asha"}


def test_token_pair_carries_user_claims() -> None:
    access, refresh = create_token_pair("u1", USER)
    for token in (access, refresh):
        claims = verify_token(token)
        assert claims["sub"] == "u1"
        assert claims["id"] == "u1"
        assert claims["role"] == "supervisor"
        assert claims["email"] == "asha@example.com"


def test_refresh_outlives_access() -> None:
    access, refresh = create_token_pair("u1", USER)
    assert verify_token(refresh)["exp"] > verify_token(access)["exp"]


def test_expired_token_is_rejected() -> None:
    token = create_access_token(token_claims("u1", USER), expires_delta=timedelta(seconds=-5))
    with pytest.raises(ExpiredSignatureError):
        verify_token(token)


def test_tampered_token_is_rejected() -> None:
    token = create_access_token(token_claims("u1", USER))
    with pytest.raises(JWTError):
        verify_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB"))


def test_token_without_sub_is_rejected() -> None:
    token = create_access_token({"id": "u1"})
    with pytest.raises(JWTError):
        verify_token(token)


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("admin123")
    assert hashed != "admin123"
    assert verify_password("admin123", hashed)
    assert not verify_password("admin124", hashed)


def test_verify_password_without_hash_is_false() -> None:
    assert verify_password("admin123", None) is False
    assert verify_password("admin123", "") is False
