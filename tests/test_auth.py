"""Tests for password hashing and bearer tokens."""

import jwt
import pytest
from datetime import datetime, timedelta

from sarradabet.auth import (
    JWT_ALGORITHM,
    generate_token,
    hash_password,
    verify_password,
    verify_token,
)
from sarradabet.errors import UnauthorizedError


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def test_hash_roundtrip():
    stored = hash_password("correct horse", iterations=1000)
    assert verify_password("correct horse", stored)
    assert not verify_password("wrong horse", stored)


def test_hash_is_salted():
    assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)


@pytest.mark.parametrize("stored", ["", "plain", "md5$1$salt$hash", "pbkdf2_sha256$x$salt$hash"])
def test_malformed_hash_never_verifies(stored):
    assert verify_password("anything", stored) is False


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def test_token_claims():
    token = generate_token(5, "root_admin", "root@example.com")
    assert token["token_type"] == "Bearer"
    assert token["expires_in"] == 24 * 3600

    claims = verify_token(token["access_token"])
    assert claims["adminId"] == 5
    assert claims["username"] == "root_admin"
    assert claims["email"] == "root@example.com"


def test_tampered_token_rejected():
    header, _, signature = generate_token(5, "root_admin", "root@example.com")["access_token"].split(".")
    forged = jwt.encode(
        {"adminId": 999, "exp": datetime.utcnow() + timedelta(hours=1)},
        "whatever",
        algorithm=JWT_ALGORITHM,
    )
    # Original signature over an escalated payload
    tampered = ".".join([header, forged.split(".")[1], signature])
    with pytest.raises(UnauthorizedError):
        verify_token(tampered)


def test_foreign_secret_rejected():
    token = jwt.encode(
        {"adminId": 1, "exp": datetime.utcnow() + timedelta(hours=1)},
        "some-other-secret",
        algorithm=JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        verify_token(token)


def test_expired_token_rejected():
    token = jwt.encode(
        {"adminId": 1, "exp": datetime.utcnow() - timedelta(minutes=1)},
        "test-secret",
        algorithm=JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        verify_token(token)


def test_token_without_admin_id_rejected():
    token = jwt.encode(
        {"sub": "someone", "exp": datetime.utcnow() + timedelta(hours=1)},
        "test-secret",
        algorithm=JWT_ALGORITHM,
    )
    with pytest.raises(UnauthorizedError):
        verify_token(token)
