"""
Admin authentication: password hashing and bearer tokens.

Passwords are stored as salted PBKDF2-SHA256 hashes
(``pbkdf2_sha256$<iterations>$<salt>$<hash>``).  Tokens are HS256 JWTs
signed with ``JWT_SECRET``.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import jwt
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sarradabet.config import settings
from sarradabet.errors import UnauthorizedError

# Bearer header; errors are raised by us so they use the API envelope
BEARER = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS256"
PBKDF2_ITERATIONS = 260_000
_HASH_SCHEME = "pbkdf2_sha256"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"{_HASH_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iterations, salt, expected = password_hash.split("$")
        rounds = int(iterations)
    except (AttributeError, ValueError):
        return False
    if scheme != _HASH_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), rounds)
    return hmac.compare_digest(digest.hex(), expected)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def get_jwt_secret() -> str:
    """Signing secret from the environment."""
    if settings.JWT_SECRET:
        return settings.JWT_SECRET
    # Development fallback (never use in production)
    if settings.is_development:
        return "dev-secret-insecure"
    raise ValueError("No JWT secret configured! Set JWT_SECRET in environment")


def generate_token(admin_id: int, username: str, email: str) -> Dict[str, Any]:
    """Sign a token for an admin.  Returns the ``AuthToken`` fields."""
    expires_in = settings.JWT_EXPIRES_HOURS * 3600
    claims = {
        "adminId": admin_id,
        "username": username,
        "email": email,
        "exp": datetime.utcnow() + timedelta(seconds=expires_in),
    }
    token = jwt.encode(claims, get_jwt_secret(), algorithm=JWT_ALGORITHM)
    return {"access_token": token, "token_type": "Bearer", "expires_in": expires_in}


def verify_token(token: str) -> Dict[str, Any]:
    """Decode a token; any problem (bad signature, expiry, shape) → 401."""
    try:
        claims = jwt.decode(token, get_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise UnauthorizedError("Authentication required")
    if not isinstance(claims.get("adminId"), int):
        raise UnauthorizedError("Authentication required")
    return claims


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

async def get_current_admin(
    creds: Optional[HTTPAuthorizationCredentials] = Security(BEARER),
) -> Dict[str, Any]:
    """
    Verify the bearer token and return its claims.

    Usage in FastAPI routes:
        @router.get("/profile")
        async def profile(admin: dict = Depends(get_current_admin)):
            return admin["adminId"]
    """
    if not creds or creds.scheme.lower() != "bearer" or not creds.credentials:
        raise UnauthorizedError("Authentication required")
    return verify_token(creds.credentials)
