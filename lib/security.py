# =============================================================================
# lib/security.py - Credential Utilities
# =============================================================================
# Password hashing, JWT issuance/decoding and handle slugging.
#
# Usage:
#   from lib.security import hash_password, check_password, generate_jwt
#   digest = hash_password("secret")
#   token = generate_jwt({"id": user_id})
# =============================================================================

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt
from slugify import slugify

from app.config import settings

JWT_ALGORITHM = "HS256"

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


# =============================================================================
# Passwords
# =============================================================================

def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with a fresh salt.

    Passwords longer than 72 bytes are truncated, so long passphrases hash
    instead of being rejected.
    """
    salt = bcrypt.gensalt(rounds=10)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    """Verify a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Stored value isn't a bcrypt hash
        return False


# =============================================================================
# Tokens
# =============================================================================

def generate_jwt(payload: dict[str, Any]) -> str:
    """
    Sign a JWT carrying the given claims.

    Adds `iat` and `exp` (JWT_EXPIRES_DAYS from now).
    """
    now = datetime.now(timezone.utc)
    claims = {
        **payload,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.JWT_EXPIRES_DAYS)).timestamp()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT.

    Raises:
        jose.JWTError: If the signature is invalid or the token expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[JWT_ALGORITHM])


# =============================================================================
# Handles
# =============================================================================

def slugify_handle(handle: str) -> str:
    """
    Normalize a handle into its URL-safe form.

    Lowercases, transliterates and drops every non-alphanumeric character.

    Example:
        slugify_handle("Alice!")    # "alice"
        slugify_handle("John Doe")  # "johndoe"
    """
    return slugify(handle or "", separator="")
