# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Resolves the bearer token on protected routes into the user's record.
#
# Usage:
#   from app.auth import get_current_user
#
#   @router.get("/protected")
#   async def protected(user: dict = Depends(get_current_user)):
#       return {"handle": user["handle"]}
# =============================================================================

import logging
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from app.exceptions import InvalidTokenError, NotAuthorizedError, UserNotFoundError
from lib.database import UserStore
from lib.security import decode_jwt

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our own 401 body
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict[str, Any]:
    """
    Extract and validate the user from a JWT bearer token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the signature and expiry
    3. Loads the user named by the `id` claim, without the password hash

    Raises:
        NotAuthorizedError: 401 if no bearer token was sent
        InvalidTokenError: 401 if the token is invalid or expired
        UserNotFoundError: 404 if the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthorizedError()

    try:
        payload = decode_jwt(credentials.credentials)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise InvalidTokenError()

    user_id = payload.get("id")
    if not user_id:
        logger.warning("JWT token missing 'id' claim")
        raise InvalidTokenError()

    user = await UserStore.get_user(str(user_id), include_password=False)
    if not user:
        raise UserNotFoundError()

    logger.debug(f"Authenticated user: {user_id}")
    return user
