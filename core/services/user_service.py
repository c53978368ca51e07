# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Registration, login, profile edits, public lookups and QR caching.
# Separates HTTP concerns from database/business logic: routers call these
# methods and only decide how to shape the response.
# =============================================================================

import logging
from typing import Any, BinaryIO

from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.exceptions import (
    DevTreeException,
    EmailTakenError,
    HandleTakenError,
    HandleUnavailableError,
    IncorrectPasswordError,
    InternalError,
    InvalidHandleError,
    QRCodeError,
    UserNotFoundError,
)
from core.models.user import ProfileUpdate, RegisterRequest
from core.services.media_service import MediaService
from core.services.qr_service import QRService
from lib.database import DuplicateKeyViolation, UserStore
from lib.security import check_password, generate_jwt, hash_password, slugify_handle

logger = logging.getLogger(__name__)


def _conflict_for(violation: DuplicateKeyViolation) -> DevTreeException:
    """Map a unique-index violation onto the matching 409."""
    if violation.field == "email":
        return EmailTakenError()
    return HandleTakenError()


# Path segments under /api/v1 that are matched before GET /{handle}
RESERVED_HANDLES = frozenset({"user", "health", "search"})


def _slug_or_raise(handle: str) -> str:
    slug = slugify_handle(handle)
    if not slug:
        raise InvalidHandleError()
    if slug in RESERVED_HANDLES:
        raise HandleTakenError()
    return slug


class UserService:
    """
    Service for user management operations.

    Provides a clean interface between API routes and the user store.
    """

    @staticmethod
    async def register(payload: RegisterRequest) -> dict[str, Any]:
        """
        Create an account.

        The email is checked before the handle so a returning user hears
        about their existing account first.

        Raises:
            EmailTakenError: If the email is already registered
            HandleTakenError: If the slugged handle is in use or reserved
            InvalidHandleError: If the handle has no usable characters
        """
        if await UserStore.find_user({"email": payload.email}):
            raise EmailTakenError()

        handle = _slug_or_raise(payload.handle)
        if await UserStore.find_user({"handle": handle}):
            raise HandleTakenError()

        password_hash = await run_in_threadpool(hash_password, payload.password)

        try:
            user = await UserStore.insert_user({
                "handle": handle,
                "name": payload.name,
                "email": payload.email,
                "password": password_hash,
            })
        except DuplicateKeyViolation as e:
            # Lost a race with a concurrent registration
            raise _conflict_for(e)

        logger.info(f"Created account for handle '{handle}'")
        return user

    @staticmethod
    async def login(email: str, password: str) -> str:
        """
        Exchange credentials for a signed token.

        Raises:
            UserNotFoundError: If no account has this email
            IncorrectPasswordError: If the password doesn't match
        """
        user = await UserStore.find_user({"email": email})
        if not user:
            raise UserNotFoundError()

        if not await run_in_threadpool(check_password, password, user["password"]):
            logger.warning(f"Failed login for user {user['id']}")
            raise IncorrectPasswordError()

        return generate_jwt({"id": user["id"]})

    @staticmethod
    async def update_profile(user: dict[str, Any], payload: ProfileUpdate) -> dict[str, Any]:
        """
        Overwrite description, handle and links on the user's record.

        Raises:
            HandleTakenError: If another account owns the slugged handle
            InternalError: If the write fails for any other reason
        """
        handle = _slug_or_raise(payload.handle)

        try:
            owner = await UserStore.find_user({"handle": handle})
            if owner and owner["email"] != user["email"]:
                raise HandleTakenError()

            updated = await UserStore.update_user(user["id"], {
                "description": payload.description,
                "handle": handle,
                "links": payload.links,
            })
        except DevTreeException:
            raise
        except DuplicateKeyViolation as e:
            raise _conflict_for(e)
        except Exception as e:
            logger.error(f"Failed to update profile for user {user['id']}: {e}")
            raise InternalError()

        if updated is None:
            logger.error(f"User {user['id']} vanished during profile update")
            raise InternalError()

        logger.info(f"Updated profile for user {user['id']}")
        return updated

    @staticmethod
    async def upload_image(user: dict[str, Any], stream: BinaryIO, suffix: str = "") -> str:
        """
        Upload a new profile image and store its URL on the user.

        Raises:
            ImageUploadError: If the media host rejects the file
            InternalError: For any other failure
        """
        try:
            url = await MediaService.upload_stream(stream, suffix=suffix)
            await UserStore.update_user(user["id"], {"image": url})
        except DevTreeException:
            raise
        except Exception as e:
            logger.error(f"Image upload failed for user {user['id']}: {e}")
            raise InternalError()

        return url

    @staticmethod
    async def get_public_profile(handle: str) -> dict[str, Any]:
        """
        Fetch a profile by handle, counting the view.

        The increment is a single atomic update, so concurrent views all land.

        Raises:
            UserNotFoundError: If no account has this handle
        """
        try:
            user = await UserStore.increment_visits(handle)
        except Exception as e:
            logger.error(f"Failed to load profile '{handle}': {e}")
            raise InternalError()

        if not user:
            raise UserNotFoundError()
        return user

    @staticmethod
    async def search_handle(handle: str) -> str:
        """
        Check whether a handle is free, exactly as typed.

        Raises:
            HandleUnavailableError: If a user already has this handle
        """
        try:
            existing = await UserStore.find_user({"handle": handle})
        except Exception as e:
            logger.error(f"Handle search failed: {e}")
            raise InternalError()

        if existing:
            raise HandleUnavailableError(handle)
        return handle

    @staticmethod
    async def generate_qr(user: dict[str, Any]) -> str:
        """
        Render a QR code for the user's public profile and cache it.

        Always regenerates; the stored copy is overwritten on every call.

        Raises:
            QRCodeError: If rendering or saving fails
        """
        profile_url = f"{settings.PROFILE_BASE_URL.rstrip('/')}/{user['handle']}"

        try:
            qr_code = await QRService.generate(profile_url)
            await UserStore.update_user(user["id"], {"qr_code": qr_code})
        except Exception as e:
            logger.error(f"QR generation failed for user {user['id']}: {e}")
            raise QRCodeError()

        return qr_code
