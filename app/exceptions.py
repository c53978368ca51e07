# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every domain error carries its HTTP status and is rendered as
# {"error": "<message>"}. Internal detail never reaches the client.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class DevTreeException(Exception):
    """
    Base exception for the DevTree API.

    All custom exceptions inherit from this class.
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {"error": self.message}


# =============================================================================
# Conflict Exceptions (409)
# =============================================================================

class EmailTakenError(DevTreeException):
    """Raised when registering with an email that already has an account."""

    def __init__(self):
        super().__init__("a user with that email is already registered", status_code=409)


class HandleTakenError(DevTreeException):
    """Raised when a slugged handle already belongs to someone else."""

    def __init__(self):
        super().__init__("handle not available", status_code=409)


class HandleUnavailableError(DevTreeException):
    """Raised by the availability search when the handle exists."""

    def __init__(self, handle: str):
        super().__init__(f"{handle} is already registered", status_code=409)


# =============================================================================
# Lookup / Auth Exceptions
# =============================================================================

class UserNotFoundError(DevTreeException):
    """Raised when no user matches an email, handle or token id."""

    def __init__(self):
        super().__init__("user does not exist", status_code=404)


class IncorrectPasswordError(DevTreeException):
    """Raised when the password doesn't match the stored hash."""

    def __init__(self):
        super().__init__("incorrect password", status_code=401)


class NotAuthorizedError(DevTreeException):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self):
        super().__init__("not authorized", status_code=401)


class InvalidTokenError(DevTreeException):
    """Raised when a bearer token can't be verified."""

    def __init__(self):
        super().__init__("invalid token", status_code=401)


class InvalidHandleError(DevTreeException):
    """Raised when a handle slugs down to nothing."""

    def __init__(self):
        super().__init__("handle must contain letters or numbers", status_code=400)


# =============================================================================
# Upstream / Internal Exceptions (500)
# =============================================================================

class FileTooLargeError(DevTreeException):
    """Raised when an uploaded image exceeds the size limit."""

    def __init__(self, max_mb: int):
        super().__init__(f"image too large (max: {max_mb}MB)", status_code=413)


class ImageUploadError(DevTreeException):
    """Raised when the media host rejects an upload."""

    def __init__(self):
        super().__init__("there was an error uploading the image", status_code=500)


class QRCodeError(DevTreeException):
    """Raised when the QR code can't be rendered or stored."""

    def __init__(self):
        super().__init__("error generating QR code", status_code=500)


class InternalError(DevTreeException):
    """Generic failure with no detail exposed."""

    def __init__(self):
        super().__init__("there was an error", status_code=500)


# =============================================================================
# Exception Handlers
# =============================================================================

async def devtree_exception_handler(
    request: Request,
    exc: DevTreeException
) -> JSONResponse:
    """Convert DevTreeException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body validation errors.

    Returns 400 with one entry per offending field.
    """
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({
            "field": ".".join(location),
            "message": error.get("msg", "invalid value"),
        })

    return JSONResponse(
        status_code=400,
        content={"errors": errors}
    )
