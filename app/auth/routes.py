# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Account creation and login. Both answer in plain text: a confirmation
# message for registration, the bare JWT for login.
# =============================================================================

import logging

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from core.models.user import LoginRequest, RegisterRequest
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
)
async def register(payload: RegisterRequest) -> PlainTextResponse:
    """
    Create a new account.

    The handle is slugged before saving ("Alice!" becomes "alice").

    Raises:
        409: If the email or handle is already taken
    """
    await UserService.register(payload)
    return PlainTextResponse("account created", status_code=status.HTTP_201_CREATED)


@router.post("/login", response_class=PlainTextResponse)
async def login(payload: LoginRequest) -> PlainTextResponse:
    """
    Exchange email and password for a JWT.

    Returns the token itself as the response body.

    Raises:
        404: If no account has this email
        401: If the password is wrong
    """
    token = await UserService.login(payload.email, payload.password)
    return PlainTextResponse(token)
