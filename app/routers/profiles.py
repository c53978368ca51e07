# =============================================================================
# app/routers/profiles.py - Public Profile Endpoints
# =============================================================================
# Unauthenticated endpoints: view a profile by handle and check whether a
# handle is free. Mounted last because /{handle} matches any single segment.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path
from fastapi.responses import PlainTextResponse

from core.models.user import HandleSearch, PublicProfile
from core.services.user_service import UserService

router = APIRouter()


@router.post("/search", response_class=PlainTextResponse)
async def search_handle(payload: HandleSearch) -> PlainTextResponse:
    """
    Check whether a handle is available, exactly as typed.

    Raises:
        409: If the handle is already registered
    """
    handle = await UserService.search_handle(payload.handle)
    return PlainTextResponse(f"{handle} is available")


@router.get("/{handle}", response_model=PublicProfile)
async def get_user_by_handle(
    handle: Annotated[str, Path(description="Public handle")],
):
    """
    Get a user's public profile and count the visit.

    Raises:
        404: If no account has this handle
    """
    user = await UserService.get_public_profile(handle)
    return PublicProfile(**user)
