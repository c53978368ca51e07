# =============================================================================
# app/routers/users.py - Authenticated User Endpoints
# =============================================================================
# Everything the logged-in user does to their own record: read it, edit the
# profile, upload an avatar, and generate a shareable QR code.
# =============================================================================

import logging
import os
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import PlainTextResponse

from app.auth import get_current_user
from app.config import settings
from app.exceptions import FileTooLargeError
from core.models.user import ImageResponse, ProfileUpdate, QRCodeResponse, UserResponse
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()

CurrentUser = Annotated[dict[str, Any], Depends(get_current_user)]


def _stream_size(upload: UploadFile) -> int:
    """Size of an upload in bytes, leaving the stream rewound."""
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/user", response_model=UserResponse)
async def get_user(user: CurrentUser):
    """
    Get the authenticated user's record.
    """
    return user


@router.patch("/user", response_class=PlainTextResponse)
async def update_profile(payload: ProfileUpdate, user: CurrentUser) -> PlainTextResponse:
    """
    Update description, handle and links.

    Raises:
        409: If another account owns the new handle
        500: If the update can't be saved
    """
    await UserService.update_profile(user, payload)
    return PlainTextResponse("profile updated")


@router.post("/user/image", response_model=ImageResponse)
async def upload_image(
    file: Annotated[UploadFile, File(description="Profile image")],
    user: CurrentUser,
):
    """
    Upload a profile image to Cloudinary and save its URL.

    Raises:
        413: If the file exceeds MAX_UPLOAD_SIZE_MB
        500: If the upload or the save fails
    """
    size = _stream_size(file)
    if size > settings.max_upload_size_bytes:
        raise FileTooLargeError(settings.MAX_UPLOAD_SIZE_MB)

    _, suffix = os.path.splitext(file.filename or "")
    logger.info(f"Uploading profile image for user {user['id']} ({size} bytes)")

    url = await UserService.upload_image(user, file.file, suffix=suffix)
    return ImageResponse(image=url)


@router.post("/user/qr", response_model=QRCodeResponse)
async def generate_qr(user: CurrentUser):
    """
    Generate a QR code pointing at the user's public profile.

    The code is regenerated on every call and saved to the user's record.

    Raises:
        500: If rendering or saving fails
    """
    qr_code = await UserService.generate_qr(user)
    return QRCodeResponse(qr_code=qr_code)
