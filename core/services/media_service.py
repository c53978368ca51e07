# =============================================================================
# core/services/media_service.py - Cloudinary Image Uploads
# =============================================================================
# Hands a local file to Cloudinary and returns its public HTTPS URL.
# The SDK is blocking, so uploads run in the thread pool and the result (or
# the exception) comes back through the awaited call.
# =============================================================================

import logging
import os
import shutil
import tempfile
from typing import BinaryIO
from uuid import uuid4

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.exceptions import ImageUploadError

logger = logging.getLogger(__name__)

_configured = False


def _ensure_configured() -> None:
    global _configured
    if not _configured:
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        _configured = True


class MediaService:
    """
    Service for profile image hosting.
    """

    @staticmethod
    async def upload_image(file_path: str) -> str:
        """
        Upload a local image under a fresh random public id.

        Args:
            file_path: Path of the file on local disk

        Returns:
            The image's secure (https) URL

        Raises:
            ImageUploadError: If Cloudinary rejects the upload
        """
        _ensure_configured()
        public_id = str(uuid4())

        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                file_path,
                public_id=public_id,
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise ImageUploadError()

        url = result.get("secure_url") if result else None
        if not url:
            logger.error("Cloudinary upload returned no secure_url")
            raise ImageUploadError()

        logger.info(f"Uploaded image {public_id}")
        return url

    @staticmethod
    async def upload_stream(stream: BinaryIO, suffix: str = "") -> str:
        """
        Spool an uploaded stream to a temporary file and upload it.

        The temporary file is removed whether or not the upload succeeds.
        """
        fd, path = tempfile.mkstemp(suffix=suffix)
        try:
            with os.fdopen(fd, "wb") as tmp:
                shutil.copyfileobj(stream, tmp)
            return await MediaService.upload_image(path)
        finally:
            try:
                os.remove(path)
            except OSError:
                logger.warning(f"Could not remove temporary upload {path}")
