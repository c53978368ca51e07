# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .media_service import MediaService
from .qr_service import QRService
from .user_service import UserService

__all__ = [
    "MediaService",
    "QRService",
    "UserService",
]
