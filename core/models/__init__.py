# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# - user.py: Request and response schemas for every user endpoint
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    HandleSearch,
    ImageResponse,
    LoginRequest,
    ProfileUpdate,
    PublicProfile,
    QRCodeResponse,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    "HandleSearch",
    "ImageResponse",
    "LoginRequest",
    "ProfileUpdate",
    "PublicProfile",
    "QRCodeResponse",
    "RegisterRequest",
    "UserResponse",
]
