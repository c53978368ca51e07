# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - RegisterRequest / LoginRequest: credentials input
# - ProfileUpdate: editable profile fields
# - HandleSearch: availability check input
# - UserResponse: the authenticated user's own record
# - PublicProfile: what anyone can see at /{handle}
# - ImageResponse / QRCodeResponse: collaborator results
#
# PublicProfile is an allow-list: fields added to the user record stay
# hidden from public lookups until they are listed here.
# =============================================================================

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    """
    Schema for creating an account.

    Example:
        {
            "handle": "Alice!",
            "name": "Alice",
            "email": "a@x.com",
            "password": "p1"
        }
    """

    handle: str = Field(..., min_length=1, description="Requested handle (slugged on save)")
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Plaintext password")

    @field_validator("handle", "name", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        value = _strip(value)
        return value.lower() if isinstance(value, str) else value


class LoginRequest(BaseModel):
    """Schema for exchanging credentials for a token."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Plaintext password")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        value = _strip(value)
        return value.lower() if isinstance(value, str) else value


class ProfileUpdate(BaseModel):
    """Schema for editing the authenticated user's profile."""

    handle: str = Field(..., min_length=1, description="New handle (slugged on save)")
    description: str = Field(default="", description="Profile bio")
    links: str = Field(default="[]", description="Serialized list of social links")


class HandleSearch(BaseModel):
    """Schema for checking whether a handle is free."""

    handle: str = Field(..., min_length=1, description="Handle to look up, as typed")


# =============================================================================
# Response Models
# =============================================================================

class UserResponse(BaseModel):
    """
    The authenticated user's record.

    Returned by GET /user. Carries everything but the password hash.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    handle: str
    name: str
    email: str
    description: str = ""
    image: str = ""
    links: str = "[]"
    qr_code: str = Field(default="", alias="qrCode")
    visits: int = 0


class PublicProfile(BaseModel):
    """
    Public view of a user, returned by GET /{handle}.

    Never includes email, password, or storage identifiers.
    """

    model_config = ConfigDict(populate_by_name=True)

    handle: str
    name: str
    description: str = ""
    image: str = ""
    links: str = "[]"
    qr_code: str = Field(default="", alias="qrCode")
    visits: int = 0


class ImageResponse(BaseModel):
    """Public URL of a freshly uploaded profile image."""
    image: str


class QRCodeResponse(BaseModel):
    """Embeddable QR code for the user's public profile."""

    model_config = ConfigDict(populate_by_name=True)

    qr_code: str = Field(..., alias="qrCode")
