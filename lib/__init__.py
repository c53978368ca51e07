# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - database.py: Beanie user document, Mongo lifecycle and the UserStore wrapper
# - security.py: Password hashing, JWT signing and handle slugging
# =============================================================================

from lib.database import DuplicateKeyViolation, UserDocument, UserStore
from lib.security import (
    check_password,
    decode_jwt,
    generate_jwt,
    hash_password,
    slugify_handle,
)

__all__ = [
    # Database
    "DuplicateKeyViolation",
    "UserDocument",
    "UserStore",
    # Security
    "check_password",
    "decode_jwt",
    "generate_jwt",
    "hash_password",
    "slugify_handle",
]
