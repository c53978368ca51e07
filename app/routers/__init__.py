# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - users.py: Authenticated user's own record, image and QR code
# - profiles.py: Public profile lookup and handle search
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import users
from . import profiles

__all__ = [
    "health",
    "users",
    "profiles",
]
