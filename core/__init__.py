# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic:
# - models/: Pydantic schemas for request/response validation
# - services/: User rules plus the Cloudinary and QR collaborators
#
# Routers call into services; services talk to lib/ for storage and crypto.
# =============================================================================
