# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the DevTree API:
# - test_security.py: Password hashing, JWT and handle slugging
# - test_models.py: Pydantic request/response schemas
# - test_database.py: UserStore helpers that don't need a server
# - test_auth.py: Registration and login endpoints
# - test_users.py: Authenticated profile, image and QR endpoints
# - test_profiles.py: Public lookup and handle search
# - test_health.py: Health checks
#
# Run tests with: poetry run pytest
# =============================================================================
