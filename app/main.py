# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the DevTree API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
#   poetry run python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    DevTreeException,
    devtree_exception_handler,
    validation_exception_handler,
)
from app.routers import health, users, profiles
from app.auth import routes as auth_routes
from lib.database import close_db, init_db

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: connect to MongoDB and register document models
    - Shutdown: close the client
    """
    logger.info(f"Starting DevTree API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    await init_db()

    yield

    logger.info("Shutting down DevTree API")
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="DevTree API",
    description="""
## Personal Link Pages

DevTree lets each user publish a single page of links under a unique handle.

### Flow

1. **Register** - `POST /api/v1/auth/register`
2. **Login** - `POST /api/v1/auth/login` returns a JWT
3. **Edit profile** - `PATCH /api/v1/user` with `Authorization: Bearer <token>`
4. **Share** - `GET /api/v1/{handle}` is public; `POST /api/v1/user/qr` makes a QR code

Errors always come back as `{"error": "<message>"}`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Registration and login",
        },
        {
            "name": "User",
            "description": "The authenticated user's own profile, image and QR code",
        },
        {
            "name": "Profiles",
            "description": "Public profile lookup and handle availability",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(DevTreeException)
async def handle_devtree_exception(request: Request, exc: DevTreeException):
    """Handle custom DevTree exceptions."""
    return await devtree_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "there was an error"},
    )


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "DevTree API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


# =============================================================================
# Routers
# =============================================================================
# Order matters: profiles.router owns GET /api/v1/{handle} and must come last.

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Authenticated user endpoints
app.include_router(
    users.router,
    prefix="/api/v1",
    tags=["User"]
)

# Public profile endpoints
app.include_router(
    profiles.router,
    prefix="/api/v1",
    tags=["Profiles"]
)


# =============================================================================
# Entry Point
# =============================================================================

def run() -> None:
    """Serve the API with uvicorn, reloading on changes in development."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
