# =============================================================================
# lib/database.py - MongoDB Client Wrapper
# =============================================================================
# This module owns everything that touches MongoDB:
# - UserDocument: the Beanie ODM model for the users collection
# - init_db / close_db / ping_db: connection lifecycle
# - UserStore: typed wrapper returning plain dicts to the service layer
#
# Uniqueness of email and handle is enforced by unique indexes; visit
# counting uses an atomic $inc.
#
# Usage:
#   from lib.database import UserStore
#   user = await UserStore.find_user({"email": "a@x.com"})
# =============================================================================

import asyncio
import logging
from typing import Any, Optional

from beanie import Document, Indexed, PydanticObjectId, UpdateResponse, init_beanie
from beanie.operators import Inc, Set
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pydantic import field_validator
from pymongo.errors import DuplicateKeyError

from app.config import settings

logger = logging.getLogger(__name__)


class DuplicateKeyViolation(Exception):
    """
    A write collided with a unique index.

    `field` names the offending key ("email" or "handle") when MongoDB reports it.
    """

    def __init__(self, field: str | None):
        super().__init__(f"duplicate value for unique field: {field}")
        self.field = field


# =============================================================================
# Document Model
# =============================================================================

class UserDocument(Document):
    """A registered user as stored in the `users` collection."""

    handle: Indexed(str, unique=True)
    name: str
    email: Indexed(str, unique=True)
    password: str
    description: str = ""
    image: str = ""
    links: str = "[]"
    qr_code: str = ""
    visits: int = 0

    @field_validator("handle", "email", mode="before")
    @classmethod
    def _trim_and_lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("name", "password", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    class Settings:
        name = "users"


# =============================================================================
# Connection Lifecycle
# =============================================================================

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None
_lock = asyncio.Lock()


async def init_db() -> AsyncIOMotorDatabase:
    """Connect to MongoDB and register the document models (idempotent)."""
    global _client, _db
    if _db is not None:
        return _db
    async with _lock:
        if _db is not None:
            return _db
        _client = AsyncIOMotorClient(settings.MONGO_URI)
        _db = _client[settings.MONGO_DB_NAME]
        await init_beanie(database=_db, document_models=[UserDocument])
        logger.info(f"Connected to MongoDB database '{settings.MONGO_DB_NAME}'")
        return _db


async def close_db() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


async def ping_db() -> bool:
    """Round-trip a ping to the server."""
    db = await init_db()
    await db.command("ping")
    return True


# =============================================================================
# Store
# =============================================================================

def _to_dict(doc: UserDocument, include_password: bool = True) -> dict[str, Any]:
    """Flatten a document into the dict shape the services work with."""
    data = doc.model_dump(exclude={"id", "revision_id"})
    data["id"] = str(doc.id)
    if not include_password:
        data.pop("password", None)
    return data


def _duplicate_field(error: DuplicateKeyError) -> str | None:
    details = error.details or {}
    key = details.get("keyPattern") or details.get("keyValue") or {}
    if key:
        return next(iter(key))
    message = str(error)
    for field in ("email", "handle"):
        if f"{field}_1" in message:
            return field
    return None


class UserStore:
    """
    Typed wrapper for user persistence.

    All methods are class methods, mirroring a single shared connection.
    Every method returns plain dicts (or None) so callers never depend on
    the ODM.
    """

    @classmethod
    async def find_user(cls, filters: dict[str, Any]) -> dict[str, Any] | None:
        """Return the first user matching `filters`, or None."""
        doc = await UserDocument.find_one(filters)
        return _to_dict(doc) if doc else None

    @classmethod
    async def get_user(
        cls,
        user_id: str,
        include_password: bool = True,
    ) -> dict[str, Any] | None:
        """Fetch a user by id. Malformed ids are treated as missing."""
        try:
            object_id = PydanticObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        doc = await UserDocument.get(object_id)
        return _to_dict(doc, include_password=include_password) if doc else None

    @classmethod
    async def insert_user(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new user.

        Raises:
            DuplicateKeyViolation: If email or handle already exists
        """
        doc = UserDocument(**data)
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            raise DuplicateKeyViolation(_duplicate_field(e))
        return _to_dict(doc)

    @classmethod
    async def update_user(cls, user_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        """
        Overwrite `fields` on one user and return the updated record.

        Raises:
            DuplicateKeyViolation: If the new values collide with another user
        """
        try:
            doc = await UserDocument.find_one(
                UserDocument.id == PydanticObjectId(user_id)
            ).update(
                Set(fields),
                response_type=UpdateResponse.NEW_DOCUMENT,
            )
        except DuplicateKeyError as e:
            raise DuplicateKeyViolation(_duplicate_field(e))
        return _to_dict(doc) if doc else None

    @classmethod
    async def increment_visits(cls, handle: str) -> dict[str, Any] | None:
        """Atomically bump `visits` for a handle; returns the updated record."""
        doc = await UserDocument.find_one(UserDocument.handle == handle).update(
            Inc({UserDocument.visits: 1}),
            response_type=UpdateResponse.NEW_DOCUMENT,
        )
        return _to_dict(doc) if doc else None
