from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from boardforms.config import settings

_client: Optional[AsyncIOMotorClient] = None


def get_database() -> AsyncIOMotorDatabase:
    """Shared Motor database handle, created on first use."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.MONGO_URI)
    return _client[settings.DB_NAME]


def from_mongo(doc: Optional[dict]) -> Optional[dict]:
    """Expose Mongo's `_id` as `id` for the API."""
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


def to_mongo(doc: dict) -> dict:
    doc = dict(doc)
    doc["_id"] = doc.pop("id")
    return doc
