"""
MongoDB access for the StayVista API.

A single client is created when DATABASE_URL is configured and shared by
every request. Handlers receive the database through the get_db dependency.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult
from pymongo.server_api import ServerApi

import config

logger = logging.getLogger(__name__)

USERS = "users"
ROOMS = "rooms"
BOOKINGS = "bookings"


class DatabaseUnavailable(Exception):
    """Raised when a request needs the store but none is configured."""


client: Optional[MongoClient] = None
db: Optional[Database] = None

if config.DATABASE_URL:
    client = MongoClient(
        config.DATABASE_URL,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )
    db = client[config.DATABASE_NAME]


def get_db() -> Database:
    if db is None:
        raise DatabaseUnavailable("DATABASE_URL is not set")
    return db


def ping(database: Database) -> None:
    database.client.admin.command({"ping": 1})


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail="Invalid id")


def _jsonable(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    return _jsonable(dict(doc))


def serialize_many(docs) -> List[Dict[str, Any]]:
    return [serialize(d) for d in docs]


# Write results in the shape the driver reports them to JSON clients

def insert_result(res: InsertOneResult) -> Dict[str, Any]:
    return {"acknowledged": res.acknowledged, "insertedId": str(res.inserted_id)}


def update_result(res: UpdateResult) -> Dict[str, Any]:
    return {
        "acknowledged": res.acknowledged,
        "matchedCount": res.matched_count,
        "modifiedCount": res.modified_count,
        "upsertedId": str(res.upserted_id) if res.upserted_id is not None else None,
    }


def delete_result(res: DeleteResult) -> Dict[str, Any]:
    return {"acknowledged": res.acknowledged, "deletedCount": res.deleted_count}


def create_document(database: Database, collection_name: str, data) -> Dict[str, Any]:
    """Insert a pydantic model or plain dict and return the insert result."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(by_alias=True, exclude_none=True)
    res = database[collection_name].insert_one(dict(data))
    return insert_result(res)


def get_documents(database: Database, collection_name: str, filter_dict: Optional[dict] = None,
                  projection: Optional[dict] = None) -> List[Dict[str, Any]]:
    cursor = database[collection_name].find(filter_dict or {}, projection)
    return serialize_many(cursor)
