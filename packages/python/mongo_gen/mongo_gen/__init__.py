"""Minimal generic MongoDB helpers.

Example usage:

    from mongo_gen import MongoDocument, connect, save_one, find_one

    class User(MongoDocument):
        name: str

    handler = connect("test_db", "mongodb://localhost:27017")
    save_one(handler.db, "users", User(name="John Doe"))
    user = find_one(handler.db, "users", User, {"name": "John Doe"})
    handler.close()
"""

from .settings import MongoSettings, settings, use_settings
from .errors import DocumentNotFoundError, MongoConnectionError, MongoGenError, OperationError
from .typing import Document, PyObjectId
from .models import MongoDocument
from .mongo import MongoHandler, close_handler, connect, get_db, get_handler, ping
from .operations import (
    create_index,
    delete_one,
    find,
    find_one,
    save_many,
    save_one,
    update_one,
)

__all__ = [
    "MongoSettings",
    "settings",
    "use_settings",
    "MongoGenError",
    "MongoConnectionError",
    "OperationError",
    "DocumentNotFoundError",
    "Document",
    "PyObjectId",
    "MongoDocument",
    "MongoHandler",
    "connect",
    "get_handler",
    "get_db",
    "ping",
    "close_handler",
    "create_index",
    "save_one",
    "save_many",
    "update_one",
    "find_one",
    "find",
    "delete_one",
]
