"""Synchronous MongoDB connection helpers built on top of PyMongo.

Every call against the server runs inside its own ``pymongo.timeout`` scope,
so no single call blocks longer than its deadline. Nothing is retried."""

from __future__ import annotations

import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator, Optional, Type

import pymongo
from bson.errors import BSONError
from loguru import logger
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .errors import MongoConnectionError, MongoGenError, OperationError
from .settings import settings

# Encoding failures (unencodable values, native UUIDs without a representation)
# happen inside the driver call but are not PyMongoError.
DRIVER_ERRORS = (PyMongoError, BSONError, ValueError)


def timeout_value(timeout: Optional[float]) -> float:
    return timeout if timeout is not None else settings.timeout_seconds


@contextmanager
def operation_scope(
    action: str,
    target: str,
    timeout: Optional[float] = None,
    *,
    error_cls: Type[MongoGenError] = OperationError,
) -> Iterator[None]:
    """
    Bound the enclosed driver calls by ``timeout`` seconds and translate
    driver failures into ``error_cls``.

    The deadline is released on every exit path.
    """

    seconds = timeout_value(timeout)
    start = time.perf_counter()
    try:
        with pymongo.timeout(seconds):
            yield
    except DRIVER_ERRORS as exc:
        duration = (time.perf_counter() - start) * 1000
        logger.warning(
            "Mongo {action} on {target} failed after {duration:.2f} ms: {error}",
            action=action,
            target=target,
            duration=duration,
            error=exc,
        )
        raise error_cls(f"{action} on '{target}' failed: {exc}") from exc


class MongoHandler:
    """
    Live connection to one logical database.

    Create it with ``connect`` and close it exactly once with ``close``
    (or by leaving a ``with`` block). The handler must not be used after it
    has been closed.
    """

    def __init__(self, client: MongoClient, db_name: str):
        self.client = client
        self.db: Database = client[db_name]

    def close(self, *, timeout: Optional[float] = None) -> None:
        """Disconnect the underlying client. Calling it twice is undefined."""

        start = time.perf_counter()
        with operation_scope("close", self.db.name, timeout):
            self.client.close()
        logger.debug(
            "Mongo handler for {db} closed in {duration:.2f} ms",
            db=self.db.name,
            duration=(time.perf_counter() - start) * 1000,
        )

    def __enter__(self) -> "MongoHandler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MongoHandler(db={self.db.name!r})"


def connect(db_name: str, uri: str, *, timeout: Optional[float] = None) -> MongoHandler:
    """
    Open a client for ``uri`` and verify it with a ``ping``.

    Raises ``MongoConnectionError`` when the URI is rejected, the server
    cannot be selected, or the ping fails or exceeds the deadline.
    """

    seconds = timeout_value(timeout)
    start = time.perf_counter()
    client: Optional[MongoClient] = None
    try:
        with pymongo.timeout(seconds):
            client = MongoClient(uri, serverSelectionTimeoutMS=int(seconds * 1000))
            client.admin.command("ping")
    except PyMongoError as exc:
        if client is not None:
            client.close()
        duration = (time.perf_counter() - start) * 1000
        logger.warning(
            "Mongo connect to {db} failed after {duration:.2f} ms: {error}",
            db=db_name,
            duration=duration,
            error=exc,
        )
        raise MongoConnectionError(f"Could not connect to database '{db_name}': {exc}") from exc

    logger.debug(
        "Mongo connected to {db} in {duration:.2f} ms",
        db=db_name,
        duration=(time.perf_counter() - start) * 1000,
    )
    return MongoHandler(client, db_name)


@lru_cache
def get_handler() -> MongoHandler:
    """Return a cached handler configured via ``mongo_gen.settings``."""

    return connect(settings.db_name, settings.uri)


def get_db() -> Database:
    """Return the main application database defined by ``settings.db_name``."""

    return get_handler().db


def ping() -> dict[str, Any]:
    """Run a simple ``ping`` command against the configured MongoDB server."""

    db = get_db()
    with operation_scope("ping", db.name, error_cls=MongoConnectionError):
        db.command("ping")
    return {"ok": True}


def close_handler() -> None:
    """Close the cached handler, if one was opened, and forget it."""

    if not get_handler.cache_info().currsize:
        return
    try:
        get_handler().close()
    finally:
        get_handler.cache_clear()
