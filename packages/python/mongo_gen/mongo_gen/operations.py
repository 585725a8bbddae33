"""Generic save / find / update / delete helpers.

Each helper takes the ``Database`` of an open ``MongoHandler`` and a
collection name, issues exactly one driver call inside its own deadline and
returns the driver's result object unmodified.

Example usage:

    from mongo_gen import MongoDocument, connect, find, find_one, save_one

    class User(MongoDocument):
        name: str

    with connect("test_db", "mongodb://localhost:27017") as handler:
        save_one(handler.db, "users", User(name="John Doe"))
        john = find_one(handler.db, "users", User, {"name": "John Doe"})
        users = find(handler.db, "users", User, [("name", 1)], {}, 0, 10)
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError
from pymongo.database import Database
from pymongo.results import DeleteResult, InsertManyResult, InsertOneResult, UpdateResult

from .errors import DocumentNotFoundError, OperationError
from .mongo import operation_scope
from .typing import Document, QuerySpec, RawDocument

T = TypeVar("T", bound=BaseModel)

ID_FIELD = "_id"
ID_INDEX_HINT = [(ID_FIELD, 1)]


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def to_mongo(doc: Document) -> Dict[str, Any]:
    """Dump a pydantic document to BSON-ready data, leaving ``_id`` out while unset."""

    if not isinstance(doc, BaseModel):
        raise TypeError(f"Expected a pydantic model, got {type(doc).__name__}")
    data = doc.model_dump(by_alias=True)
    if data.get(ID_FIELD) is None:
        data.pop(ID_FIELD, None)
    return data


def from_mongo(document_cls: Type[T], raw: RawDocument) -> T:
    try:
        return document_cls.model_validate(raw)
    except ValidationError as exc:
        raise OperationError(
            f"Stored document {raw.get(ID_FIELD)!r} does not fit {document_cls.__name__}: {exc}"
        ) from exc


def _as_filter(spec: Optional[QuerySpec]) -> Dict[str, Any]:
    if spec is None:
        return {}
    return dict(spec.items()) if hasattr(spec, "items") else dict(spec)


def _as_pairs(spec: Optional[QuerySpec]) -> Optional[List[tuple]]:
    if not spec:
        return None
    return list(spec.items()) if hasattr(spec, "items") else [tuple(pair) for pair in spec]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------


def create_index(
    db: Database,
    collection_name: str,
    keys: QuerySpec,
    *,
    timeout: Optional[float] = None,
    **options: Any,
) -> str:
    """
    Create one index on ``collection_name`` and return its name.

    ``options`` (``unique``, ``name``, ...) are forwarded to the driver.
    """

    index_keys = _as_pairs(keys)
    if not index_keys:
        raise OperationError(f"create_index on '{collection_name}' needs at least one key")

    start = time.perf_counter()
    with operation_scope("create_index", collection_name, timeout):
        name = db[collection_name].create_index(index_keys, **options)
    logger.debug(
        "Mongo index {name} created on {collection} in {duration:.2f} ms",
        name=name,
        collection=collection_name,
        duration=_elapsed_ms(start),
    )
    return name


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def save_one(
    db: Database,
    collection_name: str,
    doc: Document,
    *,
    timeout: Optional[float] = None,
) -> InsertOneResult:
    """Insert a single document."""

    data = to_mongo(doc)
    start = time.perf_counter()
    with operation_scope("save_one", collection_name, timeout):
        result = db[collection_name].insert_one(data)
    logger.debug(
        "Mongo save_one into {collection} -> {inserted_id} in {duration:.2f} ms",
        collection=collection_name,
        inserted_id=result.inserted_id,
        duration=_elapsed_ms(start),
    )
    return result


def save_many(
    db: Database,
    collection_name: str,
    docs: Sequence[Document],
    *,
    timeout: Optional[float] = None,
) -> InsertManyResult:
    """
    Insert ``docs`` as one batch.

    Partial failures are reported by the driver (``BulkWriteError``) and
    surface as ``OperationError``; nothing is tracked here.
    """

    payload = [to_mongo(doc) for doc in docs]
    if not payload:
        raise OperationError(f"save_many into '{collection_name}' needs at least one document")

    start = time.perf_counter()
    with operation_scope("save_many", collection_name, timeout):
        result = db[collection_name].insert_many(payload)
    logger.debug(
        "Mongo save_many into {collection} inserted {count} documents in {duration:.2f} ms",
        collection=collection_name,
        count=len(result.inserted_ids),
        duration=_elapsed_ms(start),
    )
    return result


def update_one(
    db: Database,
    collection_name: str,
    doc: Document,
    *,
    timeout: Optional[float] = None,
) -> UpdateResult:
    """
    Overwrite every field of the stored document whose ``_id`` equals
    ``doc.get_id()``.

    Last writer wins. An unknown identifier matches nothing and inserts
    nothing (``matched_count == 0``).
    """

    fields = to_mongo(doc)
    fields.pop(ID_FIELD, None)

    start = time.perf_counter()
    with operation_scope("update_one", collection_name, timeout):
        result = db[collection_name].update_one(
            {ID_FIELD: doc.get_id()},
            {"$set": fields},
        )
    logger.debug(
        "Mongo update_one on {collection} for {id}: matched={matched} modified={modified} in {duration:.2f} ms",
        collection=collection_name,
        id=doc.get_id(),
        matched=result.matched_count,
        modified=result.modified_count,
        duration=_elapsed_ms(start),
    )
    return result


def delete_one(
    db: Database,
    collection_name: str,
    id: Any,
    *,
    timeout: Optional[float] = None,
) -> DeleteResult:
    """Delete the document stored under ``id``; an unknown id deletes nothing."""

    start = time.perf_counter()
    with operation_scope("delete_one", collection_name, timeout):
        result = db[collection_name].delete_one({ID_FIELD: id}, hint=ID_INDEX_HINT)
    logger.debug(
        "Mongo delete_one on {collection} for {id}: deleted={deleted} in {duration:.2f} ms",
        collection=collection_name,
        id=id,
        deleted=result.deleted_count,
        duration=_elapsed_ms(start),
    )
    return result


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def find_one(
    db: Database,
    collection_name: str,
    document_cls: Type[T],
    filter: Optional[QuerySpec] = None,
    *,
    timeout: Optional[float] = None,
) -> T:
    """
    Return the first document matching ``filter`` as ``document_cls``.

    Raises ``DocumentNotFoundError`` when nothing matches.
    """

    query = _as_filter(filter)
    start = time.perf_counter()
    with operation_scope("find_one", collection_name, timeout):
        raw = db[collection_name].find_one(query)
    logger.debug(
        "Mongo find_one on {collection} for {query}: found={found} in {duration:.2f} ms",
        collection=collection_name,
        query=query,
        found=raw is not None,
        duration=_elapsed_ms(start),
    )
    if raw is None:
        raise DocumentNotFoundError(f"No document in '{collection_name}' matches {query}")
    return from_mongo(document_cls, raw)


def find(
    db: Database,
    collection_name: str,
    document_cls: Type[T],
    sort: Optional[QuerySpec] = None,
    filter: Optional[QuerySpec] = None,
    skip: int = 0,
    limit: int = 0,
    *,
    timeout: Optional[float] = None,
) -> List[T]:
    """
    Return every document matching ``filter``, ordered by ``sort``, after
    skipping ``skip`` and keeping at most ``limit`` (0 means no limit).

    The cursor is drained inside the deadline, so the result is a plain list.
    """

    query = _as_filter(filter)
    ordering = _as_pairs(sort)
    start = time.perf_counter()
    with operation_scope("find", collection_name, timeout):
        with db[collection_name].find(query, sort=ordering, skip=skip, limit=limit) as cursor:
            raws = list(cursor)
    logger.debug(
        "Mongo find on {collection} for {query}: {count} documents in {duration:.2f} ms",
        collection=collection_name,
        query=query,
        count=len(raws),
        duration=_elapsed_ms(start),
    )
    return [from_mongo(document_cls, raw) for raw in raws]
