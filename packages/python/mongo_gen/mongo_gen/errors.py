"""Errors raised by the mongo_gen helpers.

Driver exceptions are never swallowed: they are re-raised as one of the kinds
below with the original ``pymongo`` error chained as ``__cause__``.
"""


class MongoGenError(Exception):
    """Base class for every error raised by mongo_gen."""


class MongoConnectionError(MongoGenError):
    """Raised when connecting or pinging the server fails or times out."""


class OperationError(MongoGenError):
    """Raised when an insert, update, find, delete, index or close call fails."""


class DocumentNotFoundError(OperationError):
    """Raised by ``find_one`` when no document matches the filter."""
