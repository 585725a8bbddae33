"""Lightweight typing helpers shared by the generic Mongo helpers."""

from typing import Annotated, Any, Mapping, Protocol, Sequence, Tuple, Union, runtime_checkable

from bson import ObjectId
from pydantic import PlainSerializer, PlainValidator, WithJsonSchema


@runtime_checkable
class Document(Protocol):
    """Anything that can report the identifier it is stored under."""

    def get_id(self) -> Any:  # pragma: no cover - structural typing only
        ...


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Invalid ObjectId: {value!r}")


# Kept as a real ObjectId in python mode so filters on ``_id`` match what the
# server stored; rendered as a hex string in JSON mode.
PyObjectId = Annotated[
    ObjectId,
    PlainValidator(_validate_object_id),
    PlainSerializer(str, when_used="json"),
    WithJsonSchema({"type": "string"}),
]

RawDocument = Mapping[str, Any]

# Filters, sorts and index keys may be given as a mapping or as ordered
# (key, value) pairs.
SpecPairs = Sequence[Tuple[str, Any]]
QuerySpec = Union[Mapping[str, Any], SpecPairs]
