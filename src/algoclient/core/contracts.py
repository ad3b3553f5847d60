from __future__ import annotations

import json
import typing
from dataclasses import dataclass
from typing import Any, ClassVar, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from algoclient.core.exceptions import (
    DecodeError,
    EncodeError,
    MismatchedContentType,
    UnexpectedContentType,
)

PayloadKind = Literal["text", "binary", "json"]

T = TypeVar("T")


@dataclass(frozen=True)
class Text:
    """Payload sent/received with ``Content-Type: text/plain``."""

    kind: ClassVar[PayloadKind] = "text"
    value: str


@dataclass(frozen=True)
class Binary:
    """Payload sent/received with ``Content-Type: application/octet-stream``."""

    kind: ClassVar[PayloadKind] = "binary"
    value: bytes

    def __repr__(self) -> str:
        if len(self.value) <= 50:
            return f"Binary({self.value!r})"
        return f"Binary({self.value[:50]!r}... ({len(self.value)} bytes))"


@dataclass(frozen=True)
class Structured:
    """Payload sent/received with ``Content-Type: application/json``.

    ``value`` is a JSON-like tree: None, bool, int, float, str, dict, list.
    """

    kind: ClassVar[PayloadKind] = "json"
    value: Any


PayloadValue = Union[Text, Binary, Structured]

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


def to_payload(obj: Any) -> PayloadValue:
    """Build a PayloadValue from a native Python value.

    - PayloadValue instances pass through unchanged
    - str -> Text, bytes-like -> Binary, None -> Structured(None)
    - anything else (dicts, lists, tuples, dataclasses, pydantic models) is
      dumped to its JSON-compatible form and wrapped as Structured
    """
    if isinstance(obj, (Text, Binary, Structured)):
        return obj
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Binary(bytes(obj))
    if obj is None:
        return Structured(None)
    if isinstance(obj, BaseModel):
        return Structured(obj.model_dump(mode="json"))
    try:
        return Structured(_ANY_ADAPTER.dump_python(obj, mode="json"))
    except PydanticSerializationError as exc:
        raise EncodeError(f"value of type {type(obj).__name__}") from exc


def as_text(value: PayloadValue) -> Optional[str]:
    """Text view of a payload: text itself, or a structured value that is a JSON string."""
    if isinstance(value, Text):
        return value.value
    if isinstance(value, Structured):
        return value.value if isinstance(value.value, str) else None
    return None


def as_structured(value: PayloadValue) -> Optional[Any]:
    """Structured view of a payload; text is wrapped as a JSON string, never reinterpreted.

    Returns None when there is no structured view (binary). Note that a
    ``Structured(None)`` payload also yields None; use ``has_structured_view``
    to tell the two apart.
    """
    if isinstance(value, Structured):
        return value.value
    if isinstance(value, Text):
        return value.value
    return None


def has_structured_view(value: PayloadValue) -> bool:
    return isinstance(value, (Text, Structured))


def as_bytes(value: PayloadValue) -> Optional[bytes]:
    if isinstance(value, Binary):
        return value.value
    return None


def type_name(target_type: Any) -> str:
    if typing.get_origin(target_type) is not None:
        return repr(target_type)
    return getattr(target_type, "__name__", repr(target_type))


def validate_strict(target_type: Type[T], value: Any) -> T:
    """Validate a JSON-like tree into ``target_type`` in pydantic strict JSON mode.

    Strings never become numbers or booleans. JSON arrays still validate into
    tuples, which strict Python-mode validation would reject.
    """
    try:
        return TypeAdapter(target_type).validate_json(json.dumps(value), strict=True)
    except ValidationError as exc:
        raise DecodeError(type_name(target_type), details=str(exc)) from exc


def decode_structured(value: PayloadValue, target_type: Type[T]) -> T:
    """Decode the structured view of ``value`` into ``target_type`` using pydantic."""
    if not has_structured_view(value):
        raise MismatchedContentType("json")
    return validate_strict(target_type, as_structured(value))


class AlgoMetadata(BaseModel):
    """Metadata returned with every successful algorithm response."""

    duration: float
    stdout: Optional[str] = None
    alerts: Optional[List[str]] = None
    content_type: str


@dataclass
class ResponseEnvelope:
    """Successful algorithm response: the decoded result plus its metadata."""

    metadata: AlgoMetadata
    result: PayloadValue

    @property
    def duration(self) -> float:
        return self.metadata.duration

    @property
    def stdout(self) -> Optional[str]:
        return self.metadata.stdout

    @property
    def alerts(self) -> Optional[List[str]]:
        return self.metadata.alerts

    @property
    def content_type(self) -> str:
        return self.metadata.content_type

    def as_input(self) -> PayloadValue:
        """The result as the next call's input, tag for tag (algorithm chaining)."""
        return self.result

    def into_string(self) -> Optional[str]:
        return as_text(self.result)

    def into_json(self) -> Optional[Any]:
        return as_structured(self.result)

    def into_bytes(self) -> Optional[bytes]:
        return as_bytes(self.result)

    def decode(self, target_type: Type[T]) -> T:
        if not has_structured_view(self.result):
            raise UnexpectedContentType("json", self.content_type)
        return decode_structured(self.result, target_type)

    def __str__(self) -> str:
        result = self.result
        if isinstance(result, Text):
            return result.value
        if isinstance(result, Binary):
            return result.value.decode("utf-8", errors="replace")
        return json.dumps(result.value)
