"""
Wire codec for algorithm calls.

Client side:
    encode_payload  -> request body + Content-Type for a PayloadValue
    decode_response -> ResponseEnvelope from the API's JSON envelope
                       ({"metadata": {...}, "result": ...} or {"error": ...})

Handler side (see ``algoclient.algo.runner``):
    decode_request  -> PayloadValue from {"content_type": ..., "data": ...}
    encode_response -> the envelope ``decode_response`` reads back
    encode_error    -> the error envelope ``decode_response`` reads back
"""

from __future__ import annotations

import base64
import binascii
import json
import traceback
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ValidationError

from algoclient.core.contracts import (
    AlgoMetadata,
    Binary,
    PayloadValue,
    ResponseEnvelope,
    Structured,
    Text,
)
from algoclient.core.exceptions import (
    DecodeError,
    EncodeError,
    InvalidContentType,
    MismatchedContentType,
    MissingField,
    RemoteError,
)

TEXT_PLAIN = "text/plain"
APPLICATION_JSON = "application/json"
OCTET_STREAM = "application/octet-stream"

RawBody = Union[bytes, str]


class ApiErrorResponse(BaseModel):
    error: str
    stacktrace: Optional[str] = None


def encode_payload(value: PayloadValue) -> Tuple[bytes, str]:
    """Return the request body and its Content-Type for a payload."""
    if isinstance(value, Text):
        return value.value.encode("utf-8"), TEXT_PLAIN
    if isinstance(value, Binary):
        return value.value, OCTET_STREAM
    if isinstance(value, Structured):
        try:
            return json.dumps(value.value).encode("utf-8"), APPLICATION_JSON
        except (TypeError, ValueError) as exc:
            raise EncodeError("json input") from exc
    raise TypeError(f"not a payload value: {type(value).__name__}")


def _try_error_envelope(raw: RawBody) -> Optional[ApiErrorResponse]:
    try:
        return ApiErrorResponse.model_validate_json(raw)
    except ValidationError:
        return None


def decode_response(raw: RawBody) -> ResponseEnvelope:
    """Decode an algorithm response body.

    The error envelope is tried first and wins even when the body would also
    satisfy the success shape.
    """
    err = _try_error_envelope(raw)
    if err is not None:
        raise RemoteError(err.error, stacktrace=err.stacktrace)

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise DecodeError("malformed json") from exc

    if not isinstance(data, dict) or "metadata" not in data:
        raise MissingField("metadata")

    try:
        metadata = AlgoMetadata.model_validate(data["metadata"])
    except ValidationError as exc:
        raise DecodeError("algorithm metadata", details=str(exc)) from exc

    content_type = metadata.content_type
    if content_type == "void":
        return ResponseEnvelope(metadata=metadata, result=Structured(None))

    if "result" not in data:
        raise MissingField("result")
    value = data["result"]

    if content_type == "json":
        result: PayloadValue = Structured(value)
    elif content_type == "text":
        if not isinstance(value, str):
            raise MismatchedContentType("text")
        result = Text(value)
    elif content_type == "binary":
        if not isinstance(value, str):
            raise MismatchedContentType("binary")
        result = Binary(_b64decode(value, "binary result"))
    else:
        raise InvalidContentType(content_type)

    return ResponseEnvelope(metadata=metadata, result=result)


def _b64decode(text: str, context: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(context, details=str(exc)) from exc


# -----------------
# Handler side
# -----------------


def decode_request(raw: RawBody) -> PayloadValue:
    """Decode one runner request line: ``{"content_type": ..., "data": ...}``."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise DecodeError("malformed json") from exc

    if not isinstance(data, dict):
        raise DecodeError("handler request", details="expected a JSON object")
    if "content_type" not in data:
        raise MissingField("content_type")
    if "data" not in data:
        raise MissingField("data")

    content_type = data["content_type"]
    value = data["data"]

    if content_type == "json":
        return Structured(value)
    if content_type == "text":
        if not isinstance(value, str):
            raise MismatchedContentType("text")
        return Text(value)
    if content_type == "binary":
        if not isinstance(value, str):
            raise MismatchedContentType("binary")
        return Binary(_b64decode(value, "binary request"))
    raise InvalidContentType(str(content_type))


def encode_response(result: PayloadValue, duration: float) -> Dict[str, Any]:
    if isinstance(result, Binary):
        wire: Any = base64.b64encode(result.value).decode("ascii")
    else:
        wire = result.value
    return {
        "result": wire,
        "metadata": {"content_type": result.kind, "duration": duration},
    }


def encode_error(exc: BaseException) -> Dict[str, Any]:
    stacktrace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return {"error": str(exc) or type(exc).__name__, "stacktrace": stacktrace}
