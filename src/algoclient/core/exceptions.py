"""
Exception classes for the algoclient library.

Every failure surfaced by the client is an ``AlgoClientException`` subclass
carrying enough context (operation, target URI or URL) to be logged or shown
without re-deriving it. Transport and local I/O failures are chained with
``raise ... from exc`` so the original cause stays available.
"""

from __future__ import annotations

import json
from typing import Optional


class AlgoClientException(Exception):
    """Base exception class for all algoclient exceptions."""

    pass


class UnsupportedInput(AlgoClientException):
    """
    Raised by a handler entry point that does not accept the given payload shape.

    This is the only failure that lets ``EntryPoint.apply`` retry the call with
    a coerced payload (text <-> JSON string). Any other exception raised by a
    handler is returned to the caller untouched.
    """

    def __init__(self, message: str = "input type not supported by this handler"):
        super().__init__(message)


class MismatchedContentType(AlgoClientException):
    """Raised when a payload cannot be read as the content type it claims to be."""

    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"content did not match content type '{expected}'")


class UnexpectedContentType(AlgoClientException):
    """Raised when a response's content type cannot serve the requested view."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected content type '{expected}', received '{actual}'")


class UnexpectedDataType(AlgoClientException):
    """Raised when the data API returns a directory where a file was expected (or vice versa)."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected data type '{expected}', received '{actual}'")


class InvalidContentType(AlgoClientException):
    """Raised when the server declares a content type outside of void/json/text/binary."""

    def __init__(self, actual: str):
        self.actual = actual
        super().__init__(f"invalid content type '{actual}'")


class MissingField(AlgoClientException):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"missing field '{name}'")


class DecodeError(AlgoClientException):
    """Raised when a wire payload or structured value cannot be decoded."""

    def __init__(self, context: str, details: Optional[str] = None):
        self.context = context
        self.details = details
        message = f"failed to decode {context}"
        if details:
            message += f" - {details}"
        super().__init__(message)


class EncodeError(AlgoClientException):
    def __init__(self, context: str):
        self.context = context
        super().__init__(f"failed to encode {context}")


class InvalidPath(AlgoClientException):
    """Raised when a path-dependent operation needs a parent or basename the path lacks."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"invalid data path '{path}'")


class NotFound(AlgoClientException):
    def __init__(self, location: str):
        self.location = location
        super().__init__(f"not found: {location}")


class RemoteError(AlgoClientException):
    """
    Error reported by the API itself.

    Built either from an error envelope (``{"error": "...", "stacktrace": "..."}``)
    or, when the body is not one, from the bare HTTP status.

    Example:
        >>> err = RemoteError.from_json_or_status('{"error": "boom"}', 400)
        >>> err.message, err.stacktrace, err.status_code
        ('boom', None, 400)
    """

    def __init__(
        self,
        message: str,
        stacktrace: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.stacktrace = stacktrace
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_json_or_status(cls, body: str, status_code: int) -> "RemoteError":
        try:
            data = json.loads(body)
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("error"), str):
            stacktrace = data.get("stacktrace")
            return cls(
                data["error"],
                stacktrace=stacktrace if isinstance(stacktrace, str) else None,
                status_code=status_code,
            )
        return cls(f"HTTP status {status_code}", status_code=status_code)

    def __str__(self) -> str:
        if self.stacktrace:
            return f"{self.message}\n{self.stacktrace}"
        return self.message


class HttpError(AlgoClientException):
    """Raised when the transport fails while performing an operation (see ``__cause__``)."""

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"http error {context}")


class IoError(AlgoClientException):
    """Raised when reading a response body or a local file fails."""

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"io error {context}")
