"""
Handler-side content negotiation.

An algorithm handler subclasses ``EntryPoint`` and overrides the entry points
for the payload shapes it understands. ``apply`` picks the entry point that
matches the caller's payload and, when that entry point raises
``UnsupportedInput``, retries once with the text/JSON-string coercion:

    Text        -> handle_text,       fallback handle_structured(<JSON string>)
    Structured  -> handle_structured, fallback handle_text (JSON strings only)
    Binary      -> handle_binary,     no fallback

Example:
    >>> class Hello(EntryPoint):
    ...     def handle_structured(self, value):
    ...         return f"Hello {value}"
    >>> Hello().apply("Jane")
    Text(value='Hello Jane')
"""

from __future__ import annotations

from typing import Any, ClassVar

from algoclient.core.contracts import (
    Binary,
    PayloadValue,
    Structured,
    Text,
    as_structured,
    has_structured_view,
    to_payload,
    validate_strict,
)
from algoclient.core.exceptions import UnsupportedInput
from algoclient.core.logger import get_logger

logger = get_logger(__name__)


class EntryPoint:
    """Base class for algorithm handlers; override at least one ``handle_*`` method.

    Handlers may return a PayloadValue or any native value accepted by
    ``to_payload`` (str, bytes, None, JSON-compatible objects).
    """

    def handle_text(self, text: str) -> Any:
        raise UnsupportedInput()

    def handle_structured(self, value: Any) -> Any:
        raise UnsupportedInput()

    def handle_binary(self, data: bytes) -> Any:
        raise UnsupportedInput()

    def apply(self, input_data: Any) -> PayloadValue:
        return to_payload(self._dispatch(to_payload(input_data)))

    def _dispatch(self, payload: PayloadValue) -> Any:
        if isinstance(payload, Text):
            try:
                return self.handle_text(payload.value)
            except UnsupportedInput:
                logger.debug(f"{type(self).__name__}: text unsupported, retrying as JSON string")
            return self.handle_structured(as_structured(payload))

        if isinstance(payload, Structured):
            try:
                return self.handle_structured(payload.value)
            except UnsupportedInput:
                if not isinstance(payload.value, str):
                    raise
                logger.debug(f"{type(self).__name__}: JSON unsupported, retrying as text")
            return self.handle_text(payload.value)

        if isinstance(payload, Binary):
            return self.handle_binary(payload.value)

        raise TypeError(f"not a payload value: {type(payload).__name__}")


class DecodedEntryPoint(EntryPoint):
    """Handler that receives its JSON input already decoded into ``input_type``.

    Example:
        >>> class Join(DecodedEntryPoint):
        ...     input_type = tuple[str, str]
        ...     def apply_decoded(self, decoded):
        ...         return f"{decoded[0]} - {decoded[1]}"
        >>> Join().apply(["a", "b"])
        Text(value='a - b')
    """

    input_type: ClassVar[Any] = Any

    def apply_decoded(self, decoded: Any) -> Any:
        raise NotImplementedError

    def _dispatch(self, payload: PayloadValue) -> Any:
        if not has_structured_view(payload):
            raise UnsupportedInput()
        return self.apply_decoded(validate_strict(self.input_type, as_structured(payload)))
