from dataclasses import dataclass
from typing import List, Tuple

import pytest
from pydantic import BaseModel

from algoclient.core.contracts import (
    AlgoMetadata,
    Binary,
    ResponseEnvelope,
    Structured,
    Text,
    as_bytes,
    as_structured,
    as_text,
    decode_structured,
    has_structured_view,
    to_payload,
)
from algoclient.core.exceptions import DecodeError, MismatchedContentType, UnexpectedContentType


def _envelope(result, content_type="json"):
    return ResponseEnvelope(metadata=AlgoMetadata(duration=0.1, content_type=content_type), result=result)


@pytest.mark.parametrize("s", ["", "hello", "5", "true", "null", "{\"a\": 1}", "héllo wörld"])
def test_text_round_trips_through_structured_view(s):
    structured = as_structured(Text(s))
    assert structured == s
    assert as_text(Structured(structured)) == s


def test_text_is_never_reinterpreted_as_json():
    assert as_structured(Text("5")) == "5"
    assert as_structured(Text("true")) == "true"


def test_as_text_only_for_json_strings():
    assert as_text(Structured("abc")) == "abc"
    assert as_text(Structured(5)) is None
    assert as_text(Structured(None)) is None
    assert as_text(Binary(b"abc")) is None


def test_binary_has_no_structured_view():
    assert as_structured(Binary(b"\x00\x01")) is None
    assert not has_structured_view(Binary(b"\x00\x01"))
    assert has_structured_view(Structured(None))
    assert has_structured_view(Text(""))


def test_as_bytes_only_for_binary():
    assert as_bytes(Binary(b"xyz")) == b"xyz"
    assert as_bytes(Text("xyz")) is None
    assert as_bytes(Structured([1])) is None


def test_construction_does_not_coerce():
    assert Text("5").value == "5"
    assert Structured("5").value == "5"
    assert Text.kind == "text"
    assert Binary.kind == "binary"
    assert Structured.kind == "json"


def test_to_payload_native_values():
    assert to_payload("hi") == Text("hi")
    assert to_payload(b"hi") == Binary(b"hi")
    assert to_payload(bytearray(b"hi")) == Binary(b"hi")
    assert to_payload(None) == Structured(None)
    assert to_payload([1, 2]) == Structured([1, 2])
    assert to_payload((1, "a")) == Structured([1, "a"])
    assert to_payload({"a": 1}) == Structured({"a": 1})


def test_to_payload_passes_payload_values_through():
    value = Structured("already json")
    assert to_payload(value) is value


def test_to_payload_models_and_dataclasses():
    class Point(BaseModel):
        x: int
        y: int

    @dataclass
    class Pair:
        a: str
        b: int

    assert to_payload(Point(x=1, y=2)) == Structured({"x": 1, "y": 2})
    assert to_payload(Pair("a", 1)) == Structured({"a": "a", "b": 1})


def test_decode_structured_into_typed_value():
    assert decode_structured(Structured([5, 41]), List[int]) == [5, 41]
    assert decode_structured(Structured(["a", 1]), Tuple[str, int]) == ("a", 1)


def test_decode_structured_never_reinterprets_strings():
    with pytest.raises(DecodeError):
        decode_structured(Structured(["5", "41"]), List[int])
    with pytest.raises(DecodeError):
        decode_structured(Text("21"), int)


def test_decode_structured_accepts_ints_for_floats():
    assert decode_structured(Structured([1, 2.5]), List[float]) == [1.0, 2.5]


def test_decode_structured_failure_names_type():
    with pytest.raises(DecodeError) as exc_info:
        decode_structured(Structured("nope"), List[int])
    assert "List[int]" in exc_info.value.context


def test_decode_structured_requires_structured_view():
    with pytest.raises(MismatchedContentType):
        decode_structured(Binary(b"[1]"), List[int])


def test_response_envelope_conversions():
    env = _envelope(Structured([5, 41]))
    assert env.into_json() == [5, 41]
    assert env.into_string() is None
    assert env.into_bytes() is None
    assert env.decode(List[float]) == [5.0, 41.0]
    assert env.as_input() is env.result


def test_response_envelope_decode_keeps_string_as_string():
    env = _envelope(Structured("true"))
    assert env.decode(str) == "true"
    with pytest.raises(DecodeError):
        env.decode(bool)


def test_response_envelope_decode_binary_is_unexpected_content_type():
    env = _envelope(Binary(b"\x00"), content_type="binary")
    with pytest.raises(UnexpectedContentType) as exc_info:
        env.decode(List[int])
    assert exc_info.value.expected == "json"
    assert exc_info.value.actual == "binary"


def test_response_envelope_str():
    assert str(_envelope(Text("hello"), "text")) == "hello"
    assert str(_envelope(Structured({"a": [1]}))) == '{"a": [1]}'
    assert str(_envelope(Binary(b"bytes"), "binary")) == "bytes"


def test_metadata_properties():
    env = ResponseEnvelope(
        metadata=AlgoMetadata(duration=1.5, content_type="text", stdout="out", alerts=["a"]),
        result=Text("x"),
    )
    assert env.duration == 1.5
    assert env.stdout == "out"
    assert env.alerts == ["a"]
    assert env.content_type == "text"
