"""
Remote algorithm invocation.

Example:
    >>> from algoclient import Algorithmia
    >>> client = Algorithmia.client("111112222233333444445555566")
    >>> moving_avg = client.algo(("timeseries/SimpleMovingAverage", "0.1"))
    >>> response = moving_avg.pipe(([0, 1, 2, 3, 15, 4, 5, 6, 7], 3))
    >>> response.decode(list[float])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import httpx

from algoclient.algo.codec import APPLICATION_JSON, decode_response, encode_payload
from algoclient.algo.version import Version
from algoclient.core.contracts import ResponseEnvelope, to_payload
from algoclient.core.exceptions import RemoteError
from algoclient.core.logger import get_logger
from algoclient.transport.http import HttpClient

logger = get_logger(__name__)

ALGORITHM_BASE_PATH = "v1/algo"
ALGO_URI_PREFIX = "algo://"

AlgoRefLike = Union[str, Tuple[str, Union[str, Version, None]], "AlgoRef"]


@dataclass(frozen=True)
class AlgoRef:
    """Algorithm path such as ``user/algo`` or ``user/algo/1.2.3``."""

    path: str

    @classmethod
    def parse(cls, ref: AlgoRefLike) -> "AlgoRef":
        if isinstance(ref, AlgoRef):
            return ref
        if isinstance(ref, tuple):
            name, version = ref
            parsed = Version.parse(version)
            if parsed.is_latest:
                return cls(path=name)
            return cls(path=f"{name}/{parsed}")
        return cls(path=ref)


class AlgoOptions(dict):
    """Query parameters altering an algorithm call (e.g. ``timeout``, ``stdout``)."""

    def timeout(self, seconds: int) -> None:
        self["timeout"] = str(seconds)

    def enable_stdout(self) -> None:
        """Has no effect unless authenticated as the owner of the algorithm."""
        self["stdout"] = "true"


class Algorithm:
    def __init__(self, client: HttpClient, algo_ref: AlgoRefLike):
        path = AlgoRef.parse(algo_ref).path
        if path.startswith(ALGO_URI_PREFIX):
            path = path[len(ALGO_URI_PREFIX):]
        elif path.startswith("/"):
            path = path[1:]

        self.client = client
        self.path = path
        self.options = AlgoOptions()

    def to_url(self) -> str:
        return self.client.url(f"{ALGORITHM_BASE_PATH}/{self.path}")

    def to_algo_uri(self) -> str:
        return f"{ALGO_URI_PREFIX}{self.path}"

    def pipe(self, input_data: Any) -> ResponseEnvelope:
        """
        Call the algorithm; the Content-Type follows the payload shape.

        - str (Text)                        -> text/plain
        - bytes (Binary)                    -> application/octet-stream
        - anything else (Structured)        -> application/json

        To send a string as JSON, wrap it in ``Structured`` or use ``pipe_json``.
        A previous response's ``result`` can be passed as-is to chain calls.
        """
        body, content_type = encode_payload(to_payload(input_data))
        return self._decode(self.pipe_as(body, content_type))

    def pipe_json(self, json_input: str) -> ResponseEnvelope:
        """Call the algorithm with already-serialized JSON text."""
        return self._decode(self.pipe_as(json_input.encode("utf-8"), APPLICATION_JSON))

    def pipe_as(self, input_data: bytes, content_type: str) -> httpx.Response:
        """Call the algorithm with an explicit Content-Type and return the raw response."""
        params: Optional[Dict[str, str]] = dict(self.options) if self.options else None
        return self.client.request(
            "POST",
            self.to_url(),
            context=f"calling algorithm '{self.to_algo_uri()}'",
            params=params,
            headers={"Content-Type": content_type},
            content=input_data,
        )

    def _decode(self, res: httpx.Response) -> ResponseEnvelope:
        if not res.is_success:
            raise RemoteError.from_json_or_status(res.text, res.status_code)
        envelope = decode_response(res.content)
        logger.debug(
            f"{self.to_algo_uri()} completed in {envelope.duration}s "
            f"(content_type={envelope.content_type})"
        )
        return envelope

    def set_options(self, options: AlgoOptions) -> "Algorithm":
        self.options = options
        return self

    def timeout(self, seconds: int) -> "Algorithm":
        self.options.timeout(seconds)
        return self

    def enable_stdout(self) -> "Algorithm":
        self.options.enable_stdout()
        return self

    def __repr__(self) -> str:
        return f"Algorithm({self.to_algo_uri()!r})"
