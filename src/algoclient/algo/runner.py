from __future__ import annotations

import json
import time
from typing import Any, Dict, Iterable, Optional, TextIO

from algoclient.algo.codec import decode_request, encode_error, encode_response
from algoclient.algo.entrypoint import EntryPoint
from algoclient.core.exceptions import AlgoClientException
from algoclient.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_OUTPUT_PATH = "/tmp/algoout"


class HandlerRunner:
    """
    Serves an EntryPoint over line-delimited JSON.

    Each input line is a request ``{"content_type": "text"|"json"|"binary", "data": ...}``;
    for each one a single response line is written to the output (the named pipe
    at ``output_path`` unless a stream is given) and flushed:

        {"result": ..., "metadata": {"content_type": ..., "duration": ...}}
        {"error": "...", "stacktrace": "..."}

    A failing request is reported on the output and the loop moves on.
    """

    def __init__(
        self,
        entrypoint: EntryPoint,
        *,
        output: Optional[TextIO] = None,
        output_path: str = DEFAULT_OUTPUT_PATH,
    ):
        self.entrypoint = entrypoint
        self.output_path = output_path
        self._output = output

    def handle_line(self, line: str) -> Dict[str, Any]:
        start = time.perf_counter()
        try:
            payload = decode_request(line)
            result = self.entrypoint.apply(payload)
        except Exception as exc:
            level = "warning" if isinstance(exc, AlgoClientException) else "error"
            getattr(logger, level)(f"{type(self.entrypoint).__name__} failed: {exc}")
            return encode_error(exc)
        return encode_response(result, time.perf_counter() - start)

    def serve(self, lines: Iterable[str]) -> int:
        """Process every non-blank line; returns the number of requests handled."""
        handled = 0
        output = self._output
        owns_output = output is None
        if output is None:
            output = open(self.output_path, "w", encoding="utf-8")
        try:
            for line in lines:
                if not line.strip():
                    continue
                response = self.handle_line(line)
                output.write(json.dumps(response) + "\n")
                output.flush()
                handled += 1
        finally:
            if owns_output:
                output.close()
        logger.info(f"Handled {handled} request(s)")
        return handled
