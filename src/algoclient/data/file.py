"""
Data files.

Example:
    >>> client = Algorithmia.client("111112222233333444445555566")
    >>> my_file = client.file(".my/my_dir/some_filename")
    >>> my_file.put("file_contents")
    >>> with my_file.get() as data:
    ...     print(data.size, data.into_string())
"""

from __future__ import annotations

from datetime import datetime
from typing import IO, Iterator, Optional, Union

import httpx
import pytz

from algoclient.core.exceptions import DecodeError, IoError, UnexpectedDataType
from algoclient.core.logger import get_logger
from algoclient.data.path import HasDataPath, parse_headers

logger = get_logger(__name__)

# Reported when the API omits Last-Modified.
DEFAULT_LAST_MODIFIED = pytz.UTC.localize(datetime(2015, 3, 14, 8, 0, 0))

FileBody = Union[bytes, str, IO[bytes]]


class FileData:
    """Downloaded file: size and last-modified metadata plus a lazily read body.

    The body is streamed from the open response; use as a context manager (or
    call ``close``) when not reading it to the end.
    """

    def __init__(self, size: int, last_modified: datetime, response: httpx.Response, *, context: str):
        self.size = size
        self.last_modified = last_modified
        self._response = response
        self._context = context

    def iter_bytes(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        try:
            yield from self._response.iter_bytes(chunk_size)
        except httpx.HTTPError as exc:
            raise IoError(self._context) from exc

    def read(self) -> bytes:
        try:
            return self._response.read()
        except httpx.HTTPError as exc:
            raise IoError(self._context) from exc
        finally:
            self._response.close()

    def into_bytes(self) -> bytes:
        return self.read()

    def into_string(self) -> str:
        data = self.read()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("file contents as utf-8", details=str(exc)) from exc

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "FileData":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # type: ignore
        self.close()
        return False


class DataFile(HasDataPath):
    def put(self, body: FileBody) -> None:
        """Write ``body`` (bytes, text encoded as UTF-8, or a binary file object)."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        res = self.client.request(
            "PUT",
            self.to_url(),
            context=f"writing file '{self.to_data_uri()}'",
            content=body,
        )
        self.raise_for_status(res)

    def get(self) -> FileData:
        context = f"downloading file '{self.to_data_uri()}'"
        res = self.client.request("GET", self.to_url(), context=context, stream=True)

        if not res.is_success:
            try:
                res.read()
            except httpx.HTTPError as exc:
                raise IoError(context) from exc
            finally:
                res.close()
            self.raise_for_status(res)

        metadata = parse_headers(res.headers)
        if metadata.data_type == "directory":
            res.close()
            raise UnexpectedDataType("file", "directory")

        return FileData(
            size=metadata.content_length or 0,
            last_modified=metadata.last_modified or DEFAULT_LAST_MODIFIED,
            response=res,
            context=context,
        )

    def delete(self) -> None:
        res = self.client.request("DELETE", self.to_url(), context=f"deleting file '{self.to_data_uri()}'")
        self.raise_for_status(res)
        logger.debug(f"Deleted {self.to_data_uri()}")
