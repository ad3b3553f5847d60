"""
Data URIs and the behaviour shared by data directory and file handles.

Paths are stored as ``<protocol>/<rest>``:

    data://anowell/foo   -> data/anowell/foo
    dropbox://anowell    -> dropbox/anowell
    /anowell/foo         -> data/anowell/foo
    .my/foo              -> data/.my/foo
    data://              -> data
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Mapping, Optional

import httpx
import pytz

from algoclient.core.exceptions import NotFound, RemoteError
from algoclient.transport.http import HttpClient

if TYPE_CHECKING:
    from algoclient.data.dir import DataDir

DATA_BASE_PATH = "v1/connector"
DEFAULT_PROTOCOL = "data"
DATA_TYPE_HEADER = "X-Data-Type"


def parse_data_uri(uri: str) -> str:
    if "://" in uri:
        protocol, rest = uri.split("://", 1)
    else:
        protocol, rest = DEFAULT_PROTOCOL, uri
    rest = rest.lstrip("/")
    return f"{protocol}/{rest}" if rest else protocol


def path_to_data_uri(path: str) -> str:
    protocol, _, rest = path.partition("/")
    return f"{protocol}://{rest}"


def parent_path(path: str) -> Optional[str]:
    """Parent of a normalised path; None at the protocol root."""
    trimmed = path.rstrip("/")
    if "/" not in trimmed:
        return None
    return trimmed.rsplit("/", 1)[0]


def base_name(path: str) -> Optional[str]:
    trimmed = path.rstrip("/")
    if "/" not in trimmed:
        return None
    return trimmed.rsplit("/", 1)[1]


@dataclass(frozen=True)
class DataMetadata:
    data_type: Optional[str]
    content_length: Optional[int]
    last_modified: Optional[datetime]


def parse_headers(headers: Mapping[str, str]) -> DataMetadata:
    """Read the data API's X-Data-Type, Content-Length and Last-Modified headers."""
    content_length = headers.get("Content-Length")
    last_modified = headers.get("Last-Modified")

    length: Optional[int] = None
    if content_length is not None and content_length.strip().isdigit():
        length = int(content_length)

    modified: Optional[datetime] = None
    if last_modified:
        try:
            modified = parsedate_to_datetime(last_modified)
        except (TypeError, ValueError):
            modified = None
    if modified is not None:
        if modified.tzinfo is None:
            modified = pytz.UTC.localize(modified)
        else:
            modified = modified.astimezone(pytz.UTC)

    return DataMetadata(
        data_type=headers.get(DATA_TYPE_HEADER),
        content_length=length,
        last_modified=modified,
    )


class HasDataPath:
    """A data API path plus the client used to reach it. Handles hold no mutable state."""

    def __init__(self, client: HttpClient, path: str):
        self.client = client
        self.path = parse_data_uri(path)

    def to_url(self) -> str:
        return self.client.url(f"{DATA_BASE_PATH}/{self.path}")

    def to_data_uri(self) -> str:
        return path_to_data_uri(self.path)

    def parent(self) -> Optional["DataDir"]:
        from algoclient.data.dir import DataDir

        parent = parent_path(self.path)
        if parent is None:
            return None
        return DataDir(self.client, path_to_data_uri(parent))

    def basename(self) -> Optional[str]:
        return base_name(self.path)

    def exists(self) -> bool:
        res = self.client.request("HEAD", self.to_url(), context=f"checking '{self.to_data_uri()}'")
        if res.status_code == 404:
            return False
        self.raise_for_status(res)
        return True

    def raise_for_status(self, res: httpx.Response) -> None:
        """2xx passes; 404 -> NotFound; anything else -> RemoteError from the body or status."""
        if res.is_success:
            return
        if res.status_code == 404:
            raise NotFound(self.to_url())
        raise RemoteError.from_json_or_status(res.text, res.status_code)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HasDataPath):
            return NotImplemented
        return type(self) is type(other) and self.path == other.path

    def __hash__(self) -> int:
        return hash((type(self), self.path))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_data_uri()!r})"
