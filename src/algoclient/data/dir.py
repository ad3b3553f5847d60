"""
Data directories.

Example:
    >>> client = Algorithmia.client("111112222233333444445555566")
    >>> my_dir = client.dir(".my/my_dir")
    >>> my_dir.create(ReadAcl.PRIVATE)
    >>> my_dir.put_file("/path/to/file")
    >>> for entry in my_dir.list():
    ...     print(entry)
"""

from __future__ import annotations

import json
import os
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Optional, Type, TypeVar, Union

from pydantic import ValidationError

from algoclient.core.exceptions import (
    DecodeError,
    InvalidPath,
    IoError,
    UnexpectedDataType,
)
from algoclient.core.logger import get_logger
from algoclient.data.acl import DataAcl, ReadAcl
from algoclient.data.file import DataFile
from algoclient.data.path import DATA_TYPE_HEADER, HasDataPath
from algoclient.data.types import (
    DeletedResponse,
    DirectoryDeleted,
    DirectoryShow,
    FileItem,
    FolderItem,
)

logger = get_logger(__name__)

H = TypeVar("H", bound=HasDataPath)


@dataclass(frozen=True)
class DataDirItem:
    dir: "DataDir"


@dataclass(frozen=True)
class DataFileItem:
    file: DataFile
    size: int
    last_modified: datetime


DataItem = Union[DataDirItem, DataFileItem]


def fetch_directory_page(directory: "DataDir", marker: Optional[str] = None) -> DirectoryShow:
    params = {"marker": marker} if marker is not None else None
    res = directory.client.request(
        "GET",
        directory.to_url(),
        context=f"listing directory '{directory.to_data_uri()}'",
        params=params,
    )

    directory.raise_for_status(res)

    data_type = res.headers.get(DATA_TYPE_HEADER)
    if data_type is not None and data_type != "directory":
        raise UnexpectedDataType("directory", data_type)
    try:
        return DirectoryShow.model_validate_json(res.content)
    except ValidationError as exc:
        raise DecodeError("directory listing", details=str(exc)) from exc


class DirectoryListing:
    """
    Lazy iterator over a directory's entries: sub-directories first, then files,
    following the server's continuation ``marker`` across pages.

    At most one page request is issued per ``next()`` and nothing is
    prefetched. A failed page fetch is raised from ``next()``; the listing
    should not be advanced afterwards. Once exhausted it stays exhausted.
    Not safe to share between threads.
    """

    def __init__(self, directory: "DataDir"):
        self.dir = directory
        # ACL of the listed directory, known once the first page is fetched
        self.acl: Optional[DataAcl] = None
        self.marker: Optional[str] = None
        self.pages_fetched = 0
        self._folders: Deque[FolderItem] = deque()
        self._files: Deque[FileItem] = deque()

    def __iter__(self) -> "DirectoryListing":
        return self

    def __next__(self) -> DataItem:
        while True:
            if self._folders:
                folder = self._folders.popleft()
                return DataDirItem(dir=self.dir.child(folder.name, DataDir))

            if self._files:
                f = self._files.popleft()
                return DataFileItem(
                    file=self.dir.child(f.filename, DataFile),
                    size=f.size,
                    last_modified=f.last_modified,
                )

            if self.pages_fetched > 0 and self.marker is None:
                raise StopIteration

            self._fetch_page()

    def _fetch_page(self) -> None:
        page = fetch_directory_page(self.dir, self.marker)
        self.pages_fetched += 1
        self._folders = deque(page.folders or [])
        self._files = deque(page.files or [])
        self.marker = page.marker
        self.acl = page.acl
        logger.debug(
            f"Fetched page {self.pages_fetched} of '{self.dir.to_data_uri()}': "
            f"{len(self._folders)} folder(s), {len(self._files)} file(s), "
            f"more={'yes' if self.marker is not None else 'no'}"
        )


class DataDir(HasDataPath):
    def list(self) -> DirectoryListing:
        return DirectoryListing(self)

    def create(self, acl: Optional[Union[DataAcl, ReadAcl, str]] = None) -> None:
        """Create this directory under its parent; the ACL defaults to ``ReadAcl.MY_ALGORITHMS``."""
        parent = self.parent()
        name = self.basename()
        if parent is None or name is None:
            raise InvalidPath(self.to_data_uri())

        folder = FolderItem(name=name, acl=DataAcl.coerce(acl))
        res = self.client.request(
            "POST",
            parent.to_url(),
            context=f"creating directory '{self.to_data_uri()}'",
            headers={"Content-Type": "application/json"},
            content=json.dumps(folder.model_dump()).encode("utf-8"),
        )
        self.raise_for_status(res)
        logger.debug(f"Created {self.to_data_uri()}")

    def delete(self, force: bool = False) -> DirectoryDeleted:
        """Delete this directory; ``force`` also deletes its contents."""
        params = {"force": "true"} if force else None
        res = self.client.request(
            "DELETE",
            self.to_url(),
            context=f"deleting directory '{self.to_data_uri()}'",
            params=params,
        )
        self.raise_for_status(res)
        try:
            return DeletedResponse.model_validate_json(res.content).result
        except ValidationError as exc:
            raise DecodeError("directory deletion response", details=str(exc)) from exc

    def put_file(self, file_path: Union[str, "os.PathLike[str]"]) -> None:
        """Upload a local file into this directory under its own file name."""
        path = os.fspath(file_path)
        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise IoError(f"opening file for upload '{path}'") from exc

        with fh:
            data_file = self.child(os.path.basename(path), DataFile)
            data_file.put(fh)

    def child(self, name: str, handle_type: Type[H] = DataFile) -> H:  # type: ignore[assignment]
        """Handle for ``name`` inside this directory (no I/O)."""
        uri = self.to_data_uri()
        if uri.endswith("/"):
            new_uri = f"{uri}{name}"
        else:
            new_uri = f"{uri}/{name}"
        return handle_type(self.client, new_uri)
