from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, NonNegativeInt

from algoclient.data.acl import DataAcl


# -----------------
# Directory listing
# -----------------


class FolderItem(BaseModel):
    name: str
    acl: Optional[DataAcl] = None


class FileItem(BaseModel):
    filename: str
    size: NonNegativeInt
    last_modified: datetime


class DirectoryShow(BaseModel):
    """One page of a directory listing; ``marker`` is set when more pages remain."""

    acl: Optional[DataAcl] = None
    folders: Optional[List[FolderItem]] = None
    files: Optional[List[FileItem]] = None
    marker: Optional[str] = None


# -----------------
# Directory deletion
# -----------------


class DirectoryDeleted(BaseModel):
    # Some backing stores report success for files that did not exist.
    deleted: NonNegativeInt


class DeletedResponse(BaseModel):
    result: DirectoryDeleted
