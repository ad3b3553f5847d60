from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class ReadAcl(Enum):
    """Read access presets for a data directory."""

    PRIVATE = "private"              # Readable only by owner
    MY_ALGORITHMS = "my_algorithms"  # Readable by owner's algorithms (regardless of caller)
    PUBLIC = "public"                # Readable by any user


_READ_PRINCIPALS = {
    ReadAcl.PRIVATE: [],
    ReadAcl.MY_ALGORITHMS: ["algo://.my/*"],
    ReadAcl.PUBLIC: ["user://*"],
}


class DataAcl(BaseModel):
    """ACL indicating permissions for a data directory."""

    read: List[str] = Field(default_factory=list)

    @classmethod
    def from_read_acl(cls, acl: ReadAcl) -> "DataAcl":
        return cls(read=list(_READ_PRINCIPALS[acl]))

    @classmethod
    def default(cls) -> "DataAcl":
        return cls.from_read_acl(ReadAcl.MY_ALGORITHMS)

    @classmethod
    def coerce(cls, acl: Optional[Union["DataAcl", ReadAcl, str]]) -> "DataAcl":
        """Accept a DataAcl, a ReadAcl, its value (``"public"``) or None (the default)."""
        if acl is None:
            return cls.default()
        if isinstance(acl, DataAcl):
            return acl
        return cls.from_read_acl(ReadAcl(acl))
