from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

_NUMERIC = re.compile(r"^\d+(\.\d+){0,2}$")

VersionKind = Literal["latest", "numeric", "hash"]


@dataclass(frozen=True)
class Version:
    """Algorithm version: latest, a (partial) semantic version, or a build hash."""

    kind: VersionKind = "latest"
    numbers: Tuple[int, ...] = ()
    hash: Optional[str] = None

    @classmethod
    def latest(cls) -> "Version":
        return cls()

    @classmethod
    def parse(cls, value: Union[str, "Version", None]) -> "Version":
        if isinstance(value, Version):
            return value
        text = (value or "").strip()
        if text in ("", "latest"):
            return cls.latest()
        if _NUMERIC.match(text):
            return cls(kind="numeric", numbers=tuple(int(p) for p in text.split(".")))
        return cls(kind="hash", hash=text)

    @property
    def is_latest(self) -> bool:
        return self.kind == "latest"

    def __str__(self) -> str:
        if self.kind == "numeric":
            return ".".join(str(n) for n in self.numbers)
        if self.kind == "hash":
            return self.hash or ""
        return "latest"
