from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional


@dataclass(frozen=True)
class ClientAuth:
    kind: Literal["none", "simple", "bearer"] = "none"

    api_key: Optional[str] = None
    bearer_token: Optional[str] = None


@dataclass(frozen=True)
class ClientConnection:
    """Immutable connection settings shared by every handle created from one client."""

    base_url: str
    timeout_seconds: float
    headers: Dict[str, str] = field(default_factory=dict)
    auth: ClientAuth = field(default_factory=ClientAuth)
    user_agent: Optional[str] = None
