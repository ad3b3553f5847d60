from __future__ import annotations

from typing import Dict

from algoclient.transport.types import ClientAuth


def build_auth_headers(auth: ClientAuth) -> Dict[str, str]:
    if auth.kind == "none":
        return {}

    if auth.kind == "simple":
        if not auth.api_key:
            raise ValueError("simple auth requires api_key")
        return {"Authorization": f"Simple {auth.api_key}"}

    if auth.kind == "bearer":
        if not auth.bearer_token:
            raise ValueError("bearer auth requires bearer_token")
        return {"Authorization": f"Bearer {auth.bearer_token}"}

    raise ValueError(f"Unsupported auth kind: {auth.kind!r}")
