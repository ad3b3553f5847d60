from __future__ import annotations

from typing import Optional, Protocol


class SecretsProvider(Protocol):
    """Resolves a ``(vault_ref, secret_key)`` reference from client config to a secret value.

    Returns None when the secret does not exist.
    """

    def get_secret(self, vault_ref: str, secret_key: str) -> Optional[str]:
        ...
