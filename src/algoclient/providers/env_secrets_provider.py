from __future__ import annotations

import os
import re
from typing import Mapping, Optional

from algoclient.core.secrets_provider import SecretsProvider

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


class EnvSecretsProvider(SecretsProvider):
    """Secrets provider that reads secrets from environment variables.

    A reference ``(vault_ref="algorithmia", secret_key="api-key")`` resolves to
    the variable ``ALGORITHMIA_API_KEY``.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    @staticmethod
    def variable_name(vault_ref: str, secret_key: str) -> str:
        return _NON_ALNUM.sub("_", f"{vault_ref}_{secret_key}").upper()

    def get_secret(self, vault_ref: str, secret_key: str) -> Optional[str]:
        value = self._environ.get(self.variable_name(vault_ref, secret_key))
        return value or None
