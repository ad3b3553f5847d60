"""
Client entry point.

Example:
    >>> from algoclient import Algorithmia
    >>> client = Algorithmia.client("111112222233333444445555566")
    >>> client.algo("anowell/Pinky/0.1").pipe("Hello").into_string()
    >>> for entry in client.dir("data://.my/photos").list():
    ...     print(entry)
"""

from __future__ import annotations

from typing import Optional

import httpx

from algoclient.algo.algorithm import Algorithm, AlgoRefLike
from algoclient.core.logger import get_logger
from algoclient.core.secrets_provider import SecretsProvider
from algoclient.data.dir import DataDir
from algoclient.data.file import DataFile
from algoclient.models.client_config import (
    DEFAULT_API_BASE_URL,
    AuthNoneConfig,
    AuthSimpleConfig,
    ClientConfig,
)
from algoclient.transport.http import HttpClient
from algoclient.wiring.client_wiring import build_client_connection

logger = get_logger(__name__)


class Algorithmia:
    """Factory for algorithm and data handles sharing one HTTP client."""

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client

    @classmethod
    def client(
        cls,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        transport: Optional[httpx.Client] = None,
    ) -> "Algorithmia":
        """Client with an optional API key; without one, calls are unauthenticated."""
        cfg = ClientConfig(
            base_url=base_url or DEFAULT_API_BASE_URL,
            auth=AuthSimpleConfig(api_key=api_key) if api_key else AuthNoneConfig(),
        )
        return cls.from_config(cfg, transport=transport)

    @classmethod
    def from_config(
        cls,
        cfg: ClientConfig,
        secrets_provider: Optional[SecretsProvider] = None,
        *,
        transport: Optional[httpx.Client] = None,
    ) -> "Algorithmia":
        connection = build_client_connection(cfg, secrets_provider=secrets_provider)
        logger.debug(f"Client for {connection.base_url} (auth={connection.auth.kind})")
        return cls(HttpClient(connection, client=transport))

    def algo(self, algo_ref: AlgoRefLike) -> Algorithm:
        return Algorithm(self.http_client, algo_ref)

    def dir(self, path: str) -> DataDir:
        return DataDir(self.http_client, path)

    def file(self, path: str) -> DataFile:
        return DataFile(self.http_client, path)

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "Algorithmia":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # type: ignore
        self.close()
        return False
