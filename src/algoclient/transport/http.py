from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from algoclient.core.exceptions import HttpError
from algoclient.core.logger import get_logger
from algoclient.transport.auth import build_auth_headers
from algoclient.transport.types import ClientConnection

logger = get_logger(__name__)


def default_user_agent() -> str:
    from algoclient import __version__

    return f"algoclient/{__version__} python-httpx/{httpx.__version__}"


class HttpClient:
    """Thin wrapper around ``httpx.Client`` shared by every algorithm and data handle.

    Holds no per-request state; each call either returns the ``httpx.Response``
    (status handling is left to the caller) or raises ``HttpError`` naming the
    operation that failed.
    """

    def __init__(
        self,
        connection: ClientConnection,
        *,
        client: Optional[httpx.Client] = None,
    ):
        self.connection = connection

        headers = {"User-Agent": connection.user_agent or default_user_agent()}
        headers.update(connection.headers)
        headers.update(build_auth_headers(connection.auth))

        self._client = client or httpx.Client(
            base_url=connection.base_url,
            timeout=connection.timeout_seconds,
            headers=headers,
        )

    @property
    def base_url(self) -> str:
        return self.connection.base_url.rstrip("/")

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        url: str,
        *,
        context: str,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        content: Any = None,
        stream: bool = False,
    ) -> httpx.Response:
        """Issue one request; ``context`` describes the operation for error messages.

        With ``stream=True`` the body is not read; the caller owns the response
        and must close it.
        """
        logger.debug(f"{method} {url} ({context})")
        try:
            if stream:
                req = self._client.build_request(
                    method, url, params=params, headers=headers, content=content
                )
                return self._client.send(req, stream=True)
            return self._client.request(method, url, params=params, headers=headers, content=content)
        except httpx.HTTPError as exc:
            raise HttpError(context) from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # type: ignore
        self.close()
        return False
