from __future__ import annotations

from typing import Optional

from algoclient.core.secrets_provider import SecretsProvider
from algoclient.models.client_config import ClientConfig
from algoclient.transport.types import ClientAuth, ClientConnection


def _auth_from_config(cfg: ClientConfig, secrets_provider: Optional[SecretsProvider] = None) -> ClientAuth:
    auth = cfg.auth
    kind = auth.kind

    if kind == "none":
        return ClientAuth(kind="none")

    if kind == "simple":
        api_key = auth.api_key
        if api_key is None and auth.api_key_secret_ref is not None:
            if secrets_provider is None:
                raise ValueError("api_key_secret_ref provided but no secrets_provider was passed")
            api_key = secrets_provider.get_secret(
                auth.api_key_secret_ref.vault_ref,
                auth.api_key_secret_ref.secret_key,
            )
            if api_key is None:
                raise ValueError(
                    "secrets_provider returned None for api_key_secret_ref="
                    f"{auth.api_key_secret_ref.vault_ref!r}/{auth.api_key_secret_ref.secret_key!r}"
                )
        return ClientAuth(kind="simple", api_key=api_key)

    if kind == "bearer":
        return ClientAuth(kind="bearer", bearer_token=auth.bearer_token)

    raise ValueError(f"Unsupported auth kind: {kind!r}")


def build_client_connection(
    cfg: ClientConfig,
    *,
    secrets_provider: Optional[SecretsProvider] = None,
) -> ClientConnection:
    # This wiring module is the only layer allowed to read the pydantic config;
    # everything downstream works with the frozen transport types.
    return ClientConnection(
        base_url=cfg.base_url,
        timeout_seconds=float(cfg.timeout_seconds),
        headers=dict(cfg.headers),
        auth=_auth_from_config(cfg, secrets_provider=secrets_provider),
        user_agent=cfg.user_agent,
    )
