from __future__ import annotations

import os
from typing import Annotated, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, PositiveFloat, model_validator

DEFAULT_API_BASE_URL = "https://api.algorithmia.com"

API_KEY_ENV = "ALGORITHMIA_API_KEY"
API_BASE_URL_ENV = "ALGORITHMIA_API"


# -----------------
# Authentication
# -----------------


class AuthNoneConfig(BaseModel):
    kind: Literal["none"] = "none"


class SecretRefConfig(BaseModel):
    """Reference to a secret resolved by a SecretsProvider.

    For the environment provider this maps to the variable ``<VAULT_REF>_<SECRET_KEY>``.
    """

    vault_ref: str
    secret_key: str


class AuthSimpleConfig(BaseModel):
    """API key auth, sent as ``Authorization: Simple <key>``."""

    kind: Literal["simple"] = "simple"

    api_key: Optional[str] = None
    api_key_secret_ref: Optional[SecretRefConfig] = None

    @model_validator(mode="after")
    def _validate_secret_source(self) -> "AuthSimpleConfig":
        if self.api_key is None and self.api_key_secret_ref is None:
            raise ValueError("simple auth requires either api_key or api_key_secret_ref")
        return self


class AuthBearerConfig(BaseModel):
    kind: Literal["bearer"] = "bearer"

    bearer_token: str


ClientAuthConfig = Annotated[
    Union[
        AuthNoneConfig,
        AuthSimpleConfig,
        AuthBearerConfig,
    ],
    Field(discriminator="kind"),
]


# -----------------
# Client
# -----------------


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_API_BASE_URL
    # Algorithm calls block until the algorithm finishes; keep the default generous.
    timeout_seconds: PositiveFloat = 300.0
    headers: Dict[str, str] = Field(default_factory=dict)
    user_agent: Optional[str] = None

    auth: ClientAuthConfig = Field(default_factory=AuthNoneConfig)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from ALGORITHMIA_API_KEY / ALGORITHMIA_API."""
        env = environ if environ is not None else os.environ
        data: Dict[str, object] = {}

        base_url = env.get(API_BASE_URL_ENV)
        if base_url:
            data["base_url"] = base_url

        api_key = env.get(API_KEY_ENV)
        if api_key:
            data["auth"] = {"kind": "simple", "api_key": api_key}

        return cls.model_validate(data)
