import json
from unittest.mock import MagicMock

import httpx

from algoclient import Algorithmia
from algoclient.algo.algorithm import Algorithm
from algoclient.data.dir import DataDir
from algoclient.data.file import DataFile
from algoclient.models.client_config import ClientConfig
from algoclient.providers.env_secrets_provider import EnvSecretsProvider


def test_client_with_api_key():
    client = Algorithmia.client("simA123", base_url="https://api.test")
    try:
        assert client.http_client.connection.auth.api_key == "simA123"
        assert client.http_client._client.headers["Authorization"] == "Simple simA123"
        assert client.algo("anowell/Pinky").to_url() == "https://api.test/v1/algo/anowell/Pinky"
    finally:
        client.close()


def test_client_without_api_key_is_unauthenticated():
    with Algorithmia.client(base_url="https://api.test") as client:
        assert client.http_client.connection.auth.kind == "none"
        assert "Authorization" not in client.http_client._client.headers


def test_factories_share_http_client():
    transport = MagicMock(spec=httpx.Client)
    client = Algorithmia.client("k", transport=transport)

    algo = client.algo("a/b")
    my_dir = client.dir(".my/photos")
    my_file = client.file(".my/photos/cat.png")

    assert isinstance(algo, Algorithm)
    assert isinstance(my_dir, DataDir)
    assert isinstance(my_file, DataFile)
    assert algo.client is my_dir.client is my_file.client is client.http_client


def test_from_config_with_secret_ref():
    cfg = ClientConfig(
        base_url="https://api.test",
        auth={"kind": "simple", "api_key_secret_ref": {"vault_ref": "algorithmia", "secret_key": "api_key"}},
    )
    transport = MagicMock(spec=httpx.Client)

    client = Algorithmia.from_config(
        cfg,
        secrets_provider=EnvSecretsProvider({"ALGORITHMIA_API_KEY": "from-env"}),
        transport=transport,
    )

    assert client.http_client.connection.auth.api_key == "from-env"


def test_end_to_end_pipe_through_facade():
    transport = MagicMock(spec=httpx.Client)
    body = {"metadata": {"duration": 0.01, "content_type": "text"}, "result": "Hello world"}
    transport.request.return_value = httpx.Response(200, content=json.dumps(body).encode("utf-8"))

    client = Algorithmia.client("k", base_url="https://api.test", transport=transport)
    response = client.algo("demo/Hello").pipe("world")

    assert response.into_string() == "Hello world"
    assert transport.request.call_args.args == ("POST", "https://api.test/v1/algo/demo/Hello")
