import asyncio

import httpx
import pytest

from deploytree import engine_client
from deploytree.engine_client import EngineClient, EngineError


FILES = [
    {"deployment_id": "dep_1", "file_id": 1, "file_path": "index.html", "mime_type": "text/html"},
    {"deployment_id": "dep_1", "file_id": 2, "file_path": "assets/app.js", "mime_type": "text/javascript", "extra": 1},
]


def _fake_client(responses, calls):
    class _FakeAsyncClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, url, headers):
            calls.append((url, headers))
            result = responses.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

    return _FakeAsyncClient


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    monkeypatch.setattr(engine_client, "BACKOFF_S", 0)


def test_list_deployment_files_parses_entries(monkeypatch):
    calls = []
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client([httpx.Response(200, json=FILES)], calls))

    client = EngineClient("http://engine.test/", "token-1")
    files = asyncio.run(client.list_deployment_files("site_1", "dep_1"))

    assert [f.path for f in files] == ["index.html", "assets/app.js"]
    assert files[1].mime_type == "text/javascript"
    url, headers = calls[0]
    assert url == "http://engine.test/site/site_1/deployments/dep_1/files"
    assert headers["Authorization"] == "Bearer token-1"


def test_no_authorization_header_without_token(monkeypatch):
    calls = []
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client([httpx.Response(200, json=[])], calls))

    files = asyncio.run(EngineClient("http://engine.test").list_deployment_files("s", "d"))

    assert files == []
    assert "Authorization" not in calls[0][1]


def test_network_errors_are_retried(monkeypatch):
    calls = []
    responses = [httpx.ConnectError("refused"), httpx.ReadTimeout("slow"), httpx.Response(200, json=FILES)]
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client(responses, calls))

    files = asyncio.run(EngineClient("http://engine.test").list_deployment_files("s", "d"))

    assert len(files) == 2
    assert len(calls) == 3


def test_network_errors_exhaust_retries(monkeypatch):
    calls = []
    responses = [httpx.ConnectError("refused") for _ in range(engine_client.MAX_ATTEMPTS)]
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client(responses, calls))

    with pytest.raises(EngineError) as excinfo:
        asyncio.run(EngineClient("http://engine.test").list_deployment_files("s", "d"))

    assert excinfo.value.status == 504
    assert len(calls) == engine_client.MAX_ATTEMPTS


@pytest.mark.parametrize(
    "response, status",
    [
        (httpx.Response(404, json={"error": "nope"}), 404),
        (httpx.Response(401), 502),
        (httpx.Response(500, text="boom"), 502),
        (httpx.Response(200, text="not json"), 502),
        (httpx.Response(200, json={"files": []}), 502),
        (httpx.Response(200, json=[{"file_path": "a"}]), 502),
    ],
)
def test_error_statuses_are_mapped(monkeypatch, response, status):
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client([response], []))

    with pytest.raises(EngineError) as excinfo:
        asyncio.run(EngineClient("http://engine.test").list_deployment_files("s", "d"))

    assert excinfo.value.status == status


def test_from_env(monkeypatch):
    monkeypatch.setenv("DEPLOYTREE_ENGINE_URL", "http://engine.test/")
    monkeypatch.setenv("DEPLOYTREE_ENGINE_TOKEN", "t")
    monkeypatch.setenv("DEPLOYTREE_ENGINE_TIMEOUT", "2.5")

    client = EngineClient.from_env()

    assert client.base_url == "http://engine.test"
    assert client.token == "t"
    assert client.timeout_s == 2.5


def test_from_env_requires_url(monkeypatch):
    monkeypatch.delenv("DEPLOYTREE_ENGINE_URL", raising=False)

    with pytest.raises(EngineError) as excinfo:
        EngineClient.from_env()

    assert excinfo.value.status == 503


def test_ids_are_quoted_as_single_path_segments(monkeypatch):
    calls = []
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client([httpx.Response(200, json=[])], calls))

    asyncio.run(EngineClient("http://engine.test").list_deployment_files("other?x=", "d/../e"))

    assert calls[0][0] == "http://engine.test/site/other%3Fx%3D/deployments/d%2F..%2Fe/files"


@pytest.mark.parametrize("site_id, deployment_id", [("..", "d"), ("s", "."), ("s", "..")])
def test_dot_segment_ids_are_rejected_without_a_request(monkeypatch, site_id, deployment_id):
    calls = []
    monkeypatch.setattr(engine_client.httpx, "AsyncClient", _fake_client([], calls))

    with pytest.raises(EngineError) as excinfo:
        asyncio.run(EngineClient("http://engine.test").list_deployment_files(site_id, deployment_id))

    assert excinfo.value.status == 404
    assert calls == []
