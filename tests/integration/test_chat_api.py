"""Tests d'intégration: API HTTP (chat, analyse média, health).

L'upstream est simulé par httpx.MockTransport: aucun accès réseau.
"""

from __future__ import annotations

import io
import json
from typing import AsyncGenerator, List
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi import FastAPI
from PIL import Image

from pollinations_relay.config.settings import Settings, UpstreamConfig
from pollinations_relay.core.exceptions import MediaError
from pollinations_relay.main import create_app
from pollinations_relay.proxy.client import UpstreamClient

pytestmark = pytest.mark.anyio


class FakeUpstream:
    """Upstream simulé: enregistre les requêtes et rejoue une réponse."""

    def __init__(self):
        self.requests: List[dict] = []
        self.response = httpx.Response(200, text="")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        return self.response


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def preprocessor() -> MagicMock:
    mock = MagicMock()
    mock.resize.return_value = b"resized"
    mock.extract_frames.return_value = [b"f1", b"f2"]
    return mock


@pytest.fixture
def app(upstream: FakeUpstream, preprocessor: MagicMock) -> FastAPI:
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    settings = Settings(upstream=UpstreamConfig(url="https://upstream.test/", default_model="mistral"))
    client = UpstreamClient(url=settings.upstream.url, http_client=http)
    return create_app(settings=settings, upstream_client=client, preprocessor=preprocessor)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _sse(*payloads: str) -> httpx.Response:
    body = "".join(f"data: {payload}\n\n" for payload in payloads)
    return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=body.encode("utf-8"))


async def test_chat_streams_sse_tokens(upstream, async_client):
    upstream.response = _sse("Bon", "jour", "[DONE]", "ignoré")

    resp = await async_client.post("/api/chat", json={"inputCode": "Salut"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Bonjour"
    payload = upstream.requests[0]
    assert payload["messages"] == [{"role": "user", "content": "Salut"}]
    assert payload["model"] == "mistral"
    assert 0 <= payload["seed"] < 100000


async def test_chat_json_mode_and_system_prompt(upstream, async_client):
    upstream.response = _sse('{"content":"hello"}', "[DONE]")

    resp = await async_client.post("/api/chat", json={
        "inputCode": "Dis bonjour",
        "model": "openai",
        "systemPrompt": "Réponds en anglais.",
        "jsonMode": True,
    })

    assert resp.text == "hello"
    payload = upstream.requests[0]
    assert payload["messages"][0] == {"role": "system", "content": "Réponds en anglais."}
    assert payload["messages"][1]["role"] == "user"
    assert payload["model"] == "openai"
    assert payload["jsonMode"] is True


async def test_chat_buffered_reply(upstream, async_client):
    upstream.response = httpx.Response(200, text="plain reply")

    resp = await async_client.post("/api/chat", json={"inputCode": "Salut"})

    assert resp.status_code == 200
    assert resp.text == "plain reply"


async def test_chat_upstream_error_is_generic_failure(upstream, async_client):
    upstream.response = httpx.Response(500, text="quota exceeded")

    resp = await async_client.post("/api/chat", json={"inputCode": "Salut"})

    assert resp.status_code == 500
    error = resp.json()["error"]
    assert error == {"code": "upstream_status_error", "message": "Error"}
    assert "quota exceeded" not in resp.text


async def test_chat_connection_error(app, async_client):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    app.state.upstream_client = UpstreamClient(url="https://upstream.test/", http_client=http)

    resp = await async_client.post("/api/chat", json={"inputCode": "Salut"})

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "connection_error"


async def test_chat_empty_prompt_rejected(upstream, async_client):
    resp = await async_client.post("/api/chat", json={"inputCode": ""})

    assert resp.status_code == 422
    assert upstream.requests == []


async def test_chat_whitespace_prompt_rejected(upstream, async_client):
    resp = await async_client.post("/api/chat", json={"inputCode": "   "})

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "invalid_request"
    assert upstream.requests == []


async def test_analyze_image(upstream, preprocessor, async_client):
    upstream.response = httpx.Response(200, text="Un chat roux.")
    buffer = io.BytesIO()
    Image.new("RGB", (10, 10)).save(buffer, format="PNG")

    resp = await async_client.post(
        "/api/analyze/image",
        files={"file": ("chat.png", buffer.getvalue(), "image/png")},
        data={"prompt": "Décris l'image", "max_width": "512"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"result": "Un chat roux."}
    preprocessor.resize.assert_called_once_with(buffer.getvalue(), 512, 768, "JPEG")
    assert upstream.requests[0]["model"] == "openai"


async def test_analyze_image_media_error(preprocessor, async_client):
    preprocessor.resize.side_effect = MediaError("Erreur de chargement de l'image", media_type="image")

    resp = await async_client.post(
        "/api/analyze/image",
        files={"file": ("x.png", b"garbage", "image/png")},
        data={"prompt": "Décris"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "media_error"
    assert "chargement" not in resp.text


async def test_analyze_video(upstream, preprocessor, async_client):
    upstream.response = httpx.Response(200, text="Une voiture passe.")

    resp = await async_client.post(
        "/api/analyze/video",
        files={"file": ("clip.mp4", b"video-bytes", "video/mp4")},
        data={"prompt": "Résume", "frame_interval": "2", "model": "openai-large"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"result": "Une voiture passe."}
    preprocessor.extract_frames.assert_called_once_with(b"video-bytes", 2.0, 768, 768)
    content = upstream.requests[0]["messages"][0]["content"]
    assert len(content) == 3
    assert upstream.requests[0]["model"] == "openai-large"


async def test_health(async_client):
    resp = await async_client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["upstream_url"] == "https://upstream.test/"
    assert body["default_model"] == "mistral"
