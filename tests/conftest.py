"""
Configuration des tests pytest.
"""
import os
import sys
from typing import Callable, Iterable, List, Optional, Union

import httpx
import pytest

# Ajoute src au path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


class ChunkedStream(httpx.AsyncByteStream):
    """Body de réponse livré en plusieurs reads réseau (ou qui échoue)."""

    def __init__(self, chunks: Iterable[Union[bytes, Exception]]):
        self._chunks = list(chunks)
        self.reads = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self._chunks:
            if isinstance(chunk, Exception):
                raise chunk
            self.reads += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Fabrique de réponses upstream en streaming."""

    def _make(
        chunks: List[Union[bytes, Exception]],
        status_code: int = 200,
        content_type: Optional[str] = "text/event-stream"
    ) -> httpx.Response:
        headers = {"content-type": content_type} if content_type else {}
        return httpx.Response(status_code, headers=headers, stream=ChunkedStream(chunks))

    return _make


@pytest.fixture
def sample_chat_body():
    """Fixture pour un corps de chat entrant."""
    return {
        "inputCode": "Bonjour, comment ça va?",
        "model": "mistral",
        "systemPrompt": "Tu es un assistant utile.",
        "jsonMode": False
    }
