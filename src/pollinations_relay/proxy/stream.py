"""
Relais streaming: réponse upstream HTTPX -> flux d'octets pour le client.

Trois cas:
- statut non-2xx: erreur levée avant de rendre le flux
- réponse bufferisée (pas de text/event-stream): un seul chunk puis fermeture
- body SSE: un chunk par événement, arrêt sur [DONE]

En jsonMode, chaque chunk est le champ `content` du JSON reçu.
"""
import json
import logging
from contextlib import aclosing
from enum import Enum
from typing import AsyncIterator, Optional

import httpx

from ..core.constants import (
    DONE_SENTINEL,
    SSE_CONTENT_TYPE,
    JSON_CONTENT_FIELD,
    ERROR_PREVIEW_LENGTH,
)
from ..core.exceptions import (
    RelayError,
    UpstreamConnectionError,
    UpstreamStatusError,
    StreamParseError,
)
from ..core.models import ChatRequest
from .client import UpstreamClient
from .sse import aiter_sse_events

logger = logging.getLogger(__name__)


class RelayState(str, Enum):
    """États du flux de sortie. CLOSED et ERRORED sont terminaux."""
    OPEN = "open"
    CLOSED = "closed"
    ERRORED = "errored"


def extract_content(raw: str) -> str:
    """
    Extrait le champ `content` d'un payload JSON.

    Raises:
        StreamParseError: JSON invalide ou champ content absent / non texte
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StreamParseError(
            f"JSON invalide reçu de l'upstream: {e.msg}", raw_preview=raw
        ) from e

    if not isinstance(payload, dict) or not isinstance(payload.get(JSON_CONTENT_FIELD), str):
        raise StreamParseError(
            f"Champ '{JSON_CONTENT_FIELD}' absent ou invalide", raw_preview=raw
        )
    return payload[JSON_CONTENT_FIELD]


class RelayStream:
    """
    Flux d'octets produit à partir d'une réponse upstream.

    S'itère avec `async for`. Une seule itération est possible; une fois
    CLOSED ou ERRORED plus aucun chunk n'est émis. `aclose()` abandonne la
    lecture réseau et ferme la réponse upstream.
    """

    def __init__(self, response: httpx.Response, json_mode: bool = False, buffered: bool = False):
        self._response = response
        self.json_mode = json_mode
        self.buffered = buffered
        self.state = RelayState.OPEN
        self.error: Optional[RelayError] = None
        self.chunks_emitted = 0
        self._iterator: Optional[AsyncIterator[bytes]] = None

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._iterator is None:
            self._iterator = self._produce()
        return self._iterator

    async def aclose(self) -> None:
        """Fermeture côté consommateur."""
        if self._iterator is not None:
            await self._iterator.aclose()
        if self.state is RelayState.OPEN:
            self.state = RelayState.CLOSED
        await self._response.aclose()

    async def _produce(self) -> AsyncIterator[bytes]:
        if self.state is not RelayState.OPEN:
            return
        try:
            chunks = self._relay_buffered() if self.buffered else self._relay_events()
            async with aclosing(chunks):
                async for chunk in chunks:
                    self.chunks_emitted += 1
                    yield chunk
        except RelayError as e:
            self._fail(e)
            raise
        except httpx.HTTPError as e:
            error = UpstreamConnectionError(f"Stream upstream interrompu: {e}")
            self._fail(error)
            raise error from e
        except Exception as e:
            error = RelayError(f"Erreur interne du relais: {e!r}", code="relay_error")
            self._fail(error)
            raise error from e
        finally:
            if self.state is RelayState.OPEN:
                self.state = RelayState.CLOSED
                logger.debug(f"[RELAY] Stream fermé après {self.chunks_emitted} chunk(s)")
            await self._response.aclose()

    async def _relay_events(self) -> AsyncIterator[bytes]:
        async with aclosing(aiter_sse_events(self._response.aiter_bytes())) as events:
            async for event in events:
                if event.data == DONE_SENTINEL:
                    return
                yield self._encode(event.data)

    async def _relay_buffered(self) -> AsyncIterator[bytes]:
        await self._response.aread()
        yield self._encode(self._response.text)

    def _encode(self, data: str) -> bytes:
        text = extract_content(data) if self.json_mode else data
        return text.encode("utf-8")

    def _fail(self, error: RelayError) -> None:
        self.state = RelayState.ERRORED
        self.error = error
        logger.error(
            f"[RELAY] Stream en erreur après {self.chunks_emitted} chunk(s): {error}"
        )


def _is_event_stream(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return SSE_CONTENT_TYPE in content_type.lower()


async def _read_error_text(response: httpx.Response) -> str:
    """Lecture unique, best-effort, du body d'une réponse en erreur."""
    text = ""
    try:
        async for chunk in response.aiter_bytes():
            text = chunk.decode("utf-8", errors="replace")
            break
    except httpx.HTTPError as e:
        logger.debug(f"[RELAY] Body d'erreur illisible: {e}")
    finally:
        await response.aclose()
    return text or response.reason_phrase or f"HTTP {response.status_code}"


async def open_relay(response: httpx.Response, json_mode: bool = False) -> RelayStream:
    """
    Enveloppe une réponse upstream dans un RelayStream.

    Raises:
        UpstreamStatusError: Statut non-2xx, levée avant tout flux
    """
    if not response.is_success:
        error_text = await _read_error_text(response)
        logger.warning(
            f"[RELAY] Erreur API {response.status_code}: {error_text[:ERROR_PREVIEW_LENGTH]}"
        )
        raise UpstreamStatusError(
            f"L'API upstream a retourné une erreur: {error_text}",
            status_code=response.status_code
        )

    buffered = not _is_event_stream(response)
    if buffered:
        logger.debug("[RELAY] Réponse non streamée, relais en un seul chunk")
    return RelayStream(response, json_mode=json_mode, buffered=buffered)


async def stream_chat(client: UpstreamClient, request: ChatRequest) -> RelayStream:
    """
    Point d'entrée unique: requête de chat -> flux d'octets.

    Raises:
        InvalidRequestError: Prompt vide
        UpstreamConnectionError: Upstream injoignable
        UpstreamStatusError: Statut non-2xx
    """
    body = client.build_request_body(request)
    response = await client.send(body)
    return await open_relay(response, json_mode=request.json_mode)
