"""
Client HTTPX vers l'API texte Pollinations.

Un appel entrant = un POST upstream, sans retry ni timeout de lecture:
le stream SSE peut durer aussi longtemps que la génération.
"""
import json
import logging
import random
import textwrap
from typing import List, Optional

import httpx

from ..core.constants import DEFAULT_UPSTREAM_URL, SEED_UPPER_BOUND, ERROR_PREVIEW_LENGTH
from ..core.exceptions import (
    InvalidRequestError,
    UpstreamConnectionError,
    UpstreamStatusError,
)
from ..core.models import ChatRequest, UpstreamMessage, UpstreamRequestBody

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def create_prompt(input_code: Optional[str]) -> str:
    """
    Normalise le prompt utilisateur.

    Retire l'indentation commune et les lignes vides en tête / fin.
    """
    if not input_code:
        return ""
    return textwrap.dedent(input_code).strip("\n")


class UpstreamClient:
    """
    Client HTTP pour l'API upstream.

    Gère:
    - Construction du corps (messages, system prompt, seed, model, jsonMode)
    - POST streaming pour le relais
    - POST complet pour l'analyse image / vidéo
    """

    def __init__(
        self,
        url: str = DEFAULT_UPSTREAM_URL,
        rng: Optional[random.Random] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.url = url
        self._rng = rng or random.Random()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(None),
            limits=httpx.Limits(
                max_keepalive_connections=20,
                max_connections=50
            )
        )

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Ferme le client HTTPX s'il a été créé ici."""
        if self._owns_client:
            await self._client.aclose()

    def generate_seed(self) -> int:
        """Tire un nouveau seed dans [0, SEED_UPPER_BOUND) à chaque appel."""
        return self._rng.randrange(SEED_UPPER_BOUND)

    def build_request_body(self, request: ChatRequest) -> UpstreamRequestBody:
        """
        Construit le corps upstream pour une requête de chat.

        Raises:
            InvalidRequestError: Si le prompt est vide
        """
        prompt = create_prompt(request.prompt_text)
        if not prompt:
            raise InvalidRequestError("Le prompt est vide", field_name="inputCode")

        messages = [UpstreamMessage(role="user", content=prompt)]
        if request.system_prompt:
            messages.insert(0, UpstreamMessage(role="system", content=request.system_prompt))

        return UpstreamRequestBody(
            messages=messages,
            model=request.model,
            seed=self.generate_seed(),
            json_mode=request.json_mode
        )

    def build_request(self, body: UpstreamRequestBody) -> httpx.Request:
        """Construit la requête HTTPX POST vers l'upstream."""
        return self._client.build_request(
            "POST",
            self.url,
            headers=JSON_HEADERS,
            content=json.dumps(body.to_dict())
        )

    async def send(self, body: UpstreamRequestBody) -> httpx.Response:
        """
        Envoie la requête en mode streaming.

        Le corps de la réponse n'est pas lu: c'est le rôle du relais.

        Raises:
            UpstreamConnectionError: Erreur réseau (pas de retry)
        """
        request = self.build_request(body)
        logger.debug(f"[UPSTREAM] POST {self.url} model={body.model} seed={body.seed}")
        try:
            return await self._client.send(request, stream=True)
        except httpx.TransportError as e:
            logger.error(f"[UPSTREAM] Connexion impossible vers {self.url}: {e}")
            raise UpstreamConnectionError(
                f"Impossible de joindre l'API upstream: {e}", url=self.url
            ) from e

    async def complete(
        self,
        messages: List[UpstreamMessage],
        model: str,
        json_mode: bool = False
    ) -> str:
        """
        Envoie une requête complète (non streaming) et retourne le texte.

        Raises:
            UpstreamConnectionError: Erreur réseau
            UpstreamStatusError: Statut non-2xx
        """
        body = UpstreamRequestBody(messages=messages, model=model, json_mode=json_mode)
        request = self.build_request(body)
        try:
            response = await self._client.send(request)
        except httpx.TransportError as e:
            logger.error(f"[UPSTREAM] Connexion impossible vers {self.url}: {e}")
            raise UpstreamConnectionError(
                f"Impossible de joindre l'API upstream: {e}", url=self.url
            ) from e

        if not response.is_success:
            error_text = response.text
            logger.warning(
                f"[UPSTREAM] Erreur API {response.status_code}: {error_text[:ERROR_PREVIEW_LENGTH]}"
            )
            raise UpstreamStatusError(
                f"API Error: {response.status_code} - {error_text}",
                status_code=response.status_code
            )
        return response.text


def create_upstream_client(
    url: str = DEFAULT_UPSTREAM_URL,
    rng: Optional[random.Random] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> UpstreamClient:
    """
    Crée un client upstream.

    Args:
        url: Endpoint upstream
        rng: Source aléatoire pour les seeds (injectable pour les tests)
        http_client: Client HTTPX existant (ex: MockTransport en test)

    Returns:
        Instance de UpstreamClient
    """
    return UpstreamClient(url=url, rng=rng, http_client=http_client)
