"""
Analyse d'images et de vidéos via l'API upstream (appels non streamés).
"""
import asyncio
import logging
from typing import List

from ..core.constants import (
    DEFAULT_MEDIA_MODEL,
    DEFAULT_MAX_WIDTH,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_FRAME_INTERVAL,
)
from ..core.exceptions import RelayError
from ..core.models import UpstreamMessage, text_part, image_part
from ..proxy.client import UpstreamClient
from .preprocessor import MediaPreprocessor, to_base64

logger = logging.getLogger(__name__)


def build_media_message(prompt: str, images: List[bytes]) -> UpstreamMessage:
    """Message utilisateur multi-part: le texte puis une part image_url par image."""
    content = [text_part(prompt)]
    content.extend(image_part(to_base64(image)) for image in images)
    return UpstreamMessage(role="user", content=content)


async def analyze_image(
    client: UpstreamClient,
    preprocessor: MediaPreprocessor,
    image: bytes,
    prompt: str,
    model: str = DEFAULT_MEDIA_MODEL,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT
) -> str:
    """
    Redimensionne une image et demande son analyse à l'upstream.

    Returns:
        Texte brut de la réponse upstream
    """
    try:
        resized = await asyncio.to_thread(
            preprocessor.resize, image, max_width, max_height, "JPEG"
        )
        message = build_media_message(prompt, [resized])
        return await client.complete([message], model=model, json_mode=False)
    except RelayError as e:
        logger.error(f"[MEDIA] Erreur analyse image: {e}")
        raise


async def analyze_video(
    client: UpstreamClient,
    preprocessor: MediaPreprocessor,
    video: bytes,
    prompt: str,
    model: str = DEFAULT_MEDIA_MODEL,
    frame_interval: float = DEFAULT_FRAME_INTERVAL,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT
) -> str:
    """
    Extrait des frames d'une vidéo et les envoie toutes en une requête.

    Returns:
        Texte brut de la réponse upstream
    """
    try:
        frames = await asyncio.to_thread(
            preprocessor.extract_frames, video, frame_interval, max_width, max_height
        )
        logger.info(f"[MEDIA] Analyse vidéo: {len(frames)} frame(s) envoyée(s)")
        message = build_media_message(prompt, frames)
        return await client.complete([message], model=model, json_mode=False)
    except RelayError as e:
        logger.error(f"[MEDIA] Erreur analyse vidéo: {e}")
        raise
