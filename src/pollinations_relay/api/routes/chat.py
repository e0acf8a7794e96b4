"""
Route de relais du chat /api/chat.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse, JSONResponse
from pydantic import BaseModel, Field
from starlette.background import BackgroundTask

from ...config.settings import Settings
from ...core.exceptions import RelayError
from ...core.models import ChatRequest
from ...proxy.client import UpstreamClient
from ...proxy.stream import stream_chat
from ..dependencies import get_settings, get_upstream_client

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatBody(BaseModel):
    """Corps JSON entrant."""
    inputCode: str = Field(..., min_length=1)
    model: Optional[str] = None
    systemPrompt: Optional[str] = None
    jsonMode: bool = False


@router.post("/chat")
async def chat(
    body: ChatBody,
    settings: Settings = Depends(get_settings),
    client: UpstreamClient = Depends(get_upstream_client)
):
    """
    Relaie le prompt vers l'upstream et streame la réponse texte.

    Toute erreur survenue avant le premier octet donne une réponse 500.
    """
    chat_request = ChatRequest.from_dict(
        body.model_dump(), default_model=settings.upstream.default_model
    )
    try:
        relay = await stream_chat(client, chat_request)
    except RelayError as e:
        logger.error(f"[CHAT] Échec du relais: {e}")
        return JSONResponse(status_code=500, content={"error": e.to_public_dict()})

    return StreamingResponse(
        relay,
        media_type="text/plain; charset=utf-8",
        background=BackgroundTask(relay.aclose)
    )
