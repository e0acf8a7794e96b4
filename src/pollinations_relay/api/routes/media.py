"""
Routes d'analyse image / vidéo.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from ...config.settings import Settings
from ...core.exceptions import RelayError, MediaError
from ...media.analysis import analyze_image, analyze_video
from ...media.preprocessor import MediaPreprocessor
from ...proxy.client import UpstreamClient
from ..dependencies import get_settings, get_upstream_client, get_preprocessor

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_response(error: RelayError) -> JSONResponse:
    status_code = 400 if isinstance(error, MediaError) else 500
    return JSONResponse(status_code=status_code, content={"error": error.to_public_dict()})


@router.post("/analyze/image")
async def analyze_image_route(
    file: UploadFile = File(...),
    prompt: str = Form(...),
    model: Optional[str] = Form(None),
    max_width: Optional[int] = Form(None, gt=0),
    max_height: Optional[int] = Form(None, gt=0),
    settings: Settings = Depends(get_settings),
    client: UpstreamClient = Depends(get_upstream_client),
    preprocessor: MediaPreprocessor = Depends(get_preprocessor)
):
    """Analyse d'une image uploadée."""
    data = await file.read()
    try:
        result = await analyze_image(
            client,
            preprocessor,
            data,
            prompt,
            model=model or settings.media.model,
            max_width=max_width or settings.media.max_width,
            max_height=max_height or settings.media.max_height
        )
    except RelayError as e:
        return _error_response(e)
    return {"result": result}


@router.post("/analyze/video")
async def analyze_video_route(
    file: UploadFile = File(...),
    prompt: str = Form(...),
    model: Optional[str] = Form(None),
    frame_interval: Optional[float] = Form(None, gt=0),
    max_width: Optional[int] = Form(None, gt=0),
    max_height: Optional[int] = Form(None, gt=0),
    settings: Settings = Depends(get_settings),
    client: UpstreamClient = Depends(get_upstream_client),
    preprocessor: MediaPreprocessor = Depends(get_preprocessor)
):
    """Analyse d'une vidéo uploadée, frame par frame."""
    data = await file.read()
    try:
        result = await analyze_video(
            client,
            preprocessor,
            data,
            prompt,
            model=model or settings.media.model,
            frame_interval=frame_interval or settings.media.frame_interval,
            max_width=max_width or settings.media.max_width,
            max_height=max_height or settings.media.max_height
        )
    except RelayError as e:
        return _error_response(e)
    return {"result": result}
