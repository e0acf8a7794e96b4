"""
Routes API pour le health check.
"""
from fastapi import APIRouter, Depends

from ... import __version__
from ...config.settings import Settings
from ..dependencies import get_settings

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check avec l'upstream configuré."""
    return {
        "status": "ok",
        "version": __version__,
        "upstream_url": settings.upstream.url,
        "default_model": settings.upstream.default_model,
    }
