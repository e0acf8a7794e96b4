"""
Pollinations Relay - Application FastAPI Factory.
Relais streaming vers l'API texte Pollinations + analyse image / vidéo.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.router import api_router
from .config.loader import get_config
from .config.settings import Settings
from .media.preprocessor import MediaPreprocessor, PillowMediaPreprocessor
from .proxy.client import UpstreamClient, create_upstream_client

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    upstream_client: Optional[UpstreamClient] = None,
    preprocessor: Optional[MediaPreprocessor] = None
) -> FastAPI:
    """
    Factory pour créer l'application FastAPI.

    Args:
        settings: Configuration (défaut: config.toml)
        upstream_client: Client upstream (défaut: créé depuis settings)
        preprocessor: Prétraitement média (défaut: Pillow + OpenCV)

    Returns:
        Instance configurée de FastAPI
    """
    if settings is None:
        settings = Settings.from_config(get_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Gestion du cycle de vie de l'application."""
        logger.info(
            f"[APP] Démarrage, upstream {settings.upstream.url} "
            f"(modèle par défaut: {settings.upstream.default_model})"
        )
        yield
        await app.state.upstream_client.aclose()
        logger.info("[APP] Serveur arrêté proprement")

    app = FastAPI(
        title="Pollinations Relay",
        description="Relais streaming vers l'API texte Pollinations",
        version=__version__,
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.upstream_client = upstream_client or create_upstream_client(url=settings.upstream.url)
    app.state.preprocessor = preprocessor or PillowMediaPreprocessor()

    app.include_router(api_router)

    return app


# Crée l'application pour uvicorn
app = create_app()
