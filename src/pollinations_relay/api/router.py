"""
Router principal de l'API.
"""
from fastapi import APIRouter

from .routes import chat, media, health

# Router principal
api_router = APIRouter()

api_router.include_router(chat.router, prefix="/api", tags=["chat"])
api_router.include_router(media.router, prefix="/api", tags=["media"])
api_router.include_router(health.router, prefix="", tags=["health"])
