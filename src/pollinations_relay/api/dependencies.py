"""
Dépendances FastAPI: objets partagés stockés dans app.state.
"""
from fastapi import Request

from ..config.settings import Settings
from ..media.preprocessor import MediaPreprocessor
from ..proxy.client import UpstreamClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream_client(request: Request) -> UpstreamClient:
    return request.app.state.upstream_client


def get_preprocessor(request: Request) -> MediaPreprocessor:
    return request.app.state.preprocessor
