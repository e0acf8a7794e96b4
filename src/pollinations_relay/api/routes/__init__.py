"""
Routes API par domaine.
"""

from . import chat
from . import media
from . import health

__all__ = [
    "chat",
    "media",
    "health",
]
