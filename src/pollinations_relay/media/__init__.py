"""
Prétraitement et analyse des médias (images, vidéos).
"""

from .preprocessor import (
    MediaPreprocessor,
    PillowMediaPreprocessor,
    fit_dimensions,
    to_base64,
)
from .analysis import analyze_image, analyze_video, build_media_message

__all__ = [
    "MediaPreprocessor",
    "PillowMediaPreprocessor",
    "fit_dimensions",
    "to_base64",
    "analyze_image",
    "analyze_video",
    "build_media_message",
]
