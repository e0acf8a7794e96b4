"""
Configuration de Pollinations Relay.
"""

from .loader import load_config, reload_config, get_config
from .settings import Settings, UpstreamConfig, MediaConfig

__all__ = [
    "load_config",
    "reload_config",
    "get_config",
    "Settings",
    "UpstreamConfig",
    "MediaConfig",
]
