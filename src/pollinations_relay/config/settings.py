"""
Dataclasses pour la configuration.
"""
from dataclasses import dataclass, field
from typing import Dict, Any

from ..core.constants import (
    DEFAULT_UPSTREAM_URL,
    DEFAULT_MODEL,
    DEFAULT_MEDIA_MODEL,
    DEFAULT_MAX_WIDTH,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_FRAME_INTERVAL,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from ..core.exceptions import ConfigurationError


@dataclass
class UpstreamConfig:
    """Configuration de l'API upstream."""
    url: str = DEFAULT_UPSTREAM_URL
    default_model: str = DEFAULT_MODEL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UpstreamConfig":
        """Crée une instance depuis un dictionnaire."""
        url = data.get("url", DEFAULT_UPSTREAM_URL)
        if not url.startswith(("http://", "https://")):
            raise ConfigurationError(
                message=f"URL upstream invalide: {url}",
                config_key="upstream.url"
            )
        return cls(
            url=url,
            default_model=data.get("default_model", DEFAULT_MODEL)
        )


@dataclass
class MediaConfig:
    """Configuration de l'analyse image / vidéo."""
    model: str = DEFAULT_MEDIA_MODEL
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    frame_interval: float = DEFAULT_FRAME_INTERVAL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MediaConfig":
        """Crée une instance depuis un dictionnaire."""
        config = cls(
            model=data.get("image_model", DEFAULT_MEDIA_MODEL),
            max_width=int(data.get("max_width", DEFAULT_MAX_WIDTH)),
            max_height=int(data.get("max_height", DEFAULT_MAX_HEIGHT)),
            frame_interval=float(data.get("frame_interval", DEFAULT_FRAME_INTERVAL))
        )
        if config.max_width <= 0 or config.max_height <= 0:
            raise ConfigurationError(
                message="max_width et max_height doivent être positifs",
                config_key="media.max_width"
            )
        if config.frame_interval <= 0:
            raise ConfigurationError(
                message="frame_interval doit être positif",
                config_key="media.frame_interval"
            )
        return config


@dataclass
class Settings:
    """Configuration globale de l'application."""
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        """Crée une instance depuis la configuration chargée."""
        server = config.get("server", {})
        return cls(
            upstream=UpstreamConfig.from_dict(config.get("upstream", {})),
            media=MediaConfig.from_dict(config.get("media", {})),
            host=server.get("host", DEFAULT_HOST),
            port=int(server.get("port", DEFAULT_PORT)),
            log_level=str(config.get("logging", {}).get("level", "INFO")).upper()
        )
