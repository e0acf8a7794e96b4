"""
Cœur métier de Pollinations Relay.
Modules indépendants sans dépendances externes au package.
"""

from .exceptions import (
    RelayError,
    ConfigurationError,
    InvalidRequestError,
    UpstreamConnectionError,
    UpstreamStatusError,
    StreamParseError,
    MediaError,
)
from .constants import (
    DEFAULT_UPSTREAM_URL,
    DEFAULT_MODEL,
    SEED_UPPER_BOUND,
    DONE_SENTINEL,
)
from .models import ChatRequest, UpstreamMessage, UpstreamRequestBody

__all__ = [
    "RelayError",
    "ConfigurationError",
    "InvalidRequestError",
    "UpstreamConnectionError",
    "UpstreamStatusError",
    "StreamParseError",
    "MediaError",
    "DEFAULT_UPSTREAM_URL",
    "DEFAULT_MODEL",
    "SEED_UPPER_BOUND",
    "DONE_SENTINEL",
    "ChatRequest",
    "UpstreamMessage",
    "UpstreamRequestBody",
]
