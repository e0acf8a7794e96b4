"""
Logique de relais HTTP vers l'API Pollinations.
"""

from .client import UpstreamClient, create_upstream_client, create_prompt
from .sse import SSEEvent, SSEParser, aiter_sse_events
from .stream import (
    RelayState,
    RelayStream,
    extract_content,
    open_relay,
    stream_chat,
)

__all__ = [
    "UpstreamClient",
    "create_upstream_client",
    "create_prompt",
    "SSEEvent",
    "SSEParser",
    "aiter_sse_events",
    "RelayState",
    "RelayStream",
    "extract_content",
    "open_relay",
    "stream_chat",
]
