"""
API HTTP de Pollinations Relay.
"""

from .router import api_router

__all__ = ["api_router"]
