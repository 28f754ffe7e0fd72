"""Hosting platform adapters.

platforms.worker is not imported here because it builds its ASGI app
at import time.
"""

from .base import PlatformAdapter, PlatformResponse
from .netlify import NetlifyAdapter, handler
from .server import ServerAdapter

__all__ = [
    "PlatformAdapter",
    "PlatformResponse",
    "NetlifyAdapter",
    "ServerAdapter",
    "handler",
]
