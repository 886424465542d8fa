"""Broadcast chat relay over WebSocket."""

from .chat import router, server
from .manager import Relay

__all__ = [
    "Relay",
    "router",
    "server",
]
