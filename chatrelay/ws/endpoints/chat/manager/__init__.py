"""Connection registry and fan-out."""

from .relay import Relay

__all__ = [
    "Relay",
]
