"""Utility modules for the chat relay."""

from .exceptions import (
    RelayError,
    ProtocolViolation,
    UnknownConnection,
    RecipientDeliveryFailure,
)

__all__ = [
    "RelayError",
    "ProtocolViolation",
    "UnknownConnection",
    "RecipientDeliveryFailure",
]
