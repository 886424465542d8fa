"""Models for the chat relay."""

from .message import MessageType, ClientType, Envelope, ClientInfo
from .connection import (
    Connection,
    ConnectionState,
    DeliveryReport,
    RelayInfo,
    new_connection_id,
)

__all__ = [
    "Envelope",
    "ClientInfo",
    "MessageType",
    "ClientType",
    "Connection",
    "ConnectionState",
    "DeliveryReport",
    "RelayInfo",
    "new_connection_id",
]
