"""Hub message models for the chat WebSocket."""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class ClientType(str, Enum):
    """Client type enumeration."""

    CLIENT = "client"
    HUB = "hub"


class MessageType(str, Enum):
    """Types of messages the hub itself emits.

    Relayed client messages are forwarded verbatim and carry no hub type.
    """

    CONNECT = "connect"
    ERROR = "error"


class ClientInfo(BaseModel):
    """WebSocket client identification information."""

    type: ClientType
    id: Optional[str] = None


class Envelope(BaseModel):
    """Envelope model for hub-originated messages"""

    type: MessageType = Field(..., description="Message type")
    sender: Optional[ClientInfo] = Field(None, description="Message sender")
    recipient: Optional[ClientInfo] = Field(None, description="Message recipient")
    payload: Union[str, dict, None] = Field(..., description="Message data payload")
    timestamp: datetime = Field(
        default_factory=datetime.now, description="Message timestamp"
    )
