"""Connection models for the broadcast relay."""

import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from pydantic import BaseModel, Field

SendFn = Callable[[Any], Awaitable[None]]
CloseFn = Callable[[], Awaitable[None]]


def new_connection_id() -> str:
    """Generate a connection identifier that is never reused."""
    return uuid.uuid4().hex


class ConnectionState(str, Enum):
    """Connection liveness; DISCONNECTED is terminal."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class Connection:
    """One live client session as seen by the relay.

    The transport supplies ``send`` (and optionally ``close``); the relay never
    touches the underlying socket directly.
    """

    def __init__(
        self,
        send: SendFn,
        connection_id: Optional[str] = None,
        close: Optional[CloseFn] = None,
        owner: Optional[str] = None,
    ):
        self.id = connection_id or new_connection_id()
        self.owner = owner
        self.state = ConnectionState.CONNECTED
        self._send = send
        self._close = close

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    def mark_disconnected(self) -> None:
        self.state = ConnectionState.DISCONNECTED

    async def send(self, message: Any) -> None:
        await self._send(message)

    async def close(self) -> None:
        if self._close is not None:
            await self._close()

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, owner={self.owner!r}, state={self.state.value})"


class DeliveryReport(BaseModel):
    """Outcome of a single fan-out."""

    sender_id: str
    delivered: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)

    @property
    def delivered_count(self) -> int:
        return len(self.delivered)


class RelayInfo(BaseModel):
    """Connection information for status reporting."""

    connection_count: int
    connection_ids: List[str]
    echo_to_sender: bool
