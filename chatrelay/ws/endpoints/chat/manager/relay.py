"""Broadcast relay for chat connections."""

import asyncio
from typing import Any, Dict, List, Union

from ..models import Connection, DeliveryReport, RelayInfo
from ..utils import ProtocolViolation, RecipientDeliveryFailure, UnknownConnection
from chatrelay.utils.log import get_logger

DeliveryOutcome = Union[bool, None, RecipientDeliveryFailure]


class Relay:
    """Fans every inbound message out to the connections live at that moment.

    The registry dict is never mutated in place: ``accept``, ``disconnect`` and
    ``shutdown`` build a new dict under ``_lock`` and swap the reference, so a
    ``receive`` snapshot is always a complete set and needs no lock.
    """

    def __init__(self, echo_to_sender: bool = False, send_timeout: float = 5.0):
        if send_timeout <= 0:
            raise ValueError("send_timeout must be positive")

        self.echo_to_sender = echo_to_sender
        self.send_timeout = send_timeout

        self._connections: Dict[str, Connection] = {}
        self._lock = asyncio.Lock()
        self._closed = False

        self.logger = get_logger(__name__)

    def __len__(self) -> int:
        return len(self._connections)

    @property
    def closed(self) -> bool:
        return self._closed

    def is_connected(self, connection_id: str) -> bool:
        """Check if a connection is currently registered."""
        return connection_id in self._connections

    def get(self, connection_id: str) -> Connection:
        try:
            return self._connections[connection_id]
        except KeyError:
            raise UnknownConnection(connection_id) from None

    async def accept(self, connection: Connection) -> None:
        """Register a new connection.

        Raises:
            ProtocolViolation: the id is already registered, the handle was
                already disconnected, or the relay has been shut down.
        """
        async with self._lock:
            if self._closed:
                raise ProtocolViolation(
                    f"Relay is shut down, cannot accept {connection.id}"
                )
            if connection.id in self._connections:
                raise ProtocolViolation(
                    f"Connection {connection.id} is already registered"
                )
            if not connection.is_connected:
                raise ProtocolViolation(
                    f"Connection {connection.id} was already disconnected"
                )

            registry = dict(self._connections)
            registry[connection.id] = connection
            self._connections = registry

        self.logger.info(
            f"Accepted connection {connection.id} (owner: {connection.owner}, total: {len(registry)})"
        )

    async def disconnect(self, connection_id: str) -> None:
        """Remove a connection; repeated calls are no-ops."""
        async with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                return

            registry = dict(self._connections)
            del registry[connection_id]
            self._connections = registry
            connection.mark_disconnected()

        self.logger.info(
            f"Disconnected connection {connection_id} (total: {len(registry)})"
        )

    async def receive(self, connection_id: str, message: Any) -> DeliveryReport:
        """Deliver ``message`` from ``connection_id`` to every live connection.

        An unregistered sender is a no-op. Failures are per recipient and are
        only reported in the returned DeliveryReport.
        """
        report = DeliveryReport(sender_id=connection_id)

        try:
            self.get(connection_id)
        except UnknownConnection as e:
            self.logger.debug(f"Dropping message: {e.message}")
            return report

        snapshot = self._connections
        recipients = [
            connection
            for connection in snapshot.values()
            if self.echo_to_sender or connection.id != connection_id
        ]
        if not recipients:
            return report

        outcomes = await asyncio.gather(
            *(self._deliver(connection, message) for connection in recipients)
        )

        for connection, outcome in zip(recipients, outcomes):
            if outcome is True:
                report.delivered.append(connection.id)
            elif isinstance(outcome, RecipientDeliveryFailure):
                report.failed.append(connection.id)

        self.logger.debug(
            f"Broadcast from {connection_id}: {len(report.delivered)} delivered, {len(report.failed)} failed"
        )
        return report

    async def _deliver(self, connection: Connection, message: Any) -> DeliveryOutcome:
        """Send to one recipient; returns True, None (skipped) or the failure."""
        if not connection.is_connected:
            return None

        try:
            await asyncio.wait_for(connection.send(message), timeout=self.send_timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            failure = RecipientDeliveryFailure(connection.id, e)
            self.logger.warning(failure.message)
            return failure
        return True

    async def shutdown(self) -> None:
        """Drop and close every connection; no accepts afterwards."""
        async with self._lock:
            connections: List[Connection] = list(self._connections.values())
            self._connections = {}
            self._closed = True

        for connection in connections:
            connection.mark_disconnected()

        await asyncio.gather(*(self._close(connection) for connection in connections))
        self.logger.info(f"Relay shut down, closed {len(connections)} connections")

    async def _close(self, connection: Connection) -> None:
        try:
            await asyncio.wait_for(connection.close(), timeout=self.send_timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.warning(f"Failed to close connection {connection.id}: {e}")

    def get_connection_info(self) -> RelayInfo:
        """Get a snapshot of the registry."""
        snapshot = self._connections
        return RelayInfo(
            connection_count=len(snapshot),
            connection_ids=list(snapshot.keys()),
            echo_to_sender=self.echo_to_sender,
        )
