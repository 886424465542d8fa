"""WebSocket transport feeding the broadcast relay."""

import asyncio
import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from .manager.relay import Relay
from .models import ClientInfo, ClientType, Connection, Envelope, MessageType
from .utils import ProtocolViolation, UnknownConnection
from chatrelay.utils.log import get_logger
from chatrelay.utils.ws_auth import authenticate_websocket


class ChatWebSocketServer:
    """Binds WebSocket sessions to the Relay held on ``app.state.relay``."""

    def __init__(self):
        self.logger = get_logger(__name__)
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Setup WebSocket routes."""

        @self.router.websocket("/ws/chat")
        async def chat_websocket(websocket: WebSocket):
            """WebSocket endpoint for chat clients."""
            await self._handle_websocket_connection(websocket)

    def get_relay(self, websocket: WebSocket) -> Relay:
        return websocket.app.state.relay

    async def _handle_websocket_connection(self, websocket: WebSocket) -> None:
        """Handle individual WebSocket connection lifecycle.

        The connection is registered before the confirmation goes out, but
        relayed messages are held back until the confirmation has been sent,
        so the confirmation is always the first frame a client sees.
        """

        authenticated, user_data = await authenticate_websocket(websocket)
        if not authenticated:
            self.logger.warning("Rejected WebSocket connection: authentication failed")
            await websocket.close(
                code=status.WS_1008_POLICY_VIOLATION, reason="Authentication failed"
            )
            return

        relay = self.get_relay(websocket)
        username = user_data["username"]

        await websocket.accept()
        confirmed = asyncio.Event()
        connection = self._create_connection(websocket, username, confirmed)

        try:
            await relay.accept(connection)
            await self.connection_confirmation(websocket, connection)
            confirmed.set()
            await self._message_processing_loop(websocket, relay, connection)
        except ProtocolViolation as e:
            self.logger.error(f"Failed to register connection for {username}: {e}")
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason=e.message)
        except WebSocketDisconnect:
            self.logger.info(
                f"WebSocket disconnected: {connection.id} (user: {username})"
            )
        except Exception as e:
            self.logger.exception(f"Unexpected error in WebSocket handler: {e}")
            try:
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            except (RuntimeError, OSError):
                # already closed by the peer
                pass
        finally:
            if self._is_registered(relay, connection):
                await relay.disconnect(connection.id)

    def _is_registered(self, relay: Relay, connection: Connection) -> bool:
        try:
            return relay.get(connection.id) is connection
        except UnknownConnection:
            return False

    def _create_connection(
        self, websocket: WebSocket, username: str, confirmed: asyncio.Event
    ) -> Connection:
        async def send(message: Any) -> None:
            await confirmed.wait()
            await websocket.send_text(json.dumps(message))

        async def close() -> None:
            await websocket.close(code=status.WS_1001_GOING_AWAY)

        return Connection(send=send, close=close, owner=username)

    async def connection_confirmation(
        self, websocket: WebSocket, connection: Connection
    ) -> None:
        """Send connection confirmation message."""

        confirmation = Envelope(
            type=MessageType.CONNECT,
            payload={
                "connection_id": connection.id,
                "username": connection.owner,
            },
            sender=ClientInfo(type=ClientType.HUB),
            recipient=ClientInfo(type=ClientType.CLIENT, id=connection.id),
        )

        await websocket.send_text(confirmation.model_dump_json())
        self.logger.info(
            f"Connection confirmed for {connection.owner}, ID: {connection.id}"
        )

    async def _message_processing_loop(
        self,
        websocket: WebSocket,
        relay: Relay,
        connection: Connection,
    ) -> None:
        """Main message processing loop."""

        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await self._json_error(websocket, connection, data)
                continue

            report = await relay.receive(connection.id, message)
            if report.failed:
                self.logger.warning(
                    f"Message from {connection.id} not delivered to {report.failed}"
                )

    async def _json_error(
        self, websocket: WebSocket, connection: Connection, invalid_data: str
    ) -> None:
        """Send JSON parsing error response."""

        self.logger.error(f"Invalid JSON received: {invalid_data[:100]}...")

        error_response = Envelope(
            type=MessageType.ERROR,
            payload="Invalid JSON format",
            sender=ClientInfo(type=ClientType.HUB),
            recipient=ClientInfo(type=ClientType.CLIENT, id=connection.id),
        )

        await websocket.send_text(error_response.model_dump_json())


# Create server instance and export router
server = ChatWebSocketServer()
router = server.router
