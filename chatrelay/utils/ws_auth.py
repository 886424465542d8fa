"""WebSocket authentication utilities."""

from typing import Optional, Tuple

from fastapi import WebSocket
from starlette.concurrency import run_in_threadpool

from chatrelay.models.user import get_user_by_username
from chatrelay.utils.auth import decode_access_token


def get_token_from_query(websocket: WebSocket) -> Optional[str]:
    """Extract token from WebSocket query parameters."""
    return websocket.query_params.get("token") or None


async def authenticate_websocket(websocket: WebSocket) -> Tuple[bool, Optional[dict]]:
    """Authenticate a WebSocket connection using JWT token."""
    token = get_token_from_query(websocket)
    if not token:
        return False, None

    token_data = decode_access_token(token)
    if token_data is None:
        return False, None

    # the user store reads YAML from disk
    user = await run_in_threadpool(get_user_by_username, token_data.username)
    if user is None:
        return False, None

    return True, {
        "username": user.username,
    }
