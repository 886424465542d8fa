"""Router configuration for WebSocket endpoints."""

from fastapi import APIRouter

from chatrelay.ws.endpoints import chat

ws_router = APIRouter()

# Include WebSocket endpoints
ws_router.include_router(chat.router)
