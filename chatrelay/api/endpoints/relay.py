"""Relay status endpoint."""

from fastapi import APIRouter, Request

from chatrelay.ws.endpoints.chat.models import RelayInfo

router = APIRouter()


@router.get("/status", response_model=RelayInfo)
async def relay_status(request: Request):
    """Report the connections currently registered with the relay."""
    return request.app.state.relay.get_connection_info()
