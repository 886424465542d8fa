"""Main application module for chatrelay."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrelay.api.router import api_router
from chatrelay.config import get_settings
from chatrelay.utils.log import configure, get_logger
from chatrelay.ws.endpoints.chat import Relay
from chatrelay.ws.router import ws_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the relay for the lifetime of the process."""
    settings = get_settings()
    app.state.relay = Relay(
        echo_to_sender=settings.relay_echo_to_sender,
        send_timeout=settings.relay_send_timeout,
    )
    logger.info(
        f"Relay started (echo_to_sender={settings.relay_echo_to_sender}, send_timeout={settings.relay_send_timeout}s)"
    )
    try:
        yield
    finally:
        await app.state.relay.shutdown()


def create_app() -> FastAPI:
    settings = get_settings()
    configure(
        level=settings.log_level,
        log_file=settings.log_file or None,
        enable_file=bool(settings.log_file),
    )

    app = FastAPI(
        title="chatrelay",
        description="User accounts over REST and a broadcast chat relay over WebSocket",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(api_router)
    app.include_router(ws_router)

    @app.get("/", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "message": "chatrelay is running"}

    return app


app = create_app()


def start():
    """Start the application server."""
    settings = get_settings()
    uvicorn.run(
        "chatrelay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    start()
