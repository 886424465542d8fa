"""Router configuration for RESTful API endpoints."""

from fastapi import APIRouter

from chatrelay.api.endpoints import auth, relay, users

api_router = APIRouter(prefix="/api")

# Include specific API endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(relay.router, prefix="/relay", tags=["Relay"])
