"""Main API router aggregating all routes."""

from fastapi import APIRouter

from mcp_playground.api.routes import catalog, chat, health, tools

# Create main router
api_router = APIRouter()

# Include route modules
api_router.include_router(health.router)
api_router.include_router(chat.router)
api_router.include_router(catalog.router)
api_router.include_router(tools.router)
