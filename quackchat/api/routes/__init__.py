"""API routes."""

from quackchat.api.routes.agents import router as agents_router
from quackchat.api.routes.chat import router as chat_router
from quackchat.api.routes.health import router as health_router
from quackchat.api.routes.providers import router as providers_router

__all__ = ["agents_router", "chat_router", "health_router", "providers_router"]
