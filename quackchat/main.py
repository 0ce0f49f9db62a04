"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quackchat.api.middleware import RequestIDMiddleware
from quackchat.api.routes import agents_router, chat_router, health_router, providers_router
from quackchat.core.config import Settings, get_settings
from quackchat.core.logging import get_logger, setup_logging
from quackchat.services.conversations import ConversationManager
from quackchat.services.credentials import (
    CredentialStore,
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    KeyValueStore,
)

logger = get_logger(__name__)


def create_credential_store(settings: Settings) -> CredentialStore:
    """
    Create the credential store configured in settings.

    Args:
        settings: Application settings

    Returns:
        Credential store over the file or memory backend
    """
    backend: KeyValueStore
    if settings.storage.backend == "memory":
        backend = InMemoryKeyValueStore()
    else:
        backend = JSONFileKeyValueStore(settings.storage.path)
    return CredentialStore(backend)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting QuackChat service",
        extra={"version": settings.version, "debug": settings.debug},
    )

    if settings.storage.seed_default_agent:
        app.state.credential_store.seed_default_agent()

    yield
    logger.info("Shutting down QuackChat service")


def create_app(
    settings: Settings | None = None,
    credential_store: CredentialStore | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (cached settings if None)
        credential_store: Credential store (built from settings if None)
        http_transport: Optional httpx transport for outbound vendor calls

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-provider chat backend for the QuackChat overlay",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.credential_store = credential_store or create_credential_store(settings)
    app.state.conversations = ConversationManager()
    app.state.http_transport = http_transport

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(providers_router)
    app.include_router(agents_router)
    app.include_router(chat_router)

    logger.info("FastAPI application created successfully")

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
