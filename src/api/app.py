"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.chat import router as chat_router
from src.models.schemas import ErrorResponse
from src.relay.config import get_relay_config
from src.relay.errors import UpstreamError
from src.relay.upstream import UpstreamRelay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Loads and validates the relay configuration once on startup unless a
    relay was injected, and closes upstream connections on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting chat relay API...")
    if getattr(app.state, "relay", None) is None:
        config = get_relay_config()
        logger.info(f"Relaying to {config.upstream_url}")
        app.state.relay = UpstreamRelay(config)
    yield
    # Shutdown
    logger.info("Shutting down chat relay API...")
    await app.state.relay.aclose()


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Render an upstream failure as a 500 with error details."""
    logger.error(f"Chat API error: {exc}")
    body = ErrorResponse(error="Failed to process chat request", details=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


def create_app(relay: UpstreamRelay | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        relay: Optional pre-built relay. Created from the environment
               during startup if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Collection Chat Relay",
        description=(
            "Relays questions to a hosted conversational API and streams its "
            "answer back as newline-delimited JSON."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.relay = relay

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(UpstreamError, upstream_error_handler)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "collection-chat-relay"}

    return application


app = create_app()
