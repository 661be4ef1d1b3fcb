"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from mcp_playground import __version__
from mcp_playground.api.ratelimit import limiter, rate_limit_exceeded_handler
from mcp_playground.api.router import api_router
from mcp_playground.config import get_settings
from mcp_playground.domain.chat.tool_executor import ToolDispatcher
from mcp_playground.infrastructure.storage.kv_store import build_store
from mcp_playground.observability.metrics import setup_metrics
from mcp_playground.shared.exceptions import (
    AIRateLimitError,
    ExternalServiceError,
    PlaygroundError,
    StorageError,
    ToolExecutionError,
    ValidationError,
)
from mcp_playground.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info("mcp_playground_starting", version=__version__)

    # Shared resources (avoid per-request client creation)
    settings = get_settings()
    app.state.store = getattr(app.state, "store", None) or build_store(settings)
    app.state.dispatcher = getattr(app.state, "dispatcher", None) or ToolDispatcher(
        app.state.store,
        http_timeout=settings.tool_http_timeout_seconds,
        max_response_chars=settings.tool_response_max_chars,
    )

    yield

    # Shutdown
    logger.info("mcp_playground_stopping")
    dispatcher = getattr(app.state, "dispatcher", None)
    if dispatcher is not None:
        await dispatcher.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="MCP Playground API",
        description="Chat-completion proxy and simulated MCP tool execution",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # CORS middleware
    # In production, be more restrictive; in development, allow all for convenience
    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials="*" not in settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api")

    # Observability
    setup_metrics(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": {"errors": exc.errors()},
            },
        )

    @app.exception_handler(ToolExecutionError)
    async def tool_error_handler(request: Request, exc: ToolExecutionError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(AIRateLimitError)
    async def upstream_rate_limit_handler(request: Request, exc: AIRateLimitError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=429,
            content={
                "error": "upstream_rate_limited",
                "message": exc.message,
            },
        )

    @app.exception_handler(ExternalServiceError)
    async def external_error_handler(
        request: Request, exc: ExternalServiceError
    ) -> JSONResponse:
        _ = request
        logger.warning("external_service_error", error=exc.message)
        return JSONResponse(
            status_code=502,
            content={
                "error": "bad_gateway",
                "message": exc.message,
            },
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        _ = request
        logger.error("storage_error", error=exc.message, details=exc.details)
        return JSONResponse(
            status_code=500,
            content={
                "error": "storage_error",
                "message": exc.message,
            },
        )

    @app.exception_handler(PlaygroundError)
    async def playground_error_handler(request: Request, exc: PlaygroundError) -> JSONResponse:
        _ = request
        logger.error("unhandled_error", error=exc.message, details=exc.details)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "An internal error occurred",
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        _ = request
        logger.exception("unexpected_error", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
            },
        )


# Create app instance
app = create_app()
