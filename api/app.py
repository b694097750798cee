"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import (
    common_router,
    networks_router,
    operations_router,
    portfolio_router,
    prices_router,
)
from api.services.app_initializer import AppServiceInitializer
from core import get_logger, setup_logging, setup_production_logging
from core.config import Settings, load_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    if settings.is_production:
        setup_production_logging(level=settings.log_level)
    else:
        setup_logging(
            level=settings.log_level,
            enable_file_logging=not settings.is_testing,
        )
    logger.info(f"Starting Metawhale API server in {settings.environment} mode")

    initializer: AppServiceInitializer | None = getattr(app.state, "initializer", None)
    if initializer is None:
        initializer = AppServiceInitializer(settings)
        app.state.initializer = initializer

    await initializer.initialize_all_services(app)
    await initializer.start_all_services()

    logger.info("Metawhale API server initialized successfully")

    yield

    await initializer.stop_all_services()

    logger.info("Metawhale API server shutting down")


def create_app(
    settings: Settings | None = None,
    initializer: AppServiceInitializer | None = None,
) -> FastAPI:
    """Create FastAPI app.

    Args:
        settings: Settings to use; loaded from the environment when omitted
        initializer: Preconfigured service initializer, e.g. with a test engine
    """
    if settings is None:
        settings = initializer.settings if initializer else load_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Wallet portfolio and token price API for Metawhale",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    if initializer is not None:
        app.state.initializer = initializer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(common_router)
    app.include_router(networks_router)
    app.include_router(operations_router)
    app.include_router(portfolio_router)
    app.include_router(prices_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()
