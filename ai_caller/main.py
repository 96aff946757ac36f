"""
AI Caller - Main Application Entry Point

API for configuring AI voice agents, reading their call records and
generating their replies during a live conversation.
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ai_caller import __version__
from ai_caller.core.config import Settings, get_settings
from ai_caller.core.exceptions import (
    AICallerException,
    AuthenticationError,
    ConfigurationError,
    StorageError
)
from ai_caller.core.logging import setup_logging, get_logger
from ai_caller.core.voice_config import load_voice_config
from ai_caller.db.base import Database
from ai_caller.services.llm.openai_service import ResponseGenerationService
from ai_caller.api.routes import admin, agents, auth, calls, config, health, templates

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events
    """
    settings: Settings = app.state.settings

    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Version: {__version__}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"App URL: {settings.app_url}")
    logger.info("=" * 60)

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database(settings.database_url)
        app.state.database.create_all()

    if getattr(app.state, "response_service", None) is None:
        try:
            app.state.response_service = ResponseGenerationService(settings)
            logger.info(f"Response generation ready (model: {settings.openai_model})")
        except ConfigurationError as e:
            app.state.response_service = None
            logger.warning(f"Response generation disabled: {e.message}")

    logger.info(f"Loaded {len(app.state.voice_config.voice_catalog())} voice(s)")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    if owns_database:
        app.state.database.dispose()
    logger.info("Shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Settings to run with (defaults to the environment)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, sql_echo=settings.database_echo)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description=settings.app_description,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    # Process-wide handles, read-only after startup
    app.state.settings = settings
    app.state.voice_config = load_voice_config(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthenticationError)
    async def auth_exception_handler(request: Request, exc: AuthenticationError):
        """Handle authentication errors"""
        logger.warning(f"AuthenticationError on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        """Handle storage errors that no route translated"""
        logger.error(f"StorageError on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(AICallerException)
    async def ai_caller_exception_handler(request: Request, exc: AICallerException):
        """Handle application exceptions"""
        logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message} {exc.details}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions"""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(health.router)
    app.include_router(config.router)
    app.include_router(templates.router)
    app.include_router(auth.router)
    app.include_router(agents.router)
    app.include_router(calls.router)
    app.include_router(admin.router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": settings.app_name,
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
