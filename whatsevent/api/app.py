"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Internal imports
from ..config.environment import IS_PRODUCTION_ENVIRONMENT  # Environment must be imported first
from ..config.cors import CORS_CONFIG
from ..config.application import AppConfig
from ..config.external_services.openai import OpenAIConfig
from ..config.external_services.twilio import TwilioConfig
from ..chat.answerers import Answerer, create_answerer
from ..db import EventRepository, SqlAlchemyEventRepository, get_database
from ..utils.logging_config import setup_logging
from .. import __version__
from .routes import (
    chat,
    events,
    health,
    whatsapp
)

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    try:
        repository = app.state.repository
        if isinstance(repository, SqlAlchemyEventRepository):
            repository.initialize()
        logger.info(
            f"Startup complete: answerer={app.state.answerer.name}, "
            f"upload_dir={app.state.app_config.upload_dir}"
        )
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    yield

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or mistyped request bodies are client errors."""
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request format"})

async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: log and hide internals."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

def create_application(
    repository: Optional[EventRepository] = None,
    answerer: Optional[Answerer] = None,
    app_config: Optional[AppConfig] = None,
    twilio_config: Optional[TwilioConfig] = None,
    openai_config: Optional[OpenAIConfig] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators default to the ones built from the environment. Tests pass
    their own repository and answerer.
    """
    app = FastAPI(
        title="WhatsEvent API",
        description="API for publishing events and answering attendee questions about them",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    # Collaborators shared by every request
    app.state.repository = repository or SqlAlchemyEventRepository(get_database())
    app.state.answerer = answerer or create_answerer(openai_config or OpenAIConfig())
    app.state.app_config = app_config or AppConfig()
    app.state.twilio_config = twilio_config or TwilioConfig()

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    # Error payloads always use the {"error": ...} shape
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api/event")
    app.include_router(chat.router, prefix="/api/chat")
    app.include_router(whatsapp.router, prefix="/api/whatsapp")

    return app

# Create the application instance
app = create_application()
