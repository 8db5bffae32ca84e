"""FastAPI application for Proposal Maker.

This module initializes the FastAPI app with CORS middleware, the
application exception handler and routes.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from proposal_maker import __version__
from proposal_maker.api.routes import auth_router, generation_router, proposals_router
from proposal_maker.api.routes.settings import (
    credentials_router,
    design_libraries_router,
    prompt_templates_router,
)
from proposal_maker.config.settings import get_settings
from proposal_maker.core.database import get_db_session, init_db
from proposal_maker.core.init_default_prompts import seed_default_templates
from proposal_maker.core.logging_config import setup_logging
from proposal_maker.core.user_context import reset_current_account
from proposal_maker.utils.error_handling import AppException

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"Starting Proposal Maker API (environment: {settings.environment})")

    init_db()
    if settings.seed_defaults:
        with get_db_session() as db:
            seed_default_templates(db)

    yield
    logger.info("Shutting down Proposal Maker API")


app = FastAPI(
    title="Proposal Maker API",
    description="Turn text into slide decks, extract design tokens from screenshots and share HTML proposals",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def clear_account_context(request: Request, call_next):
    """Keep the log attribution ContextVar from leaking between requests."""
    reset_current_account()
    return await call_next(request)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_router)
app.include_router(generation_router)
app.include_router(prompt_templates_router)
app.include_router(design_libraries_router)
app.include_router(credentials_router)
app.include_router(proposals_router)


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": get_settings().environment,
        "version": __version__,
    }
