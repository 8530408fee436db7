"""
NovelCraft API Service

Project, chapter, character and world-book management for novel writing.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from novelcraft.api.middleware import AuthMiddleware
from novelcraft.api.router import api_router
from novelcraft.core.config import settings
from novelcraft.core.exceptions import (
    NovelCraftError,
    RateLimitExceededError,
    RowNotFoundError,
)
from novelcraft.core.logging import setup_logging
from novelcraft.db.base import engine
from novelcraft.services.passkey import PasskeyService
from novelcraft.services.rate_limiter import RateLimiter

setup_logging()
logger = logging.getLogger(__name__)


def error_response(
    status_code: int, message: str, error: str | None = None, headers: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, "error": error}),
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info("Starting up %s (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection established")
    except SQLAlchemyError as e:
        # Don't fail startup, allow health endpoint to report status
        logger.error("Database connection failed: %s", e)
    yield
    engine.dispose()
    logger.info("Shutting down %s", settings.PROJECT_NAME)


# Create FastAPI instance
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Per-process state, created once and injected through dependencies
app.state.rate_limiter = RateLimiter()
app.state.passkey_service = PasskeyService()

app.add_middleware(AuthMiddleware)

# CORS wraps everything, including the login redirects
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NovelCraftError)
async def novelcraft_exception_handler(request: Request, exc: NovelCraftError):
    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after)}
    return error_response(exc.status_code, exc.message, exc.error, headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = None
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{location}: {first.get('msg')}" if location else first.get("msg")
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", detail)


@app.exception_handler(RowNotFoundError)
async def row_not_found_handler(request: Request, exc: RowNotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, "Not found", str(exc))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions with a generic envelope."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to NovelCraft API",
        "version": settings.VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "novelcraft-api",
        "version": settings.VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "novelcraft.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
