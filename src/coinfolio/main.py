"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from coinfolio.config.settings import get_settings
from coinfolio.config.logging_config import setup_logging
from coinfolio.repositories.sqlalchemy.database import init_db
from coinfolio.api.routers import assets_router, portfolio_router
from coinfolio.core.exceptions import AppError

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "DATA_SOURCE_UNAVAILABLE": 503,
    "UNKNOWN_ASSET": 404,
    "INVALID_PURCHASE": 400,
    "PERSISTENCE_FAILURE": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    yield
    # Shutdown (nothing to clean up)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Crypto portfolio tracking with live market prices",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(assets_router)
app.include_router(portfolio_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = ERROR_STATUS.get(exc.code, 400)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
