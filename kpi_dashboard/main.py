"""
FastAPI application entry point for the KPI dashboard API.

Configures logging and CORS, registers the API routers, and manages the
database pool across the application lifespan.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kpi_dashboard import __version__
from kpi_dashboard.api import api_router
from kpi_dashboard.core.config import get_settings
from kpi_dashboard.core.database import init_db, close_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    On startup:
        - Apply the configured log level
        - Initialize database connection pool

    On shutdown:
        - Close database connection pool
    """
    logging.getLogger().setLevel(get_settings().log_level.upper())

    logger.info("KPI Dashboard API starting")
    try:
        await init_db()
        logger.info("Database connection pool initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        # Continue startup; the pool is created lazily on first request

    yield

    logger.info("KPI Dashboard API shutting down")
    try:
        await close_db()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.error(f"Error closing database pool: {e}")


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routers."""
    settings = get_settings()

    application = FastAPI(
        title="KPI Dashboard API",
        version=__version__,
        description=(
            "FastAPI backend for the financial-operations KPI dashboard. "
            "Provides deposit and withdraw reports: totals, daily series, "
            "brand comparison and slow transactions."
        ),
        lifespan=lifespan,
    )

    # Next.js front end calls the API from the browser
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router, prefix="/api")

    @application.get("/health")
    async def health_check():
        """Health check endpoint for monitoring and load balancer probes."""
        return {"status": "healthy"}

    @application.get("/")
    async def root():
        """Root endpoint providing API information."""
        return {
            "name": "KPI Dashboard API",
            "version": __version__,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    return application


app = create_app()


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kpi_dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
