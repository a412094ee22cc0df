"""
Main FastAPI application entry point.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from app.api import router as api_router
from app.calculations.categorization import CategorizationEngine
from app.config import Settings, get_settings
from app.logging_config import configure_logging

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and the per-application state it owns."""
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="Personal finance calculators: mortgages, pensions, budgets and salary",
        version=VERSION,
        debug=settings.debug,
    )
    application.state.settings = settings
    application.state.categorization_engine = CategorizationEngine(
        max_learned=settings.max_learned_patterns
    )

    # Include API routes
    application.include_router(api_router, prefix="/api")

    @application.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy", "version": VERSION}

    logger.info(f"{settings.app_name} ready ({settings.app_env})")
    return application


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "app.main:create_app", factory=True, host=settings.host, port=settings.port
    )
