"""
Main entrypoint for the Event Registration API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``::

    uvicorn registration_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.config import settings
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .services.company_service import CompanyService


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Logging is configured before anything else so that startup can log.
    Routes are mounted under ``/api/v1``.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Make sure the companies sheet exists before the first login.
        await CompanyService.ensure_sheet()
        if not settings.admin_username or not settings.admin_password:
            logging.getLogger(__name__).warning("ADMIN_USERNAME/ADMIN_PASSWORD not set; admin login is disabled")
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
