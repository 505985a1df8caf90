"""Webhook ingestion API application."""

import logging
from typing import Optional

from fastapi import FastAPI

from ..__version__ import __version__
from ..config.settings import HokkuSettings, get_settings
from ..services import HealthService, IngestService
from .exception_handlers import register_exception_handlers
from .routers import health_router, webhook_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[HokkuSettings] = None) -> FastAPI:
    """Create the webhook API.

    Args:
        settings: Settings to use; loaded from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    policy = settings.to_policy()

    app = FastAPI(
        title="Hokku",
        version=__version__,
        description="Validates incoming webhooks and stores them as JSON files",
    )
    app.state.settings = settings
    app.state.ingest_service = IngestService(policy)
    app.state.health_service = HealthService(policy, __version__)

    register_exception_handlers(app, is_production=settings.is_production)
    app.include_router(webhook_router)
    app.include_router(health_router)

    if not settings.get_auth_token():
        logger.warning("No auth token configured; /webhook accepts unauthenticated requests")

    logger.info(f"Created {settings.app_name} API storing to {policy.storage_root}")
    return app
