"""Hokku webhook service entry point."""

import uvicorn

from .config.logging_config import get_logger
from .config.settings import get_settings

logger = get_logger(__name__)


def main() -> None:
    """Run the application."""
    from .api import create_app

    settings = get_settings()
    app = create_app(settings)

    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.is_development else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
