"""
Command-line entry point: python -m appcatalog
"""

import sys

import structlog
import uvicorn

from appcatalog.config import ConfigurationError, load_settings
from appcatalog.main import configure_logging, create_application

logger = structlog.get_logger(__name__)


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.error("Missing environment configuration, cannot start", error=str(e))
        sys.exit(1)

    app = create_application(settings)
    logger.info("Server starting", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
