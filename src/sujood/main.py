"""Main entry point for the Sujood web service."""

import logging

import uvicorn

from sujood.api.app import create_app
from sujood.config import get_config, setup_logging


def main() -> None:
    """Run the Sujood web service."""
    config = get_config()
    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info("Sujood starting...")
    logger.info(f"Settings file: {config.settings_path}")
    logger.info(f"Cache database: {config.cache_path}")

    app = create_app(
        settings_path=config.settings_path,
        cache_path=config.cache_path,
        retention_days=config.cache_retention_days,
        days_ahead=config.cache_days_ahead,
    )

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
