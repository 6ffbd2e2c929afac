#!/usr/bin/env python3
"""
SnapMark Bridge
Main entry point for the local command server
"""

import asyncio
import logging
import sys

import uvicorn
from dotenv import load_dotenv

from src.config.configuration_service import ConfigurationService
from src.config.settings import RuntimeSettings
from src.utils.logging_config import setup_logging
from src.web.app import WebApp

# Load environment variables from .env file if it exists
load_dotenv()

SETTINGS = RuntimeSettings.from_env()

logger = logging.getLogger(__name__)


class ApplicationStartup:
    """Prepares the data directory and reports the stored configuration."""

    def __init__(self, settings: RuntimeSettings):
        """Initialize startup manager."""
        self.settings = settings
        self.config_path = settings.resolved_config_path()

    def initialize_environment(self) -> bool:
        """Create the data directory.

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Configuration file: {self.config_path.absolute()}")
            return True
        except OSError as e:
            logger.error(f"Failed to initialize environment: {e}")
            return False

    def log_configuration_summary(self, config_service: ConfigurationService) -> None:
        """Log what the front end will start with."""
        config = config_service.get_config()
        logger.info(f"  - endpoint: {config.api_base_url} ({config.service_type.value})")
        logger.info(f"  - api key: {config.mask_api_key() or '<none>'}")
        logger.info(f"  - model: {config.model or '<not selected>'}")


async def main_async():
    """Start the command server and wait until it stops."""
    setup_logging(log_level=SETTINGS.log_level)
    startup_manager = ApplicationStartup(SETTINGS)

    if not startup_manager.initialize_environment():
        sys.exit(1)

    web_app = WebApp(settings=SETTINGS)
    logger.info("Starting SnapMark Bridge...")
    startup_manager.log_configuration_summary(web_app.config_service)
    logger.info(f"Command server: http://{SETTINGS.host}:{SETTINGS.port}")

    web_config = uvicorn.Config(
        web_app.app,
        host=SETTINGS.host,
        port=SETTINGS.port,
        log_level=SETTINGS.log_level.lower(),
        access_log=False
    )
    web_server = uvicorn.Server(web_config)
    await web_server.serve()

    logger.info("Application shutdown complete")


def main():
    """Main entry point - runs the async main function."""
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")


if __name__ == "__main__":
    main()
