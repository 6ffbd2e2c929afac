"""Local command server used by the desktop front end."""

import time
from typing import Optional

from fastapi import Body, FastAPI
from starlette.concurrency import run_in_threadpool

from ..config.configuration_service import ConfigurationService
from ..config.connection_service import ConnectionTester
from ..config.model_discovery_service import ModelLister
from ..config.settings import RuntimeSettings
from ..models.commands import ConfigUpdateRequest, EndpointOverride, ModelSelectionRequest
from ..utils.error_messages import error_messages
from ..utils.logging_config import setup_logging, get_logger
from .error_handlers import create_error_handlers


class WebApp:
    """FastAPI application exposing the bridge commands."""

    def __init__(
        self,
        settings: Optional[RuntimeSettings] = None,
        config_service: Optional[ConfigurationService] = None,
        connection_tester: Optional[ConnectionTester] = None,
        model_lister: Optional[ModelLister] = None
    ):
        """Initialize web application.

        Args:
            settings: Runtime settings, read from the environment when omitted
            config_service: Configuration store
            connection_tester: Connection tester
            model_lister: Model lister
        """
        self.settings = settings or RuntimeSettings.from_env()

        setup_logging(log_level=self.settings.log_level)
        self.logger = get_logger(__name__)

        self.app = FastAPI(title="SnapMark Bridge")

        self.config_service = config_service or ConfigurationService(
            str(self.settings.resolved_config_path())
        )
        self.connection_tester = connection_tester or ConnectionTester(self.settings.request_timeout_seconds)
        self.model_lister = model_lister or ModelLister(self.settings.request_timeout_seconds)

        self.error_handler = create_error_handlers(self.app)
        self._setup_routes()

        self.logger.info(f"Command server initialized (config: {self.config_service.config_path})")

    def _setup_routes(self):
        """Setup application routes."""

        @self.app.get("/api/config")
        def get_config():
            """Stored configuration with the API key masked."""
            return self.config_service.get_public_config()

        @self.app.put("/api/config")
        def update_config(update: ConfigUpdateRequest):
            """Partially update the stored configuration."""
            config = self.config_service.update_fields(update.model_dump(exclude_none=True))
            return {
                "message": error_messages.get_success_message("config_saved"),
                "config": config.to_public_dict()
            }

        @self.app.post("/api/test-connection")
        async def test_connection(override: Optional[EndpointOverride] = Body(None)):
            """Test the stored endpoint, or unsaved values layered over it."""
            config = await run_in_threadpool(self.config_service.load_config)
            if override is not None:
                config = override.apply_to(config)

            result = await self.connection_tester.test_connection(config)
            if result.success:
                self.logger.info(f"Connection test passed: {config.base_url}")
            else:
                self.logger.warning(f"Connection test failed: {config.base_url} - {result.message}")
            return result.model_dump(mode="json")

        @self.app.get("/api/models")
        async def get_models():
            """List models of the stored endpoint."""
            config = await run_in_threadpool(self.config_service.load_config)
            result = await self.model_lister.get_models(config)
            return result.to_response()

        @self.app.post("/api/models")
        async def get_models_for(override: Optional[EndpointOverride] = Body(None)):
            """List models of unsaved endpoint values layered over the stored ones."""
            config = await run_in_threadpool(self.config_service.load_config)
            if override is not None:
                config = override.apply_to(config)
            result = await self.model_lister.get_models(config)
            return result.to_response()

        @self.app.post("/api/models/select")
        def select_model(selection: ModelSelectionRequest):
            """Store the chosen model."""
            config = self.config_service.select_model(selection.model_id)
            return {
                "message": error_messages.get_success_message("model_selected", {"model_id": config.model}),
                "config": config.to_public_dict()
            }

        @self.app.get("/health")
        async def health_check():
            """Liveness probe for the desktop shell."""
            return {
                "status": "alive",
                "timestamp": time.time()
            }


def create_app(settings: Optional[RuntimeSettings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    web_app = WebApp(settings=settings)
    return web_app.app
