"""Connection test for the configured endpoint."""

import time
from typing import Optional

from ..client.errors import EndpointCallError, InvalidConfiguration
from ..client.http_support import (
    MODELS_PATH,
    build_headers,
    join_url,
    rejection_for_status,
    send_get,
)
from ..models.endpoint_config import DEFAULT_TIMEOUT_SECONDS, EndpointConfiguration
from ..models.enums import ErrorKind
from ..models.results import ConnectionResult
from ..utils.error_messages import error_messages
from ..utils.logging_config import get_logger, get_error_logger
from ..validation.form_validators import EndpointValidator


logger = get_logger(__name__)


class ConnectionTester:
    """Checks that the endpoint is reachable and accepts the credential.

    A single GET against ``{base_url}/models`` with the configured credential.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        """Initialize the connection tester.

        Args:
            timeout: Timeout in seconds when the configuration carries none
        """
        self.timeout = timeout
        self.validator = EndpointValidator()

    async def test_connection(
        self,
        config: EndpointConfiguration,
        timeout: Optional[float] = None
    ) -> ConnectionResult:
        """Test a single endpoint configuration.

        Args:
            config: Endpoint to test
            timeout: Per-call override of the request timeout

        Returns:
            ConnectionResult; failures carry an EndpointError instead of raising
        """
        start_time = time.monotonic()
        url = join_url(config.base_url, MODELS_PATH) if config.base_url else ""

        try:
            self._check_config(config)
            response = await send_get(
                url,
                build_headers(config),
                timeout or config.timeout or self.timeout,
                operation="test_connection"
            )
        except InvalidConfiguration as e:
            logger.info(f"Connection test skipped: {e.message}")
            return ConnectionResult.create_error(e.to_error())
        except EndpointCallError as e:
            response_time = int((time.monotonic() - start_time) * 1000)
            get_error_logger().log_api_error("test_connection", url, e.kind.value, e.message, e.status_code)
            return ConnectionResult.create_error(e.to_error(), response_time_ms=response_time)

        rejection = rejection_for_status(response.status)
        if rejection is not None:
            get_error_logger().log_api_error(
                "test_connection", url, rejection.kind.value, rejection.message, response.status
            )
            return ConnectionResult.create_error(rejection.to_error(), response_time_ms=response.elapsed_ms)

        logger.info(f"Connection test passed: {url} (HTTP {response.status}, {response.elapsed_ms}ms)")
        return ConnectionResult.create_ok(
            message=error_messages.get_success_message("connection_ok", {"status_code": response.status}),
            status_code=response.status,
            response_time_ms=response.elapsed_ms
        )

    def _check_config(self, config: EndpointConfiguration) -> None:
        """Raise InvalidConfiguration before any network I/O."""
        result = self.validator.validate_endpoint(config)
        if not result.is_valid:
            raise InvalidConfiguration(
                error_messages.message_for_kind(ErrorKind.INVALID_CONFIGURATION, detail=result.summary())
            )
