"""Model discovery for the configured endpoint."""

import json
from typing import Any, List, Optional

from ..client.errors import EndpointCallError, InvalidConfiguration, MalformedResponse
from ..client.http_support import (
    MODELS_PATH,
    build_headers,
    error_for_status,
    join_url,
    send_get,
)
from ..models.endpoint_config import DEFAULT_TIMEOUT_SECONDS, EndpointConfiguration
from ..models.enums import ErrorKind
from ..models.results import Model, ModelListResult
from ..utils.error_messages import error_messages
from ..utils.logging_config import get_logger, get_error_logger
from ..validation.form_validators import EndpointValidator


logger = get_logger(__name__)


class ModelLister:
    """Lists the models advertised by an OpenAI-compatible endpoint."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        """Initialize the model lister.

        Args:
            timeout: Timeout in seconds when the configuration carries none
        """
        self.timeout = timeout
        self.validator = EndpointValidator()

    async def get_models(
        self,
        config: EndpointConfiguration,
        timeout: Optional[float] = None
    ) -> ModelListResult:
        """Get available models for an endpoint.

        Args:
            config: Endpoint to query
            timeout: Per-call override of the request timeout

        Returns:
            ModelListResult with models in API order, or a typed error
        """
        url = join_url(config.base_url, MODELS_PATH) if config.base_url else ""

        try:
            self._check_config(config)
            response = await send_get(
                url,
                build_headers(config),
                timeout or config.timeout or self.timeout,
                operation="get_models"
            )
            status_error = error_for_status(response.status)
            if status_error is not None:
                raise status_error
            models = self.parse_models(response.body)
        except InvalidConfiguration as e:
            logger.info(f"Model listing skipped: {e.message}")
            return ModelListResult.failure(e.to_error())
        except EndpointCallError as e:
            get_error_logger().log_api_error("get_models", url, e.kind.value, e.message, e.status_code)
            return ModelListResult.failure(e.to_error())

        logger.info(f"Successfully loaded {len(models)} models from {url}")
        return ModelListResult.success(models)

    def parse_models(self, body: str) -> List[Model]:
        """Parse an OpenAI-style ``{"data": [...]}`` body.

        Entries may be objects with an ``id`` or bare id strings. Entries without
        a usable id are skipped; a body that is not such a document raises
        MalformedResponse.
        """
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, TypeError) as e:
            raise MalformedResponse(self._malformed_message("body is not JSON")) from e

        if not isinstance(payload, dict):
            raise MalformedResponse(self._malformed_message("body is not a JSON object"))

        entries = payload.get("data")
        if not isinstance(entries, list):
            raise MalformedResponse(self._malformed_message("'data' list is missing"))

        models = []
        skipped = 0
        for entry in entries:
            model = self._parse_entry(entry)
            if model is None:
                skipped += 1
            else:
                models.append(model)

        if skipped:
            logger.warning(f"Skipped {skipped} model entries without an id")

        return models

    def _parse_entry(self, entry: Any) -> Optional[Model]:
        if isinstance(entry, str):
            return Model(id=entry) if entry.strip() else None

        if not isinstance(entry, dict):
            return None

        model_id = entry.get("id")
        if not isinstance(model_id, str) or not model_id.strip():
            return None

        return Model(
            id=model_id,
            display_name=_optional_str(entry.get("display_name")) or _optional_str(entry.get("name")),
            object=_optional_str(entry.get("object")),
            owned_by=_optional_str(entry.get("owned_by"))
        )

    def _malformed_message(self, detail: str) -> str:
        logger.debug(f"Malformed models response: {detail}")
        return error_messages.message_for_kind(ErrorKind.MALFORMED_RESPONSE)

    def _check_config(self, config: EndpointConfiguration) -> None:
        """Raise InvalidConfiguration before any network I/O."""
        result = self.validator.validate_endpoint(config, require_credential=True)
        if not result.is_valid:
            raise InvalidConfiguration(
                error_messages.message_for_kind(ErrorKind.INVALID_CONFIGURATION, detail=result.summary())
            )


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None
