"""Validation of endpoint and application settings."""

import math
import urllib.parse
from typing import List, Optional
from dataclasses import dataclass

from ..models.endpoint_config import AppConfig, EndpointConfiguration


@dataclass
class ValidationError:
    """Represents a validation error."""
    field: str
    message: str
    code: str


@dataclass
class ValidationResult:
    """Result of validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[ValidationError]

    def add_error(self, field: str, message: str, code: str = "invalid"):
        """Add a validation error."""
        self.errors.append(ValidationError(field, message, code))
        self.is_valid = False

    def add_warning(self, field: str, message: str, code: str = "warning"):
        """Add a validation warning."""
        self.warnings.append(ValidationError(field, message, code))

    def get_field_errors(self, field: str) -> List[ValidationError]:
        """Get errors for a specific field."""
        return [error for error in self.errors if error.field == field]

    def summary(self) -> str:
        """Single line listing every error message."""
        return "; ".join(error.message for error in self.errors)


class EndpointValidator:
    """Checks an endpoint before any request is sent."""

    ALLOWED_SCHEMES = ('http', 'https')

    def validate_endpoint(
        self,
        config: EndpointConfiguration,
        require_credential: bool = False
    ) -> ValidationResult:
        """Validate an endpoint configuration.

        Args:
            config: Endpoint to validate
            require_credential: Reject endpoints known to need a key when none is set

        Returns:
            ValidationResult with validation status and errors
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        self.validate_base_url(config.base_url, result)

        if require_credential and config.requires_credential and not config.has_credential:
            result.add_error("api_key", "API key is required for this endpoint", "required")

        if config.timeout is not None and not self._is_valid_timeout(config.timeout):
            result.add_error("timeout", "Timeout must be a positive number of seconds", "invalid_timeout")

        return result

    def validate_base_url(self, base_url: Optional[str], result: ValidationResult, field: str = "base_url"):
        """Add errors to result unless base_url is an absolute http(s) URL."""
        if not base_url or not base_url.strip():
            result.add_error(field, "Base URL is required", "required")
            return

        base_url = base_url.strip()
        if any(c.isspace() for c in base_url):
            result.add_error(field, "Base URL must not contain whitespace", "invalid_url")
            return

        try:
            parsed = urllib.parse.urlparse(base_url)
            # .port raises ValueError for out of range or non-numeric ports
            parsed.port
        except ValueError:
            result.add_error(field, "Invalid URL format", "invalid_url")
            return

        if parsed.scheme.lower() not in self.ALLOWED_SCHEMES:
            result.add_error(field, "Base URL must start with http:// or https://", "invalid_scheme")
        elif not parsed.hostname:
            result.add_error(field, "Base URL must include a host", "invalid_url")
        elif parsed.query or parsed.fragment:
            result.add_error(field, "Base URL must not contain a query string or fragment", "invalid_url")
        elif parsed.scheme.lower() == 'http' and not self._is_local_host(parsed.hostname):
            result.add_warning(field, "HTTP URLs send the API key unencrypted", "insecure_url")

    def _is_valid_timeout(self, timeout: float) -> bool:
        return isinstance(timeout, (int, float)) and math.isfinite(timeout) and timeout > 0

    def _is_local_host(self, host: str) -> bool:
        return host in ('localhost', '127.0.0.1', '::1')


class ConfigurationValidator(EndpointValidator):
    """Validator for the application settings form."""

    MAX_PROMPT_LENGTH = 10000
    MAX_MODEL_LENGTH = 200

    def validate_app_config(self, config: AppConfig) -> ValidationResult:
        """Validate settings before they are stored.

        Args:
            config: AppConfig to validate

        Returns:
            ValidationResult with validation status and errors
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        self.validate_base_url(config.api_base_url, result, field="api_base_url")

        if not self._is_valid_timeout(config.request_timeout_seconds):
            result.add_error("request_timeout_seconds", "Timeout must be a positive number of seconds", "invalid_timeout")

        if not config.prompt or not config.prompt.strip():
            result.add_error("prompt", "Prompt cannot be empty", "empty")
        elif len(config.prompt) > self.MAX_PROMPT_LENGTH:
            result.add_error("prompt", f"Prompt is too long (max {self.MAX_PROMPT_LENGTH} characters)", "too_long")

        if not config.hotkey or not config.hotkey.strip():
            result.add_error("hotkey", "Hotkey cannot be empty", "empty")

        if len(config.model) > self.MAX_MODEL_LENGTH:
            result.add_error("model", f"Model name is too long (max {self.MAX_MODEL_LENGTH} characters)", "too_long")

        endpoint = config.to_endpoint()
        if endpoint.requires_credential and not endpoint.has_credential:
            result.add_warning("api_key", "This endpoint usually requires an API key", "api_key_required")

        return result
