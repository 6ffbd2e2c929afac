"""Error message utilities for user-friendly error handling."""

from typing import Dict, Any, Optional

from ..models.enums import ErrorKind


class ErrorMessageGenerator:
    """Generate user-friendly error messages."""

    # Error message templates
    ERROR_MESSAGES = {
        # Validation errors
        "required": "This field is required.",
        "invalid_url": "Please enter a valid URL (e.g., https://api.example.com/v1).",
        "invalid_scheme": "Only http:// and https:// URLs are supported.",
        "invalid_service": "Please select a valid service type.",
        "invalid_timeout": "The timeout must be a positive number of seconds.",
        "too_long": "This value is too long. Maximum length is {max_length} characters.",
        "empty": "This field cannot be empty.",

        # Configuration errors
        "invalid_configuration": "The endpoint configuration is invalid: {detail}",
        "api_key_required": "An API key is required for this endpoint.",
        "config_save_failed": "Failed to save the configuration. Please check your input and try again.",

        # Endpoint errors
        "authentication_error": "Authentication failed (HTTP {status_code}). Please check your API key.",
        "endpoint_not_found": "The models resource was not found (HTTP 404). Please check the base URL.",
        "server_error": "The endpoint reported a server error (HTTP {status_code}). Please try again later.",
        "request_error": "The endpoint rejected the request (HTTP {status_code}).",
        "malformed_response": "The endpoint returned a response that could not be read as a model list.",

        # Network errors
        "connection_failed": "Failed to connect to {host}. Please check that the service is running and the URL is correct.",
        "dns_resolution_failed": "Could not resolve {host}. Please check the URL and your network settings.",
        "ssl_error": "SSL/TLS connection error. The service certificate may be invalid or expired.",
        "network_error": "Network error while contacting the endpoint.",
        "timeout_error": "The request timed out after {timeout:g} seconds.",

        # System errors
        "internal_error": "An internal error occurred. Please try again.",
    }

    # Success message templates
    SUCCESS_MESSAGES = {
        "connection_ok": "Connection successful (HTTP {status_code}).",
        "config_saved": "Configuration saved successfully.",
        "models_loaded": "Loaded {count} models.",
        "model_selected": "Selected model {model_id}.",
    }

    def get_error_message(
        self,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        custom_message: Optional[str] = None
    ) -> str:
        """Get a user-friendly error message.

        Args:
            error_code: Error code to look up
            context: Additional context for message formatting
            custom_message: Custom message to use instead of template

        Returns:
            User-friendly error message
        """
        if custom_message:
            return custom_message

        template = self.ERROR_MESSAGES.get(error_code, "An unexpected error occurred.")

        if context:
            try:
                return template.format(**context)
            except (KeyError, ValueError):
                # If formatting fails, return the template as-is
                return template

        return template

    def get_success_message(
        self,
        success_code: str,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """Get a user-friendly success message."""
        template = self.SUCCESS_MESSAGES.get(success_code, "Operation completed successfully.")

        if context:
            try:
                return template.format(**context)
            except (KeyError, ValueError):
                return template

        return template

    def message_for_kind(self, kind: ErrorKind, **context) -> str:
        """Message for an endpoint error kind."""
        if kind == ErrorKind.REJECTED_ERROR:
            return self.format_rejection(context.get("status_code"))
        return self.get_error_message(kind.value, context)

    def format_rejection(self, status_code: Optional[int]) -> str:
        """Describe a non-2xx answer to a connection test.

        Args:
            status_code: HTTP status code returned by the endpoint

        Returns:
            Formatted error message
        """
        if status_code in (401, 403):
            return f"Endpoint reachable but the credential was rejected (HTTP {status_code})."
        if status_code == 404:
            return "Endpoint reachable but the models resource was not found (HTTP 404). Please check the base URL."
        if status_code is not None and status_code >= 500:
            return f"Endpoint reachable but it reported a server error (HTTP {status_code})."
        return f"Endpoint reachable but the request was rejected (HTTP {status_code})."


# Global instance for easy access
error_messages = ErrorMessageGenerator()


def format_validation_errors(errors: list) -> Dict[str, list]:
    """Format validation errors for the front end.

    Args:
        errors: List of ValidationError objects

    Returns:
        Dictionary mapping field names to error messages
    """
    formatted_errors = {}

    for error in errors:
        if error.field not in formatted_errors:
            formatted_errors[error.field] = []
        formatted_errors[error.field].append(error.message)

    return formatted_errors
