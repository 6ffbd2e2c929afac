"""Enums for SnapMark Bridge."""

from enum import Enum


class ServiceType(Enum):
    """Supported OpenAI-compatible endpoint flavours."""

    OPENAI = "openai"
    OPENROUTER = "openrouter"
    OLLAMA = "ollama"
    LMSTUDIO = "lmstudio"
    OPENAI_COMPATIBLE = "openai_compatible"

    @classmethod
    def get_default_base_urls(cls) -> dict[str, str]:
        """Get default base URLs for each service type."""
        return {
            cls.OPENAI.value: "https://api.openai.com/v1",
            cls.OPENROUTER.value: "https://openrouter.ai/api/v1",
            cls.OLLAMA.value: "http://127.0.0.1:11434/v1",
            cls.LMSTUDIO.value: "http://127.0.0.1:1234/v1",
            cls.OPENAI_COMPATIBLE.value: "",  # Custom URL required
        }

    def get_default_base_url(self) -> str:
        """Get the default base URL for this service type."""
        return self.get_default_base_urls().get(self.value, "")

    @property
    def requires_api_key(self) -> bool:
        """Whether the hosted service rejects unauthenticated requests."""
        return self in (ServiceType.OPENAI, ServiceType.OPENROUTER)


class ErrorKind(Enum):
    """Kinds of failure an endpoint operation can report."""

    INVALID_CONFIGURATION = "invalid_configuration"
    NETWORK_ERROR = "network_error"
    TIMEOUT_ERROR = "timeout_error"
    AUTHENTICATION_ERROR = "authentication_error"
    ENDPOINT_NOT_FOUND = "endpoint_not_found"
    SERVER_ERROR = "server_error"
    REQUEST_ERROR = "request_error"
    REJECTED_ERROR = "rejected_error"
    MALFORMED_RESPONSE = "malformed_response"
