"""Application and endpoint configuration data models."""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import ServiceType

DEFAULT_PROMPT = (
    "Recognize the formulas and text and return Markdown in pandoc syntax. "
    "Wrap formulas in KaTeX syntax and do not drop any text. "
    "Return only the content without any explanation."
)
DEFAULT_HOTKEY = "cmd+shift+m"
DEFAULT_TIMEOUT_SECONDS = 10.0

# Hosted APIs that always reject requests without a key
CREDENTIAL_REQUIRED_HOSTS = ("api.openai.com", "openrouter.ai")


def mask_secret(secret: Optional[str]) -> str:
    """Return a masked secret for display and logs."""
    if not secret:
        return ""
    if len(secret) <= 8:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 8) + secret[-4:]


class EndpointConfiguration(BaseModel):
    """Snapshot of the remote endpoint an operation talks to."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field("", description="Base URL of the OpenAI-compatible API")
    api_key: Optional[str] = Field(None, description="Credential sent as a bearer token")
    service_type: ServiceType = Field(ServiceType.OPENAI_COMPATIBLE, description="Endpoint flavour")
    timeout: Optional[float] = Field(None, description="Request timeout in seconds")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def requires_credential(self) -> bool:
        """Whether the endpoint is known to need a credential."""
        if self.service_type.requires_api_key:
            return True
        host = (urlparse(self.base_url.strip()).hostname or "").lower()
        return any(host == known or host.endswith("." + known) for known in CREDENTIAL_REQUIRED_HOSTS)

    def mask_api_key(self) -> str:
        """Return masked API key for display."""
        return mask_secret(self.api_key)


class AppConfig(BaseModel):
    """Persisted application configuration."""

    api_base_url: str = Field(
        ServiceType.OLLAMA.get_default_base_url(), description="Base URL of the vision model API"
    )
    api_key: str = Field("", description="API key for authentication")
    service_type: ServiceType = Field(ServiceType.OPENAI_COMPATIBLE, description="Endpoint flavour")
    model: str = Field("", description="Selected model identifier")
    prompt: str = Field(DEFAULT_PROMPT, description="Prompt sent along with screenshots")
    hotkey: str = Field(DEFAULT_HOTKEY, description="Global capture shortcut")
    sound_enabled: bool = Field(True, description="Play a sound when a capture finishes")
    request_timeout_seconds: float = Field(
        DEFAULT_TIMEOUT_SECONDS, description="Timeout applied to endpoint requests"
    )

    @model_validator(mode='before')
    @classmethod
    def set_defaults(cls, values):
        """Fill the base URL from the service type when it is missing."""
        if isinstance(values, dict):
            if not values.get('api_base_url') and values.get('service_type'):
                service_type = values['service_type']
                if isinstance(service_type, str):
                    try:
                        service_type = ServiceType(service_type)
                    except ValueError:
                        return values
                if isinstance(service_type, ServiceType):
                    values['api_base_url'] = service_type.get_default_base_url()
        return values

    def to_endpoint(self) -> EndpointConfiguration:
        """Project the stored settings onto the endpoint an operation uses."""
        return EndpointConfiguration(
            base_url=self.api_base_url,
            api_key=self.api_key or None,
            service_type=self.service_type,
            timeout=self.request_timeout_seconds,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        data = self.model_dump()
        data['service_type'] = self.service_type.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'AppConfig':
        """Create instance from dictionary."""
        return cls(**data)

    def to_public_dict(self) -> dict:
        """Dictionary safe to hand to the front end."""
        data = self.to_dict()
        data['api_key'] = mask_secret(self.api_key)
        data['has_api_key'] = bool(self.api_key)
        return data

    def mask_api_key(self) -> str:
        """Return masked API key for display."""
        return mask_secret(self.api_key)
