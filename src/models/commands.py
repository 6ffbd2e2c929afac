"""Request bodies accepted by the command server."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .endpoint_config import EndpointConfiguration
from .enums import ServiceType


class EndpointOverride(BaseModel):
    """Unsaved endpoint values the front end wants to try."""

    base_url: Optional[str] = Field(None, description="Base URL to use instead of the stored one")
    api_key: Optional[str] = Field(None, description="API key to use instead of the stored one")
    service_type: Optional[ServiceType] = Field(None, description="Service type to use instead of the stored one")
    timeout: Optional[float] = Field(None, description="Timeout in seconds")

    def apply_to(self, config: EndpointConfiguration) -> EndpointConfiguration:
        """Layer the provided fields over a stored snapshot."""
        changes = self.model_dump(exclude_none=True)
        return config.model_copy(update=changes)


class ConfigUpdateRequest(BaseModel):
    """Partial settings update; omitted fields keep their stored value."""

    api_base_url: Optional[str] = None
    api_key: Optional[str] = None
    service_type: Optional[ServiceType] = None
    model: Optional[str] = None
    prompt: Optional[str] = None
    hotkey: Optional[str] = None
    sound_enabled: Optional[bool] = None
    request_timeout_seconds: Optional[float] = None


class ModelSelectionRequest(BaseModel):
    """Model chosen from the listed models."""

    model_config = ConfigDict(str_strip_whitespace=True, protected_namespaces=())

    model_id: str = Field(..., min_length=1, description="Identifier of the selected model")
