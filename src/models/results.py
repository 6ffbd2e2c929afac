"""Result models returned by endpoint operations."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import ErrorKind


class EndpointError(BaseModel):
    """Typed failure carried inside an operation result."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = Field(..., description="Kind of failure")
    message: str = Field(..., description="User-facing description of the failure")
    status_code: Optional[int] = Field(None, description="HTTP status code when a response was received")


class ConnectionResult(BaseModel):
    """Outcome of a single connection test."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(..., description="Whether the endpoint accepted the request")
    message: str = Field(..., description="Diagnostic message for the user")
    status_code: Optional[int] = Field(None, description="HTTP status code returned by the endpoint")
    error: Optional[EndpointError] = Field(None, description="Failure details when success is false")
    response_time_ms: Optional[int] = Field(None, description="Round trip time in milliseconds")
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="When the test ran")

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @classmethod
    def create_ok(cls, message: str, status_code: int, response_time_ms: int = None) -> 'ConnectionResult':
        """Create a successful result."""
        return cls(
            success=True,
            message=message,
            status_code=status_code,
            response_time_ms=response_time_ms
        )

    @classmethod
    def create_error(cls, error: EndpointError, response_time_ms: int = None) -> 'ConnectionResult':
        """Create a failed result."""
        return cls(
            success=False,
            message=error.message,
            status_code=error.status_code,
            error=error,
            response_time_ms=response_time_ms
        )


class Model(BaseModel):
    """A model advertised by the endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Model identifier")
    display_name: Optional[str] = Field(None, description="Human readable name, if advertised")
    object: Optional[str] = Field(None, description="Object type reported by the API")
    owned_by: Optional[str] = Field(None, description="Owner reported by the API")


class ModelListResult(BaseModel):
    """Ordered models or a typed error, never both."""

    model_config = ConfigDict(frozen=True)

    models: List[Model] = Field(default_factory=list, description="Models in API order")
    error: Optional[EndpointError] = Field(None, description="Failure details")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def model_ids(self) -> List[str]:
        return [model.id for model in self.models]

    @classmethod
    def success(cls, models: List[Model]) -> 'ModelListResult':
        return cls(models=models)

    @classmethod
    def failure(cls, error: EndpointError) -> 'ModelListResult':
        return cls(error=error)

    def to_response(self) -> dict:
        """Serialisable body for the command surface."""
        return {
            "ok": self.ok,
            "models": [model.model_dump() for model in self.models],
            "error": self.error.model_dump(mode="json") if self.error else None,
        }
