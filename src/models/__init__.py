"""Data models for SnapMark Bridge."""

from .enums import ServiceType, ErrorKind
from .endpoint_config import AppConfig, EndpointConfiguration
from .results import ConnectionResult, EndpointError, Model, ModelListResult

__all__ = [
    "ServiceType",
    "ErrorKind",
    "AppConfig",
    "EndpointConfiguration",
    "ConnectionResult",
    "EndpointError",
    "Model",
    "ModelListResult"
]
