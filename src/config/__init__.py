"""Configuration store and endpoint operations."""

from .configuration_service import ConfigurationService, ConfigurationValidationError
from .connection_service import ConnectionTester
from .model_discovery_service import ModelLister
from .settings import RuntimeSettings

__all__ = [
    'ConfigurationService',
    'ConfigurationValidationError',
    'ConnectionTester',
    'ModelLister',
    'RuntimeSettings'
]
