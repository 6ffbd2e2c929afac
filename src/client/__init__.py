"""HTTP client helpers for the configured endpoint."""

from .errors import (
    EndpointCallError,
    InvalidConfiguration,
    NetworkError,
    EndpointTimeoutError,
    AuthenticationError,
    EndpointNotFound,
    ServerError,
    RequestError,
    RejectedError,
    MalformedResponse
)
from .http_support import EndpointResponse, build_headers, join_url, send_get

__all__ = [
    'EndpointCallError',
    'InvalidConfiguration',
    'NetworkError',
    'EndpointTimeoutError',
    'AuthenticationError',
    'EndpointNotFound',
    'ServerError',
    'RequestError',
    'RejectedError',
    'MalformedResponse',
    'EndpointResponse',
    'build_headers',
    'join_url',
    'send_get'
]
