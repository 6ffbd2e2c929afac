"""Exceptions raised while talking to the configured endpoint.

Operations catch these at their boundary and return them as
:class:`~src.models.results.EndpointError` values.
"""

from typing import Optional

from ..models.enums import ErrorKind
from ..models.results import EndpointError


class EndpointCallError(Exception):
    """Base class for endpoint failures."""

    kind: ErrorKind = ErrorKind.REQUEST_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_error(self) -> EndpointError:
        return EndpointError(kind=self.kind, message=self.message, status_code=self.status_code)


class InvalidConfiguration(EndpointCallError):
    kind = ErrorKind.INVALID_CONFIGURATION


class NetworkError(EndpointCallError):
    kind = ErrorKind.NETWORK_ERROR


class EndpointTimeoutError(EndpointCallError):
    kind = ErrorKind.TIMEOUT_ERROR


class AuthenticationError(EndpointCallError):
    kind = ErrorKind.AUTHENTICATION_ERROR


class EndpointNotFound(EndpointCallError):
    kind = ErrorKind.ENDPOINT_NOT_FOUND


class ServerError(EndpointCallError):
    kind = ErrorKind.SERVER_ERROR


class RequestError(EndpointCallError):
    kind = ErrorKind.REQUEST_ERROR


class RejectedError(EndpointCallError):
    kind = ErrorKind.REJECTED_ERROR


class MalformedResponse(EndpointCallError):
    kind = ErrorKind.MALFORMED_RESPONSE
