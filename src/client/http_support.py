"""Request helpers shared by the connection tester and the model lister."""

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlparse

import aiohttp

from ..models.endpoint_config import EndpointConfiguration
from ..models.enums import ErrorKind
from ..utils.error_messages import error_messages
from ..utils.logging_config import get_logger, get_request_logger
from .errors import (
    AuthenticationError,
    EndpointCallError,
    EndpointNotFound,
    EndpointTimeoutError,
    InvalidConfiguration,
    NetworkError,
    RejectedError,
    RequestError,
    ServerError,
)


logger = get_logger(__name__)

MODELS_PATH = "models"


@dataclass
class EndpointResponse:
    """What came back from a single GET."""
    url: str
    status: int
    body: str
    elapsed_ms: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def join_url(base_url: str, path: str) -> str:
    """Append a resource path to the base URL, keeping the base path."""
    return f"{base_url.strip().rstrip('/')}/{path.lstrip('/')}"


def build_headers(config: EndpointConfiguration) -> Dict[str, str]:
    """Headers for a request to the endpoint, with the bearer token if set."""
    headers = {"Accept": "application/json"}
    if config.has_credential:
        headers["Authorization"] = f"Bearer {config.api_key.strip()}"
    return headers


async def send_get(
    url: str,
    headers: Dict[str, str],
    timeout: float,
    operation: str
) -> EndpointResponse:
    """Issue one GET with a total timeout.

    Args:
        url: Absolute URL to request
        headers: Request headers
        timeout: Total time budget in seconds, connect and body read included
        operation: Name of the calling operation, for logs

    Returns:
        EndpointResponse for any status code

    Raises:
        EndpointTimeoutError: the budget ran out
        NetworkError: no response was received
        InvalidConfiguration: the URL was rejected by the client
    """
    request_logger = get_request_logger()
    start_time = time.monotonic()

    def elapsed_ms() -> int:
        return int((time.monotonic() - start_time) * 1000)

    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.get(url, headers=headers) as response:
                body = await response.text(errors="replace")
                result = EndpointResponse(
                    url=url,
                    status=response.status,
                    body=body,
                    elapsed_ms=elapsed_ms()
                )
    # ServerTimeoutError is also a ClientError, so timeouts go first
    except asyncio.TimeoutError as e:
        message = error_messages.message_for_kind(ErrorKind.TIMEOUT_ERROR, timeout=timeout)
        request_logger.log_outbound_request(operation, "GET", url, None, elapsed_ms(), message)
        raise EndpointTimeoutError(message) from e
    # NonHttpUrlClientError is not an InvalidURL subclass
    except (aiohttp.InvalidURL, aiohttp.NonHttpUrlClientError) as e:
        message = error_messages.message_for_kind(ErrorKind.INVALID_CONFIGURATION, detail=f"invalid URL {url}")
        raise InvalidConfiguration(message) from e
    except aiohttp.ClientError as e:
        message = describe_transport_error(e, url)
        request_logger.log_outbound_request(operation, "GET", url, None, elapsed_ms(), message)
        raise NetworkError(message) from e

    request_logger.log_outbound_request(operation, "GET", url, result.status, result.elapsed_ms)
    return result


def describe_transport_error(error: aiohttp.ClientError, url: str) -> str:
    """User-facing message for a request that got no response."""
    host = urlparse(url).hostname or url

    if isinstance(error, aiohttp.ClientConnectorDNSError):
        return error_messages.get_error_message("dns_resolution_failed", context={"host": host})
    if isinstance(error, aiohttp.ClientSSLError):
        return error_messages.get_error_message("ssl_error")
    if isinstance(error, aiohttp.ClientConnectorError):
        return error_messages.get_error_message("connection_failed", context={"host": host})

    logger.debug(f"Transport error for {url}: {type(error).__name__}: {error}")
    return error_messages.get_error_message("network_error")


def error_for_status(status: int) -> Optional[EndpointCallError]:
    """Map a models-listing status code onto the error taxonomy.

    Returns None for 2xx.
    """
    if 200 <= status < 300:
        return None
    if status in (401, 403):
        error_class = AuthenticationError
    elif status == 404:
        error_class = EndpointNotFound
    elif status >= 500:
        error_class = ServerError
    else:
        # other 4xx, plus anything left unfollowed such as 304
        error_class = RequestError

    message = error_messages.message_for_kind(error_class.kind, status_code=status)
    return error_class(message, status_code=status)


def rejection_for_status(status: int) -> Optional[RejectedError]:
    """Connection tests treat every non-2xx answer as a rejection."""
    if 200 <= status < 300:
        return None
    return RejectedError(error_messages.format_rejection(status), status_code=status)
