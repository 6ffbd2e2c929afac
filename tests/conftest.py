"""
Pytest configuration and fixtures.
"""

import os
import socket
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# Keep test runs from writing log files into the working tree
os.environ.setdefault("LOG_TO_FILE", "false")

from src.config.configuration_service import ConfigurationService  # noqa: E402
from src.models.endpoint_config import EndpointConfiguration  # noqa: E402


@asynccontextmanager
async def run_endpoint(routes):
    """Serve the given aiohttp routes locally and yield the base URL (``.../v1``)."""
    app = web.Application()
    app.add_routes(routes)
    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url("/v1"))
    finally:
        await server.close()


@pytest.fixture
def endpoint_server():
    """Factory for a local OpenAI-compatible test endpoint."""
    return run_endpoint


@pytest.fixture
def closed_port_url():
    """Base URL pointing at a port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/v1"


@pytest.fixture
def config_path(tmp_path):
    """Path of a configuration file inside a temporary data directory."""
    return str(tmp_path / "data" / "config.json")


@pytest.fixture
def config_service(config_path):
    """ConfigurationService backed by a temporary file."""
    return ConfigurationService(config_path)


@pytest.fixture
def make_endpoint():
    """Build an EndpointConfiguration with short test defaults."""
    def _make(base_url, api_key="sk-test-key", **kwargs):
        kwargs.setdefault("timeout", 5.0)
        return EndpointConfiguration(base_url=base_url, api_key=api_key, **kwargs)
    return _make


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
