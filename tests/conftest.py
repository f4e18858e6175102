"""
Shared test configuration and fixtures.

Provides settings, a mocked ENS client and an aiohttp test client wired to the application with the mocked
client in place of the RPC backed one.
"""

from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from social.graze.names.app.config import (
    EnsAppKey,
    MetricsClientAppKey,
    SessionAppKey,
    Settings,
)
from social.graze.names.app.metrics import NoOpMetricsClient
from social.graze.names.app.server import create_app


VITALIK_LOWER = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
VITALIK_CHECKSUM = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
AVATAR_BASE = "https://metadata.ens.domains/mainnet/avatar/"


@pytest.fixture
def settings():
    """Settings pointing at a local RPC endpoint with metrics and shadow lookups disabled."""
    return Settings(
        ethereum_rpc_url="http://localhost:8545",
        metrics_backend="none",
        shadow_resolver_url=None,
    )


@pytest.fixture
def mock_ens():
    """ENS client double whose lookups find nothing unless told otherwise."""
    ns = Mock()
    ns.name = AsyncMock(return_value=None)
    ns.address = AsyncMock(return_value=None)
    return ns


@pytest.fixture
def metrics_client():
    client = NoOpMetricsClient()
    client.increment = Mock()
    client.timer = Mock()
    client.gauge = Mock()
    return client


@pytest.fixture
def app(settings, mock_ens, metrics_client):
    app = create_app(settings)
    app[EnsAppKey] = mock_ens
    app[MetricsClientAppKey] = metrics_client
    app[SessionAppKey] = Mock()
    return app


@pytest_asyncio.fixture
async def client(app):
    async with TestClient(TestServer(app)) as test_client:
        yield test_client
