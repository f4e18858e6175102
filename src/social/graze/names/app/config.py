"""
Configuration Module for the ENS Resolver Service

This module defines the configuration system for the resolver service, using Pydantic for settings validation
and dependency injection through AppKeys.

The configuration follows these principles:
1. Environment-based configuration with sensible defaults
2. Strong validation and typing through Pydantic
3. Dependency injection pattern using aiohttp's app context

The Settings class serves as the central configuration point, loaded from environment variables. The only
required value is the Ethereum RPC endpoint used to build the long-lived resolution client at startup. All
application components access settings and shared resources through typed AppKeys.
"""

import asyncio
from typing import Final, Literal, Optional, Set
import logging
from pydantic import (
    AliasChoices,
    Field,
)
from pydantic_settings import BaseSettings
from aiohttp import web
from aiohttp import ClientSession
from ens import AsyncENS
from web3 import AsyncWeb3

from social.graze.names.app.metrics import MetricsClient
from social.graze.names.model.health import HealthGauge
from social.graze.names.resolve.ens import DEFAULT_AVATAR_BASE_URL


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings for the resolver service.

    This class uses Pydantic's BaseSettings to automatically load values from environment variables. Aliases are
    provided where a setting is commonly known under more than one name, for example the RPC endpoint can be set
    with either ETHEREUM_RPC_URL or RPC_URL.
    """

    # Environment and debugging settings
    debug: bool = False
    """
    Enable debug mode for verbose logging and development features.
    Set with DEBUG=true environment variable.
    """

    http_port: int = Field(alias="port", default=5100)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    # Upstream provider
    ethereum_rpc_url: str = Field(
        validation_alias=AliasChoices("ethereum_rpc_url", "rpc_url"),
    )
    """
    Ethereum mainnet JSON-RPC endpoint used for ENS resolution (required, no default).
    Set with ETHEREUM_RPC_URL or RPC_URL environment variables.
    """

    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL
    """
    Metadata service prefix that normalized names are appended to when building avatar URLs.
    Set with AVATAR_BASE_URL environment variable.
    """

    cache_max_age: int = 60 * 60 * 24
    """
    Seconds shared caches may treat a successful resolution as fresh.
    Set with CACHE_MAX_AGE environment variable.
    Default: 86400 (24 hours)
    """

    shadow_resolver_url: Optional[str] = None
    """
    URL template of an ENS HTTP API used for shadow lookups, with a {subject} placeholder, for example
    https://api.ensideas.com/ens/resolve/{subject}. Shadow lookups are disabled when unset.
    Set with SHADOW_RESOLVER_URL environment variable.
    """

    # Monitoring and error reporting
    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    metrics_backend: Literal["telegraf", "none"] = "telegraf"
    """
    Metrics backend, either telegraf or none.
    Set with METRICS_BACKEND environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

Web3AppKey: Final = web.AppKey("web3", AsyncWeb3)
"""AppKey for accessing the RPC backed web3 client"""

EnsAppKey: Final = web.AppKey("ens", AsyncENS)
"""AppKey for accessing the shared ENS client built on top of the web3 client"""

SessionAppKey: Final = web.AppKey("http_session", ClientSession)
"""AppKey for accessing the shared aiohttp client session used for shadow lookups"""

HealthGaugeAppKey: Final = web.AppKey("health_gauge", HealthGauge)
"""AppKey for accessing the health monitoring gauge"""

MetricsClientAppKey: Final = web.AppKey("metrics_client", MetricsClient)
"""AppKey for the metrics client"""

TickHealthTaskAppKey: Final = web.AppKey("tick_health_task", asyncio.Task[None])
"""AppKey for the background task that monitors service health"""

ShadowTasksAppKey: Final = web.AppKey("shadow_tasks", Set[asyncio.Task])
"""AppKey for the set of in-flight shadow comparison tasks"""
