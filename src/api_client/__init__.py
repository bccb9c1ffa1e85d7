"""API Client Core - resilient async HTTP client with retry, backoff and stats."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .client import AsyncAPIClient
from .core.config import ClientConfig, RateLimitConfig
from .core.env_config import load_from_env
from .core.exceptions import (
    APIClientError,
    NetworkError,
    TimeoutError,
    HTTPError,
    ApiError,
    RequestCancelledError,
    ConfigurationError,
)
from .core.logging import APIClientLogger, LoggingConfig
from .core.response import ResponseEnvelope
from .core.stats import StatsSnapshot
from .core.transport import host_contains

# Users can configure logging themselves using logging.getLogger('api_client')
logging.getLogger('api_client').addHandler(logging.NullHandler())

try:
    __version__ = version("api-client-core")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "AsyncAPIClient",
    "ResponseEnvelope",
    "StatsSnapshot",
    "host_contains",

    # Config
    "ClientConfig",
    "RateLimitConfig",
    "LoggingConfig",
    "APIClientLogger",
    "load_from_env",

    # Exceptions
    "APIClientError",
    "NetworkError",
    "TimeoutError",
    "HTTPError",
    "ApiError",
    "RequestCancelledError",
    "ConfigurationError",

    # Version
    "__version__",
]
