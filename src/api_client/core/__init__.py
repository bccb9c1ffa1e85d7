"""Core API Client модули."""

from .config import ClientConfig, RateLimitConfig, DiagnosticsPredicate
from .exceptions import (
    APIClientError,
    NetworkError,
    TimeoutError,
    HTTPError,
    ApiError,
    RequestCancelledError,
    ConfigurationError,
    RequestSummary,
)
from .request_builder import RequestDescriptor, build_request, build_url, build_query_string
from .response import ResponseEnvelope, normalize_response
from .retry_engine import RetryEngine, calculate_retry_delay, is_retryable_error
from .stats import RequestStats, StatsSnapshot
from .rate_limiter import AsyncRateLimiter
from .transport import Transport, RawResponse, host_contains

__all__ = [
    # Config
    "ClientConfig",
    "RateLimitConfig",
    "DiagnosticsPredicate",
    # Exceptions
    "APIClientError",
    "NetworkError",
    "TimeoutError",
    "HTTPError",
    "ApiError",
    "RequestCancelledError",
    "ConfigurationError",
    "RequestSummary",
    # Request / response
    "RequestDescriptor",
    "build_request",
    "build_url",
    "build_query_string",
    "ResponseEnvelope",
    "normalize_response",
    # Retry
    "RetryEngine",
    "calculate_retry_delay",
    "is_retryable_error",
    # Stats
    "RequestStats",
    "StatsSnapshot",
    # Rate limiting
    "AsyncRateLimiter",
    # Transport
    "Transport",
    "RawResponse",
    "host_contains",
]
