"""
Configuration loader from environment variables and .env files.
"""

import os
from typing import Optional

from ..config import ClientConfig, RateLimitConfig
from .validator import APIClientSettings

PROFILE_ENV_VAR = "API_CLIENT_ENV"


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    Get .env file path for profile.

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)   # API_CLIENT_ENV not set
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV_VAR)

    if not profile:
        return ".env"

    return f".env.{profile}"


def load_from_env(
    profile: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides
) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (API_CLIENT_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Overrides naming APIClientSettings fields are validated with the rest of
    the settings; the others (``diagnostics``, ``rate_limit``, ``logging``,
    ``logger``) go straight to ClientConfig.

    Args:
        profile: Profile name, selects ``.env.<profile>``
        env_file: Custom .env file path (overrides profile)
        **overrides: Explicit config overrides

    Returns:
        ClientConfig instance

    Raises:
        pydantic.ValidationError: Invalid environment values

    Example:
        >>> config = load_from_env(profile="production", max_retries=5)
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    settings_fields = set(APIClientSettings.model_fields)
    settings_overrides = {k: v for k, v in overrides.items() if k in settings_fields}
    config_overrides = {k: v for k, v in overrides.items() if k not in settings_fields}

    settings = APIClientSettings(_env_file=env_file, **settings_overrides)

    rate_limit = None
    if settings.rate_limit_max_requests is not None:
        rate_limit = RateLimitConfig(
            max_requests=settings.rate_limit_max_requests,
            time_window=settings.rate_limit_time_window,
        )

    config_kwargs = dict(
        base_url=settings.base_url,
        headers=settings.headers,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        retry_delay=settings.retry_delay,
        retry_jitter=settings.retry_jitter,
        max_retry_delay=settings.max_retry_delay,
        verify_ssl=settings.verify_ssl,
        rate_limit=rate_limit,
        logging=settings.to_logging_config(),
    )
    config_kwargs.update(config_overrides)

    return ClientConfig(**config_kwargs)
