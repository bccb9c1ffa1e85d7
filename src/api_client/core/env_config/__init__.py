"""
Environment configuration for API Client.

Load ClientConfig from .env files and API_CLIENT_* environment variables.

Example:
    >>> from api_client.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()
    >>> config = load_from_env(profile="production")
    >>> config = load_from_env(base_url="https://api.xero.com/api.xro/2.0")
"""

from .loader import load_from_env, get_env_file_path, PROFILE_ENV_VAR
from .validator import APIClientSettings

__all__ = [
    "load_from_env",
    "get_env_file_path",
    "PROFILE_ENV_VAR",
    "APIClientSettings",
]
