"""
Pydantic settings model for environment configuration.
"""

from typing import Optional, Dict, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..logging.config import LoggingConfig


class APIClientSettings(BaseSettings):
    """
    API Client configuration from environment variables.

    Reads from:
    1. Init kwargs (overrides)
    2. Environment variables (API_CLIENT_*)
    3. .env file
    4. Defaults

    Example .env file:
        API_CLIENT_BASE_URL=https://x8ki-letl-twmt.n7.xano.io/api:v1
        API_CLIENT_TIMEOUT=30
        API_CLIENT_MAX_RETRIES=3
        API_CLIENT_RETRY_DELAY=1.0
        API_CLIENT_HEADERS={"Authorization": "Bearer secret-token"}
        API_CLIENT_RATE_LIMIT_MAX_REQUESTS=18
        API_CLIENT_LOG_LEVEL=DEBUG
        API_CLIENT_LOG_ENABLE_CONSOLE=true

    Usage:
        >>> settings = APIClientSettings()
        >>> settings.max_retries
        3
    """

    model_config = SettingsConfigDict(
        env_prefix='API_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: Optional[str] = Field(default=None, description="Base URL for relative paths")
    headers: Dict[str, str] = Field(default_factory=dict, description="Default headers (JSON object)")

    timeout: float = Field(default=30.0, gt=0, description="Per-attempt timeout in seconds")
    max_retries: int = Field(default=3, ge=0, le=10)
    retry_delay: float = Field(default=1.0, ge=0, description="Base backoff delay in seconds")
    retry_jitter: float = Field(default=1.0, ge=0)
    max_retry_delay: float = Field(default=30.0, ge=0)
    verify_ssl: bool = Field(default=True)

    # Rate limiting (disabled unless max_requests is set)
    rate_limit_max_requests: Optional[int] = Field(default=None, gt=0)
    rate_limit_time_window: float = Field(default=60.0, gt=0)

    # Logging (disabled unless console or file output is enabled)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=False)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = Field(default=None, validate_default=True)
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        """Empty string means no base URL."""
        if v is not None and not v.strip():
            return None
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v

    @field_validator('log_file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """Validate file_path is required when log_enable_file=True."""
        if info.data.get('log_enable_file') and not v:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        """LoggingConfig if any log output is enabled, else None."""
        if not self.log_enable_file and not self.log_enable_console:
            return None

        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
            enable_correlation_id=self.log_enable_correlation_id,
        )
