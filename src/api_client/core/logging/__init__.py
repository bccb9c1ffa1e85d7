"""
Структурное логирование клиента.

Каждая запись несёт поля вызова (method, url, attempt, code, ...) и
correlation_id, общий для всех попыток одного вызова.

Example:
    >>> from api_client.core.logging import APIClientLogger, LoggingConfig
    >>> logger = APIClientLogger(LoggingConfig.create(level="DEBUG", format="json"))
    >>> logger.info("Request completed", method="GET", status_code=200)
"""

from .config import DEFAULT_LOGGER_NAME, LogFormat, LoggingConfig, LogLevel
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from .formatters import ColoredFormatter, JSONFormatter, TextFormatter, get_formatter
from .handlers import create_console_handler, create_file_handler
from .logger import APIClientLogger

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "APIClientLogger",
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "create_console_handler",
    "create_file_handler",
]
