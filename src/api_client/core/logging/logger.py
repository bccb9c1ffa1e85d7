"""
Main logger for API Client.

Wraps a stdlib ``logging.Logger`` and accepts structured fields as keyword
arguments. Field values are masked with ``mask_sensitive_data`` before they
reach any handler.
"""

import logging
from typing import Optional, Any, Dict

from .config import DEFAULT_LOGGER_NAME, LoggingConfig
from .formatters import get_formatter, _RESERVED
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class APIClientLogger:
    """
    Structured logger used by AsyncAPIClient.

    Three modes:
    - ``APIClientLogger(config)``: configures its own handlers from LoggingConfig
    - ``APIClientLogger(logger=existing)``: logs into an injected logger as-is
    - ``APIClientLogger()``: logs into ``logging.getLogger(name)`` without
      touching handlers (the package installs a NullHandler)

    Example:
        >>> logger = APIClientLogger(LoggingConfig.create(level="DEBUG", format="json"))
        >>> logger.info("Request completed", method="GET", status_code=200)
    """

    def __init__(
        self,
        config: Optional[LoggingConfig] = None,
        name: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        if logger is not None:
            self.name = logger.name
        else:
            self.name = name or (config.name if config is not None else DEFAULT_LOGGER_NAME)
        self._closed = False
        self._owns_handlers = False

        if logger is not None:
            self._logger = logger
            return

        self._logger = logging.getLogger(self.name)
        if config is None:
            return

        level = config.level.number
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()
        self._owns_handlers = True

        filters = []
        if config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        formatter = get_formatter(config.format.value)

        if config.enable_console:
            self._logger.addHandler(
                create_console_handler(level=level, formatter=formatter, filters=filters)
            )

        if config.enable_file and config.file_path:
            self._logger.addHandler(
                create_file_handler(
                    file_path=config.file_path,
                    level=level,
                    formatter=formatter,
                    max_bytes=config.max_bytes,
                    backup_count=config.backup_count,
                    filters=filters
                )
            )

    @staticmethod
    def _extra(fields: Dict[str, Any]) -> Dict[str, Any]:
        # LogRecord attributes cannot be overwritten through ``extra``
        safe = {
            (f"field_{key}" if key in _RESERVED else key): value
            for key, value in fields.items()
        }
        return mask_sensitive_data(safe)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=self._extra(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=self._extra(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=self._extra(kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(message, extra=self._extra(kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log with traceback; call from an exception handler."""
        self._logger.exception(message, extra=self._extra(kwargs))

    def close(self) -> None:
        """
        Flush and close handlers created by this logger.

        Injected loggers are left untouched. Idempotent.
        """
        if self._closed:
            return

        if self._owns_handlers:
            for handler in self._logger.handlers[:]:
                handler.flush()
                handler.close()
                self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
