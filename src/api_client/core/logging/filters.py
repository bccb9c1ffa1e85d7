"""
Log filters adding correlation IDs and static fields.

The correlation ID lives in a ContextVar so that concurrent requests running
as separate asyncio tasks each log their own ID.
"""

import logging
from contextvars import ContextVar, Token
from typing import Dict, Any, Optional


_correlation_id: ContextVar[Optional[str]] = ContextVar("api_client_correlation_id", default=None)


def set_correlation_id(correlation_id: Optional[str]) -> Token:
    """
    Set correlation ID for the current context.

    Returns:
        Token for restoring the previous value with reset_correlation_id()

    Example:
        >>> token = set_correlation_id("sync-2024-01-15")
        >>> logger.info("Fetching transactions")  # includes correlation_id
        >>> reset_correlation_id(token)
    """
    return _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the current context, or None."""
    return _correlation_id.get()


def reset_correlation_id(token: Token) -> None:
    """Restore the correlation ID that was active before set_correlation_id()."""
    _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` to records when one is set."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, 'correlation_id'):
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields to all log records.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "actual-xero-sync"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
