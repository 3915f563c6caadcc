"""
Correlation ID propagation.

Holds the current request's correlation ID in a contextvar so log records
emitted from services, background ingestion and streamed answers can be
tied back to the HTTP request that started them.

Dependencies: contextvars, logging (stdlib)
System role: Request tracing across async boundaries
"""

import logging
import uuid
from contextvars import ContextVar

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        correlation_id: Incoming ID; a new UUID4 is minted when empty

    Returns:
        str: The ID now in effect
    """
    value = correlation_id or str(uuid.uuid4())
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")


class CorrelationIdFilter(logging.Filter):
    """Stamp every record with the current correlation ID ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True
