"""
Process-wide logging setup.

One stdout handler whose lines carry the request correlation ID; HTTP
and AWS client libraries are held at WARNING.

Dependencies: logging (stdlib), docchat.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from docchat.observability.correlation import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"
QUIET_LOGGERS = ("urllib3", "botocore", "boto3", "httpx", "httpcore", "faiss")


def configure_logging(level: str = "INFO") -> None:
    """
    Replace root handlers with a single correlation-aware stdout handler.

    Safe to call repeatedly (app reloads, tests); earlier handlers are removed.

    Args:
        level: Root level name; unknown names fall back to INFO
    """
    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
