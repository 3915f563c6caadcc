"""
User-visible notices raised by the chat client.

Dependencies: logging (stdlib)
System role: Toast/notice sink for ChatSession and UploadWatcher
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Sink for short user-facing notices."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show a failure notice."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Show an informational notice."""


class LoggingNotifier(Notifier):
    """Notifier for headless use: notices go to the log."""

    def error(self, message: str) -> None:
        logger.warning(f"{__name__}:error - {message}")

    def info(self, message: str) -> None:
        logger.info(f"{__name__}:info - {message}")
