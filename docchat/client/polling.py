"""
Post-upload polling with exponential backoff.

Ingestion runs asynchronously, so right after an upload the document may
not exist yet. BackoffPolicy is a pure attempt -> delay function; the
lookup loop is driven by tenacity.

Dependencies: httpx, tenacity, docchat.client.api_client
System role: Upload-to-chat handoff on the client
"""

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from docchat.client.api_client import ChatApiClient
from docchat.client.notifications import LoggingNotifier, Notifier
from docchat.configs.client import ClientSettings
from docchat.core.exceptions import ChatTransportError, DocumentNotFoundError, DocumentPollingTimeout
from docchat.models.document import DocumentResponse, UploadStatus
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

T = TypeVar("T")

POLLING_FAILED_NOTICE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class BackoffPolicy:
    """Bounded exponential backoff: delays double up to a cap."""

    initial_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 8.0
    max_attempts: int = 10

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be non-negative")

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "BackoffPolicy":
        return cls(
            initial_delay=settings.poll_initial_delay,
            multiplier=settings.poll_multiplier,
            max_delay=settings.poll_max_delay,
            max_attempts=settings.poll_max_attempts,
        )

    def delay_for(self, attempt: int) -> float | None:
        """
        Delay to wait after a failed attempt.

        Args:
            attempt: 1-based number of the attempt that just failed

        Returns:
            Seconds to wait, or None when no attempts remain
        """
        if attempt >= self.max_attempts:
            return None
        return min(self.initial_delay * self.multiplier ** (attempt - 1), self.max_delay)


async def wait_for_document(
    lookup: Callable[[], Awaitable[T]],
    key: str,
    policy: BackoffPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Retry a lookup while it raises DocumentNotFoundError.

    Args:
        lookup: Zero-argument coroutine function, e.g. a get-by-key call
        key: Storage key, for errors and logs
        policy: Backoff policy
        sleep: Awaitable sleep (tests inject a recorder)

    Returns:
        The lookup's result

    Raises:
        DocumentPollingTimeout: Still not found after policy.max_attempts
    """

    def _wait(retry_state: RetryCallState) -> float:
        return policy.delay_for(retry_state.attempt_number) or 0.0

    def _log_retry(retry_state: RetryCallState) -> None:
        logger.debug(
            f"{__name__}:wait_for_document - Not found yet, attempt {retry_state.attempt_number}",
            extra={"file_key": key},
        )

    retrying = AsyncRetrying(
        retry=retry_if_exception_type(DocumentNotFoundError),
        stop=stop_after_attempt(policy.max_attempts),
        wait=_wait,
        sleep=sleep,
        before_sleep=_log_retry,
    )
    try:
        async for attempt in retrying:
            with attempt:
                return await lookup()
    except RetryError as e:
        logger.warning(
            f"{__name__}:wait_for_document - Gave up after {policy.max_attempts} attempts",
            extra={"file_key": key},
        )
        raise DocumentPollingTimeout(key, policy.max_attempts) from e


class UploadState(str, enum.Enum):
    WAITING = "waiting"
    READY = "ready"
    FAILED = "failed"


class UploadWatcher:
    """Track one upload from transport completion to a chat-ready document."""

    def __init__(
        self,
        api_client: ChatApiClient,
        policy: BackoffPolicy | None = None,
        notifier: Notifier | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._api = api_client
        self._policy = policy or BackoffPolicy()
        self._notifier = notifier or LoggingNotifier()
        self._sleep = sleep
        self.state = UploadState.WAITING
        self.document: DocumentResponse | None = None

    async def watch(self, key: str) -> DocumentResponse | None:
        """
        Poll until the document for key exists.

        A document that exists but already FAILED (for example over the
        plan's page limit) ends in FAILED with its error as the notice.
        Lookup errors that are not retried (server errors, network
        failures) also end in FAILED with the generic notice.

        Returns:
            The document, or None on terminal failure
        """
        self.state = UploadState.WAITING
        try:
            document = await wait_for_document(
                lambda: self._api.get_document_by_key(key),
                key,
                self._policy,
                sleep=self._sleep,
            )
        except DocumentPollingTimeout:
            self.state = UploadState.FAILED
            self._notifier.error(POLLING_FAILED_NOTICE)
            return None
        except (ChatTransportError, httpx.HTTPError) as e:
            log_exception_with_context(logger, f"{__name__}:watch - Lookup failed", e, file_key=key)
            self.state = UploadState.FAILED
            self._notifier.error(POLLING_FAILED_NOTICE)
            return None

        self.document = document
        if document.status == UploadStatus.FAILED:
            self.state = UploadState.FAILED
            self._notifier.error(document.error_message or POLLING_FAILED_NOTICE)
            return document

        self.state = UploadState.READY
        return document
