"""
Chat client: HTTP transport, optimistic message log, and session state machine.

Exports: ChatApiClient, ChatSession, ChatState, MessageLog, BackoffPolicy,
wait_for_document, UploadWatcher, Notifier
"""

from docchat.client.api_client import ChatApiClient
from docchat.client.chat_session import ChatSession, ChatState
from docchat.client.message_log import ChatMessage, MessageLog
from docchat.client.notifications import LoggingNotifier, Notifier
from docchat.client.polling import BackoffPolicy, UploadState, UploadWatcher, wait_for_document

__all__ = [
    "BackoffPolicy",
    "ChatApiClient",
    "ChatMessage",
    "ChatSession",
    "ChatState",
    "LoggingNotifier",
    "MessageLog",
    "Notifier",
    "UploadState",
    "UploadWatcher",
    "wait_for_document",
]
