"""
Application services.

Exports: ChatService, DocumentService
"""

from docchat.application.services.chat_service import ChatService
from docchat.application.services.document_service import DocumentService

__all__ = ["ChatService", "DocumentService"]
