"""
Task modules for the ingestion pipeline.

Exports: FetchTask, ParsingTask, IndexingTask
"""

from .fetch_task import FetchedFile, FetchTask
from .indexing_task import IndexingTask
from .parsing_task import ExtractedDocument, ParsingTask

__all__ = [
    "ExtractedDocument",
    "FetchTask",
    "FetchedFile",
    "IndexingTask",
    "ParsingTask",
]
