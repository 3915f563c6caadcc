"""
Models for the ingestion pipeline.

Exports: Chunk, IngestionOutcome, IngestionResult
"""

from .chunk import Chunk
from .ingestion_result import IngestionOutcome, IngestionResult

__all__ = ["Chunk", "IngestionOutcome", "IngestionResult"]
