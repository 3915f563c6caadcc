"""
Document ingestion: upload fetch, PDF extraction, quota policy, and indexing.

Exports: IngestionPipeline, IngestionOutcome, IngestionResult
"""

from .entrypoint import IngestionPipeline
from .models import IngestionOutcome, IngestionResult

__all__ = ["IngestionOutcome", "IngestionPipeline", "IngestionResult"]
