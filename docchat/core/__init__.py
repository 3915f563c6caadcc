"""Core domain logic: exceptions, answer composition, and document ingestion."""
