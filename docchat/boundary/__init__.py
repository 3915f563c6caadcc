"""Boundary adapters: database, object storage, embeddings, and vector index."""
