"""AWS boundary adapters."""

from docchat.boundary.aws.s3_client import S3DocumentClient, StoredObject

__all__ = ["S3DocumentClient", "StoredObject"]
