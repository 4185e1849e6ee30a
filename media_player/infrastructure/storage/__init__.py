"""
Object storage integration for media assets.

Supports MinIO, S3 and other S3-compatible servers.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockStorageClient,
    S3StorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)

__all__ = [
    "MockStorageClient",
    "S3StorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "create_storage_client",
]
