"""
Object storage client for media assets.

Supports any S3-compatible server (MinIO, AWS S3, Cloudflare R2) through
boto3, with a mock mode for local development.

Listing is lazy: objects are fetched page by page and handed out one at a
time, so a cancelled request stops paging as soon as the caller notices.

Mock mode keeps objects in memory, enabling API testing without
provisioning actual object storage.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ...core.playback.cancellation import CancellationToken
from ...core.playback.models import ObjectInfo
from ...core.playback.playlist import ObjectStore

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """
    Configuration for S3-compatible storage.

    endpoint_url carries the scheme; secure mirrors it so the transport
    choice is explicit in logs.
    """
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "us-east-1"
    secure: bool = True
    timeout_seconds: float = 30.0


class StorageClient(ObjectStore, Protocol):
    """
    An ObjectStore bound to one bucket.

    Tests can provide fakes and storage backends can be swapped without
    changing dependent code.
    """

    bucket_name: str


class S3StorageClient:
    """
    S3-compatible object storage client.

    Path-style addressing and SigV4 signatures work against MinIO as well
    as AWS. Retries are disabled: a failed call fails the request.
    """

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self.bucket_name = config.bucket_name

        boto_config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            connect_timeout=config.timeout_seconds,
            read_timeout=config.timeout_seconds,
            retries={"max_attempts": 1, "mode": "standard"},
        )

        self._s3_client = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            use_ssl=config.secure,
            config=boto_config,
        )

        logger.info(
            "Initialized S3 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
                "secure": config.secure,
            }
        )

    def list_objects(
        self,
        prefix: str = "",
        recursive: bool = True,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Iterator[ObjectInfo]:
        """
        Yield every object under prefix.

        Non-recursive listings use "/" as delimiter and skip the common
        prefixes ("folders"). Raises ListingCancelled once cancel_token
        is cancelled and StorageError on any backend failure, including
        a missing bucket.
        """
        params = {"Bucket": self._config.bucket_name, "Prefix": prefix}
        if not recursive:
            params["Delimiter"] = "/"

        paginator = self._s3_client.get_paginator("list_objects_v2")

        try:
            for page in paginator.paginate(**params):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                for obj in page.get("Contents", []):
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()
                    yield ObjectInfo(
                        key=obj["Key"],
                        size=obj.get("Size", 0),
                        last_modified=obj.get("LastModified"),
                        etag=obj.get("ETag", "").strip('"'),
                    )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to list objects",
                extra={"bucket": self._config.bucket_name, "prefix": prefix, "error": str(e)}
            )
            raise StorageError(f"Listing failed: {e}") from e

    def presign_get(self, key: str, expiry_seconds: int) -> str:
        """
        Generate a temporary download URL.

        Signing happens locally; no request is sent to the server, so a
        URL can be minted for an object that does not exist.
        """
        try:
            return self._s3_client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self._config.bucket_name,
                    "Key": key,
                },
                ExpiresIn=expiry_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(f"Presigned URL generation failed: {e}") from e


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory bucket for local development.

    Objects are listed in lexicographic key order like S3, and "URLs"
    are mock URIs. Not suitable for production.
    """

    def __init__(self, bucket_name: str = "mock-bucket", objects: Optional[dict[str, bytes]] = None) -> None:
        self.bucket_name = bucket_name
        self._objects: dict[str, bytes] = dict(objects or {})
        logger.info("Initialized mock storage client (in-memory)")

    def put_object(self, key: str, data: bytes = b"") -> None:
        """Store an object in memory."""
        self._objects[key] = data

    def list_objects(
        self,
        prefix: str = "",
        recursive: bool = True,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Iterator[ObjectInfo]:
        """Yield stored objects under prefix."""
        for key in sorted(self._objects):
            if not key.startswith(prefix):
                continue
            if not recursive and "/" in key[len(prefix):]:
                continue
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            yield ObjectInfo(key=key, size=len(self._objects[key]))

    def presign_get(self, key: str, expiry_seconds: int) -> str:
        """Return a mock URL for the object."""
        return f"mock://{self.bucket_name}/{key}?expires={expiry_seconds}"


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory client

    Returns:
        StorageClient implementation (S3 or Mock)
    """
    if mock_mode:
        bucket_name = config.bucket_name if config is not None else "mock-bucket"
        return MockStorageClient(bucket_name=bucket_name)

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3StorageClient(config)
