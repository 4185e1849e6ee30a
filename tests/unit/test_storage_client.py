"""
Unit tests for the storage clients.

The S3 client is exercised with botocore's Stubber, so no network calls
are made. Presigning is computed locally by botocore.
"""

from datetime import datetime, timezone

import pytest
from botocore.exceptions import BotoCoreError
from botocore.stub import Stubber

from media_player.core.playback.cancellation import CancellationToken, ListingCancelled
from media_player.core.playback.playlist import ObjectStore
from media_player.infrastructure.storage.client import (
    MockStorageClient,
    S3StorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)


@pytest.fixture
def s3_client() -> S3StorageClient:
    return S3StorageClient(StorageConfig(
        access_key_id="test-access",
        secret_access_key="test-secret",
        bucket_name="media",
        endpoint_url="http://localhost:9000",
        secure=False,
        timeout_seconds=5,
    ))


def listing_page(keys: list[str], next_token: str = "") -> dict:
    page = {
        "IsTruncated": bool(next_token),
        "KeyCount": len(keys),
        "Contents": [
            {
                "Key": key,
                "Size": 100,
                "ETag": '"abc123"',
                "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc),
            }
            for key in keys
        ],
    }
    if next_token:
        page["NextContinuationToken"] = next_token
    return page


class TestS3StorageClient:
    """Tests for the boto3-backed client."""

    def test_lists_objects_across_pages(self, s3_client):
        with Stubber(s3_client._s3_client) as stubber:
            stubber.add_response("list_objects_v2", listing_page(["a.mp3", "b.mp3"], "next"))
            stubber.add_response("list_objects_v2", listing_page(["c.mp3"]))

            objects = list(s3_client.list_objects())

        assert [o.key for o in objects] == ["a.mp3", "b.mp3", "c.mp3"]
        assert objects[0].size == 100
        assert objects[0].etag == "abc123"

    def test_empty_bucket_lists_nothing(self, s3_client):
        with Stubber(s3_client._s3_client) as stubber:
            stubber.add_response("list_objects_v2", {"IsTruncated": False, "KeyCount": 0})

            assert list(s3_client.list_objects()) == []

    def test_missing_bucket_raises_storage_error(self, s3_client):
        with Stubber(s3_client._s3_client) as stubber:
            stubber.add_client_error(
                "list_objects_v2",
                service_error_code="NoSuchBucket",
                service_message="The specified bucket does not exist",
                http_status_code=404,
            )

            with pytest.raises(StorageError, match="NoSuchBucket"):
                list(s3_client.list_objects())

    def test_cancelled_token_stops_listing(self, s3_client):
        token = CancellationToken()
        token.cancel()

        with Stubber(s3_client._s3_client) as stubber:
            stubber.add_response("list_objects_v2", listing_page(["a.mp3"]))

            with pytest.raises(ListingCancelled):
                list(s3_client.list_objects(cancel_token=token))

    def test_cancelled_token_stops_before_next_page(self, s3_client):
        """A page of folders only still checks the token before paging on."""
        token = CancellationToken()
        token.cancel()
        folders_only = {
            "IsTruncated": True,
            "KeyCount": 1,
            "CommonPrefixes": [{"Prefix": "live/"}],
            "NextContinuationToken": "next",
        }

        with Stubber(s3_client._s3_client) as stubber:
            stubber.add_response("list_objects_v2", folders_only)

            with pytest.raises(ListingCancelled):
                list(s3_client.list_objects(recursive=False, cancel_token=token))

            stubber.assert_no_pending_responses()

    def test_presigned_url_is_path_style_with_expiry(self, s3_client):
        url = s3_client.presign_get("music/song.mp3", 604800)

        assert url.startswith("http://localhost:9000/media/music/song.mp3")
        assert "X-Amz-Expires=604800" in url
        assert "X-Amz-Signature=" in url

    def test_presign_failure_raises_storage_error(self, s3_client, monkeypatch):
        def fail(*args, **kwargs):
            raise BotoCoreError()

        monkeypatch.setattr(s3_client._s3_client, "generate_presigned_url", fail)

        with pytest.raises(StorageError, match="Presigned URL generation failed"):
            s3_client.presign_get("song.mp3", 60)


class TestMockStorageClient:
    """Tests for the in-memory client."""

    def test_lists_in_key_order(self):
        storage = MockStorageClient(objects={"b": b"", "a": b"", "c/d": b""})

        assert [o.key for o in storage.list_objects()] == ["a", "b", "c/d"]

    def test_prefix_and_non_recursive_listing(self):
        storage = MockStorageClient()
        storage.put_object("music/a.mp3", b"123")
        storage.put_object("music/live/b.mp3")
        storage.put_object("video/c.mp4")

        recursive = [o.key for o in storage.list_objects(prefix="music/")]
        flat = [o.key for o in storage.list_objects(prefix="music/", recursive=False)]

        assert recursive == ["music/a.mp3", "music/live/b.mp3"]
        assert flat == ["music/a.mp3"]

    def test_size_is_reported(self):
        storage = MockStorageClient(objects={"a": b"12345"})

        assert next(storage.list_objects()).size == 5

    def test_presign_returns_mock_uri(self):
        storage = MockStorageClient(bucket_name="media")

        assert storage.presign_get("a.mp3", 60) == "mock://media/a.mp3?expires=60"


class TestFactory:

    def test_mock_mode_returns_mock_client(self):
        assert isinstance(create_storage_client(mock_mode=True), MockStorageClient)

    def test_real_mode_requires_config(self):
        with pytest.raises(ValueError, match="config is required"):
            create_storage_client()

    def test_real_mode_returns_s3_client(self):
        config = StorageConfig(
            access_key_id="k",
            secret_access_key="s",
            bucket_name="media",
            endpoint_url="https://play.minio.io:9000",
        )

        client = create_storage_client(config=config)

        assert isinstance(client, S3StorageClient)
        assert client.bucket_name == "media"


class TestStorageClientProtocol:

    def test_extends_object_store_with_bucket_name_only(self):
        assert ObjectStore in StorageClient.__mro__
        assert "list_objects" not in vars(StorageClient)
        assert "presign_get" not in vars(StorageClient)
        assert StorageClient.__annotations__ == {"bucket_name": str}
