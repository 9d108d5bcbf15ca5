"""
Blob storage abstraction for S3-compatible object stores and in-memory testing.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol

import boto3
from botocore.config import Config


@dataclass
class StoredObject:
    """A blob fetched from storage, ready to be streamed back to a client."""

    key: str
    body: BinaryIO
    content_length: int
    content_type: str


class BlobStore(Protocol):
    """Defines the operations the orchestrator needs from object storage."""

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        ...

    def get_object(self, key: str) -> StoredObject:
        ...

    def delete_object(self, key: str) -> None:
        ...

    def object_url(self, key: str) -> str:
        ...

    def close(self) -> None:
        ...


@dataclass
class InMemoryBlobStore:
    """Test double for storage interactions."""

    endpoint: str = "http://storage.test"
    bucket: str = "products"
    stored_objects: dict = field(default_factory=dict)

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        self.stored_objects[key] = (bytes(data), content_type)

    def get_object(self, key: str) -> StoredObject:
        stored = self.stored_objects.get(key)
        if stored is None:
            raise FileNotFoundError(key)
        data, content_type = stored
        return StoredObject(
            key=key,
            body=io.BytesIO(data),
            content_length=len(data),
            content_type=content_type,
        )

    def delete_object(self, key: str) -> None:
        # Mirrors S3: deleting a missing key is not an error.
        self.stored_objects.pop(key, None)

    def object_url(self, key: str) -> str:
        return f"{self.endpoint}/{self.bucket}/{key}"

    def close(self) -> None:
        pass


@dataclass
class S3BlobStore:
    """
    S3-compatible storage client. Uses path-style addressing so MinIO and
    other self-hosted endpoints resolve buckets correctly.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        config = Config(
            s3={"addressing_style": "path"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentLength=len(data),
            ContentType=content_type,
            ContentDisposition="attachment",
        )

    def get_object(self, key: str) -> StoredObject:
        response = self._client.get_object(Bucket=self.bucket, Key=key)
        return StoredObject(
            key=key,
            body=response["Body"],
            content_length=response["ContentLength"],
            content_type=response.get("ContentType") or "application/octet-stream",
        )

    def delete_object(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)

    def object_url(self, key: str) -> str:
        return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"

    def close(self) -> None:
        self._client.close()
