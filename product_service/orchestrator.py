"""
Sequencing of product writes and reads across blob, metadata, cache and
event stores.

There is no transaction spanning the stores. Writes are ordered so that no
store references something another store does not hold yet:
blob before metadata, metadata before cache. Nothing is rolled back when a
later step fails, and nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

from product_service.cache import CacheIndex
from product_service.db import MetadataStore, ProductRecord
from product_service.errors import (
    BlobDeleteError,
    BlobReadError,
    BlobWriteError,
    CacheMissError,
    MetadataDeleteError,
    MetadataWriteError,
    NotFoundError,
    ValidationError,
)
from product_service.events import EventNotifier
from product_service.sniffing import detect_content_type
from product_service.storage import BlobStore, StoredObject

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 60
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_NAME_LENGTH = 255
PRODUCT_CREATED_TOPIC = "product.created"


@dataclass
class UploadedFile:
    """A file received with a create request."""

    filename: str
    stream: BinaryIO


@dataclass
class CreatedProduct:
    product: ProductRecord
    cache_id: str
    image_temp_url: str
    image_real_url: str
    blob_key: str


class ProductOrchestrator:
    """Stateless coordinator; every bit of state lives in the injected stores."""

    def __init__(
        self,
        storage: BlobStore,
        db: MetadataStore,
        cache: CacheIndex,
        notifier: EventNotifier,
        *,
        cache_ttl_seconds: int = CACHE_TTL_SECONDS,
        event_topic: str = PRODUCT_CREATED_TOPIC,
    ):
        self.storage = storage
        self.db = db
        self.cache = cache
        self.notifier = notifier
        self.cache_ttl_seconds = cache_ttl_seconds
        self.event_topic = event_topic

    def create_product(
        self, name: Optional[str], upload: Optional[UploadedFile]
    ) -> CreatedProduct:
        """
        Upload the photo, record the product, index it in the cache and
        announce it.

        Only the blob upload and the metadata insert can fail the request.
        A metadata failure leaves the uploaded blob in place.
        """
        if not name:
            raise ValidationError("name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"name must be at most {MAX_NAME_LENGTH} characters"
            )
        if upload is None or upload.stream is None or not upload.filename:
            raise ValidationError("product_photo is required")

        try:
            data = upload.stream.read()
        except (OSError, ValueError) as exc:
            raise ValidationError(str(exc), message="Ensure validate file.") from exc

        key = upload.filename
        content_type = detect_content_type(data)
        try:
            self.storage.put_object(key, data, content_type)
        except Exception as exc:
            logger.exception("Upload of %s to blob storage failed", key)
            raise BlobWriteError(str(exc)) from exc
        image_real_url = self.storage.object_url(key)

        try:
            product = self.db.insert_product(name, image_real_url)
        except Exception as exc:
            logger.exception("Insert failed; blob %s is left orphaned", key)
            raise MetadataWriteError(str(exc)) from exc
        if not product.id:
            logger.error("Insert returned no id; blob %s is left orphaned", key)
            raise MetadataWriteError()

        cache_id = str(product.id)
        try:
            self.cache.set(cache_id, key, self.cache_ttl_seconds)
        except Exception as exc:
            logger.warning("Cache write for product %s failed: %s", cache_id, exc)

        try:
            self.notifier.publish(self.event_topic, product.name.encode("utf-8"))
        except Exception as exc:
            logger.debug("Publish to %s failed: %s", self.event_topic, exc)

        return CreatedProduct(
            product=product,
            cache_id=cache_id,
            image_temp_url=f"/cache/{cache_id}",
            image_real_url=image_real_url,
            blob_key=key,
        )

    def list_products(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> list[ProductRecord]:
        page = page if page and page > 0 else DEFAULT_PAGE
        limit = limit if limit and limit > 0 else DEFAULT_LIMIT
        try:
            return self.db.list_products(offset=(page - 1) * limit, limit=limit)
        except Exception:
            # Listing never fails the request; an unreachable store reads as empty.
            logger.exception("Listing products failed (page=%s, limit=%s)", page, limit)
            return []

    def read_cached_image(self, cache_id: str) -> StoredObject:
        """
        Resolve a cache token to its blob. The cache is the only lookup path;
        a miss is not retried against the metadata store.
        """
        try:
            key = self.cache.get(cache_id)
        except Exception as exc:
            logger.warning("Cache read for %s failed: %s", cache_id, exc)
            raise CacheMissError(str(exc)) from exc
        if key is None:
            logger.debug("Cache miss for %s", cache_id)
            raise CacheMissError(f"no cache entry for {cache_id}")

        try:
            return self.storage.get_object(key)
        except Exception as exc:
            logger.warning("Cached key %s could not be read: %s", key, exc)
            raise BlobReadError(str(exc)) from exc

    def delete_product(self, product_id: int) -> None:
        """
        Remove the blob first, then the row. If the blob delete fails the row
        stays, so the delete can be retried. Cache entries are left to expire.

        The blob is addressed by the stored durable reference, not by the key
        the cache holds, so a live cache token keeps resolving until its TTL.
        """
        try:
            product = self.db.get_product(product_id)
        except Exception as exc:
            logger.exception("Lookup of product %s failed", product_id)
            raise MetadataDeleteError(str(exc)) from exc
        if product is None or not product.id:
            raise NotFoundError(f"product {product_id} does not exist")

        try:
            self.storage.delete_object(product.photo_key)
        except Exception as exc:
            logger.exception("Delete of blob %s failed", product.photo_key)
            raise BlobDeleteError(str(exc)) from exc

        try:
            deleted = self.db.delete_product(product.id)
        except Exception as exc:
            logger.exception("Delete of product %s failed", product.id)
            raise MetadataDeleteError(str(exc)) from exc
        if not deleted:
            raise NotFoundError(
                f"product {product_id} is already gone",
                message="Product not found",
            )
