"""
Dependency wiring for the FastAPI app.

Store clients are built once per application, held on ``app.state`` and
closed when the application shuts down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from product_service.cache import CacheIndex, InMemoryCacheIndex, RedisCacheIndex
from product_service.config import Settings
from product_service.db import InMemoryProductStore, MetadataStore, SqlProductStore
from product_service.events import EventNotifier, InMemoryEventNotifier, RedisEventNotifier
from product_service.orchestrator import ProductOrchestrator
from product_service.storage import BlobStore, InMemoryBlobStore, S3BlobStore

logger = logging.getLogger(__name__)


@dataclass
class Backends:
    storage: BlobStore
    db: MetadataStore
    cache: CacheIndex
    notifier: EventNotifier

    def close(self) -> None:
        for name, client in (
            ("notifier", self.notifier),
            ("cache", self.cache),
            ("db", self.db),
            ("storage", self.storage),
        ):
            try:
                client.close()
            except Exception:
                logger.exception("Failed to close %s client", name)


def in_memory_backends() -> Backends:
    return Backends(
        storage=InMemoryBlobStore(),
        db=InMemoryProductStore(),
        cache=InMemoryCacheIndex(),
        notifier=InMemoryEventNotifier(),
    )


def build_storage(settings: Settings) -> BlobStore:
    if settings.use_in_memory_backends or not settings.s3_bucket:
        return InMemoryBlobStore()
    return S3BlobStore(
        bucket=settings.s3_bucket,
        region=settings.s3_region or "",
        endpoint=settings.s3_endpoint or "",
        access_key_id=settings.s3_access_key or "",
        secret_access_key=settings.s3_secret_key or "",
    )


def build_db(settings: Settings) -> MetadataStore:
    if settings.use_in_memory_backends or not settings.database_url:
        return InMemoryProductStore()
    return SqlProductStore(settings.database_url)


def build_cache(settings: Settings) -> CacheIndex:
    if settings.use_in_memory_backends or not settings.redis_url:
        return InMemoryCacheIndex()
    return RedisCacheIndex(url=settings.redis_url)


def build_notifier(settings: Settings) -> EventNotifier:
    if settings.use_in_memory_backends or not settings.redis_url:
        return InMemoryEventNotifier()
    return RedisEventNotifier(url=settings.redis_url)


def build_backends(settings: Settings) -> Backends:
    backends = Backends(
        storage=build_storage(settings),
        db=build_db(settings),
        cache=build_cache(settings),
        notifier=build_notifier(settings),
    )
    logger.info(
        "Backends: storage=%s db=%s cache=%s notifier=%s",
        backends.storage.__class__.__name__,
        backends.db.__class__.__name__,
        backends.cache.__class__.__name__,
        backends.notifier.__class__.__name__,
    )
    return backends


def get_orchestrator(request: Request) -> ProductOrchestrator:
    return request.app.state.orchestrator
