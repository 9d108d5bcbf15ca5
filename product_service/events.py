"""
Fire-and-forget event bus used to announce created products.

Publishing is best-effort from the caller's point of view. Subscribers run
independently of request handling: handler failures are logged and dropped.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Protocol

import redis

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, bytes], None]


class Subscription(Protocol):
    def stop(self) -> None:
        ...


class EventNotifier(Protocol):
    """Publish/subscribe interface for service events."""

    def publish(self, topic: str, payload: bytes) -> None:
        ...

    def subscribe(self, topic: str, handler: EventHandler) -> Subscription:
        ...

    def close(self) -> None:
        ...


def log_received_event(topic: str, payload: bytes) -> None:
    """Default subscriber: record every event that arrives."""
    logger.info(
        "Received a message from %s: %s",
        topic,
        payload.decode("utf-8", errors="replace"),
    )


@dataclass
class _InMemorySubscription:
    notifier: "InMemoryEventNotifier"
    topic: str
    handler: EventHandler

    def stop(self) -> None:
        with self.notifier._lock:
            handlers = self.notifier.handlers.get(self.topic, [])
            if self.handler in handlers:
                handlers.remove(self.handler)


@dataclass
class InMemoryEventNotifier:
    """Records published events and dispatches them to local handlers."""

    published: list[tuple[str, bytes]] = field(default_factory=list)
    handlers: dict[str, list[EventHandler]] = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.Lock()

    def publish(self, topic: str, payload: bytes) -> None:
        with self._lock:
            self.published.append((topic, payload))
            handlers = list(self.handlers.get(topic, []))
        for handler in handlers:
            try:
                handler(topic, payload)
            except Exception:
                logger.exception("Event handler failed for topic %s", topic)

    def subscribe(self, topic: str, handler: EventHandler) -> Subscription:
        with self._lock:
            self.handlers.setdefault(topic, []).append(handler)
        return _InMemorySubscription(self, topic, handler)

    def close(self) -> None:
        with self._lock:
            self.handlers.clear()


class _InactiveSubscription:
    def stop(self) -> None:
        pass


class _RedisSubscription:
    def __init__(self, pubsub, thread):
        self._pubsub = pubsub
        self._thread = thread

    def stop(self) -> None:
        self._thread.stop()
        self._thread.join(timeout=5)
        self._pubsub.close()


@dataclass
class RedisEventNotifier:
    """Redis pub/sub implementation; subscribers run on a daemon thread."""

    url: str
    poll_interval_seconds: float = 0.1

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    def publish(self, topic: str, payload: bytes) -> None:
        self.client.publish(topic, payload)

    def subscribe(self, topic: str, handler: EventHandler) -> Subscription:
        def on_message(message: dict) -> None:
            channel = message["channel"]
            if isinstance(channel, bytes):
                channel = channel.decode("utf-8")
            data = message["data"]
            if isinstance(data, str):
                data = data.encode("utf-8")
            try:
                handler(channel, data)
            except Exception:
                logger.exception("Event handler failed for topic %s", channel)

        def on_error(exc, pubsub, thread) -> None:
            # Connection resets happen on managed Redis; keep the loop alive.
            logger.warning("Event subscriber error on %s: %s", topic, exc)

        pubsub = self.client.pubsub(ignore_subscribe_messages=True)
        try:
            pubsub.subscribe(**{topic: on_message})
        except redis.RedisError as exc:
            logger.warning(
                "Could not subscribe to %s; events will not be logged: %s", topic, exc
            )
            pubsub.close()
            return _InactiveSubscription()
        thread = pubsub.run_in_thread(
            sleep_time=self.poll_interval_seconds,
            daemon=True,
            exception_handler=on_error,
        )
        return _RedisSubscription(pubsub, thread)

    def close(self) -> None:
        self.client.close()
