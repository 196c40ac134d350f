"""In-process publish/subscribe channel.

Services publish row-level changes ("signup inserted", "position changed",
"volunteer list changed") and staffing warnings; dashboards and caches
subscribe with optional topic, position and event filters. Each subscriber
owns a queue, so publishers never block on slow consumers. A bounded
queue keeps only the newest ``maxsize`` events.
"""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..core.enums import Topic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    topic: Topic
    payload: Mapping[str, Any] = field(default_factory=dict)
    position_id: Optional[str] = None
    event_id: Optional[str] = None
    published_at: Optional[datetime] = None


class Subscription:
    def __init__(
        self,
        notifier: "Notifier",
        *,
        topics: Optional[Iterable[Topic]] = None,
        position_id: Optional[str] = None,
        event_id: Optional[str] = None,
        maxsize: int = 0,
    ):
        self._notifier = notifier
        self._topics = frozenset(Topic(t) for t in topics) if topics else None
        self._position_id = position_id
        self._event_id = event_id
        self._queue: "queue.Queue[ChangeEvent]" = queue.Queue(maxsize=max(0, int(maxsize)))
        self._put_lock = threading.Lock()
        self.dropped = 0
        self.closed = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def matches(self, event: ChangeEvent) -> bool:
        if self._topics is not None and event.topic not in self._topics:
            return False
        if self._position_id is not None and event.position_id != self._position_id:
            return False
        if self._event_id is not None and event.event_id != self._event_id:
            return False
        return True

    def deliver(self, event: ChangeEvent) -> None:
        """Enqueue ``event``; a bounded subscription drops its oldest pending event when full."""
        with self._put_lock:
            while True:
                try:
                    self._queue.put_nowait(event)
                    return
                except queue.Full:
                    try:
                        self._queue.get_nowait()
                        self.dropped += 1
                    except queue.Empty:
                        pass

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next pending event; waits up to ``timeout`` seconds when given, else returns at once."""
        try:
            return self._queue.get(timeout=timeout) if timeout else self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[ChangeEvent]:
        out: list[ChangeEvent] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._notifier.unsubscribe(self)


class Notifier:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        topics: Optional[Iterable[Topic]] = None,
        *,
        position_id: Optional[str] = None,
        event_id: Optional[str] = None,
        maxsize: int = 0,
    ) -> Subscription:
        sub = Subscription(self, topics=topics, position_id=position_id, event_id=event_id, maxsize=maxsize)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

    def publish(
        self,
        topic: Topic,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        position_id: Optional[str] = None,
        event_id: Optional[str] = None,
    ) -> ChangeEvent:
        event = ChangeEvent(
            topic=Topic(topic),
            payload=dict(payload or {}),
            position_id=position_id,
            event_id=event_id,
            published_at=now_local(),
        )
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(event)]
        for sub in targets:
            sub.deliver(event)
        logger.debug("Published %s to %d subscriber(s)", event.topic.value, len(targets))
        return event

    def invalidate_positions(self, position_ids: Iterable[str]) -> None:
        """Signal that the position rows and their volunteer lists changed."""
        for position_id in dict.fromkeys(position_ids):
            self.publish(Topic.POSITION_CHANGED, {"position_id": position_id}, position_id=position_id)
            self.publish(Topic.VOLUNTEERS_CHANGED, {"position_id": position_id}, position_id=position_id)
