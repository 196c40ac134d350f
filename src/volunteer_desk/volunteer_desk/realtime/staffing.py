from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import MAX_DASHBOARD_ISSUES
from ..core.enums import IssueType, Topic
from ..positions.model import Position
from .notifier import ChangeEvent, Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Issue:
    issue_id: str
    issue_type: IssueType
    message: str
    timestamp: datetime
    position_id: Optional[str] = None
    position_name: Optional[str] = None
    event_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.issue_id,
            "type": self.issue_type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "position_id": self.position_id,
            "position_name": self.position_name,
            "event_id": self.event_id,
        }


class StaffingMonitor:
    """Periodic re-scan of loaded positions; publishes a warning per understaffed position."""

    def __init__(self, notifier: Notifier, positions_loader: Callable[[], Sequence[Position]]):
        self._notifier = notifier
        self._load = positions_loader

    def check(self) -> list[ChangeEvent]:
        warnings: list[ChangeEvent] = []
        for position in self._load():
            if position.filled < position.needed:
                warnings.append(
                    self._notifier.publish(
                        Topic.STAFFING_WARNING,
                        {
                            "position_name": position.name,
                            "filled": position.filled,
                            "needed": position.needed,
                            "message": f"Position {position.name} is understaffed "
                            f"({position.filled}/{position.needed})",
                        },
                        position_id=position.position_id,
                        event_id=position.event_id,
                    )
                )
        if warnings:
            logger.info("Staffing check: %d understaffed position(s)", len(warnings))
        return warnings


class IssueFeed:
    """Dashboard feed of recent issues, newest first, bounded to ``max_items``."""

    def __init__(
        self,
        notifier: Notifier,
        *,
        event_id: Optional[str] = None,
        max_items: int = MAX_DASHBOARD_ISSUES,
    ):
        self._items: deque[Issue] = deque(maxlen=max_items)
        self._lock = threading.Lock()
        self._subscription = notifier.subscribe(
            (Topic.SIGNUP_INSERTED, Topic.STAFFING_WARNING),
            event_id=event_id,
            maxsize=max_items,
        )

    def pump(self) -> int:
        """Move pending channel events into the feed; returns how many were added."""
        added = 0
        for event in self._subscription.drain():
            issue = self._to_issue(event)
            if issue is not None:
                with self._lock:
                    self._items.appendleft(issue)
                added += 1
        return added

    @property
    def pending(self) -> int:
        """Channel events not yet moved into the feed."""
        return self._subscription.pending

    def items(self) -> list[Issue]:
        self.pump()
        with self._lock:
            return list(self._items)

    def close(self) -> None:
        self._subscription.close()

    @staticmethod
    def _to_issue(event: ChangeEvent) -> Optional[Issue]:
        payload = event.payload
        if event.topic == Topic.SIGNUP_INSERTED:
            issue_type = IssueType.INFO
            message = (
                f"New volunteer {payload.get('volunteer_name')} signed up for "
                f"{payload.get('position_name')}"
            )
        elif event.topic == Topic.STAFFING_WARNING:
            issue_type = IssueType.WARNING
            message = str(payload.get("message"))
        else:
            return None

        return Issue(
            issue_id=str(uuid.uuid4()),
            issue_type=issue_type,
            message=message,
            timestamp=event.published_at or now_local(),
            position_id=event.position_id,
            position_name=payload.get("position_name"),
            event_id=event.event_id,
        )
