from __future__ import annotations

from datetime import date, time
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    def get_by_id(self, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Event]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        event_date: date,
        event_time: time,
        location: str,
        custom_map_url: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def update(self, event_id: str, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, event_id: str) -> bool:
        """Deleting an event cascades to its positions and their signups."""

        raise NotImplementedError
