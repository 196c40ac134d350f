from __future__ import annotations

from datetime import date, time
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_time_of_day
from ..common.validators import optional_text, require_fields, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Event
from .repository import EventRepository


class EventService:
    def __init__(self, events: EventRepository):
        self._events = events

    @staticmethod
    def _parse_date(value: str | date) -> date:
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(str(value).strip())
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD")

    @staticmethod
    def _parse_time(value: str | time) -> time:
        try:
            return parse_time_of_day(value)
        except ValueError:
            raise ValidationError("Time must be HH:MM")

    def get(self, event_id: str) -> Event:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def list_all(self) -> Sequence[Event]:
        return self._events.list_all()

    def create(
        self,
        *,
        name: str,
        event_date: str | date,
        event_time: str | time,
        location: str,
        custom_map_url: Optional[str] = None,
    ) -> str:
        require_fields(
            {"name": name, "date": event_date, "time": event_time, "location": location},
            ("name", "date", "time", "location"),
        )
        return self._events.create(
            name=require_non_empty(name, "Event name"),
            event_date=self._parse_date(event_date),
            event_time=self._parse_time(event_time),
            location=require_non_empty(location, "Location"),
            custom_map_url=optional_text(custom_map_url),
        )

    def update(self, event_id: str, fields: Mapping[str, Any]) -> None:
        clean: dict[str, Any] = {}
        for key, value in fields.items():
            if key in ("name", "location"):
                clean[key] = require_non_empty(value, key.capitalize())
            elif key == "event_date":
                clean[key] = self._parse_date(value)
            elif key == "event_time":
                clean[key] = self._parse_time(value)
            elif key == "custom_map_url":
                clean[key] = optional_text(value)
        if not clean:
            raise ValidationError("Nothing to update")
        if not self._events.update(event_id, clean):
            raise NotFoundError("Event not found")

    def delete(self, event_id: str) -> None:
        if not self._events.delete(event_id):
            raise NotFoundError("Event not found")
