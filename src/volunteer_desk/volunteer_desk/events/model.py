from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class Event:
    """An event that owns zero or more staffing positions."""

    event_id: str
    name: str
    event_date: date
    event_time: time
    location: str
    custom_map_url: Optional[str] = None
