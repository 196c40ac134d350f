from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_text, require_min_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..events.repository import EventRepository
from ..signups.repository import SignupRepository
from .model import Position, StaffingRow, classify_staffing
from .repository import PositionRepository

logger = logging.getLogger(__name__)


def _optional_coordinate(value: Any, field_name: str) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


class PositionService:
    def __init__(self, positions: PositionRepository, events: EventRepository, signups: SignupRepository):
        self._positions = positions
        self._events = events
        self._signups = signups

    def get(self, position_id: str) -> Position:
        position = self._positions.get_by_id(position_id)
        if not position:
            raise NotFoundError("Position not found")
        return position

    def list_for_event(self, event_id: Optional[str] = None) -> Sequence[Position]:
        return self._positions.list_for_event(event_id)

    def create(
        self,
        *,
        event_id: str,
        name: str,
        needed: Any,
        latitude: Any = None,
        longitude: Any = None,
        description: Optional[str] = None,
        skill_level: Optional[str] = None,
    ) -> str:
        event_id = require_non_empty(event_id, "Event")
        name = require_non_empty(name, "Position name")
        needed_n = require_min_int(needed, "Number of volunteers", 1)
        if not self._events.get_by_id(event_id):
            raise NotFoundError("Event not found")

        return self._positions.create(
            event_id=event_id,
            name=name,
            needed=needed_n,
            latitude=_optional_coordinate(latitude, "Latitude"),
            longitude=_optional_coordinate(longitude, "Longitude"),
            description=optional_text(description),
            skill_level=optional_text(skill_level),
        )

    def update(self, position_id: str, fields: Mapping[str, Any]) -> None:
        """Edit descriptive fields. ``filled`` is only moved by the counter calls."""
        clean: dict[str, Any] = {}
        for key, value in fields.items():
            if key == "name":
                clean[key] = require_non_empty(value, "Position name")
            elif key == "needed":
                clean[key] = require_min_int(value, "Number of volunteers", 1)
            elif key in ("latitude", "longitude"):
                clean[key] = _optional_coordinate(value, key.capitalize())
            elif key in ("description", "skill_level"):
                clean[key] = optional_text(value)
        if not clean:
            raise ValidationError("Nothing to update")
        if not self._positions.update(position_id, clean):
            raise NotFoundError("Position not found")

    def delete(self, position_id: str) -> None:
        if not self._positions.delete(position_id):
            raise NotFoundError("Position not found")

    def staffing_overview(self, *, event_id: Optional[str] = None) -> list[StaffingRow]:
        """Stored ``filled`` counter per position next to the counts derived from signup rows."""
        positions = self._positions.list_for_event(event_id)
        signups = self._signups.list_for_event(event_id) if event_id else self._signups.list_all()

        assigned = Counter(s.position_id for s in signups)
        arrived = Counter(s.position_id for s in signups if s.arrived)

        rows = [
            StaffingRow(
                position=p,
                assigned=assigned.get(p.position_id, 0),
                arrived=arrived.get(p.position_id, 0),
                status=classify_staffing(p.filled, p.needed),
            )
            for p in positions
        ]
        drifting = [r for r in rows if r.drift]
        if drifting:
            logger.debug("%d position(s) where filled differs from arrived count", len(drifting))
        return rows

    def reset_filled_counts(self) -> int:
        """Administrative repair: set every position's ``filled`` back to 0."""
        count = self._positions.reset_filled_counts()
        logger.warning("Reset filled count to 0 for %d position(s)", count)
        return count
