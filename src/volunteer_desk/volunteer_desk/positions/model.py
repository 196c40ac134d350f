from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import StaffingStatus


@dataclass(frozen=True)
class Position:
    """A staffing slot at an event.

    ``filled`` is a stored counter adjusted by increment/decrement calls. It
    approximates staffing and is never below zero.
    """

    position_id: str
    event_id: str
    name: str
    needed: int
    filled: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str] = None
    skill_level: Optional[str] = None


@dataclass(frozen=True)
class StaffingRow:
    """Read-model for the dashboard: stored counter next to counts derived from rows."""

    position: Position
    assigned: int
    arrived: int
    status: StaffingStatus

    @property
    def drift(self) -> int:
        return self.position.filled - self.arrived


def classify_staffing(filled: int, needed: int) -> StaffingStatus:
    if needed <= 0 or filled >= needed:
        return StaffingStatus.FILLED
    if filled > 0:
        return StaffingStatus.PARTIAL
    return StaffingStatus.NEEDS
