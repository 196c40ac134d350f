from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class Signup:
    """One volunteer's assignment to a position for a time window."""

    signup_id: str
    position_id: str
    volunteer_name: str
    phone_number: str
    start_time: time
    end_time: time
    arrived: bool = False
    organization: Optional[str] = None
    other_notes: Optional[str] = None


@dataclass(frozen=True)
class NewSignup:
    position_id: str
    volunteer_name: str
    phone_number: str
    start_time: time
    end_time: time
    organization: Optional[str] = None
    other_notes: Optional[str] = None


# Fields an organizer may edit on an existing assignment.
EDITABLE_FIELDS = (
    "position_id",
    "volunteer_name",
    "phone_number",
    "start_time",
    "end_time",
    "organization",
    "other_notes",
)
