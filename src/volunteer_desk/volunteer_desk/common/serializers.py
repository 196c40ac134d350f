from __future__ import annotations

from ..events.model import Event
from ..messages.model import Message
from ..positions.model import Position, StaffingRow
from ..signups.model import Signup
from .datetime_utils import format_time_of_day


def event_json(e: Event) -> dict:
    return {
        "id": e.event_id,
        "name": e.name,
        "date": e.event_date.strftime("%Y-%m-%d"),
        "time": format_time_of_day(e.event_time),
        "location": e.location,
        "custom_map_url": e.custom_map_url,
    }


def position_json(p: Position) -> dict:
    return {
        "id": p.position_id,
        "event_id": p.event_id,
        "name": p.name,
        "needed": p.needed,
        "filled": p.filled,
        "latitude": p.latitude,
        "longitude": p.longitude,
        "description": p.description,
        "skill_level": p.skill_level,
    }


def signup_json(s: Signup) -> dict:
    return {
        "id": s.signup_id,
        "position_id": s.position_id,
        "volunteer_name": s.volunteer_name,
        "phone_number": s.phone_number,
        "start_time": format_time_of_day(s.start_time),
        "end_time": format_time_of_day(s.end_time),
        "arrived": s.arrived,
        "organization": s.organization,
        "other_notes": s.other_notes,
    }


def staffing_json(row: StaffingRow) -> dict:
    return {
        **position_json(row.position),
        "assigned": row.assigned,
        "arrived": row.arrived,
        "status": row.status.value,
        "ratio": f"{row.position.filled}/{row.position.needed}",
    }


def message_json(m: Message) -> dict:
    return {
        "id": m.message_id,
        "title": m.title,
        "content": m.content,
        "position_id": m.position_id,
        "event_id": m.event_id,
        "status": m.status.value,
        "volunteer_id": m.volunteer_id,
        "phone_number": m.phone_number,
        "created_at": m.created_at.isoformat() if m.created_at else None,
    }
