from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime, time
from typing import Any, Mapping, Optional, Sequence

from src.volunteer_desk.volunteer_desk.container import ContainerOptions, assemble_container
from src.volunteer_desk.volunteer_desk.core.enums import MessageStatus
from src.volunteer_desk.volunteer_desk.events.model import Event
from src.volunteer_desk.volunteer_desk.messages.model import Message
from src.volunteer_desk.volunteer_desk.positions.model import Position
from src.volunteer_desk.volunteer_desk.signups.model import NewSignup, Signup


def _id() -> str:
    return str(uuid.uuid4())


class InMemoryEvents:
    def __init__(self, events: Sequence[Event] = ()):
        self.rows: dict[str, Event] = {e.event_id: e for e in events}

    def get_by_id(self, event_id: str) -> Optional[Event]:
        return self.rows.get(event_id)

    def list_all(self) -> Sequence[Event]:
        return sorted(self.rows.values(), key=lambda e: e.event_date)

    def create(self, *, name, event_date, event_time, location, custom_map_url=None) -> str:
        event_id = _id()
        self.rows[event_id] = Event(event_id, name, event_date, event_time, location, custom_map_url)
        return event_id

    def update(self, event_id: str, fields: Mapping[str, Any]) -> bool:
        if event_id not in self.rows:
            return False
        self.rows[event_id] = replace(self.rows[event_id], **fields)
        return True

    def delete(self, event_id: str) -> bool:
        return self.rows.pop(event_id, None) is not None


class InMemoryPositions:
    """Positions with counter calls that can be told to fail."""

    def __init__(self, positions: Sequence[Position] = ()):
        self.rows: dict[str, Position] = {p.position_id: p for p in positions}
        self.fail_increment = False
        self.fail_decrement = False
        self.calls: list[tuple[str, str]] = []

    def get_by_id(self, position_id: str) -> Optional[Position]:
        return self.rows.get(position_id)

    def list_for_event(self, event_id: Optional[str] = None) -> Sequence[Position]:
        return [p for p in self.rows.values() if event_id is None or p.event_id == event_id]

    def create(self, *, event_id, name, needed, latitude, longitude, description=None, skill_level=None) -> str:
        position_id = _id()
        self.rows[position_id] = Position(
            position_id, event_id, name, needed, 0, latitude, longitude, description, skill_level
        )
        return position_id

    def update(self, position_id: str, fields: Mapping[str, Any]) -> bool:
        if position_id not in self.rows:
            return False
        self.rows[position_id] = replace(self.rows[position_id], **fields)
        return True

    def delete(self, position_id: str) -> bool:
        return self.rows.pop(position_id, None) is not None

    def increment_filled_count(self, position_id: str) -> None:
        self.calls.append(("increment", position_id))
        if self.fail_increment:
            raise RuntimeError("increment rpc unavailable")
        p = self.rows.get(position_id)
        if p is not None:
            self.rows[position_id] = replace(p, filled=p.filled + 1)

    def decrement_filled_count(self, position_id: str) -> None:
        self.calls.append(("decrement", position_id))
        if self.fail_decrement:
            raise RuntimeError("decrement rpc unavailable")
        p = self.rows.get(position_id)
        if p is not None:
            self.rows[position_id] = replace(p, filled=max(0, p.filled - 1))

    def reset_filled_counts(self) -> int:
        for pid, p in self.rows.items():
            self.rows[pid] = replace(p, filled=0)
        return len(self.rows)

    def filled(self, position_id: str) -> int:
        return self.rows[position_id].filled


class InMemorySignups:
    def __init__(self, signups: Sequence[Signup] = (), positions: Optional[InMemoryPositions] = None):
        self.rows: dict[str, Signup] = {s.signup_id: s for s in signups}
        self._positions = positions
        self.fail_arrival_for: set[str] = set()

    def get_by_id(self, signup_id: str) -> Optional[Signup]:
        return self.rows.get(signup_id)

    def list_for_position(self, position_id: str, *, arrived: Optional[bool] = None) -> Sequence[Signup]:
        return [
            s
            for s in self.rows.values()
            if s.position_id == position_id and (arrived is None or s.arrived == arrived)
        ]

    def list_for_event(self, event_id: str) -> Sequence[Signup]:
        if self._positions is None:
            return []
        ids = {p.position_id for p in self._positions.list_for_event(event_id)}
        return [s for s in self.rows.values() if s.position_id in ids]

    def list_all(self) -> Sequence[Signup]:
        return list(self.rows.values())

    def insert(self, signup: NewSignup) -> str:
        signup_id = _id()
        self.rows[signup_id] = Signup(
            signup_id=signup_id,
            position_id=signup.position_id,
            volunteer_name=signup.volunteer_name,
            phone_number=signup.phone_number,
            start_time=signup.start_time,
            end_time=signup.end_time,
            organization=signup.organization,
            other_notes=signup.other_notes,
        )
        return signup_id

    def update(self, signup_id: str, fields: Mapping[str, Any]) -> bool:
        if signup_id not in self.rows:
            return False
        self.rows[signup_id] = replace(self.rows[signup_id], **fields)
        return True

    def update_arrival(self, signup_id: str, arrived: bool) -> bool:
        if signup_id in self.fail_arrival_for:
            raise RuntimeError("row update failed")
        if signup_id not in self.rows:
            return False
        self.rows[signup_id] = replace(self.rows[signup_id], arrived=bool(arrived))
        return True

    def delete(self, signup_id: str) -> bool:
        return self.rows.pop(signup_id, None) is not None


class InMemoryMessages:
    def __init__(self):
        self.rows: dict[str, Message] = {}

    def get_by_id(self, message_id: str) -> Optional[Message]:
        return self.rows.get(message_id)

    def create(self, *, title, content, position_id, event_id, volunteer_id, phone_number) -> str:
        message_id = _id()
        self.rows[message_id] = Message(
            message_id=message_id,
            title=title,
            content=content,
            position_id=position_id,
            event_id=event_id,
            volunteer_id=volunteer_id,
            phone_number=phone_number,
            created_at=datetime(2026, 3, 14, 9, len(self.rows)),
        )
        return message_id

    def list_by_status(self, statuses, *, event_id=None) -> Sequence[Message]:
        items = [
            m
            for m in self.rows.values()
            if m.status in statuses and (event_id is None or m.event_id == event_id)
        ]
        return sorted(items, key=lambda m: m.created_at, reverse=True)

    def update_status(self, message_id: str, status: MessageStatus) -> bool:
        if message_id not in self.rows:
            return False
        self.rows[message_id] = replace(self.rows[message_id], status=status)
        return True


EVENT_ID = "ev-1"


def make_event(event_id: str = EVENT_ID) -> Event:
    return Event(event_id, "Spring Fair", date(2026, 3, 14), time(8, 0), "Town Square")


def make_position(position_id: str = "pos-A", *, needed: int = 3, filled: int = 0, **kwargs) -> Position:
    return Position(
        position_id=position_id,
        event_id=kwargs.pop("event_id", EVENT_ID),
        name=kwargs.pop("name", f"Gate {position_id}"),
        needed=needed,
        filled=filled,
        **kwargs,
    )


def make_signup(
    signup_id: str,
    position_id: str = "pos-A",
    *,
    start: time = time(8, 0),
    end: time = time(12, 0),
    arrived: bool = False,
) -> Signup:
    return Signup(
        signup_id=signup_id,
        position_id=position_id,
        volunteer_name=f"Volunteer {signup_id}",
        phone_number="555-0100",
        start_time=start,
        end_time=end,
        arrived=arrived,
    )


def make_stores(positions: Sequence[Position] = (), signups: Sequence[Signup] = ()):
    events = InMemoryEvents([make_event()])
    positions_repo = InMemoryPositions(positions)
    signups_repo = InMemorySignups(signups, positions_repo)
    return events, positions_repo, signups_repo


def make_container(positions: Sequence[Position] = (), signups: Sequence[Signup] = (), **options):
    events, positions_repo, signups_repo = make_stores(positions, signups)
    return assemble_container(
        events_repo=events,
        positions_repo=positions_repo,
        signups_repo=signups_repo,
        messages_repo=InMemoryMessages(),
        options=ContainerOptions(public_base_url="http://testserver", **options),
    )
