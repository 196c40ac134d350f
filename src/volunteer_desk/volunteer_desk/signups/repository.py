from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import NewSignup, Signup


class SignupRepository(Protocol):
    def get_by_id(self, signup_id: str) -> Optional[Signup]:
        raise NotImplementedError

    def list_for_position(self, position_id: str, *, arrived: Optional[bool] = None) -> Sequence[Signup]:
        """Signups of a position ordered by start time, optionally filtered on ``arrived``."""

        raise NotImplementedError

    def list_for_event(self, event_id: str) -> Sequence[Signup]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Signup]:
        raise NotImplementedError

    def insert(self, signup: NewSignup) -> str:
        """Insert with ``arrived=false`` and return the new id."""

        raise NotImplementedError

    def update(self, signup_id: str, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def update_arrival(self, signup_id: str, arrived: bool) -> bool:
        raise NotImplementedError

    def delete(self, signup_id: str) -> bool:
        raise NotImplementedError
