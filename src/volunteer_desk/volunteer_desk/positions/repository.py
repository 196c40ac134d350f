from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Position


class PositionRepository(Protocol):
    def get_by_id(self, position_id: str) -> Optional[Position]:
        raise NotImplementedError

    def list_for_event(self, event_id: Optional[str] = None) -> Sequence[Position]:
        """All positions, or only those of ``event_id`` when given."""

        raise NotImplementedError

    def create(
        self,
        *,
        event_id: str,
        name: str,
        needed: int,
        latitude: Optional[float],
        longitude: Optional[float],
        description: Optional[str] = None,
        skill_level: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def update(self, position_id: str, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, position_id: str) -> bool:
        raise NotImplementedError

    def increment_filled_count(self, position_id: str) -> None:
        """Atomic ``filled = filled + 1``."""

        raise NotImplementedError

    def decrement_filled_count(self, position_id: str) -> None:
        """Atomic ``filled = max(0, filled - 1)``."""

        raise NotImplementedError

    def reset_filled_counts(self) -> int:
        raise NotImplementedError
