from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MessageStatus
from .model import Message


class MessageRepository(Protocol):
    def get_by_id(self, message_id: str) -> Optional[Message]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        content: str,
        position_id: str,
        event_id: str,
        volunteer_id: Optional[str],
        phone_number: Optional[str],
    ) -> str:
        raise NotImplementedError

    def list_by_status(
        self,
        statuses: Sequence[MessageStatus],
        *,
        event_id: Optional[str] = None,
    ) -> Sequence[Message]:
        raise NotImplementedError

    def update_status(self, message_id: str, status: MessageStatus) -> bool:
        raise NotImplementedError
