from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MessageStatus


@dataclass(frozen=True)
class Message:
    """Free-form communication from a check-in page to the organizer."""

    message_id: str
    title: str
    content: str
    position_id: str
    event_id: str
    status: MessageStatus = MessageStatus.PENDING
    volunteer_id: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
