from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.enums import OPEN_MESSAGE_STATUSES, MessageStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Message
from .repository import MessageRepository

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, messages: MessageRepository):
        self._messages = messages

    def send(
        self,
        *,
        title: str,
        content: str,
        position_id: str,
        event_id: str,
        volunteer_id: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> str:
        """Record a message from the check-in page.

        A message is sent either as an assigned volunteer (``volunteer_id``)
        or as "other", in which case a phone number is required.
        """
        title = require_non_empty(title, "Title")
        content = require_non_empty(content, "Message")
        position_id = require_non_empty(position_id, "Position")
        event_id = require_non_empty(event_id, "Event")

        volunteer_id = optional_text(volunteer_id)
        if volunteer_id is None:
            phone_number = require_non_empty(phone_number, "Phone number")
        else:
            phone_number = None

        message_id = self._messages.create(
            title=title,
            content=content,
            position_id=position_id,
            event_id=event_id,
            volunteer_id=volunteer_id,
            phone_number=phone_number,
        )
        logger.info("Message %s received for position %s", message_id, position_id)
        return message_id

    def list_open(self, *, event_id: Optional[str] = None) -> Sequence[Message]:
        return self._messages.list_by_status(OPEN_MESSAGE_STATUSES, event_id=event_id)

    def update_status(self, message_id: str, status: str | MessageStatus) -> None:
        try:
            new_status = MessageStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown message status: {status}")

        if not self._messages.update_status(message_id, new_status):
            raise NotFoundError("Message not found")
