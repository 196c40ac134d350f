from __future__ import annotations

from enum import Enum


class MessageStatus(str, Enum):
    """Lifecycle of an operator message."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    IGNORED = "ignored"


OPEN_MESSAGE_STATUSES = (MessageStatus.PENDING, MessageStatus.IN_PROGRESS)


class FailurePolicy(str, Enum):
    """How a call site treats a failed counter update after the row committed."""

    BEST_EFFORT = "best_effort"
    STRICT = "strict"


class StaffingStatus(str, Enum):
    FILLED = "filled"
    PARTIAL = "partial"
    NEEDS = "needs"


class CheckoutOutcome(str, Enum):
    CHECKED_OUT = "checked_out"
    FAILED = "failed"


class Topic(str, Enum):
    """Realtime channel topics."""

    SIGNUP_INSERTED = "signup.inserted"
    POSITION_CHANGED = "position.changed"
    VOLUNTEERS_CHANGED = "volunteers.changed"
    STAFFING_WARNING = "staffing.warning"


class IssueType(str, Enum):
    INFO = "info"
    WARNING = "warning"
