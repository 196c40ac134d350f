from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlencode

from ..common.datetime_utils import parse_time_of_day
from ..common.geo import GeoPoint, is_near_position
from ..common.validators import optional_text, require_fields, require_non_empty
from ..core.constants import GEOFENCE_RADIUS_METERS
from ..core.enums import FailurePolicy, Topic
from ..core.exceptions import NotFoundError, RpcFailure, ValidationError
from ..positions.model import Position
from ..positions.repository import PositionRepository
from ..realtime.notifier import Notifier
from ..signups.model import EDITABLE_FIELDS, NewSignup, Signup
from ..signups.repository import SignupRepository

logger = logging.getLogger(__name__)

REQUIRED_ASSIGNMENT_FIELDS = ("position_id", "volunteer_name", "phone_number", "start_time", "end_time")

INCREMENT = "increment_filled_count"
DECREMENT = "decrement_filled_count"


@dataclass(frozen=True)
class ArrivalChange:
    signup_id: str
    position_id: str
    arrived: bool
    counter_updated: bool


@dataclass(frozen=True)
class CheckInRoster:
    """What a scanned QR code resolves to: the position and who can still check in."""

    position: Position
    volunteers: Sequence[Signup]


@dataclass(frozen=True)
class CheckInResult:
    signup: Signup
    position: Position
    near_position: bool
    counter_updated: bool


def checkin_url(base_url: str, position_id: str) -> str:
    """URL encoded into a position's QR code."""
    return f"{base_url.rstrip('/')}/checkin?{urlencode({'position': position_id})}"


class AttendanceService:
    """Keeps ``Position.filled`` a best-effort mirror of assignments and arrivals.

    Every operation writes the signup row first and then adjusts the counter
    with a separate increment/decrement call. The two writes are not atomic:
    when the counter call fails after the row committed, the row is kept and
    the failure is either logged (``FailurePolicy.BEST_EFFORT``) or raised as
    ``RpcFailure`` (``FailurePolicy.STRICT``). Nothing is retried or rolled back.

    Note: ``filled`` counts a new assignment immediately and then moves again
    on check-in/check-out, so it tracks the number of counter calls rather
    than the number of volunteers present.
    """

    def __init__(
        self,
        signups: SignupRepository,
        positions: PositionRepository,
        notifier: Optional[Notifier] = None,
        *,
        geofence_radius_m: float = GEOFENCE_RADIUS_METERS,
    ):
        self._signups = signups
        self._positions = positions
        self._notifier = notifier or Notifier()
        self._geofence_radius_m = float(geofence_radius_m)

    # ----- counter protocol -----

    def _adjust_filled(self, position_id: str, operation: str, *, policy: FailurePolicy) -> bool:
        try:
            if operation == INCREMENT:
                self._positions.increment_filled_count(position_id)
            else:
                self._positions.decrement_filled_count(position_id)
            return True
        except Exception as exc:
            logger.error("Error in %s for position %s: %s", operation, position_id, exc)
            if policy == FailurePolicy.STRICT:
                raise RpcFailure(position_id, operation, exc) from exc
            logger.warning("Continuing despite counter update failure")
            return False

    def _require_position(self, position_id: str) -> Position:
        position = self._positions.get_by_id(position_id)
        if not position:
            raise NotFoundError("Position not found")
        return position

    @staticmethod
    def _parse_time(value: Any, field_name: str) -> time:
        try:
            return parse_time_of_day(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} must be HH:MM")

    # ----- arrival -----

    def set_arrival(
        self,
        signup_id: str,
        arrived: bool,
        position_id: str,
        *,
        policy: FailurePolicy = FailurePolicy.BEST_EFFORT,
        notify: bool = True,
    ) -> ArrivalChange:
        """Flip ``arrived`` on the row, then move the counter of the caller-supplied position.

        ``arrived=True`` increments and ``arrived=False`` decrements, whatever
        the row held before.
        """
        arrived = bool(arrived)
        if not self._signups.update_arrival(signup_id, arrived):
            raise NotFoundError("Volunteer signup not found")

        counter_updated = self._adjust_filled(position_id, INCREMENT if arrived else DECREMENT, policy=policy)

        if notify:
            self._notifier.invalidate_positions([position_id])
        logger.info("Signup %s arrived=%s (position %s)", signup_id, arrived, position_id)
        return ArrivalChange(
            signup_id=signup_id,
            position_id=position_id,
            arrived=arrived,
            counter_updated=counter_updated,
        )

    # ----- assignments -----

    def create_assignment(self, position_id: str, fields: Mapping[str, Any]) -> str:
        """Assign a volunteer; the new signup starts not arrived and counts toward ``filled`` at once."""
        data = dict(fields)
        data["position_id"] = position_id
        require_fields(data, REQUIRED_ASSIGNMENT_FIELDS)

        new_signup = NewSignup(
            position_id=str(position_id).strip(),
            volunteer_name=str(data["volunteer_name"]).strip(),
            phone_number=str(data["phone_number"]).strip(),
            start_time=self._parse_time(data["start_time"], "Start time"),
            end_time=self._parse_time(data["end_time"], "End time"),
            organization=optional_text(data.get("organization")),
            other_notes=optional_text(data.get("other_notes")),
        )
        position = self._require_position(new_signup.position_id)

        signup_id = self._signups.insert(new_signup)
        self._adjust_filled(position.position_id, INCREMENT, policy=FailurePolicy.BEST_EFFORT)

        self._notifier.publish(
            Topic.SIGNUP_INSERTED,
            {
                "signup_id": signup_id,
                "volunteer_name": new_signup.volunteer_name,
                "position_name": position.name,
            },
            position_id=position.position_id,
            event_id=position.event_id,
        )
        self._notifier.invalidate_positions([position.position_id])
        logger.info("Assigned %s to position %s", new_signup.volunteer_name, position.position_id)
        return signup_id

    def move_assignment(
        self,
        signup_id: str,
        old_position_id: str,
        new_position_id: Optional[str],
        fields: Mapping[str, Any],
    ) -> None:
        """Edit an assignment, moving one unit of ``filled`` when the position changes.

        The counter calls go first and are best-effort; the row update follows
        and its failure is raised.
        """
        if not self._signups.get_by_id(signup_id):
            raise NotFoundError("Volunteer signup not found")

        update: dict[str, Any] = {}
        for key, value in fields.items():
            if key not in EDITABLE_FIELDS or key == "position_id":
                continue
            if key in ("volunteer_name", "phone_number"):
                update[key] = require_non_empty(value, key.replace("_", " ").capitalize())
            elif key in ("start_time", "end_time"):
                update[key] = self._parse_time(value, key.replace("_", " ").capitalize())
            else:
                update[key] = optional_text(value)

        target = (new_position_id or "").strip() or old_position_id
        moved = target != old_position_id
        if moved:
            self._require_position(target)
            self._adjust_filled(old_position_id, DECREMENT, policy=FailurePolicy.BEST_EFFORT)
            self._adjust_filled(target, INCREMENT, policy=FailurePolicy.BEST_EFFORT)
            update["position_id"] = target

        if update and not self._signups.update(signup_id, update):
            raise NotFoundError("Volunteer signup not found")

        self._notifier.invalidate_positions([old_position_id, target] if moved else [old_position_id])

    def delete_assignment(self, signup_id: str, position_id: str) -> None:
        """Remove an assignment and decrement ``filled`` whether or not the volunteer had arrived."""
        if not self._signups.delete(signup_id):
            raise NotFoundError("Volunteer signup not found")

        self._adjust_filled(position_id, DECREMENT, policy=FailurePolicy.BEST_EFFORT)
        self._notifier.invalidate_positions([position_id])
        logger.info("Removed signup %s from position %s", signup_id, position_id)

    # ----- QR check-in -----

    def resolve_position_token(self, position_token: Optional[str]) -> Position:
        token = (position_token or "").strip()
        if not token:
            raise ValidationError("Invalid QR code: No position ID")
        return self._require_position(token)

    def checkin_roster(self, position_token: Optional[str]) -> CheckInRoster:
        position = self.resolve_position_token(position_token)
        volunteers = self._signups.list_for_position(position.position_id, arrived=False)
        return CheckInRoster(position=position, volunteers=volunteers)

    def check_in_from_qr(
        self,
        position_token: Optional[str],
        signup_id: str,
        *,
        location: Optional[GeoPoint] = None,
    ) -> CheckInResult:
        """Check in a volunteer from the page a position's QR code opens.

        The geofence result is advisory; a volunteer far from the position can
        still check in. Counter failures surface as ``RpcFailure`` here.
        """
        position = self.resolve_position_token(position_token)

        signup = self._signups.get_by_id(require_non_empty(signup_id, "Volunteer"))
        if not signup:
            raise NotFoundError("Volunteer signup not found")
        if signup.position_id != position.position_id:
            raise ValidationError("Volunteer is not assigned to this position")
        if signup.arrived:
            raise ValidationError("Volunteer already checked in")

        position_point = None
        if position.latitude is not None and position.longitude is not None:
            position_point = GeoPoint(position.latitude, position.longitude)
        near = is_near_position(location, position_point, radius_m=self._geofence_radius_m)
        if not near:
            logger.info("Signup %s checked in away from position %s", signup.signup_id, position.position_id)

        change = self.set_arrival(
            signup.signup_id,
            True,
            position.position_id,
            policy=FailurePolicy.STRICT,
        )
        return CheckInResult(
            signup=signup,
            position=position,
            near_position=near,
            counter_updated=change.counter_updated,
        )
