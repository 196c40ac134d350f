from __future__ import annotations

from datetime import time

import pytest

from src.volunteer_desk.volunteer_desk.attendance.service import AttendanceService
from src.volunteer_desk.volunteer_desk.core.enums import FailurePolicy, Topic
from src.volunteer_desk.volunteer_desk.core.exceptions import NotFoundError, RpcFailure, ValidationError
from src.volunteer_desk.volunteer_desk.realtime.notifier import Notifier
from tests.fakes import make_position, make_signup, make_stores


def _assign_fields(name: str) -> dict:
    return {
        "volunteer_name": name,
        "phone_number": "555-0101",
        "start_time": "08:00",
        "end_time": "12:00",
    }


def _service(positions=(), signups=(), notifier=None):
    _, positions_repo, signups_repo = make_stores(positions, signups)
    svc = AttendanceService(signups_repo, positions_repo, notifier)
    return svc, positions_repo, signups_repo


def test_filled_tracks_counter_calls_through_assign_checkin_checkout_delete():
    svc, positions, signups = _service([make_position("pos-A", needed=2, filled=0)])

    a = svc.create_assignment("pos-A", _assign_fields("A"))
    assert positions.filled("pos-A") == 1

    b = svc.create_assignment("pos-A", _assign_fields("B"))
    assert positions.filled("pos-A") == 2

    # Check-in counts again on top of the assignment.
    svc.set_arrival(a, True, "pos-A")
    assert positions.filled("pos-A") == 3
    assert signups.get_by_id(a).arrived is True

    svc.set_arrival(a, False, "pos-A")
    assert positions.filled("pos-A") == 2

    svc.delete_assignment(b, "pos-A")
    assert positions.filled("pos-A") == 1
    assert signups.get_by_id(b) is None


def test_repeated_arrival_true_counts_twice():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=0)],
        [make_signup("s1", "pos-A")],
    )

    svc.set_arrival("s1", True, "pos-A")
    svc.set_arrival("s1", True, "pos-A")

    assert signups.get_by_id("s1").arrived is True
    assert positions.filled("pos-A") == 2


def test_decrement_never_goes_below_zero():
    svc, positions, _ = _service(
        [make_position("pos-A", filled=1)],
        [make_signup("s1", "pos-A"), make_signup("s2", "pos-A")],
    )

    svc.set_arrival("s1", False, "pos-A")
    svc.set_arrival("s2", False, "pos-A")
    svc.delete_assignment("s1", "pos-A")

    assert positions.filled("pos-A") == 0


def test_best_effort_keeps_row_and_reports_counter_not_updated():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=0)],
        [make_signup("s1", "pos-A")],
    )
    positions.fail_increment = True

    change = svc.set_arrival("s1", True, "pos-A")

    assert change.counter_updated is False
    assert signups.get_by_id("s1").arrived is True
    assert positions.filled("pos-A") == 0


def test_strict_raises_rpc_failure_but_keeps_row():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=0)],
        [make_signup("s1", "pos-A")],
    )
    positions.fail_increment = True

    with pytest.raises(RpcFailure) as exc_info:
        svc.set_arrival("s1", True, "pos-A", policy=FailurePolicy.STRICT)

    assert exc_info.value.position_id == "pos-A"
    assert signups.get_by_id("s1").arrived is True


def test_set_arrival_unknown_signup_does_not_touch_counter():
    svc, positions, _ = _service([make_position("pos-A", filled=2)])

    with pytest.raises(NotFoundError):
        svc.set_arrival("missing", True, "pos-A")

    assert positions.calls == []
    assert positions.filled("pos-A") == 2


def test_create_assignment_missing_field_aborts_before_mutation():
    svc, positions, signups = _service([make_position("pos-A")])
    fields = _assign_fields("A")
    del fields["phone_number"]

    with pytest.raises(ValidationError) as exc_info:
        svc.create_assignment("pos-A", fields)

    assert "phone_number" in str(exc_info.value)
    assert signups.list_all() == []
    assert positions.calls == []


def test_create_assignment_bad_time_is_validation_error():
    svc, _, signups = _service([make_position("pos-A")])
    fields = _assign_fields("A")
    fields["end_time"] = "noon"

    with pytest.raises(ValidationError):
        svc.create_assignment("pos-A", fields)
    assert signups.list_all() == []


def test_create_assignment_unknown_position():
    svc, _, signups = _service()

    with pytest.raises(NotFoundError):
        svc.create_assignment("nope", _assign_fields("A"))
    assert signups.list_all() == []


def test_create_assignment_survives_counter_failure_and_publishes_insert():
    notifier = Notifier()
    sub = notifier.subscribe([Topic.SIGNUP_INSERTED])
    svc, positions, signups = _service([make_position("pos-A", name="Gate")], notifier=notifier)
    positions.fail_increment = True

    signup_id = svc.create_assignment("pos-A", _assign_fields("Dana"))

    row = signups.get_by_id(signup_id)
    assert row.arrived is False
    assert row.start_time == time(8, 0)
    assert positions.filled("pos-A") == 0

    events = sub.drain()
    assert len(events) == 1
    assert events[0].payload["volunteer_name"] == "Dana"
    assert events[0].payload["position_name"] == "Gate"


def test_move_assignment_moves_one_unit_between_positions():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=2), make_position("pos-B", filled=0)],
        [make_signup("s1", "pos-A")],
    )

    svc.move_assignment("s1", "pos-A", "pos-B", {"volunteer_name": "Renamed"})

    assert positions.filled("pos-A") == 1
    assert positions.filled("pos-B") == 1
    row = signups.get_by_id("s1")
    assert row.position_id == "pos-B"
    assert row.volunteer_name == "Renamed"


def test_move_assignment_same_position_leaves_counter_alone():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=2)],
        [make_signup("s1", "pos-A")],
    )

    svc.move_assignment("s1", "pos-A", "pos-A", {"end_time": "13:30"})

    assert positions.calls == []
    assert signups.get_by_id("s1").end_time == time(13, 30)


def test_move_assignment_counter_failure_still_updates_row():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=1), make_position("pos-B", filled=0)],
        [make_signup("s1", "pos-A")],
    )
    positions.fail_decrement = True

    svc.move_assignment("s1", "pos-A", "pos-B", {})

    assert signups.get_by_id("s1").position_id == "pos-B"
    assert positions.filled("pos-A") == 1
    assert positions.filled("pos-B") == 1


def test_move_assignment_to_unknown_position_changes_nothing():
    svc, positions, signups = _service(
        [make_position("pos-A", filled=1)],
        [make_signup("s1", "pos-A")],
    )

    with pytest.raises(NotFoundError):
        svc.move_assignment("s1", "pos-A", "pos-X", {})

    assert positions.calls == []
    assert signups.get_by_id("s1").position_id == "pos-A"


def test_move_assignment_rejects_blank_name():
    svc, positions, _ = _service(
        [make_position("pos-A"), make_position("pos-B")],
        [make_signup("s1", "pos-A")],
    )

    with pytest.raises(ValidationError):
        svc.move_assignment("s1", "pos-A", "pos-B", {"volunteer_name": "  "})
    assert positions.calls == []


def test_delete_assignment_decrements_even_when_not_arrived():
    svc, positions, _ = _service(
        [make_position("pos-A", filled=2)],
        [make_signup("s1", "pos-A", arrived=False)],
    )

    svc.delete_assignment("s1", "pos-A")

    assert positions.calls == [("decrement", "pos-A")]
    assert positions.filled("pos-A") == 1


def test_delete_missing_assignment_is_not_found():
    svc, positions, _ = _service([make_position("pos-A", filled=2)])

    with pytest.raises(NotFoundError):
        svc.delete_assignment("missing", "pos-A")
    assert positions.filled("pos-A") == 2


def test_set_arrival_invalidates_position_views():
    notifier = Notifier()
    sub = notifier.subscribe(position_id="pos-A")
    svc, _, _ = _service([make_position("pos-A")], [make_signup("s1", "pos-A")], notifier=notifier)

    svc.set_arrival("s1", True, "pos-A")

    topics = [e.topic for e in sub.drain()]
    assert topics == [Topic.POSITION_CHANGED, Topic.VOLUNTEERS_CHANGED]
