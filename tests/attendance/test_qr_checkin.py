from __future__ import annotations

import pytest

from src.volunteer_desk.volunteer_desk.attendance.service import AttendanceService, checkin_url
from src.volunteer_desk.volunteer_desk.common.geo import GeoPoint
from src.volunteer_desk.volunteer_desk.core.exceptions import NotFoundError, RpcFailure, ValidationError
from tests.fakes import make_position, make_signup, make_stores


def _service():
    _, positions, signups = make_stores(
        [
            make_position("pos-A", filled=1, latitude=40.0, longitude=-75.0),
            make_position("pos-B", filled=0),
        ],
        [
            make_signup("s1", "pos-A"),
            make_signup("s2", "pos-A", arrived=True),
            make_signup("s3", "pos-B"),
        ],
    )
    return AttendanceService(signups, positions), positions, signups


def test_checkin_url_carries_position_id():
    assert checkin_url("https://desk.example.org/", "pos-A") == "https://desk.example.org/checkin?position=pos-A"


def test_roster_lists_only_volunteers_not_yet_arrived():
    svc, _, _ = _service()

    roster = svc.checkin_roster("pos-A")

    assert roster.position.position_id == "pos-A"
    assert [v.signup_id for v in roster.volunteers] == ["s1"]


def test_blank_token_is_invalid_qr():
    svc, _, _ = _service()

    with pytest.raises(ValidationError) as exc_info:
        svc.checkin_roster("  ")
    assert "No position ID" in str(exc_info.value)


def test_unknown_token_is_not_found():
    svc, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.checkin_roster("pos-Z")


def test_check_in_marks_arrived_and_increments():
    svc, positions, signups = _service()

    result = svc.check_in_from_qr("pos-A", "s1")

    assert result.counter_updated is True
    assert result.near_position is True
    assert signups.get_by_id("s1").arrived is True
    assert positions.filled("pos-A") == 2


def test_check_in_far_away_still_succeeds_but_is_flagged():
    svc, _, signups = _service()

    result = svc.check_in_from_qr("pos-A", "s1", location=GeoPoint(41.0, -75.0))

    assert result.near_position is False
    assert signups.get_by_id("s1").arrived is True


def test_check_in_rejects_volunteer_from_another_position():
    svc, positions, _ = _service()

    with pytest.raises(ValidationError):
        svc.check_in_from_qr("pos-A", "s3")
    assert positions.calls == []


def test_check_in_rejects_already_arrived():
    svc, positions, _ = _service()

    with pytest.raises(ValidationError):
        svc.check_in_from_qr("pos-A", "s2")
    assert positions.calls == []


def test_check_in_surfaces_counter_failure():
    svc, positions, signups = _service()
    positions.fail_increment = True

    with pytest.raises(RpcFailure):
        svc.check_in_from_qr("pos-A", "s1")

    # the row write already committed
    assert signups.get_by_id("s1").arrived is True
    assert positions.filled("pos-A") == 1
