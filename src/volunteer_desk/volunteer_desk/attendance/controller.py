from __future__ import annotations

from flask import Flask, request

from ..common.geo import GeoPoint
from ..common.responses import error_response, fail, ok
from ..common.serializers import position_json, signup_json
from ..container import Container
from .auto_checkout import scoped_volunteer_loader
from .service import checkin_url


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _location_from(data: dict):
    lat = data.get("latitude")
    lng = data.get("longitude")
    if lat is None or lng is None:
        return None
    try:
        return GeoPoint(float(lat), float(lng))
    except (TypeError, ValueError):
        return None


def register(app: Flask, container: Container) -> None:
    engine = container.attendance_service

    # ===== QR CHECK-IN =====

    @app.route("/checkin", methods=["GET"], endpoint="checkin_roster")
    def checkin_roster():
        """Page opened by a position's QR code: position details and who can still check in."""
        try:
            roster = engine.checkin_roster(request.args.get("position"))
            event = container.events_repo.get_by_id(roster.position.event_id)
            return ok(
                "Select your name to check in" if roster.volunteers else "No volunteers available for check-in",
                position=position_json(roster.position),
                event_name=event.name if event else None,
                volunteers=[signup_json(v) for v in roster.volunteers],
            )
        except Exception as e:
            return error_response(e, fallback="Failed to load check-in information")

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        data = request.get_json(silent=True) or {}
        try:
            result = engine.check_in_from_qr(
                data.get("position"),
                data.get("signup_id"),
                location=_location_from(data),
            )
            return ok(
                "Check-in successful!",
                signup_id=result.signup.signup_id,
                near_position=result.near_position,
            )
        except Exception as e:
            return error_response(e, fallback="Failed to check in")

    @app.route("/api/positions/<position_id>/checkin-url", methods=["GET"], endpoint="api_checkin_url")
    def api_checkin_url(position_id: str):
        try:
            position = engine.resolve_position_token(position_id)
            return ok(url=checkin_url(container.options.public_base_url, position.position_id))
        except Exception as e:
            return error_response(e, fallback="Failed to build check-in URL")

    # ===== ASSIGNMENTS =====

    @app.route("/api/positions/<position_id>/assignments", methods=["POST"], endpoint="api_assign")
    def api_assign(position_id: str):
        data = request.get_json(silent=True) or {}
        try:
            signup_id = engine.create_assignment(position_id, data)
            return ok("Volunteer assigned successfully", status=201, signup_id=signup_id)
        except Exception as e:
            return error_response(e, fallback="Failed to assign volunteer")

    @app.route("/api/assignments/<signup_id>", methods=["PATCH"], endpoint="api_assignment_update")
    def api_assignment_update(signup_id: str):
        data = dict(request.get_json(silent=True) or {})
        old_position_id = (data.pop("old_position_id", None) or "").strip()
        if not old_position_id:
            return fail("old_position_id is required", 400)
        try:
            engine.move_assignment(signup_id, old_position_id, data.pop("position_id", None), data)
            return ok("Volunteer updated successfully")
        except Exception as e:
            return error_response(e, fallback="Failed to update volunteer")

    @app.route("/api/assignments/<signup_id>", methods=["DELETE"], endpoint="api_assignment_delete")
    def api_assignment_delete(signup_id: str):
        position_id = (request.args.get("position_id") or "").strip()
        if not position_id:
            return fail("position_id is required", 400)
        try:
            engine.delete_assignment(signup_id, position_id)
            return ok("Volunteer removed successfully")
        except Exception as e:
            return error_response(e, fallback="Failed to remove volunteer")

    @app.route("/api/assignments/<signup_id>/arrival", methods=["POST"], endpoint="api_assignment_arrival")
    def api_assignment_arrival(signup_id: str):
        data = request.get_json(silent=True) or {}
        position_id = (data.get("position_id") or "").strip()
        if not position_id or "arrived" not in data:
            return fail("arrived and position_id are required", 400)
        try:
            change = engine.set_arrival(signup_id, _as_bool(data["arrived"]), position_id)
            return ok(
                "Volunteer status updated",
                arrived=change.arrived,
                counter_updated=change.counter_updated,
            )
        except Exception as e:
            return error_response(e, fallback="Failed to update volunteer status")

    # ===== AUTO CHECK-OUT =====

    @app.route("/api/auto-checkout/run", methods=["POST"], endpoint="api_auto_checkout")
    def api_auto_checkout():
        """Run one sweep over the requested scope (a position, an event, or everything)."""
        data = request.get_json(silent=True) or {}
        try:
            load = scoped_volunteer_loader(
                container.signups_repo,
                event_id=data.get("event_id"),
                position_id=data.get("position_id"),
            )
            report = container.auto_checkout.run(load())
            return ok(
                report.summary(),
                succeeded=report.succeeded,
                failed=report.failed,
                outcomes=[o.to_dict() for o in report.outcomes],
            )
        except Exception as e:
            return error_response(e, fallback="Auto check-out failed")
