from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..common.serializers import event_json, position_json, signup_json, staffing_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    events = container.event_service
    positions = container.position_service

    # ===== EVENTS =====

    @app.route("/api/events", methods=["GET"], endpoint="api_events")
    def api_events():
        try:
            return ok(events=[event_json(e) for e in events.list_all()])
        except Exception as e:
            return error_response(e, fallback="Failed to load events")

    @app.route("/api/events", methods=["POST"], endpoint="api_event_create")
    def api_event_create():
        data = request.get_json(silent=True) or {}
        try:
            event_id = events.create(
                name=data.get("name"),
                event_date=data.get("date"),
                event_time=data.get("time"),
                location=data.get("location"),
                custom_map_url=data.get("custom_map_url"),
            )
            return ok("Event created", status=201, event_id=event_id)
        except Exception as e:
            return error_response(e, fallback="Failed to create event")

    @app.route("/api/events/<event_id>", methods=["PATCH"], endpoint="api_event_update")
    def api_event_update(event_id: str):
        data = dict(request.get_json(silent=True) or {})
        # the client speaks in column names
        if "date" in data:
            data["event_date"] = data.pop("date")
        if "time" in data:
            data["event_time"] = data.pop("time")
        try:
            events.update(event_id, data)
            return ok("Event updated")
        except Exception as e:
            return error_response(e, fallback="Failed to update event")

    @app.route("/api/events/<event_id>", methods=["DELETE"], endpoint="api_event_delete")
    def api_event_delete(event_id: str):
        try:
            events.delete(event_id)
            return ok("Event deleted")
        except Exception as e:
            return error_response(e, fallback="Failed to delete event")

    # ===== POSITIONS =====

    @app.route("/api/events/<event_id>/positions", methods=["GET"], endpoint="api_event_positions")
    def api_event_positions(event_id: str):
        try:
            events.get(event_id)
            return ok(positions=[position_json(p) for p in positions.list_for_event(event_id)])
        except Exception as e:
            return error_response(e, fallback="Failed to load positions")

    @app.route("/api/events/<event_id>/positions", methods=["POST"], endpoint="api_position_create")
    def api_position_create(event_id: str):
        data = request.get_json(silent=True) or {}
        try:
            position_id = positions.create(
                event_id=event_id,
                name=data.get("name"),
                needed=data.get("needed"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                description=data.get("description"),
                skill_level=data.get("skill_level"),
            )
            return ok("Position created", status=201, position_id=position_id)
        except Exception as e:
            return error_response(e, fallback="Failed to create position")

    @app.route("/api/positions/<position_id>", methods=["GET"], endpoint="api_position_detail")
    def api_position_detail(position_id: str):
        try:
            position = positions.get(position_id)
            volunteers = container.signups_repo.list_for_position(position_id)
            return ok(position=position_json(position), volunteers=[signup_json(v) for v in volunteers])
        except Exception as e:
            return error_response(e, fallback="Failed to load position")

    @app.route("/api/positions/<position_id>", methods=["PATCH"], endpoint="api_position_update")
    def api_position_update(position_id: str):
        data = request.get_json(silent=True) or {}
        try:
            positions.update(position_id, data)
            container.notifier.invalidate_positions([position_id])
            return ok("Position updated")
        except Exception as e:
            return error_response(e, fallback="Failed to update position")

    @app.route("/api/positions/<position_id>", methods=["DELETE"], endpoint="api_position_delete")
    def api_position_delete(position_id: str):
        try:
            positions.delete(position_id)
            container.notifier.invalidate_positions([position_id])
            return ok("Position deleted")
        except Exception as e:
            return error_response(e, fallback="Failed to delete position")

    # ===== STAFFING =====

    @app.route("/api/positions/staffing", methods=["GET"], endpoint="api_staffing")
    def api_staffing():
        try:
            rows = positions.staffing_overview(event_id=request.args.get("event_id") or None)
            return ok(positions=[staffing_json(r) for r in rows])
        except Exception as e:
            return error_response(e, fallback="Failed to load staffing")

    @app.route("/api/admin/reset-filled-counts", methods=["POST"], endpoint="api_reset_filled")
    def api_reset_filled():
        try:
            count = positions.reset_filled_counts()
            return ok(f"Reset filled count for {count} position(s)", positions=count)
        except Exception as e:
            return error_response(e, fallback="Failed to reset filled counts")
