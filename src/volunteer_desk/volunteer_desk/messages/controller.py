from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..common.serializers import message_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    messages = container.message_service

    @app.route("/api/messages", methods=["POST"], endpoint="api_message_send")
    def api_message_send():
        data = request.get_json(silent=True) or {}
        try:
            message_id = messages.send(
                title=data.get("title"),
                content=data.get("content"),
                position_id=data.get("position_id"),
                event_id=data.get("event_id"),
                volunteer_id=data.get("volunteer_id"),
                phone_number=data.get("phone_number"),
            )
            return ok("Message sent", status=201, message_id=message_id)
        except Exception as e:
            return error_response(e, fallback="Failed to send message")

    @app.route("/api/messages", methods=["GET"], endpoint="api_messages_open")
    def api_messages_open():
        try:
            rows = messages.list_open(event_id=request.args.get("event_id") or None)
            return ok(messages=[message_json(m) for m in rows])
        except Exception as e:
            return error_response(e, fallback="Failed to load messages")

    @app.route("/api/messages/<message_id>", methods=["PATCH"], endpoint="api_message_status")
    def api_message_status(message_id: str):
        data = request.get_json(silent=True) or {}
        try:
            messages.update_status(message_id, data.get("status"))
            return ok("Message updated")
        except Exception as e:
            return error_response(e, fallback="Failed to update message")
