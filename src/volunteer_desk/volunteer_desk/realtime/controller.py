from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/issues", methods=["GET"], endpoint="api_dashboard_issues")
    def api_dashboard_issues():
        """Recent signups and staffing warnings, newest first."""
        try:
            if request.args.get("refresh") in {"1", "true"}:
                container.staffing_monitor.check()
            return ok(issues=[i.to_dict() for i in container.issue_feed.items()])
        except Exception as e:
            return error_response(e, fallback="Failed to load issues")

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok(
            "healthy",
            background=container.background_status(),
        )
