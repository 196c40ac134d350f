from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import DomainError, NotFoundError, RpcFailure, ValidationError

logger = logging.getLogger(__name__)


def ok(message: str = "OK", status: int = 200, **data):
    return jsonify({"success": True, "message": message, **data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: Exception, *, fallback: str):
    """Map domain errors to JSON responses; anything else is a generic 500."""
    if isinstance(exc, ValidationError):
        return fail(str(exc), 400)
    if isinstance(exc, NotFoundError):
        return fail(str(exc), 404)
    if isinstance(exc, RpcFailure):
        return fail(f"{fallback}: filled count was not updated", 502)
    if isinstance(exc, DomainError):
        return fail(str(exc), 400)
    logger.exception(fallback)
    return fail(fallback, 500)
