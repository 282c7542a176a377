from __future__ import annotations

from flask import jsonify

from ..core.exceptions import DomainError

# Domain error code -> HTTP status. Anything else is a 400.
STATUS_BY_CODE = {
    "shift_not_found": 404,
    "duplicate_active_shift": 409,
    "already_closed": 409,
    "action_in_progress": 409,
    "auth_failure": 401,
    "network_failure": 503,
}


def status_for(code: str | None) -> int:
    return STATUS_BY_CODE.get(code or "", 400)


def error_response(err: DomainError):
    return jsonify({"success": False, "message": str(err), "code": err.code}), status_for(err.code)


def system_error_response(message: str):
    return jsonify({"success": False, "message": message, "code": "system_error"}), 500
