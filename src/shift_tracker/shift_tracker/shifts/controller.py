from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.responses import error_response, status_for, system_error_response
from ..container import Container
from ..core.exceptions import DomainError
from .actions import ActionResult

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _employee_id() -> str:
        data = request.get_json(silent=True) or {}
        return str(data.get("employee_id") or request.form.get("employee_id") or "").strip()

    def _respond(result: ActionResult):
        return jsonify(result.as_dict()), 200 if result.ok else status_for(result.code)

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    def list_employees():
        return jsonify(
            [
                {"employee_id": e.employee_id, "name": e.name, "department": e.department}
                for e in container.employees.list_all()
            ]
        )

    @app.route("/api/shifts/status", methods=["GET"], endpoint="shift_status")
    def shift_status():
        employee_id = (request.args.get("employee_id") or "").strip()
        try:
            status = container.status_panel.get_status(employee_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to load shift status for %s", employee_id)
            return system_error_response("System error while loading the shift")

        if status is None:
            return jsonify({"active": False, "employee_id": employee_id, "click_count": 0})
        return jsonify(status.as_dict())

    @app.route("/api/shifts/start", methods=["POST"], endpoint="start_shift")
    def start_shift():
        employee_id = _employee_id()
        try:
            return _respond(container.shift_actions.start_shift(employee_id))
        except Exception:
            logger.exception("Failed to start shift for %s", employee_id)
            return system_error_response("System error while starting the shift")

    @app.route("/api/shifts/click", methods=["POST"], endpoint="add_click")
    def add_click():
        employee_id = _employee_id()
        try:
            return _respond(container.shift_actions.add_click(employee_id))
        except Exception:
            logger.exception("Failed to add click for %s", employee_id)
            return system_error_response("System error while adding the click")

    @app.route("/api/shifts/<shift_id>/end", methods=["POST"], endpoint="end_shift")
    def end_shift(shift_id: str):
        try:
            return _respond(container.shift_actions.end_shift(shift_id))
        except Exception:
            logger.exception("Failed to end shift %s", shift_id)
            return system_error_response("System error while ending the shift")
