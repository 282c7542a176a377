from __future__ import annotations

import json
import logging
import queue
import threading
import uuid
from datetime import date
from functools import wraps

from flask import Flask, Response, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response, system_error_response
from ..container import Container
from ..core.exceptions import AuthFailureError, DomainError, ValidationError
from .dashboard import AdminDashboard
from .view import ExpansionState

logger = logging.getLogger(__name__)


class OpenStreams:
    """Live stream dashboards per signed-in viewer, so toggles reach them."""

    def __init__(self):
        self._streams: dict[str, list[tuple[AdminDashboard, queue.Queue]]] = {}
        self._lock = threading.Lock()

    def add(self, viewer_id: str, dashboard: AdminDashboard, updates: queue.Queue) -> None:
        with self._lock:
            self._streams.setdefault(viewer_id, []).append((dashboard, updates))

    def remove(self, viewer_id: str, dashboard: AdminDashboard) -> None:
        with self._lock:
            entries = [e for e in self._streams.get(viewer_id, []) if e[0] is not dashboard]
            if entries:
                self._streams[viewer_id] = entries
            else:
                self._streams.pop(viewer_id, None)

    def set_expansion(self, viewer_id: str, expansion: ExpansionState) -> None:
        with self._lock:
            entries = list(self._streams.get(viewer_id, []))
        for dashboard, updates in entries:
            dashboard.set_expansion(expansion)
            updates.put(True)

    def count(self, viewer_id: str) -> int:
        with self._lock:
            return len(self._streams.get(viewer_id, []))


def register(app: Flask, container: Container) -> None:
    streams = OpenStreams()
    app.extensions["shift_tracker_streams"] = streams

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "admin" not in session:
                return error_response(AuthFailureError("Please sign in to continue"))
            return view(*args, **kwargs)

        return wrapper

    def _selected_day() -> date:
        value = request.args.get("date")
        if not value:
            return date.today()
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD")

    def _session_expansion() -> ExpansionState:
        return ExpansionState(expanded_id=session.get("expanded_shift_id"))

    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = request.get_json(silent=True) or request.form
        try:
            admin = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except AuthFailureError as e:
            return error_response(e)

        session.clear()
        session["admin"] = admin.username
        session["viewer_id"] = uuid.uuid4().hex
        return jsonify({"success": True, "username": admin.username})

    @app.route("/api/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        username = session.get("admin")
        session.clear()
        if username:
            logger.info("Admin %s signed out", username)
        return jsonify({"success": True})

    @app.route("/api/admin/shifts", methods=["GET"], endpoint="admin_shifts")
    @admin_required
    def admin_shifts():
        try:
            with container.new_dashboard(day=_selected_day(), expansion=_session_expansion()) as dashboard:
                return jsonify(dashboard.snapshot())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to load admin shifts")
            return system_error_response("System error while loading shifts")

    @app.route("/api/admin/shifts/<shift_id>/toggle", methods=["POST"], endpoint="admin_toggle_shift")
    @admin_required
    def admin_toggle_shift(shift_id: str):
        try:
            with container.new_dashboard(day=_selected_day(), expansion=_session_expansion()) as dashboard:
                expansion = dashboard.toggle(shift_id)
                session["expanded_shift_id"] = expansion.expanded_id
                streams.set_expansion(session.get("viewer_id", ""), expansion)
                return jsonify(dashboard.snapshot())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to toggle shift %s", shift_id)
            return system_error_response("System error while loading shifts")

    @app.route("/api/admin/stream", methods=["GET"], endpoint="admin_stream")
    @admin_required
    def admin_stream():
        keepalive = float(app.config.get("STREAM_KEEPALIVE_SECONDS", 15))
        viewer_id = session.get("viewer_id", "")
        updates: queue.Queue = queue.Queue()
        try:
            dashboard = container.new_dashboard(day=_selected_day(), expansion=_session_expansion())
            dashboard.on_change(lambda _view: updates.put(True))
            dashboard.open()
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to open the admin stream")
            return system_error_response("System error while opening the live feed")
        streams.add(viewer_id, dashboard, updates)

        def events():
            try:
                yield _sse(dashboard.snapshot())
                while True:
                    try:
                        updates.get(timeout=keepalive)
                    except queue.Empty:
                        yield ": keepalive\n\n"
                        continue
                    # Several pushes may have queued up; one frame covers them all.
                    while True:
                        try:
                            updates.get_nowait()
                        except queue.Empty:
                            break
                    yield _sse(dashboard.snapshot())
            finally:
                streams.remove(viewer_id, dashboard)
                dashboard.close()

        return Response(events(), mimetype="text/event-stream", headers={"Cache-Control": "no-cache"})


def _sse(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"
