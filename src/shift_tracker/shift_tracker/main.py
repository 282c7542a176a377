from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .admin.controller import register as register_admin
from .container import build_container
from .core.constants import DEFAULT_STREAM_KEEPALIVE_SECONDS
from .core.enums import StoreBackend
from .database.bootstrap import apply_schema, list_tables
from .logging_config import setup_logging
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["STREAM_KEEPALIVE_SECONDS"] = getattr(
        settings, "STREAM_KEEPALIVE_SECONDS", DEFAULT_STREAM_KEEPALIVE_SECONDS
    )

    backend = getattr(settings, "STORE_BACKEND", StoreBackend.MYSQL.value)
    db_config = getattr(settings, "DB_CONFIG", None)
    logger.info("settings=%s store=%s", settings_module, backend)

    if backend == StoreBackend.MYSQL.value and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        backend=backend,
        db_config=db_config,
        admin_username=getattr(settings, "ADMIN_USERNAME"),
        admin_password_hash=getattr(settings, "ADMIN_PASSWORD_HASH"),
    )
    app.extensions["shift_tracker"] = container

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "service": "shift-tracker"})

    register_shifts(app, container)
    register_admin(app, container)

    return app
