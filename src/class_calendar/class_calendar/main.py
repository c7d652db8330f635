from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .common.http import error_body
from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables
from .events.controller import register as register_events
from .subjects.controller import register as register_subjects
from .suggestions.controller import register as register_suggestions
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings() -> ModuleType:
    return importlib.import_module(f".config.{get_settings_module()}", package=__package__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.kind, exc.message)
        return jsonify(error_body(exc.kind, exc.message)), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        kind = "not_found" if exc.code == 404 else "http_error"
        return jsonify(error_body(kind, exc.description or exc.name)), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled error")
        return jsonify(error_body("internal_error", "Internal server error")), 500


def create_app(container: Optional[Container] = None, settings: Optional[ModuleType] = None) -> Flask:
    load_dotenv(override=False)
    settings = settings or load_settings()

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, settings=settings)

    app.extensions["container"] = container

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"success": True, "status": "ok"})

    register_users(app, container)
    register_subjects(app, container)
    register_attendance(app, container)
    register_events(app, container)
    register_suggestions(app, container)
    _register_error_handlers(app)

    return app
