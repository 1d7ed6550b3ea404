from __future__ import annotations

import importlib
import logging
import logging.config
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .common.auth import install_identity_loader
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .pto.controller import register as register_pto
from .reports.controller import register as register_reports
from .time_entries.controller import register as register_time_entries
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Container | None = None, *, settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.config.dictConfig(getattr(settings, "LOGGING"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    if not app.secret_key:
        raise RuntimeError("SECRET_KEY is not configured")

    token_days = int(getattr(settings, "TOKEN_EXPIRE_DAYS", 7))
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=token_days)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))

    CORS(
        app,
        resources={r"/api/*": {"origins": getattr(settings, "CORS_ORIGIN")}},
        supports_credentials=True,
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        target = DBConfig.from_dict(db_config)
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(target, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%s)", len(list_tables(target)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(target)

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_expire_days=token_days,
        )

    app.extensions["timeclock"] = container

    register_error_handlers(app)
    install_identity_loader(app, container.auth_service)

    register_users(app, container)
    register_time_entries(app, container)
    register_pto(app, container)
    register_reports(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
