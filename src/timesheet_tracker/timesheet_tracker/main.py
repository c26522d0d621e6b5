from __future__ import annotations

import importlib
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_PAGE_SIZE, DEFAULT_TOKEN_TTL_DAYS
from .core.logging import configure_logging, get_logger
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .timesheets.controller import register as register_timesheets
from .users.controller import register as register_users

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory.

    Settings come from the module picked by ``APP_ENV``. Pass ``container`` to
    run against prebuilt services (the tests use in-memory repositories).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    CORS(app, resources={r"/api/*": {"origins": getattr(settings, "CORS_ORIGINS", "*")}})

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            apply_schema(conn, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%s)", len(list_tables(conn)))

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_ttl=timedelta(days=int(getattr(settings, "TOKEN_TTL_DAYS", DEFAULT_TOKEN_TTL_DAYS))),
            page_size=int(getattr(settings, "DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
        )

    app.extensions["timesheet_tracker.container"] = container

    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"message": "Server is running"}), 200

    register_users(app, container)
    register_timesheets(app, container)

    return app
