from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS, DEFAULT_TIME_ZONE
from .core.logging import setup_logging
from .database.bootstrap import apply_schema, list_tables
from .retroactive.controller import register as register_retroactive
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    ``container`` lets callers (tests, scripts) supply their own repositories;
    otherwise the MySQL-backed container is built from the settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_time_zone=getattr(settings, "DEFAULT_TIME_ZONE", DEFAULT_TIME_ZONE),
        )

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            container.settings_service.get_settings()
            container.user_service.ensure_default_users()

    app.extensions["syncink"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_retroactive(app, container)
    register_settings(app, container)

    return app
