from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .policy.controller import register as register_policy
from .users.controller import register as register_users
from .vacations.controller import register as register_vacations
from .web import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass a prebuilt ``container`` to skip MySQL wiring (tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "Starting with settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            admin_password = getattr(settings, "ADMIN_PASSWORD", "")
            if admin_password:
                ensure_admin_user(
                    db_config,
                    username=getattr(settings, "ADMIN_USERNAME", "admin"),
                    password=admin_password,
                    full_name=getattr(settings, "ADMIN_NAME", "Admin"),
                )
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_vacation_days=int(getattr(settings, "DEFAULT_VACATION_DAYS", 25)),
        )

    app.extensions["vacation_tracker"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_vacations(app, container)
    register_policy(app, container)

    return app
