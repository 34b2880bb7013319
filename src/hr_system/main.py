from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import ok, register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed, list_tables
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .users.controller import register as register_users

LOG_FORMAT = "%(asctime)s - %(levelname)s %(name)s - %(message)s"

logger = logging.getLogger(__name__)


def load_settings():
    return importlib.import_module(get_settings_module())


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings()

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            apply_seed(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            org_timezone=getattr(settings, "ORG_TIMEZONE"),
            late_cutoff=getattr(settings, "LATE_CUTOFF"),
            half_day_hours=getattr(settings, "HALF_DAY_HOURS"),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_payroll(app, container)
    register_reports(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "healthy"})

    return app
