from __future__ import annotations

import importlib
import os
from logging.config import dictConfig
from types import ModuleType
from typing import Optional

import yaml
from dotenv import load_dotenv
from flask import Flask, jsonify
from flask.logging import default_handler

from config import get_settings_module

from .common.datetime_utils import parse_clock
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConcurrencyError,
    ConfigurationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .database.bootstrap import apply_schema, ensure_admin, list_tables
from .employments.attendance_rules import AttendanceRules

from .container import build_container
from .auth.controller import register as register_auth
from .counters.controller import register as register_counters
from .employees.controller import register as register_employees
from .employments.controller import register as register_employments
from .salaries.controller import register as register_salaries

# Most specific first: DuplicateError is a ConflictError.
ERROR_STATUS = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ValidationError, 400),
    (ConflictError, 409),
    (NotFoundError, 404),
    (ConcurrencyError, 409),
    (StoreError, 503),
    (ConfigurationError, 500),
)


def status_for(error: DomainError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


def _configure_logging(app: Flask, logging_config: str) -> None:
    if logging_config and os.path.exists(logging_config):
        with open(logging_config) as fh:
            dictConfig(yaml.safe_load(fh))
        app.logger.addHandler(default_handler)


def _attendance_rules(settings: ModuleType) -> AttendanceRules:
    return AttendanceRules(
        office_start=parse_clock(getattr(settings, "OFFICE_START", "10:00")),
        office_end=parse_clock(getattr(settings, "OFFICE_END", "18:00")),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 0)),
        half_day_hours=float(getattr(settings, "HALF_DAY_HOURS", 4)),
    )


def create_app(settings_module: Optional[str] = None, *, store=None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")
    store_backend = getattr(settings, "STORE_BACKEND", "mysql")

    _configure_logging(app, getattr(settings, "LOGGING_CONFIG", ""))
    app.logger.info(
        "[hr-records] settings=%s store=%s db=%s@%s:%s/%s",
        settings_module,
        store_backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if store is None and store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        app.logger.info("[hr-records] schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        store=store,
        ttl_hours=int(getattr(settings, "ADMIN_SESSION_TTL_HOURS", 24)),
        rules=_attendance_rules(settings),
        id_formats=getattr(settings, "ID_FORMATS", None),
    )
    app.extensions["hr_records"] = container

    admin_mobile = getattr(settings, "BOOTSTRAP_ADMIN_MOBILE", "")
    admin_password = getattr(settings, "BOOTSTRAP_ADMIN_PASSWORD", "")
    if admin_mobile and admin_password:
        ensure_admin(container.store, name="Administrator", mobile=admin_mobile, password=admin_password)

    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            app.logger.error("%s: %s", type(error).__name__, error)
        return jsonify({"ok": False, "error": type(error).__name__, "message": str(error)}), status

    register_auth(app, container)
    register_employees(app, container)
    register_employments(app, container)
    register_salaries(app, container)
    register_counters(app, container)

    return app
