from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .approvals.controller import register as register_approvals
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.enums import GeofenceMode
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema, list_tables
from .devices.controller import register as register_devices
from .payroll.controller import register as register_payroll
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _geofence_mode(value: str) -> GeofenceMode:
    try:
        return GeofenceMode((value or "review").strip().lower())
    except ValueError:
        raise ValidationError(f"DEFAULT_GEOFENCE_MODE must be strict or review, got {value!r}")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    Passing a ready ``container`` skips the database wiring entirely (tests use
    in-memory repositories this way).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            photo_dir=str(getattr(settings, "PHOTO_DIR", "uploads/photos")),
            default_mode=_geofence_mode(getattr(settings, "DEFAULT_GEOFENCE_MODE", "review")),
        )

    register_error_handlers(app)
    register_attendance(app, container)
    register_approvals(app, container)
    register_devices(app, container)
    register_settings(app, container)
    register_users(app, container)
    register_payroll(app, container)

    return app
