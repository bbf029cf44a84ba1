from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .core.constants import (
    DEFAULT_API_TIMEOUT_SECONDS,
    DEFAULT_REST_DAY,
    DEFAULT_SUBJECT_LABEL,
    LOW_ATTENDANCE_THRESHOLD,
)
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig

from .container import Container, build_api_container, build_container
from .attendance.controller import register as register_attendance
from .reports.controller import register as register_reports
from .timetable.controller import register as register_timetable

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        options = dict(
            periods=getattr(settings, "PERIODS", None),
            rest_day=getattr(settings, "REST_DAY", DEFAULT_REST_DAY),
            fallback_subject=getattr(settings, "DEFAULT_SUBJECT_LABEL", DEFAULT_SUBJECT_LABEL),
            low_attendance_threshold=float(getattr(settings, "LOW_ATTENDANCE_THRESHOLD", LOW_ATTENDANCE_THRESHOLD)),
        )
        api_base_url = getattr(settings, "API_BASE_URL", "")

        if api_base_url:
            # Remote school API instead of a local database.
            logger.info(f"settings={settings_module} api={api_base_url}")
            timeout = float(getattr(settings, "API_TIMEOUT_SECONDS", DEFAULT_API_TIMEOUT_SECONDS))
            container = build_api_container(api_base_url, timeout=timeout, **options)
        else:
            logger.info(f"settings={settings_module} db={DBConfig.from_dict(db_config).describe()}")

            if bool(getattr(settings, "AUTO_INIT_DB", False)):
                schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
                apply_schema(db_config, schema_path=schema_path)
                logger.info(f"Schema ready (tables={len(list_tables(db_config))})")

            container = build_container(db_config=db_config, **options)

    app.extensions["timetable_attendance"] = container

    register_timetable(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    create_app().run()
