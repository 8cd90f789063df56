from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_CHECKIN_TOKEN, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG", None)
        backend = str(getattr(settings, "STORAGE_BACKEND", "memory"))

        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            storage_backend=backend,
            db_config=db_config,
            checkin_token=str(getattr(settings, "CHECKIN_TOKEN", DEFAULT_CHECKIN_TOKEN)),
            timezone=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
        )

    logger.info("[study-hall] settings=%s token_len=%d", settings_module, len(container.checkin_token))

    register_attendance(app, container)
    app.extensions["study_hall"] = container

    return app
