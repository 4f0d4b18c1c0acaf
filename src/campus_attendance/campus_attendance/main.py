from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.log_setup import configure_logging
from .common.web import install_error_handlers
from .container import Container, build_container
from .database.connection import DBConfig
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables

from .academics.controller import register as register_academics
from .attendance.controller import register as register_attendance
from .notifications.controller import register as register_notifications
from .people.controller import register as register_people
from .rules.controller import register as register_rules
from .timetables.controller import register as register_timetables
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    A prepared ``container`` (tests) skips every database step.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["IDP_ACCOUNT_HEADER"] = getattr(settings, "IDP_ACCOUNT_HEADER", "X-Account-Id")
    app.config["IDP_EMAIL_HEADER"] = getattr(settings, "IDP_EMAIL_HEADER", "X-Account-Email")

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("Starting with settings=%s db=%s", settings_module, DBConfig.from_settings(db_config).target)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_accounts(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            scan_debounce_seconds=float(getattr(settings, "SCAN_DEBOUNCE_SECONDS", 3)),
            import_chunk_size=int(getattr(settings, "IMPORT_CHUNK_SIZE", 400)),
            sms_enabled=bool(getattr(settings, "SMS_ENABLED", True)),
        )

    app.extensions["container"] = container
    install_error_handlers(app)

    register_users(app, container)
    register_people(app, container)
    register_attendance(app, container)
    register_academics(app, container)
    register_timetables(app, container)
    register_notifications(app, container)
    register_rules(app, container)

    return app
