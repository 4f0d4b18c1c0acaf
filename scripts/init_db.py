from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.campus_attendance.campus_attendance.common.log_setup import configure_logging
from src.campus_attendance.campus_attendance.database.connection import DBConfig
from src.campus_attendance.campus_attendance.database.bootstrap import apply_schema, list_tables


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO")).getChild("scripts.init_db")
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    logger.info(
        "OK: Applied schema.sql -> %s (tables=%s)",
        DBConfig.from_settings(db_config).target,
        len(tables),
    )


if __name__ == "__main__":
    main()
