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
from src.campus_attendance.campus_attendance.database.bootstrap import apply_seed_sql, ensure_demo_accounts


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO")).getChild("scripts.seed_db")
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_accounts(db_config)
    logger.info("OK: Seeded database -> %s", DBConfig.from_settings(db_config).target)


if __name__ == "__main__":
    main()
