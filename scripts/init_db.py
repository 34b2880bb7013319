from __future__ import annotations

import argparse
import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from hr_system.database.bootstrap import apply_schema, apply_seed, ensure_admin_user, list_tables
from hr_system.main import LOG_FORMAT

logger = logging.getLogger("init_db")


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply schema.sql and seed.sql, optionally create the admin account.")
    parser.add_argument("--with-admin", action="store_true", help="create or reset the bootstrap admin user")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    apply_seed(db_config)
    if args.with_admin:
        password = getattr(settings, "ADMIN_PASSWORD", "")
        if not password:
            parser.error("ADMIN_PASSWORD is not set")
        ensure_admin_user(db_config, username=getattr(settings, "ADMIN_USERNAME", "admin"), password=password)

    logger.info(
        "Schema applied to %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(list_tables(db_config)),
    )


if __name__ == "__main__":
    main()
