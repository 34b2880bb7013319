from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from hr_system.database.bootstrap import apply_seed
from hr_system.main import LOG_FORMAT

logger = logging.getLogger("seed_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    db_config = dict(settings.DB_CONFIG)

    apply_seed(db_config)
    logger.info(
        "Seeded %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
