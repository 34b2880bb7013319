"""Mark active employees without a record as absent for one work date.

Meant for a daily timer after the working day ends, e.g.::

    APP_ENV=production python scripts/mark_absences.py            # today (org timezone)
    APP_ENV=production python scripts/mark_absences.py 2024-06-03
"""

from __future__ import annotations

import argparse
import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from hr_system.common.datetime_utils import now_utc, parse_iso_date
from hr_system.container import build_container
from hr_system.main import LOG_FORMAT

logger = logging.getLogger("mark_absences")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("work_date", nargs="?", help="YYYY-MM-DD, defaults to today in the organization timezone")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        org_timezone=settings.ORG_TIMEZONE,
        late_cutoff=settings.LATE_CUTOFF,
        half_day_hours=settings.HALF_DAY_HOURS,
    )
    service = container.attendance_service
    work_date = parse_iso_date(args.work_date) if args.work_date else service.get_work_date(now_utc())

    created = service.mark_absences(work_date)
    logger.info("Done: %d absent record(s) created for %s", created, work_date)


if __name__ == "__main__":
    main()
