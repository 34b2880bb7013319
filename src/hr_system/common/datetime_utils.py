from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name}")


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def work_date_of(timestamp: datetime, tz: ZoneInfo) -> date:
    """Calendar date of ``timestamp`` in the organization timezone.

    Every work-date computation goes through here so that check-in, reports
    and the absence sweep agree on day boundaries.
    """
    return ensure_aware(timestamp).astimezone(tz).date()


def local_time_of(timestamp: datetime, tz: ZoneInfo) -> time:
    return ensure_aware(timestamp).astimezone(tz).time()


def today_in(tz: ZoneInfo, *, now: datetime | None = None) -> date:
    return work_date_of(now or now_utc(), tz)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_clock_time(value: str) -> time:
    """Parse HH:MM string into time."""
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def is_valid_month(value: str) -> bool:
    return bool(value) and bool(_MONTH_RE.match(value))


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def hours_between(start: datetime, end: datetime) -> float:
    """Hours from ``start`` to ``end``, rounded half up to two decimals."""
    seconds = Decimal(str((ensure_aware(end) - ensure_aware(start)).total_seconds()))
    return float((seconds / 3600).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
