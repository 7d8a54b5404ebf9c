"""Datetime utilities: UTC now and the shop's receipt timestamp format."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

RECEIPT_TIME_FORMAT = "%Y-%m-%d %H:%M"


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def format_local_minute(moment: datetime, tz_name: str) -> str:
    """Render ``moment`` in the shop's local zone at minute precision.

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(ZoneInfo(tz_name)).strftime(RECEIPT_TIME_FORMAT)
