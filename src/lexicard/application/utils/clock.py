"""
Clock and calendar helpers.

Scheduling functions never read the current time themselves; hosts call
utc_now() once at the edge and pass the instant down. Everything else here
is pure.
"""

from datetime import date, datetime, timedelta, timezone, tzinfo


def utc_now() -> datetime:
    """The current instant as an aware UTC datetime. Call only at the host edge."""
    return datetime.now(timezone.utc)


def ensure_aware(ts: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def calendar_day(ts: datetime, tz: tzinfo | None = None) -> date:
    """Truncate an instant to its calendar day as seen from ``tz`` (default: ts's own zone)."""
    ts = ensure_aware(ts)
    if tz is not None:
        ts = ts.astimezone(tz)
    return ts.date()


def day_range(start: date, days: int) -> list[date]:
    """``days`` consecutive calendar days beginning with ``start``."""
    return [start + timedelta(days=i) for i in range(max(days, 0))]


def to_iso(ts: datetime) -> str:
    return ensure_aware(ts).isoformat()


def parse_iso(value: str | datetime | date) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Accepts the trailing 'Z' that JavaScript's toISOString() emits.
    Already-parsed datetimes (e.g. from YAML) pass through, and bare dates
    become midnight UTC.

    Raises:
        TypeError: If value is not a string, datetime, or date.
        ValueError: If the string is not ISO-8601.
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO-8601 timestamp, got {type(value).__name__}: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))
