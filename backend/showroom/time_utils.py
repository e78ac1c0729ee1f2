# Overview: Ledger clock and timestamp helpers; all stored datetimes are naive UTC.

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Ledger 'now': UTC with tzinfo stripped."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """
    ISO-8601 string to naive UTC.

    Blank -> None. A naive value is taken as UTC; "Z" and offsets are converted.
    Raises ValueError for anything else.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def coerce_bound(value) -> datetime | None:
    """Filter bound given as a datetime, an ISO string or None."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"unsupported datetime value {value!r}")
    return parse_iso_datetime(value)


def coerce_range(start, end) -> tuple[datetime | None, datetime | None]:
    """Inclusive [start, end] bounds; ValueError when start is after end."""
    start_dt = coerce_bound(start)
    end_dt = coerce_bound(end)
    if start_dt is not None and end_dt is not None and start_dt > end_dt:
        raise ValueError("start must not be after end")
    return start_dt, end_dt


def within(moment: datetime, start: datetime | None, end: datetime | None) -> bool:
    if start is not None and moment < start:
        return False
    return end is None or moment <= end


def to_utc_z(dt: datetime | None) -> str | None:
    """Second-precision ISO-8601 with a trailing 'Z'; naive input is UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"
