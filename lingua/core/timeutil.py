"""Timestamp helpers: everything is stored and compared as aware UTC."""

from __future__ import annotations

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def resolve_now(now: datetime | None) -> datetime:
    """Use the given time (made aware) or the current UTC time."""
    if now is None:
        return utc_now()
    return ensure_aware(now)


def to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return ensure_aware(value).isoformat()


def from_iso(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (a trailing 'Z' is accepted)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(value))


def date_key(day: date) -> str:
    """Format a day as the YYYY-MM-DD key used for daily counters."""
    return day.strftime("%Y-%m-%d")
