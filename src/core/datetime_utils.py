"""Datetime helpers for publication timestamps."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def to_utc_iso(dt: datetime | None) -> str | None:
    """Return an ISO8601 UTC timestamp with trailing Z."""
    if dt is None:
        return None
    return _coerce_utc(dt).isoformat().replace("+00:00", "Z")


def resolve_timezone(timezone_name: str | None) -> tzinfo:
    """Resolve an IANA timezone name, falling back to UTC."""
    if timezone_name:
        try:
            return ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return timezone.utc


def format_published_at(published_at: datetime, timezone_name: str | None = None) -> str:
    """Render a timestamp with the locale's date and time representation."""
    local = _coerce_utc(published_at).astimezone(resolve_timezone(timezone_name))
    return local.strftime("%c")


def _coerce_utc(dt: datetime) -> datetime:
    # Naive values are treated as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
