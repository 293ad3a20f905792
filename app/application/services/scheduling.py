"""Normalization of doctor-supplied appointment times.

Doctors type times either as ``YYYY-MM-DD HH:MM`` or send a machine
timestamp such as ``2024-12-25T14:30:00.000Z``. Both end up as one
canonical value: a timezone-aware ``datetime`` in UTC, rendered as an ISO string
with millisecond precision and a ``Z`` suffix.
"""
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...exceptions import ValidationError

INVALID_TIME_MESSAGE = "Invalid scheduledTime format. Use YYYY-MM-DD HH:MM or ISO format."

_HUMAN_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
)


def _zone(tz_name: str):
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as aware UTC; naive values read back from storage are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_scheduled_time(value: Optional[str], tz_name: str = "UTC") -> datetime:
    """Parse ``value`` into an aware UTC datetime.

    Inputs without an offset are read as wall-clock time in ``tz_name``.
    Raises ``ValidationError`` when the value is missing or unparseable.
    """
    if value is None or not str(value).strip():
        raise ValidationError("scheduledTime is required")
    raw = str(value).strip()

    parsed = None
    for fmt in _HUMAN_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
            break
        except ValueError:
            continue

    if parsed is None:
        iso = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
        try:
            parsed = datetime.fromisoformat(iso)
        except ValueError:
            raise ValidationError(INVALID_TIME_MESSAGE)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_zone(tz_name))
    return parsed.astimezone(timezone.utc)


def canonical_time(value: Optional[datetime]) -> Optional[str]:
    """Render a stored UTC datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value is None:
        return None
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def display_time(value: datetime, tz_name: str = "UTC") -> str:
    local = as_utc(value).astimezone(_zone(tz_name))
    return local.strftime("%A, %B %d, %Y at %I:%M %p") + f" ({tz_name})"
