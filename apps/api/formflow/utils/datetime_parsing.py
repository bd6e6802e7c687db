"""Datetime parsing helpers for stencil and form settings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "UTC"

DATETIME_FORMATS: list[str] = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
]


@dataclass
class ParsedDatetime:
    value: datetime | None
    warnings: list[str]


def parse_datetime(raw_value: object, tz_name: str | None = None) -> ParsedDatetime:
    """Parse a settings datetime; naive values are read in ``tz_name`` (UTC by default)."""
    if isinstance(raw_value, datetime):
        value_dt = raw_value if raw_value.tzinfo else raw_value.replace(tzinfo=timezone.utc)
        return ParsedDatetime(value=value_dt.astimezone(timezone.utc), warnings=[])
    if not isinstance(raw_value, str):
        return ParsedDatetime(value=None, warnings=[f"Unsupported datetime value: {raw_value!r}"])

    value = raw_value.strip()
    if not value:
        return ParsedDatetime(value=None, warnings=[])

    warnings: list[str] = []
    tz = _resolve_timezone(tz_name, warnings)

    # Epoch timestamps (seconds or milliseconds)
    if re.fullmatch(r"\d{10,13}", value):
        ts = int(value)
        if len(value) == 13:
            ts = ts / 1000
        return ParsedDatetime(value=datetime.fromtimestamp(ts, tz=timezone.utc), warnings=warnings)

    # ISO 8601 timestamps
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=tz)
        return ParsedDatetime(value=dt.astimezone(timezone.utc), warnings=warnings)
    except ValueError:
        pass

    for fmt in DATETIME_FORMATS:
        try:
            dt = datetime.strptime(value, fmt).replace(tzinfo=tz)
            return ParsedDatetime(value=dt.astimezone(timezone.utc), warnings=warnings)
        except ValueError:
            continue

    warnings.append(f"Unrecognized datetime format: {value}")
    return ParsedDatetime(value=None, warnings=warnings)


def _resolve_timezone(tz_name: str | None, warnings: list[str]) -> ZoneInfo:
    name = tz_name or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        warnings.append(f"Unknown timezone '{name}', defaulting to {DEFAULT_TIMEZONE}.")
        return ZoneInfo(DEFAULT_TIMEZONE)
