"""Local-timezone date helpers shared by every analytics builder.

``datetime.fromisoformat("2026-02-18")`` yields a naive midnight that callers
routinely pin to UTC, which moves the calendar day backwards for anyone west of
Greenwich once it is converted to local time. These helpers treat bare calendar
dates as local midnight and always bucket instants by their local calendar day.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def local_now() -> datetime:
    """Return the current instant as an aware datetime in the local time zone."""
    return datetime.now().astimezone()


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return ``now`` as an aware local datetime, defaulting to the current instant.

    Naive values are read as local wall-clock time.
    """
    if now is None:
        return local_now()
    return now.astimezone()


def local_today(now: Optional[datetime] = None) -> date:
    """Return the local calendar date of ``now`` (default: the current instant)."""
    return resolve_now(now).date()


def parse_local_date(value: str) -> datetime:
    """Parse a calendar date or ISO-8601 timestamp into an aware datetime.

    - Bare ``YYYY-MM-DD`` strings resolve to local midnight of that day, or
      to the first existing wall time when midnight is skipped by DST.
    - Timestamps with an offset (or a trailing ``Z``) keep that offset.
    - Timestamps without an offset are read as local wall-clock time.

    Raises:
        ValueError: If ``value`` is neither a calendar date nor a timestamp.
    """
    if _DATE_ONLY.match(value):
        year, month, day = (int(part) for part in value.split("-"))
        midnight = datetime(year, month, day).astimezone()
        if midnight.date() != date(year, month, day):
            # Midnight falls in a DST gap; take the first wall time after it.
            midnight = datetime(year, month, day, fold=1).astimezone()
        return midnight

    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        return parsed.astimezone()
    return parsed


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an optional timestamp field; empty values map to ``None``."""
    if not value:
        return None
    return parse_local_date(value)


def format_local_date_key(instant: datetime) -> str:
    """Render ``instant`` as ``YYYY-MM-DD`` using its local calendar fields."""
    local = instant.astimezone()
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def local_date(instant: datetime) -> date:
    """Return the local calendar date an instant falls on."""
    return instant.astimezone().date()
