"""Configuration parsing and validation for the squad analytics CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .dates import parse_local_date
from .errors import ConfigurationError
from .models import STANDUP_DAY, STANDUP_WEEK

AS_OF_ENV_VAR = "SQUAD_ANALYTICS_AS_OF"
OUTPUT_FORMATS = ("text", "json")
STANDUP_PERIODS = (STANDUP_DAY, STANDUP_WEEK)


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the dashboard build."""

    snapshot_path: Path
    output_format: str
    as_of: Optional[datetime]
    verbose: bool = False
    standup_period: Optional[str] = None


def load_config(
    snapshot_path: str,
    output_format: str = "text",
    as_of: Optional[str] = None,
    verbose: bool = False,
    standup_period: Optional[str] = None,
) -> Config:
    """Build and validate application configuration.

    Args:
        snapshot_path: Path to the JSON snapshot of squad records.
        output_format: ``"text"`` for the report, ``"json"`` for the payload.
        as_of: Optional date or timestamp pinning "now". Falls back to the
            ``SQUAD_ANALYTICS_AS_OF`` environment variable when omitted.
        verbose: Enable debug logging.
        standup_period: ``"day"`` or ``"week"`` to print a standup summary
            instead of the dashboard; ``None`` builds the dashboard.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If the format or standup period is unknown, the
            snapshot path does not point to a file, or the as-of value cannot
            be parsed.
    """
    if output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Invalid value for 'format': expected one of {', '.join(OUTPUT_FORMATS)}."
        )
    if standup_period is not None and standup_period not in STANDUP_PERIODS:
        raise ConfigurationError(
            f"Invalid value for 'standup': expected one of {', '.join(STANDUP_PERIODS)}."
        )

    path = Path(snapshot_path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Snapshot file not found: {path}")

    raw_as_of = as_of if as_of is not None else os.getenv(AS_OF_ENV_VAR, "").strip()
    parsed_as_of: Optional[datetime] = None
    if raw_as_of:
        try:
            parsed_as_of = parse_local_date(raw_as_of)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value for 'as-of': {raw_as_of!r} is not a date or ISO-8601 timestamp."
            ) from exc

    return Config(
        snapshot_path=path,
        output_format=output_format,
        as_of=parsed_as_of,
        verbose=verbose,
        standup_period=standup_period,
    )
