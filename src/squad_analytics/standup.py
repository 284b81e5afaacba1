"""Standup summary: what closed, what opened, what is blocked, what is next.

The report covers either the trailing day or the trailing week, measured from
``now``. Only the supplied records are consulted; the caller decides which
open and closed issues are in scope.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional, Sequence

from .dates import parse_local_date, resolve_now
from .models import (
    DecisionEntry,
    Issue,
    LogEntry,
    STANDUP_DAY,
    STANDUP_WEEK,
    StandupReport,
    StandupSummary,
)

logger = logging.getLogger(__name__)

PERIOD_LENGTHS: Dict[str, timedelta] = {
    STANDUP_DAY: timedelta(days=1),
    STANDUP_WEEK: timedelta(days=7),
}

BLOCKING_LABELS = frozenset({"blocked", "blocker", "blocking", "impediment"})

PRIORITY_ORDER: Dict[str, int] = {
    "p0": 0,
    "priority:critical": 0,
    "urgent": 0,
    "p1": 1,
    "priority:high": 1,
    "high": 1,
    "p2": 2,
    "priority:medium": 2,
    "medium": 2,
    "p3": 3,
    "priority:low": 3,
    "low": 3,
}
DEFAULT_PRIORITY = 99
NEXT_STEP_LIMIT = 5

_DATE_FRAGMENT = re.compile(r"\d{4}-\d{2}-\d{2}")


def is_blocking(issue: Issue) -> bool:
    return any(label.name.lower() in BLOCKING_LABELS for label in issue.labels)


def issue_priority(issue: Issue) -> int:
    """Return the rank of the first priority label on ``issue`` (0 is most urgent)."""
    for label in issue.labels:
        priority = PRIORITY_ORDER.get(label.name.lower())
        if priority is not None:
            return priority
    return DEFAULT_PRIORITY


def _record_instant(value: Optional[str]) -> Optional[datetime]:
    # Decision headings and log file names embed the day, e.g. "2026-03-14: Adopt pytest".
    if not value:
        return None
    fragment = _DATE_FRAGMENT.search(value)
    try:
        return parse_local_date(fragment.group(0) if fragment else value)
    except ValueError:
        logger.debug("Ignoring record with unparseable date", extra={"date": value})
        return None


def _within(instant: Optional[datetime], start: datetime, end: datetime) -> bool:
    return instant is not None and start <= instant <= end


def build_standup_report(
    open_issues: Sequence[Issue],
    closed_issues: Iterable[Issue],
    decisions: Iterable[DecisionEntry],
    log_entries: Iterable[LogEntry],
    period: str = STANDUP_DAY,
    now: Optional[datetime] = None,
) -> StandupReport:
    """Summarize squad activity over the trailing ``period``.

    Args:
        open_issues: Currently open issues. New issues, blockers and next
            steps are all drawn from this list.
        closed_issues: Closed issues; only those closed inside the period count.
        decisions: Team decisions; kept when dated on or after the period start.
        log_entries: Session log entries; kept when dated on or after the
            period start.
        period: ``"day"`` or ``"week"``.
        now: End of the period; defaults to the current local time.

    Returns:
        A ``StandupReport`` whose next steps are the five most urgent
        non-blocking open issues, ordered by priority label with ties kept in
        input order.

    Raises:
        ValueError: If ``period`` is not ``"day"`` or ``"week"``.
    """
    if period not in PERIOD_LENGTHS:
        raise ValueError(f"Unsupported standup period: {period!r}")

    now = resolve_now(now)
    period_start = now - PERIOD_LENGTHS[period]

    closed_in_period = [issue for issue in closed_issues if _within(issue.closed_at, period_start, now)]
    new_in_period = [issue for issue in open_issues if _within(issue.created_at, period_start, now)]
    blocking = [issue for issue in open_issues if is_blocking(issue)]

    recent_decisions = []
    for decision in decisions:
        decided_at = _record_instant(decision.date)
        if decided_at is not None and decided_at >= period_start:
            recent_decisions.append(decision)

    recent_logs = []
    for entry in log_entries:
        logged_at = _record_instant(entry.date)
        if logged_at is not None and logged_at >= period_start:
            recent_logs.append(entry)

    next_steps = sorted((issue for issue in open_issues if not is_blocking(issue)), key=issue_priority)

    logger.debug(
        "Built standup report",
        extra={
            "period": period,
            "closed": len(closed_in_period),
            "new": len(new_in_period),
            "blocking": len(blocking),
        },
    )

    return StandupReport(
        period=period,
        summary=StandupSummary(
            closed_count=len(closed_in_period),
            new_count=len(new_in_period),
            blocking_count=len(blocking),
            period_start=period_start,
            period_end=now,
        ),
        closed_issues=closed_in_period,
        new_issues=new_in_period,
        blocking_issues=blocking,
        recent_decisions=recent_decisions,
        suggested_next_steps=next_steps[:NEXT_STEP_LIMIT],
        recent_logs=recent_logs,
    )
