"""Velocity timeline: completed work per calendar day over the trailing window.

Two sources feed the timeline:
- Squad tasks with ``status == "completed"`` and a completion instant.
- Closed tracker issues with a close instant. Callers often hand over the same
  issue through several collections (per-member maps plus a flat closed list),
  so issues are counted once per issue number within a single call.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Set

from .dates import format_local_date_key, resolve_now
from .models import CompletableWorkItem, Issue, VelocityPoint

logger = logging.getLogger(__name__)

VELOCITY_WINDOW_DAYS = 30


def _completion_in_window(item: CompletableWorkItem, window_start: datetime) -> Optional[datetime]:
    """Return the completion instant of a completed item inside the window, else None."""
    if not item.is_completed or item.completed_at is None:
        return None
    completed_at = item.completed_at.astimezone()
    return completed_at if completed_at >= window_start else None


def build_velocity_timeline(
    tasks: Iterable[CompletableWorkItem],
    closed_issues: Optional[Iterable[Issue]] = None,
    now: Optional[datetime] = None,
) -> List[VelocityPoint]:
    """Build one ``VelocityPoint`` per day from ``today - 30`` to ``today``.

    The window's lower bound is the instant ``now - 30 days``, so a completion
    on the first calendar day of the timeline only counts when it happened at
    or after ``now``'s time of day.

    Args:
        tasks: Work items to count; the builder does not care which source
            produced them.
        closed_issues: Optional tracker issues, possibly with duplicates.
        now: Reference instant; defaults to the current local time.

    Returns:
        Exactly 31 points in chronological order, missing days filled with 0.
    """
    now = resolve_now(now)
    window_start = now - timedelta(days=VELOCITY_WINDOW_DAYS)
    completed_by_date: Counter[str] = Counter()

    task_count = 0
    for item in tasks:
        completed_at = _completion_in_window(item, window_start)
        if completed_at is None:
            continue
        completed_by_date[format_local_date_key(completed_at)] += 1
        task_count += 1

    issue_count = 0
    seen_issue_numbers: Set[int] = set()
    for issue in closed_issues or ():
        if issue.number in seen_issue_numbers:
            continue
        closed_at = _completion_in_window(issue, window_start)
        if closed_at is None:
            continue
        seen_issue_numbers.add(issue.number)
        completed_by_date[format_local_date_key(closed_at)] += 1
        issue_count += 1

    today = now.date()
    timeline = []
    for offset in range(VELOCITY_WINDOW_DAYS, -1, -1):
        key = (today - timedelta(days=offset)).isoformat()
        timeline.append(VelocityPoint(date=key, completed_tasks=completed_by_date.get(key, 0)))

    logger.debug(
        "Built velocity timeline",
        extra={
            "window_start": window_start.isoformat(),
            "completed_tasks": task_count,
            "closed_issues": issue_count,
        },
    )

    return timeline
