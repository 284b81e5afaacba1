"""Member activity views: participation heatmap, task swimlanes, recent logs.

Member joins in this module are exact and case-sensitive. Log participants or
task assignees that match no roster member are left out of the output.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from .dates import format_local_date_key, parse_local_date, resolve_now
from .models import HeatmapPoint, LogEntry, Member, Swimlane, SwimlaneTask, Task

logger = logging.getLogger(__name__)

ACTIVITY_WINDOW_DAYS = 7
RECENT_LOG_LIMIT = 10


def _entry_instant(entry: LogEntry) -> Optional[datetime]:
    try:
        return parse_local_date(entry.date)
    except ValueError:
        logger.debug("Skipping log entry with unparseable date", extra={"date": entry.date})
        return None


def count_recent_participation(
    log_entries: Iterable[LogEntry],
    now: Optional[datetime] = None,
) -> Counter[str]:
    """Count log-entry participation per participant over the trailing 7 days.

    An entry counts when its date, read as local midnight, is at or after the
    instant ``now - 7 days``.
    """
    now = resolve_now(now)
    window_start = now - timedelta(days=ACTIVITY_WINDOW_DAYS)
    participation: Counter[str] = Counter()

    for entry in log_entries:
        entry_instant = _entry_instant(entry)
        if entry_instant is None or entry_instant < window_start:
            continue
        for participant in entry.participants:
            participation[participant] += 1

    return participation


def build_activity_heatmap(
    members: Sequence[Member],
    log_entries: Iterable[LogEntry],
    now: Optional[datetime] = None,
) -> List[HeatmapPoint]:
    """Build a normalized 0.0-1.0 activity level for each member.

    The divisor is the highest count among all participants, including names
    that are not on the roster, so the busiest roster member only reaches 1.0
    when nobody outside the roster was busier.
    """
    participation = count_recent_participation(log_entries, now=now)
    max_participation = max(participation.values(), default=0)

    heatmap: List[HeatmapPoint] = []
    for member in members:
        count = participation.get(member.name, 0)
        level = count / max_participation if max_participation > 0 else 0.0
        heatmap.append(HeatmapPoint(member=member.name, activity_level=level))

    logger.debug(
        "Built activity heatmap",
        extra={"members": len(heatmap), "max_participation": max_participation},
    )

    return heatmap


def task_to_swimlane_task(task: Task, now: Optional[datetime] = None) -> SwimlaneTask:
    """Convert a task to its swimlane span; unstarted tasks start today."""
    start = task.started_at if task.started_at is not None else resolve_now(now)
    end_date = format_local_date_key(task.completed_at) if task.completed_at is not None else None

    return SwimlaneTask(
        id=task.id,
        title=task.title,
        start_date=format_local_date_key(start),
        end_date=end_date,
        status=task.status,
    )


def build_activity_swimlanes(
    members: Sequence[Member],
    tasks: Sequence[Task],
    now: Optional[datetime] = None,
) -> List[Swimlane]:
    """Build one swimlane per member with tasks ordered by start date."""
    now = resolve_now(now)
    swimlanes: List[Swimlane] = []

    for member in members:
        lane_tasks = sorted(
            (task_to_swimlane_task(task, now=now) for task in tasks if task.assignee == member.name),
            key=lambda lane_task: lane_task.start_date,
        )
        swimlanes.append(Swimlane(member=member.name, role=member.role, tasks=lane_tasks))

    return swimlanes


def select_recent_logs(
    log_entries: Iterable[LogEntry],
    limit: int = RECENT_LOG_LIMIT,
) -> List[LogEntry]:
    """Return up to ``limit`` log entries, newest first.

    Entries with unparseable dates sort after every dated entry; ties keep
    their input order.
    """
    dated = []
    undated = []
    for entry in log_entries:
        entry_instant = _entry_instant(entry)
        if entry_instant is None:
            undated.append(entry)
        else:
            dated.append((entry_instant, entry))

    dated.sort(key=lambda pair: pair[0], reverse=True)
    return ([entry for _, entry in dated] + undated)[:limit]
