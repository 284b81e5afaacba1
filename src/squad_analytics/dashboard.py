"""Assemble every dashboard view from already-parsed squad records."""

from __future__ import annotations

import logging
from datetime import datetime
from itertools import chain
from typing import Any, List, Mapping, Optional, Sequence

from .activity import build_activity_heatmap, build_activity_swimlanes, select_recent_logs
from .dates import resolve_now
from .models import (
    ActivitySection,
    BurndownSection,
    DashboardData,
    DecisionsSection,
    Issue,
    LogEntry,
    Member,
    MilestoneBurndown,
    Task,
    VelocitySection,
)
from .team import build_team_overview
from .velocity import build_velocity_timeline

logger = logging.getLogger(__name__)


def build_dashboard_data(
    log_entries: Sequence[LogEntry],
    members: Sequence[Member],
    tasks: Sequence[Task],
    decisions: List[Any],
    open_issues_by_member: Optional[Mapping[str, Sequence[Issue]]] = None,
    closed_issues_by_member: Optional[Mapping[str, Sequence[Issue]]] = None,
    milestone_burndowns: Optional[List[MilestoneBurndown]] = None,
    all_closed_issues: Optional[Sequence[Issue]] = None,
    now: Optional[datetime] = None,
) -> DashboardData:
    """Build the complete dashboard payload.

    Closed issues from the per-member map and from ``all_closed_issues`` are
    handed to the velocity builder together; it counts each issue once.
    ``decisions`` is returned as the same list object.
    """
    now = resolve_now(now)
    closed_issues = chain(
        chain.from_iterable((closed_issues_by_member or {}).values()),
        all_closed_issues or (),
    )

    data = DashboardData(
        team=build_team_overview(
            members,
            tasks,
            log_entries,
            open_issues_by_member=open_issues_by_member,
            closed_issues_by_member=closed_issues_by_member,
            now=now,
        ),
        burndown=BurndownSection(milestones=milestone_burndowns if milestone_burndowns is not None else []),
        velocity=VelocitySection(
            timeline=build_velocity_timeline(tasks, closed_issues, now=now),
            heatmap=build_activity_heatmap(members, log_entries, now=now),
        ),
        activity=ActivitySection(
            swimlanes=build_activity_swimlanes(members, tasks, now=now),
            recent_logs=select_recent_logs(log_entries),
        ),
        decisions=DecisionsSection(entries=decisions),
    )

    logger.info(
        "Built dashboard data",
        extra={
            "members": len(members),
            "tasks": len(tasks),
            "log_entries": len(log_entries),
            "milestones": len(data.burndown.milestones),
        },
    )

    return data
