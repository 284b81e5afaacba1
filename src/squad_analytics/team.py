"""Team overview cards and team-wide summary counts."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Sequence

from .activity import count_recent_participation
from .models import (
    MEMBER_WORKING,
    TASK_IN_PROGRESS,
    Issue,
    LogEntry,
    Member,
    Task,
    TeamMemberOverview,
    TeamSection,
    TeamSummary,
)

logger = logging.getLogger(__name__)

_SPECIAL_ICONS = {
    "scribe": "scribe",
    "ralph": "ralph",
    "copilot": "copilot",
    "@copilot": "copilot",
}


def icon_type_for(member_name: str) -> Optional[str]:
    """Return the special icon for built-in squad roles, if any."""
    return _SPECIAL_ICONS.get(member_name.strip().lower())


def _issue_count(issues_by_member: Optional[Mapping[str, Sequence[Issue]]], member_name: str) -> int:
    if not issues_by_member:
        return 0
    return len(issues_by_member.get(member_name.lower(), ()))


def build_team_overview(
    members: Sequence[Member],
    tasks: Sequence[Task],
    log_entries: Iterable[LogEntry],
    open_issues_by_member: Optional[Mapping[str, Sequence[Issue]]] = None,
    closed_issues_by_member: Optional[Mapping[str, Sequence[Issue]]] = None,
    now: Optional[datetime] = None,
) -> TeamSection:
    """Build per-member overview cards plus the aggregate team summary.

    Issue maps are keyed by lowercased member name (the ``squad:`` label
    convention), so roster names are looked up case-insensitively there.
    Task and log joins stay exact.
    """
    participation = count_recent_participation(log_entries, now=now)

    overviews: List[TeamMemberOverview] = []
    for member in members:
        active_tasks = sum(
            1 for task in tasks if task.assignee == member.name and task.status == TASK_IN_PROGRESS
        )
        overviews.append(
            TeamMemberOverview(
                name=member.name,
                role=member.role,
                status=member.status,
                icon_type=icon_type_for(member.name),
                open_issue_count=_issue_count(open_issues_by_member, member.name),
                closed_issue_count=_issue_count(closed_issues_by_member, member.name),
                active_task_count=active_tasks,
                recent_activity_count=participation.get(member.name, 0),
            )
        )

    summary = TeamSummary(
        total_members=len(overviews),
        active_members=sum(1 for overview in overviews if overview.status == MEMBER_WORKING),
        total_open_issues=sum(overview.open_issue_count for overview in overviews),
        total_closed_issues=sum(overview.closed_issue_count for overview in overviews),
        total_active_tasks=sum(overview.active_task_count for overview in overviews),
    )

    logger.debug(
        "Built team overview",
        extra={"members": summary.total_members, "active_members": summary.active_members},
    )

    return TeamSection(members=overviews, summary=summary)
