"""Milestone burndown: remaining open issues per day, stacked by member.

Date range rules:
- The chart starts on the local calendar day of the earliest ``created_at``.
- A fully closed milestone (every issue has ``closed_at``) ends on the day of
  the last close, stretched to the due date when that is later. It is never
  extended to today.
- A milestone with open issues ends today, stretched to a later due date.

The daily walk keeps a monotonic set of closed issues, and an issue only
counts toward ``remaining`` from its creation day onwards.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .dates import local_date, local_today, parse_local_date, resolve_now
from .models import BurndownPoint, Issue, MemberColor, Milestone, MilestoneBurndown

logger = logging.getLogger(__name__)

SQUAD_LABEL_PREFIX = "squad:"
UNASSIGNED = "unassigned"

MEMBER_PALETTE = (
    "#4e79a7",
    "#f28e2b",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc948",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ac",
)


def attribute_member(issue: Issue) -> str:
    """Return the member an issue is stacked under.

    A ``squad:<name>`` label (prefix matched case-insensitively) wins over the
    assignee. Names are lowercased; issues with neither are ``"unassigned"``.
    """
    for label in issue.labels:
        if label.name.lower().startswith(SQUAD_LABEL_PREFIX):
            return label.name[len(SQUAD_LABEL_PREFIX):].lower()
    if issue.assignee:
        return issue.assignee.lower()
    return UNASSIGNED


def order_members(names: Iterable[str]) -> List[MemberColor]:
    """Sort member names alphabetically with ``"unassigned"`` last and pair colors."""
    ordered = sorted(set(names), key=lambda name: (name == UNASSIGNED, name))
    return [
        MemberColor(name=name, color=MEMBER_PALETTE[index % len(MEMBER_PALETTE)])
        for index, name in enumerate(ordered)
    ]


def _parse_due_date(due_date: Optional[str], milestone_number: int) -> Optional[date]:
    if not due_date:
        return None
    try:
        return local_date(parse_local_date(due_date))
    except ValueError:
        logger.debug(
            "Ignoring unparseable milestone due date",
            extra={"milestone": milestone_number, "due_date": due_date},
        )
        return None


def _range_end(
    closed_dates: Sequence[Optional[date]],
    due: Optional[date],
    today: date,
) -> date:
    if all(closed is not None for closed in closed_dates):
        end = max(closed for closed in closed_dates if closed is not None)
    else:
        end = today

    if due is not None and due > end:
        return due
    return end


def build_milestone_burndown(
    title: str,
    number: int,
    issues: Sequence[Issue],
    due_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> MilestoneBurndown:
    """Build the daily burndown series for one milestone's issues.

    Args:
        title: Milestone title, copied to the result.
        number: Milestone number, copied to the result.
        issues: Every issue in the milestone, open and closed.
        due_date: Optional due date (calendar date or timestamp).
        now: Reference instant used for open milestones.

    Returns:
        A ``MilestoneBurndown`` whose points cover the whole date range, and
        always at least the earliest creation day. An empty ``issues``
        sequence yields no members and no points.
    """
    if not issues:
        return MilestoneBurndown(
            title=title,
            number=number,
            total_issues=0,
            members=[],
            data_points=[],
        )

    due = _parse_due_date(due_date, number)
    owners = [attribute_member(issue) for issue in issues]
    members = order_members(owners)
    created_dates = [local_date(issue.created_at) for issue in issues]
    closed_dates = [
        local_date(issue.closed_at) if issue.closed_at is not None else None
        for issue in issues
    ]

    start = min(created_dates)
    # Issues created after today still get their first day plotted.
    end = max(start, _range_end(closed_dates, due, local_today(resolve_now(now))))

    closed_so_far: Set[int] = set()
    data_points: List[BurndownPoint] = []
    day = start
    while day <= end:
        for index, closed in enumerate(closed_dates):
            if closed is not None and closed <= day:
                closed_so_far.add(index)

        by_member: Dict[str, int] = {member.name: 0 for member in members}
        remaining = 0
        for index, created in enumerate(created_dates):
            if created > day or index in closed_so_far:
                continue
            remaining += 1
            if owners[index] in by_member:
                by_member[owners[index]] += 1

        data_points.append(BurndownPoint(date=day.isoformat(), remaining=remaining, by_member=by_member))
        day += timedelta(days=1)

    logger.debug(
        "Built milestone burndown",
        extra={
            "milestone": number,
            "issues": len(issues),
            "members": len(members),
            "start": start.isoformat(),
            "end": end.isoformat(),
        },
    )

    return MilestoneBurndown(
        title=title,
        number=number,
        total_issues=len(issues),
        members=members,
        data_points=data_points,
        due_date=due.isoformat() if due is not None else None,
    )


def build_milestone_burndowns(
    milestones: Sequence[Milestone],
    issues_by_milestone: Mapping[int, Sequence[Issue]],
    now: Optional[datetime] = None,
) -> List[MilestoneBurndown]:
    """Build burndowns for every milestone that has at least one issue."""
    burndowns: List[MilestoneBurndown] = []

    for milestone in milestones:
        issues = issues_by_milestone.get(milestone.number, [])
        if not issues:
            logger.debug("Skipping milestone without issues", extra={"milestone": milestone.number})
            continue
        burndowns.append(
            build_milestone_burndown(
                title=milestone.title,
                number=milestone.number,
                issues=issues,
                due_date=milestone.due_on,
                now=now,
            )
        )

    return burndowns
