"""Formatting helpers for dashboard output.

This module provides utilities for:
- Formatting activity levels as percentages and bars.
- Building a human-readable text report of every dashboard view.
- Converting ``DashboardData`` into the JSON payload the chart layer reads.
- Rendering and serializing standup summaries.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Optional

from .models import (
    DashboardData,
    Issue,
    MilestoneBurndown,
    STANDUP_DAY,
    StandupReport,
    VelocityPoint,
)

_BAR_WIDTH = 20


def format_activity_level(level: float) -> str:
    """Format a 0.0-1.0 activity level as a fixed-width bar and percentage.

    Args:
        level: Normalized activity level.

    Returns:
        For example ``"##########----------  50%"``.
    """
    clamped = min(1.0, max(0.0, level))
    filled = int(round(clamped * _BAR_WIDTH))
    return f"{'#' * filled}{'-' * (_BAR_WIDTH - filled)} {int(round(clamped * 100)):3d}%"


def _burndown_lines(burndown: MilestoneBurndown) -> List[str]:
    header = f"   {burndown.title} (#{burndown.number}): {burndown.total_issues} issues"
    if burndown.due_date:
        header += f", due {burndown.due_date}"
    lines = [header]

    if not burndown.data_points:
        lines.append("      no data points")
        return lines

    first = burndown.data_points[0]
    last = burndown.data_points[-1]
    lines.append(
        f"      {first.date} -> {last.date}: {first.remaining} -> {last.remaining} remaining"
    )
    for name, color in zip(burndown.member_names, burndown.member_colors):
        lines.append(f"      {name:<16} {color}  {last.by_member.get(name, 0)} open")
    return lines


def generate_report(data: DashboardData) -> str:
    """Generate a human-readable dashboard report.

    The report includes the team summary, the 30-day velocity total and
    busiest day, member activity levels, swimlane task counts and one block
    per milestone burndown.

    Args:
        data: Output of ``build_dashboard_data``.

    Returns:
        Formatted multi-line text report.
    """
    summary = data.team.summary
    timeline = data.velocity.timeline
    total_completed = sum(point.completed_tasks for point in timeline)
    busiest: Optional[VelocityPoint] = max(timeline, key=lambda point: point.completed_tasks, default=None)

    lines = [
        "Squad Dashboard Report",
        "",
        "1) Team",
        f"   Members: {summary.total_members} ({summary.active_members} working)",
        f"   Open issues: {summary.total_open_issues}",
        f"   Closed issues: {summary.total_closed_issues}",
        f"   Active tasks: {summary.total_active_tasks}",
        "",
        "2) Velocity (last 30 days)",
    ]

    if timeline:
        lines.append(f"   Window: {timeline[0].date} -> {timeline[-1].date}")
    lines.append(f"   Completed: {total_completed}")
    if busiest is not None and busiest.completed_tasks > 0:
        lines.append(f"   Busiest day: {busiest.date} ({busiest.completed_tasks})")

    lines.extend(["", "3) Activity (last 7 days)"])
    for point in data.velocity.heatmap:
        lines.append(f"   {point.member:<16} {format_activity_level(point.activity_level)}")

    lines.extend(["", "4) Swimlanes"])
    for lane in data.activity.swimlanes:
        open_tasks = sum(1 for task in lane.tasks if task.end_date is None)
        lines.append(f"   {lane.member:<16} {len(lane.tasks)} tasks ({open_tasks} open)")

    lines.extend(["", "5) Milestone Burndown"])
    if not data.burndown.milestones:
        lines.append("   No milestone data available.")
    for burndown in data.burndown.milestones:
        lines.extend(_burndown_lines(burndown))

    lines.extend(["", f"6) Decisions: {len(data.decisions.entries)}"])

    return "\n".join(lines)


def _record_dict(record: Any) -> Any:
    if is_dataclass(record) and not isinstance(record, type):
        return asdict(record)
    return record


def burndown_to_dict(burndown: MilestoneBurndown) -> Dict[str, Any]:
    """Convert a burndown to the chart payload with parallel name/color lists."""
    payload: Dict[str, Any] = {
        "title": burndown.title,
        "number": burndown.number,
        "totalIssues": burndown.total_issues,
        "memberNames": burndown.member_names,
        "memberColors": burndown.member_colors,
        "dataPoints": [
            {"date": point.date, "remaining": point.remaining, "byMember": dict(point.by_member)}
            for point in burndown.data_points
        ],
    }
    if burndown.due_date:
        payload["dueDate"] = burndown.due_date
    return payload


def dashboard_to_dict(data: DashboardData) -> Dict[str, Any]:
    """Convert ``DashboardData`` to a JSON-serializable dict for the renderer."""
    summary = data.team.summary
    return {
        "team": {
            "members": [
                {
                    "name": member.name,
                    "role": member.role,
                    "status": member.status,
                    "iconType": member.icon_type,
                    "openIssueCount": member.open_issue_count,
                    "closedIssueCount": member.closed_issue_count,
                    "activeTaskCount": member.active_task_count,
                    "recentActivityCount": member.recent_activity_count,
                }
                for member in data.team.members
            ],
            "summary": {
                "totalMembers": summary.total_members,
                "activeMembers": summary.active_members,
                "totalOpenIssues": summary.total_open_issues,
                "totalClosedIssues": summary.total_closed_issues,
                "totalActiveTasks": summary.total_active_tasks,
            },
        },
        "burndown": {
            "milestones": [burndown_to_dict(burndown) for burndown in data.burndown.milestones],
        },
        "velocity": {
            "timeline": [
                {"date": point.date, "completedTasks": point.completed_tasks}
                for point in data.velocity.timeline
            ],
            "heatmap": [
                {"member": point.member, "activityLevel": point.activity_level}
                for point in data.velocity.heatmap
            ],
        },
        "activity": {
            "swimlanes": [
                {
                    "member": lane.member,
                    "role": lane.role,
                    "tasks": [
                        {
                            "id": task.id,
                            "title": task.title,
                            "startDate": task.start_date,
                            "endDate": task.end_date,
                            "status": task.status,
                        }
                        for task in lane.tasks
                    ],
                }
                for lane in data.activity.swimlanes
            ],
            "recentLogs": [
                {
                    "date": entry.date,
                    "topic": entry.topic,
                    "participants": list(entry.participants),
                    "summary": entry.summary,
                }
                for entry in data.activity.recent_logs
            ],
        },
        "decisions": {
            "entries": [_record_dict(entry) for entry in data.decisions.entries],
        },
    }


def _issue_line(issue: Issue, suffix: str = "") -> str:
    return f"   #{issue.number}: {issue.title}{suffix}"


def format_standup_report(report: StandupReport) -> str:
    """Render a standup summary as text; empty sections are omitted."""
    summary = report.summary
    heading = "Daily" if report.period == STANDUP_DAY else "Weekly"
    lines = [
        f"{heading} Standup Report",
        f"Period: {summary.period_start:%a %b %d %Y} -> {summary.period_end:%a %b %d %Y}",
        "",
        f"Issues closed: {summary.closed_count}",
        f"New issues: {summary.new_count}",
        f"Blockers: {summary.blocking_count}",
    ]

    if report.closed_issues:
        lines.extend(["", "Closed issues:"])
        lines.extend(_issue_line(issue) for issue in report.closed_issues)

    if report.new_issues:
        lines.extend(["", "New issues:"])
        lines.extend(_issue_line(issue) for issue in report.new_issues)

    if report.blocking_issues:
        lines.extend(["", "Blockers:"])
        for issue in report.blocking_issues:
            labels = ", ".join(label.name for label in issue.labels)
            lines.append(_issue_line(issue, f" ({labels})"))

    if report.suggested_next_steps:
        lines.extend(["", "Suggested next steps:"])
        for issue in report.suggested_next_steps:
            lines.append(_issue_line(issue, f" @{issue.assignee}" if issue.assignee else ""))

    if report.recent_decisions:
        lines.extend(["", "Recent decisions:"])
        for decision in report.recent_decisions:
            author = f" ({decision.author})" if decision.author else ""
            lines.append(f"   {decision.title}{author}")

    return "\n".join(lines)


def _issue_dict(issue: Issue) -> Dict[str, Any]:
    return {
        "number": issue.number,
        "title": issue.title,
        "assignee": issue.assignee,
        "labels": [label.name for label in issue.labels],
        "htmlUrl": issue.html_url,
    }


def standup_to_dict(report: StandupReport) -> Dict[str, Any]:
    """Convert a ``StandupReport`` to a JSON-serializable dict."""
    summary = report.summary
    return {
        "period": report.period,
        "summary": {
            "closedCount": summary.closed_count,
            "newCount": summary.new_count,
            "blockingCount": summary.blocking_count,
            "periodStart": summary.period_start.isoformat(),
            "periodEnd": summary.period_end.isoformat(),
        },
        "closedIssues": [_issue_dict(issue) for issue in report.closed_issues],
        "newIssues": [_issue_dict(issue) for issue in report.new_issues],
        "blockingIssues": [_issue_dict(issue) for issue in report.blocking_issues],
        "suggestedNextSteps": [_issue_dict(issue) for issue in report.suggested_next_steps],
        "recentDecisions": [_record_dict(decision) for decision in report.recent_decisions],
        "recentLogs": [
            {
                "date": entry.date,
                "topic": entry.topic,
                "participants": list(entry.participants),
                "summary": entry.summary,
            }
            for entry in report.recent_logs
        ],
    }
