"""Tests for the team overview builder."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from squad_analytics.models import Issue, LogEntry, Member, Task
from squad_analytics.team import build_team_overview, icon_type_for

NOW = datetime(2026, 3, 15, 12, 0).astimezone()


def _day(days_ago: int) -> str:
    return (NOW.date() - timedelta(days=days_ago)).isoformat()


def _issue(number: int, state: str = "open") -> Issue:
    return Issue(number=number, title=f"Issue #{number}", state=state, created_at=NOW - timedelta(days=5))


def test_icon_type_for_special_members():
    """Verify built-in squad roles get their special icons case-insensitively."""
    assert icon_type_for("Scribe") == "scribe"
    assert icon_type_for("ralph") == "ralph"
    assert icon_type_for("@copilot") == "copilot"
    assert icon_type_for("Copilot") == "copilot"
    assert icon_type_for("Danny") is None


def test_overview_counts_issues_tasks_and_recent_sessions():
    """Verify each card aggregates issues, in-progress tasks and recent log participation."""
    members = [Member("Danny", "Lead", status="working"), Member("Rusty", "Dev"), Member("Scribe", "Scribe")]
    tasks = [
        Task(id="t1", title="A", status="in_progress", assignee="Danny"),
        Task(id="t2", title="B", status="in_progress", assignee="Danny"),
        Task(id="t3", title="C", status="completed", assignee="Danny"),
        Task(id="t4", title="D", status="in_progress", assignee="rusty"),
    ]
    log_entries = [
        LogEntry(date=_day(1), participants=["Danny", "Scribe"]),
        LogEntry(date=_day(2), participants=["Danny"]),
        LogEntry(date=_day(30), participants=["Rusty"]),
    ]
    open_by_member = {"danny": [_issue(1), _issue(2)], "rusty": [_issue(3)]}
    closed_by_member = {"rusty": [_issue(4, "closed")]}

    section = build_team_overview(
        members,
        tasks,
        log_entries,
        open_issues_by_member=open_by_member,
        closed_issues_by_member=closed_by_member,
        now=NOW,
    )
    cards = {card.name: card for card in section.members}

    assert [card.name for card in section.members] == ["Danny", "Rusty", "Scribe"]
    assert cards["Danny"].open_issue_count == 2
    assert cards["Danny"].active_task_count == 2
    assert cards["Danny"].recent_activity_count == 2
    assert cards["Danny"].icon_type is None
    assert cards["Rusty"].open_issue_count == 1
    assert cards["Rusty"].closed_issue_count == 1
    assert cards["Rusty"].active_task_count == 0
    assert cards["Rusty"].recent_activity_count == 0
    assert cards["Scribe"].icon_type == "scribe"
    assert cards["Scribe"].recent_activity_count == 1


def test_summary_totals_match_member_cards():
    """Verify the team summary is the sum of the member cards."""
    members = [Member("Danny", "Lead", status="working"), Member("Rusty", "Dev", status="working"), Member("Linus", "Dev")]
    tasks = [Task(id="t1", title="A", status="in_progress", assignee="Linus")]
    open_by_member = {"danny": [_issue(1)], "linus": [_issue(2), _issue(3)]}
    closed_by_member = {"danny": [_issue(4, "closed")]}

    section = build_team_overview(members, tasks, [], open_by_member, closed_by_member, now=NOW)
    summary = section.summary

    assert summary.total_members == 3
    assert summary.active_members == 2
    assert summary.total_open_issues == 3
    assert summary.total_closed_issues == 1
    assert summary.total_active_tasks == 1


def test_missing_issue_maps_give_zero_counts():
    """Verify the overview works without any issue-tracker data."""
    section = build_team_overview([Member("Danny", "Lead")], [], [], now=NOW)

    assert section.members[0].open_issue_count == 0
    assert section.members[0].closed_issue_count == 0
    assert section.summary.total_open_issues == 0
