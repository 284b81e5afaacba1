"""Tests for loading JSON snapshots into model records."""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from squad_analytics.errors import DataValidationError, SnapshotError
from squad_analytics.models import Issue, Label
from squad_analytics.snapshot import (
    group_issues_by_member,
    load_snapshot,
    parse_issue,
    parse_log_entry,
    parse_snapshot,
)


def _issue_item(number: int, **overrides) -> dict:
    item = {
        "number": number,
        "title": f"Issue #{number}",
        "state": "open",
        "labels": [{"name": "squad:Danny", "color": "ededed"}],
        "assignee": None,
        "createdAt": "2026-03-01T09:00:00Z",
        "closedAt": None,
        "htmlUrl": f"https://github.com/org/repo/issues/{number}",
    }
    item.update(overrides)
    return item


def _snapshot_payload() -> dict:
    return {
        "members": [{"name": "Danny", "role": "Lead", "status": "working"}, {"name": "Rusty", "role": "Dev"}],
        "tasks": [
            {
                "id": "2026-03-10-danny",
                "title": "Wire up charts",
                "status": "completed",
                "assignee": "Danny",
                "startedAt": "2026-03-08",
                "completedAt": "2026-03-10T16:00:00Z",
            }
        ],
        "logEntries": [{"date": "2026-03-12", "participants": ["Danny", "Rusty"], "topic": "planning"}],
        "decisions": [{"title": "Use Python", "date": "2026-02-01", "filePath": "decisions.md"}],
        "issues": [_issue_item(1)],
        "closedIssues": [_issue_item(2, state="closed", closedAt="2026-03-05T10:00:00Z")],
        "milestones": [
            {
                "number": 3,
                "title": "Sprint 3",
                "dueOn": "2026-03-20T07:00:00Z",
                "issues": [_issue_item(1), _issue_item(2, state="closed", closedAt="2026-03-05T10:00:00Z")],
            }
        ],
    }


def test_parse_snapshot_builds_every_record_type():
    """Verify each snapshot section is converted into its model records."""
    snapshot = parse_snapshot(_snapshot_payload())

    assert [member.name for member in snapshot.members] == ["Danny", "Rusty"]
    assert snapshot.members[0].status == "working"
    assert snapshot.members[1].status == "idle"
    assert snapshot.tasks[0].completed_at == datetime(2026, 3, 10, 16, 0, tzinfo=timezone.utc)
    assert snapshot.tasks[0].started_at.hour == 0
    assert snapshot.log_entries[0].participants == ["Danny", "Rusty"]
    assert snapshot.decisions[0].file_path == "decisions.md"
    assert snapshot.open_issues[0].labels == [Label(name="squad:Danny", color="ededed")]
    assert snapshot.closed_issues[0].closed_at == datetime(2026, 3, 5, 10, 0, tzinfo=timezone.utc)
    assert snapshot.milestones[0].due_on == "2026-03-20T07:00:00Z"
    assert [issue.number for issue in snapshot.issues_by_milestone[3]] == [1, 2]
    assert snapshot.issues_by_milestone[3][0].milestone == 3


def test_parse_snapshot_tolerates_missing_sections():
    """Verify absent sections default to empty lists."""
    snapshot = parse_snapshot({"members": [{"name": "Danny", "role": "Lead"}]})

    assert snapshot.tasks == []
    assert snapshot.milestones == []
    assert snapshot.issues_by_milestone == {}


def test_parse_snapshot_rejects_non_object_documents():
    """Verify a top-level array is reported as a snapshot error."""
    with pytest.raises(SnapshotError):
        parse_snapshot([])


def test_parse_snapshot_rejects_non_list_sections():
    """Verify section values must be lists of objects."""
    with pytest.raises(SnapshotError):
        parse_snapshot({"tasks": {"id": "t1"}})
    with pytest.raises(SnapshotError):
        parse_snapshot({"tasks": ["t1"]})


def test_parse_issue_requires_number_state_and_created_at():
    """Verify incomplete issue payloads raise a data validation error."""
    with pytest.raises(DataValidationError):
        parse_issue(_issue_item(1, createdAt=None))
    with pytest.raises(DataValidationError):
        parse_issue(_issue_item(1, state=""))


def test_parse_issue_rejects_invalid_timestamps():
    """Verify malformed timestamps surface as data validation errors."""
    with pytest.raises(DataValidationError):
        parse_issue(_issue_item(1, closedAt="yesterday"))


def test_parse_issue_accepts_plain_string_labels():
    """Verify labels given as bare names are accepted."""
    issue = parse_issue(_issue_item(1, labels=["bug", "squad:Rusty"]))

    assert [label.name for label in issue.labels] == ["bug", "squad:Rusty"]


def test_parse_log_entry_rejects_string_participants():
    """Verify a participants string is rejected instead of being split into characters."""
    with pytest.raises(DataValidationError):
        parse_log_entry({"date": "2026-03-14", "participants": "Danny"})


def test_parse_issue_rejects_malformed_labels():
    """Verify labels that are neither strings nor objects raise a data validation error."""
    with pytest.raises(DataValidationError):
        parse_issue(_issue_item(1, labels=[None]))
    with pytest.raises(DataValidationError):
        parse_issue(_issue_item(2, labels="squad:Danny"))


def test_parse_issue_rejects_non_numeric_number():
    """Verify a non-numeric issue number raises a data validation error."""
    with pytest.raises(DataValidationError):
        parse_issue(_issue_item("abc"))


def test_parse_snapshot_rejects_malformed_milestones():
    """Verify milestone numbers and issue lists are validated."""
    with pytest.raises(DataValidationError):
        parse_snapshot({"milestones": [{"number": "three", "title": "Sprint"}]})
    with pytest.raises(DataValidationError):
        parse_snapshot({"milestones": [{"number": 3, "issues": ["#1"]}]})


def test_task_without_id_is_rejected():
    """Verify tasks must carry an identifier."""
    with pytest.raises(DataValidationError):
        parse_snapshot({"tasks": [{"title": "Nameless"}]})


def test_group_issues_by_member_uses_lowercased_squad_labels():
    """Verify the per-member issue map follows the squad label convention."""
    created = datetime(2026, 3, 1, tzinfo=timezone.utc)
    issues = [
        Issue(number=1, title="A", state="open", created_at=created, labels=[Label("squad:Danny")]),
        Issue(number=2, title="B", state="open", created_at=created, labels=[Label("squad:danny"), Label("squad:Rusty")]),
        Issue(number=3, title="C", state="open", created_at=created, labels=[Label("bug")], assignee="Danny"),
    ]

    by_member = group_issues_by_member(issues)

    assert {name: [issue.number for issue in group] for name, group in by_member.items()} == {
        "danny": [1, 2],
        "rusty": [2],
    }


def test_load_snapshot_reads_file(tmp_path):
    """Verify a snapshot is loaded from disk."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(_snapshot_payload()), encoding="utf-8")

    snapshot = load_snapshot(path)

    assert len(snapshot.members) == 2


def test_load_snapshot_invalid_json_raises_snapshot_error(tmp_path):
    """Verify unreadable JSON is reported as a snapshot error."""
    path = tmp_path / "snapshot.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotError):
        load_snapshot(path)


def test_load_snapshot_missing_file_raises_snapshot_error(tmp_path):
    """Verify a missing file is reported as a snapshot error."""
    with pytest.raises(SnapshotError):
        load_snapshot(tmp_path / "missing.json")
