"""Load an already-extracted squad snapshot from a JSON document.

The snapshot is produced by the editor add-on's parsers and issue-tracker
client. Field names follow the tracker wire format (``createdAt``,
``closedAt``, ``dueOn``); only the fields analytics needs are read.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .burndown import SQUAD_LABEL_PREFIX
from .dates import parse_timestamp
from .errors import DataValidationError, SnapshotError
from .models import (
    DecisionEntry,
    Issue,
    Label,
    LogEntry,
    Member,
    MEMBER_IDLE,
    Milestone,
    Task,
    TASK_PENDING,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Snapshot:
    """Every record the dashboard build consumes."""

    members: List[Member] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    log_entries: List[LogEntry] = field(default_factory=list)
    decisions: List[DecisionEntry] = field(default_factory=list)
    open_issues: List[Issue] = field(default_factory=list)
    closed_issues: List[Issue] = field(default_factory=list)
    milestones: List[Milestone] = field(default_factory=list)
    issues_by_milestone: Dict[int, List[Issue]] = field(default_factory=dict)


def _timestamp(value: Optional[str], context: str) -> Optional[datetime]:
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError) as exc:
        raise DataValidationError(f"Invalid timestamp {value!r} in {context}") from exc


def _int_field(value: Any, field_name: str, context: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DataValidationError(f"Invalid {field_name} {value!r} in payload: {context}") from exc


def _parse_label(label: Any, context: str) -> Optional[Label]:
    if isinstance(label, str):
        return Label(name=label)
    if not isinstance(label, dict):
        raise DataValidationError(f"Invalid label {label!r} in {context}")
    if not label.get("name"):
        return None
    return Label(name=str(label["name"]), color=label.get("color"))


def _list_field(payload: Dict[str, Any], key: str) -> List[Any]:
    value = payload.get(key) or []
    if not isinstance(value, list):
        raise SnapshotError(f"Snapshot field '{key}' must be a list.")
    if not all(isinstance(item, dict) for item in value):
        raise SnapshotError(f"Snapshot field '{key}' must contain only objects.")
    return value


def parse_member(item: Dict[str, Any]) -> Member:
    name = item.get("name")
    if not name:
        raise DataValidationError(f"Member payload is missing required field 'name': {item}")
    return Member(
        name=str(name),
        role=str(item.get("role") or ""),
        status=str(item.get("status") or MEMBER_IDLE),
    )


def parse_task(item: Dict[str, Any]) -> Task:
    task_id = item.get("id")
    if task_id is None or task_id == "":
        raise DataValidationError(f"Task payload is missing required field 'id': {item}")
    context = f"task {task_id}"
    return Task(
        id=str(task_id),
        title=str(item.get("title") or task_id),
        status=str(item.get("status") or TASK_PENDING),
        assignee=str(item.get("assignee") or ""),
        started_at=_timestamp(item.get("startedAt"), context),
        completed_at=_timestamp(item.get("completedAt"), context),
        description=item.get("description"),
    )


def parse_log_entry(item: Dict[str, Any]) -> LogEntry:
    entry_date = item.get("date")
    if not entry_date:
        raise DataValidationError(f"Log entry payload is missing required field 'date': {item}")
    participants = item.get("participants") or []
    if not isinstance(participants, list):
        raise DataValidationError(f"Log entry field 'participants' must be a list: {item}")
    return LogEntry(
        date=str(entry_date),
        participants=[str(participant) for participant in participants],
        topic=str(item.get("topic") or ""),
        summary=str(item.get("summary") or ""),
    )


def parse_decision(item: Dict[str, Any]) -> DecisionEntry:
    title = item.get("title")
    if not title:
        raise DataValidationError(f"Decision payload is missing required field 'title': {item}")
    return DecisionEntry(
        title=str(title),
        date=item.get("date"),
        author=item.get("author"),
        file_path=str(item.get("filePath") or ""),
    )


def parse_issue(item: Dict[str, Any], milestone: Optional[int] = None) -> Issue:
    """Parse one tracker issue payload.

    Raises:
        DataValidationError: If ``number``, ``state`` or ``createdAt`` is
            missing, ``number`` is not an integer, a label is neither a
            string nor an object, or a timestamp does not parse.
    """
    number = item.get("number")
    state = item.get("state")
    context = f"issue #{number}"
    created_at = _timestamp(item.get("createdAt"), context)

    if number is None or not state or created_at is None:
        raise DataValidationError(f"Issue payload is missing required fields: payload={item}")

    raw_labels = item.get("labels") or []
    if not isinstance(raw_labels, list):
        raise DataValidationError(f"Issue field 'labels' must be a list in {context}")
    labels = []
    for raw_label in raw_labels:
        label = _parse_label(raw_label, context)
        if label is not None:
            labels.append(label)

    return Issue(
        number=_int_field(number, "issue number", item),
        title=str(item.get("title") or ""),
        state=str(state),
        created_at=created_at,
        labels=labels,
        assignee=item.get("assignee") or None,
        closed_at=_timestamp(item.get("closedAt"), context),
        html_url=item.get("htmlUrl"),
        milestone=milestone,
    )


def group_issues_by_member(issues: List[Issue]) -> Dict[str, List[Issue]]:
    """Map lowercased member names to issues via ``squad:<name>`` labels.

    An issue carrying several squad labels appears under each of them.
    """
    by_member: Dict[str, List[Issue]] = {}
    for issue in issues:
        for label in issue.labels:
            if label.name.startswith(SQUAD_LABEL_PREFIX):
                member = label.name[len(SQUAD_LABEL_PREFIX):].lower()
                by_member.setdefault(member, []).append(issue)
    return by_member


def parse_snapshot(payload: Any) -> Snapshot:
    """Convert a decoded snapshot document into model records."""
    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot must be a JSON object at the top level.")

    snapshot = Snapshot(
        members=[parse_member(item) for item in _list_field(payload, "members")],
        tasks=[parse_task(item) for item in _list_field(payload, "tasks")],
        log_entries=[parse_log_entry(item) for item in _list_field(payload, "logEntries")],
        decisions=[parse_decision(item) for item in _list_field(payload, "decisions")],
        open_issues=[parse_issue(item) for item in _list_field(payload, "issues")],
        closed_issues=[parse_issue(item) for item in _list_field(payload, "closedIssues")],
    )

    for item in _list_field(payload, "milestones"):
        number = item.get("number")
        if number is None:
            raise DataValidationError(f"Milestone payload is missing required field 'number': {item}")
        milestone = Milestone(
            number=_int_field(number, "milestone number", item),
            title=str(item.get("title") or f"Milestone {number}"),
            due_on=item.get("dueOn"),
        )
        milestone_issues = item.get("issues") or []
        if not isinstance(milestone_issues, list) or not all(isinstance(issue, dict) for issue in milestone_issues):
            raise DataValidationError(f"Milestone #{milestone.number} field 'issues' must be a list of objects.")
        snapshot.milestones.append(milestone)
        snapshot.issues_by_milestone[milestone.number] = [
            parse_issue(issue, milestone=milestone.number) for issue in milestone_issues
        ]

    logger.info(
        "Parsed snapshot",
        extra={
            "members": len(snapshot.members),
            "tasks": len(snapshot.tasks),
            "log_entries": len(snapshot.log_entries),
            "open_issues": len(snapshot.open_issues),
            "closed_issues": len(snapshot.closed_issues),
            "milestones": len(snapshot.milestones),
        },
    )

    return snapshot


def load_snapshot(path: Path) -> Snapshot:
    """Read and parse a snapshot file.

    Raises:
        SnapshotError: If the file cannot be read or does not contain JSON.
        DataValidationError: If a record inside the snapshot is invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise SnapshotError(f"Could not read snapshot file {path}: {exc}") from exc
    except ValueError as exc:
        raise SnapshotError(f"Snapshot file {path} is not valid JSON: {exc}") from exc

    return parse_snapshot(payload)
