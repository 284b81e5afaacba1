"""Domain models for squad dashboard analytics.

Input records are immutable snapshots handed over by upstream parsers and the
issue-tracker client; output records are display-ready structures consumed by
chart and tree renderers. Instants are timezone-aware ``datetime`` objects and
calendar dates are ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

TASK_PENDING = "pending"
TASK_IN_PROGRESS = "in_progress"
TASK_COMPLETED = "completed"

ISSUE_OPEN = "open"
ISSUE_CLOSED = "closed"

MEMBER_WORKING = "working"
MEMBER_IDLE = "idle"


class CompletableWorkItem(Protocol):
    """Shared surface of anything that can be counted as completed work."""

    @property
    def work_id(self) -> str: ...

    @property
    def is_completed(self) -> bool: ...

    @property
    def completed_at(self) -> Optional[datetime]: ...

    @property
    def owner(self) -> Optional[str]: ...


@dataclass(slots=True)
class Task:
    """A task tracked inside the squad workspace."""

    id: str
    title: str
    status: str = TASK_PENDING
    assignee: str = ""
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    description: Optional[str] = None

    @property
    def work_id(self) -> str:
        return self.id

    @property
    def is_completed(self) -> bool:
        return self.status == TASK_COMPLETED

    @property
    def owner(self) -> Optional[str]:
        return self.assignee or None


@dataclass(slots=True)
class Label:
    """An issue label as reported by the issue tracker."""

    name: str
    color: Optional[str] = None


@dataclass(slots=True)
class Issue:
    """Minimal snapshot of an externally tracked issue."""

    number: int
    title: str
    state: str
    created_at: datetime
    labels: List[Label] = field(default_factory=list)
    assignee: Optional[str] = None
    closed_at: Optional[datetime] = None
    html_url: Optional[str] = None
    milestone: Optional[int] = None

    @property
    def work_id(self) -> str:
        return f"#{self.number}"

    @property
    def is_completed(self) -> bool:
        return self.state == ISSUE_CLOSED

    @property
    def completed_at(self) -> Optional[datetime]:
        return self.closed_at

    @property
    def owner(self) -> Optional[str]:
        return self.assignee


@dataclass(slots=True)
class Member:
    """A squad member from the team roster."""

    name: str
    role: str
    status: str = MEMBER_IDLE


@dataclass(slots=True)
class LogEntry:
    """A session-log entry, reduced to the fields analytics needs."""

    date: str
    participants: List[str]
    topic: str = ""
    summary: str = ""


@dataclass(slots=True)
class DecisionEntry:
    """A recorded team decision. Passed through to the dashboard untouched."""

    title: str
    date: Optional[str] = None
    author: Optional[str] = None
    file_path: str = ""


@dataclass(slots=True)
class Milestone:
    """An issue-tracker milestone header."""

    number: int
    title: str
    due_on: Optional[str] = None


@dataclass(slots=True)
class VelocityPoint:
    date: str
    completed_tasks: int


@dataclass(slots=True)
class HeatmapPoint:
    member: str
    activity_level: float


@dataclass(slots=True)
class SwimlaneTask:
    id: str
    title: str
    start_date: str
    end_date: Optional[str]
    status: str


@dataclass(slots=True)
class Swimlane:
    member: str
    role: str
    tasks: List[SwimlaneTask]


@dataclass(slots=True)
class BurndownPoint:
    """Remaining open issues on one calendar day, stacked by member."""

    date: str
    remaining: int
    by_member: Dict[str, int]


@dataclass(frozen=True, slots=True)
class MemberColor:
    name: str
    color: str


@dataclass(slots=True)
class MilestoneBurndown:
    """Complete burndown series for one milestone.

    Member names and colors are stored as pairs; ``member_names`` and
    ``member_colors`` are views over the same list.
    """

    title: str
    number: int
    total_issues: int
    members: List[MemberColor]
    data_points: List[BurndownPoint]
    due_date: Optional[str] = None

    @property
    def member_names(self) -> List[str]:
        return [member.name for member in self.members]

    @property
    def member_colors(self) -> List[str]:
        return [member.color for member in self.members]


@dataclass(slots=True)
class TeamMemberOverview:
    """Per-member card data for the team overview."""

    name: str
    role: str
    status: str
    icon_type: Optional[str]
    open_issue_count: int
    closed_issue_count: int
    active_task_count: int
    recent_activity_count: int


@dataclass(slots=True)
class TeamSummary:
    total_members: int
    active_members: int
    total_open_issues: int
    total_closed_issues: int
    total_active_tasks: int


@dataclass(slots=True)
class TeamSection:
    members: List[TeamMemberOverview]
    summary: TeamSummary


@dataclass(slots=True)
class BurndownSection:
    milestones: List[MilestoneBurndown]


@dataclass(slots=True)
class VelocitySection:
    timeline: List[VelocityPoint]
    heatmap: List[HeatmapPoint]


@dataclass(slots=True)
class ActivitySection:
    swimlanes: List[Swimlane]
    recent_logs: List[LogEntry]


@dataclass(slots=True)
class DecisionsSection:
    entries: List[Any]


@dataclass(slots=True)
class DashboardData:
    """Everything the dashboard renderer needs, computed in one pass."""

    team: TeamSection
    burndown: BurndownSection
    velocity: VelocitySection
    activity: ActivitySection
    decisions: DecisionsSection


STANDUP_DAY = "day"
STANDUP_WEEK = "week"


@dataclass(slots=True)
class StandupSummary:
    closed_count: int
    new_count: int
    blocking_count: int
    period_start: datetime
    period_end: datetime


@dataclass(slots=True)
class StandupReport:
    """What changed in the squad over the last day or week."""

    period: str
    summary: StandupSummary
    closed_issues: List[Issue]
    new_issues: List[Issue]
    blocking_issues: List[Issue]
    recent_decisions: List[DecisionEntry]
    suggested_next_steps: List[Issue]
    recent_logs: List[LogEntry]
