# tasklens/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

STATUS_UPCOMING = "Upcoming"
STATUS_IN_PROGRESS = "In Progress"
STATUS_DONE = "Done"

# Dashboard order.
TASK_STATUSES: Tuple[str, ...] = (STATUS_UPCOMING, STATUS_IN_PROGRESS, STATUS_DONE)


@dataclass(frozen=True)
class Project:
    id: str
    title: str
    program_lead: str
    description: str = ""


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    program_lead: str
    jira_link: str
    due_date: str          # YYYY-MM-DD
    date_created: str      # YYYY-MM-DD
    date_modified: str     # YYYY-MM-DD, never before date_created
    status: str            # one of TASK_STATUSES
    description: Optional[str] = None


@dataclass(frozen=True)
class Note:
    id: str
    task_id: str
    text: str
    date_created: str
    date_modified: str


@dataclass(frozen=True)
class Log:
    id: str
    title: str
    duration: int          # minutes


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    created_at: str        # ISO timestamp (bucketing key)
    duration: int = 0      # minutes; sum of logs once logs exist
    total_booked: int = 0  # minutes
    logs: Tuple[Log, ...] = ()
    task_id: Optional[str] = None
    task_title: Optional[str] = None


@dataclass(frozen=True)
class DataProblem:
    """A record that could not be fully processed (kept, not dropped)."""

    record_id: str
    field: str
    value: Any
    message: str


# Record field names as they appear in workspace documents (camelCase) mapped
# to dataclass attributes. Dict records may use either spelling.
FIELD_ALIASES: Dict[str, str] = {
    "programLead": "program_lead",
    "jiraLink": "jira_link",
    "dueDate": "due_date",
    "dateCreated": "date_created",
    "dateModified": "date_modified",
    "taskId": "task_id",
    "taskTitle": "task_title",
    "creationDate": "created_at",
    "totalBooked": "total_booked",
}
_REVERSE_ALIASES: Dict[str, str] = {v: k for k, v in FIELD_ALIASES.items()}


def record_field(record: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a dataclass or dict record; never raises."""
    attr = FIELD_ALIASES.get(name, name)
    if isinstance(record, dict):
        if attr in record:
            return record[attr]
        camel = _REVERSE_ALIASES.get(attr)
        if camel is not None and camel in record:
            return record[camel]
        return record.get(name, default)
    return getattr(record, attr, default)


def record_id(record: Any) -> str:
    v = record_field(record, "id")
    return "" if v is None else str(v)


@dataclass(frozen=True)
class Workspace:
    projects: Tuple[Project, ...] = ()
    tasks: Tuple[Task, ...] = ()
    notes: Tuple[Note, ...] = ()
    events: Tuple[Event, ...] = ()
    meta: Dict[str, Any] = field(default_factory=dict, compare=False)


__all__ = [
    "STATUS_UPCOMING",
    "STATUS_IN_PROGRESS",
    "STATUS_DONE",
    "TASK_STATUSES",
    "Project",
    "Task",
    "Note",
    "Log",
    "Event",
    "DataProblem",
    "Workspace",
    "FIELD_ALIASES",
    "record_field",
    "record_id",
]
