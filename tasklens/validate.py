"""Form and workspace validation helpers (library-facing)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping
from urllib.parse import urlparse

from tasklens.model import TASK_STATUSES
from tasklens.util.duration import as_minutes, form_minutes
from tasklens.util.timeparse import DateParseError, coerce_date, coerce_timestamp

WORKSPACE_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class FormValidationError(ValueError):
    """Raised when form input is rejected. `errors` lists every offending field."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = list(errors)
        first = self.errors[0] if self.errors else FieldError("", "invalid input")
        super().__init__(f"{first.field}: {first.message}")

    def by_field(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for e in self.errors:
            out.setdefault(e.field, e.message)
        return out


class WorkspaceValidationError(ValueError):
    """Raised when a workspace document fails validation."""


def _require(cond: bool, field: str, msg: str, errs: List[FieldError]) -> None:
    if not cond:
        errs.append(FieldError(field, msg))


def _filled(data: Mapping[str, Any], key: str) -> bool:
    v = data.get(key)
    return isinstance(v, str) and bool(v.strip())


def is_http_url(s: Any) -> bool:
    if not isinstance(s, str) or not s.strip():
        return False
    u = urlparse(s.strip())
    return u.scheme in ("http", "https") and bool(u.netloc)


# --- Forms --------------------------------------------------------------------

def validate_project_input(data: Mapping[str, Any]) -> List[FieldError]:
    errs: List[FieldError] = []
    _require(_filled(data, "title"), "title", "Project title is required", errs)
    _require(_filled(data, "program_lead"), "program_lead", "Program lead is required", errs)
    desc = data.get("description")
    _require(desc is None or isinstance(desc, str), "description", "Description must be text", errs)
    return errs


def validate_task_input(data: Mapping[str, Any]) -> List[FieldError]:
    errs: List[FieldError] = []
    _require(_filled(data, "title"), "title", "Task title is required", errs)
    _require(_filled(data, "program_lead"), "program_lead", "Program lead is required", errs)
    _require(is_http_url(data.get("jira_link")), "jira_link", "Invalid Jira link", errs)

    if not _filled(data, "due_date"):
        errs.append(FieldError("due_date", "Due date is required"))
    else:
        try:
            coerce_date(data["due_date"])
        except DateParseError:
            errs.append(FieldError("due_date", "Invalid due date"))

    _require(
        data.get("status") in TASK_STATUSES,
        "status",
        f"Status must be one of: {', '.join(TASK_STATUSES)}",
        errs,
    )
    return errs


def validate_note_input(data: Mapping[str, Any]) -> List[FieldError]:
    errs: List[FieldError] = []
    _require(_filled(data, "text"), "text", "Note text is required", errs)
    return errs


def validate_log_input(data: Mapping[str, Any]) -> List[FieldError]:
    errs: List[FieldError] = []
    _require(_filled(data, "title"), "title", "Title is required", errs)
    _require(
        form_minutes(data.get("duration", 0)) is not None,
        "duration",
        "Duration must be a non-negative whole number of minutes",
        errs,
    )
    return errs


def validate_event_input(data: Mapping[str, Any]) -> List[FieldError]:
    errs: List[FieldError] = []
    _require(_filled(data, "title"), "title", "Title is required", errs)
    if data.get("log_duration") not in (None, ""):
        _require(
            form_minutes(data.get("log_duration")) is not None,
            "log_duration",
            "Duration must be a non-negative whole number of minutes",
            errs,
        )
    return errs


def assert_valid(errs: List[FieldError]) -> None:
    if errs:
        raise FormValidationError(errs)


# --- Workspace documents --------------------------------------------------------

def _check_list(doc: Dict[str, Any], key: str, errs: List[str], label: str) -> List[Any]:
    v = doc.get(key, [])
    if not isinstance(v, list):
        errs.append(f"{label}: {key} must be list")
        return []
    return v


def _check_ids(items: List[Any], key: str, errs: List[str], label: str) -> None:
    seen: set[str] = set()
    for i, it in enumerate(items):
        if not isinstance(it, dict):
            errs.append(f"{label}: {key}[{i}] must be dict")
            continue
        rid = it.get("id")
        if not isinstance(rid, (str, int)) or isinstance(rid, bool) or str(rid) == "":
            errs.append(f"{label}: {key}[{i}].id must be non-empty string or int")
            continue
        if str(rid) in seen:
            errs.append(f"{label}: {key}[{i}].id duplicates {str(rid)!r}")
        seen.add(str(rid))


def validate_workspace(doc: Any, *, label: str = "workspace") -> List[str]:
    """Structural checks on a workspace document. Returns error strings."""
    if not isinstance(doc, dict):
        return [f"{label}: document must be a dict/object"]

    errs: List[str] = []
    sv = doc.get("schema_version", WORKSPACE_SCHEMA_VERSION)
    if sv != WORKSPACE_SCHEMA_VERSION:
        errs.append(f"Unsupported schema_version: {sv!r} (latest={WORKSPACE_SCHEMA_VERSION})")

    projects = _check_list(doc, "projects", errs, label)
    tasks = _check_list(doc, "tasks", errs, label)
    notes = _check_list(doc, "notes", errs, label)
    events = _check_list(doc, "events", errs, label)
    for key, items in (("projects", projects), ("tasks", tasks), ("notes", notes), ("events", events)):
        _check_ids(items, key, errs, label)

    for i, t in enumerate(tasks):
        if not isinstance(t, dict):
            continue
        st = t.get("status")
        if st not in TASK_STATUSES:
            errs.append(f"{label}: tasks[{i}].status must be one of {list(TASK_STATUSES)}; got {st!r}")
        created = t.get("dateCreated", t.get("date_created"))
        modified = t.get("dateModified", t.get("date_modified"))
        try:
            if created and modified and coerce_date(modified) < coerce_date(created):
                errs.append(f"{label}: tasks[{i}].dateModified is before dateCreated")
        except DateParseError as ex:
            errs.append(f"{label}: tasks[{i}] {ex}")

    task_ids = {str(t.get("id")) for t in tasks if isinstance(t, dict)}
    for i, n in enumerate(notes):
        if not isinstance(n, dict):
            continue
        tid = n.get("taskId", n.get("task_id"))
        if tid is None or str(tid) == "":
            errs.append(f"{label}: notes[{i}].taskId is required")
        elif str(tid) not in task_ids:
            errs.append(f"{label}: notes[{i}].taskId {str(tid)!r} has no task")

    for i, ev in enumerate(events):
        if not isinstance(ev, dict):
            continue
        ts = ev.get("creationDate", ev.get("created_at"))
        try:
            coerce_timestamp(ts)
        except DateParseError as ex:
            errs.append(f"{label}: events[{i}].creationDate {ex}")
        logs = ev.get("logs", [])
        if not isinstance(logs, list):
            errs.append(f"{label}: events[{i}].logs must be list")
            continue
        for j, lg in enumerate(logs):
            if not isinstance(lg, dict) or as_minutes(lg.get("duration")) is None:
                errs.append(f"{label}: events[{i}].logs[{j}].duration must be non-negative int")

    return errs


def assert_valid_workspace(doc: Any) -> None:
    if not isinstance(doc, dict):
        raise WorkspaceValidationError("workspace must be a JSON object")
    errs = validate_workspace(doc)
    if errs:
        raise WorkspaceValidationError(errs[0])


__all__ = [
    "WORKSPACE_SCHEMA_VERSION",
    "FieldError",
    "FormValidationError",
    "WorkspaceValidationError",
    "is_http_url",
    "validate_project_input",
    "validate_task_input",
    "validate_note_input",
    "validate_log_input",
    "validate_event_input",
    "assert_valid",
    "validate_workspace",
    "assert_valid_workspace",
]
