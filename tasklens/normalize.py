# tasklens/normalize.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .model import DataProblem, Event, Log, Note, Project, Task
from .util.console import warn
from .util.duration import as_minutes


def _get(d: Dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in d:
        return d[camel]
    return d.get(snake, default)


def _id(d: Dict[str, Any]) -> str:
    v = d.get("id")
    if v is None or isinstance(v, bool):
        return ""
    return str(v).strip()


def _s(v: Any) -> str:
    return "" if v is None else str(v)


def _opt(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s else None


def normalize_project(p: Dict[str, Any]) -> Optional[Project]:
    pid = _id(p)
    if not pid:
        return None
    return Project(
        id=pid,
        title=_s(p.get("title")),
        program_lead=_s(_get(p, "programLead", "program_lead")),
        description=_s(p.get("description")),
    )


def normalize_task(t: Dict[str, Any]) -> Optional[Task]:
    tid = _id(t)
    if not tid:
        return None
    return Task(
        id=tid,
        title=_s(t.get("title")),
        description=_opt(t.get("description")),
        program_lead=_s(_get(t, "programLead", "program_lead")),
        jira_link=_s(_get(t, "jiraLink", "jira_link")),
        due_date=_s(_get(t, "dueDate", "due_date")),
        date_created=_s(_get(t, "dateCreated", "date_created")),
        date_modified=_s(_get(t, "dateModified", "date_modified")),
        status=_s(t.get("status")),
    )


def normalize_note(n: Dict[str, Any]) -> Optional[Note]:
    nid = _id(n)
    task_id = _s(_get(n, "taskId", "task_id")).strip()
    if not nid or not task_id:
        return None
    return Note(
        id=nid,
        task_id=task_id,
        text=_s(n.get("text")),
        date_created=_s(_get(n, "dateCreated", "date_created")),
        date_modified=_s(_get(n, "dateModified", "date_modified")),
    )


def normalize_log(lg: Dict[str, Any]) -> Optional[Log]:
    lid = _id(lg)
    if not lid:
        return None
    raw = lg.get("duration")
    mins = as_minutes(raw)
    if mins is None:
        warn("normalize", f"invalid log duration id={lid!r} value={raw!r}; using 0")
        mins = 0
    return Log(id=lid, title=_s(lg.get("title")), duration=mins)


def normalize_event(e: Dict[str, Any]) -> Optional[Event]:
    """Build an Event; duration is recomputed from logs when logs are present."""
    eid = _id(e)
    if not eid:
        return None
    logs_raw = e.get("logs") or []
    logs: List[Log] = []
    if isinstance(logs_raw, list):
        for lg in logs_raw:
            if isinstance(lg, dict):
                got = normalize_log(lg)
                if got is not None:
                    logs.append(got)

    stored = as_minutes(e.get("duration")) or 0
    duration = sum(lg.duration for lg in logs) if logs else stored
    if logs and duration != stored and e.get("duration") is not None:
        warn("normalize", f"event duration {stored} != sum(logs) {duration} id={eid!r}; using sum")

    return Event(
        id=eid,
        title=_s(e.get("title")),
        created_at=_s(_get(e, "creationDate", "created_at")),
        duration=duration,
        total_booked=as_minutes(_get(e, "totalBooked", "total_booked")) or 0,
        logs=tuple(logs),
        task_id=_opt(_get(e, "taskId", "task_id")),
        task_title=_opt(_get(e, "taskTitle", "task_title")),
    )


def normalize_many(kind: str, items: Any, fn) -> Tuple[Tuple[Any, ...], Tuple[DataProblem, ...]]:
    """Apply `fn` to each dict in `items`; entries without an id are reported."""
    out: List[Any] = []
    problems: List[DataProblem] = []
    if not isinstance(items, list):
        return (), ()
    for i, raw in enumerate(items):
        got = fn(raw) if isinstance(raw, dict) else None
        if got is None:
            problems.append(DataProblem(f"{kind}[{i}]", "id", raw, f"skipped {kind} entry without usable id"))
            warn("normalize", f"skipped {kind}[{i}]: missing id")
            continue
        out.append(got)
    return tuple(out), tuple(problems)
