# tasklens/ops.py
from __future__ import annotations

"""tasklens.ops

Create/update/delete operations as immutable value updates.

Every operation takes the current collection(s) and returns new tuple(s);
inputs are never mutated. Callers hold the "current" reference and replace it
wholesale, then re-run their query.
"""

import datetime as dt
import itertools
import uuid
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple

from .model import STATUS_DONE, Event, Log, Note, Project, Task
from .query import recompute_event_duration
from .util.duration import as_minutes, form_minutes
from .util.timeparse import coerce_date, try_date
from .validate import (
    assert_valid,
    validate_event_input,
    validate_log_input,
    validate_note_input,
    validate_project_input,
    validate_task_input,
)

IdFactory = Callable[[], str]


class RecordNotFound(KeyError):
    """Raised when an operation targets an id that is not in the collection."""


class UuidIdFactory:
    def __call__(self) -> str:
        return str(uuid.uuid4())


class CounterIdFactory:
    """Deterministic ids: "<prefix>1", "<prefix>2", ..."""

    def __init__(self, prefix: str = "", start: int = 1) -> None:
        self.prefix = prefix
        self._it = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._it)}"


def _today(today: Optional[dt.date]) -> dt.date:
    return today if today is not None else dt.date.today()


def _iso(d: dt.date) -> str:
    return d.isoformat()


def _modified_stamp(created: str, today: dt.date) -> str:
    # date_modified never precedes date_created
    c = try_date(created)
    if c is not None and c > today:
        return _iso(c)
    return _iso(today)


def _find_index(items: Sequence[Any], rid: str) -> int:
    for i, it in enumerate(items):
        if it.id == rid:
            return i
    raise RecordNotFound(rid)


def _replace_at(items: Sequence[Any], idx: int, new: Any) -> Tuple[Any, ...]:
    return tuple(items[:idx]) + (new,) + tuple(items[idx + 1:])


def _without(items: Iterable[Any], rid: str) -> Tuple[Any, ...]:
    items = tuple(items)
    _find_index(items, rid)
    return tuple(it for it in items if it.id != rid)


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None


# --- Projects -----------------------------------------------------------------

def create_project(
    projects: Iterable[Project], data: Mapping[str, Any], *, new_id: IdFactory
) -> Tuple[Tuple[Project, ...], Project]:
    assert_valid(validate_project_input(data))
    p = Project(
        id=new_id(),
        title=str(data["title"]).strip(),
        program_lead=str(data["program_lead"]).strip(),
        description=str(data.get("description") or ""),
    )
    return tuple(projects) + (p,), p


def update_project(projects: Iterable[Project], project_id: str, data: Mapping[str, Any]) -> Tuple[Project, ...]:
    projects = tuple(projects)
    idx = _find_index(projects, project_id)
    cur = projects[idx]
    merged = {
        "title": data.get("title", cur.title),
        "program_lead": data.get("program_lead", cur.program_lead),
        "description": data.get("description", cur.description),
    }
    assert_valid(validate_project_input(merged))
    new = replace(
        cur,
        title=str(merged["title"]).strip(),
        program_lead=str(merged["program_lead"]).strip(),
        description=str(merged["description"] or ""),
    )
    return _replace_at(projects, idx, new)


def delete_project(projects: Iterable[Project], project_id: str) -> Tuple[Project, ...]:
    return _without(projects, project_id)


# --- Tasks --------------------------------------------------------------------

def create_task(
    tasks: Iterable[Task],
    data: Mapping[str, Any],
    *,
    new_id: IdFactory,
    today: Optional[dt.date] = None,
) -> Tuple[Tuple[Task, ...], Task]:
    assert_valid(validate_task_input(data))
    stamp = _iso(_today(today))
    t = Task(
        id=new_id(),
        title=str(data["title"]).strip(),
        program_lead=str(data["program_lead"]).strip(),
        jira_link=str(data["jira_link"]).strip(),
        due_date=_iso(coerce_date(data["due_date"])),
        date_created=stamp,
        date_modified=stamp,
        status=str(data["status"]),
        description=_opt_str(data.get("description")),
    )
    return tuple(tasks) + (t,), t


_TASK_EDITABLE = ("title", "description", "program_lead", "jira_link", "due_date", "status")


def update_task(
    tasks: Iterable[Task],
    task_id: str,
    data: Mapping[str, Any],
    *,
    today: Optional[dt.date] = None,
) -> Tuple[Task, ...]:
    """Apply edit-form fields to a task. Status is free-form here."""
    tasks = tuple(tasks)
    idx = _find_index(tasks, task_id)
    cur = tasks[idx]
    merged = {k: data.get(k, getattr(cur, k)) for k in _TASK_EDITABLE}
    assert_valid(validate_task_input(merged))
    new = replace(
        cur,
        title=str(merged["title"]).strip(),
        description=_opt_str(merged["description"]),
        program_lead=str(merged["program_lead"]).strip(),
        jira_link=str(merged["jira_link"]).strip(),
        due_date=_iso(coerce_date(merged["due_date"])),
        status=str(merged["status"]),
        date_modified=_modified_stamp(cur.date_created, _today(today)),
    )
    return _replace_at(tasks, idx, new)


def complete_task(tasks: Iterable[Task], task_id: str, *, today: Optional[dt.date] = None) -> Tuple[Task, ...]:
    """Mark a task Done. Completing an already-Done task leaves it untouched."""
    tasks = tuple(tasks)
    idx = _find_index(tasks, task_id)
    cur = tasks[idx]
    if cur.status == STATUS_DONE:
        return tasks
    new = replace(cur, status=STATUS_DONE, date_modified=_modified_stamp(cur.date_created, _today(today)))
    return _replace_at(tasks, idx, new)


def delete_task(
    tasks: Iterable[Task], notes: Iterable[Note], task_id: str
) -> Tuple[Tuple[Task, ...], Tuple[Note, ...]]:
    """Remove a task and cascade-delete its notes."""
    remaining = _without(tasks, task_id)
    return remaining, tuple(n for n in notes if n.task_id != task_id)


# --- Notes --------------------------------------------------------------------

def add_note(
    notes: Iterable[Note],
    task_id: str,
    data: Mapping[str, Any],
    *,
    new_id: IdFactory,
    today: Optional[dt.date] = None,
) -> Tuple[Tuple[Note, ...], Note]:
    if not task_id:
        raise ValueError("task_id is required")
    assert_valid(validate_note_input(data))
    stamp = _iso(_today(today))
    n = Note(id=new_id(), task_id=str(task_id), text=str(data["text"]), date_created=stamp, date_modified=stamp)
    return tuple(notes) + (n,), n


def edit_note(
    notes: Iterable[Note],
    note_id: str,
    data: Mapping[str, Any],
    *,
    today: Optional[dt.date] = None,
) -> Tuple[Note, ...]:
    notes = tuple(notes)
    idx = _find_index(notes, note_id)
    assert_valid(validate_note_input(data))
    cur = notes[idx]
    new = replace(cur, text=str(data["text"]), date_modified=_modified_stamp(cur.date_created, _today(today)))
    return _replace_at(notes, idx, new)


def delete_note(notes: Iterable[Note], note_id: str) -> Tuple[Note, ...]:
    return _without(notes, note_id)


# --- Events & logs --------------------------------------------------------------

def _with_logs(ev: Event, logs: Tuple[Log, ...]) -> Event:
    return replace(ev, logs=logs, duration=recompute_event_duration(logs))


def create_event(
    events: Iterable[Event],
    data: Mapping[str, Any],
    *,
    new_id: IdFactory,
    now: Optional[dt.datetime] = None,
) -> Tuple[Tuple[Event, ...], Event]:
    """Create an event; `log_title` starts it with one log of `log_duration`."""
    assert_valid(validate_event_input(data))
    ts = now if now is not None else dt.datetime.now(dt.timezone.utc)
    log_minutes = form_minutes(data.get("log_duration")) or 0
    logs: Tuple[Log, ...] = ()
    event_id = new_id()
    if _opt_str(data.get("log_title")):
        logs = (Log(id=new_id(), title=str(data["log_title"]).strip(), duration=log_minutes),)
    ev = Event(
        id=event_id,
        title=str(data["title"]).strip(),
        created_at=ts.isoformat(),
        duration=recompute_event_duration(logs) if logs else log_minutes,
        total_booked=0,
        logs=logs,
        task_id=_opt_str(data.get("task_id")),
        task_title=_opt_str(data.get("task_title")),
    )
    return tuple(events) + (ev,), ev


def update_event(events: Iterable[Event], event_id: str, data: Mapping[str, Any]) -> Tuple[Event, ...]:
    """Edit an event's title and task link. Logs, duration and bookings are kept."""
    events = tuple(events)
    idx = _find_index(events, event_id)
    cur = events[idx]
    merged = {
        "title": data.get("title", cur.title),
        "task_id": data.get("task_id", cur.task_id),
        "task_title": data.get("task_title", cur.task_title),
    }
    assert_valid(validate_event_input(merged))
    new = replace(
        cur,
        title=str(merged["title"]).strip(),
        task_id=_opt_str(merged["task_id"]),
        task_title=_opt_str(merged["task_title"]),
    )
    return _replace_at(events, idx, new)


def delete_event(events: Iterable[Event], event_id: str) -> Tuple[Event, ...]:
    return _without(events, event_id)


def book_time(events: Iterable[Event], event_id: str, minutes: int) -> Tuple[Event, ...]:
    """Add `minutes` to an event's booked total."""
    mins = as_minutes(minutes)
    if mins is None:
        raise ValueError(f"minutes must be a non-negative int; got {minutes!r}")
    events = tuple(events)
    idx = _find_index(events, event_id)
    cur = events[idx]
    return _replace_at(events, idx, replace(cur, total_booked=cur.total_booked + mins))


def add_log(
    events: Iterable[Event],
    event_id: str,
    data: Mapping[str, Any],
    *,
    new_id: IdFactory,
) -> Tuple[Event, ...]:
    assert_valid(validate_log_input(data))
    events = tuple(events)
    idx = _find_index(events, event_id)
    cur = events[idx]
    log = Log(id=new_id(), title=str(data["title"]).strip(), duration=form_minutes(data.get("duration", 0)) or 0)
    return _replace_at(events, idx, _with_logs(cur, cur.logs + (log,)))


def edit_log(
    events: Iterable[Event],
    event_id: str,
    log_id: str,
    data: Mapping[str, Any],
) -> Tuple[Event, ...]:
    events = tuple(events)
    idx = _find_index(events, event_id)
    cur = events[idx]
    li = _find_index(cur.logs, log_id)
    old = cur.logs[li]
    merged = {"title": data.get("title", old.title), "duration": data.get("duration", old.duration)}
    assert_valid(validate_log_input(merged))
    new_log = replace(old, title=str(merged["title"]).strip(), duration=form_minutes(merged["duration"]) or 0)
    return _replace_at(events, idx, _with_logs(cur, _replace_at(cur.logs, li, new_log)))


def delete_log(events: Iterable[Event], event_id: str, log_id: str) -> Tuple[Event, ...]:
    events = tuple(events)
    idx = _find_index(events, event_id)
    cur = events[idx]
    return _replace_at(events, idx, _with_logs(cur, _without(cur.logs, log_id)))


def find_event_for_log(events: Iterable[Event], log_id: str) -> Optional[Event]:
    for ev in events:
        if any(lg.id == log_id for lg in ev.logs):
            return ev
    return None
