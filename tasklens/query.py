from __future__ import annotations

"""tasklens.query

Lookup and aggregation helpers over in-memory record collections.

Design goals:
- Work on model dataclasses and plain dicts alike.
- Never crash a view because of a single bad record; report it instead.
"""

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .model import TASK_STATUSES, DataProblem, Note, record_field, record_id
from .util.console import warn
from .util.duration import as_minutes
from .util.timeparse import try_date


def record_by_id(records: Iterable[Any], rid: str, *, default: Any = None) -> Any:
    """Return the record with id `rid` or default (None by default)."""
    if not rid:
        return default
    for r in records:
        if record_id(r) == str(rid):
            return r
    return default


def require_record(records: Iterable[Any], rid: str) -> Any:
    """Like record_by_id but raises KeyError when missing."""
    r = record_by_id(records, rid)
    if r is None:
        raise KeyError(rid)
    return r


def tasks_by_status(tasks: Iterable[Any], status: str) -> List[Any]:
    return [t for t in tasks if record_field(t, "status") == status]


def status_counts(records: Iterable[Any]) -> Tuple[Dict[str, int], Tuple[DataProblem, ...]]:
    counts: Dict[str, int] = {s: 0 for s in TASK_STATUSES}
    problems: List[DataProblem] = []
    for r in records:
        st = record_field(r, "status")
        if isinstance(st, str) and st in counts:
            counts[st] += 1
            continue
        problems.append(DataProblem(record_id(r), "status", st, f"unknown status {st!r}"))
        warn("query", f"uncounted status id={record_id(r)!r} value={st!r}")
    return counts, tuple(problems)


def aggregate_status_counts(records: Iterable[Any]) -> Dict[str, int]:
    """Count records per status over the whole collection.

    Always returns exactly the three known statuses, zero-initialized.
    """
    counts, _ = status_counts(records)
    return counts


def status_count_problems(records: Iterable[Any]) -> Tuple[DataProblem, ...]:
    _, problems = status_counts(records)
    return problems


def recompute_event_duration(logs: Iterable[Any]) -> int:
    """Sum of log durations in minutes. Invalid durations count as 0."""
    total = 0
    for log in logs:
        raw = record_field(log, "duration")
        mins = as_minutes(raw)
        if mins is None:
            warn("query", f"invalid log duration id={record_id(log)!r} value={raw!r}")
            continue
        total += mins
    return total


def notes_for_task(notes: Iterable[Note], task_id: str) -> List[Note]:
    """Notes of one task, most recently modified first.

    Notes with an unparseable date_modified sort last in original order.
    """
    own = [n for n in notes if str(record_field(n, "task_id") or "") == str(task_id)]
    dated: List[Tuple[dt.date, Note]] = []
    undated: List[Note] = []
    for n in own:
        d = try_date(record_field(n, "date_modified"))
        if d is None:
            undated.append(n)
        else:
            dated.append((d, n))
    dated.sort(key=lambda x: x[0], reverse=True)
    return [n for _, n in dated] + undated


def latest_note(notes: Iterable[Note], task_id: str) -> Optional[Note]:
    got = notes_for_task(notes, task_id)
    return got[0] if got else None


def search_tasks_by_title(tasks: Sequence[Any], text: str) -> List[Any]:
    """Case-insensitive title lookup used by the event task picker."""
    needle = (text or "").casefold()
    if not needle:
        return []
    return [t for t in tasks if needle in str(record_field(t, "title") or "").casefold()]


__all__ = [
    "record_by_id",
    "require_record",
    "tasks_by_status",
    "status_counts",
    "aggregate_status_counts",
    "status_count_problems",
    "recompute_event_duration",
    "notes_for_task",
    "latest_note",
    "search_tasks_by_title",
]
