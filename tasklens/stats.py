# tasklens/stats.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .model import DataProblem, record_field, record_id
from .query import recompute_event_duration
from .util.console import warn
from .util.duration import as_minutes
from .util.timeparse import DateParseError, coerce_timestamp
from .util.tz import local_day, resolve_tz

DEFAULT_WORKDAY_MIN = 450  # 7.5h

TzLike = Union[str, dt.tzinfo, None]


def _tzinfo(tz: TzLike) -> dt.tzinfo:
    return tz if isinstance(tz, dt.tzinfo) else resolve_tz(tz)


@dataclass(frozen=True)
class BucketResult:
    buckets: Tuple[Tuple[dt.date, Tuple[Any, ...]], ...]
    unbucketed: Tuple[Any, ...] = ()
    problems: Tuple[DataProblem, ...] = ()


def bucket_events(events: Iterable[Any], tz: TzLike = "UTC") -> BucketResult:
    """Group events by the calendar day of their own timestamp.

    Buckets come most recent day first; within a bucket events keep their
    input order. Events with an unparseable timestamp go to `unbucketed`.
    """
    tzinfo = _tzinfo(tz)
    by_day: Dict[dt.date, List[Any]] = {}
    unbucketed: List[Any] = []
    problems: List[DataProblem] = []
    for ev in events:
        raw = record_field(ev, "created_at")
        try:
            day = local_day(coerce_timestamp(raw), tzinfo)
        except DateParseError as ex:
            unbucketed.append(ev)
            problems.append(DataProblem(record_id(ev), "created_at", raw, str(ex)))
            warn("stats", f"unbucketable created_at id={record_id(ev)!r} value={raw!r}")
            continue
        by_day.setdefault(day, []).append(ev)

    ordered = sorted(by_day.items(), key=lambda kv: kv[0], reverse=True)
    return BucketResult(
        buckets=tuple((d, tuple(evs)) for d, evs in ordered),
        unbucketed=tuple(unbucketed),
        problems=tuple(problems),
    )


def bucket_by_date(events: Iterable[Any], tz: TzLike = "UTC") -> List[Tuple[dt.date, List[Any]]]:
    return [(d, list(evs)) for d, evs in bucket_events(events, tz).buckets]


def _booked(ev: Any) -> int:
    raw = record_field(ev, "total_booked")
    mins = as_minutes(raw)
    if mins is None:
        if raw is not None:
            warn("stats", f"invalid total_booked id={record_id(ev)!r} value={raw!r}")
        return 0
    return mins


def _worked(ev: Any) -> int:
    logs = record_field(ev, "logs")
    if isinstance(logs, (list, tuple)) and logs:
        return recompute_event_duration(logs)
    return as_minutes(record_field(ev, "duration")) or 0


@dataclass(frozen=True)
class EventTotals:
    worked_min: int
    booked_min: int


def event_totals(events: Iterable[Any]) -> EventTotals:
    worked = 0
    booked = 0
    for ev in events:
        worked += _worked(ev)
        booked += _booked(ev)
    return EventTotals(worked_min=worked, booked_min=booked)


@dataclass(frozen=True)
class DaySummary:
    day: dt.date
    events: Tuple[Any, ...]
    worked_min: int
    booked_min: int
    overtime_min: int
    remaining_min: int


def day_summaries(
    events: Iterable[Any],
    tz: TzLike = "UTC",
    *,
    workday_min: int = DEFAULT_WORKDAY_MIN,
) -> List[DaySummary]:
    """Per-day totals for the stats view, most recent day first."""
    out: List[DaySummary] = []
    for day, evs in bucket_events(events, tz).buckets:
        totals = event_totals(evs)
        out.append(
            DaySummary(
                day=day,
                events=evs,
                worked_min=totals.worked_min,
                booked_min=totals.booked_min,
                overtime_min=max(totals.worked_min - workday_min, 0),
                remaining_min=max(workday_min - totals.worked_min, 0),
            )
        )
    return out


def week_range(today: dt.date) -> Tuple[dt.date, dt.date]:
    """Sunday-start week containing `today`."""
    # date.weekday(): Monday=0 .. Sunday=6
    start = today - dt.timedelta(days=(today.weekday() + 1) % 7)
    return start, start + dt.timedelta(days=6)


def events_in_range(
    events: Iterable[Any],
    start: dt.date,
    end: dt.date,
    tz: TzLike = "UTC",
) -> List[Any]:
    """Events whose calendar day falls in [start, end]; undated events are skipped."""
    tzinfo = _tzinfo(tz)
    out: List[Any] = []
    for ev in events:
        raw = record_field(ev, "created_at")
        try:
            day = local_day(coerce_timestamp(raw), tzinfo)
        except DateParseError:
            warn("stats", f"skipping undated event id={record_id(ev)!r} value={raw!r}")
            continue
        if start <= day <= end:
            out.append(ev)
    return out


def remaining_in_workday(worked_min: int, workday_min: Optional[int] = None) -> int:
    wd = DEFAULT_WORKDAY_MIN if workday_min is None else int(workday_min)
    return max(wd - int(worked_min), 0)
