# tasklens/duedate.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .model import DataProblem, record_field, record_id
from .util.console import warn
from .util.timeparse import DateParseError, coerce_date

TIER_OVERDUE = "overdue"
TIER_WITHIN_2_DAYS = "within_2_days"
TIER_WITHIN_7_DAYS = "within_7_days"
TIER_DEFAULT = "default"

URGENCY_TIERS: Tuple[str, ...] = (TIER_OVERDUE, TIER_WITHIN_2_DAYS, TIER_WITHIN_7_DAYS, TIER_DEFAULT)


@dataclass(frozen=True)
class DueLabel:
    label: str
    tier: str          # one of URGENCY_TIERS
    days: int          # calendar days from today (negative = past)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def _months(n: int) -> int:
    # nearest whole 30-day month, halves rounded up
    return int(n / 30 + 0.5)


def _distance_phrase(days: int) -> str:
    """Approximate distance wording for relative labels.

    30-59 days read "about 1 month" / "about 2 months"; from 60 days whole
    months; from 365 days "about", "over" or "almost" N years.
    """
    n = abs(days)
    if n < 30:
        return _plural(n, "day")
    if n < 60:
        return "about " + _plural(_months(n), "month")
    if n < 365:
        return _plural(_months(n), "month")
    years, rem = divmod(n, 365)
    if rem < 91:
        return "about " + _plural(years, "year")
    if rem < 274:
        return "over " + _plural(years, "year")
    return "almost " + _plural(years + 1, "year")


def urgency_tier(days: int) -> str:
    if days < 0:
        return TIER_OVERDUE
    if days <= 2:
        return TIER_WITHIN_2_DAYS
    if days <= 7:
        return TIER_WITHIN_7_DAYS
    return TIER_DEFAULT


def relative_due_label(due_date: Any, now: Any) -> DueLabel:
    """Human label and urgency tier for a due date, at calendar-day granularity.

    `now` may be a date, a datetime or an ISO string; only its calendar day is
    used. Raises DateParseError for an unparseable due date.
    """
    days = (coerce_date(due_date) - coerce_date(now)).days
    if days == 0:
        label = "Today"
    elif days == 1:
        label = "Tomorrow"
    elif days == -1:
        label = "Yesterday"
    elif days > 0:
        label = "in " + _distance_phrase(days)
    else:
        label = _distance_phrase(days) + " ago"
    return DueLabel(label=label, tier=urgency_tier(days), days=days)


def due_labels(
    tasks: Iterable[Any], now: Any
) -> Tuple[List[Tuple[Any, Optional[DueLabel]]], Tuple[DataProblem, ...]]:
    """Label every task; a task with a bad due date gets None and a problem."""
    out: List[Tuple[Any, Optional[DueLabel]]] = []
    problems: List[DataProblem] = []
    for t in tasks:
        raw = record_field(t, "due_date")
        try:
            out.append((t, relative_due_label(raw, now)))
        except DateParseError as ex:
            out.append((t, None))
            problems.append(DataProblem(record_id(t), "due_date", raw, str(ex)))
            warn("duedate", f"invalid due_date id={record_id(t)!r} value={raw!r}")
    return out, tuple(problems)
