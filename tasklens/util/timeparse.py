# tasklens/util/timeparse.py
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

_YMD_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class DateParseError(ValueError):
    """Raised when a date or timestamp string cannot be parsed."""


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    m = _YMD_RE.match((s or "").strip())
    if not m:
        raise DateParseError(f"Invalid YYYY-MM-DD date: {s!r}")
    try:
        return dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as ex:
        raise DateParseError(f"Invalid YYYY-MM-DD date: {s!r}") from ex


def parse_timestamp(s: str) -> dt.datetime:
    """Parse an ISO-8601 date or timestamp.

    A bare date ("2023-06-01") is midnight UTC, like `new Date("2023-06-01")`
    in a browser. A trailing "Z" is accepted. Naive timestamps are UTC.
    """
    ss = (s or "").strip()
    if not ss:
        raise DateParseError("Empty timestamp")
    if _YMD_RE.match(ss):
        d = parse_date_yyyy_mm_dd(ss)
        return dt.datetime(d.year, d.month, d.day, tzinfo=dt.timezone.utc)
    try:
        ts = dt.datetime.fromisoformat(ss.replace("Z", "+00:00"))
    except ValueError as ex:
        raise DateParseError(f"Invalid ISO timestamp: {s!r}") from ex
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.timezone.utc)
    return ts


def coerce_date(v: Any) -> dt.date:
    """Accept a date, datetime or ISO string and return the calendar date."""
    if isinstance(v, dt.datetime):
        return v.date()
    if isinstance(v, dt.date):
        return v
    if isinstance(v, str):
        ss = v.strip()
        if _YMD_RE.match(ss):
            return parse_date_yyyy_mm_dd(ss)
        return parse_timestamp(ss).date()
    raise DateParseError(f"Not a date: {v!r}")


def coerce_timestamp(v: Any) -> dt.datetime:
    if isinstance(v, dt.datetime):
        return v if v.tzinfo is not None else v.replace(tzinfo=dt.timezone.utc)
    if isinstance(v, dt.date):
        return dt.datetime(v.year, v.month, v.day, tzinfo=dt.timezone.utc)
    if isinstance(v, str):
        return parse_timestamp(v)
    raise DateParseError(f"Not a timestamp: {v!r}")


def try_date(v: Any) -> Optional[dt.date]:
    try:
        return coerce_date(v)
    except DateParseError:
        return None
