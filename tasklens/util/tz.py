# tasklens/util/tz.py
from __future__ import annotations

import datetime as dt
import re
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# "+02:00", "+0200", "-05:00"
_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")

_ALIASES = {"utc": "UTC", "z": "UTC", "gmt": "UTC", "local": "local"}


def normalize_tz_name(name: Optional[str]) -> str:
    """Canonical timezone name: "UTC" (also for empty input), "local", or as given.

    Event days are keyed in UTC unless another zone is asked for.
    """
    s = (name or "").strip()
    if not s:
        return "UTC"
    return _ALIASES.get(s.lower(), s)


def _fixed_offset(sign: str, hh: str, mm: str, raw: str) -> dt.timezone:
    hours, minutes = int(hh), int(mm)
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid timezone offset: {raw!r}")
    delta = dt.timedelta(hours=hours, minutes=minutes)
    return dt.timezone(delta if sign == "+" else -delta)


def resolve_tz(name: Optional[str]) -> dt.tzinfo:
    """tzinfo for a name from normalize_tz_name(); ValueError if unknown."""
    tz_name = normalize_tz_name(name)
    if tz_name == "UTC":
        return dt.timezone.utc
    if tz_name == "local":
        return dt.datetime.now().astimezone().tzinfo or dt.timezone.utc

    m = _OFFSET_RE.match(tz_name)
    if m:
        return _fixed_offset(*m.groups(), raw=tz_name)
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as ex:
        raise ValueError(f"Invalid timezone identifier: {tz_name!r}") from ex


def today_date(tz: dt.tzinfo) -> dt.date:
    return dt.datetime.now(tz=tz).date()


def local_day(ts: dt.datetime, tz: dt.tzinfo) -> dt.date:
    """Calendar day of `ts` in `tz`. Naive timestamps are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.timezone.utc)
    return ts.astimezone(tz).date()
