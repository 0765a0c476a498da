# tasklens/util/duration.py
from __future__ import annotations

import re
from typing import Any, Optional

# Accepts "90", "1h 30min", "2h", "45min", "1h30m"
_HM_RE = re.compile(r"^(?:(\d+)\s*h)?\s*(?:(\d+)\s*m(?:in)?)?$", re.IGNORECASE)


def format_duration(minutes: int) -> str:
    hours, mins = divmod(max(int(minutes), 0), 60)
    if hours > 0 and mins > 0:
        return f"{hours}h {mins}min"
    if hours > 0:
        return f"{hours}h"
    return f"{mins}min"


def parse_duration_to_minutes(s: str | None) -> Optional[int]:
    if s is None:
        return None
    ss = str(s).strip()
    if not ss:
        return None
    if ss.isdigit():
        return int(ss)

    m = _HM_RE.match(ss)
    if not m or not (m.group(1) or m.group(2)):
        return None
    return int(m.group(1) or 0) * 60 + int(m.group(2) or 0)


def as_minutes(v: Any) -> Optional[int]:
    """Return `v` as non-negative whole minutes, or None if it is not one."""
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v if v >= 0 else None
    if isinstance(v, float) and v.is_integer() and v >= 0:
        return int(v)
    return None


def form_minutes(v: Any) -> Optional[int]:
    """Minutes from form input: an int, or text such as "90" or "1h 30min"."""
    if isinstance(v, str):
        return parse_duration_to_minutes(v)
    return as_minutes(v)
