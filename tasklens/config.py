# tasklens/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from .stats import DEFAULT_WORKDAY_MIN
from .util.console import obs_enabled
from .util.tz import normalize_tz_name


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        v = int(raw)
    except ValueError:
        return default
    return v if v > 0 else default


@dataclass(frozen=True)
class Settings:
    tz: str
    workday_min: int
    obs_log: bool

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            tz=normalize_tz_name(os.getenv("TASKLENS_TZ")),
            workday_min=_env_int("TASKLENS_WORKDAY_MIN", DEFAULT_WORKDAY_MIN),
            obs_log=obs_enabled(),
        )
