from __future__ import annotations

import argparse
import datetime as dt
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import orjson

from .config import Settings
from .duedate import due_labels
from .model import DataProblem, Workspace
from .query import status_counts
from .query_lang import EVENT_SEARCH_FIELDS, SORT_KEYS, Query, QueryError, run_query
from .seed import load_seed
from .stats import bucket_events, day_summaries, event_totals, remaining_in_workday
from .util.console import eprint
from .util.duration import format_duration
from .util.timeparse import DateParseError, coerce_date
from .util.tz import resolve_tz, today_date
from .validate import WorkspaceValidationError, validate_workspace
from .workspace import dumps, event_doc, load_workspace, task_doc


def _die(msg: str, rc: int = 2) -> int:
    eprint(f"[tasklens] ERROR: {msg}")
    return rc


def _load(ns: argparse.Namespace) -> Workspace:
    # View commands tolerate bad records; `validate` is the strict path.
    if not ns.in_json:
        return load_seed()
    ws = load_workspace(ns.in_json, validate=False)
    skipped = ws.meta.get("skipped_entries")
    if skipped:
        eprint(f"[tasklens] WARN: skipped {skipped} workspace entries without an id")
    return ws


def _today(ns: argparse.Namespace, tz: dt.tzinfo) -> dt.date:
    if getattr(ns, "today", None):
        return coerce_date(ns.today)
    return today_date(tz)


def _warn_problems(problems: Iterable[DataProblem]) -> None:
    for p in problems:
        eprint(f"[tasklens] WARN: {p.record_id}: {p.field}: {p.message}")


def _cmd_tasks(ns: argparse.Namespace, ws: Workspace, settings: Settings) -> int:
    q = Query.from_params({"status": ns.status or "", "q": ns.q or "", "sort": ns.sort or ""})
    res = run_query(ws.tasks, q)
    labels, label_problems = due_labels(res.records, _today(ns, resolve_tz(settings.tz)))

    seen = {(p.record_id, p.field) for p in res.problems}
    problems = list(res.problems) + [p for p in label_problems if (p.record_id, p.field) not in seen]
    _warn_problems(problems)

    if ns.json:
        rows: List[Dict[str, Any]] = []
        for t, lab in labels:
            row = task_doc(t)
            row["due"] = None if lab is None else {"label": lab.label, "tier": lab.tier}
            rows.append(row)
        out = {"query": q.to_params(), "tasks": rows, "problems": [asdict(p) for p in problems]}
        print(dumps(out, pretty=ns.pretty))
        return 0

    for t, lab in labels:
        due = "?" if lab is None else f"{lab.label} [{lab.tier}]"
        print(f"{t.status:<12} {t.title:<32} {t.program_lead:<18} {t.due_date} {due}")
    return 0


def _cmd_counts(ns: argparse.Namespace, ws: Workspace, settings: Settings) -> int:
    counts, problems = status_counts(ws.tasks)
    _warn_problems(problems)
    if ns.json:
        print(dumps(counts, pretty=ns.pretty))
        return 0
    for status, n in counts.items():
        print(f"{status}: {n}")
    return 0


def _cmd_events(ns: argparse.Namespace, ws: Workspace, settings: Settings) -> int:
    q = Query(search_text=ns.q or "", search_fields=EVENT_SEARCH_FIELDS)
    events = run_query(ws.events, q).records
    totals = event_totals(events)
    if ns.json:
        out = {
            "events": [event_doc(e) for e in events],
            "worked_min": totals.worked_min,
            "booked_min": totals.booked_min,
        }
        print(dumps(out, pretty=ns.pretty))
        return 0
    for e in events:
        print(f"{e.title:<32} worked {format_duration(e.duration):<10} booked {format_duration(e.total_booked)}")
    print(
        f"Total worked: {format_duration(totals.worked_min)} "
        f"(remaining {format_duration(remaining_in_workday(totals.worked_min, settings.workday_min))}); "
        f"total booked: {format_duration(totals.booked_min)}"
    )
    return 0


def _cmd_stats(ns: argparse.Namespace, ws: Workspace, settings: Settings) -> int:
    bucketed = bucket_events(ws.events, settings.tz)
    days = day_summaries(ws.events, settings.tz, workday_min=settings.workday_min)
    _warn_problems(bucketed.problems)
    if ns.json:
        out = {
            "days": [
                {
                    "day": d.day.isoformat(),
                    "events": [e.id for e in d.events],
                    "worked_min": d.worked_min,
                    "booked_min": d.booked_min,
                    "overtime_min": d.overtime_min,
                    "remaining_min": d.remaining_min,
                }
                for d in days
            ],
            "unbucketed": [e.id for e in bucketed.unbucketed],
            "problems": [asdict(p) for p in bucketed.problems],
        }
        print(dumps(out, pretty=ns.pretty))
        return 0
    for d in days:
        print(
            f"{d.day.isoformat()}  events={len(d.events)}  worked={format_duration(d.worked_min)}  "
            f"booked={format_duration(d.booked_min)}  overtime={format_duration(d.overtime_min)}"
        )
    for e in bucketed.unbucketed:
        print(f"(undated)    {e.title}  worked={format_duration(e.duration)}")
    return 0


def _cmd_validate(ns: argparse.Namespace) -> int:
    if not ns.in_json:
        return _die("validate requires --in")
    p = Path(ns.in_json)
    if not p.exists():
        return _die(f"Missing JSON file: {p}")
    try:
        doc = orjson.loads(p.read_bytes())
    except orjson.JSONDecodeError as e:
        return _die(f"Failed to parse JSON: {p} ({e})")
    errs = validate_workspace(doc)
    if errs:
        for e in errs:
            eprint(f"[tasklens] INVALID: {e}")
        return 3
    print(f"[tasklens] OK: {p}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--in", dest="in_json", default=None, help="Workspace JSON path (default: built-in seed data)")
    common.add_argument("--tz", default=None, help="Bucketing timezone (default: env TASKLENS_TZ or 'UTC')")
    common.add_argument("--json", action="store_true", help="JSON output")
    common.add_argument("--pretty", action="store_true", help="Pretty JSON output")

    ap = argparse.ArgumentParser(prog="tasklens", description="Query tasks, notes and time-tracking events.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_tasks = sub.add_parser("tasks", parents=[common], help="Filtered and sorted task list")
    p_tasks.add_argument("--status", default=None, help="Comma-joined statuses, e.g. 'Upcoming,Done'")
    p_tasks.add_argument("--q", default=None, help="Case-insensitive search text")
    p_tasks.add_argument("--sort", default=None, help=f"Sort key: {', '.join(SORT_KEYS)}")
    p_tasks.add_argument("--today", default=None, help="Reference date YYYY-MM-DD for due labels (default: today)")

    sub.add_parser("counts", parents=[common], help="Task counts per status")

    p_events = sub.add_parser("events", parents=[common], help="Events with worked/booked totals")
    p_events.add_argument("--q", default=None, help="Search event title / task title")

    sub.add_parser("stats", parents=[common], help="Events bucketed by day")
    sub.add_parser("validate", parents=[common], help="Validate a workspace JSON document (--in)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)

    settings = Settings.from_env()
    if ns.tz:
        settings = Settings(tz=ns.tz, workday_min=settings.workday_min, obs_log=settings.obs_log)
    try:
        resolve_tz(settings.tz)
    except ValueError as e:
        return _die(f"Invalid --tz value: {e}")

    if ns.cmd == "validate":
        return _cmd_validate(ns)

    try:
        ws = _load(ns)
    except FileNotFoundError as e:
        return _die(f"Missing JSON file: {e.filename}")
    except (WorkspaceValidationError, TypeError) as e:
        return _die(f"Failed to load workspace: {e}", rc=3)

    handlers = {
        "tasks": _cmd_tasks,
        "counts": _cmd_counts,
        "events": _cmd_events,
        "stats": _cmd_stats,
    }
    try:
        return handlers[ns.cmd](ns, ws, settings)
    except QueryError as e:
        return _die(str(e))
    except DateParseError as e:
        return _die(f"Invalid date: {e}")


if __name__ == "__main__":
    sys.exit(main())
