from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURE = REPO_ROOT / "tests" / "fixtures" / "workspace_v1.json"
BAD_FIXTURE = REPO_ROOT / "tests" / "fixtures" / "workspace_bad_dates.json"


def _run(*args: str) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env.pop("TASKLENS_TZ", None)
    env.pop("TASKLENS_WORKDAY_MIN", None)
    cmd = [sys.executable, "-m", "tasklens.cli", *args]
    return subprocess.run(cmd, cwd=str(REPO_ROOT), capture_output=True, text=True, env=env)


class TestCliContract:
    def test_tasks_search_json(self):
        p = _run("tasks", "--in", str(FIXTURE), "--q", "image", "--today", "2023-07-09", "--json")
        assert p.returncode == 0, p.stderr
        out = json.loads(p.stdout)
        assert out["query"] == {"q": "image"}
        assert [t["title"] for t in out["tasks"]] == ["Optimize Images"]
        assert out["tasks"][0]["due"] == {"label": "Tomorrow", "tier": "within_2_days"}
        assert out["problems"] == []

    def test_tasks_status_and_sort(self):
        p = _run("tasks", "--in", str(FIXTURE), "--status", "Upcoming,Done", "--sort", "due-date", "--json")
        assert p.returncode == 0, p.stderr
        out = json.loads(p.stdout)
        assert [t["id"] for t in out["tasks"]] == ["t3", "4", "t2"]

    def test_unknown_sort_key_fails(self):
        p = _run("tasks", "--in", str(FIXTURE), "--sort", "priority")
        assert p.returncode == 2
        assert "ERROR" in p.stderr

    def test_counts_json(self):
        p = _run("counts", "--in", str(FIXTURE), "--json")
        assert p.returncode == 0, p.stderr
        assert json.loads(p.stdout) == {"Upcoming": 2, "In Progress": 1, "Done": 1}

    def test_counts_default_seed(self):
        p = _run("counts")
        assert p.returncode == 0, p.stderr
        assert "Upcoming: 1" in p.stdout
        assert "In Progress: 1" in p.stdout

    def test_events_and_stats_json(self):
        p = _run("events", "--in", str(FIXTURE), "--q", "client", "--json")
        assert p.returncode == 0, p.stderr
        out = json.loads(p.stdout)
        assert [e["id"] for e in out["events"]] == ["e2"]
        assert out["worked_min"] == 90
        assert out["booked_min"] == 60

        p = _run("stats", "--in", str(FIXTURE), "--json")
        assert p.returncode == 0, p.stderr
        days = json.loads(p.stdout)["days"]
        assert [d["day"] for d in days] == ["2023-06-02", "2023-06-01"]
        assert days[0]["overtime_min"] == 120

    def test_validate(self):
        p = _run("validate", "--in", str(FIXTURE))
        assert p.returncode == 0, p.stderr
        assert "OK" in p.stdout

        p = _run("validate", "--in", str(BAD_FIXTURE))
        assert p.returncode == 3
        assert "INVALID" in p.stderr

    def test_bad_records_are_reported_not_fatal(self):
        p = _run("tasks", "--in", str(BAD_FIXTURE), "--today", "2023-07-01", "--json")
        assert p.returncode == 0, p.stderr
        out = json.loads(p.stdout)
        assert [t["id"] for t in out["tasks"]] == ["t1", "t2", "t3"]
        assert out["tasks"][1]["due"] is None
        assert [(pr["record_id"], pr["field"]) for pr in out["problems"]] == [("t2", "due_date")]
        assert "skipped 1 workspace entries" in p.stderr

        p = _run("stats", "--in", str(BAD_FIXTURE), "--json")
        assert p.returncode == 0, p.stderr
        out = json.loads(p.stdout)
        assert [d["day"] for d in out["days"]] == ["2023-06-01"]
        assert out["unbucketed"] == ["e2"]
        assert out["problems"][0]["record_id"] == "e2"
        assert "WARN: e2" in p.stderr

        p = _run("counts", "--in", str(BAD_FIXTURE), "--json")
        assert p.returncode == 0, p.stderr
        assert json.loads(p.stdout) == {"Upcoming": 2, "In Progress": 0, "Done": 0}
        assert "WARN: t3" in p.stderr

    def test_invalid_workspace_and_tz(self, tmp_path: Path):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        p = _run("tasks", "--in", str(broken))
        assert p.returncode == 3

        p = _run("tasks", "--in", str(tmp_path / "missing.json"))
        assert p.returncode == 2

        p = _run("stats", "--in", str(FIXTURE), "--tz", "No/Such_Zone")
        assert p.returncode == 2
