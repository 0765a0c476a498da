from __future__ import annotations

import unittest
from pathlib import Path

from tasklens.model import Task
from tasklens.query_lang import (
    EVENT_SEARCH_FIELDS,
    NOTE_SEARCH_FIELDS,
    PROJECT_SEARCH_FIELDS,
    SORT_DUE_DATE,
    SORT_NONE,
    SORT_PROGRAM_LEAD,
    TASK_SEARCH_FIELDS,
    Query,
    QueryError,
    filter_and_sort,
    run_query,
)
from tasklens.workspace import load_workspace

REPO_ROOT = Path(__file__).resolve().parent.parent
FIXTURE = REPO_ROOT / "tests" / "fixtures" / "workspace_v1.json"
BAD_FIXTURE = REPO_ROOT / "tests" / "fixtures" / "workspace_bad_dates.json"


def _task(tid: str, title: str, status: str, *, due: str = "2023-07-15", lead: str = "Jane Smith", desc=None) -> Task:
    return Task(
        id=tid,
        title=title,
        program_lead=lead,
        jira_link=f"https://jira.company.com/browse/{tid}",
        due_date=due,
        date_created="2023-06-01",
        date_modified="2023-06-01",
        status=status,
        description=desc,
    )


def _searched(t, fields=TASK_SEARCH_FIELDS) -> str:
    return " | ".join(str(getattr(t, f) or "") for f in fields).casefold()


class TestFilterContract(unittest.TestCase):
    def setUp(self) -> None:
        self.tasks = load_workspace(FIXTURE).tasks

    def test_empty_query_returns_all_in_order(self):
        got = filter_and_sort(self.tasks, Query())
        self.assertEqual([t.id for t in got], [t.id for t in self.tasks])
        self.assertEqual(filter_and_sort(self.tasks), list(self.tasks))

    def test_search_image_scenario(self):
        tasks = [_task("a", "Design Homepage", "In Progress"), _task("b", "Optimize Images", "Done")]
        got = filter_and_sort(tasks, Query(search_text="image"))
        self.assertEqual([t.title for t in got], ["Optimize Images"])

    def test_search_partitions_records(self):
        for needle in ("jane", "IMAGE", "progress", "e", "website", "zzz-no-match", "done"):
            got = filter_and_sort(self.tasks, Query(search_text=needle))
            kept = {t.id for t in got}
            for t in self.tasks:
                if t.id in kept:
                    self.assertIn(needle.casefold(), _searched(t), f"{needle!r} kept {t.id}")
                else:
                    self.assertNotIn(needle.casefold(), _searched(t), f"{needle!r} dropped {t.id}")

    def test_missing_description_never_raises(self):
        tasks = [_task("a", "Alpha", "Upcoming", desc=None), {"id": "b", "title": None, "status": "Done"}]
        got = filter_and_sort(tasks, Query(search_text="alp"))
        self.assertEqual(len(got), 1)
        self.assertEqual(got[0].id, "a")

    def test_status_filter_or_within_group(self):
        got = filter_and_sort(self.tasks, Query(statuses=("Upcoming", "Done")))
        self.assertEqual({t.status for t in got}, {"Upcoming", "Done"})
        self.assertEqual(len(got), 3)

    def test_status_and_search_combine(self):
        got = filter_and_sort(self.tasks, Query(statuses=("Upcoming",), search_text="jane"))
        self.assertEqual([t.id for t in got], ["4"])

    def test_dict_records_with_camel_case_keys(self):
        recs = [
            {"id": "1", "title": "A", "programLead": "Zed", "status": "Done"},
            {"id": "2", "title": "B", "programLead": "Amy", "status": "Done"},
        ]
        got = filter_and_sort(recs, Query(search_text="amy"))
        self.assertEqual([r["id"] for r in got], ["2"])
        got = filter_and_sort(recs, Query(sort_key=SORT_PROGRAM_LEAD))
        self.assertEqual([r["id"] for r in got], ["2", "1"])

    def test_event_search_fields(self):
        events = load_workspace(FIXTURE).events
        got = filter_and_sort(events, Query(search_text="client", search_fields=EVENT_SEARCH_FIELDS))
        self.assertEqual([e.id for e in got], ["e2"])
        got = filter_and_sort(events, Query(search_text="planning", search_fields=EVENT_SEARCH_FIELDS))
        self.assertEqual([e.id for e in got], ["e1"])


class TestSortContract(unittest.TestCase):
    def test_due_date_scenario(self):
        tasks = [
            _task("a", "A", "Upcoming", due="2023-07-30"),
            _task("b", "B", "Upcoming", due="2023-07-15"),
            _task("c", "C", "Upcoming", due="2023-07-10"),
        ]
        got = filter_and_sort(tasks, Query(sort_key="due-date"))
        self.assertEqual([t.due_date for t in got], ["2023-07-10", "2023-07-15", "2023-07-30"])

    def test_sort_is_stable_and_idempotent(self):
        tasks = [
            _task("1", "x", "Upcoming"),
            _task("2", "y", "Done"),
            _task("3", "z", "Upcoming"),
            _task("4", "w", "Done"),
        ]
        once = filter_and_sort(tasks, Query(sort_key="status"))
        twice = filter_and_sort(once, Query(sort_key="status"))
        self.assertEqual([t.id for t in once], ["2", "4", "1", "3"])
        self.assertEqual(once, twice)

    def test_sort_by_name_is_case_insensitive(self):
        tasks = [_task("1", "banana", "Done"), _task("2", "Apple", "Done"), _task("3", "cherry", "Done")]
        got = filter_and_sort(tasks, Query(sort_key="name"))
        self.assertEqual([t.title for t in got], ["Apple", "banana", "cherry"])

    def test_sort_by_name_places_accented_letters_with_their_base(self):
        tasks = [_task("1", "Zeta", "Done"), _task("2", "Émile", "Done"), _task("3", "apple", "Done")]
        got = filter_and_sort(tasks, Query(sort_key="name"))
        self.assertEqual([t.title for t in got], ["apple", "Émile", "Zeta"])

        leads = [_task("1", "x", "Done", lead="Élodie"), _task("2", "y", "Done", lead="Eve"), _task("3", "z", "Done", lead="eve")]
        got = filter_and_sort(leads, Query(sort_key="pl"))
        self.assertEqual([t.program_lead for t in got], ["Élodie", "eve", "Eve"])

    def test_equal_due_dates_keep_input_order(self):
        tasks = load_workspace(FIXTURE).tasks
        got = filter_and_sort(tasks, Query(sort_key=SORT_DUE_DATE))
        same_day = [t.id for t in got if t.due_date == "2023-07-15"]
        self.assertEqual(same_day, ["t1", "4"])

    def test_sort_does_not_mutate_input(self):
        tasks = [_task("1", "b", "Done"), _task("2", "a", "Done")]
        before = list(tasks)
        filter_and_sort(tasks, Query(sort_key="name"))
        self.assertEqual(tasks, before)

    def test_aliases(self):
        self.assertEqual(Query(sort_key="byDueDate").sort_key, SORT_DUE_DATE)
        self.assertEqual(Query(sort_key="byProgramLead").sort_key, SORT_PROGRAM_LEAD)
        self.assertEqual(Query(sort_key="program-lead").sort_key, SORT_PROGRAM_LEAD)
        self.assertEqual(Query(sort_key="").sort_key, SORT_NONE)

    def test_unknown_sort_key_raises(self):
        with self.assertRaises(QueryError):
            Query(sort_key="priority")

    def test_unparseable_due_date_is_kept_last_and_reported(self):
        ws = load_workspace(BAD_FIXTURE, validate=False)
        res = run_query(ws.tasks, Query(sort_key=SORT_DUE_DATE))
        self.assertEqual([t.id for t in res.records], ["t3", "t1", "t2"])
        self.assertEqual(len(res.problems), 1)
        self.assertEqual(res.problems[0].record_id, "t2")
        self.assertEqual(res.problems[0].field, "due_date")


class TestQueryParamsContract(unittest.TestCase):
    def test_from_params(self):
        q = Query.from_params({"status": "Upcoming,Done", "q": "image", "sort": "due-date"})
        self.assertEqual(q.statuses, ("Upcoming", "Done"))
        self.assertEqual(q.search_text, "image")
        self.assertEqual(q.sort_key, SORT_DUE_DATE)

    def test_to_params_omits_empty_values(self):
        self.assertEqual(Query().to_params(), {})
        q = Query(statuses=("Done",), search_text="x", sort_key="pl")
        self.assertEqual(q.to_params(), {"status": "Done", "q": "x", "sort": "pl"})
        self.assertEqual(Query.from_params(q.to_params()), q)

    def test_toggle_status(self):
        q = Query().toggle_status("Upcoming").toggle_status("Done")
        self.assertEqual(q.statuses, ("Upcoming", "Done"))
        q = q.toggle_status("Upcoming")
        self.assertEqual(q.statuses, ("Done",))
        self.assertNotIn("status", q.toggle_status("Done").to_params())

    def test_with_search_and_sort(self):
        q = Query().with_search("image").with_sort("byName")
        self.assertEqual(q.to_params(), {"q": "image", "sort": "name"})
        self.assertEqual(q.with_search(None).search_text, "")  # type: ignore[arg-type]

    def test_note_and_project_search_fields(self):
        ws = load_workspace(FIXTURE)
        got = filter_and_sort(ws.notes, Query(search_text="MOBILE", search_fields=NOTE_SEARCH_FIELDS))
        self.assertEqual([n.id for n in got], ["n3"])
        got = filter_and_sort(ws.projects, Query(search_text="john", search_fields=PROJECT_SEARCH_FIELDS))
        self.assertEqual([p.id for p in got], ["p1"])

    def test_absent_values_mean_no_filter(self):
        tasks = load_workspace(FIXTURE).tasks
        q = Query(statuses=None, search_text=None)  # type: ignore[arg-type]
        self.assertEqual(q.statuses, ())
        self.assertEqual(q.search_text, "")
        self.assertEqual(filter_and_sort(tasks, q), list(tasks))

    def test_string_statuses_rejected(self):
        with self.assertRaises(QueryError):
            Query(statuses="Done")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main(verbosity=2)
