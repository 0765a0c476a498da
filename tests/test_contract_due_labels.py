from __future__ import annotations

import datetime as dt
import unittest

from tasklens.duedate import (
    TIER_DEFAULT,
    TIER_OVERDUE,
    TIER_WITHIN_2_DAYS,
    TIER_WITHIN_7_DAYS,
    due_labels,
    relative_due_label,
)
from tasklens.util.timeparse import DateParseError

TODAY = dt.date(2023, 7, 12)


def _label(days: int) -> str:
    return relative_due_label(TODAY + dt.timedelta(days=days), TODAY).label


class TestDueLabelContract(unittest.TestCase):
    def test_tomorrow(self):
        got = relative_due_label("2023-07-13", TODAY)
        self.assertEqual(got.label, "Tomorrow")
        self.assertEqual(got.tier, TIER_WITHIN_2_DAYS)
        self.assertEqual(got.days, 1)

    def test_yesterday_is_overdue(self):
        got = relative_due_label("2023-07-11", TODAY)
        self.assertEqual(got.label, "Yesterday")
        self.assertEqual(got.tier, TIER_OVERDUE)

    def test_today(self):
        got = relative_due_label(TODAY, TODAY)
        self.assertEqual(got.label, "Today")
        self.assertEqual(got.tier, TIER_WITHIN_2_DAYS)

    def test_relative_phrases(self):
        self.assertEqual(_label(5), "in 5 days")
        self.assertEqual(_label(-3), "3 days ago")
        self.assertEqual(_label(35), "in about 1 month")
        self.assertEqual(_label(50), "in about 2 months")
        self.assertEqual(_label(-59), "about 2 months ago")
        self.assertEqual(_label(75), "in 3 months")
        self.assertEqual(_label(-90), "3 months ago")
        self.assertEqual(_label(400), "in about 1 year")
        self.assertEqual(_label(-900), "over 2 years ago")
        self.assertEqual(_label(700), "in almost 2 years")

    def test_tiers(self):
        self.assertEqual(relative_due_label(TODAY + dt.timedelta(days=2), TODAY).tier, TIER_WITHIN_2_DAYS)
        self.assertEqual(relative_due_label(TODAY + dt.timedelta(days=3), TODAY).tier, TIER_WITHIN_7_DAYS)
        self.assertEqual(relative_due_label(TODAY + dt.timedelta(days=7), TODAY).tier, TIER_WITHIN_7_DAYS)
        self.assertEqual(relative_due_label(TODAY + dt.timedelta(days=8), TODAY).tier, TIER_DEFAULT)
        self.assertEqual(relative_due_label(TODAY - dt.timedelta(days=40), TODAY).tier, TIER_OVERDUE)

    def test_now_as_datetime_uses_calendar_day(self):
        now = dt.datetime(2023, 7, 12, 23, 59, tzinfo=dt.timezone.utc)
        self.assertEqual(relative_due_label("2023-07-13", now).label, "Tomorrow")
        self.assertEqual(relative_due_label("2023-07-13", "2023-07-12T08:00:00Z").label, "Tomorrow")

    def test_bad_due_date_raises(self):
        with self.assertRaises(DateParseError):
            relative_due_label("soon", TODAY)
        with self.assertRaises(ValueError):
            relative_due_label("2023-02-30", TODAY)

    def test_due_labels_tolerates_bad_records(self):
        tasks = [{"id": "a", "dueDate": "2023-07-13"}, {"id": "b", "dueDate": "nope"}, {"id": "c"}]
        labelled, problems = due_labels(tasks, TODAY)
        self.assertEqual(labelled[0][1].label, "Tomorrow")
        self.assertIsNone(labelled[1][1])
        self.assertIsNone(labelled[2][1])
        self.assertEqual([p.record_id for p in problems], ["b", "c"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
