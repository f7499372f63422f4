"""Per-case schedule view tests."""

from __future__ import annotations

import unittest
from datetime import date

from zoneinfo import ZoneInfo

from bitedesk.engine.classify import DoseStatus
from bitedesk.engine.schedule import CaseStatus, build_schedule_view, case_status, dose_code

MANILA = ZoneInfo("Asia/Manila")
TODAY = date(2025, 1, 8)
ARRAY = ["2025-01-01", "2025-01-04", "2025-01-08", "2025-01-15", "2025-01-29"]


def _view(case: dict, patients=None):
    return build_schedule_view(case, patients or [], TODAY, MANILA)


class ScheduleViewTests(unittest.TestCase):
    def test_end_to_end_classification(self) -> None:
        view = _view({"_id": "c1", "scheduleDates": ARRAY, "d0Status": "completed"})
        self.assertEqual(
            [slot.status for slot in view.slots],
            [
                DoseStatus.COMPLETED,
                DoseStatus.MISSED,
                DoseStatus.TODAY,
                DoseStatus.SCHEDULED,
                DoseStatus.SCHEDULED,
            ],
        )
        self.assertEqual(view.case_id, "c1")
        self.assertFalse(view.fully_completed)

    def test_null_dates_stay_positional(self) -> None:
        view = _view({"scheduleDates": ["2025-01-01", None, "2025-01-08"]})
        self.assertEqual(len(view.slots), 5)
        self.assertIsNone(view.slots[1].date)
        self.assertIs(view.slots[1].status, DoseStatus.SCHEDULED)
        self.assertEqual([slot.day_label for slot in view.dated_slots()], ["Day 0", "Day 7"])

    def test_slot_lookup_and_codes(self) -> None:
        view = _view({"scheduleDates": ARRAY})
        self.assertEqual(view.slot("Day 14").date, date(2025, 1, 15))
        self.assertIsNone(view.slot("Day 90"))
        self.assertEqual(view.slot("Day 28").dose_code, "D28")
        self.assertEqual(dose_code("Day 3"), "D3")
        self.assertEqual(dose_code("Booster"), "")

    def test_views_are_frozen(self) -> None:
        view = _view({"scheduleDates": ARRAY})
        with self.assertRaises(AttributeError):
            view.slots = ()  # type: ignore[misc]


class CaseStatusTests(unittest.TestCase):
    def test_today_wins(self) -> None:
        view = _view({"scheduleDates": ARRAY, "d3Status": "missed"})
        self.assertIs(case_status(view), CaseStatus.TODAY)

    def test_upcoming_dose(self) -> None:
        view = _view({"scheduleDates": ["2025-01-01", "2025-01-10"], "d0Status": "completed"})
        self.assertIs(case_status(view), CaseStatus.SCHEDULED)

    def test_all_dated_completed(self) -> None:
        case = {"scheduleDates": ARRAY[:2], "d0Status": "completed", "d3Status": "completed"}
        self.assertIs(case_status(_view(case)), CaseStatus.COMPLETED)

    def test_missed(self) -> None:
        case = {"scheduleDates": ARRAY[:2], "d0Status": "completed"}
        self.assertIs(case_status(_view(case)), CaseStatus.MISSED)

    def test_pending_without_dates(self) -> None:
        self.assertIs(case_status(_view({"d0Status": "completed"})), CaseStatus.PENDING)


if __name__ == "__main__":
    unittest.main()
