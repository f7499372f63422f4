"""Dose status classification tests."""

from __future__ import annotations

import unittest
from datetime import date, timedelta

from bitedesk.engine.classify import DoseStatus, classify_dose, is_lapsed, normalize_status

TODAY = date(2025, 1, 8)
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


class ClassifyDoseTests(unittest.TestCase):
    def test_completed_ignores_date(self) -> None:
        for slot_date in (YESTERDAY, TODAY, TOMORROW, None):
            with self.subTest(slot_date=slot_date):
                self.assertIs(classify_dose(slot_date, "Completed ", TODAY), DoseStatus.COMPLETED)

    def test_explicit_missed_is_terminal(self) -> None:
        self.assertIs(classify_dose(TOMORROW, "MISSED", TODAY), DoseStatus.MISSED)
        self.assertIs(classify_dose(None, " missed", TODAY), DoseStatus.MISSED)

    def test_no_date_is_scheduled(self) -> None:
        self.assertIs(classify_dose(None, None, TODAY), DoseStatus.SCHEDULED)
        self.assertIs(classify_dose(None, "scheduled", TODAY), DoseStatus.SCHEDULED)

    def test_same_day_is_today(self) -> None:
        self.assertIs(classify_dose(TODAY, None, TODAY), DoseStatus.TODAY)
        self.assertIs(classify_dose(TODAY, "scheduled", TODAY), DoseStatus.TODAY)

    def test_future_is_scheduled(self) -> None:
        self.assertIs(classify_dose(TOMORROW, "", TODAY), DoseStatus.SCHEDULED)

    def test_past_without_completion_is_lapse(self) -> None:
        self.assertIs(classify_dose(YESTERDAY, "scheduled", TODAY), DoseStatus.MISSED)
        self.assertIs(classify_dose(YESTERDAY, "pending", TODAY), DoseStatus.MISSED)

    def test_non_text_status_is_treated_as_absent(self) -> None:
        self.assertIs(classify_dose(TOMORROW, 1, TODAY), DoseStatus.SCHEDULED)

    def test_is_lapsed_separates_inferred_from_explicit(self) -> None:
        self.assertTrue(is_lapsed(YESTERDAY, None, TODAY))
        self.assertFalse(is_lapsed(YESTERDAY, "missed", TODAY))
        self.assertFalse(is_lapsed(YESTERDAY, "completed", TODAY))
        self.assertFalse(is_lapsed(TODAY, None, TODAY))

    def test_normalize_status(self) -> None:
        self.assertEqual(normalize_status("  Completed\n"), "completed")
        self.assertIsNone(normalize_status("   "))
        self.assertIsNone(normalize_status(None))


if __name__ == "__main__":
    unittest.main()
