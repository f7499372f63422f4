"""Patient identity resolution tests."""

from __future__ import annotations

import unittest

from bitedesk.engine.identity import MATCHERS, display_name, resolve_identity

PATIENTS = [
    {"_id": "p-obj-1", "patientId": "PT-0001", "registrationNumber": "REG-100", "firstName": "Ana", "lastName": "Reyes"},
    {"_id": "p-obj-2", "patientId": "PT-0002", "registrationNumber": "REG-200", "fullName": "Ben Cruz"},
    {"_id": "PT-0002", "patientId": "PT-9999", "registrationNumber": "REG-300", "firstName": "Carla", "lastName": "Santos"},
]


class ResolveIdentityTests(unittest.TestCase):
    def test_matches_primary_identifier(self) -> None:
        identity = resolve_identity({"patientId": "p-obj-1"}, PATIENTS)
        self.assertEqual(identity.matched_by, "record_id")
        self.assertEqual(identity.display_name, "Ana Reyes")
        self.assertEqual(identity.key, "PT-0001")

    def test_primary_identifier_beats_earlier_patient_reference(self) -> None:
        # PT-0002 is Ben's patientId but Carla's _id; the _id matcher runs first.
        identity = resolve_identity({"patientId": "PT-0002"}, PATIENTS)
        self.assertEqual(identity.matched_by, "record_id")
        self.assertEqual(identity.display_name, "Carla Santos")

    def test_matches_patient_reference(self) -> None:
        identity = resolve_identity({"patientId": "PT-0001"}, PATIENTS)
        self.assertEqual(identity.matched_by, "patient_id")
        self.assertEqual(identity.display_name, "Ana Reyes")

    def test_matches_registration_number(self) -> None:
        identity = resolve_identity({"patientId": "gone", "registrationNumber": " REG-200 "}, PATIENTS)
        self.assertEqual(identity.matched_by, "registration_number")
        self.assertEqual(identity.display_name, "Ben Cruz")
        self.assertFalse(identity.synthetic)

    def test_legacy_patient_id_alias_matches(self) -> None:
        identity = resolve_identity({"patientID": "PT-0001"}, PATIENTS)
        self.assertEqual(identity.matched_by, "patient_id")
        self.assertEqual(identity.display_name, "Ana Reyes")

        legacy_patients = [{"_id": "p-obj-4", "patientID": "PT-0004", "fullName": "Ivy Go"}]
        identity = resolve_identity({"patientId": "PT-0004"}, legacy_patients)
        self.assertEqual(identity.matched_by, "patient_id")
        self.assertEqual(identity.patient_id, "PT-0004")
        self.assertEqual(identity.key, "PT-0004")

    def test_legacy_registration_alias_matches(self) -> None:
        identity = resolve_identity({"regNo": "REG-300"}, PATIENTS)
        self.assertEqual(identity.matched_by, "registration_number")
        self.assertEqual(identity.display_name, "Carla Santos")

        legacy_patients = [{"_id": "p-obj-5", "regNo": "REG-500", "fullName": "Jo Lim"}]
        identity = resolve_identity({"registrationNumber": "REG-500"}, legacy_patients)
        self.assertEqual(identity.matched_by, "registration_number")
        self.assertEqual(identity.registration_number, "REG-500")

    def test_synthetic_key_reads_legacy_aliases(self) -> None:
        identity = resolve_identity({"_id": "case-11", "regNo": "REG-900"}, [])
        self.assertTrue(identity.synthetic)
        self.assertEqual(identity.key, "REG-900")
        self.assertEqual(identity.registration_number, "REG-900")

    def test_object_id_wrapper_matches(self) -> None:
        identity = resolve_identity({"patientId": {"$oid": "p-obj-1"}}, PATIENTS)
        self.assertEqual(identity.matched_by, "record_id")

    def test_synthesizes_from_case_names(self) -> None:
        case = {"_id": "case-9", "patientId": "orphan", "firstName": " Dina ", "middleName": "", "lastName": "Lopez"}
        identity = resolve_identity(case, PATIENTS)
        self.assertTrue(identity.synthetic)
        self.assertIsNone(identity.matched_by)
        self.assertEqual(identity.display_name, "Dina Lopez")
        self.assertEqual(identity.key, "orphan")

    def test_synthetic_placeholder_when_names_blank(self) -> None:
        identity = resolve_identity({"_id": "case-10", "firstName": "  "}, [])
        self.assertEqual(identity.display_name, "Unknown Patient")
        self.assertEqual(identity.key, "case-10")

    def test_blank_keys_never_match(self) -> None:
        patients = [{"_id": "x", "registrationNumber": ""}]
        identity = resolve_identity({"registrationNumber": "", "firstName": "Eli"}, patients)
        self.assertTrue(identity.synthetic)

    def test_missing_patient_collection(self) -> None:
        identity = resolve_identity({"fullName": "Fe Ramos"}, None)
        self.assertEqual(identity.display_name, "Fe Ramos")

    def test_matcher_order(self) -> None:
        self.assertEqual([matcher.name for matcher in MATCHERS], ["record_id", "patient_id", "registration_number"])

    def test_display_name_precedence(self) -> None:
        self.assertEqual(display_name({"fullName": "Full", "firstName": "Part"}), "Full")
        self.assertEqual(display_name({"firstName": "Gil", "lastName": "Tan"}), "Gil Tan")
        self.assertEqual(display_name({"patientId": "PT-7"}), "PT-7")
        self.assertEqual(display_name({}), "Unknown Patient")


if __name__ == "__main__":
    unittest.main()
