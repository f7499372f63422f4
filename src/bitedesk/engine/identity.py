"""Resolve bite cases to patient identities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from bitedesk.cases.fields import UNKNOWN_PATIENT, first_text, joined_name, text_field

logger = logging.getLogger(__name__)

PATIENT_ID_FIELDS: Tuple[str, ...] = ("patientId", "patientID")
REGISTRATION_FIELDS: Tuple[str, ...] = ("registrationNumber", "regNo")
RECORD_ID_FIELDS: Tuple[str, ...] = ("_id",)


@dataclass(frozen=True, slots=True)
class IdentityMatcher:
    """Compare one case key against one patient key, each read through its aliases."""

    name: str
    case_keys: Tuple[str, ...]
    patient_keys: Tuple[str, ...]

    def matches(self, case: Mapping[str, object], patient: Mapping[str, object]) -> bool:
        case_value = first_text(case, self.case_keys)
        if case_value is None:
            return False
        return case_value == first_text(patient, self.patient_keys)


# Evaluated in order; the first matcher with any hit wins.
MATCHERS: Tuple[IdentityMatcher, ...] = (
    IdentityMatcher("record_id", PATIENT_ID_FIELDS, RECORD_ID_FIELDS),
    IdentityMatcher("patient_id", PATIENT_ID_FIELDS, PATIENT_ID_FIELDS),
    IdentityMatcher("registration_number", REGISTRATION_FIELDS, REGISTRATION_FIELDS),
)


@dataclass(frozen=True, slots=True)
class ResolvedIdentity:
    """Patient identity attached to a case, real or synthesized."""

    key: str
    display_name: str
    patient_id: Optional[str]
    registration_number: Optional[str]
    record_id: Optional[str]
    matched_by: Optional[str]

    @property
    def synthetic(self) -> bool:
        return self.matched_by is None


def display_name(record: Mapping[str, object]) -> str:
    """Return ``fullName``, joined name parts, ``patientId`` or a placeholder."""

    return (
        text_field(record, "fullName")
        or joined_name(record)
        or first_text(record, PATIENT_ID_FIELDS)
        or UNKNOWN_PATIENT
    )


def patient_key(record: Mapping[str, object]) -> Optional[str]:
    """Return the stable lookup key for a patient or case record."""

    return (
        first_text(record, PATIENT_ID_FIELDS)
        or text_field(record, "_id")
        or first_text(record, REGISTRATION_FIELDS)
    )


def _from_patient(patient: Mapping[str, object], matcher: IdentityMatcher) -> ResolvedIdentity:
    return ResolvedIdentity(
        key=patient_key(patient) or UNKNOWN_PATIENT,
        display_name=display_name(patient),
        patient_id=first_text(patient, PATIENT_ID_FIELDS),
        registration_number=first_text(patient, REGISTRATION_FIELDS),
        record_id=text_field(patient, "_id"),
        matched_by=matcher.name,
    )


def _synthesize(case: Mapping[str, object]) -> ResolvedIdentity:
    name = text_field(case, "fullName") or joined_name(case) or UNKNOWN_PATIENT
    patient_id = first_text(case, PATIENT_ID_FIELDS)
    registration = first_text(case, REGISTRATION_FIELDS)
    case_id = text_field(case, "_id")
    return ResolvedIdentity(
        key=patient_id or registration or case_id or name,
        display_name=name,
        patient_id=patient_id,
        registration_number=registration,
        record_id=case_id,
        matched_by=None,
    )


def resolve_identity(
    case: Mapping[str, object],
    patients: Optional[Iterable[Mapping[str, object]]],
) -> ResolvedIdentity:
    """Return the identity for ``case``; never fails.

    Each matcher in :data:`MATCHERS` is tried against every patient before the
    next matcher runs. Without a hit the identity is built from the case's own
    name fields.
    """

    candidates = [patient for patient in (patients or ()) if isinstance(patient, Mapping)]
    for matcher in MATCHERS:
        for patient in candidates:
            if matcher.matches(case, patient):
                return _from_patient(patient, matcher)

    logger.debug("No patient match for case %s; using embedded name", case.get("_id"))
    return _synthesize(case)


__all__ = [
    "IdentityMatcher",
    "MATCHERS",
    "PATIENT_ID_FIELDS",
    "REGISTRATION_FIELDS",
    "ResolvedIdentity",
    "display_name",
    "patient_key",
    "resolve_identity",
]
