"""Unit tests for data models."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from mediscript.models import (
    Analysis,
    CategoryDiscrepancy,
    Patient,
    PrescribedMedication,
    Prescription,
    ReviewStatus,
)


class TestPatient:
    def test_age_before_birthday(self, patient: Patient) -> None:
        assert patient.age(date(2026, 6, 14)) == 46

    def test_age_on_birthday(self, patient: Patient) -> None:
        assert patient.age(date(2026, 6, 15)) == 47

    def test_active_medications_filters_status(self, patient: Patient) -> None:
        active = patient.active_medications()
        assert [m.generic_name for m in active] == ["Warfarina"]

    def test_active_status_is_case_insensitive(self) -> None:
        p = Patient(
            name="Ana",
            birth_date=date(1990, 1, 1),
            weight_kg=60,
            prior_medications=[{"genericName": "Metformina", "status": " Active "}],
        )
        assert len(p.active_medications()) == 1

    def test_numeric_dose_coerced_to_string(self, patient: Patient) -> None:
        assert patient.prior_medications[0].dose == "5"

    def test_allergen_names(self, patient: Patient) -> None:
        assert patient.allergen_names() == ["Penicilina", "Sulfas"]

    def test_rejects_non_positive_weight(self) -> None:
        with pytest.raises(ValidationError):
            Patient(name="Ana", birth_date=date(1990, 1, 1), weight_kg=0)

    def test_rejects_future_birth_date(self) -> None:
        with pytest.raises(ValidationError, match="future"):
            Patient(name="Ana", birth_date=date.today() + timedelta(days=1), weight_kg=60)

    def test_accepts_birth_today(self) -> None:
        newborn = Patient(name="Bebé", birth_date=date.today(), weight_kg=3.2)
        assert newborn.age() == 0


class TestPrescription:
    def _med(self, **overrides: object) -> dict[str, object]:
        med: dict[str, object] = {
            "name": "Ibuprofeno",
            "route": "Oral",
            "dose": "400",
            "unit": "mg",
            "frequency": "8",
            "frequencyUnit": "horas",
        }
        med.update(overrides)
        return med

    def test_requires_at_least_one_medication(self) -> None:
        with pytest.raises(ValidationError):
            Prescription(diagnosis="Cefalea", medications=[])

    def test_diagnosis_too_short(self) -> None:
        with pytest.raises(ValidationError):
            Prescription(diagnosis=" ab ", medications=[self._med()])

    def test_frequency_required_unless_single_dose(self) -> None:
        with pytest.raises(ValidationError, match="frequency is required"):
            PrescribedMedication.model_validate(self._med(frequency=""))

    def test_single_dose_without_frequency(self) -> None:
        med = PrescribedMedication.model_validate(self._med(frequency=None, singleDose=True))
        assert med.single_dose is True
        assert "single dose" in med.describe()

    def test_empty_route_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PrescribedMedication.model_validate(self._med(route=""))

    def test_describe_includes_frequency(self) -> None:
        med = PrescribedMedication.model_validate(self._med())
        assert med.describe() == "Ibuprofeno 400mg (Oral), every 8 horas"


class TestAnalysis:
    def test_camel_case_roundtrip(self, make_analysis) -> None:
        analysis = make_analysis("warning", 70)
        dumped = analysis.model_dump(by_alias=True, mode="json")
        assert dumped["overallScore"] == 70
        assert "criticalAlerts" in dumped
        assert Analysis.model_validate(dumped) == analysis

    def test_frozen(self, make_analysis) -> None:
        analysis = make_analysis()
        with pytest.raises(ValidationError):
            analysis.overall_score = 10  # type: ignore[misc]

    def test_findings_flag_uses_appropriate_for_dosage(self, make_analysis) -> None:
        analysis = make_analysis(dosage_appropriate=False)
        assert analysis.findings.flag("dosage") is False
        assert analysis.findings.flag("allergies") is True

    def test_findings_flag_unknown_category(self, make_analysis) -> None:
        with pytest.raises(KeyError):
            make_analysis().findings.flag("pricing")

    def test_status_and_score_not_cross_validated(self, make_analysis) -> None:
        analysis = make_analysis("approved", 10)
        assert analysis.status == ReviewStatus.APPROVED
        assert analysis.overall_score == 10

    def test_score_bounds(self, make_analysis) -> None:
        payload = make_analysis().model_dump(by_alias=True)
        payload["overallScore"] = 101
        with pytest.raises(ValidationError):
            Analysis.model_validate(payload)


class TestCategoryDiscrepancy:
    def test_defaults(self) -> None:
        record = CategoryDiscrepancy()
        assert record.conflict is False
        assert record.differences == []
