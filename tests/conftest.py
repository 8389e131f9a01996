"""Shared fixtures for mediscript tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from mediscript.core.config import AppSettings, GeminiConfig, OpenAIConfig, ReconcilerConfig
from mediscript.models import Analysis, Patient, Prescription
from mediscript.prompts import registry
from tests.fakes.payloads import FIXED_NOW, analysis_payload


@pytest.fixture(autouse=True)
def _reset_prompt_registry() -> None:
    registry.reset()


@pytest.fixture
def settings() -> AppSettings:
    """Settings with real-looking keys and no env dependence."""
    return AppSettings(
        gemini=GeminiConfig(api_key="gemini-test-key"),
        openai=OpenAIConfig(api_key="sk-test-key"),
        reconciler=ReconcilerConfig(),
    )


@pytest.fixture
def patient() -> Patient:
    return Patient.model_validate(
        {
            "name": "Juan Pérez García",
            "birthDate": "1979-06-15",
            "weightKg": 78,
            "allergies": [
                {"allergen": "Penicilina", "severity": "severa", "reaction": "anafilaxia"},
                {"allergen": "Sulfas", "severity": "moderada"},
            ],
            "priorMedications": [
                {
                    "genericName": "Warfarina",
                    "status": "activo",
                    "concentration": "5mg",
                    "route": "Oral",
                    "dose": 5,
                    "unit": "mg",
                    "frequency": "24 horas",
                },
                {
                    "genericName": "Omeprazol",
                    "status": "suspendido",
                    "concentration": "20mg",
                    "route": "Oral",
                    "dose": 20,
                    "unit": "mg",
                    "frequency": "24 horas",
                },
            ],
        }
    )


@pytest.fixture
def prescription() -> Prescription:
    return Prescription.model_validate(
        {
            "diagnosis": "Faringitis bacteriana",
            "medications": [
                {
                    "name": "Amoxicilina",
                    "route": "Oral",
                    "dose": "500",
                    "unit": "mg",
                    "singleDose": False,
                    "frequency": "8",
                    "frequencyUnit": "horas",
                },
            ],
        }
    )


@pytest.fixture
def make_analysis() -> Callable[..., Analysis]:
    def _make(status: str = "approved", score: int = 90, **kwargs: Any) -> Analysis:
        payload = analysis_payload(status, score, **kwargs)
        return Analysis.model_validate(payload).model_copy(update={"timestamp": FIXED_NOW})

    return _make


@pytest.fixture
def make_raw_analysis() -> Callable[..., str]:
    def _make(status: str = "approved", score: int = 90, **kwargs: Any) -> str:
        return json.dumps(analysis_payload(status, score, **kwargs))

    return _make
