"""mediscript: dual-reviewer prescription safety evaluation.

Two independent AI reviewers assess the same prescription concurrently;
a reconciler compares their verdicts and decides whether a human must
intervene::

    from mediscript import AppSettings, create_orchestrator, validate_settings

    settings = AppSettings()
    validate_settings(settings)
    orchestrator = create_orchestrator(settings)
    report = await orchestrator.evaluate(prescription, patient)
"""

from __future__ import annotations

from mediscript.core.config import AppSettings
from mediscript.core.startup_checks import validate_settings
from mediscript.exceptions import (
    ConfigurationError,
    MalformedResponse,
    MediScriptError,
    PrescriptionValidationError,
    ProviderCallError,
    ReconciliationFailure,
)
from mediscript.factory import create_orchestrator
from mediscript.models import (
    AgreementLevel,
    Analysis,
    ComparisonResult,
    EvaluationReport,
    Patient,
    Prescription,
    ReviewStatus,
)
from mediscript.normalizer import AnalysisNormalizer
from mediscript.orchestrator import EvaluationOrchestrator
from mediscript.providers.client import LLMClient
from mediscript.reconciler import Reconciler, fallback_comparison, total_status_conflict
from mediscript.reviewers.reviewer import ReviewerClient

__all__ = [
    "AgreementLevel",
    "Analysis",
    "AnalysisNormalizer",
    "AppSettings",
    "ComparisonResult",
    "ConfigurationError",
    "EvaluationOrchestrator",
    "EvaluationReport",
    "LLMClient",
    "MalformedResponse",
    "MediScriptError",
    "Patient",
    "Prescription",
    "PrescriptionValidationError",
    "ProviderCallError",
    "Reconciler",
    "ReconciliationFailure",
    "ReviewStatus",
    "ReviewerClient",
    "create_orchestrator",
    "fallback_comparison",
    "total_status_conflict",
    "validate_settings",
]
