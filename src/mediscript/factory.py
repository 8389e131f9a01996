"""Wire settings into a ready-to-run orchestrator."""

from __future__ import annotations

from mediscript.core.config import AppSettings
from mediscript.normalizer import AnalysisNormalizer
from mediscript.orchestrator import EvaluationOrchestrator
from mediscript.providers.client import LLMClient
from mediscript.reconciler import Reconciler
from mediscript.reviewers.reviewer import ReviewerClient


def create_orchestrator(settings: AppSettings) -> EvaluationOrchestrator:
    """Build both reviewers and the reconciler from validated settings.

    Call ``validate_settings`` first; this function does not check
    credentials.
    """
    normalizer = AnalysisNormalizer()
    primary_cfg, secondary_cfg = settings.reviewer_configs()

    primary = ReviewerClient(LLMClient(primary_cfg), normalizer, language=settings.language)
    secondary = ReviewerClient(LLMClient(secondary_cfg), normalizer, language=settings.language)

    reconciler_client = (
        LLMClient(settings.resolved_reconciler()) if settings.reconciler.enabled else None
    )
    reconciler = Reconciler(
        reconciler_client,
        language=settings.language,
        labels=(primary.name, secondary.name),
    )
    return EvaluationOrchestrator(primary, secondary, reconciler)
