"""AI-backed prescription reviewer: one instance per provider."""

from __future__ import annotations

import logging
from datetime import date

from mediscript.interfaces.reviewer import IReviewer
from mediscript.models import Analysis, Patient, Prescription
from mediscript.normalizer import AnalysisNormalizer
from mediscript.parsing import strip_code_fences
from mediscript.prompts import get_prompt, language_instruction
from mediscript.providers.client import LLMClient

log = logging.getLogger(__name__)

_NONE = "None"


def build_review_prompts(
    prescription: Prescription,
    patient: Patient,
    *,
    language: str = "es",
    today: date | None = None,
) -> tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for one review."""
    instruction = language_instruction(language)
    active = [m.generic_name for m in patient.active_medications()]

    system_prompt = get_prompt("review", "REVIEW_SYSTEM_PROMPT").format(
        language_instruction=instruction,
    )
    user_prompt = get_prompt("review", "REVIEW_PROMPT").format(
        patient_name=patient.name,
        age=patient.age(today),
        weight_kg=f"{patient.weight_kg:g}",
        allergies=", ".join(patient.allergen_names()) or _NONE,
        active_medications=", ".join(active) or _NONE,
        diagnosis=prescription.diagnosis,
        medications="; ".join(m.describe() for m in prescription.medications),
        language_instruction=instruction,
    )
    return system_prompt, user_prompt


class ReviewerClient(IReviewer):
    """Sends the review instruction to one provider and decodes its verdict.

    Performs exactly one outbound request per evaluation (unless the
    provider config raises ``max_retries``). Provider failures surface as
    ``ProviderCallError``; undecodable output as ``MalformedResponse``.
    """

    def __init__(
        self,
        client: LLMClient,
        normalizer: AnalysisNormalizer | None = None,
        *,
        language: str = "es",
    ) -> None:
        self._client = client
        self._normalizer = normalizer or AnalysisNormalizer()
        self._language = language

    @property
    def name(self) -> str:
        return self._client.provider

    async def evaluate(self, prescription: Prescription, patient: Patient) -> Analysis:
        system_prompt, user_prompt = build_review_prompts(
            prescription, patient, language=self._language
        )

        log.info("Reviewer %s evaluating prescription (model=%s)", self.name, self._client.model)
        raw = await self._client.complete(user_prompt, system_prompt=system_prompt)

        analysis = self._normalizer.normalize(strip_code_fences(raw))
        log.info(
            "Reviewer %s verdict: status=%s score=%d alerts=%d",
            self.name,
            analysis.status.value,
            analysis.overall_score,
            len(analysis.critical_alerts),
        )
        return analysis
