"""Reconciler: merges two analyses into one ``ComparisonResult``.

Two paths:

1. A pure deterministic core (``score_difference``, ``total_status_conflict``)
   that always runs and alone decides the mandatory human-review trigger.
2. A best-effort comparison by a third agent, wrapped in an error-absorbing
   boundary. Its output only enriches the result; when it fails, the
   deterministic ``fallback_comparison`` is returned instead.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from mediscript.exceptions import MalformedResponse, ReconciliationFailure
from mediscript.hooks.session_tracker import mark_degraded, track_stage
from mediscript.models import (
    FINDING_CATEGORIES,
    AgreementLevel,
    Analysis,
    CategoryDiscrepancy,
    ComparisonResult,
    Discrepancies,
    Prescription,
    ReviewStatus,
    StatusDiscrepancy,
)
from mediscript.parsing import extract_json_object
from mediscript.prompts import get_prompt, language_instruction
from mediscript.providers.client import LLMClient

log = logging.getLogger(__name__)

# Score gap above which the fallback downgrades agreement from high to medium.
MEDIUM_AGREEMENT_GAP = 10
# Score gap above which the default summary recommends a human look.
WIDE_SCORE_GAP = 20

FALLBACK_DIFFERENCE_NOTE = "Automatic comparison unavailable"
FALLBACK_RECOMMENDATION = (
    "Automatic comparison failed. Manual review of both analyses is recommended."
)
DEFAULT_RECOMMENDATION = "Review both analyses before dispensing."

_TOTAL_CONFLICT = frozenset({ReviewStatus.APPROVED, ReviewStatus.REJECTED})


# ── Deterministic core ───────────────────────────────────────────────


def total_status_conflict(a: ReviewStatus, b: ReviewStatus) -> bool:
    """True iff one reviewer approves and the other rejects."""
    return {a, b} == _TOTAL_CONFLICT


def score_difference(a: Analysis, b: Analysis) -> int:
    return abs(a.overall_score - b.overall_score)


def fallback_agreement(conflict: bool, difference: int) -> AgreementLevel:
    if conflict:
        return AgreementLevel.LOW
    if difference > MEDIUM_AGREEMENT_GAP:
        return AgreementLevel.MEDIUM
    return AgreementLevel.HIGH


def fallback_comparison(a: Analysis, b: Analysis) -> ComparisonResult:
    """Comparison built without any external call.

    Category conflicts are the plain inequality of each category's safety
    flag, so two equally unsafe verdicts do not conflict.
    """
    conflict = total_status_conflict(a.status, b.status)
    difference = score_difference(a, b)

    categories = {
        category: CategoryDiscrepancy(
            conflict=a.findings.flag(category) != b.findings.flag(category),
            differences=[FALLBACK_DIFFERENCE_NOTE],
        )
        for category in FINDING_CATEGORIES
    }

    return ComparisonResult(
        needs_human_review=conflict,
        score_difference=difference,
        agreement=fallback_agreement(conflict, difference),
        discrepancies=Discrepancies(
            status=StatusDiscrepancy(
                primary=a.status,
                secondary=b.status,
                conflict=a.status != b.status,
            ),
            **categories,
        ),
        final_recommendation=FALLBACK_RECOMMENDATION,
        comparison_summary=(
            f"Automatic comparison could not be completed. Score difference: {difference} points."
        ),
    )


def default_summary(difference: int) -> str:
    verdict = (
        "Human review is recommended."
        if difference > WIDE_SCORE_GAP
        else "The difference is acceptable."
    )
    return f"The analyses differ by {difference} points. {verdict}"


# ── Agent output helpers ─────────────────────────────────────────────


def _as_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _as_text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def _as_agreement(value: Any) -> AgreementLevel:
    if isinstance(value, str):
        try:
            return AgreementLevel(value.strip().lower())
        except ValueError:
            pass
    return AgreementLevel.MEDIUM


def merge_agent_comparison(
    a: Analysis,
    b: Analysis,
    agent: dict[str, Any],
) -> ComparisonResult:
    """Combine the deterministic core with the agent's reply.

    The deterministic trigger is OR-ed with the agent's flag and cannot be
    overridden. Categories the agent omitted default to no conflict.
    """
    conflict = total_status_conflict(a.status, b.status)
    difference = score_difference(a, b)

    reported = agent.get("discrepancies")
    reported = reported if isinstance(reported, dict) else {}

    def _record(category: str) -> dict[str, Any]:
        record = reported.get(category)
        return record if isinstance(record, dict) else {}

    status_record = _record("status")
    status_conflict = _as_bool(status_record.get("conflict"))

    categories = {
        category: CategoryDiscrepancy(
            conflict=_as_bool(_record(category).get("conflict")) or False,
            differences=_as_str_list(_record(category).get("differences")),
        )
        for category in FINDING_CATEGORIES
    }

    return ComparisonResult(
        needs_human_review=conflict or agent.get("needsHumanReview") is True,
        score_difference=difference,
        agreement=_as_agreement(agent.get("agreement")),
        discrepancies=Discrepancies(
            status=StatusDiscrepancy(
                primary=a.status,
                secondary=b.status,
                conflict=status_conflict if status_conflict is not None else a.status != b.status,
                differences=_as_str_list(status_record.get("differences")),
            ),
            **categories,
        ),
        final_recommendation=_as_text(agent.get("finalRecommendation"), DEFAULT_RECOMMENDATION),
        comparison_summary=_as_text(agent.get("comparisonSummary"), default_summary(difference)),
    )


# ── Reconciler ───────────────────────────────────────────────────────


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


class Reconciler:
    """Compares two analyses with a third agent, falling back to rules.

    ``compare`` never raises on reconciliation problems: a failed or
    unparseable agent call yields ``fallback_comparison``. A ``None``
    client (reconciler disabled) always takes the fallback path.
    """

    def __init__(
        self,
        client: LLMClient | None,
        *,
        language: str = "es",
        labels: tuple[str, str] = ("primary", "secondary"),
    ) -> None:
        self._client = client
        self._language = language
        self._labels = labels

    def build_prompts(
        self,
        a: Analysis,
        b: Analysis,
        prescription: Prescription,
    ) -> tuple[str, str]:
        instruction = language_instruction(self._language)
        system_prompt = get_prompt("reconciliation", "RECONCILIATION_SYSTEM_PROMPT").format(
            language_instruction=instruction,
        )
        user_prompt = get_prompt("reconciliation", "RECONCILIATION_PROMPT").format(
            diagnosis=prescription.diagnosis,
            medications=", ".join(f"{m.name} {m.dose}{m.unit}" for m in prescription.medications),
            primary_block=self._analysis_block(self._labels[0], a),
            secondary_block=self._analysis_block(self._labels[1], b),
            score_difference=score_difference(a, b),
            language_instruction=instruction,
        )
        return system_prompt, user_prompt

    @staticmethod
    def _analysis_block(label: str, analysis: Analysis) -> str:
        findings = analysis.findings
        return get_prompt("reconciliation", "ANALYSIS_BLOCK").format(
            reviewer=label.upper(),
            status=analysis.status.value,
            score=analysis.overall_score,
            allergies_safe=_yes_no(findings.allergies.safe),
            interactions_safe=_yes_no(findings.interactions.safe),
            dosage_appropriate=_yes_no(findings.dosage.appropriate),
            contraindications_safe=_yes_no(findings.contraindications.safe),
            summary=analysis.summary,
            critical_alerts=", ".join(analysis.critical_alerts) or "None",
        )

    async def compare(
        self,
        a: Analysis,
        b: Analysis,
        prescription: Prescription,
    ) -> ComparisonResult:
        if self._client is None:
            log.info("Reconciler disabled, using deterministic comparison")
            mark_degraded("reconciliation_disabled")
            return fallback_comparison(a, b)

        try:
            with track_stage("reconciliation"):
                agent = await self._consult(a, b, prescription)
                result = self._merge(a, b, agent)
        except ReconciliationFailure as exc:
            log.warning("Reconciliation failed, using deterministic fallback: %s", exc)
            mark_degraded(f"reconciliation_failed: {exc}")
            return fallback_comparison(a, b)

        log.info(
            "Comparison: needs_human_review=%s score_difference=%d agreement=%s",
            result.needs_human_review,
            result.score_difference,
            result.agreement.value,
        )
        return result

    async def _consult(
        self,
        a: Analysis,
        b: Analysis,
        prescription: Prescription,
    ) -> dict[str, Any]:
        assert self._client is not None
        system_prompt, user_prompt = self.build_prompts(a, b, prescription)
        try:
            raw = await self._client.complete(user_prompt, system_prompt=system_prompt)
        except Exception as exc:
            raise ReconciliationFailure(f"comparison agent call failed: {exc}") from exc

        try:
            return extract_json_object(raw)
        except MalformedResponse as exc:
            raise ReconciliationFailure(f"comparison agent reply unparseable: {exc}") from exc

    @staticmethod
    def _merge(a: Analysis, b: Analysis, agent: dict[str, Any]) -> ComparisonResult:
        try:
            return merge_agent_comparison(a, b, agent)
        except (ValidationError, TypeError, ValueError) as exc:
            raise ReconciliationFailure(f"comparison agent reply invalid: {exc}") from exc
