"""End-to-end evaluation: real reviewers and reconciler over faked transports."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mediscript.core.config import AppSettings
from mediscript.exceptions import MalformedResponse
from mediscript.factory import create_orchestrator
from mediscript.models import AgreementLevel, Patient, Prescription, ReviewStatus
from mediscript.normalizer import AnalysisNormalizer
from mediscript.orchestrator import EvaluationOrchestrator
from mediscript.reconciler import FALLBACK_RECOMMENDATION, Reconciler
from mediscript.reviewers.reviewer import ReviewerClient
from tests.fakes.fake_llm import FakeLLMClient
from tests.fakes.payloads import FIXED_NOW, agent_reply


def _pipeline(
    primary: list, secondary: list, reconciler: list | None
) -> tuple[EvaluationOrchestrator, FakeLLMClient | None]:
    normalizer = AnalysisNormalizer(clock=lambda: FIXED_NOW)
    agent = FakeLLMClient(reconciler, provider="reconciler") if reconciler is not None else None
    orchestrator = EvaluationOrchestrator(
        ReviewerClient(FakeLLMClient(primary, provider="gemini"), normalizer),  # type: ignore[arg-type]
        ReviewerClient(FakeLLMClient(secondary, provider="openai"), normalizer),  # type: ignore[arg-type]
        Reconciler(agent, labels=("gemini", "openai")),  # type: ignore[arg-type]
    )
    return orchestrator, agent


@pytest.mark.asyncio
async def test_allergy_conflict_requires_human_review(
    prescription: Prescription, patient: Patient, make_raw_analysis
) -> None:
    orchestrator, agent = _pipeline(
        [make_raw_analysis("approved", 85)],
        [
            make_raw_analysis(
                "rejected",
                15,
                allergies_safe=False,
                allergy_issues=["Penicillin allergy: amoxicillin is a penicillin"],
            )
        ],
        [json.dumps(agent_reply(needs_human_review=False, agreement="low"))],
    )

    report = await orchestrator.evaluate(prescription, patient)

    assert report.primary.status == ReviewStatus.APPROVED
    assert report.secondary.findings.allergies.issues
    assert report.primary.timestamp == FIXED_NOW
    assert report.comparison.needs_human_review is True
    assert report.comparison.score_difference == 70
    assert report.degraded is False
    assert agent is not None and "GEMINI" in agent.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_agreement_without_review(
    prescription: Prescription, patient: Patient, make_raw_analysis
) -> None:
    orchestrator, _ = _pipeline(
        [make_raw_analysis("approved", 92)],
        [f"```json\n{make_raw_analysis('approved', 88)}\n```"],
        [json.dumps(agent_reply())],
    )

    report = await orchestrator.evaluate(prescription, patient)

    assert report.comparison.needs_human_review is False
    assert report.comparison.agreement == AgreementLevel.HIGH


@pytest.mark.asyncio
async def test_garbled_agent_reply_degrades(
    prescription: Prescription, patient: Patient, make_raw_analysis
) -> None:
    orchestrator, _ = _pipeline(
        [make_raw_analysis("warning", 70)],
        [make_raw_analysis("warning", 55)],
        ["Sorry, I cannot help with that."],
    )

    report = await orchestrator.evaluate(prescription, patient)

    assert report.degraded is True
    assert report.comparison.agreement == AgreementLevel.MEDIUM
    assert report.comparison.final_recommendation == FALLBACK_RECOMMENDATION


@pytest.mark.asyncio
async def test_malformed_reviewer_output_fails_evaluation(
    prescription: Prescription, patient: Patient, make_raw_analysis
) -> None:
    payload = json.loads(make_raw_analysis("approved", 90))
    payload["findings"]["allergies"]["safe"] = "yes"
    orchestrator, agent = _pipeline(
        [make_raw_analysis("approved", 90)],
        [json.dumps(payload)],
        [json.dumps(agent_reply())],
    )

    with pytest.raises(MalformedResponse):
        await orchestrator.evaluate(prescription, patient)

    assert agent is not None and agent.calls == []


def _mock_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.mark.asyncio
async def test_factory_wires_three_providers(
    settings: AppSettings, prescription: Prescription, patient: Patient, make_raw_analysis
) -> None:
    replies = {
        "gemini/gemini-2.5-flash": make_raw_analysis("approved", 90),
        "openai/gpt-4o-mini": make_raw_analysis("warning", 75),
        "openai/gpt-3.5-turbo": json.dumps(agent_reply(agreement="medium")),
    }

    async def _fake_acompletion(**kwargs: Any) -> MagicMock:
        return _mock_response(replies[kwargs["model"]])

    orchestrator = create_orchestrator(settings)
    with patch("litellm.acompletion", new=AsyncMock(side_effect=_fake_acompletion)) as mock_acomp:
        report = await orchestrator.evaluate(prescription, patient)

    assert report.reviewers == ["gemini", "openai"]
    assert report.comparison.agreement == AgreementLevel.MEDIUM
    assert report.comparison.score_difference == 15
    assert mock_acomp.call_count == 3
    reconciler_call = next(
        c for c in mock_acomp.call_args_list if c.kwargs["model"] == "openai/gpt-3.5-turbo"
    )
    assert reconciler_call.kwargs["api_key"] == "sk-test-key"
