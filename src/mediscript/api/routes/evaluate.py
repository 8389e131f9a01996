"""Prescription evaluation endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from mediscript.models import EvaluationReport, Patient, Prescription

router = APIRouter(tags=["evaluation"])


class EvaluateRequest(BaseModel):
    """A prescription and the patient it is written for."""

    prescription: Prescription
    patient: Patient


@router.post("/evaluate", response_model=EvaluationReport)
async def evaluate(request: EvaluateRequest, req: Request) -> EvaluationReport:
    """Run both reviewers and reconcile their verdicts.

    Reviewer failures map to 502; a failed reconciliation still returns
    200 with ``degraded: true``.
    """
    orchestrator = req.app.state.orchestrator
    return await orchestrator.evaluate(request.prescription, request.patient)
