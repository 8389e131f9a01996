"""Orchestrator: both reviewers concurrently, then the reconciler.

A structured concurrent join: two independent review tasks, fail-fast on
either failure (the sibling is cancelled and no partial result is
returned), then the dependent reconciliation step.
"""

from __future__ import annotations

import asyncio
import logging

from mediscript.hooks.session_tracker import end_session, start_session, track_stage
from mediscript.interfaces.reviewer import IReviewer
from mediscript.models import (
    Analysis,
    ComparisonResult,
    EvaluationReport,
    Patient,
    Prescription,
)
from mediscript.reconciler import Reconciler

log = logging.getLogger(__name__)


class EvaluationOrchestrator:
    """Runs one prescription evaluation end to end.

    Holds no per-evaluation state besides the in-progress counter, so one
    instance can serve concurrent submissions independently.
    """

    def __init__(
        self,
        primary: IReviewer,
        secondary: IReviewer,
        reconciler: Reconciler,
    ) -> None:
        self._reviewers = (primary, secondary)
        self._reconciler = reconciler
        self._active = 0

    @property
    def in_progress(self) -> bool:
        """True while at least one evaluation is running."""
        return self._active > 0

    @property
    def reviewer_names(self) -> list[str]:
        return [r.name for r in self._reviewers]

    async def run(self, prescription: Prescription, patient: Patient) -> ComparisonResult:
        """Evaluate and return only the reconciled comparison."""
        report = await self.evaluate(prescription, patient)
        return report.comparison

    async def evaluate(self, prescription: Prescription, patient: Patient) -> EvaluationReport:
        """Evaluate and return both analyses plus the comparison.

        Raises:
            ProviderCallError: a reviewer call failed.
            MalformedResponse: a reviewer's output could not be decoded.
        """
        self._active += 1
        session = start_session()
        try:
            primary, secondary = await self._review_both(prescription, patient)
            # Reconciliation failures are absorbed inside ``compare``.
            comparison = await self._reconciler.compare(primary, secondary, prescription)
        except BaseException:
            session.status = "failed"
            log.error("Evaluation %s aborted: %s", session.session_id, session.errors)
            raise
        finally:
            self._active -= 1
            end_session()

        if comparison.needs_human_review:
            log.warning(
                "Evaluation %s requires human review (%s vs %s)",
                session.session_id,
                primary.status.value,
                secondary.status.value,
            )

        return EvaluationReport(
            primary=primary,
            secondary=secondary,
            comparison=comparison,
            reviewers=self.reviewer_names,
            session_id=session.session_id,
            degraded=session.degraded,
        )

    async def _review_both(
        self,
        prescription: Prescription,
        patient: Patient,
    ) -> tuple[Analysis, Analysis]:
        tasks = [
            asyncio.create_task(self._review(reviewer, prescription, patient))
            for reviewer in self._reviewers
        ]
        try:
            primary, secondary = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Drain so a second failure is not reported as never retrieved.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return primary, secondary

    @staticmethod
    async def _review(
        reviewer: IReviewer,
        prescription: Prescription,
        patient: Patient,
    ) -> Analysis:
        with track_stage(f"review:{reviewer.name}"):
            return await reviewer.evaluate(prescription, patient)
