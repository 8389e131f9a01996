"""Reviewer fakes returning fixed analyses or raising."""

from __future__ import annotations

import asyncio

from mediscript.interfaces.reviewer import IReviewer
from mediscript.models import Analysis, Patient, Prescription


class FakeReviewer(IReviewer):
    """Returns ``analysis`` after ``delay`` seconds, or raises ``error``."""

    def __init__(
        self,
        name: str,
        analysis: Analysis | None = None,
        *,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._analysis = analysis
        self._error = error
        self._delay = delay
        self.calls = 0
        self.cancelled = False

    @property
    def name(self) -> str:
        return self._name

    async def evaluate(self, prescription: Prescription, patient: Patient) -> Analysis:
        self.calls += 1
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self._error is not None:
            raise self._error
        assert self._analysis is not None
        return self._analysis
