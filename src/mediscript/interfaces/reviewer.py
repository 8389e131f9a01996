"""Abstract prescription reviewer."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mediscript.models import Analysis, Patient, Prescription


class IReviewer(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier of the backing provider (``gemini``, ``openai``)."""

    @abstractmethod
    async def evaluate(self, prescription: Prescription, patient: Patient) -> Analysis:
        """Review one prescription for one patient.

        Raises ``ProviderCallError`` or ``MalformedResponse``; never returns
        a fallback verdict.
        """
