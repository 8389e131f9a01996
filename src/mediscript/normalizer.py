"""Validated decode of a reviewer's raw output into an ``Analysis``."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from mediscript.exceptions import MalformedResponse
from mediscript.models import FINDING_CATEGORIES, Analysis
from mediscript.parsing import extract_json_object

log = logging.getLogger(__name__)

_LIST_FIELDS = ("recommendations", "criticalAlerts", "critical_alerts")
_FINDING_LIST_FIELDS = ("issues", "suggestions")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisNormalizer:
    """Turns raw reviewer text into a timestamped ``Analysis``.

    Repairs are limited to cosmetic issues (``null`` text lists, status
    casing). Missing verdict fields or wrongly typed safety flags are
    rejected with ``MalformedResponse``, never defaulted.

    The normalizer owns ``timestamp``: any value the reviewer sent is
    discarded and replaced with the local clock.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utcnow

    def normalize(self, raw_text: str) -> Analysis:
        payload = extract_json_object(raw_text)
        payload = self._repair(payload)

        try:
            analysis = Analysis.model_validate(payload)
        except ValidationError as exc:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
            raise MalformedResponse(
                f"Reviewer output does not match the analysis shape ({fields})",
                raw_response=raw_text,
            ) from exc

        return analysis.model_copy(update={"timestamp": self._clock()})

    @staticmethod
    def _repair(payload: dict[str, Any]) -> dict[str, Any]:
        data = dict(payload)
        data.pop("timestamp", None)

        status = data.get("status")
        if isinstance(status, str):
            data["status"] = status.strip().lower()

        for key in _LIST_FIELDS:
            if key in data and data[key] is None:
                data[key] = []

        findings = data.get("findings")
        if isinstance(findings, dict):
            findings = dict(findings)
            for category in FINDING_CATEGORIES:
                sub = findings.get(category)
                if isinstance(sub, dict):
                    sub = dict(sub)
                    for key in _FINDING_LIST_FIELDS:
                        if key in sub and sub[key] is None:
                            sub[key] = []
                    findings[category] = sub
            data["findings"] = findings

        return data
