"""Canned-response LLM client for tests, no LiteLLM calls needed.

Usage::

    client = FakeLLMClient(responses=['{"status": "approved", ...}'])
    reviewer = ReviewerClient(client)
    await reviewer.evaluate(prescription, patient)

    assert client.calls[0]["system_prompt"]
"""

from __future__ import annotations

import asyncio
from typing import Any


class FakeLLMClient:
    """Duck-typed stand-in for ``LLMClient``.

    Each ``complete`` call consumes the next entry of ``responses``; an
    entry that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        responses: list[str | BaseException] | None = None,
        *,
        provider: str = "fake",
        model: str = "fake/model",
        default_response: str = "{}",
        delay: float = 0.0,
    ) -> None:
        self._responses: list[str | BaseException] = list(responses or [])
        self._default = default_response
        self._delay = delay
        self.provider = provider
        self.model = model
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        if self._delay:
            await asyncio.sleep(self._delay)
        response = self._responses.pop(0) if self._responses else self._default
        if isinstance(response, BaseException):
            raise response
        return response
