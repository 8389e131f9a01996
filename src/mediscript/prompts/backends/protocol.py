"""Protocol for prompt storage backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPromptBackend(Protocol):
    """A source of prompt templates keyed by category and name."""

    def get(self, category: str, name: str) -> str:
        """Return the template or raise ``KeyError``."""
        ...
