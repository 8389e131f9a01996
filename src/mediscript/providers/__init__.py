"""Provider transports."""

from __future__ import annotations

from mediscript.providers.client import LLMClient

__all__ = ["LLMClient"]
