"""Prompt management: registry and templates."""

from __future__ import annotations

from mediscript.prompts.registry import configure, get_prompt, language_instruction

__all__ = ["configure", "get_prompt", "language_instruction"]
