"""Prompt registry with a swappable backend.

Usage::

    prompt = get_prompt("review", "REVIEW_PROMPT")

    # Tests or deployments may install another backend:
    configure(backend=MyBackend())
"""

from __future__ import annotations

from mediscript.prompts.backends.file_backend import FilePromptBackend
from mediscript.prompts.backends.protocol import IPromptBackend

_backend: IPromptBackend | None = None

LANGUAGE_NAMES = {"es": "Spanish", "en": "English"}


def configure(*, backend: IPromptBackend | None = None) -> None:
    """Install the prompt backend. Defaults to the file backend."""
    global _backend
    _backend = backend or FilePromptBackend()


def get_prompt(category: str, name: str) -> str:
    """Look up a prompt template by category and name.

    Raises:
        KeyError: If the prompt is not found.
    """
    if _backend is None:
        configure()
    assert _backend is not None
    return _backend.get(category, name)


def language_instruction(language: str) -> str:
    """Sentence appended to prompts fixing the language of every text field."""
    lang = LANGUAGE_NAMES.get(language, language)
    return f"Write every text value in {lang}."


def reset() -> None:
    """Reset the registry to unconfigured state (for testing)."""
    global _backend
    _backend = None
