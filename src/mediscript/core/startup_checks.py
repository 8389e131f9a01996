"""Startup validation: fail-fast on missing provider credentials."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mediscript.exceptions import ConfigurationError

if TYPE_CHECKING:
    from mediscript.core.config import AppSettings, ProviderConfig

log = logging.getLogger(__name__)

_PLACEHOLDER_KEYS = frozenset({"", "no-key", "changeme"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ConfigurationError on fatal misconfig."""
    for config in settings.reviewer_configs():
        _check_api_key(config)
    _check_distinct_reviewers(settings)
    _check_reconciler(settings)


def _check_api_key(config: ProviderConfig) -> None:
    """Reject missing or placeholder API keys."""
    if config.api_key.strip() in _PLACEHOLDER_KEYS:
        raise ConfigurationError(
            f"MEDISCRIPT_{config.name.upper()}_API_KEY is required for reviewer '{config.name}'. "
            f"Set it via environment variable or secrets manager."
        )


def _check_distinct_reviewers(settings: AppSettings) -> None:
    """Warn when both reviewers point at the same model."""
    if settings.gemini.model == settings.openai.model:
        log.warning(
            "Both reviewers use model %s; the two verdicts will not be independent.",
            settings.gemini.model,
        )


def _check_reconciler(settings: AppSettings) -> None:
    """A disabled reconciler is legal but always yields the fallback comparison."""
    if not settings.reconciler.enabled:
        log.warning(
            "MEDISCRIPT_RECONCILER_ENABLED=false; comparisons will use the deterministic fallback only."
        )
        return
    _check_api_key(settings.resolved_reconciler())
