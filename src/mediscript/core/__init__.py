"""Configuration and startup checks."""

from __future__ import annotations

from mediscript.core.config import (
    APIConfig,
    AppSettings,
    GeminiConfig,
    ObservabilityConfig,
    OpenAIConfig,
    ProviderConfig,
    ReconcilerConfig,
)
from mediscript.core.startup_checks import validate_settings

__all__ = [
    "APIConfig",
    "AppSettings",
    "GeminiConfig",
    "ObservabilityConfig",
    "OpenAIConfig",
    "ProviderConfig",
    "ReconcilerConfig",
    "validate_settings",
]
