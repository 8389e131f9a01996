"""Tests for startup configuration validation."""

from __future__ import annotations

import logging

import pytest

from mediscript.core.config import AppSettings, GeminiConfig, OpenAIConfig, ReconcilerConfig
from mediscript.core.startup_checks import validate_settings
from mediscript.exceptions import ConfigurationError


def test_valid_settings_pass(settings: AppSettings) -> None:
    validate_settings(settings)


@pytest.mark.parametrize("key", ["", "  ", "no-key", "changeme"])
def test_missing_reviewer_key(key: str) -> None:
    settings = AppSettings(
        gemini=GeminiConfig(api_key=key),
        openai=OpenAIConfig(api_key="sk-test"),
    )
    with pytest.raises(ConfigurationError, match="MEDISCRIPT_GEMINI_API_KEY"):
        validate_settings(settings)


def test_missing_second_reviewer_key() -> None:
    settings = AppSettings(
        gemini=GeminiConfig(api_key="g-key"),
        openai=OpenAIConfig(api_key=""),
    )
    with pytest.raises(ConfigurationError, match="MEDISCRIPT_OPENAI_API_KEY"):
        validate_settings(settings)


def test_reconciler_key_checked_when_enabled() -> None:
    settings = AppSettings(
        gemini=GeminiConfig(api_key="g-key"),
        openai=OpenAIConfig(api_key="sk-test"),
        reconciler=ReconcilerConfig(api_key="changeme"),
    )
    with pytest.raises(ConfigurationError, match="MEDISCRIPT_RECONCILER_API_KEY"):
        validate_settings(settings)


def test_disabled_reconciler_warns(caplog: pytest.LogCaptureFixture) -> None:
    settings = AppSettings(
        gemini=GeminiConfig(api_key="g-key"),
        openai=OpenAIConfig(api_key="sk-test"),
        reconciler=ReconcilerConfig(enabled=False, api_key="changeme"),
    )
    with caplog.at_level(logging.WARNING):
        validate_settings(settings)
    assert "deterministic fallback" in caplog.text


def test_same_model_warns(caplog: pytest.LogCaptureFixture) -> None:
    settings = AppSettings(
        gemini=GeminiConfig(api_key="g-key", model="openai/gpt-4o-mini"),
        openai=OpenAIConfig(api_key="sk-test"),
    )
    with caplog.at_level(logging.WARNING):
        validate_settings(settings)
    assert "will not be independent" in caplog.text
