"""Nested pydantic-settings configuration for the application.

Each provider reads its own ``MEDISCRIPT_<PROVIDER>_*`` env vars::

    export MEDISCRIPT_GEMINI_API_KEY=...
    export MEDISCRIPT_OPENAI_API_KEY=sk-...
    export MEDISCRIPT_RECONCILER_MODEL=openai/gpt-4o-mini

Settings are resolved once at process start and injected into the
clients; nothing reads credentials ad hoc.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class ProviderConfig(BaseSettings):
    """Connection and sampling parameters for one backing AI provider.

    ``model`` uses LiteLLM prefixes (``gemini/``, ``openai/``, ``anthropic/``).
    """

    name: str = "provider"
    model: str = "openai/gpt-4o-mini"
    api_key: str = ""
    base_url: str | None = None
    temperature: float = 0.3
    top_p: float = 1.0
    max_tokens: int = 2000
    timeout: float = 120.0
    max_retries: int = Field(default=1, ge=1)
    retry_max_delay: float = 30.0
    # Request a JSON object response format from the provider.
    json_mode: bool = True
    # Fold the system prompt into the user message (single-prompt providers).
    system_prompt_inline: bool = False


class GeminiConfig(ProviderConfig):
    """First reviewer. Env vars use ``MEDISCRIPT_GEMINI_`` prefix."""

    model_config = {"env_prefix": "MEDISCRIPT_GEMINI_"}

    name: str = "gemini"
    model: str = "gemini/gemini-2.5-flash"
    top_p: float = 0.8
    max_tokens: int = 4096
    json_mode: bool = False
    system_prompt_inline: bool = True


class OpenAIConfig(ProviderConfig):
    """Second reviewer. Env vars use ``MEDISCRIPT_OPENAI_`` prefix."""

    model_config = {"env_prefix": "MEDISCRIPT_OPENAI_"}

    name: str = "openai"
    model: str = "openai/gpt-4o-mini"


class ReconcilerConfig(ProviderConfig):
    """Comparison agent. Env vars use ``MEDISCRIPT_RECONCILER_`` prefix.

    An empty ``api_key`` reuses the OpenAI reviewer credential.
    """

    model_config = {"env_prefix": "MEDISCRIPT_RECONCILER_"}

    name: str = "reconciler"
    model: str = "openai/gpt-3.5-turbo"
    temperature: float = 0.2
    max_tokens: int = 1500
    enabled: bool = True


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``MEDISCRIPT_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "MEDISCRIPT_OBSERVABILITY_"}

    service_name: str = "mediscript"
    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """HTTP surface configuration.

    Env vars use ``MEDISCRIPT_API_`` prefix.
    """

    model_config = {"env_prefix": "MEDISCRIPT_API_"}

    title: str = "MediScript"
    description: str = "Dual-reviewer prescription safety evaluation"
    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "MEDISCRIPT_"}

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    reconciler: ReconcilerConfig = Field(default_factory=ReconcilerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    # Language the agents are asked to answer in.
    language: Literal["es", "en"] = "es"

    def reviewer_configs(self) -> list[ProviderConfig]:
        """Reviewer configs in evaluation order (primary first)."""
        return [self.gemini, self.openai]

    def resolved_reconciler(self) -> ReconcilerConfig:
        """Reconciler config with the OpenAI credential filled in when unset."""
        if self.reconciler.api_key:
            return self.reconciler
        return self.reconciler.model_copy(update={"api_key": self.openai.api_key})
