"""Async LLM client routed through LiteLLM for multi-provider support.

One client per backing provider. ``gemini/``, ``openai/`` and
``anthropic/`` model prefixes are resolved by LiteLLM transparently, so
both reviewers and the reconciling agent share this transport.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from mediscript.core.config import ProviderConfig
from mediscript.exceptions import NonRetryableError, ProviderCallError, RetryableError

log = logging.getLogger(__name__)


class LLMClient:
    """Async LLM client bound to a single provider configuration."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def provider(self) -> str:
        return self._config.name

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable (default): everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import (
            AuthenticationError,
            BadRequestError,
            NotFoundError,
        )

        non_retryable = (AuthenticationError, BadRequestError, NotFoundError)
        return not isinstance(exc, non_retryable)

    def _build_messages(self, prompt: str, system_prompt: str | None) -> list[dict[str, Any]]:
        if system_prompt and self._config.system_prompt_inline:
            return [{"role": "user", "content": f"{system_prompt}\n\n{prompt}"}]

        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Single completion, returns the content string.

        Raises:
            NonRetryableError: auth / bad request errors, raised immediately.
            RetryableError: transient errors once ``max_retries`` attempts are spent.
            ProviderCallError: the provider answered with empty or malformed content.
        """
        from litellm import acompletion

        cfg = self._config
        messages = self._build_messages(prompt, system_prompt)

        kwargs: dict[str, Any] = {
            "model": cfg.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else cfg.temperature,
            "top_p": cfg.top_p,
            "max_tokens": cfg.max_tokens,
            "timeout": cfg.timeout,
        }
        if cfg.api_key:
            kwargs["api_key"] = cfg.api_key
        if cfg.base_url:
            kwargs["api_base"] = cfg.base_url
        if cfg.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        last_error: Exception | None = None
        for attempt in range(cfg.max_retries):
            try:
                response = await acompletion(**kwargs)
            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(
                        f"{cfg.name} rejected the request: {e}", provider=cfg.name
                    ) from e

                if attempt < cfg.max_retries - 1:
                    base_wait = min(2 ** attempt, cfg.retry_max_delay)
                    wait = base_wait + random.uniform(0, base_wait * 0.5)
                    log.warning(
                        "LLM retry %d/%d for %s: %s (wait=%.1fs)",
                        attempt + 1, cfg.max_retries, cfg.name, e, wait,
                    )
                    await asyncio.sleep(wait)
                continue

            try:
                content = response.choices[0].message.content or ""
            except (IndexError, AttributeError, TypeError) as e:
                raise ProviderCallError(
                    f"{cfg.name} returned an unexpected response shape: {e}", provider=cfg.name
                ) from e
            if not isinstance(content, str):
                raise ProviderCallError(
                    f"{cfg.name} returned non-text content", provider=cfg.name
                )
            if not content.strip():
                raise ProviderCallError(f"{cfg.name} returned an empty response", provider=cfg.name)
            log.debug("LLM %s answered (%d chars)", cfg.name, len(content))
            return content

        raise RetryableError(
            f"{cfg.name} call failed after {cfg.max_retries} attempt(s): {last_error}",
            provider=cfg.name,
        ) from last_error
