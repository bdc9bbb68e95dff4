"""Cached, retrying client that asks the model for naming suggestions."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from ..logging import get_logger
from ..models import SymbolContext
from ..prompting import PromptBuilder
from ..stores import CostStats, CostTracker, SuggestionCache, fingerprint
from .runner import LLMError, LLMResponse, LLMRunner
from .schema import NamingSuggestion, parse_naming_suggestion, rejection_reason

logger = get_logger("llm.client")

DEFAULT_MAX_RETRIES = 2


class SuggestionClient:
    """Turns a symbol context into a validated suggestion or None.

    Any failure inside an attempt (transport errors, empty output, malformed
    JSON) is retried with exponential backoff (1s, 2s, 4s, ...). A suggestion
    that parses but fails the semantic checks, or that renames a different
    symbol than the one asked about, is final for this context and is not
    retried. The caller never sees an exception from :meth:`ask`.
    """

    def __init__(
        self,
        runner: LLMRunner,
        *,
        cache: SuggestionCache | None = None,
        tracker: CostTracker | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        prompt_builder: PromptBuilder | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.runner = runner
        self.cache = cache if cache is not None else SuggestionCache()
        self.tracker = tracker if tracker is not None else CostTracker()
        self.max_retries = max_retries
        self.prompt_builder = prompt_builder or PromptBuilder()
        self._sleep = sleep

    async def ask(self, context: SymbolContext) -> Optional[NamingSuggestion]:
        key = fingerprint(context)
        cached = self.cache.get(key)
        if cached is not None:
            self.tracker.record_cache_hit()
            return cached
        self.tracker.record_cache_miss()

        system = self.prompt_builder.system_prompt()
        prompt = self.prompt_builder.build_user_prompt(context)
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await self._complete(prompt, system)
                suggestion = parse_naming_suggestion(response.content)
                if suggestion is None:
                    raise LLMError("Response did not match the suggestion schema")
            except Exception as exc:
                last_error = exc
                logger.debug(
                    "Suggestion attempt %d/%d for %s failed: %s",
                    attempt + 1,
                    self.max_retries + 1,
                    context.old_name,
                    exc,
                )
                if attempt < self.max_retries:
                    await self._sleep(2**attempt)
                continue

            if suggestion.old_name != context.old_name:
                logger.warning(
                    "Rejected suggestion for %s: it names %s instead",
                    context.old_name,
                    suggestion.old_name,
                )
                return None

            reason = rejection_reason(suggestion)
            if reason is not None:
                logger.warning("Rejected suggestion for %s: %s", context.old_name, reason)
                return None

            self.tracker.record_call(
                self.runner.model,
                prompt_tokens=response.prompt_tokens,
                completion_tokens=response.completion_tokens,
                total_tokens=response.total_tokens or None,
            )
            self.cache.store(key, suggestion)
            return suggestion

        logger.error(
            "Failed to get suggestion for %s after %d attempts: %s",
            context.old_name,
            self.max_retries + 1,
            last_error,
        )
        return None

    async def _complete(self, prompt: str, system: str) -> LLMResponse:
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None, lambda: self.runner.complete(prompt, system=system)
        )
        if not response.content or not response.content.strip():
            raise LLMError("Empty response from suggestion service")
        return response

    def stats(self) -> CostStats:
        return self.tracker.snapshot()

    def clear_cache(self) -> None:
        self.cache.clear()

    def reset_stats(self) -> None:
        self.tracker.reset()


__all__ = ["DEFAULT_MAX_RETRIES", "SuggestionClient"]
