"""Token and cost accounting for suggestion requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, NamedTuple


class ModelPrice(NamedTuple):
    """USD price per one million tokens."""

    input: float
    output: float


DEFAULT_PRICING_MODEL = "gpt-4o-mini"

MODEL_PRICING: Dict[str, ModelPrice] = {
    "gpt-4o-mini": ModelPrice(input=0.15, output=0.60),
    "gpt-4o": ModelPrice(input=2.50, output=10.00),
    "gpt-4-turbo": ModelPrice(input=10.00, output=30.00),
    "gpt-3.5-turbo": ModelPrice(input=0.50, output=1.50),
}


def calculate_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Estimate the USD cost of one request; unknown models use the default row."""
    price = MODEL_PRICING.get(model, MODEL_PRICING[DEFAULT_PRICING_MODEL])
    return (prompt_tokens / 1_000_000) * price.input + (
        completion_tokens / 1_000_000
    ) * price.output


@dataclass(frozen=True)
class CostStats:
    """Snapshot of accumulated usage."""

    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    api_calls: int = 0
    cache_hit_rate: float = 0.0


class CostTracker:
    """Accumulates usage counters until reset."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._total_tokens = 0
        self._estimated_cost = 0.0
        self._api_calls = 0
        self._cache_hits = 0
        self._cache_misses = 0

    def record_call(
        self,
        model: str,
        *,
        prompt_tokens: int = 0,
        completion_tokens: int = 0,
        total_tokens: int | None = None,
    ) -> None:
        self._api_calls += 1
        self._total_tokens += (
            total_tokens if total_tokens is not None else prompt_tokens + completion_tokens
        )
        self._estimated_cost += calculate_cost(model, prompt_tokens, completion_tokens)

    def record_cache_hit(self) -> None:
        self._cache_hits += 1

    def record_cache_miss(self) -> None:
        self._cache_misses += 1

    def snapshot(self) -> CostStats:
        lookups = self._cache_hits + self._cache_misses
        return CostStats(
            total_tokens=self._total_tokens,
            estimated_cost_usd=self._estimated_cost,
            api_calls=self._api_calls,
            cache_hit_rate=self._cache_hits / lookups if lookups else 0.0,
        )


__all__ = [
    "CostStats",
    "CostTracker",
    "DEFAULT_PRICING_MODEL",
    "MODEL_PRICING",
    "ModelPrice",
    "calculate_cost",
]
