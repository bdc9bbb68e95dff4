"""Process-local stores for suggestions and usage accounting."""

from .cost_tracker import CostStats, CostTracker, MODEL_PRICING, calculate_cost
from .suggestion_cache import CacheEntry, SuggestionCache, fingerprint

__all__ = [
    "CacheEntry",
    "CostStats",
    "CostTracker",
    "MODEL_PRICING",
    "SuggestionCache",
    "calculate_cost",
    "fingerprint",
]
