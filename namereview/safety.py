"""Decides which suggestions may be applied without a human."""

from __future__ import annotations

from .llm.schema import NamingSuggestion

AUTO_APPLY_CONFIDENCE = 0.85
COLLECT_THRESHOLD = 0.3


def should_auto_apply(
    suggestion: NamingSuggestion, *, min_confidence: float = AUTO_APPLY_CONFIDENCE
) -> bool:
    """True only for confident, model-approved renames of non-public symbols."""
    return (
        suggestion.confidence >= min_confidence
        and suggestion.safety.autofix_eligible
        and not suggestion.safety.is_public_surface
    )


def is_collectable(
    suggestion: NamingSuggestion, *, threshold: float = COLLECT_THRESHOLD
) -> bool:
    return suggestion.confidence >= threshold


__all__ = ["AUTO_APPLY_CONFIDENCE", "COLLECT_THRESHOLD", "is_collectable", "should_auto_apply"]
