"""Suggestion service adapters."""

from .client import SuggestionClient
from .runner import LLMError, LLMRequest, LLMResponse, LLMRunner
from .schema import NamingSuggestion, SafetyAssessment, parse_naming_suggestion

__all__ = [
    "LLMError",
    "LLMRequest",
    "LLMResponse",
    "LLMRunner",
    "NamingSuggestion",
    "SafetyAssessment",
    "SuggestionClient",
    "parse_naming_suggestion",
]
