"""Prompt construction for naming suggestions."""

from .builder import DEFAULT_EXAMPLES, FewShotExample, PromptBuilder

__all__ = ["DEFAULT_EXAMPLES", "FewShotExample", "PromptBuilder"]
