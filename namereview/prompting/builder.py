"""Builds naming prompts from symbol contexts and Jinja templates."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models import SymbolContext
from .constants import (
    LANGUAGE_CONVENTIONS,
    MAX_DESCRIPTION_CHARS,
    MAX_PROMPT_NEIGHBORS,
    MAX_PROMPT_USAGES,
)


@dataclass(frozen=True)
class FewShotExample:
    """A worked example appended to the system prompt."""

    language: str
    old_name: str
    title: str
    response: str


_PROFILE_RESPONSE = {
    "oldName": "data",
    "newName": "userProfile",
    "confidence": 0.95,
    "rationale": (
        'The variable holds a user profile, not generic data. "userProfile" is more '
        "descriptive and follows TypeScript camelCase convention."
    ),
    "safety": {
        "isApiSurface": False,
        "shouldAutofix": True,
        "reason": "Local variable with clear scope and high confidence",
    },
    "alternatives": ["profileData", "fetchedProfile"],
}

_DISCOUNT_RESPONSE = {
    "oldName": "calc",
    "newName": "calculate_discount",
    "confidence": 0.92,
    "rationale": (
        "Function name should be descriptive and follow Python snake_case. "
        '"calculate_discount" clearly indicates the purpose based on the change title.'
    ),
    "safety": {
        "isApiSurface": True,
        "shouldAutofix": False,
        "reason": "Function appears to be part of public API, requires manual review",
    },
    "alternatives": ["compute_discount", "get_discount_amount"],
}

DEFAULT_EXAMPLES = (
    FewShotExample(
        "typescript", "data", "Add user profile caching", json.dumps(_PROFILE_RESPONSE, indent=2)
    ),
    FewShotExample(
        "python", "calc", "Add discount calculation", json.dumps(_DISCOUNT_RESPONSE, indent=2)
    ),
)


class PromptBuilder:
    """Renders the system instruction and per-symbol prompts."""

    SYSTEM_TEMPLATE = "system.j2"
    SYMBOL_TEMPLATE = "symbol.j2"

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        min_confidence: float = 0.85,
        examples: Sequence[FewShotExample] = (),
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.min_confidence = min_confidence
        self.examples: List[FewShotExample] = list(examples)
        self._env = self._create_env(self.templates_dir)

    def system_prompt(self) -> str:
        template = self._env.get_template(self.SYSTEM_TEMPLATE)
        return template.render(
            min_confidence=self.min_confidence,
            examples=self.examples,
        ).strip()

    def build_user_prompt(self, context: SymbolContext) -> str:
        """Render the review request for a single symbol."""
        template = self._env.get_template(self.SYMBOL_TEMPLATE)
        description = context.change_description or ""
        if len(description) > MAX_DESCRIPTION_CHARS:
            description = description[:MAX_DESCRIPTION_CHARS]
        conventions = LANGUAGE_CONVENTIONS.get(context.language, "")
        return template.render(
            context=context,
            description=description,
            conventions=conventions,
            usages=context.usage_snippets[:MAX_PROMPT_USAGES],
            neighbors=context.neighbor_names[:MAX_PROMPT_NEIGHBORS],
        ).strip()

    def _create_env(self, templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )


__all__ = ["DEFAULT_EXAMPLES", "FewShotExample", "PromptBuilder"]
