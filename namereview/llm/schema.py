"""Schema and parsing for naming suggestions returned by the model."""

from __future__ import annotations

import json
import re
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from ..logging import get_logger

logger = get_logger("llm.schema")

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
MIN_RATIONALE_LENGTH = 10

_FENCE_OPEN = re.compile(r"^```[A-Za-z]*\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


class SafetyAssessment(BaseModel):
    """The model's own judgement of whether a rename is safe to apply unattended."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_public_surface: bool = Field(
        validation_alias=AliasChoices("isApiSurface", "isPublicSurface", "is_public_surface"),
        serialization_alias="isApiSurface",
    )
    autofix_eligible: bool = Field(
        validation_alias=AliasChoices("shouldAutofix", "autofixEligible", "autofix_eligible"),
        serialization_alias="shouldAutofix",
    )
    reason: str = Field(
        validation_alias=AliasChoices("reason", "reasonText"),
        serialization_alias="reason",
    )


class NamingSuggestion(BaseModel):
    """A proposed rename with confidence, rationale and safety metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    old_name: str = Field(
        validation_alias=AliasChoices("oldName", "old_name"), serialization_alias="oldName"
    )
    new_name: str = Field(
        validation_alias=AliasChoices("newName", "new_name"), serialization_alias="newName"
    )
    confidence: float = Field(ge=0.0, le=1.0)
    rationale: str
    safety: SafetyAssessment
    alternatives: List[str] = Field(min_length=1, max_length=5)

    def to_wire(self) -> dict:
        """Return the camelCase JSON shape used by the suggestion service."""
        return self.model_dump(by_alias=True)


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned, count=1))
    return cleaned.strip()


def parse_naming_suggestion(raw: str) -> Optional[NamingSuggestion]:
    """Parse model output into a suggestion, or None when it is not valid JSON of the right shape."""
    cleaned = strip_code_fence(raw)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("JSON parsing failed: %s", exc)
        return None
    try:
        return NamingSuggestion.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Schema validation failed: %s", exc.errors())
        return None


def rejection_reason(suggestion: NamingSuggestion) -> Optional[str]:
    """Return why a well-formed suggestion is unusable, or None when it is acceptable."""
    if suggestion.old_name == suggestion.new_name:
        return "new name equals old name"
    if len(suggestion.rationale.strip()) < MIN_RATIONALE_LENGTH:
        return "rationale too short"
    if not IDENTIFIER_PATTERN.fullmatch(suggestion.new_name):
        return f"'{suggestion.new_name}' is not a valid identifier"
    return None


def manual_suggestion(old_name: str, new_name: str) -> NamingSuggestion:
    """Wrap a rename asked for directly by a user so it can go through the rename pipeline."""
    return NamingSuggestion(
        old_name=old_name,
        new_name=new_name,
        confidence=1.0,
        rationale="Rename requested explicitly by the user",
        safety=SafetyAssessment(
            is_public_surface=False,
            autofix_eligible=True,
            reason="explicit request",
        ),
        alternatives=[new_name],
    )


__all__ = [
    "IDENTIFIER_PATTERN",
    "NamingSuggestion",
    "SafetyAssessment",
    "manual_suggestion",
    "parse_naming_suggestion",
    "rejection_reason",
    "strip_code_fence",
]
