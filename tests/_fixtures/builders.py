"""Helpers for constructing suggestions, change sources and fake runners in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

from namereview.git.changes import ChangedFile
from namereview.llm.runner import LLMResponse
from namereview.llm.schema import NamingSuggestion


def suggestion_payload(
    old_name: str = "data",
    new_name: str = "userProfile",
    *,
    confidence: float = 0.95,
    public: bool = False,
    autofix: bool = True,
    rationale: str = "The value holds the fetched user profile",
) -> Dict[str, object]:
    """Return the camelCase JSON shape the model is asked to produce."""
    return {
        "oldName": old_name,
        "newName": new_name,
        "confidence": confidence,
        "rationale": rationale,
        "safety": {
            "isApiSurface": public,
            "shouldAutofix": autofix,
            "reason": "local variable",
        },
        "alternatives": [new_name, f"{new_name}Data"],
    }


def make_suggestion(old_name: str = "data", new_name: str = "userProfile", **kwargs) -> NamingSuggestion:
    return NamingSuggestion.model_validate(suggestion_payload(old_name, new_name, **kwargs))


class FakeChangeSource:
    """In-memory change source: file contents plus one patch per file."""

    def __init__(
        self,
        root: Path,
        files: Mapping[str, str],
        patches: Mapping[str, str],
        *,
        title: str = "Load user profile",
        description: str = "",
    ) -> None:
        self.root = root
        self.title = title
        self.description = description
        self._patches = dict(patches)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def changed_files(self) -> List[ChangedFile]:
        return [ChangedFile(path=path, patch=patch) for path, patch in self._patches.items()]

    def read_file(self, path: str) -> str:
        return (self.root / path).read_text(encoding="utf-8")


class ScriptedRunner:
    """Stands in for LLMRunner, replaying queued responses or exceptions."""

    def __init__(self, responses: Sequence[object], *, model: str = "gpt-4o-mini") -> None:
        self._responses = list(responses)
        self.model = model
        self.calls: List[Dict[str, object]] = []

    def complete(self, prompt: str, *, system: str | None = None) -> LLMResponse:
        self.calls.append({"prompt": prompt, "system": system})
        if not self._responses:
            raise AssertionError("ScriptedRunner ran out of responses")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, dict):
            return LLMResponse(
                content=json.dumps(item),
                prompt_tokens=1000,
                completion_tokens=500,
                total_tokens=1500,
            )
        return LLMResponse(content=str(item), prompt_tokens=10, completion_tokens=5, total_tokens=15)


__all__ = [
    "FakeChangeSource",
    "ScriptedRunner",
    "make_suggestion",
    "suggestion_payload",
]
