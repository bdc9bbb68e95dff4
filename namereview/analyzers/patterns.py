"""Line-pattern symbol extraction for languages without syntax tree support."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Pattern, Sequence

from .base import MAX_USAGES, SymbolExtractor
from ..models import SymbolInfo

_Builder = Callable[[str], Sequence[Pattern[str]]]


def _python_patterns(name: str) -> Sequence[Pattern[str]]:
    escaped = re.escape(name)
    return (
        re.compile(rf"\bdef\s+{escaped}\s*\("),
        re.compile(rf"\bclass\s+{escaped}\s*[:(]"),
        re.compile(rf"(?<![\w$.]){escaped}\s*(?::[^=]+)?=(?!=)"),
    )


def _go_patterns(name: str) -> Sequence[Pattern[str]]:
    escaped = re.escape(name)
    return (
        re.compile(rf"\bfunc\s+(?:\([^)]*\)\s+)?{escaped}\s*\("),
        re.compile(rf"\btype\s+{escaped}\s+"),
        re.compile(rf"\b(?:var|const)\s+{escaped}\s+"),
        re.compile(rf"(?<![\w$.]){escaped}\s*:="),
    )


_PATTERN_BUILDERS: Dict[str, _Builder] = {
    "python": _python_patterns,
    "go": _go_patterns,
}


class PatternExtractor(SymbolExtractor):
    """Finds a declaration by line patterns and collects literal usages.

    Neighbors, enclosing scopes and types are left empty; this is degraded
    context rather than a failure.
    """

    languages = ("python", "go")

    def __init__(self, language: str) -> None:
        if language not in _PATTERN_BUILDERS:
            raise ValueError(f"No declaration patterns for language '{language}'")
        self.language = language
        self.languages = (language,)

    def extract(self, file_path: str, name: str, content: str) -> Optional[SymbolInfo]:
        lines = content.split("\n")
        patterns = _PATTERN_BUILDERS[self.language](name)

        declaration = ""
        line_number = 0
        for index, line in enumerate(lines):
            if any(pattern.search(line) for pattern in patterns):
                declaration = line.strip()
                line_number = index + 1
                break

        if not declaration:
            return None

        usages: List[str] = []
        for index, line in enumerate(lines):
            if len(usages) >= MAX_USAGES:
                break
            if index == line_number - 1:
                continue
            if name in line:
                usages.append(line.strip())

        return SymbolInfo(
            name=name,
            declaration=declaration,
            line_number=line_number,
            usages=usages,
        )


__all__ = ["PatternExtractor"]
