"""Unified diff interpretation and candidate identifier scanning."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Pattern, Sequence, Set

from ..logging import get_logger
from ..models import DiffLine, SourceChange

logger = get_logger("diff")

# An addition within this many lines of a deletion counts as an edited line.
MODIFICATION_WINDOW = 2

_EXTENSION_LANGUAGES: Dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".go": "go",
}

_HUNK_HEADER = re.compile(r"\+(\d+)")

_JS_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"\b(?:const|let|var|function|class|interface|type|enum)\s+([a-zA-Z_$][a-zA-Z0-9_$]*)"),
    re.compile(r"([a-zA-Z_$][a-zA-Z0-9_$]*)\s*[:=]\s*(?:function|async|\()"),
    re.compile(r"\.([a-zA-Z_$][a-zA-Z0-9_$]*)\s*\("),
)

_IDENTIFIER_PATTERNS: Dict[str, Sequence[Pattern[str]]] = {
    "typescript": _JS_PATTERNS,
    "javascript": _JS_PATTERNS,
    "python": (
        re.compile(r"\bdef\s+([a-zA-Z_][a-zA-Z0-9_]*)"),
        re.compile(r"\bclass\s+([a-zA-Z_][a-zA-Z0-9_]*)"),
        re.compile(r"([a-zA-Z_][a-zA-Z0-9_]*)\s*="),
    ),
    "go": (
        re.compile(r"\bfunc\s+(?:\([^)]*\)\s+)?([a-zA-Z_][a-zA-Z0-9_]*)"),
        re.compile(r"\btype\s+([a-zA-Z_][a-zA-Z0-9_]*)"),
        re.compile(r"\bvar\s+([a-zA-Z_][a-zA-Z0-9_]*)"),
    ),
}

_KEYWORDS = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "break", "continue",
        "return", "try", "catch", "finally", "throw", "new", "this", "super",
        "true", "false", "null", "undefined", "void", "typeof", "instanceof",
        "in", "of", "as", "is", "from", "import", "export", "default",
        "async", "await", "yield", "get", "set", "static", "public", "private",
        "protected", "readonly", "abstract", "extends", "implements",
    }
)


def detect_language(file_path: str) -> Optional[str]:
    """Return the language for *file_path* based on its extension alone."""
    suffix = PurePosixPath(file_path.replace("\\", "/")).suffix.lower()
    return _EXTENSION_LANGUAGES.get(suffix)


def parse_diff(
    diff_text: str,
    file_path: str,
    *,
    modification_window: int = MODIFICATION_WINDOW,
) -> Optional[SourceChange]:
    """Parse a unified diff fragment for *file_path*.

    Returns ``None`` for files in unsupported languages. Line numbers refer to
    the new version of the file; deletions are recorded at the position they
    were removed from and do not advance the counter.
    """
    language = detect_language(file_path)
    if language is None:
        logger.debug("Skipping unsupported file: %s", file_path)
        return None

    additions: List[DiffLine] = []
    deletions: List[DiffLine] = []
    current_line = 0
    in_hunk = False

    for raw in diff_text.split("\n"):
        if raw.startswith("@@"):
            match = _HUNK_HEADER.search(raw)
            if match:
                current_line = int(match.group(1))
                in_hunk = True
            continue
        if not in_hunk:
            continue
        if raw.startswith("+") and not raw.startswith("+++"):
            additions.append(DiffLine(line=current_line, text=raw[1:]))
            current_line += 1
        elif raw.startswith("-") and not raw.startswith("---"):
            deletions.append(DiffLine(line=current_line, text=raw[1:]))
        elif raw.startswith(" "):
            current_line += 1

    modifications = [
        addition
        for addition in additions
        if any(abs(deletion.line - addition.line) <= modification_window for deletion in deletions)
    ]

    logger.debug(
        "Parsed diff for %s: +%d -%d ~%d",
        file_path,
        len(additions),
        len(deletions),
        len(modifications),
    )
    return SourceChange(
        file_path=file_path,
        language=language,
        additions=tuple(additions),
        deletions=tuple(deletions),
        modifications=tuple(modifications),
    )


def extract_identifiers(added_code: str, language: str) -> Set[str]:
    """Scan added code for candidate identifier names.

    This is a lexical approximation; callers refine candidates with the symbol
    extractors.
    """
    identifiers: Set[str] = set()
    for pattern in _IDENTIFIER_PATTERNS.get(language, ()):
        for match in pattern.finditer(added_code):
            name = match.group(1)
            if len(name) > 1 and not is_common_keyword(name):
                identifiers.add(name)
    return identifiers


def is_common_keyword(name: str) -> bool:
    return name.lower() in _KEYWORDS


__all__ = [
    "MODIFICATION_WINDOW",
    "detect_language",
    "extract_identifiers",
    "is_common_keyword",
    "parse_diff",
]
