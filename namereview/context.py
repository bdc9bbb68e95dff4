"""Turns a change under review into naming contexts for the suggestion client."""

from __future__ import annotations

import re
from typing import List

from .analyzers import build_symbol_context
from .git.changes import ChangeSource
from .git.diff import MODIFICATION_WINDOW, extract_identifiers, parse_diff
from .logging import get_logger
from .models import SymbolContext

logger = get_logger("context")

_WELL_FORMED_PATTERNS = (
    re.compile(r"^[A-Z][a-z]+(?:[A-Z][a-z]+)*$"),
    re.compile(r"^[a-z]+(?:[A-Z][a-z]+)*$"),
    re.compile(r"^[A-Z][A-Z0-9_]*$"),
    re.compile(r"^[a-z][a-z0-9_]*$"),
)

_SKIP_PATTERNS = (
    re.compile(r"^test", re.IGNORECASE),
    re.compile(r"^mock", re.IGNORECASE),
    re.compile(r"^stub", re.IGNORECASE),
    re.compile(r"^fake", re.IGNORECASE),
    re.compile(r"^dummy", re.IGNORECASE),
    re.compile(r"^_"),
)

GENERIC_NAMES = frozenset(
    {
        "data", "info", "temp", "tmp", "val", "value", "item", "obj",
        "result", "res", "ret", "output", "input", "param", "arg",
    }
)

_CAMEL_HUMP = re.compile(r"[a-z][A-Z]")


def should_review_symbol(name: str, declaration: str) -> bool:
    """Return True when *name* looks worth sending for a naming review."""
    if len(name) <= 2:
        return False
    if len(name) >= 5 and any(pattern.match(name) for pattern in _WELL_FORMED_PATTERNS):
        return False
    if any(pattern.match(name) for pattern in _SKIP_PATTERNS):
        return False
    if "import" in declaration and "type" in declaration:
        return False
    if name.lower() in GENERIC_NAMES:
        return True
    return len(name) < 5 or not _CAMEL_HUMP.search(name)


def build_contexts(
    source: ChangeSource, *, modification_window: int = MODIFICATION_WINDOW
) -> List[SymbolContext]:
    """Build contexts for every reviewable identifier added by the change."""
    contexts: List[SymbolContext] = []
    for changed in source.changed_files():
        change = parse_diff(
            changed.patch, changed.path, modification_window=modification_window
        )
        if change is None:
            continue
        try:
            content = source.read_file(changed.path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error reading %s: %s", changed.path, exc)
            continue

        identifiers = sorted(extract_identifiers(change.added_code(), change.language))
        logger.debug("Found %d identifiers in %s", len(identifiers), changed.path)

        for name in identifiers:
            context = build_symbol_context(
                changed.path,
                name,
                content,
                change.language,
                change_title=source.title,
                change_description=source.description,
            )
            if context is None:
                continue
            if not should_review_symbol(name, context.declaration_text):
                continue
            contexts.append(context)

    logger.info("Built %d naming contexts", len(contexts))
    return contexts


__all__ = ["GENERIC_NAMES", "build_contexts", "should_review_symbol"]
