"""Diff parsing and change sources."""

from .changes import ChangedFile, ChangeSource, GitChangeSource
from .diff import MODIFICATION_WINDOW, detect_language, extract_identifiers, parse_diff

__all__ = [
    "ChangeSource",
    "ChangedFile",
    "GitChangeSource",
    "MODIFICATION_WINDOW",
    "detect_language",
    "extract_identifiers",
    "parse_diff",
]
