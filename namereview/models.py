"""Core data models shared across namereview components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .llm.schema import NamingSuggestion

LANGUAGES: Tuple[str, ...] = ("typescript", "javascript", "python", "go")


@dataclass(frozen=True)
class DiffLine:
    """A single line of a unified diff with its line number."""

    line: int
    text: str


@dataclass(frozen=True)
class SourceChange:
    """Added, removed and modified lines for one changed file."""

    file_path: str
    language: str
    additions: Tuple[DiffLine, ...] = ()
    deletions: Tuple[DiffLine, ...] = ()
    modifications: Tuple[DiffLine, ...] = ()

    def added_code(self) -> str:
        return "\n".join(line.text for line in self.additions)


@dataclass(frozen=True)
class SymbolInfo:
    """Language-level facts about one declared symbol."""

    name: str
    declaration: str
    line_number: int
    usages: List[str] = field(default_factory=list)
    neighbors: List[str] = field(default_factory=list)
    enclosing_scopes: List[str] = field(default_factory=list)
    types: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SymbolContext:
    """Everything the suggestion service is told about one identifier."""

    file: str
    language: str
    old_name: str
    declaration_text: str
    declaration_line: int
    usage_snippets: List[str] = field(default_factory=list)
    neighbor_names: List[str] = field(default_factory=list)
    enclosing_scope_names: List[str] = field(default_factory=list)
    type_hints: Dict[str, str] = field(default_factory=dict)
    change_title: str = ""
    change_description: str = ""


@dataclass(frozen=True)
class RenameOutcome:
    """Terminal result of a rename attempt."""

    success: bool
    file: str
    old_name: str
    new_name: str
    references_updated: int = 0
    error: Optional[str] = None

    @classmethod
    def failure(cls, file: str, old_name: str, new_name: str, error: str) -> "RenameOutcome":
        return cls(
            success=False,
            file=file,
            old_name=old_name,
            new_name=new_name,
            references_updated=0,
            error=error,
        )

    def as_failed(self, error: str) -> "RenameOutcome":
        return replace(self, success=False, error=error)


@dataclass(frozen=True)
class RenameRequest:
    """One rename to apply through the rename orchestrator."""

    file_path: str
    suggestion: "NamingSuggestion"
    language: str
    line_number: Optional[int] = None
