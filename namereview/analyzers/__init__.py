"""Symbol extractor implementations and lookup by language."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .base import MAX_NEIGHBORS, MAX_USAGES, SymbolExtractor
from .patterns import PatternExtractor
from .tree_sitter import TreeSitterExtractor
from ..logging import get_logger
from ..models import SymbolContext, SymbolInfo

logger = get_logger("analyzers")

_BUILTIN_FACTORIES: Dict[str, Callable[[], SymbolExtractor]] = {
    "typescript": TreeSitterExtractor,
    "javascript": TreeSitterExtractor,
    "python": lambda: PatternExtractor("python"),
    "go": lambda: PatternExtractor("go"),
}

_INSTANCES: Dict[str, SymbolExtractor] = {}


def extractor_for(language: str) -> Optional[SymbolExtractor]:
    """Return the extractor registered for *language*, if any."""
    extractor = _INSTANCES.get(language)
    if extractor is not None:
        return extractor
    factory = _BUILTIN_FACTORIES.get(language)
    if factory is None:
        return None
    extractor = factory()
    if not isinstance(extractor, SymbolExtractor):
        raise TypeError(f"Extractor factory for '{language}' did not return a SymbolExtractor")
    _INSTANCES[language] = extractor
    return extractor


def extract_symbol(
    file_path: str, name: str, content: str, language: str
) -> Optional[SymbolInfo]:
    """Describe *name* in *content*; any internal failure yields None."""
    extractor = extractor_for(language)
    if extractor is None:
        return None
    try:
        info = extractor.extract(file_path, name, content)
    except Exception as exc:
        logger.error("Error extracting %s symbol %s in %s: %s", language, name, file_path, exc)
        return None
    if info is None:
        logger.debug("Symbol %s not found in %s", name, file_path)
    return info


def build_symbol_context(
    file_path: str,
    name: str,
    content: str,
    language: str,
    *,
    change_title: str = "",
    change_description: str = "",
) -> Optional[SymbolContext]:
    """Return the full suggestion context for one identifier."""
    info = extract_symbol(file_path, name, content, language)
    if info is None:
        return None
    return SymbolContext(
        file=file_path,
        language=language,
        old_name=name,
        declaration_text=info.declaration,
        declaration_line=info.line_number,
        usage_snippets=list(info.usages[:MAX_USAGES]),
        neighbor_names=list(info.neighbors[:MAX_NEIGHBORS]),
        enclosing_scope_names=list(info.enclosing_scopes),
        type_hints=dict(info.types),
        change_title=change_title,
        change_description=change_description,
    )


__all__ = [
    "PatternExtractor",
    "SymbolExtractor",
    "TreeSitterExtractor",
    "build_symbol_context",
    "extract_symbol",
    "extractor_for",
]
