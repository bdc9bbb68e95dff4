"""Base classes for symbol extractor plugins."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ..models import SymbolInfo

MAX_USAGES = 5
MAX_NEIGHBORS = 10


class SymbolExtractor(ABC):
    """Contract for extractors that describe one declared symbol in a file."""

    languages: Tuple[str, ...] = ()

    def supports(self, language: str) -> bool:
        """Return True when this extractor handles *language*."""
        return language in self.languages

    @abstractmethod
    def extract(self, file_path: str, name: str, content: str) -> Optional[SymbolInfo]:
        """Return symbol facts, or None when *name* is not declared in *content*."""
