"""Rename backends and lookup by language."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, Optional

from ..config import ToolSettings
from .base import CommandResult, RenameBackend, run_command
from .external import GoplsRenameBackend, RopeRenameBackend
from .textual import TextualRenameBackend
from .tree_sitter import TreeSitterRenameBackend

_ENTRY_POINT_GROUP = "namereview.backends"

BackendFactory = Callable[[ToolSettings], RenameBackend]

_BUILTIN_FACTORIES: Dict[str, BackendFactory] = {
    "typescript": lambda tools: TreeSitterRenameBackend(),
    "javascript": lambda tools: TreeSitterRenameBackend(),
    "python": lambda tools: RopeRenameBackend(tools),
    "go": lambda tools: GoplsRenameBackend(tools),
}

_REGISTERED: Dict[str, BackendFactory] = {}


def register_backend(language: str, factory: BackendFactory) -> None:
    """Use *factory* for *language* ahead of the built-in backends."""
    _REGISTERED[language.lower()] = factory


def unregister_backend(language: str) -> None:
    _REGISTERED.pop(language.lower(), None)


def get_backend(language: str, tools: ToolSettings | None = None) -> Optional[RenameBackend]:
    """Return a backend for *language*, or None when the language is unsupported."""
    key = language.lower()
    settings = tools or ToolSettings()
    factory = _REGISTERED.get(key) or _entry_point_factory(key) or _BUILTIN_FACTORIES.get(key)
    if factory is None:
        return None
    backend = factory(settings)
    if not isinstance(backend, RenameBackend):
        raise TypeError(f"Backend factory for '{language}' did not return a RenameBackend")
    return backend


def _entry_point_factory(language: str) -> Optional[BackendFactory]:
    for entry in _iter_entry_points():
        if entry.name.lower() != language:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load rename backend entry point '{entry.name}': {exc}") from exc
        return _coerce_factory(loaded)
    return None


def _coerce_factory(obj: object) -> BackendFactory:
    if isinstance(obj, RenameBackend):
        return lambda tools: obj
    if isinstance(obj, type) and issubclass(obj, RenameBackend):
        return lambda tools: obj()
    if callable(obj):
        return obj  # type: ignore[return-value]
    raise TypeError("Rename backend entry point must be a RenameBackend subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CommandResult",
    "GoplsRenameBackend",
    "RenameBackend",
    "RopeRenameBackend",
    "TextualRenameBackend",
    "TreeSitterRenameBackend",
    "get_backend",
    "register_backend",
    "run_command",
    "unregister_backend",
]
