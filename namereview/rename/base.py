"""Rename backend contract and shared helpers."""

from __future__ import annotations

import re
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Pattern, Sequence, Tuple

from ..logging import get_logger
from ..models import RenameOutcome

logger = get_logger("rename")

SYMBOL_NOT_FOUND = "Symbol not found"


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of an external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


CommandRunner = Callable[..., CommandResult]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run *args* and capture its output; a missing executable exits with 127."""
    try:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        return CommandResult(returncode=127, stderr=str(exc))
    except subprocess.TimeoutExpired:
        return CommandResult(returncode=124, stderr=f"{args[0]} timed out after {timeout}s")
    return CommandResult(completed.returncode, completed.stdout or "", completed.stderr or "")


def word_pattern(name: str) -> Pattern[str]:
    """Match *name* as a whole identifier, treating ``$`` as an identifier character."""
    return re.compile(rf"(?<![A-Za-z0-9_$]){re.escape(name)}(?![A-Za-z0-9_$])")


def count_word(text: str, name: str) -> int:
    return len(word_pattern(name).findall(text))


class RenameBackend(ABC):
    """Renames one symbol inside one file and checks the file still builds."""

    languages: Tuple[str, ...] = ()

    def supports(self, language: str) -> bool:
        return language in self.languages

    @abstractmethod
    def rename(
        self,
        file_path: Path,
        old_name: str,
        new_name: str,
        *,
        line_hint: Optional[int] = None,
        project_root: Path,
    ) -> RenameOutcome:
        """Rewrite the file in place and describe what happened."""

    @abstractmethod
    def verify(self, file_path: Path, *, project_root: Path) -> bool:
        """Return True when the renamed file passes the language check."""


__all__ = [
    "CommandResult",
    "CommandRunner",
    "RenameBackend",
    "SYMBOL_NOT_FOUND",
    "count_word",
    "run_command",
    "word_pattern",
]
