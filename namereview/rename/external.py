"""Rename backends that drive external language tooling (rope, gopls)."""

from __future__ import annotations

import os
from abc import abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..config import ToolSettings
from ..models import RenameOutcome
from .base import (
    SYMBOL_NOT_FOUND,
    CommandResult,
    CommandRunner,
    RenameBackend,
    count_word,
    logger,
    run_command,
    word_pattern,
)
from .textual import TextualRenameBackend

ROPE_RENAME_SCRIPT = """
import re
import sys

from rope.base.project import Project
from rope.refactor.rename import Rename

root, path, old, new, line = sys.argv[1:6]
project = Project(root)
try:
    resource = project.get_file(path)
    content = resource.read()
    pattern = re.compile(r"(?<![A-Za-z0-9_])" + re.escape(old) + r"(?![A-Za-z0-9_])")
    start = 0
    if int(line) > 0:
        start = sum(len(part) for part in content.splitlines(True)[: int(line) - 1])
    match = pattern.search(content, start) or pattern.search(content)
    if match is None:
        print("ERROR: Symbol not found")
        sys.exit(1)
    changes = Rename(project, resource, match.start()).get_changes(new)
    project.do(changes)
    print("SUCCESS")
except Exception as exc:
    print("ERROR: " + str(exc))
    sys.exit(1)
finally:
    project.close()
"""


class _ToolBackend(RenameBackend):
    """Shared plumbing for backends that shell out and degrade to text replacement."""

    def __init__(
        self,
        tools: ToolSettings | None = None,
        *,
        runner: CommandRunner = run_command,
        fallback: RenameBackend | None = None,
    ) -> None:
        self.tools = tools or ToolSettings()
        self._runner = runner
        self.fallback = fallback or TextualRenameBackend()
        self._available: Optional[bool] = None

    def _run(self, *args: str, cwd: Path | None = None) -> CommandResult:
        return self._runner(list(args), cwd=cwd, timeout=self.tools.command_timeout)

    def available(self) -> bool:
        if self._available is None:
            self._available = self._detect()
        return self._available

    @abstractmethod
    def _detect(self) -> bool:
        """Return True when the external tool can be used."""

    @staticmethod
    def _succeeded(file_path: Path, old_name: str, new_name: str) -> RenameOutcome:
        content = file_path.read_text(encoding="utf-8")
        return RenameOutcome(
            success=True,
            file=str(file_path),
            old_name=old_name,
            new_name=new_name,
            references_updated=count_word(content, new_name),
        )


class RopeRenameBackend(_ToolBackend):
    """Python renames through rope, run by the configured interpreter."""

    languages = ("python",)

    def _detect(self) -> bool:
        return self._run(self.tools.python, "-c", "import rope").ok

    def rename(
        self,
        file_path: Path,
        old_name: str,
        new_name: str,
        *,
        line_hint: Optional[int] = None,
        project_root: Path,
    ) -> RenameOutcome:
        logger.info("Renaming Python symbol %s -> %s in %s", old_name, new_name, file_path)
        if not self.available():
            logger.warning("rope library not found, falling back to textual replacement")
            return self.fallback.rename(
                file_path, old_name, new_name, line_hint=line_hint, project_root=project_root
            )

        relative = os.path.relpath(file_path, project_root)
        result = self._run(
            self.tools.python,
            "-c",
            ROPE_RENAME_SCRIPT,
            str(project_root),
            relative,
            old_name,
            new_name,
            str(line_hint or 0),
            cwd=project_root,
        )
        if result.ok and "SUCCESS" in result.stdout:
            return self._succeeded(file_path, old_name, new_name)

        error = (result.stderr or result.stdout).strip() or "rope rename failed"
        if "Symbol not found" in error:
            error = SYMBOL_NOT_FOUND
        logger.error("Python rename failed: %s", error)
        return RenameOutcome.failure(str(file_path), old_name, new_name, error)

    def verify(self, file_path: Path, *, project_root: Path) -> bool:
        result = self._run(self.tools.python, "-m", "py_compile", str(file_path), cwd=project_root)
        if not result.ok or result.stderr.strip():
            logger.warning("Python syntax errors in %s: %s", file_path, result.stderr.strip())
            return False
        return True


class GoplsRenameBackend(_ToolBackend):
    """Go renames through ``gopls rename -w``."""

    languages = ("go",)

    def _detect(self) -> bool:
        return self._run(self.tools.gopls, "version").ok

    def rename(
        self,
        file_path: Path,
        old_name: str,
        new_name: str,
        *,
        line_hint: Optional[int] = None,
        project_root: Path,
    ) -> RenameOutcome:
        logger.info("Renaming Go symbol %s -> %s in %s", old_name, new_name, file_path)
        if not self.available():
            logger.warning("gopls not found, falling back to textual replacement")
            return self.fallback.rename(
                file_path, old_name, new_name, line_hint=line_hint, project_root=project_root
            )

        lines = file_path.read_text(encoding="utf-8").split("\n")
        position = self._locate(lines, old_name, line_hint)
        if isinstance(position, str):
            return RenameOutcome.failure(str(file_path), old_name, new_name, position)
        line, column = position

        result = self._run(
            self.tools.gopls,
            "rename",
            "-w",
            f"{file_path}:{line}:{column}",
            new_name,
            cwd=project_root,
        )
        if not result.ok or _has_errors(result.stderr):
            error = (result.stderr or result.stdout).strip() or "gopls rename failed"
            logger.error("Go rename failed: %s", error)
            return RenameOutcome.failure(str(file_path), old_name, new_name, error)
        return self._succeeded(file_path, old_name, new_name)

    def verify(self, file_path: Path, *, project_root: Path) -> bool:
        directory = os.path.relpath(file_path.parent, project_root)
        target = "./" + directory.replace(os.sep, "/") if directory != "." else "."
        result = self._run(self.tools.go, "build", target, cwd=project_root)
        if not result.ok or _has_errors(result.stderr):
            logger.warning("Go compilation errors: %s", result.stderr.strip())
            return False
        return True

    @staticmethod
    def _locate(
        lines: List[str], name: str, line_hint: Optional[int]
    ) -> Union[Tuple[int, int], str]:
        """Return the 1-based (line, byte column) of *name*, or an error message."""
        pattern = word_pattern(name)
        if line_hint is not None:
            if line_hint < 1 or line_hint > len(lines):
                return f"Line number {line_hint} exceeds file length"
            numbers = [line_hint]
        else:
            numbers = list(range(1, len(lines) + 1))
        for number in numbers:
            text = lines[number - 1]
            match = pattern.search(text)
            if match is not None:
                return number, len(text[: match.start()].encode("utf-8")) + 1
        if line_hint is not None:
            return f"Symbol {name} not found on line {line_hint}"
        return SYMBOL_NOT_FOUND


def _has_errors(stderr: str) -> bool:
    return bool(stderr.strip()) and "warning" not in stderr


__all__ = ["GoplsRenameBackend", "ROPE_RENAME_SCRIPT", "RopeRenameBackend"]
