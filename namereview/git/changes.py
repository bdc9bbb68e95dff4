"""Change sources that feed the review pipeline with per-file diffs."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Callable, Iterable, List, Protocol, Sequence

from .diff import detect_language


@dataclass(frozen=True)
class ChangedFile:
    """A file touched by the change together with its unified diff."""

    path: str
    patch: str
    status: str = "modified"


class ChangeSource(Protocol):
    """Supplies changed files, their contents and the change's description."""

    title: str
    description: str

    def changed_files(self) -> List[ChangedFile]:
        """Return files changed by the change under review."""

    def read_file(self, path: str) -> str:
        """Return the current contents of *path*."""


class GitChangeSource:
    """Reads changes from a local git checkout relative to a base ref."""

    def __init__(
        self,
        repo_path: str | Path,
        diff_base: str = "origin/main",
        *,
        title: str = "",
        description: str = "",
        exclude_paths: Sequence[str] = (),
        runner: Callable[..., str] | None = None,
    ) -> None:
        self.repo = Path(repo_path).expanduser().resolve()
        self.diff_base = diff_base
        self.title = title
        self.description = description
        self.exclude_paths = list(exclude_paths)
        self._runner = runner or self._default_runner

    def changed_files(self) -> List[ChangedFile]:
        if not (self.repo / ".git").exists():
            raise RuntimeError(f"{self.repo} is not a Git repository")

        output = self._run(
            ["git", "diff", "--name-status", f"{self.diff_base}...HEAD"],
        )
        files: List[ChangedFile] = []
        for line in output.splitlines():
            parts = line.split("\t")
            if len(parts) < 2:
                continue
            status, path = parts[0].strip(), parts[-1].strip()
            if status.startswith("D"):
                continue
            if detect_language(path) is None or self._is_excluded(path):
                continue
            patch = self._run(
                ["git", "diff", "-U3", f"{self.diff_base}...HEAD", "--", path],
            )
            files.append(ChangedFile(path=path, patch=patch, status=status))
        return files

    def read_file(self, path: str) -> str:
        return (self.repo / path).read_text(encoding="utf-8")

    def describe_from_log(self) -> None:
        """Fill title/description from the commit messages on the branch."""
        if self.title:
            return
        subjects = self._run(
            ["git", "log", "--format=%s", f"{self.diff_base}..HEAD"],
        ).splitlines()
        subjects = [subject.strip() for subject in subjects if subject.strip()]
        if subjects:
            self.title = subjects[-1]
            self.description = "\n".join(subjects[:-1])

    def _is_excluded(self, path: str) -> bool:
        normalized = path.replace("\\", "/")
        for pattern in self.exclude_paths:
            if pattern.endswith("/") and normalized.startswith(pattern):
                return True
            if fnmatch(normalized, pattern):
                return True
        return False

    def _run(self, args: Iterable[str]) -> str:
        return self._runner(args, cwd=self.repo, capture_output=True)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        import subprocess

        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["ChangeSource", "ChangedFile", "GitChangeSource"]
