"""Backup, rename, verify and roll back as one transaction per file."""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..config import ToolSettings
from ..models import RenameOutcome, RenameRequest
from . import get_backend
from .base import RenameBackend, logger

BACKUP_SUFFIX = ".backup"
BACKUP_FAILED = "backup failed"
VERIFICATION_FAILED = "Post-rename verification failed"

BackendResolver = Callable[[str], Optional[RenameBackend]]


class RenameOrchestrator:
    """Applies renames so that a file is either fully renamed and verified or unchanged.

    A copy is written to ``<file>.backup`` before the backend runs. Any failed
    rename, failed verification or unexpected error restores that copy. The
    backup never outlives the transaction unless restoring it fails.
    """

    def __init__(
        self,
        project_root: Path | str = ".",
        *,
        tools: ToolSettings | None = None,
        resolver: BackendResolver | None = None,
    ) -> None:
        self.project_root = Path(project_root).expanduser().resolve()
        self.tools = tools or ToolSettings()
        self._resolve = resolver or self._default_resolver
        self._backends: Dict[str, Optional[RenameBackend]] = {}

    def rename_file(self, request: RenameRequest) -> RenameOutcome:
        """Run the rename transaction synchronously."""
        suggestion = request.suggestion
        old_name, new_name = suggestion.old_name, suggestion.new_name
        target = self._resolve_path(request.file_path)
        backend = self._resolve(request.language)
        if backend is None:
            return RenameOutcome.failure(
                request.file_path, old_name, new_name, f"Unsupported language: {request.language}"
            )

        backup = target.with_name(target.name + BACKUP_SUFFIX)
        try:
            shutil.copyfile(target, backup)
        except OSError as exc:
            logger.error("Failed to create backup for %s: %s", target, exc)
            return RenameOutcome.failure(request.file_path, old_name, new_name, BACKUP_FAILED)

        try:
            outcome = backend.rename(
                target,
                old_name,
                new_name,
                line_hint=request.line_number,
                project_root=self.project_root,
            )
            outcome = replace(outcome, file=request.file_path)
            if not outcome.success:
                self._restore(target, backup)
                return outcome

            if not backend.verify(target, project_root=self.project_root):
                logger.warning("Verification failed for %s, rolling back", target)
                self._restore(target, backup)
                return outcome.as_failed(VERIFICATION_FAILED)

            backup.unlink()
            return outcome
        except Exception as exc:
            try:
                self._restore(target, backup)
            except OSError as restore_error:
                logger.error("Failed to restore backup for %s: %s", target, restore_error)
            return RenameOutcome.failure(request.file_path, old_name, new_name, str(exc))

    async def perform(self, request: RenameRequest) -> RenameOutcome:
        """Run the transaction on a worker thread; cancelling the caller does not interrupt it."""
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, self.rename_file, request)
        return await asyncio.shield(future)

    async def perform_batch(self, requests: Sequence[RenameRequest]) -> List[RenameOutcome]:
        """Apply renames in order, stopping after the first failure."""
        outcomes: List[RenameOutcome] = []
        for request in requests:
            outcome = await self.perform(request)
            outcomes.append(outcome)
            if not outcome.success:
                logger.warning("Stopping batch rename due to failure: %s", outcome.error)
                break
        return outcomes

    def _default_resolver(self, language: str) -> Optional[RenameBackend]:
        if language not in self._backends:
            self._backends[language] = get_backend(language, self.tools)
        return self._backends[language]

    def _resolve_path(self, file_path: str) -> Path:
        path = Path(file_path)
        return path if path.is_absolute() else self.project_root / path

    @staticmethod
    def _restore(target: Path, backup: Path) -> None:
        shutil.copyfile(backup, target)
        backup.unlink()


__all__ = [
    "BACKUP_FAILED",
    "BACKUP_SUFFIX",
    "RenameOrchestrator",
    "VERIFICATION_FAILED",
]
