"""Whole-word textual rename used when no language tooling is available."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from ..models import LANGUAGES, RenameOutcome
from .base import (
    SYMBOL_NOT_FOUND,
    CommandRunner,
    RenameBackend,
    count_word,
    logger,
    run_command,
    word_pattern,
)


class TextualRenameBackend(RenameBackend):
    """Replaces every whole-word occurrence of the old name.

    This strategy has no notion of scope: strings, comments and unrelated
    symbols that share the name are rewritten too.
    """

    languages = LANGUAGES

    def __init__(
        self,
        verify_command: Sequence[str] | None = None,
        *,
        runner: CommandRunner = run_command,
        timeout: float | None = None,
    ) -> None:
        self.verify_command = list(verify_command or [])
        self._runner = runner
        self._timeout = timeout

    def rename(
        self,
        file_path: Path,
        old_name: str,
        new_name: str,
        *,
        line_hint: Optional[int] = None,
        project_root: Path,
    ) -> RenameOutcome:
        try:
            content = file_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return RenameOutcome.failure(str(file_path), old_name, new_name, str(exc))

        updated, replaced = word_pattern(old_name).subn(lambda _match: new_name, content)
        if replaced == 0:
            return RenameOutcome.failure(str(file_path), old_name, new_name, SYMBOL_NOT_FOUND)

        file_path.write_bytes(updated.encode("utf-8"))
        references = count_word(updated, new_name)
        logger.info(
            "Textual rename: %s -> %s (%d references)", old_name, new_name, references
        )
        return RenameOutcome(
            success=True,
            file=str(file_path),
            old_name=old_name,
            new_name=new_name,
            references_updated=references,
        )

    def verify(self, file_path: Path, *, project_root: Path) -> bool:
        if not self.verify_command:
            return True
        result = self._runner(
            [*self.verify_command, str(file_path)], cwd=project_root, timeout=self._timeout
        )
        if not result.ok:
            logger.warning("Verification command failed for %s: %s", file_path, result.stderr.strip())
        return result.ok


__all__ = ["TextualRenameBackend"]
