"""Tests for the backup, rename, verify and rollback transaction."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

from namereview.llm.schema import manual_suggestion
from namereview.models import RenameOutcome, RenameRequest
from namereview.rename.base import RenameBackend
from namereview.rename.orchestrator import (
    BACKUP_FAILED,
    VERIFICATION_FAILED,
    RenameOrchestrator,
)
from namereview.rename.textual import TextualRenameBackend


class FakeBackend(RenameBackend):
    """Writes a fixed result and reports a configurable verification."""

    languages = ("typescript",)

    def __init__(self, *, rewrite: str = "renamed\n", verifies: bool = True, error: Exception | None = None) -> None:
        self.rewrite = rewrite
        self.verifies = verifies
        self.error = error
        self.renamed: List[Path] = []

    def rename(self, file_path, old_name, new_name, *, line_hint=None, project_root):
        self.renamed.append(file_path)
        file_path.write_text(self.rewrite, encoding="utf-8")
        if self.error is not None:
            raise self.error
        return RenameOutcome(
            success=True,
            file=str(file_path),
            old_name=old_name,
            new_name=new_name,
            references_updated=1,
        )

    def verify(self, file_path, *, project_root):
        return self.verifies


def _request(path: str, old: str = "data", new: str = "userData", language: str = "typescript") -> RenameRequest:
    return RenameRequest(file_path=path, suggestion=manual_suggestion(old, new), language=language)


def _orchestrator(root: Path, backend: Optional[RenameBackend]) -> RenameOrchestrator:
    return RenameOrchestrator(root, resolver=lambda language: backend)


def test_successful_rename_removes_backup(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    target.write_text("const data = 1;\nconsole.log(data);\n", encoding="utf-8")
    renamer = _orchestrator(tmp_path, TextualRenameBackend())

    outcome = renamer.rename_file(_request("main.ts"))

    assert outcome.success
    assert outcome.file == "main.ts"
    assert outcome.references_updated == 2
    assert target.read_text(encoding="utf-8") == "const userData = 1;\nconsole.log(userData);\n"
    assert not (tmp_path / "main.ts.backup").exists()


def test_failed_verification_restores_original(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    original = "const data = 1;\n"
    target.write_text(original, encoding="utf-8")
    renamer = _orchestrator(tmp_path, FakeBackend(rewrite="const = ;\n", verifies=False))

    outcome = renamer.rename_file(_request(str(target)))

    assert not outcome.success
    assert "verification" in outcome.error.lower()
    assert outcome.error == VERIFICATION_FAILED
    assert target.read_text(encoding="utf-8") == original
    assert not (tmp_path / "main.ts.backup").exists()


def test_failed_rename_restores_original(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    target.write_text("const other = 1;\n", encoding="utf-8")
    renamer = _orchestrator(tmp_path, TextualRenameBackend())

    outcome = renamer.rename_file(_request("main.ts"))

    assert not outcome.success
    assert outcome.error == "Symbol not found"
    assert target.read_text(encoding="utf-8") == "const other = 1;\n"
    assert not (tmp_path / "main.ts.backup").exists()


def test_backend_exception_restores_original(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    target.write_text("const data = 1;\n", encoding="utf-8")
    renamer = _orchestrator(tmp_path, FakeBackend(rewrite="garbage", error=RuntimeError("tool crashed")))

    outcome = renamer.rename_file(_request("main.ts"))

    assert not outcome.success
    assert outcome.error == "tool crashed"
    assert target.read_text(encoding="utf-8") == "const data = 1;\n"
    assert not (tmp_path / "main.ts.backup").exists()


def test_missing_file_reports_backup_failure(tmp_path: Path) -> None:
    backend = FakeBackend()
    renamer = _orchestrator(tmp_path, backend)

    outcome = renamer.rename_file(_request("absent.ts"))

    assert not outcome.success
    assert outcome.error == BACKUP_FAILED
    assert backend.renamed == []


def test_unsupported_language(tmp_path: Path) -> None:
    renamer = _orchestrator(tmp_path, None)

    outcome = renamer.rename_file(_request("main.rs", language="rust"))

    assert not outcome.success
    assert outcome.error == "Unsupported language: rust"


def test_default_resolver_uses_language_backends(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    target.write_text("const data = 1;\nconsole.log(data);\n", encoding="utf-8")

    outcome = RenameOrchestrator(tmp_path).rename_file(_request("main.ts"))

    assert outcome.success
    assert target.read_text(encoding="utf-8") == "const userData = 1;\nconsole.log(userData);\n"


def test_perform_runs_transaction(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    target.write_text("let tmp = 1;\n", encoding="utf-8")
    renamer = _orchestrator(tmp_path, TextualRenameBackend())

    outcome = asyncio.run(renamer.perform(_request("main.ts", "tmp", "count")))

    assert outcome.success
    assert target.read_text(encoding="utf-8") == "let count = 1;\n"


def test_batch_stops_at_first_failure(tmp_path: Path) -> None:
    for name in ("a.ts", "b.ts", "c.ts"):
        (tmp_path / name).write_text("const data = 1;\n", encoding="utf-8")
    (tmp_path / "b.ts").write_text("const other = 1;\n", encoding="utf-8")
    renamer = _orchestrator(tmp_path, TextualRenameBackend())

    outcomes = asyncio.run(
        renamer.perform_batch([_request("a.ts"), _request("b.ts"), _request("c.ts")])
    )

    assert [outcome.success for outcome in outcomes] == [True, False]
    assert (tmp_path / "a.ts").read_text(encoding="utf-8") == "const userData = 1;\n"
    assert (tmp_path / "c.ts").read_text(encoding="utf-8") == "const data = 1;\n"
