"""Tests for candidate filtering and context building."""

from __future__ import annotations

from pathlib import Path

import pytest

from namereview.context import build_contexts, should_review_symbol
from tests._fixtures.builders import FakeChangeSource


@pytest.mark.parametrize(
    ("name", "declaration", "expected"),
    [
        ("x", "let x = 1", False),
        ("id", "const id = 1", False),
        ("userProfile", "const userProfile = load()", False),
        ("MAX_RETRIES", "const MAX_RETRIES = 3", False),
        ("total_price", "total_price = 0", False),
        ("mockX1", "const mockX1 = {}", False),
        ("_tmp", "_tmp = 1", False),
        ("data", "import type { data } from './types'", False),
        ("data", "const data = fetchUser()", True),
        ("tmp", "const tmp = 42", True),
        ("usr", "const usr = load()", True),
        ("userData2", "const userData2 = load()", False),
    ],
)
def test_should_review_symbol(name: str, declaration: str, expected: bool) -> None:
    assert should_review_symbol(name, declaration) is expected


def test_build_contexts_keeps_reviewable_identifiers(tmp_path: Path) -> None:
    source = FakeChangeSource(
        tmp_path,
        files={
            "app/loader.py": """
            def load_it(user_id):
                res = fetch(user_id)
                return res
            """,
        },
        patches={
            "app/loader.py": (
                "@@ -0,0 +1,3 @@\n"
                "+def load_it(user_id):\n"
                "+    res = fetch(user_id)\n"
                "+    return res"
            ),
            "README.md": "@@ -0,0 +1 @@\n+hello",
        },
        title="Load users",
        description="Loads users on startup",
    )

    contexts = build_contexts(source)

    assert len(contexts) == 1
    context = contexts[0]
    assert context.old_name == "res"
    assert context.file == "app/loader.py"
    assert context.language == "python"
    assert context.declaration_text == "res = fetch(user_id)"
    assert context.declaration_line == 2
    assert context.usage_snippets == ["return res"]
    assert context.change_title == "Load users"
    assert context.change_description == "Loads users on startup"


def test_unreadable_files_are_skipped(tmp_path: Path) -> None:
    source = FakeChangeSource(
        tmp_path,
        files={},
        patches={"missing.py": "@@ -0,0 +1 @@\n+res = 1"},
    )

    assert build_contexts(source) == []


def test_identifiers_without_declaration_are_skipped(tmp_path: Path) -> None:
    source = FakeChangeSource(
        tmp_path,
        files={"main.go": "package main\n"},
        patches={"main.go": "@@ -0,0 +1 @@\n+var tmp int"},
    )

    assert build_contexts(source) == []
