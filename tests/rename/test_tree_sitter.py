"""Tests for scope-aware TypeScript and JavaScript renames."""

from __future__ import annotations

import textwrap
from pathlib import Path

from namereview.rename.tree_sitter import TreeSitterRenameBackend


def _write(tmp_path: Path, name: str, content: str) -> Path:
    target = tmp_path / name
    target.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return target


def _rename(target: Path, old: str, new: str, line_hint=None):
    return TreeSitterRenameBackend().rename(
        target, old, new, line_hint=line_hint, project_root=target.parent
    )


def test_shadowing_parameters_are_left_alone(tmp_path: Path) -> None:
    target = _write(
        tmp_path,
        "show.ts",
        """
        const data = load();
        function show(data: string) {
          return data;
        }
        console.log(data);
        """,
    )

    outcome = _rename(target, "data", "profile", line_hint=1)

    assert outcome.success
    assert outcome.references_updated == 2
    assert target.read_text(encoding="utf-8") == textwrap.dedent(
        """\
        const profile = load();
        function show(data: string) {
          return data;
        }
        console.log(profile);
        """
    )


def test_line_hint_selects_the_declaration(tmp_path: Path) -> None:
    target = _write(
        tmp_path,
        "pair.js",
        """
        function first() {
          const tmp = 1;
          return tmp;
        }
        function second() {
          const tmp = 2;
          return tmp;
        }
        """,
    )

    outcome = _rename(target, "tmp", "total", line_hint=6)

    assert outcome.success
    content = target.read_text(encoding="utf-8")
    assert "const tmp = 1;\n  return tmp;" in content
    assert "const total = 2;\n  return total;" in content


def test_shorthand_properties_keep_their_key(tmp_path: Path) -> None:
    target = _write(
        tmp_path,
        "payload.js",
        """
        const user = load();
        const payload = { user };
        """,
    )

    outcome = _rename(target, "user", "account")

    assert outcome.success
    assert target.read_text(encoding="utf-8") == (
        "const account = load();\nconst payload = { user: account };\n"
    )


def test_class_members_rename_property_references(tmp_path: Path) -> None:
    target = _write(
        tmp_path,
        "store.ts",
        """
        class Store {
          items: string[] = [];
          add(item: string): void {
            this.items.push(item);
          }
        }
        """,
    )

    outcome = _rename(target, "items", "entries")

    assert outcome.success
    content = target.read_text(encoding="utf-8")
    assert "entries: string[] = [];" in content
    assert "this.entries.push(item);" in content
    assert "items" not in content


def test_types_rename_annotations(tmp_path: Path) -> None:
    target = _write(
        tmp_path,
        "shape.ts",
        """
        interface Shape {
          id: number;
        }
        function area(s: Shape): Shape {
          return s;
        }
        """,
    )

    outcome = _rename(target, "Shape", "Polygon")

    assert outcome.success
    assert outcome.references_updated == 3
    assert "Shape" not in target.read_text(encoding="utf-8")


def test_member_access_is_not_a_variable_reference(tmp_path: Path) -> None:
    target = _write(
        tmp_path,
        "access.js",
        """
        const data = 1;
        const other = response.data + data;
        """,
    )

    _rename(target, "data", "count")

    assert target.read_text(encoding="utf-8") == (
        "const count = 1;\nconst other = response.data + count;\n"
    )


def test_missing_declaration_fails_without_writing(tmp_path: Path) -> None:
    target = _write(tmp_path, "empty.ts", "console.log(data);\n")

    outcome = _rename(target, "data", "value")

    assert not outcome.success
    assert outcome.error == "Symbol data not found"
    assert target.read_text(encoding="utf-8") == "console.log(data);\n"


def test_verify_reports_syntax_errors(tmp_path: Path) -> None:
    backend = TreeSitterRenameBackend()
    good = _write(tmp_path, "good.ts", "const value = 1;\n")
    bad = _write(tmp_path, "bad.ts", "const value = ;\n")

    assert backend.verify(good, project_root=tmp_path) is True
    assert backend.verify(bad, project_root=tmp_path) is False


def test_crlf_line_endings_are_preserved(tmp_path: Path) -> None:
    target = tmp_path / "main.ts"
    target.write_bytes(b"const data = 1;\r\nconsole.log(data);\r\n")

    outcome = _rename(target, "data", "userProfile")

    assert outcome.success
    assert outcome.references_updated == 2
    assert target.read_bytes() == b"const userProfile = 1;\r\nconsole.log(userProfile);\r\n"
