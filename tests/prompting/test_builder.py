"""Tests for the prompt builder."""

from __future__ import annotations

from pathlib import Path

from namereview.llm.schema import parse_naming_suggestion, rejection_reason
from namereview.models import SymbolContext
from namereview.prompting import DEFAULT_EXAMPLES, FewShotExample, PromptBuilder
from namereview.prompting.constants import LANGUAGE_CONVENTIONS


def _context(**overrides) -> SymbolContext:
    values = {
        "file": "src/service.ts",
        "language": "typescript",
        "old_name": "data",
        "declaration_text": "const data = await fetchUser(id);",
        "declaration_line": 5,
        "usage_snippets": ["return data;", "log(data);", "save(data);", "emit(data);"],
        "neighbor_names": ["id", "fetchUser", "a", "b", "c", "d"],
        "enclosing_scope_names": ["UserService", "load"],
        "type_hints": {"data": "Promise<User>"},
        "change_title": "Load user profile",
        "change_description": "Fetch the profile before rendering.",
    }
    values.update(overrides)
    return SymbolContext(**values)


def test_user_prompt_renders_symbol_sections() -> None:
    prompt = PromptBuilder().build_user_prompt(_context())

    assert "PROJECT LANGUAGE: typescript" in prompt
    assert "PR TITLE: Load user profile" in prompt
    assert "PR DESCRIPTION: Fetch the profile before rendering." in prompt
    assert "SYMBOL TO REVIEW: data" in prompt
    assert "const data = await fetchUser(id);" in prompt
    assert "ENCLOSING SCOPES: UserService > load" in prompt
    assert "- data: Promise<User>" in prompt
    assert LANGUAGE_CONVENTIONS["typescript"].splitlines()[0] in prompt


def test_user_prompt_limits_usages_and_neighbors() -> None:
    prompt = PromptBuilder().build_user_prompt(_context())

    assert "3. `save(data);`" in prompt
    assert "emit(data);" not in prompt
    assert "NEIGHBORING SYMBOLS: id, fetchUser, a, b, c\n" in prompt


def test_long_description_is_truncated() -> None:
    prompt = PromptBuilder().build_user_prompt(_context(change_description="x" * 500))

    assert "x" * 200 in prompt
    assert "x" * 201 not in prompt


def test_optional_sections_are_omitted() -> None:
    prompt = PromptBuilder().build_user_prompt(
        _context(
            usage_snippets=[],
            neighbor_names=[],
            enclosing_scope_names=[],
            type_hints={},
            change_description="",
        )
    )

    assert "USAGE EXAMPLES" not in prompt
    assert "NEIGHBORING SYMBOLS" not in prompt
    assert "ENCLOSING SCOPES" not in prompt
    assert "TYPE INFORMATION" not in prompt
    assert "PR DESCRIPTION" not in prompt


def test_system_prompt_uses_confidence_threshold_and_examples() -> None:
    example = FewShotExample(
        language="python",
        old_name="res",
        title="Add invoice totals",
        response='{"oldName": "res", "newName": "invoice_total"}',
    )

    system = PromptBuilder(min_confidence=0.9, examples=[example]).system_prompt()

    assert "confidence > 0.9" in system
    assert 'Context: python - "res" in "Add invoice totals"' in system
    assert '"newName": "invoice_total"' in system
    assert "Examples:" not in PromptBuilder().system_prompt()


def test_custom_templates_override_defaults(tmp_path: Path) -> None:
    (tmp_path / "symbol.j2").write_text("Rename {{ context.old_name }}?", encoding="utf-8")

    builder = PromptBuilder(templates_dir=tmp_path)

    assert builder.build_user_prompt(_context()) == "Rename data?"
    assert "naming expert" in builder.system_prompt()


def test_default_examples_are_valid_suggestions() -> None:
    system = PromptBuilder(examples=DEFAULT_EXAMPLES).system_prompt()

    assert 'Context: typescript - "data" in "Add user profile caching"' in system
    assert 'Context: python - "calc" in "Add discount calculation"' in system
    for example in DEFAULT_EXAMPLES:
        suggestion = parse_naming_suggestion(example.response)
        assert suggestion is not None
        assert suggestion.old_name == example.old_name
        assert rejection_reason(suggestion) is None
