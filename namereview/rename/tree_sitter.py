"""Scope-aware rename for TypeScript and JavaScript using tree-sitter."""

from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..analyzers.tree_sitter import (
    MEMBER_TYPES,
    TYPE_DECLARATION_TYPES,
    SourceTree,
    declaration_statement,
    line_of,
)
from ..git.diff import detect_language
from ..models import RenameOutcome
from .base import RenameBackend, count_word, logger

VALUE_REFERENCE_TYPES = frozenset(
    {"identifier", "shorthand_property_identifier", "shorthand_property_identifier_pattern"}
)
TYPE_REFERENCE_TYPES = frozenset({"identifier", "type_identifier"})
MEMBER_REFERENCE_TYPES = frozenset({"property_identifier"})

_SHORTHAND_TYPES = frozenset(
    {"shorthand_property_identifier", "shorthand_property_identifier_pattern"}
)

_BLOCK_SCOPE_TYPES = frozenset(
    {
        "program",
        "statement_block",
        "class_body",
        "switch_body",
        "for_statement",
        "for_in_statement",
        "internal_module",
    }
)
_FUNCTION_SCOPE_TYPES = frozenset(
    {
        "program",
        "function_declaration",
        "function_expression",
        "function",
        "generator_function_declaration",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

Edit = Tuple[int, int, str]


class TreeSitterRenameBackend(RenameBackend):
    """Rewrites the references bound to one declaration.

    Variables and functions rename value identifiers inside the block that
    declares them, skipping nested scopes that redeclare the name. Types also
    rename type identifiers. Class members rename property identifiers across
    the whole file.
    """

    languages = ("typescript", "javascript")

    def rename(
        self,
        file_path: Path,
        old_name: str,
        new_name: str,
        *,
        line_hint: Optional[int] = None,
        project_root: Path,
    ) -> RenameOutcome:
        # Bytes in and out so CRLF line endings survive the rename.
        content = file_path.read_bytes().decode("utf-8")
        source = SourceTree(str(file_path), content, self._language(file_path))

        declaration = self._select_declaration(source, old_name, line_hint)
        if declaration is None:
            return RenameOutcome.failure(
                str(file_path), old_name, new_name, f"Symbol {old_name} not found"
            )

        edits = self._collect_edits(source, declaration, old_name, new_name)
        updated = self._apply(source.source, edits).decode("utf-8")
        file_path.write_bytes(updated.encode("utf-8"))

        references = count_word(updated, new_name)
        logger.info(
            "Successfully renamed %s -> %s (%d references)", old_name, new_name, references
        )
        return RenameOutcome(
            success=True,
            file=str(file_path),
            old_name=old_name,
            new_name=new_name,
            references_updated=references,
        )

    def verify(self, file_path: Path, *, project_root: Path) -> bool:
        content = file_path.read_bytes().decode("utf-8")
        source = SourceTree(str(file_path), content, self._language(file_path))
        if source.has_errors() or source.has_missing_nodes():
            logger.warning("Syntax errors in %s after rename", file_path)
            return False
        return True

    @staticmethod
    def _language(file_path: Path) -> str:
        return detect_language(str(file_path)) or "javascript"

    @staticmethod
    def _select_declaration(
        source: SourceTree, name: str, line_hint: Optional[int]
    ) -> Optional[Node]:
        declarations = source.find_declarations(name)
        if not declarations:
            return None
        if line_hint is not None:
            for declaration in declarations:
                if line_of(declaration) == line_hint:
                    return declaration
        return declarations[0]

    def _collect_edits(
        self, source: SourceTree, declaration: Node, old_name: str, new_name: str
    ) -> List[Edit]:
        if declaration.type in MEMBER_TYPES:
            scope, kinds, skip_shadowed = source.root, MEMBER_REFERENCE_TYPES, False
        elif declaration.type in TYPE_DECLARATION_TYPES:
            scope, kinds, skip_shadowed = _binding_scope(declaration), TYPE_REFERENCE_TYPES, True
        else:
            scope, kinds, skip_shadowed = _binding_scope(declaration), VALUE_REFERENCE_TYPES, True

        edits: List[Edit] = []
        for node in _references(source, scope, old_name, kinds, skip_shadowed):
            if node.type in _SHORTHAND_TYPES:
                replacement = f"{old_name}: {new_name}"
            else:
                replacement = new_name
            edits.append((node.start_byte, node.end_byte, replacement))
        return edits

    @staticmethod
    def _apply(source: bytes, edits: List[Edit]) -> bytes:
        buffer = bytearray(source)
        for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
            buffer[start:end] = replacement.encode("utf-8")
        return bytes(buffer)


def _binding_scope(declaration: Node) -> Node:
    statement = declaration_statement(declaration)
    scope_types = _BLOCK_SCOPE_TYPES
    if statement.type == "variable_declaration":
        scope_types = _FUNCTION_SCOPE_TYPES
    current = statement.parent
    while current is not None:
        if current.type in scope_types:
            return current
        current = current.parent
    root = declaration
    while root.parent is not None:
        root = root.parent
    return root


def _references(
    source: SourceTree,
    scope: Node,
    name: str,
    kinds: FrozenSet[str],
    skip_shadowed: bool,
) -> Iterator[Node]:
    stack = [scope]
    while stack:
        node = stack.pop()
        if node.type in kinds and source.text(node) == name:
            yield node
            continue
        if skip_shadowed and node is not scope and _redeclares(source, node, name):
            continue
        stack.extend(reversed(node.children))


def _redeclares(source: SourceTree, node: Node, name: str) -> bool:
    """True when *node* opens a scope that binds its own *name*."""
    if node.type in _FUNCTION_SCOPE_TYPES and node.type != "program":
        parameters = node.child_by_field_name("parameters")
        if parameters is not None:
            for parameter in parameters.named_children:
                target = parameter.child_by_field_name("pattern") or parameter
                if target.type == "identifier" and source.text(target) == name:
                    return True
        single = node.child_by_field_name("parameter")
        if single is not None and source.text(single) == name:
            return True
    if node.type == "statement_block":
        for child in node.named_children:
            if child.type == "lexical_declaration":
                for declarator in child.named_children:
                    if declarator.type == "variable_declarator" and source.declared_name(declarator) == name:
                        return True
            elif child.type in {"function_declaration", "class_declaration"}:
                if source.declared_name(child) == name:
                    return True
    return False


__all__ = ["TreeSitterRenameBackend"]
