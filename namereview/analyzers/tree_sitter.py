"""Tree-sitter powered symbol extraction for TypeScript and JavaScript."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from tree_sitter import Node, Tree
from tree_sitter_language_pack import get_parser

from .base import MAX_NEIGHBORS, MAX_USAGES, SymbolExtractor
from ..git.diff import detect_language
from ..models import SymbolInfo

# Declaration node type -> field holding the declared name.
DECLARATION_NAME_FIELDS: Dict[str, str] = {
    "variable_declarator": "name",
    "function_declaration": "name",
    "generator_function_declaration": "name",
    "class_declaration": "name",
    "abstract_class_declaration": "name",
    "interface_declaration": "name",
    "type_alias_declaration": "name",
    "enum_declaration": "name",
    "method_definition": "name",
    "method_signature": "name",
    "abstract_method_signature": "name",
    "public_field_definition": "name",
    "field_definition": "property",
    "property_signature": "name",
}

IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "type_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
    }
)

FUNCTION_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration", "method_definition"}
)
CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})
MODULE_TYPES = frozenset({"internal_module", "module"})
MEMBER_TYPES = frozenset(
    {
        "method_definition",
        "method_signature",
        "abstract_method_signature",
        "public_field_definition",
        "field_definition",
        "property_signature",
    }
)
TYPE_DECLARATION_TYPES = frozenset(
    {
        "class_declaration",
        "abstract_class_declaration",
        "interface_declaration",
        "type_alias_declaration",
        "enum_declaration",
    }
)

_USAGE_STATEMENT_TYPES = frozenset(
    {"expression_statement", "lexical_declaration", "variable_declaration", "return_statement"}
)
_VARIABLE_STATEMENT_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

_LITERAL_TYPES = {
    "number": "number",
    "string": "string",
    "template_string": "string",
    "true": "boolean",
    "false": "boolean",
    "regex": "RegExp",
}


def grammar_for(file_path: str, language: str) -> str:
    """Return the tree-sitter grammar name for a file."""
    if file_path.lower().endswith(".tsx"):
        return "tsx"
    if language == "typescript":
        return "typescript"
    return "javascript"


class SourceTree:
    """A parsed file with byte-accurate text helpers."""

    def __init__(self, file_path: str, content: str, language: str) -> None:
        self.file_path = file_path
        self.source = content.encode("utf-8")
        self.grammar = grammar_for(file_path, language)
        parser = get_parser(self.grammar)  # type: ignore[arg-type]
        self.tree: Tree = parser.parse(self.source)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def walk(self, node: Optional[Node] = None) -> Iterator[Node]:
        """Yield *node* and its descendants in source order."""
        stack = [node or self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def declared_name(self, node: Node) -> Optional[str]:
        field = DECLARATION_NAME_FIELDS.get(node.type)
        if field is None:
            return None
        name_node = node.child_by_field_name(field)
        if name_node is None or name_node.type not in IDENTIFIER_TYPES:
            return None
        return self.text(name_node)

    def find_declarations(self, name: str) -> List[Node]:
        return [node for node in self.walk() if self.declared_name(node) == name]

    def find_declaration(self, name: str) -> Optional[Node]:
        """Return the first declaration node whose declared name is *name*."""
        for node in self.walk():
            if self.declared_name(node) == name:
                return node
        return None

    def has_missing_nodes(self) -> bool:
        return any(node.is_missing for node in self.walk())

    def has_errors(self) -> bool:
        return self.root.has_error


def line_of(node: Node) -> int:
    """Return the 1-based line a node starts on."""
    return node.start_point[0] + 1


def declaration_statement(node: Node) -> Node:
    """Return the statement that owns a declaration, unwrapping exports."""
    statement = node
    if node.type == "variable_declarator" and node.parent is not None:
        statement = node.parent
    if statement.parent is not None and statement.parent.type == "export_statement":
        statement = statement.parent
    return statement


class TreeSitterExtractor(SymbolExtractor):
    """Extracts declaration, usages, neighbors, scopes and types from a syntax tree."""

    languages = ("typescript", "javascript")

    def extract(self, file_path: str, name: str, content: str) -> Optional[SymbolInfo]:
        language = detect_language(file_path) or "javascript"
        source = SourceTree(file_path, content, language)
        declaration = source.find_declaration(name)
        if declaration is None:
            return None

        return SymbolInfo(
            name=name,
            declaration=source.text(declaration_statement(declaration)).strip(),
            line_number=line_of(declaration),
            usages=self._find_usages(source, name, declaration),
            neighbors=self._find_neighbors(source, declaration),
            enclosing_scopes=self._find_enclosing_scopes(source, declaration),
            types=self._extract_types(source, declaration),
        )

    def _find_usages(self, source: SourceTree, name: str, declaration: Node) -> List[str]:
        usages: List[str] = []
        declaration_line = line_of(declaration)
        for node in source.walk():
            if len(usages) >= MAX_USAGES:
                break
            if node.type not in IDENTIFIER_TYPES or source.text(node) != name:
                continue
            if line_of(node) == declaration_line:
                continue
            statement = _nearest_ancestor(node, _USAGE_STATEMENT_TYPES)
            if statement is not None:
                usages.append(source.text(statement).strip())
        return usages

    def _find_neighbors(self, source: SourceTree, declaration: Node) -> List[str]:
        statement = declaration_statement(declaration)
        parent = statement.parent
        if parent is None:
            return []
        neighbors: List[str] = []
        for child in parent.named_children:
            if len(neighbors) >= MAX_NEIGHBORS:
                break
            if child == statement:
                continue
            name = self._statement_name(source, child)
            if name:
                neighbors.append(name)
        return neighbors

    def _statement_name(self, source: SourceTree, node: Node) -> Optional[str]:
        if node.type == "export_statement":
            inner = node.child_by_field_name("declaration")
            if inner is None:
                return None
            node = inner
        if node.type in _VARIABLE_STATEMENT_TYPES:
            for child in node.named_children:
                if child.type == "variable_declarator":
                    return source.declared_name(child)
            return None
        return source.declared_name(node)

    def _find_enclosing_scopes(self, source: SourceTree, declaration: Node) -> List[str]:
        scopes: List[str] = []
        current = declaration.parent
        while current is not None:
            name = source.declared_name(current) if current.type in FUNCTION_TYPES | CLASS_TYPES else None
            if current.type in FUNCTION_TYPES and name:
                scopes.append(f"function {name}")
            elif current.type in CLASS_TYPES and name:
                scopes.append(f"class {name}")
            elif current.type in MODULE_TYPES:
                name_node = current.child_by_field_name("name")
                module_name = source.text(name_node) if name_node is not None else ""
                scopes.append(f"module {module_name}".strip())
            current = current.parent
        scopes.reverse()
        return scopes

    def _extract_types(self, source: SourceTree, declaration: Node) -> Dict[str, str]:
        types: Dict[str, str] = {}
        if declaration.type == "variable_declarator":
            name = source.declared_name(declaration) or ""
            annotation = declaration.child_by_field_name("type")
            if annotation is not None:
                types[name] = _annotation_text(source, annotation)
            else:
                value = declaration.child_by_field_name("value")
                if value is not None and value.type in _LITERAL_TYPES:
                    types[name] = _LITERAL_TYPES[value.type]
        elif declaration.type in FUNCTION_TYPES:
            return_type = declaration.child_by_field_name("return_type")
            if return_type is not None:
                types["returnType"] = _annotation_text(source, return_type)
            parameters = declaration.child_by_field_name("parameters")
            if parameters is not None:
                for parameter in parameters.named_children:
                    pattern = parameter.child_by_field_name("pattern")
                    annotation = parameter.child_by_field_name("type")
                    if pattern is not None and annotation is not None:
                        types[source.text(pattern)] = _annotation_text(source, annotation)
        elif declaration.type in {"public_field_definition", "property_signature"}:
            annotation = declaration.child_by_field_name("type")
            if annotation is not None:
                types[source.declared_name(declaration) or ""] = _annotation_text(source, annotation)
        return types


def _annotation_text(source: SourceTree, node: Node) -> str:
    return source.text(node).lstrip(":").strip()


def _nearest_ancestor(node: Node, types: frozenset) -> Optional[Node]:
    current = node.parent
    while current is not None:
        if current.type in types:
            return current
        current = current.parent
    return None


__all__ = [
    "DECLARATION_NAME_FIELDS",
    "IDENTIFIER_TYPES",
    "SourceTree",
    "TreeSitterExtractor",
    "declaration_statement",
    "grammar_for",
    "line_of",
]
