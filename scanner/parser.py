"""Syntax-tree parsing and top-level declaration extraction for TypeScript files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import tree_sitter as ts
import tree_sitter_typescript as tsts

from graph.model import DEFAULT_EXPORT, WILDCARD
from .specifier import normalize_specifier


TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())

_parsers: Dict[str, ts.Parser] = {}

# Declarations whose exported name is their own `name` field
NAMED_DECLARATIONS = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "module",
    "internal_module",
}

VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}


@dataclass(frozen=True)
class ImportDecl:
    """`import ... from '<specifier>'` or a bare `import '<specifier>'`."""
    specifier: str
    symbols: Tuple[str, ...]


@dataclass(frozen=True)
class ExportAssignment:
    """`export default <expression>` or `export = <expression>`."""
    line: int


@dataclass(frozen=True)
class ExportFrom:
    """
    `export ... from '<specifier>'`.

    `symbols` is None for `export * from`, otherwise the original names
    listed in the clause. `alias` is set for `export * as ns from`.
    """
    specifier: str
    symbols: Optional[Tuple[str, ...]]
    alias: Optional[str] = None


@dataclass(frozen=True)
class ExportedDeclaration:
    """A declaration carrying the `export` modifier."""
    name: str
    kind: str


@dataclass(frozen=True)
class UnknownExport:
    """An exported declaration whose shape is not recognized."""
    kind: str
    line: int


Declaration = Union[ImportDecl, ExportAssignment, ExportFrom, ExportedDeclaration, UnknownExport]


def get_language(path: Union[str, Path]) -> ts.Language:
    """Pick the grammar for a file based on its extension."""
    if str(path).lower().endswith(".tsx"):
        return TSX_LANGUAGE
    return TS_LANGUAGE


def _get_parser(language: ts.Language) -> ts.Parser:
    key = "tsx" if language is TSX_LANGUAGE else "ts"
    parser = _parsers.get(key)
    if parser is None:
        parser = ts.Parser(language)
        _parsers[key] = parser
    return parser


def parse_source(source: Union[str, bytes], path: Union[str, Path] = "module.ts") -> ts.Tree:
    """
    Parse TypeScript source text into a syntax tree.

    Args:
        source: File contents.
        path: File name, used only to choose between the TS and TSX grammars.

    Returns:
        The tree-sitter syntax tree. Parsing is error tolerant; malformed
        regions show up as ERROR nodes and are skipped by the extractor.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    return _get_parser(get_language(path)).parse(source)


def node_text(node: Optional[ts.Node]) -> str:
    """Decode the source text covered by a node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _name_text(node: Optional[ts.Node]) -> str:
    # `import { "a-b" as c }` names the binding with a string literal
    text = node_text(node)
    if node is not None and node.type == "string":
        return text[1:-1]
    return text


def _line(node: ts.Node) -> int:
    return node.start_point[0] + 1


def _has_token(node: ts.Node, token: str) -> bool:
    return any(child.type == token for child in node.children)


def _first_child(node: ts.Node, node_type: str) -> Optional[ts.Node]:
    return next((c for c in node.named_children if c.type == node_type), None)


def extract_import(node: ts.Node) -> Optional[ImportDecl]:
    """Classify an `import_statement` node."""
    source = node.child_by_field_name("source")
    if source is None:
        # import x = require('y')
        return None
    specifier = normalize_specifier(node_text(source))

    clause = _first_child(node, "import_clause")
    if clause is None:
        return ImportDecl(specifier, (WILDCARD,))

    symbols: List[str] = []
    if _first_child(clause, "identifier") is not None:
        symbols.append(DEFAULT_EXPORT)

    if _first_child(clause, "namespace_import") is not None:
        symbols.append(WILDCARD)
    else:
        named = _first_child(clause, "named_imports")
        if named is not None:
            for spec in named.named_children:
                if spec.type == "import_specifier":
                    symbols.append(_name_text(spec.child_by_field_name("name")))

    return ImportDecl(specifier, tuple(symbols))


def extract_export_from(node: ts.Node, source: ts.Node) -> ExportFrom:
    """Classify an `export ... from '<specifier>'` node."""
    specifier = normalize_specifier(node_text(source))

    clause = _first_child(node, "export_clause")
    if clause is not None:
        names = tuple(
            _name_text(spec.child_by_field_name("name"))
            for spec in clause.named_children
            if spec.type == "export_specifier"
        )
        return ExportFrom(specifier, names)

    namespace = _first_child(node, "namespace_export")
    if namespace is not None:
        alias = namespace.named_children[-1] if namespace.named_children else None
        return ExportFrom(specifier, (WILDCARD,), alias=_name_text(alias))

    return ExportFrom(specifier, None)


def unwrap_declaration(declaration: ts.Node) -> Optional[ts.Node]:
    """Return the declaration inside `declare ...`, or the node itself."""
    if declaration.type != "ambient_declaration":
        return declaration
    # declare global {} and `declare module.exports` wrap nothing named
    return next(
        (c for c in declaration.named_children
         if c.type in NAMED_DECLARATIONS or c.type in VARIABLE_DECLARATIONS),
        None,
    )


def exported_name(declaration: ts.Node) -> Optional[str]:
    """
    Work out the name a declaration is exported under.

    Returns None when the declaration shape is not recognized.
    """
    kind = declaration.type

    if kind in VARIABLE_DECLARATIONS:
        declarator = _first_child(declaration, "variable_declarator")
        if declarator is None:
            return None
        return node_text(declarator.child_by_field_name("name")) or None

    if kind == "import_alias":
        # export import A = B.C
        alias = _first_child(declaration, "identifier")
        return node_text(alias) if alias is not None else None

    if kind in NAMED_DECLARATIONS:
        name = declaration.child_by_field_name("name")
        if name is None:
            return DEFAULT_EXPORT
        if name.type == "string":
            # declare module 'x' names no binding
            return None
        return node_text(name)

    return None


def extract_export(node: ts.Node) -> Optional[Declaration]:
    """Classify an `export_statement` node."""
    source = node.child_by_field_name("source")
    if source is not None:
        return extract_export_from(node, source)

    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        inner = unwrap_declaration(declaration) or declaration
        name = exported_name(inner)
        if name is None:
            return UnknownExport(inner.type, _line(declaration))
        return ExportedDeclaration(name, inner.type)

    if node.child_by_field_name("value") is not None or _has_token(node, "="):
        return ExportAssignment(_line(node))

    # export { a, b } and export as namespace X
    return None


def extract_declarations(tree: ts.Tree) -> Tuple[Declaration, ...]:
    """
    Classify the top-level statements of a parsed file.

    Only imports and exports are kept, in source order. Statements with
    no bearing on the module's imports or exports are dropped.
    """
    declarations: List[Declaration] = []
    for node in tree.root_node.named_children:
        if node.type == "import_statement":
            found = extract_import(node)
        elif node.type == "export_statement":
            found = extract_export(node)
        else:
            found = None
        if found is not None:
            declarations.append(found)
    return tuple(declarations)
