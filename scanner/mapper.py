"""Maps one parsed source file to its import/export record."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import tree_sitter as ts

from graph.model import DEFAULT_EXPORT, WILDCARD, Diagnostic, FileRecord, reexport_marker
from .errors import SourceReadError
from .parser import (
    Declaration,
    ExportAssignment,
    ExportedDeclaration,
    ExportFrom,
    ImportDecl,
    UnknownExport,
    extract_declarations,
    parse_source,
)
from .resolver import module_key_for_path, resolve_module_key


logger = logging.getLogger(__name__)

Resolve = Callable[[str], Optional[str]]


def _add_import(
    imports: Dict[str, Tuple[str, ...]],
    key: str,
    symbols: Sequence[str],
) -> Dict[str, Tuple[str, ...]]:
    merged = dict(imports)
    merged[key] = merged.get(key, ()) + tuple(symbols)
    return merged


def fold_declarations(
    path: str,
    declarations: Sequence[Declaration],
    resolve: Resolve,
) -> Tuple[Dict[str, Tuple[str, ...]], Tuple[str, ...], List[Diagnostic]]:
    """
    Fold classified declarations into a file's imports and exports.

    Args:
        path: Module key of the file, used in diagnostics.
        declarations: Output of extract_declarations, in source order.
        resolve: Maps a specifier to a module key, or None if external.

    Returns:
        (imports, exports, diagnostics)
    """
    imports: Dict[str, Tuple[str, ...]] = {}
    exports: Tuple[str, ...] = ()
    diagnostics: List[Diagnostic] = []

    for decl in declarations:
        if isinstance(decl, ImportDecl):
            key = resolve(decl.specifier)
            if key is not None:
                imports = _add_import(imports, key, decl.symbols)

        elif isinstance(decl, ExportFrom):
            key = resolve(decl.specifier)
            if key is None:
                continue
            if decl.symbols is None:
                imports = _add_import(imports, key, (WILDCARD,))
                exports += (reexport_marker(key),)
            elif decl.alias is not None:
                imports = _add_import(imports, key, decl.symbols)
                exports += (decl.alias,)
            else:
                imports = _add_import(imports, key, decl.symbols)
                exports += decl.symbols

        elif isinstance(decl, ExportAssignment):
            exports += (DEFAULT_EXPORT,)

        elif isinstance(decl, ExportedDeclaration):
            exports += (decl.name,)

        elif isinstance(decl, UnknownExport):
            diagnostics.append(Diagnostic(
                path=path,
                kind=decl.kind,
                line=decl.line,
                message=f"unknown export node (kind:{decl.kind})",
            ))

        else:
            raise TypeError(f"unexpected declaration {decl!r}")

    return imports, exports, diagnostics


def map_file(
    root: Path,
    path: Path,
    tree: ts.Tree,
    base_url: Optional[Union[str, Path]] = None,
) -> Tuple[FileRecord, List[Diagnostic]]:
    """
    Build the record of one already-parsed file.

    Args:
        root: Project root directory.
        path: Path of the parsed file.
        tree: Its syntax tree.
        base_url: Base directory for non-relative imports, relative to root.

    Returns:
        The file record and any diagnostics raised while building it.
    """
    key = module_key_for_path(root, path)

    def resolve(specifier: str) -> Optional[str]:
        return resolve_module_key(specifier, path, root, base_url)

    imports, exports, diagnostics = fold_declarations(
        key, extract_declarations(tree), resolve
    )
    for diagnostic in diagnostics:
        logger.warning("%s:%s: %s", diagnostic.path, diagnostic.line, diagnostic.message)

    return FileRecord(path=key, imports=imports, exports=exports), diagnostics


def read_source(path: Path) -> bytes:
    """
    Read a source file.

    Raises:
        SourceReadError: If the file is missing or unreadable.
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e)) from e


def parse_file(
    root: Path,
    path: Path,
    base_url: Optional[Union[str, Path]] = None,
) -> Tuple[FileRecord, List[Diagnostic]]:
    """Read, parse and map a single source file."""
    logger.debug("Parsing %s", path)
    tree = parse_source(read_source(path), path)
    return map_file(root, path, tree, base_url)
