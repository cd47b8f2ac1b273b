"""Detection of exports that no scanned file imports."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from graph.model import WILDCARD, FileRecord, parse_reexport_marker
from scanner.resolver import module_key_for_path


def _entry_key(path: Union[str, Path]) -> str:
    # Same normalization as module keys, for paths given relative to root
    return module_key_for_path(Path("."), Path(path))


def _mark_used(
    key: str,
    names: Iterable[str],
    files: Dict[str, FileRecord],
    used: Dict[str, Set[str]],
    fully_used: Set[str],
    visiting: Set[str],
) -> None:
    """Record names imported from a module, following `export *` markers."""
    record = files.get(key)
    if record is None or key in visiting:
        return
    visiting = visiting | {key}
    names = list(names)

    if WILDCARD in names:
        fully_used.add(key)
        for target in record.iter_reexports():
            _mark_used(target, [WILDCARD], files, used, fully_used, visiting)
        return

    used.setdefault(key, set()).update(names)
    # Names the module does not declare itself may come from `export *`
    forwarded = [name for name in names if name not in record.exports]
    if forwarded:
        for target in record.iter_reexports():
            _mark_used(target, forwarded, files, used, fully_used, visiting)


def find_unused_exports(
    files: Sequence[FileRecord],
    paths: Optional[Iterable[Union[str, Path]]] = None,
) -> Dict[str, List[str]]:
    """
    Find exports that no file imports.

    An export counts as used when any file imports it by name from the
    exporting module, or imports the module as a whole (``*``). Names
    requested from a module that re-exports with ``export * from`` are
    credited to the re-exported modules as well.

    Args:
        files: File records, e.g. the output of build_closure.
        paths: If given, only these files (relative to the project root)
               are reported.

    Returns:
        Module key -> unused export names, in file order. Modules with
        nothing unused are left out.
    """
    by_key: Dict[str, FileRecord] = {}
    for record in files:
        by_key.setdefault(record.path, record)

    used: Dict[str, Set[str]] = {}
    fully_used: Set[str] = set()
    for record in files:
        reexported = set(record.iter_reexports())
        for key, names in record.imports.items():
            names = list(names)
            if key in reexported and WILDCARD in names:
                # The "*" added by `export * from` is not a use
                names.remove(WILDCARD)
            _mark_used(key, names, by_key, used, fully_used, set())

    wanted = None if paths is None else {_entry_key(p) for p in paths}

    unused: Dict[str, List[str]] = {}
    for key, record in by_key.items():
        if wanted is not None and key not in wanted:
            continue
        if key in fully_used:
            continue
        names = [
            name for name in record.exports
            if parse_reexport_marker(name) is None
            and name not in used.get(key, set())
        ]
        if names:
            unused[key] = names
    return unused
