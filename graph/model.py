"""Graph data model for per-file import/export records."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple


WILDCARD = "*"
DEFAULT_EXPORT = "default"
REEXPORT_PREFIX = "*:"


def reexport_marker(key: str) -> str:
    """Build the export entry recording `export * from <key>`."""
    return f"{REEXPORT_PREFIX}{key}"


def parse_reexport_marker(name: str) -> Optional[str]:
    """Return the target key of a re-export marker, or None for plain names."""
    if name.startswith(REEXPORT_PREFIX):
        return name[len(REEXPORT_PREFIX):]
    return None


@dataclass(frozen=True)
class FileRecord:
    """
    What one source file imports and exports.

    Attributes:
        path: Module key of the file (root-relative, no extension, no /index).
        imports: Module key -> imported symbol names. Duplicates are kept;
                 "*" stands for a namespace or side-effect import.
        exports: Exported names in source order. "default" for a default
                 export, "*:<key>" for `export * from` a resolved module.
    """
    path: str
    imports: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    exports: Tuple[str, ...] = ()

    def __post_init__(self):
        # Freeze whatever containers the caller handed in
        frozen = {key: tuple(names) for key, names in self.imports.items()}
        object.__setattr__(self, "imports", MappingProxyType(frozen))
        object.__setattr__(self, "exports", tuple(self.exports))

    def iter_reexports(self) -> Iterator[str]:
        """Yield the module keys this file re-exports wholesale."""
        for name in self.exports:
            target = parse_reexport_marker(name)
            if target is not None:
                yield target


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while extracting a file."""
    path: str
    kind: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        location = self.path if self.line is None else f"{self.path}:{self.line}"
        return f"WARN: {location}: {self.message}"


class ModuleGraph:
    """
    The working set of parsed files, keyed by module key.

    Files are kept in discovery order. Entries are only ever appended;
    an existing key is never replaced. Diagnostics raised while mapping
    files are collected alongside.
    """

    def __init__(self):
        self._files: Dict[str, FileRecord] = {}
        self._diagnostics: List[Diagnostic] = []

    @property
    def files(self) -> Tuple[FileRecord, ...]:
        """Return all file records in discovery order."""
        return tuple(self._files.values())

    @property
    def keys(self) -> Tuple[str, ...]:
        """Return all module keys in discovery order."""
        return tuple(self._files)

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        """Return the diagnostics collected so far."""
        return tuple(self._diagnostics)

    def add_file(self, record: FileRecord) -> None:
        """
        Add a parsed file to the graph.

        Raises:
            ValueError: If a file with the same module key is already present.
        """
        if record.path in self._files:
            raise ValueError(f"module {record.path!r} is already in the graph")
        self._files[record.path] = record

    def add_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Record non-fatal diagnostics."""
        self._diagnostics.extend(diagnostics)

    def get(self, key: str) -> Optional[FileRecord]:
        """Get the record for a module key, if parsed."""
        return self._files.get(key)

    def get_targets(self, key: str) -> Set[str]:
        """Get all module keys the given module imports from."""
        record = self._files.get(key)
        if record is None:
            return set()
        return set(record.imports)

    def get_sources(self, target: str) -> Set[str]:
        """Get all modules that import from the target module."""
        return {
            record.path
            for record in self._files.values()
            if target in record.imports
        }

    def iter_edges(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all import edges as (source, target) tuples."""
        for record in self._files.values():
            for target in sorted(record.imports):
                yield record.path, target

    def unresolved_targets(self) -> Set[str]:
        """Get import targets that have no parsed record."""
        return {
            target
            for _, target in self.iter_edges()
            if target not in self._files
        }

    def __len__(self) -> int:
        """Return the number of files in the graph."""
        return len(self._files)

    def __contains__(self, key: str) -> bool:
        """Check if a module key has been parsed."""
        return key in self._files

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._files.values())

    def __repr__(self) -> str:
        edge_count = sum(len(r.imports) for r in self._files.values())
        return f"ModuleGraph(files={len(self._files)}, edges={edge_count}, diagnostics={len(self._diagnostics)})"
