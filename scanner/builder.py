"""Closure builder: parses entry files and everything they import."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from graph.model import FileRecord, ModuleGraph
from .mapper import parse_file


logger = logging.getLogger(__name__)

# Extension appended to a module key to find its source file
SOURCE_EXTENSION = ".ts"


def is_excluded(key: str, excludes: Iterable[str]) -> bool:
    """Check whether a module key ends with any excluded suffix."""
    return any(key.endswith(exclude) for exclude in excludes if exclude)


def missing_imports(
    graph: ModuleGraph,
    generation: Sequence[FileRecord],
    excludes: Iterable[str] = (),
) -> List[str]:
    """
    Find the modules a generation imports that still need parsing.

    Args:
        graph: Files parsed so far.
        generation: Files parsed in the latest round.
        excludes: Module key suffixes that are never parsed.

    Returns:
        Module keys not yet in the graph and not excluded, in first-seen
        order without duplicates.
    """
    excludes = list(excludes)
    missing: List[str] = []
    for record in generation:
        for key in record.imports:
            if key in graph or key in missing:
                continue
            if is_excluded(key, excludes):
                logger.debug("Skipping excluded module %s", key)
                continue
            missing.append(key)
    return missing


def _parse_generation(
    root: Path,
    paths: Sequence[Path],
    base_url: Optional[Union[str, Path]],
    graph: ModuleGraph,
) -> List[FileRecord]:
    generation: List[FileRecord] = []
    for path in paths:
        record, diagnostics = parse_file(root, path, base_url)
        graph.add_diagnostics(diagnostics)
        if record.path in graph:
            # Two entry paths naming the same module
            continue
        graph.add_file(record)
        generation.append(record)
    return generation


def build_closure(
    root: Path,
    paths: Sequence[Union[str, Path]],
    base_url: Optional[Union[str, Path]] = None,
    excludes: Optional[Iterable[str]] = None,
) -> ModuleGraph:
    """
    Parse the entry files and, transitively, every module they import.

    Each round parses the modules imported by the previous round that
    are not parsed yet and not excluded; the loop stops when a round
    finds nothing new. Modules are tracked by key, so import cycles are
    visited once.

    Args:
        root: Project root directory.
        paths: Entry files, relative to root.
        base_url: Base directory for non-relative imports, relative to root.
        excludes: Module key suffixes never parsed (e.g. ``.d.ts``).

    Returns:
        ModuleGraph holding every file record in discovery order.

    Raises:
        SourceReadError: If an entry file or an imported module's source
            file cannot be read. No partial result is returned.
    """
    root = Path(root).resolve()
    excludes = list(excludes or [])
    graph = ModuleGraph()

    pending = [root / path for path in paths]
    attempted = set()
    round_number = 0
    while pending:
        generation = _parse_generation(root, pending, base_url, graph)
        keys = [
            key for key in missing_imports(graph, generation, excludes)
            if key not in attempted
        ]
        attempted.update(keys)
        logger.debug(
            "Round %d: parsed %d file(s), %d new module(s) to parse",
            round_number, len(generation), len(keys),
        )
        pending = [root / f"{key}{SOURCE_EXTENSION}" for key in keys]
        round_number += 1

    return graph


def parse_paths(
    root: Path,
    paths: Sequence[Union[str, Path]],
    base_url: Optional[Union[str, Path]] = None,
    excludes: Optional[Iterable[str]] = None,
) -> List[FileRecord]:
    """Return the closed set of file records for the entry paths."""
    return list(build_closure(root, paths, base_url, excludes).files)
