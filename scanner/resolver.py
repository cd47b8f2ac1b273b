"""Resolution of module specifiers to project-relative module keys."""

import os
import re
from pathlib import Path
from typing import Optional, Union


# Files probed under the base directory, in order, for a non-relative specifier
BASE_DIR_CANDIDATES = ("{spec}.ts", "{spec}.tsx", "{spec}/index.ts", "{spec}/index.tsx")

_EXTENSION_AND_INDEX = re.compile(r"(/index)?\.[^./]*$")


def _to_key(path: str) -> str:
    return path.replace("\\", "/")


def module_key_for_path(root: Path, path: Path) -> str:
    """
    Build the module key of a source file.

    The key is the path relative to root, with POSIX separators, with
    the extension removed and then any trailing ``/index`` removed.

    Args:
        root: Project root directory.
        path: Source file path (absolute, or relative to the cwd).

    Returns:
        Module key, e.g. ``src/utils`` for ``src/utils/index.ts``.
    """
    relative = _to_key(os.path.relpath(os.path.abspath(path), os.path.abspath(root)))
    return _EXTENSION_AND_INDEX.sub("", relative)


def relative_to_root(root: Path, importer: Path, specifier: str) -> str:
    """Resolve a relative specifier against the importer's directory."""
    target = os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(importer)), specifier))
    key = _to_key(os.path.relpath(target, os.path.abspath(root)))
    # './index' and '.' at the root name root/index.ts
    return "index" if key == "." else key


def is_relative_to_base_dir(base_dir: Path, specifier: str) -> bool:
    """
    Check whether a specifier names an existing source file under base_dir.

    Probes ``<spec>.ts``, ``<spec>.tsx``, ``<spec>/index.ts`` and
    ``<spec>/index.tsx`` on disk.
    """
    for pattern in BASE_DIR_CANDIDATES:
        candidate = Path(base_dir) / pattern.format(spec=specifier)
        try:
            if candidate.is_file():
                return True
        except (OSError, ValueError):
            continue
    return False


def resolve_module_key(
    specifier: str,
    importer: Path,
    root: Path,
    base_url: Optional[Union[str, Path]] = None,
) -> Optional[str]:
    """
    Resolve a module specifier to a module key.

    Tries, in order:
    1. Relative specifiers (starting with ``.``): resolved against the
       importing file's directory, expressed relative to root.
    2. Base-directory specifiers: if base_url is given and one of the
       BASE_DIR_CANDIDATES exists under it, the key is base_url/specifier.

    Args:
        specifier: Normalized specifier (see normalize_specifier).
        importer: Path of the file containing the import.
        root: Project root directory.
        base_url: Base directory for non-relative imports, relative to root.

    Returns:
        The module key, or None if the specifier is external.
    """
    if not specifier:
        return None

    if specifier.startswith("."):
        return relative_to_root(root, importer, specifier)

    if base_url is not None:
        base_dir = Path(root) / base_url
        if is_relative_to_base_dir(base_dir, specifier):
            return _to_key(os.path.normpath(os.path.join(str(base_url), specifier)))

    return None
