"""Loading of project settings from a tsconfig.json file."""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .errors import ConfigError


logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = "d.ts"

# Strings are matched first so comment markers inside them survive
_COMMENTS = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMAS = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[}\]])')


@dataclass(frozen=True)
class TsConfig:
    """
    Project settings relevant to scanning.

    Attributes:
        root: Directory containing the tsconfig file; module keys are
              relative to it.
        files: Entry files, relative to root.
        base_url: compilerOptions.baseUrl, if set.
    """
    root: Path
    files: Tuple[str, ...]
    base_url: Optional[str] = None


def _strip_jsonc(text: str) -> str:
    text = _COMMENTS.sub(lambda m: m.group(1) or "", text)
    return _TRAILING_COMMAS.sub(lambda m: m.group(1) or m.group(2), text)


def load_tsconfig(
    path: Union[str, Path],
    files: Optional[Sequence[str]] = None,
) -> TsConfig:
    """
    Read a tsconfig.json file.

    Comments and trailing commas, which tsc accepts, are tolerated.

    Args:
        path: Path to the tsconfig file.
        files: Entry files overriding the config's "files" key.

    Returns:
        The parsed settings.

    Raises:
        ConfigError: If the file cannot be read or parsed, or if no entry
            files are given and the config has no "files" key.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read '{path}': {e}") from e

    try:
        data = json.loads(_strip_jsonc(content))
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"'{path}' does not contain a JSON object")

    if files:
        entry_files = tuple(files)
    else:
        listed = data.get("files")
        if not isinstance(listed, list) or not listed:
            raise ConfigError(f"'{path}' has no \"files\" key and no files were given")
        entry_files = tuple(str(f) for f in listed)

    options = data.get("compilerOptions") or {}
    base_url = options.get("baseUrl") if isinstance(options, dict) else None

    config = TsConfig(
        root=path.resolve().parent,
        files=entry_files,
        base_url=str(base_url) if base_url is not None else None,
    )
    logger.debug("Loaded %s: %d file(s), baseUrl=%s", path, len(config.files), config.base_url)
    return config


def normalize_excludes(value: Optional[str] = DEFAULT_EXCLUDES) -> List[str]:
    """
    Split a `|`-separated list of excluded suffixes.

    Each suffix is given a leading dot if it lacks one, so ``d.ts``
    becomes ``.d.ts``.
    """
    if not value:
        return []
    return [
        exclude if exclude.startswith(".") else "." + exclude
        for exclude in value.split("|")
        if exclude
    ]
