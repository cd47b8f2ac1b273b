"""Scanner module for import/export extraction and dependency closure."""

from .specifier import normalize_specifier
from .parser import parse_source, extract_declarations
from .resolver import resolve_module_key, module_key_for_path
from .mapper import map_file, parse_file
from .builder import build_closure, parse_paths
from .tsconfig import load_tsconfig, normalize_excludes
from .errors import ScanError, SourceReadError, ConfigError

__all__ = [
    "normalize_specifier",
    "parse_source",
    "extract_declarations",
    "resolve_module_key",
    "module_key_for_path",
    "map_file",
    "parse_file",
    "build_closure",
    "parse_paths",
    "load_tsconfig",
    "normalize_excludes",
    "ScanError",
    "SourceReadError",
    "ConfigError",
]
