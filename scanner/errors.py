"""Exceptions raised while scanning a project."""

from pathlib import Path
from typing import Optional


class ScanError(Exception):
    """Base class for fatal scanning errors."""


class SourceReadError(ScanError):
    """A source file could not be read from disk."""

    def __init__(self, path: Path, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        message = f"cannot read source file '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConfigError(ScanError):
    """The project configuration is missing or malformed."""
