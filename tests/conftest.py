"""Shared fixtures for scanner tests."""

import pytest


@pytest.fixture
def project(tmp_path):
    """Return a helper that writes {relative path: source} into tmp_path."""
    def write(files):
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path
    return write
