"""Tests for tsconfig loading."""

import pytest

from scanner.tsconfig import load_tsconfig, normalize_excludes
from scanner.errors import ConfigError


class TestLoadTsconfig:
    """Tests for load_tsconfig."""

    def test_files_and_base_url(self, project):
        """Test files and baseUrl are read."""
        root = project({
            "tsconfig.json": '{"compilerOptions": {"baseUrl": "src"}, "files": ["src/a.ts"]}',
        })

        config = load_tsconfig(root / "tsconfig.json")

        assert config.root == root.resolve()
        assert config.files == ("src/a.ts",)
        assert config.base_url == "src"

    def test_explicit_files_override(self, project):
        """Test explicit files replace the files key."""
        root = project({"tsconfig.json": '{"files": ["a.ts"]}'})

        config = load_tsconfig(root / "tsconfig.json", ["b.ts", "c.ts"])

        assert config.files == ("b.ts", "c.ts")
        assert config.base_url is None

    def test_comments_and_trailing_commas(self, project):
        """Test comments and trailing commas."""
        root = project({
            "tsconfig.json": """{
                // entry points
                "files": ["a.ts", "http://x//y.ts",],
                /* no baseUrl */
                "compilerOptions": {},
            }""",
        })

        config = load_tsconfig(root / "tsconfig.json")

        assert config.files == ("a.ts", "http://x//y.ts")

    def test_missing_files_key(self, project):
        """Test error when no files are listed."""
        root = project({"tsconfig.json": '{"compilerOptions": {}}'})

        with pytest.raises(ConfigError):
            load_tsconfig(root / "tsconfig.json")

    def test_invalid_json(self, project):
        """Test error on malformed JSON."""
        root = project({"tsconfig.json": "{files: "})

        with pytest.raises(ConfigError):
            load_tsconfig(root / "tsconfig.json")

    def test_unreadable(self, tmp_path):
        """Test error on a missing file."""
        with pytest.raises(ConfigError):
            load_tsconfig(tmp_path / "tsconfig.json")


class TestNormalizeExcludes:
    """Tests for exclude suffix parsing."""

    def test_default(self):
        """Test default suffix."""
        assert normalize_excludes() == [".d.ts"]

    def test_dot_prefix_added(self):
        """Test splitting and dot prefix."""
        assert normalize_excludes("d.ts|.spec|test") == [".d.ts", ".spec", ".test"]

    def test_empty(self):
        """Test empty values."""
        assert normalize_excludes("") == []
        assert normalize_excludes(None) == []
