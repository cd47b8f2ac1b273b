"""Tests for the closure builder."""

import pytest

from graph.model import FileRecord, ModuleGraph
from scanner.builder import build_closure, is_excluded, missing_imports, parse_paths
from scanner.errors import SourceReadError


class TestClosure:
    """Tests for transitive parsing of imported modules."""

    def test_end_to_end(self, project):
        """Entry file plus the module it imports."""
        root = project({
            "a.ts": "import { x } from './b';\nexport function f() {}\n",
            "b.ts": "export const x = 1;\nexport const y = 2;\n",
        })

        files = parse_paths(root, ["a.ts"])

        assert files == [
            FileRecord("a", {"b": ("x",)}, ("f",)),
            FileRecord("b", {}, ("x", "y")),
        ]

    def test_discovery_order(self, project):
        """Entry files come first, then each later round."""
        root = project({
            "a.ts": "import './b';",
            "b.ts": "import './c';",
            "c.ts": "",
            "d.ts": "import './c';",
        })

        graph = build_closure(root, ["a.ts", "d.ts"])

        assert graph.keys == ("a", "d", "b", "c")

    def test_cycle(self, project):
        """A -> B -> C -> A yields each module once."""
        root = project({
            "a.ts": "import { b } from './b';\nexport const a = 1;",
            "b.ts": "import { c } from './c';\nexport const b = 1;",
            "c.ts": "import { a } from './a';\nexport const c = 1;",
        })

        graph = build_closure(root, ["a.ts"])

        assert len(graph) == 3
        assert sorted(graph.keys) == ["a", "b", "c"]

    def test_self_import(self, project):
        """Test a module importing itself."""
        root = project({"a.ts": "import { a } from './a';\nexport const a = 1;"})

        graph = build_closure(root, ["a.ts"])

        assert graph.keys == ("a",)

    def test_duplicate_entry_paths(self, project):
        """Test entry paths naming one module twice."""
        root = project({"a.ts": "export const a = 1;"})

        graph = build_closure(root, ["a.ts", "./a.ts"])

        assert graph.keys == ("a",)

    def test_shared_dependency_parsed_once(self, project):
        """Test a module imported from two files is parsed once."""
        root = project({
            "a.ts": "import './shared';\nimport './b';",
            "b.ts": "import './shared';",
            "shared.ts": "export const s = 1;",
        })

        graph = build_closure(root, ["a.ts"])

        assert graph.keys == ("a", "shared", "b")

    def test_reexport_pulls_target(self, project):
        """Test export * from pulls in its target."""
        root = project({
            "a.ts": "export * from './b';",
            "b.ts": "export const x = 1;",
        })

        graph = build_closure(root, ["a.ts"])

        assert graph.get("a").exports == ("*:b",)
        assert "b" in graph

    def test_nested_directories(self, project):
        """Test keys across nested directories."""
        root = project({
            "src/app.ts": "import { helper } from '../lib/helpers';",
            "lib/helpers.ts": "import { C } from './const';\nexport function helper() {}",
            "lib/const.ts": "export const C = 1;",
        })

        graph = build_closure(root, ["src/app.ts"])

        assert graph.keys == ("src/app", "lib/helpers", "lib/const")

    def test_root_index_import(self, project):
        """Test importing the root index.ts as './index' and '.'."""
        root = project({
            "index.ts": "export const x = 1;\nexport const y = 2;",
            "app.ts": "import { x } from './index';\nimport { y } from '.';",
        })

        graph = build_closure(root, ["app.ts"])

        assert graph.keys == ("app", "index")
        assert dict(graph.get("app").imports) == {"index": ("x", "y")}

    def test_excluded_suffix_skipped(self, project):
        """Excluded modules are never parsed, even though they do not exist."""
        root = project({"a.ts": "import { T } from './types.d';\nexport const a = 1;"})

        graph = build_closure(root, ["a.ts"], excludes=[".d"])

        assert graph.keys == ("a",)
        assert graph.unresolved_targets() == {"types.d"}

    def test_missing_module_is_fatal(self, project):
        """Test a missing imported module aborts the closure."""
        root = project({"a.ts": "import { x } from './gone';"})

        with pytest.raises(SourceReadError):
            build_closure(root, ["a.ts"])

    def test_missing_entry_is_fatal(self, tmp_path):
        """Test a missing entry file aborts the closure."""
        with pytest.raises(SourceReadError):
            build_closure(tmp_path, ["nope.ts"])

    def test_external_imports_not_followed(self, project):
        """Test package imports are not followed."""
        root = project({"a.ts": "import React from 'react';\nimport { x } from 'lib/x';"})

        graph = build_closure(root, ["a.ts"])

        assert graph.keys == ("a",)
        assert dict(graph.get("a").imports) == {}

    def test_base_url_followed(self, project):
        """Test imports resolved through baseUrl."""
        root = project({
            "src/main.ts": "import { foo } from 'utils/foo';",
            "src/utils/foo.ts": "export const foo = 1;",
        })

        graph = build_closure(root, ["src/main.ts"], base_url="src")

        assert graph.keys == ("src/main", "src/utils/foo")

    def test_diagnostics_collected(self, project):
        """Test diagnostics gathered from every parsed file."""
        root = project({
            "a.ts": "import './b';",
            "b.ts": "export declare global {}",
        })

        graph = build_closure(root, ["a.ts"])

        assert len(graph.diagnostics) == 1
        assert graph.diagnostics[0].path == "b"


class TestGenerationStep:
    """Tests for computing the modules to parse next."""

    def test_missing_imports(self):
        """Test finding imported modules not yet parsed."""
        graph = ModuleGraph()
        a = FileRecord("a", {"b": ("x",), "c": ("*",)}, ())
        graph.add_file(a)
        graph.add_file(FileRecord("b", {}, ("x",)))

        assert missing_imports(graph, [a]) == ["c"]

    def test_missing_imports_dedupes(self):
        """Test duplicate candidates are listed once."""
        graph = ModuleGraph()
        a = FileRecord("a", {"c": ("x",)}, ())
        b = FileRecord("b", {"c": ("y",), "d": ("z",)}, ())
        graph.add_file(a)
        graph.add_file(b)

        assert missing_imports(graph, [a, b]) == ["c", "d"]

    def test_missing_imports_excludes(self):
        """Test excluded suffixes are skipped."""
        graph = ModuleGraph()
        a = FileRecord("a", {"types.d": ("T",), "b": ("x",)}, ())
        graph.add_file(a)

        assert missing_imports(graph, [a], [".d"]) == ["b"]

    def test_is_excluded(self):
        """Test suffix matching against module keys."""
        assert is_excluded("src/foo.spec", [".spec"])
        assert not is_excluded("src/spec", [".spec"])
        assert not is_excluded("src/foo", [])
