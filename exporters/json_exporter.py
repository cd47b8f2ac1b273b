"""JSON exporter for unused-export reports (machine-friendly format)."""

import json
from typing import Any, Dict, Optional, Sequence

from graph.model import ModuleGraph


def to_json(
    unused: Dict[str, Sequence[str]],
    graph: Optional[ModuleGraph] = None,
    indent: int = 2,
) -> str:
    """
    Convert an unused-export report to JSON.

    Args:
        unused: Module key -> unused export names.
        graph: If given, its warnings are included under "warnings".
        indent: JSON indentation level.

    Returns:
        JSON string with "count" and "modules" keys.
    """
    data: Dict[str, Any] = {
        "count": len(unused),
        "modules": {path: list(names) for path, names in unused.items()},
    }

    if graph is not None:
        data["warnings"] = [
            {
                "path": d.path,
                "line": d.line,
                "kind": d.kind,
                "message": d.message,
            }
            for d in graph.diagnostics
        ]

    return json.dumps(data, indent=indent)
