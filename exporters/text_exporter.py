"""Plain-text exporter for unused-export reports (console format)."""

from typing import Dict, List, Sequence


def summary_line(count: int) -> str:
    """Headline such as `1 module with unused exports`."""
    plural = "" if count == 1 else "s"
    return f"{count} module{plural} with unused exports"


def to_text(unused: Dict[str, Sequence[str]]) -> str:
    """
    Convert an unused-export report to console text.

    Args:
        unused: Module key -> unused export names.

    Returns:
        A summary line followed by one `path: a, b` line per module.
    """
    lines: List[str] = [summary_line(len(unused))]
    for path, names in unused.items():
        lines.append(f"{path}: {', '.join(names)}")
    return "\n".join(lines)
