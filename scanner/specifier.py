"""Normalization of module specifiers as written in import/export statements."""

import re


TRIM_QUOTES = re.compile(r"""^['"](.*)['"]$""", re.DOTALL)
TRAILING_INDEX = re.compile(r"/index$")


def normalize_specifier(raw: str) -> str:
    """
    Turn a quoted module specifier token into a bare specifier.

    Strips one pair of surrounding quotes and a trailing ``/index``
    segment, so that ``'./foo/index'`` and ``"./foo"`` both become
    ``./foo``.

    Args:
        raw: Specifier text exactly as it appears in the source.

    Returns:
        The normalized specifier.
    """
    unquoted = TRIM_QUOTES.sub(r"\1", raw)
    return TRAILING_INDEX.sub("", unquoted)
