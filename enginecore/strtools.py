"""Small string helpers shared across the engine."""

from __future__ import annotations

import sys

if sys.platform == "win32":
    CORRECT_PATH_SEPARATOR = "\\"
    INCORRECT_PATH_SEPARATOR = "/"
else:
    CORRECT_PATH_SEPARATOR = "/"
    INCORRECT_PATH_SEPARATOR = "\\"


def fix_slashes(name: str, separator: str = CORRECT_PATH_SEPARATOR) -> str:
    """Return ``name`` with every ``separator`` swapped for the other path separator.

    When ``separator`` is the incorrect separator for this platform it is
    replaced by the correct one; any other separator is replaced by the
    incorrect one.
    """
    if separator == INCORRECT_PATH_SEPARATOR:
        replacement = CORRECT_PATH_SEPARATOR
    else:
        replacement = INCORRECT_PATH_SEPARATOR
    return name.replace(separator, replacement)