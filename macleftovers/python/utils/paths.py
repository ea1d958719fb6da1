"""Path helpers for leftover discovery.

Discovered paths are compared as standardized absolute strings: user
home expanded, redundant separators and "." / ".." segments removed.
Symlinks are NOT resolved, since a symlinked leftover is removed as the
link itself.
"""

import os
from pathlib import Path
from typing import Union

from .constants import TRASH_COMPONENT


def standardize_path(path: Union[str, Path]) -> str:
    """Return an absolute, normalized path string.

    Examples:
        >>> standardize_path("/Users/me/Library//Caches/./app/")
        '/Users/me/Library/Caches/app'
    """
    return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))


def ancestors(path: str) -> list[str]:
    """List every proper ancestor of a standardized absolute path.

    Examples:
        >>> ancestors("/A/B/C")
        ['/A/B', '/A', '/']
    """
    result = []
    current = os.path.dirname(path)
    while True:
        result.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return result if path != os.sep else []


def is_in_trash(path: Union[str, Path]) -> bool:
    """Check whether a path lies inside a Trash folder (~/.Trash or a volume's .Trashes)."""
    return any(part.startswith(TRASH_COMPONENT) for part in Path(path).parts)
