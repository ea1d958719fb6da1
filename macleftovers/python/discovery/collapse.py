"""Path collapsing.

When a directory is slated for removal its contents go with it, so
listing its descendants separately is redundant. Collapsing keeps only
the shallowest covering paths, in lexicographic order.
"""

from collections.abc import Iterable

from ..utils.paths import ancestors, is_in_trash, standardize_path


def collapse(paths: Iterable[str]) -> list[str]:
    """Remove duplicate and nested paths.

    Paths are standardized and sorted ascending. A path is dropped when
    any already kept path is one of its ancestors. Comparing against every
    kept ancestor (not just the previous path) matters because sorting
    can interleave siblings: "/A/B C" sorts between "/A/B" and "/A/B/C".

    A lone survivor inside the Trash is not an actionable leftover, so
    that case yields an empty list.

    Examples:
        >>> collapse(["/A/B/C", "/A/B"])
        ['/A/B']
        >>> collapse(["/A/B", "/A/B C", "/A/B/C"])
        ['/A/B', '/A/B C']
    """
    kept: list[str] = []
    kept_set: set[str] = set()

    for path in sorted({standardize_path(p) for p in paths}):
        if any(parent in kept_set for parent in ancestors(path)):
            continue
        kept.append(path)
        kept_set.add(path)

    if len(kept) == 1 and is_in_trash(kept[0]):
        return []
    return kept
