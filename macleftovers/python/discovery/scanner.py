"""Heuristic leftover matching over the configured search locations.

Each search root is listed non-recursively and every child is matched
against the app's identifiers:

1. A condition excluding the entry's token rejects it.
2. A condition including the token accepts it.
3. Web-app wrappers only match entries containing their bundle id.
4. Otherwise the entry matches when its token embeds the bundle id or its
   two-component suffix, or matches the app name, the bundle file name or
   the letters-only app name. Strict mode requires those names to equal
   the token; loose mode accepts containment.
"""

import logging
import os
import stat
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..utils.paths import standardize_path
from .accumulator import DiscoverySet
from .conditions import Classification, ConditionEngine, SkipCondition
from .identifiers import IdentifierSet, item_token, normalize

logger = logging.getLogger(__name__)


def is_supported_file_type(path: str) -> bool:
    """Only regular files, directories and symlinks count as leftovers."""
    try:
        mode = os.lstat(path).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) or stat.S_ISDIR(mode) or stat.S_ISLNK(mode)


class LocationScanner:
    """Matches the children of each search root against one app."""

    def __init__(
        self,
        identifiers: IdentifierSet,
        engine: ConditionEngine,
        accumulator: DiscoverySet,
        skip_conditions: Sequence[SkipCondition] = (),
        strict: bool = True,
        web_app: bool = False,
    ):
        self.identifiers = identifiers
        self.engine = engine
        self.accumulator = accumulator
        self.skip_conditions = tuple(skip_conditions)
        self.strict = strict
        self.web_app = web_app

    def should_skip(self, token: str, path: str) -> bool:
        """Check whether an entry is excluded before matching."""
        if path in self.accumulator or not is_supported_file_type(path):
            return True
        normalized = normalize(token)
        return any(condition.skips(normalized) for condition in self.skip_conditions)

    def _name_matches(self, token: str, name: str) -> bool:
        if not name:
            return False
        return token == name if self.strict else name in token

    def matches(self, token: str) -> bool:
        """Apply the match predicate to an entry token."""
        classification = self.engine.classify(token)
        if classification is Classification.EXCLUDE:
            return False
        if classification is Classification.INCLUDE:
            return True

        ids = self.identifiers
        if self.web_app:
            return bool(ids.bundle_id_normalized) and ids.bundle_id_normalized in token

        bundle_match = ids.use_bundle_id and (
            (bool(ids.bundle_id_normalized) and ids.bundle_id_normalized in token)
            or (bool(ids.bundle_suffix) and ids.bundle_suffix in token)
        )
        return bundle_match or any(
            self._name_matches(token, name)
            for name in (ids.name_normalized, ids.name_path_stem, ids.name_letters)
        )

    def scan_location(self, location: str) -> list[str]:
        """Match the immediate children of one root and record the hits.

        Args:
            location: Standardized absolute search root

        Returns:
            The matched paths (already inserted into the accumulator)
        """
        try:
            names = os.listdir(location)
        except OSError as e:
            logger.debug("Skipping search location %s: %s", location, e)
            return []

        matched = []
        for name in names:
            path = os.path.join(location, name)
            token = item_token(name)
            if self.should_skip(token, path):
                continue
            if self.matches(token):
                matched.append(path)

        self.accumulator.update(matched)
        return matched

    def scan(self, locations: Iterable[str], max_workers: Optional[int] = None) -> set[str]:
        """Scan every root concurrently and wait for all of them.

        Args:
            locations: Ordered search roots
            max_workers: Worker cap (defaults to one worker per root)

        Returns:
            Snapshot of the accumulator after every worker has joined
        """
        roots = list(dict.fromkeys(standardize_path(loc) for loc in locations))
        if roots:
            with ThreadPoolExecutor(max_workers=max_workers or len(roots)) as executor:
                futures = [executor.submit(self.scan_location, root) for root in roots]
                for root, future in zip(roots, futures):
                    try:
                        future.result()
                    except Exception:
                        logger.exception("Scanning %s failed", root)
        return self.accumulator.snapshot()
