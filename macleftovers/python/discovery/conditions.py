"""Per-app matching overrides.

Name-based matching is wrong for some apps: a browser's bundle id shares
tokens with its web-app wrappers, and some vendors keep data under names
that never mention the app. The conditions table (data/conditions.yaml)
corrects these cases:

    conditions:
      - bundle_id: comgooglechrome        # normalized bundle-id substring
        include: [google, chrome]         # tokens that force a match
        exclude: [chromeapp, iphone]      # tokens that veto a match
        include_force:                    # always added to the result
          - ~/Library/Application Support/Google/Chrome
        exclude_force: []                 # always removed from the result

    skip_conditions:
      - skip_prefix: [comapple]           # entries never considered...
        allow_prefixes: [comappledtxcode] # ...unless they match one of these

Security constraints:
    - Force paths must be absolute (after "~" expansion)
    - No directory traversal allowed (..)
"""

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .identifiers import IdentifierSet, normalize

logger = logging.getLogger(__name__)


class ConditionsError(ValueError):
    """Raised when the conditions table is malformed or unsafe."""
    pass


class Classification(enum.Enum):
    """Outcome of checking an entry token against the applicable conditions."""
    EXCLUDE = "exclude"
    INCLUDE = "include"
    NONE = "none"


@dataclass(frozen=True)
class MatchCondition:
    """Override rules for every app whose normalized bundle id contains ``bundle_id``."""
    bundle_id: str
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    include_force: Optional[tuple[str, ...]] = None
    exclude_force: Optional[tuple[str, ...]] = None

    def applies_to(self, bundle_id_normalized: str) -> bool:
        return self.bundle_id in bundle_id_normalized


@dataclass(frozen=True)
class SkipCondition:
    """Name prefixes never treated as leftovers, with per-entry exemptions."""
    skip_prefix: tuple[str, ...]
    allow_prefixes: tuple[str, ...] = ()

    def skips(self, token: str) -> bool:
        """Check whether a token is blocked by this condition."""
        if not token.startswith(self.skip_prefix):
            return False
        return not (self.allow_prefixes and token.startswith(self.allow_prefixes))


@dataclass(frozen=True)
class ConditionSet:
    """The loaded table: match conditions and skip conditions."""
    conditions: tuple[MatchCondition, ...] = ()
    skip_conditions: tuple[SkipCondition, ...] = ()


def validate_force_path(path: str, context: str) -> str:
    """Expand and validate a force include/exclude path.

    Args:
        path: Path string from the table (may start with "~")
        context: Description for error messages

    Returns:
        The expanded, normalized absolute path

    Raises:
        ConditionsError: If the path is relative or attempts traversal
    """
    if ".." in Path(path).parts:
        raise ConditionsError(f"Directory traversal not allowed in {context}: {path}")

    expanded = os.path.expanduser(path)
    if not os.path.isabs(expanded):
        raise ConditionsError(f"Force paths must be absolute in {context}: {path}")
    return os.path.normpath(expanded)


def _token_list(entry: dict[str, Any], key: str, context: str) -> tuple[str, ...]:
    values = entry.get(key) or []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ConditionsError(f"{context}: '{key}' must be a list of strings")
    return tuple(token for token in (normalize(v) for v in values) if token)


def _force_list(entry: dict[str, Any], key: str, context: str) -> Optional[tuple[str, ...]]:
    if entry.get(key) is None:
        return None
    values = entry[key]
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ConditionsError(f"{context}: '{key}' must be a list of paths")
    return tuple(validate_force_path(v, f"{context} {key}") for v in values)


def parse_conditions(data: Optional[dict[str, Any]]) -> ConditionSet:
    """Validate raw table data and build a ConditionSet.

    Raises:
        ConditionsError: If any entry is malformed
    """
    if data is None:
        return ConditionSet()
    if not isinstance(data, dict):
        raise ConditionsError("Conditions table must be a mapping")

    conditions = []
    for index, entry in enumerate(data.get('conditions') or []):
        context = f"conditions[{index}]"
        if not isinstance(entry, dict):
            raise ConditionsError(f"{context}: entry must be a mapping")
        key = normalize(str(entry.get('bundle_id') or ''))
        if not key:
            raise ConditionsError(f"{context}: missing 'bundle_id'")
        conditions.append(MatchCondition(
            bundle_id=key,
            include=_token_list(entry, 'include', context),
            exclude=_token_list(entry, 'exclude', context),
            include_force=_force_list(entry, 'include_force', context),
            exclude_force=_force_list(entry, 'exclude_force', context),
        ))

    skip_conditions = []
    for index, entry in enumerate(data.get('skip_conditions') or []):
        context = f"skip_conditions[{index}]"
        if not isinstance(entry, dict):
            raise ConditionsError(f"{context}: entry must be a mapping")
        skip_prefix = _token_list(entry, 'skip_prefix', context)
        if not skip_prefix:
            raise ConditionsError(f"{context}: 'skip_prefix' must not be empty")
        skip_conditions.append(SkipCondition(
            skip_prefix=skip_prefix,
            allow_prefixes=_token_list(entry, 'allow_prefixes', context),
        ))

    return ConditionSet(tuple(conditions), tuple(skip_conditions))


def load_conditions(conditions_path: Path) -> ConditionSet:
    """Load and validate the conditions YAML table.

    Args:
        conditions_path: Path to the conditions.yaml file

    Returns:
        The parsed ConditionSet

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConditionsError: If any entry is malformed or unsafe
        yaml.YAMLError: If YAML is malformed
    """
    import yaml

    with open(conditions_path) as f:
        data = yaml.safe_load(f)

    return parse_conditions(data)


def get_default_conditions_path() -> Path:
    """Get the default path to conditions.yaml relative to this module."""
    # Navigate from discovery/ up to python/, then to data/
    module_dir = Path(__file__).parent
    return module_dir.parent.parent / 'data' / 'conditions.yaml'


class ConditionTable:
    """Lazily loaded, cached conditions table.

    Example:
        >>> table = ConditionTable()
        >>> len(table.conditions.conditions) > 0
        True
    """

    def __init__(self, conditions_path: Optional[Path] = None):
        self.conditions_path = conditions_path or get_default_conditions_path()
        self._conditions: Optional[ConditionSet] = None

    @property
    def conditions(self) -> ConditionSet:
        """Lazy-load and cache the table."""
        if self._conditions is None:
            self._conditions = load_conditions(self.conditions_path)
            logger.debug(
                "Loaded %d conditions and %d skip conditions from %s",
                len(self._conditions.conditions),
                len(self._conditions.skip_conditions),
                self.conditions_path,
            )
        return self._conditions

    def reload(self) -> None:
        """Force reload of the table from disk."""
        self._conditions = None


class ConditionEngine:
    """Applies the conditions table to one app."""

    def __init__(self, conditions: ConditionSet, identifiers: IdentifierSet):
        self.identifiers = identifiers
        self._applicable = tuple(
            c for c in conditions.conditions
            if c.applies_to(identifiers.bundle_id_normalized)
        )

    def applicable(self) -> tuple[MatchCondition, ...]:
        """Conditions whose key is a substring of the normalized bundle id."""
        return self._applicable

    def classify(self, token: str) -> Classification:
        """Check an entry token against every applicable condition.

        Within each condition the exclude list is consulted before the
        include list, so an entry matching both is excluded. Conditions are
        only consulted when the bundle id is specific enough to match on.
        """
        if not self.identifiers.use_bundle_id:
            return Classification.NONE

        normalized = normalize(token)
        for condition in self._applicable:
            if any(word in normalized for word in condition.exclude):
                return Classification.EXCLUDE
            if any(word in normalized for word in condition.include):
                return Classification.INCLUDE
        return Classification.NONE

    def forced_include_paths(self) -> list[str]:
        """Paths always added to the result for this app."""
        paths: list[str] = []
        for condition in self._applicable:
            for path in condition.include_force or ():
                if path not in paths:
                    paths.append(path)
        return paths

    def forced_exclude_paths(self) -> list[str]:
        """Paths always removed from the result for this app."""
        paths: list[str] = []
        for condition in self._applicable:
            for path in condition.exclude_force or ():
                if path not in paths:
                    paths.append(path)
        return paths
