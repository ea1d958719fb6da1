"""Finder configuration.

Settings are plain values supplied by the caller (usually read from the
JSON config file handed to main.py):

    {
        "name_search_strict": true,
        "spotlight": true,
        "spotlight_timeout": 5.0,
        "locations": ["~/Library/Caches", "~/Library/Preferences"],
        "size_chunk_size": 10,
        "size_max_workers": 8
    }

Every key is optional. Unknown keys are rejected so that typos do not
silently fall back to defaults.
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_SEARCH_LOCATIONS,
    SIZE_CHUNK_SIZE,
    SIZE_MAX_WORKERS,
    TIMEOUT_SPOTLIGHT,
)


class SettingsError(ValueError):
    """Raised when a settings value is missing, malformed or unknown."""
    pass


def _default_locations() -> list[str]:
    return [os.path.expanduser(location) for location in DEFAULT_SEARCH_LOCATIONS]


def _default_workers() -> int:
    return max(1, min(SIZE_MAX_WORKERS, os.cpu_count() or 1))


@dataclass
class FinderSettings:
    """Options controlling one leftover discovery run.

    Attributes:
        name_search_strict: Require exact name-token equality instead of
            substring containment when matching by app name
        spotlight: Query the Spotlight index for paths heuristics miss
        spotlight_timeout: Upper bound in seconds on the Spotlight query
        locations: Ordered directories whose immediate children are matched
        size_chunk_size: Paths handed to each size worker
        size_max_workers: Concurrent size workers
    """
    name_search_strict: bool = True
    spotlight: bool = True
    spotlight_timeout: float = TIMEOUT_SPOTLIGHT
    locations: list[str] = field(default_factory=_default_locations)
    size_chunk_size: int = SIZE_CHUNK_SIZE
    size_max_workers: int = field(default_factory=_default_workers)

    def __post_init__(self) -> None:
        if self.spotlight_timeout <= 0:
            raise SettingsError(
                f"spotlight_timeout must be positive: {self.spotlight_timeout}"
            )
        if self.size_chunk_size < 1:
            raise SettingsError(
                f"size_chunk_size must be at least 1: {self.size_chunk_size}"
            )
        if self.size_max_workers < 1:
            raise SettingsError(
                f"size_max_workers must be at least 1: {self.size_max_workers}"
            )
        self.locations = [os.path.expanduser(str(loc)) for loc in self.locations]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FinderSettings":
        """Build settings from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(unknown)}")

        try:
            return cls(**data)
        except TypeError as e:
            raise SettingsError(f"Invalid settings: {e}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_settings(config_path: Path) -> FinderSettings:
    """Load settings from a JSON file.

    Args:
        config_path: Path to the JSON settings file

    Returns:
        Parsed FinderSettings

    Raises:
        SettingsError: If the file is missing, not JSON, or holds bad values
    """
    try:
        with open(config_path) as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SettingsError(f"Settings file not found: {config_path}")
    except json.JSONDecodeError as e:
        raise SettingsError(f"Invalid JSON in settings file: {e}")

    if not isinstance(data, dict):
        raise SettingsError("Settings file must contain a JSON object")
    return FinderSettings.from_dict(data)
