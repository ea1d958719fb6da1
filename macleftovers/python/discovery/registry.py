"""Orphan-file registry lookups.

Files the user previously associated with an app (for example leftovers
adopted by hand after an earlier uninstall) are kept in a registry that
outlives any single discovery run. Discovery only reads it:

    # orphans.yaml
    /Applications/Example.app:
      - ~/Documents/Example Projects
      - ~/Library/Example Cache
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Protocol, Union

from ..utils.paths import standardize_path

logger = logging.getLogger(__name__)


class OrphanRegistry(Protocol):
    """Lookup of files associated with an app path."""

    def associated_files(self, app_path: Union[str, Path]) -> list[str]:
        ...


class MappingOrphanRegistry:
    """Registry backed by an in-memory mapping of app path to files."""

    def __init__(self, entries: Optional[Mapping[str, list[str]]] = None):
        self._entries: dict[str, list[str]] = {}
        for app_path, files in (entries or {}).items():
            self._entries[standardize_path(app_path)] = [
                standardize_path(f) for f in files or []
            ]

    def associated_files(self, app_path: Union[str, Path]) -> list[str]:
        return list(self._entries.get(standardize_path(app_path), []))

    def __len__(self) -> int:
        return len(self._entries)


def load_registry(registry_path: Path) -> MappingOrphanRegistry:
    """Load a YAML registry file.

    A missing or empty file yields an empty registry. Malformed entries
    are logged and ignored.

    Raises:
        yaml.YAMLError: If YAML is malformed
    """
    import yaml

    if not os.path.exists(registry_path):
        return MappingOrphanRegistry()

    with open(registry_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return MappingOrphanRegistry()
    if not isinstance(data, dict):
        logger.warning("Ignoring orphan registry %s: expected a mapping", registry_path)
        return MappingOrphanRegistry()

    entries = {}
    for app_path, files in data.items():
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            logger.warning("Ignoring registry entry for %s: expected a list of paths", app_path)
            continue
        entries[str(app_path)] = files
    return MappingOrphanRegistry(entries)
