"""Sandbox and app-group container resolution.

Sandboxed apps keep their data in containers managed by macOS:
- ~/Library/Group Containers/<group id>/ (App Groups)
- ~/Library/Containers/<bundle id or UUID>/ (Sandboxed apps)

Containers named by bundle id are found by the location scanner. UUID
named containers only reveal their owner through the metadata descriptor
containermanagerd writes inside them, so they are resolved here.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from ..scanners.applications import get_bundle_identifier
from ..utils.constants import (
    CONTAINER_METADATA_FILE,
    CONTAINER_METADATA_ID_KEY,
    UUID_PATTERN,
)
from ..utils.plist import read_plist_safe

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(UUID_PATTERN, re.IGNORECASE)


def is_container_uuid(name: str) -> bool:
    """Check whether a directory name has the canonical UUID shape.

    Examples:
        >>> is_container_uuid("1B4C2D7E-0A9F-4E3B-8C6D-5F2A1B0C9D8E")
        True
        >>> is_container_uuid("com.example.app")
        False
    """
    return _UUID_RE.match(name) is not None


def group_container_path(group_id: str, home: Optional[Path] = None) -> Path:
    """Location of the app-group container for a group identifier."""
    home = home or Path.home()
    return home / "Library" / "Group Containers" / group_id


def container_owner(container: Path) -> Optional[str]:
    """Read the owning bundle identifier from a container's metadata descriptor."""
    metadata, error = read_plist_safe(container / CONTAINER_METADATA_FILE)
    if metadata is None:
        logger.debug("No readable metadata in %s: %s", container, error)
        return None
    owner = metadata.get(CONTAINER_METADATA_ID_KEY)
    return owner if isinstance(owner, str) else None


def find_uuid_containers(bundle_id: str, home: Optional[Path] = None) -> list[Path]:
    """Find UUID-named sandbox containers owned by a bundle identifier.

    Args:
        bundle_id: Owning bundle identifier to look for
        home: Home directory to search (defaults to the current user's)

    Returns:
        Matching container directories, in name order
    """
    home = home or Path.home()
    containers_root = home / "Library" / "Containers"

    try:
        children = sorted(containers_root.iterdir())
    except OSError as e:
        logger.warning("Error accessing Containers directory %s: %s", containers_root, e)
        return []

    found = []
    for directory in children:
        if directory.name.startswith('.') or not is_container_uuid(directory.name):
            continue
        try:
            if not directory.is_dir():
                continue
        except OSError:
            continue
        if container_owner(directory) == bundle_id:
            found.append(directory)
    return found


def resolve_containers(
    bundle_path: Union[str, Path],
    home: Optional[Path] = None,
) -> list[str]:
    """Find every OS-managed container belonging to an app bundle.

    The bundle identifier is read from the bundle itself. A bundle that
    cannot be read has no containers.

    Args:
        bundle_path: Path to the .app bundle
        home: Home directory to search (defaults to the current user's)

    Returns:
        Container paths as strings (group container first)
    """
    bundle_id = get_bundle_identifier(Path(bundle_path))
    if not bundle_id:
        return []

    containers = []
    group_container = group_container_path(bundle_id, home)
    if group_container.exists():
        containers.append(str(group_container))

    containers.extend(str(p) for p in find_uuid_containers(bundle_id, home))
    return containers
