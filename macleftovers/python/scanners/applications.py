"""Application descriptors for macOS bundles.

Reads an .app bundle's Info.plist to extract the identifiers that leftover
discovery matches against.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..utils.constants import WEB_APP_BUNDLE_PREFIXES
from ..utils.plist import read_plist_safe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppDescriptor:
    """An installed application whose leftovers are being discovered.

    Attributes:
        bundle_id: Reverse-DNS bundle identifier (may be empty)
        app_name: Display name of the application
        path: Path to the .app bundle
        web_app: Whether the bundle is a browser-generated web-app wrapper
        executable: CFBundleExecutable name, if known
        icon_file: CFBundleIconFile name, if known
    """
    bundle_id: str
    app_name: str
    path: Path
    web_app: bool = False
    executable: Optional[str] = None
    icon_file: Optional[str] = None


def get_bundle_info(app_path: Path) -> Optional[dict]:
    """Extract bundle info from an app's Info.plist.

    Handles both XML and binary plist formats.

    Args:
        app_path: Path to the .app bundle

    Returns:
        Dictionary with bundle_id, name, executable and icon_file, or None
        if extraction fails
    """
    info_plist = Path(app_path) / "Contents" / "Info.plist"
    if not info_plist.exists():
        return None

    plist, error = read_plist_safe(info_plist)
    if plist is None:
        logger.warning("Could not read %s: %s", info_plist, error)
        return None

    return {
        "bundle_id": plist.get("CFBundleIdentifier"),
        "name": plist.get("CFBundleDisplayName") or plist.get("CFBundleName"),
        "executable": plist.get("CFBundleExecutable"),
        "icon_file": plist.get("CFBundleIconFile"),
    }


def get_bundle_identifier(app_path: Path) -> Optional[str]:
    """Return the CFBundleIdentifier of a bundle, or None."""
    info = get_bundle_info(app_path)
    if info is None:
        return None
    return info.get("bundle_id") or None


def is_web_app(bundle_id: str) -> bool:
    """Check whether a bundle id belongs to a browser web-app wrapper."""
    return bundle_id.startswith(WEB_APP_BUNDLE_PREFIXES)


def describe_app(app_path: Union[str, Path]) -> AppDescriptor:
    """Build an AppDescriptor for an .app bundle.

    A bundle without a readable Info.plist still yields a descriptor named
    after the bundle, with an empty bundle identifier.

    Args:
        app_path: Path to the .app bundle

    Returns:
        The descriptor
    """
    path = Path(app_path).expanduser()
    info = get_bundle_info(path) or {}
    bundle_id = info.get("bundle_id") or ""

    return AppDescriptor(
        bundle_id=bundle_id,
        app_name=info.get("name") or path.stem,
        path=path,
        web_app=is_web_app(bundle_id),
        executable=info.get("executable"),
        icon_file=info.get("icon_file"),
    )
