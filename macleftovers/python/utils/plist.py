"""Property list reading utilities for macOS.

Bundle Info.plist files and container metadata descriptors may be stored
in XML or binary format. plistlib reads both; plutil is used as a fallback
for binary files plistlib rejects.
"""

import plistlib
import subprocess
from pathlib import Path
from typing import Any, Optional
from xml.parsers.expat import ExpatError

from .constants import TIMEOUT_SYSTEM_QUICK


class PlistError(Exception):
    """Raised when plist operations fail."""
    pass


def is_binary_plist(file_path: Path) -> bool:
    """Check if a file is a binary plist.

    Binary plists start with the magic bytes 'bplist'.

    Args:
        file_path: Path to the file to check

    Returns:
        True if file is a binary plist, False otherwise
    """
    try:
        with open(file_path, 'rb') as f:
            return f.read(6) == b'bplist'
    except OSError:
        return False


def _read_with_plutil(file_path: Path) -> dict[str, Any]:
    """Convert a plist to XML on stdout with plutil and parse it."""
    try:
        result = subprocess.run(
            ['/usr/bin/plutil', '-convert', 'xml1', '-o', '-', str(file_path)],
            capture_output=True,
            timeout=TIMEOUT_SYSTEM_QUICK,
        )
    except subprocess.TimeoutExpired:
        raise PlistError(f"plutil timed out reading {file_path}")
    except (FileNotFoundError, OSError) as e:
        raise PlistError(f"plutil unavailable: {e}")

    if result.returncode != 0:
        error_msg = result.stderr.decode(errors='replace').strip() or "Unknown error"
        raise PlistError(f"plutil error: {error_msg}")

    try:
        return plistlib.loads(result.stdout)
    except plistlib.InvalidFileException as e:
        raise PlistError(f"Invalid plist format: {e}")


def read_plist(file_path: Path) -> dict[str, Any]:
    """Read a plist file and return its contents as a dictionary.

    Handles both binary and XML plist formats.

    Args:
        file_path: Path to the plist file

    Returns:
        Dictionary with plist contents

    Raises:
        PlistError: If file cannot be read or parsed
    """
    try:
        with open(file_path, 'rb') as f:
            data = plistlib.load(f)
    except plistlib.InvalidFileException as e:
        if not is_binary_plist(file_path):
            raise PlistError(f"Invalid plist format: {e}")
        # Binary plist that plistlib can't read
        data = _read_with_plutil(file_path)
    except ExpatError as e:
        raise PlistError(f"Malformed XML plist: {e}")
    except Exception as e:
        raise PlistError(f"Could not read plist: {e}")

    if not isinstance(data, dict):
        raise PlistError(f"Expected a dictionary at the root of {file_path}")
    return data


def read_plist_safe(file_path: Path) -> tuple[Optional[dict], Optional[str]]:
    """Safely read a plist file, returning error instead of raising.

    Args:
        file_path: Path to the plist file

    Returns:
        Tuple of (data, error_message) - data is None if error
    """
    try:
        return read_plist(file_path), None
    except PlistError as e:
        return None, str(e)
