"""Platform-specific file inspection for macOS.

Read-only helpers used when annotating discovered leftovers:
- Platform detection
- Allocated vs. logical size of a file or directory tree
- CPU architectures of a Mach-O executable (via lipo, or the header)
"""

import logging
import os
import platform
import stat
import struct
import subprocess
from pathlib import Path
from typing import Optional

from .constants import TIMEOUT_SYSTEM_QUICK

logger = logging.getLogger(__name__)

# Mach-O magic numbers
MH_MAGIC = 0xfeedface
MH_MAGIC_64 = 0xfeedfacf
FAT_MAGIC = 0xcafebabe
FAT_MAGIC_64 = 0xcafebabf

# Real fat binaries carry a handful of slices; Java class files share FAT_MAGIC
MAX_FAT_ARCHS = 32

CPU_TYPE_NAMES = {
    7: "i386",
    0x01000007: "x86_64",
    12: "arm",
    0x0100000c: "arm64",
    0x0200000c: "arm64_32",
}


def is_macos() -> bool:
    """Check if running on macOS.

    Returns:
        True if running on Darwin/macOS
    """
    return platform.system() == "Darwin"


def disk_usage(path: Path) -> tuple[int, int]:
    """Compute the on-disk and logical size of a file or directory tree.

    Symlinks are counted as themselves and never followed. Entries that
    vanish or cannot be read during the walk are skipped.

    Args:
        path: File or directory to measure

    Returns:
        Tuple of (real_bytes, logical_bytes) where real is allocated
        blocks x 512 and logical is the sum of st_size
    """
    try:
        st = os.lstat(path)
    except OSError:
        return 0, 0

    real = getattr(st, "st_blocks", 0) * 512
    logical = st.st_size
    if not stat.S_ISDIR(st.st_mode):
        return real, logical

    # Directory entries themselves are not part of the logical size
    logical = 0
    stack = [str(path)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        entry_stat = entry.stat(follow_symlinks=False)
                    except OSError:
                        continue
                    real += getattr(entry_stat, "st_blocks", 0) * 512
                    if entry.is_dir(follow_symlinks=False):
                        stack.append(entry.path)
                    else:
                        logical += entry_stat.st_size
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)
            continue

    return real, logical


def lipo_archs(executable: Path) -> Optional[set[str]]:
    """Ask lipo for the architectures of an executable.

    Uses: lipo -archs <path>

    Returns:
        Set of architecture names, or None if lipo is unavailable or fails
    """
    if not is_macos():
        return None

    try:
        result = subprocess.run(
            ["/usr/bin/lipo", "-archs", str(executable)],
            capture_output=True,
            text=True,
            check=False,
            timeout=TIMEOUT_SYSTEM_QUICK,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("lipo failed for %s: %s", executable, e)
        return None

    if result.returncode != 0:
        return None
    return set(result.stdout.split())


def macho_archs(executable: Path) -> set[str]:
    """Read the architectures of an executable from its Mach-O header.

    Handles thin 32/64-bit images and fat (universal) binaries.

    Returns:
        Set of architecture names, empty if the file is not Mach-O
    """
    try:
        with open(executable, "rb") as f:
            header = f.read(8)
            if len(header) < 8:
                return set()

            (magic_be,) = struct.unpack(">I", header[:4])
            if magic_be in (FAT_MAGIC, FAT_MAGIC_64):
                (nfat,) = struct.unpack(">I", header[4:8])
                if nfat == 0 or nfat > MAX_FAT_ARCHS:
                    return set()
                entry_size = 32 if magic_be == FAT_MAGIC_64 else 20
                archs = set()
                for _ in range(nfat):
                    entry = f.read(entry_size)
                    if len(entry) < entry_size:
                        break
                    (cputype,) = struct.unpack(">I", entry[:4])
                    archs.add(CPU_TYPE_NAMES.get(cputype, str(cputype)))
                return archs

            (magic_le,) = struct.unpack("<I", header[:4])
            if magic_le in (MH_MAGIC, MH_MAGIC_64):
                (cputype,) = struct.unpack("<I", header[4:8])
                return {CPU_TYPE_NAMES.get(cputype, str(cputype))}
    except OSError as e:
        logger.debug("Could not read executable %s: %s", executable, e)

    return set()
