"""Size, icon and architecture annotation for discovered leftovers.

Sizes come from Spotlight metadata when available (no directory walk
needed) and fall back to walking the tree. Paths are processed in
fixed-size chunks by a bounded worker pool.
"""

import enum
import logging
import subprocess
import threading
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..scanners.applications import get_bundle_info
from ..utils.constants import SIZE_CHUNK_SIZE, SIZE_MAX_WORKERS, TIMEOUT_SYSTEM_QUICK
from ..utils.file_ops import disk_usage, is_macos, lipo_archs, macho_archs

logger = logging.getLogger(__name__)

MDLS = "/usr/bin/mdls"


class Architecture(enum.Enum):
    """CPU architectures a bundle's main executable was built for."""
    ARM = "arm"
    INTEL = "intel"
    UNIVERSAL = "universal"
    EMPTY = "empty"

    @classmethod
    def from_archs(cls, archs: set[str]) -> "Architecture":
        has_arm = bool(archs & {"arm64", "arm64e"})
        has_intel = bool(archs & {"x86_64", "i386"})
        if has_arm and has_intel:
            return cls.UNIVERSAL
        if has_arm:
            return cls.ARM
        if has_intel:
            return cls.INTEL
        return cls.EMPTY


@dataclass(frozen=True)
class PathSize:
    """Allocated (real) and apparent (logical) size in bytes."""
    real: int = 0
    logical: int = 0


def _parse_mdls_value(value: str) -> Optional[int]:
    value = value.strip()
    if not value or value == "(null)":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def spotlight_size(path: str) -> tuple[Optional[int], Optional[int]]:
    """Read kMDItemPhysicalSize and kMDItemLogicalSize for a path.

    Uses: mdls -raw -name kMDItemPhysicalSize -name kMDItemLogicalSize <path>

    Returns:
        (real, logical); either is None when the index has no value
    """
    if not is_macos():
        return None, None

    try:
        result = subprocess.run(
            [MDLS, "-raw", "-name", "kMDItemPhysicalSize", "-name", "kMDItemLogicalSize", path],
            capture_output=True,
            text=True,
            check=False,
            timeout=TIMEOUT_SYSTEM_QUICK,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("mdls failed for %s: %s", path, e)
        return None, None

    if result.returncode != 0:
        return None, None

    # -raw separates multiple values with NUL
    values = result.stdout.split("\0")
    if len(values) < 2:
        return None, None
    return _parse_mdls_value(values[0]), _parse_mdls_value(values[1])


def size_for_path(path: str) -> PathSize:
    """Size of a path from Spotlight, walking the tree for missing values."""
    real, logical = spotlight_size(path)
    if real is not None and logical is not None:
        return PathSize(real, logical)

    fallback_real, fallback_logical = disk_usage(Path(path))
    return PathSize(
        real if real is not None else fallback_real,
        logical if logical is not None else fallback_logical,
    )


def icon_for_path(path: str, icon_file: Optional[str] = None) -> Optional[str]:
    """Icon file of an app bundle, or None for anything else.

    ``icon_file`` is the CFBundleIconFile value when the caller already
    knows it; otherwise it is read from the bundle.
    """
    if not path.endswith(".app"):
        return None
    if icon_file is None:
        icon_file = (get_bundle_info(Path(path)) or {}).get("icon_file")
    if not icon_file:
        return None

    resources = Path(path) / "Contents" / "Resources"
    for candidate in (resources / icon_file, resources / f"{icon_file}.icns"):
        if candidate.is_file():
            return str(candidate)
    return None


def bundle_architecture(
    bundle_path: Union[str, Path],
    executable_name: Optional[str] = None,
) -> Architecture:
    """Architecture of an app bundle's main executable.

    ``executable_name`` is the CFBundleExecutable value when the caller
    already knows it; otherwise it is read from the bundle. Tries lipo
    first on macOS, then reads the Mach-O header directly.
    """
    bundle_path = Path(bundle_path)
    macos_dir = bundle_path / "Contents" / "MacOS"
    if executable_name is None:
        executable_name = (get_bundle_info(bundle_path) or {}).get("executable")

    executable = macos_dir / executable_name if executable_name else None
    if executable is None or not executable.is_file():
        executable = None
        try:
            for entry in sorted(macos_dir.iterdir()):
                if entry.is_file() and not entry.name.startswith("."):
                    executable = entry
                    break
        except OSError:
            pass

    if executable is None:
        return Architecture.EMPTY

    archs = lipo_archs(executable)
    if archs is None:
        archs = macho_archs(executable)
    return Architecture.from_archs(archs)


def chunked(items: Sequence[str], size: int) -> list[Sequence[str]]:
    """Split items into consecutive chunks of at most ``size``.

    Examples:
        >>> chunked(["a", "b", "c"], 2)
        [['a', 'b'], ['c']]
    """
    return [items[i:i + size] for i in range(0, len(items), size)]


class SizeResolver:
    """Annotates paths with sizes and icons using a bounded worker pool."""

    def __init__(
        self,
        chunk_size: int = SIZE_CHUNK_SIZE,
        max_workers: int = SIZE_MAX_WORKERS,
        icon_files: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the resolver.

        Args:
            chunk_size: Paths handed to each worker
            max_workers: Concurrent workers
            icon_files: Known CFBundleIconFile values by bundle path
        """
        self.chunk_size = max(1, chunk_size)
        self.max_workers = max(1, max_workers)
        self.icon_files = dict(icon_files or {})

    def _annotate_chunk(self, chunk: Sequence[str]) -> tuple[dict[str, PathSize], dict[str, Optional[str]]]:
        sizes = {}
        icons = {}
        for path in chunk:
            sizes[path] = size_for_path(path)
            icons[path] = icon_for_path(path, self.icon_files.get(path))
        return sizes, icons

    def annotate(self, paths: Sequence[str]) -> tuple[dict[str, PathSize], dict[str, Optional[str]]]:
        """Compute sizes and icons for every path.

        Blocks until every chunk has been processed.

        Returns:
            (sizes, icons) keyed by path
        """
        paths = list(paths)
        sizes: dict[str, PathSize] = {}
        icons: dict[str, Optional[str]] = {}
        if not paths:
            return sizes, icons

        lock = threading.Lock()

        def work(chunk: Sequence[str]) -> None:
            local_sizes, local_icons = self._annotate_chunk(chunk)
            with lock:
                sizes.update(local_sizes)
                icons.update(local_icons)

        chunks = chunked(paths, self.chunk_size)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(chunks))) as executor:
            futures = [executor.submit(work, chunk) for chunk in chunks]
            for future in futures:
                try:
                    future.result()
                except Exception:
                    logger.exception("Size annotation chunk failed")

        # A failed chunk still leaves every path with an entry
        for path in paths:
            sizes.setdefault(path, PathSize())
            icons.setdefault(path, None)
        return sizes, icons
