"""Utility modules for common operations.

Modules:
    constants: Timeouts, container file names, default search locations
    plist: Plist reading with plutil fallback
    file_ops: Platform checks, disk usage, executable architectures
    paths: Path standardization and ancestry checks
    settings: Finder configuration loaded from JSON
"""

from .plist import (
    is_binary_plist,
    read_plist,
    read_plist_safe,
    PlistError,
)

from .file_ops import (
    is_macos,
    disk_usage,
    lipo_archs,
    macho_archs,
)

from .paths import (
    ancestors,
    is_in_trash,
    standardize_path,
)

from .settings import (
    FinderSettings,
    SettingsError,
    load_settings,
)

__all__ = [
    # plist
    'is_binary_plist',
    'read_plist',
    'read_plist_safe',
    'PlistError',
    # file_ops
    'is_macos',
    'disk_usage',
    'lipo_archs',
    'macho_archs',
    # paths
    'ancestors',
    'is_in_trash',
    'standardize_path',
    # settings
    'FinderSettings',
    'SettingsError',
    'load_settings',
]
