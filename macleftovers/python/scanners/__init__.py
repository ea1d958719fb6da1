"""Scanner modules for reading installed software.

Modules:
    applications: Describe an .app bundle from its Info.plist
"""

from . import applications

__all__ = [
    "applications",
]
