"""Discovery modules for finding an application's leftover files.

Modules:
    identifiers: Canonical match tokens derived from bundle id and name
    containers: Sandbox and app-group container resolution
    conditions: Per-app include/exclude/force overrides (conditions.yaml)
    accumulator: Thread-safe candidate path set
    scanner: Heuristic matching over the search locations
    spotlight: Time-bounded Spotlight supplemental search
    collapse: Removal of nested and duplicate paths
    sizes: Size, icon and architecture annotation
    registry: Orphan-file registry lookups
    finder: The discovery pipeline and its two entry points

Usage:
    from macleftovers.python.discovery import AppPathFinder, describe_app

    app = describe_app("/Applications/Example.app")
    result = AppPathFinder(app).find_paths_sync()
"""

from ..scanners.applications import AppDescriptor, describe_app
from .accumulator import DiscoverySet
from .collapse import collapse
from .conditions import (
    Classification,
    ConditionEngine,
    ConditionSet,
    ConditionTable,
    ConditionsError,
    MatchCondition,
    SkipCondition,
    load_conditions,
    parse_conditions,
)
from .containers import resolve_containers
from .finder import (
    AppPathFinder,
    DiscoveryResult,
    DiscoveryState,
    Headless,
    Interactive,
    RunMode,
)
from .identifiers import (
    IdentifierSet,
    build_identifiers,
    derive_suffix,
    is_valid_bundle_identifier,
    normalize,
)
from .registry import MappingOrphanRegistry, OrphanRegistry, load_registry
from .scanner import LocationScanner
from .sizes import Architecture, PathSize, SizeResolver, bundle_architecture

__all__ = [
    # applications.py
    'AppDescriptor',
    'describe_app',
    # accumulator.py
    'DiscoverySet',
    # collapse.py
    'collapse',
    # conditions.py
    'Classification',
    'ConditionEngine',
    'ConditionSet',
    'ConditionTable',
    'ConditionsError',
    'MatchCondition',
    'SkipCondition',
    'load_conditions',
    'parse_conditions',
    # containers.py
    'resolve_containers',
    # finder.py
    'AppPathFinder',
    'DiscoveryResult',
    'DiscoveryState',
    'Headless',
    'Interactive',
    'RunMode',
    # identifiers.py
    'IdentifierSet',
    'build_identifiers',
    'derive_suffix',
    'is_valid_bundle_identifier',
    'normalize',
    # registry.py
    'MappingOrphanRegistry',
    'OrphanRegistry',
    'load_registry',
    # scanner.py
    'LocationScanner',
    # sizes.py
    'Architecture',
    'PathSize',
    'SizeResolver',
    'bundle_architecture',
]
