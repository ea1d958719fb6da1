"""Leftover discovery for one application.

Pipeline:
    1. Resolve sandbox and app-group containers
    2. Seed the candidates with the app bundle itself
    3. Scan the search locations (skipped for web-app wrappers)
    4. Add forced includes from the conditions table
    5. Add Spotlight results
    6. Add files recorded in the orphan registry
    7. Drop forced excludes
    8. Collapse nested paths
    9. Annotate sizes, icons and the bundle architecture

Two entry points run the same pipeline: find_paths() on a background
thread, delivering into a caller-owned DiscoveryState, and
find_paths_sync() inline.

Usage:
    from macleftovers.python.discovery import AppPathFinder, describe_app

    finder = AppPathFinder(describe_app("/Applications/Example.app"))
    result = finder.find_paths_sync()
    for path, real, logical, icon in result.entries():
        print(path, real)
"""

import logging
import os
from collections.abc import Iterator, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Optional, Union

from ..scanners.applications import AppDescriptor
from ..utils.paths import is_in_trash, standardize_path
from ..utils.settings import FinderSettings
from . import spotlight
from .accumulator import DiscoverySet
from .collapse import collapse
from .conditions import ConditionEngine, ConditionSet, ConditionTable
from .containers import resolve_containers
from .identifiers import build_identifiers
from .registry import MappingOrphanRegistry, OrphanRegistry
from .scanner import LocationScanner
from .sizes import Architecture, PathSize, SizeResolver, bundle_architecture

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryResult:
    """Final, ordered leftovers of one app.

    Attributes:
        paths: Collapsed paths in lexicographic order
        sizes: Real and logical size per path
        icons: Icon file per path (None when there is none)
        arch: Architecture of the app's main executable
    """
    paths: tuple[str, ...] = ()
    sizes: Mapping[str, PathSize] = field(default_factory=dict)
    icons: Mapping[str, Optional[str]] = field(default_factory=dict)
    arch: Architecture = Architecture.EMPTY

    def __post_init__(self) -> None:
        object.__setattr__(self, 'sizes', MappingProxyType(dict(self.sizes)))
        object.__setattr__(self, 'icons', MappingProxyType(dict(self.icons)))

    def entries(self) -> Iterator[tuple[str, int, int, Optional[str]]]:
        """Yield (path, real_size, logical_size, icon) in path order."""
        for path in self.paths:
            size = self.sizes.get(path, PathSize())
            yield path, size.real, size.logical, self.icons.get(path)

    def total_size(self) -> int:
        """Sum of real sizes."""
        return sum(size.real for size in self.sizes.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'paths': [
                {'path': path, 'real_size': real, 'logical_size': logical, 'icon': icon}
                for path, real, logical, icon in self.entries()
            ],
            'count': len(self.paths),
            'total_size': self.total_size(),
            'arch': self.arch.value,
        }


@dataclass
class DiscoveryState:
    """Caller-owned state updated when an interactive run completes."""
    result: Optional[DiscoveryResult] = None
    selected_items: set[str] = field(default_factory=set)
    arch: Architecture = Architecture.EMPTY
    progress_step: int = 0


@dataclass(frozen=True)
class Interactive:
    """Deliver results into ``state`` and notify ``on_complete``.

    With ``undo`` set the existing selection is left untouched.
    """
    state: DiscoveryState
    on_complete: Optional[Callable[[DiscoveryResult], None]] = None
    undo: bool = False


@dataclass(frozen=True)
class Headless:
    """No caller state: results are only returned."""
    pass


RunMode = Union[Interactive, Headless]


class AppPathFinder:
    """Discovers the filesystem leftovers of one app."""

    def __init__(
        self,
        app: AppDescriptor,
        settings: Optional[FinderSettings] = None,
        conditions: Optional[ConditionSet] = None,
        registry: Optional[OrphanRegistry] = None,
        mode: Optional[RunMode] = None,
        home: Optional[Path] = None,
    ):
        """Initialize the finder.

        Args:
            app: The application to discover leftovers for
            settings: Run options (defaults to FinderSettings())
            conditions: Conditions table (defaults to data/conditions.yaml)
            registry: Orphan registry (defaults to an empty one)
            mode: Interactive or Headless (defaults to Headless)
            home: Home directory for containers and Spotlight scope
        """
        self.app = app
        self.settings = settings or FinderSettings()
        if conditions is None:
            conditions = ConditionTable().conditions
        self.conditions = conditions
        self.identifiers = build_identifiers(app)
        self.engine = ConditionEngine(conditions, self.identifiers)
        self.registry = registry if registry is not None else MappingOrphanRegistry()
        self.mode = mode or Headless()
        self.home = home

    def _set_progress(self, step: int) -> None:
        if isinstance(self.mode, Interactive):
            self.mode.state.progress_step = step

    def seed_path(self) -> Optional[str]:
        """The app bundle itself, unless it is already in the Trash.

        iOS apps installed on Apple silicon live at
        <Name>.app/Wrapper/<Name>.app; the outer bundle is the one to remove.
        """
        path = Path(standardize_path(self.app.path))
        if is_in_trash(path):
            return None
        if "Wrapper" in path.parts:
            path = path.parent.parent
        if not os.path.lexists(path):
            return None
        return str(path)

    def _registry_files(self) -> list[str]:
        try:
            return self.registry.associated_files(self.app.path)
        except Exception:
            logger.exception("Orphan registry lookup failed for %s", self.app.path)
            return []

    def _collect(self) -> list[str]:
        """Run discovery up to and including collapsing."""
        accumulator = DiscoverySet()

        containers = resolve_containers(self.app.path, self.home)

        seed = self.seed_path()
        if seed:
            accumulator.add(seed)

        if not self.app.web_app:
            scanner = LocationScanner(
                self.identifiers,
                self.engine,
                accumulator,
                skip_conditions=self.conditions.skip_conditions,
                strict=self.settings.name_search_strict,
                web_app=self.app.web_app,
            )
            scanner.scan(self.settings.locations)

        candidates = accumulator.snapshot()
        candidates.update(containers)
        candidates.update(self.engine.forced_include_paths())

        self._set_progress(1)
        spotlight_paths = spotlight.query(
            self.app.app_name,
            self.app.bundle_id,
            timeout=self.settings.spotlight_timeout,
            strict=self.settings.name_search_strict,
            enabled=self.settings.spotlight,
            home=self.home,
        )
        candidates.update(spotlight_paths)

        candidates.update(self._registry_files())

        excluded = {standardize_path(p) for p in self.engine.forced_exclude_paths()}
        standardized = {standardize_path(p) for p in candidates}
        return collapse(standardized - excluded)

    def _run(self) -> DiscoveryResult:
        paths = self._collect()
        app_path = standardize_path(self.app.path)
        resolver = SizeResolver(
            chunk_size=self.settings.size_chunk_size,
            max_workers=self.settings.size_max_workers,
            icon_files={app_path: self.app.icon_file} if self.app.icon_file else None,
        )
        sizes, icons = resolver.annotate(paths)
        arch = bundle_architecture(self.app.path, self.app.executable)
        return DiscoveryResult(tuple(paths), sizes, icons, arch)

    def _run_safely(self) -> DiscoveryResult:
        try:
            return self._run()
        except Exception:
            logger.exception("Leftover discovery failed for %s", self.app.path)
            return DiscoveryResult()

    def _deliver(self, result: DiscoveryResult) -> DiscoveryResult:
        if isinstance(self.mode, Interactive):
            state = self.mode.state
            state.result = result
            state.arch = result.arch
            if not self.mode.undo:
                state.selected_items = set(result.paths)
            state.progress_step = 0
            if self.mode.on_complete is not None:
                self.mode.on_complete(result)
        return result

    def find_paths(self) -> "Future[DiscoveryResult]":
        """Run discovery on a background thread.

        Returns immediately. In Interactive mode the caller's state is
        updated and on_complete is called from the worker thread when the
        run finishes; the returned future resolves to the same result.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="leftover-finder")
        try:
            return executor.submit(lambda: self._deliver(self._run_safely()))
        finally:
            executor.shutdown(wait=False)

    def find_paths_sync(self) -> DiscoveryResult:
        """Run discovery inline and return the result."""
        return self._run_safely()
