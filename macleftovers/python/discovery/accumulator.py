"""Thread-safe accumulator of candidate paths for one discovery run."""

import threading
from collections.abc import Iterable


class DiscoverySet:
    """A set of absolute path strings guarded by a single lock.

    Each finder run owns its own instance; scanner workers insert into it
    concurrently and the lock is held only for the duration of one
    operation.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._paths: set[str] = set(paths)

    def add(self, path: str) -> bool:
        """Insert a path. Returns False if it was already present."""
        with self._lock:
            if path in self._paths:
                return False
            self._paths.add(path)
            return True

    def update(self, paths: Iterable[str]) -> None:
        """Insert many paths under one lock acquisition."""
        paths = list(paths)
        with self._lock:
            self._paths.update(paths)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def snapshot(self) -> set[str]:
        """Return a copy of the current contents."""
        with self._lock:
            return set(self._paths)
