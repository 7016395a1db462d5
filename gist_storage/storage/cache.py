"""
Whole-gist file cache for the filesystem adapter.

Lifecycle:
    UNLOADED --load--> LOADING --success--> LOADED
                          └──--failure--> UNLOADED
    any state --invalidate--> UNLOADED

The cache is filled in full from one metadata fetch and never patched in
place. Load and invalidate share one lock: an invalidate issued while another
thread is loading waits for that load, then discards its result.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

__all__ = ['CacheState', 'CachedFile', 'GistFileCache']

logger = logging.getLogger(__name__)


class CacheState(enum.Enum):
    UNLOADED = 'unloaded'
    LOADING = 'loading'
    LOADED = 'loaded'


@dataclass(frozen=True)
class CachedFile:
    """Snapshot of one gist file's metadata."""

    size: int
    raw_url: str | None
    mime_type: str = 'text/plain'


class GistFileCache:
    """Filename -> CachedFile mapping, loaded lazily and invalidated wholesale."""

    def __init__(self, loader: Callable[[], Mapping[str, CachedFile]]) -> None:
        """
        Args:
            loader: Fetches the complete file listing; its exceptions propagate
        """
        self._loader = loader
        self._lock = threading.RLock()
        self._state = CacheState.UNLOADED
        self._entries: Mapping[str, CachedFile] = MappingProxyType({})

    @property
    def state(self) -> CacheState:
        return self._state

    def entries(self) -> Mapping[str, CachedFile]:
        """
        Current snapshot, loading it first if needed.

        Returns a read-only mapping; later invalidations do not alter it.
        """
        with self._lock:
            if self._state is CacheState.LOADED:
                return self._entries

            self._state = CacheState.LOADING
            logger.debug('Loading gist file cache')
            try:
                loaded = MappingProxyType(dict(self._loader()))
            except BaseException:
                self._state = CacheState.UNLOADED
                raise

            self._entries = loaded
            self._state = CacheState.LOADED
            logger.debug('Gist file cache loaded (%d files)', len(loaded))
            return loaded

    def get(self, filename: str) -> CachedFile | None:
        return self.entries().get(filename)

    def __contains__(self, filename: object) -> bool:
        return filename in self.entries()

    def invalidate(self) -> None:
        """Drop the snapshot; the next query reloads from the remote gist."""
        with self._lock:
            self._entries = MappingProxyType({})
            self._state = CacheState.UNLOADED
            logger.debug('Gist file cache invalidated')
