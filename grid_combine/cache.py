"""Thread-safe LRU cache for decoded source images.

Entries are keyed by resolved path plus modification time, so an edited file
on disk is decoded again rather than served stale.  The loader runs decodes
on a thread pool, hence the lock around every access.

Callers that need isolation (tests, one-off exports) can swap the shared
instance with :func:`configure_cache` or :func:`override_cache`.
"""

from __future__ import annotations

from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Iterator, Optional, Tuple

from . import config

CacheKey = Tuple[str, int]


@dataclass(frozen=True, slots=True)
class CachedImage:
    """A decoded image together with its intrinsic size."""

    image: Any
    width: int
    height: int


def cache_key(path: Path) -> CacheKey:
    """Return the cache key for an existing file at ``path``."""
    resolved = path.resolve()
    return str(resolved), resolved.stat().st_mtime_ns


class ImageCache:
    """A simple thread-safe LRU cache of :class:`CachedImage` entries."""

    def __init__(
        self,
        max_size: int = config.MAX_CACHE_SIZE,
        cleanup_threshold: float = config.CACHE_CLEANUP_THRESHOLD,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be greater than zero")
        self.max_size = max_size
        self.cleanup_threshold = cleanup_threshold
        self._entries: "OrderedDict[CacheKey, CachedImage]" = OrderedDict()
        self._lock = RLock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: CacheKey) -> Optional[CachedImage]:
        """Return the entry for ``key`` or ``None``, marking it most recent."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return entry

    def put(self, key: CacheKey, entry: CachedImage) -> None:
        """Insert ``entry``, trimming old entries once the threshold is hit."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size * self.cleanup_threshold:
                self._trim()
            self._entries[key] = entry

    def _trim(self) -> None:
        target = max(self.max_size // 2, 1)
        while len(self._entries) > target:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = self.misses = 0


_cache_factory: Callable[[], ImageCache] = ImageCache
_cache_instance: Optional[ImageCache] = None
_cache_lock = RLock()


def configure_cache(factory: Callable[[], ImageCache], *, reset: bool = True) -> None:
    """Set the factory used to build the shared cache.

    With ``reset`` (default) the current instance is dropped so the next
    :func:`get_cache` call builds a fresh one from ``factory``.
    """
    global _cache_factory, _cache_instance
    with _cache_lock:
        _cache_factory = factory
        if reset:
            _cache_instance = None


def get_cache() -> ImageCache:
    """Return the shared cache, creating it on first use."""
    global _cache_instance
    with _cache_lock:
        if _cache_instance is None:
            _cache_instance = _cache_factory()
        return _cache_instance


@contextmanager
def override_cache(cache: ImageCache) -> Iterator[ImageCache]:
    """Use ``cache`` as the shared cache within a ``with`` block."""
    global _cache_instance
    with _cache_lock:
        previous = _cache_instance
        _cache_instance = cache
    try:
        yield cache
    finally:
        with _cache_lock:
            _cache_instance = previous


__all__ = [
    "CachedImage",
    "ImageCache",
    "cache_key",
    "configure_cache",
    "get_cache",
    "override_cache",
]
