"""Memoizing compiled units per page and layout.

Successful loads are kept forever (there is no eviction and no file
watching); failed loads are never stored, so the next call tries again.
"""

import logging
import threading
from collections.abc import Callable

from passepartout.assembler import CompiledUnit
from passepartout.loader import UnitSource

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str | None]


def cache_key(name: str, layout: str | None = None) -> CacheKey:
    """Return the cache key for a page, optionally inside a layout.

    Keys are (page, layout) pairs with None for standalone pages, so no page
    or layout name can be mistaken for another combination.
    """
    return (name, layout)


def describe_key(key: CacheKey) -> str:
    name, layout = key
    return name if layout is None else f"{name} in {layout}"


class CachedLoader:
    """Caches the units produced by another loader.

    Safe to share between threads. Two threads missing the same key may both
    run the wrapped loader, but the first unit stored is the one every caller
    gets back.
    """

    def __init__(self, loader: UnitSource) -> None:
        self.loader = loader
        self._units: dict[CacheKey, CompiledUnit] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._units)

    def _load_or_store(self, key: CacheKey, load: Callable[[], CompiledUnit]) -> CompiledUnit:
        unit = self._units.get(key)
        if unit is not None:
            logger.debug("Cache hit for %s", describe_key(key))
            return unit

        logger.debug("Cache miss for %s", describe_key(key))
        unit = load()

        with self._lock:
            return self._units.setdefault(key, unit)

    def standalone(self, name: str) -> CompiledUnit:
        return self._load_or_store(cache_key(name), lambda: self.loader.standalone(name))

    def in_layout(self, name: str, layout: str) -> CompiledUnit:
        return self._load_or_store(
            cache_key(name, layout),
            lambda: self.loader.in_layout(name, layout),
        )

    def cached(self, name: str, layout: str | None = None) -> bool:
        """Return True if a unit is stored for the page (and layout)."""
        return cache_key(name, layout) in self._units

    def clear(self) -> None:
        """Forget every stored unit, e.g. after the templates changed."""
        with self._lock:
            self._units.clear()
