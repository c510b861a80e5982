"""
cache.py - In-memory caches for place resolution.

Country detection, county regexes, town guesses, place parsing and normalized
town datasets are all pure functions of their input and the registered data,
so their results are memoized per category. String-keyed categories are
bounded LRU maps; county regexes (one per country) and normalized datasets
(content addressed) are kept until explicitly cleared.

A single module-level switch turns caching off for every PlaceCache, which is
useful when benchmarking or when datasets are edited in place.

Module: place_history.cache
"""
import hashlib
import json
import logging
from collections import OrderedDict
from dataclasses import asdict, is_dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

CACHE_CATEGORIES = (
    'county_regexp',
    'guess_town',
    'sorted_town_sources',
    'detect_country_name',
    'is_country_name',
    'place_parts',
    'town_variants',
    'pure_towns',
)
UNBOUNDED_CATEGORIES = ('county_regexp', 'pure_towns')
DEFAULT_MAX_ENTRIES = 10000

_cache_enabled: bool = True


def set_cache_enabled(enabled: bool) -> None:
    """Turn caching on or off for every PlaceCache."""
    global _cache_enabled
    _cache_enabled = bool(enabled)
    logger.debug(f"Place caches {'enabled' if _cache_enabled else 'disabled'}")


def is_cache_enabled() -> bool:
    return _cache_enabled


class PlaceCache:
    """
    Category-keyed memoization store.

    Attributes:
        max_entries (int): Bound applied to each string-keyed category (0 = unbounded).
        hits (int): Lookups answered from the cache.
        misses (int): Lookups that had to compute the value.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self.__stores: Dict[str, OrderedDict] = {category: OrderedDict() for category in CACHE_CATEGORIES}

    def _store(self, category: str) -> OrderedDict:
        try:
            return self.__stores[category]
        except KeyError:
            raise KeyError(f"Unknown cache category: {category}") from None

    def get_or_set(self, category: str, key: Any, factory: Callable[[], T]) -> T:
        """
        Return the cached value for key, computing and storing it on a miss.

        None results are cached like any other value.

        Args:
            category (str): One of CACHE_CATEGORIES.
            key: Hashable cache key.
            factory: Zero-argument callable computing the value.

        Returns:
            The cached or freshly computed value.

        Raises:
            KeyError: If the category is unknown.
        """
        store = self._store(category)
        if not _cache_enabled:
            return factory()
        if key in store:
            store.move_to_end(key)
            self.hits += 1
            return store[key]

        self.misses += 1
        value = factory()
        store[key] = value
        if category not in UNBOUNDED_CATEGORIES and self.max_entries and len(store) > self.max_entries:
            store.popitem(last=False)
        return value

    def clear(self) -> None:
        for store in self.__stores.values():
            store.clear()
        logger.debug("Cleared all place caches")

    def clear_type(self, category: str) -> None:
        self._store(category).clear()
        logger.debug(f"Cleared place cache '{category}'")

    def stats(self) -> Dict[str, int]:
        """Number of entries per category, plus hit/miss counters."""
        result = {category: len(store) for category, store in self.__stores.items()}
        result['hits'] = self.hits
        result['misses'] = self.misses
        return result


place_caches = PlaceCache()


def clear_place_caches() -> None:
    place_caches.clear()


def clear_cache_type(category: str) -> None:
    place_caches.clear_type(category)


def get_cache_stats() -> Dict[str, int]:
    return place_caches.stats()


def _json_default(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def dataset_hash(data: Any, salt: Optional[str] = None) -> str:
    """
    SHA-1 of the canonical JSON form of a dataset.

    Args:
        data: JSON-like structure (dataclasses are serialized field by field).
        salt (Optional[str]): Extra discriminator, e.g. a country name.

    Returns:
        str: Hex digest.
    """
    payload = json.dumps([salt, data], sort_keys=True, ensure_ascii=False, default=_json_default)
    return hashlib.sha1(payload.encode('utf-8')).hexdigest()
