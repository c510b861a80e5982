import pytest

from place_history import cache as cache_module
from place_history.cache import (
    CACHE_CATEGORIES, PlaceCache, clear_cache_type, clear_place_caches, dataset_hash, get_cache_stats,
    is_cache_enabled, place_caches, set_cache_enabled
)
from place_history.models import TownFact


class TestPlaceCache:
    def test_get_or_set_computes_once(self):
        cache = PlaceCache()
        calls = []

        def factory():
            calls.append(1)
            return "Hungary"

        assert cache.get_or_set('detect_country_name', 'magyarország', factory) == "Hungary"
        assert cache.get_or_set('detect_country_name', 'magyarország', factory) == "Hungary"
        assert len(calls) == 1
        assert cache.hits == 1
        assert cache.misses == 1

    def test_none_is_cached(self):
        cache = PlaceCache()
        calls = []

        def factory():
            calls.append(1)
            return None

        cache.get_or_set('detect_country_name', 'unknownland', factory)
        cache.get_or_set('detect_country_name', 'unknownland', factory)
        assert len(calls) == 1

    def test_disabled_always_recomputes(self):
        cache = PlaceCache()
        calls = []
        set_cache_enabled(False)
        assert is_cache_enabled() is False
        cache.get_or_set('guess_town', 'x', lambda: calls.append(1))
        cache.get_or_set('guess_town', 'x', lambda: calls.append(1))
        assert len(calls) == 2
        assert cache.stats()['guess_town'] == 0

    def test_lru_bound(self):
        cache = PlaceCache(max_entries=2)
        for key in ('a', 'b', 'c'):
            cache.get_or_set('place_parts', key, lambda: key)
        assert cache.stats()['place_parts'] == 2

    def test_unbounded_categories(self):
        cache = PlaceCache(max_entries=2)
        for key in ('a', 'b', 'c'):
            cache.get_or_set('county_regexp', key, lambda: key)
        assert cache.stats()['county_regexp'] == 3

    def test_clear_type(self):
        cache = PlaceCache()
        cache.get_or_set('guess_town', 'a', lambda: 1)
        cache.get_or_set('place_parts', 'a', lambda: 1)
        cache.clear_type('guess_town')
        stats = cache.stats()
        assert stats['guess_town'] == 0
        assert stats['place_parts'] == 1

    def test_clear(self):
        cache = PlaceCache()
        for category in CACHE_CATEGORIES:
            cache.get_or_set(category, 'k', lambda: 1)
        cache.clear()
        assert all(cache.stats()[c] == 0 for c in CACHE_CATEGORIES)

    def test_unknown_category(self):
        cache = PlaceCache()
        with pytest.raises(KeyError):
            cache.get_or_set('not_a_category', 'k', lambda: 1)
        with pytest.raises(KeyError):
            cache.clear_type('not_a_category')


def test_module_shortcuts_use_default_cache():
    place_caches.get_or_set('town_variants', 'test|Kecel', lambda: ['Kecel'])
    assert get_cache_stats()['town_variants'] >= 1
    clear_cache_type('town_variants')
    assert get_cache_stats()['town_variants'] == 0
    place_caches.get_or_set('town_variants', 'test|Kecel', lambda: ['Kecel'])
    clear_place_caches()
    assert get_cache_stats()['town_variants'] == 0


def test_set_cache_enabled_is_global():
    set_cache_enabled(False)
    assert cache_module.is_cache_enabled() is False
    set_cache_enabled(True)
    assert cache_module.is_cache_enabled() is True


class TestDatasetHash:
    def test_key_order_does_not_matter(self):
        assert dataset_hash({"a": 1, "b": [1, 2]}) == dataset_hash({"b": [1, 2], "a": 1})

    def test_content_matters(self):
        assert dataset_hash({"a": 1}) != dataset_hash({"a": 2})

    def test_salt(self):
        assert dataset_hash({"a": 1}, salt="Hungary") != dataset_hash({"a": 1}, salt="Austria")

    def test_dataclasses(self):
        assert dataset_hash([TownFact(town=("Buda",))]) == dataset_hash([TownFact(town=("Buda",))])
