"""
Pytest fixtures for place_history tests.
"""
from __future__ import annotations

import pytest

from place_history.cache import PlaceCache, set_cache_enabled
from place_history.config import PlaceConfig
from place_history.country_registry import CountryRegistry
from place_history.models import CountryData, TownSource
from place_history.resolver import TownResolver


HUNGARY_TOWNS = {
    "Buda": {
        "names": ["Ofen"],
        "-1872": {"town": "Buda", "county": "Pest-Pilis-Solt-Kiskun"},
        "1873-": {"town": "Budapest", "county": "Budapest"},
    },
    "Pest": {
        "-1872": {"town": "Pest", "county": "Pest-Pilis-Solt-Kiskun"},
        "1873-": {"town": "Budapest", "county": "Budapest"},
    },
    "Kispest": {
        "-1949": {"county": "Pest-Pilis-Solt-Kiskun"},
        "1950-": {"town": "Budapest", "county": "Budapest", "leftParts": ["Kispest"]},
    },
    "Tóváros": {
        "1900-1950": {"county": "Fejér"},
    },
    "Szentendre": {
        "-1949": {"county": "Pest-Pilis-Solt-Kiskun"},
        "1950-": {"county": "Pest"},
    },
}

AUSTRIA_TOWNS = {
    "Eisenstadt": {
        "names": ["Kismarton"],
        "-1920": {"town": "Kismarton", "county": "Sopron", "country": "Hungary"},
        "1921-": {"county": "Burgenland"},
    },
}


def make_hungary() -> CountryData:
    return CountryData(
        name="Hungary",
        translations={"Hungary": "Magyarország", "Austria": "Ausztria", "Germany": "Németország"},
        counties={
            "Budapest": "Budapest",
            "Pest": "Pest megye",
            "Fejér": "Fejér megye",
            "Bács-Kiskun": "Bács-Kiskun megye",
            "Pest-Pilis-Solt-Kiskun": "Pest, Pilis, Solt, Kiskun",
        },
        town_sources=[
            TownSource(source={"en": "Gazetteer 1913"}, year=1913, data={
                "Keczel": {"county": "Pest-Pilis-Solt-Kiskun"},
                "Szentendre": {"county": "Pest-Pilis-Solt-Kiskun"},
                "Budapest": {"county": "Budapest"},
            }),
            TownSource(source={"en": "Gazetteer 2020"}, year=2020, data={
                "Kecel": {"county": "Bács-Kiskun"},
                "Szentendre": {"county": "Pest", "map": "34-12"},
                "Budapest": {"county": "Budapest"},
            }),
        ],
        towns_detailed=HUNGARY_TOWNS,
        letter_variants={"c": "cz"},
    )


def make_austria() -> CountryData:
    return CountryData(
        name="Austria",
        translations={"Austria": "Österreich", "Hungary": "Ungarn", "Germany": "Deutschland"},
        counties={"Burgenland": "Burgenland", "Wien": "Wien"},
        town_sources=[
            TownSource(source={"en": "Municipalities"}, year=None, data={
                "Eisenstadt": {"county": "Burgenland"},
                "Wien": {"county": "Wien"},
            }),
        ],
        towns_detailed=AUSTRIA_TOWNS,
    )


@pytest.fixture(autouse=True)
def caching_enabled():
    """Every test starts and ends with caching switched on."""
    set_cache_enabled(True)
    yield
    set_cache_enabled(True)


@pytest.fixture
def cache() -> PlaceCache:
    return PlaceCache()


@pytest.fixture(scope="session")
def place_config() -> PlaceConfig:
    return PlaceConfig()


@pytest.fixture
def registry(place_config, cache) -> CountryRegistry:
    """Registry with small Hungarian and Austrian datasets and its own cache."""
    registry = CountryRegistry(place_config, cache=cache)
    registry.register_country(CountryData(name="United States", translations={"United States": "USA"}))
    registry.register_country(make_hungary())
    registry.register_country(make_austria())
    return registry


@pytest.fixture
def resolver(registry) -> TownResolver:
    return TownResolver(registry)


@pytest.fixture
def hungary_towns() -> dict:
    return HUNGARY_TOWNS


@pytest.fixture
def austria_towns() -> dict:
    return AUSTRIA_TOWNS
