"""place_history package: Resolves historical place names against per-country gazetteers."""

from place_history.cache import (
    PlaceCache, clear_cache_type, clear_place_caches, get_cache_stats, is_cache_enabled, place_caches,
    set_cache_enabled
)
from place_history.config import PlaceConfig
from place_history.country_registry import CountryRegistry, load_country_file
from place_history.geocoding import format_place_for_geocoding
from place_history.models import (
    CountryData, PlaceParts, PureTowns, Response, TownData, TownFact, TownGuess, TownRanges, TownSource,
    TownValidity
)
from place_history.place_date import PlaceDate, year_of
from place_history.place_parser import PlaceParser
from place_history.range import in_range, is_intersected_range, split_overlapping_ranges, split_range
from place_history.resolver import TownResolver
from place_history.towns import parse_towns

__all__ = [
    "CountryData",
    "CountryRegistry",
    "PlaceCache",
    "PlaceConfig",
    "PlaceDate",
    "PlaceParser",
    "PlaceParts",
    "PureTowns",
    "Response",
    "TownData",
    "TownFact",
    "TownGuess",
    "TownRanges",
    "TownResolver",
    "TownSource",
    "TownValidity",
    "clear_cache_type",
    "clear_place_caches",
    "format_place_for_geocoding",
    "get_cache_stats",
    "in_range",
    "is_cache_enabled",
    "is_intersected_range",
    "load_country_file",
    "parse_towns",
    "place_caches",
    "set_cache_enabled",
    "split_overlapping_ranges",
    "split_range",
    "year_of",
]
