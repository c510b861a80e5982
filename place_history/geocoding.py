"""
geocoding.py - Prepares historical place strings for external geocoders.

Geocoders expect places ordered from the most specific part to the country,
with the country in English. format_place_for_geocoding turns
"Magyarország, Budapest" into "Budapest, Hungary".

Module: place_history.geocoding
"""
import re
import logging
from typing import Union

from .place_parser import PlaceInput, PlaceParser, join_place
from .resolver import TownResolver

logger = logging.getLogger(__name__)

SPACE_RE = re.compile(r"\s+")


def format_place_for_geocoding(place: PlaceInput, parser: Union[PlaceParser, TownResolver]) -> str:
    """
    Build a geocoder query from a place.

    Args:
        place: Place string or list of fragments.
        parser: PlaceParser (or TownResolver) used to split the place.

    Returns:
        str: "left parts, town, county, country" with the English country
        name, or "" for an empty place.
    """
    joined = join_place(place)
    if not joined:
        return ''

    candidates = parser.get_place_parts(joined)
    if not candidates:
        return ''
    parts = candidates[0]

    segments = list(parts.left_parts) + [parts.town, parts.county, parts.country]
    segments = [SPACE_RE.sub(' ', s).strip() for s in segments if s and s.strip()]
    if not segments:
        return ''

    english = parser.registry.detect_country_name(segments[-1])
    if english:
        segments[-1] = english

    # Drop repeated segments such as "Budapest, Budapest"
    segments = [s for i, s in enumerate(segments) if s.lower() not in (p.lower() for p in segments[:i])]
    query = ', '.join(segments)
    logger.debug(f"Geocoding query for '{joined}': '{query}'")
    return query
