"""
place_parser.py - Splits free-text place strings into town, county and country.

Place strings in genealogical records are written in many orders and
languages: "Budapest, Pest megye, Magyarország", "Hungary, Budapest",
"Kispest, Pest-Pilis-Solt-Kiskun vármegye". The parser recognises the country
token, keeps multi-word county names together even when they contain commas,
and classifies the remaining tokens.

Module: place_history.place_parser
"""
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from .cache import PlaceCache
from .country_registry import CountryRegistry
from .models import PlaceParts

if TYPE_CHECKING:
    from .resolver import TownResolver

logger = logging.getLogger(__name__)

# Stand-in for commas inside county names while a place string is split
COMMA_PLACEHOLDER = '\u0000'

PlaceInput = Union[str, Sequence[Optional[str]], None]


def join_place(place: PlaceInput) -> str:
    """
    Turn a place string or a list of place fragments into one string.

    Empty and None fragments are dropped.
    """
    if place is None:
        return ''
    if isinstance(place, str):
        return place.strip()
    fragments = [str(p).strip() for p in place if p is not None]
    return ', '.join(f for f in fragments if f)


class PlaceParser:
    """
    Parses place strings using the country registry and, for single tokens,
    the resolver's town guesses.

    Attributes:
        registry (CountryRegistry): Country data.
        resolver (Optional[TownResolver]): Used to guess bare town names.
        cache (PlaceCache): Cache for parsed places.
        default_country (Optional[str]): Country assumed when a place names none.
    """

    def __init__(self, registry: CountryRegistry, resolver: Optional["TownResolver"] = None,
                 cache: Optional[PlaceCache] = None, default_country: Optional[str] = None) -> None:
        self.registry = registry
        self.resolver = resolver
        self.cache = cache if cache is not None else registry.cache
        self.default_country = default_country if default_country else registry.config.default_country

    def get_place_parts(self, place: PlaceInput, country: Optional[str] = None) -> List[PlaceParts]:
        """
        Parse a place into one or more candidate PlaceParts.

        Several candidates are only returned for a single token that names a
        town known in several counties or countries.

        Args:
            place: Place string or list of fragments.
            country (Optional[str]): Country to assume when the place names none.

        Returns:
            List[PlaceParts]: Candidates; the caller owns the returned objects.
        """
        original = join_place(place)
        key = f"{country or ''}|{original}"
        candidates = self.cache.get_or_set('place_parts', key, lambda: self.__parse(original, country))
        return [parts.copy() for parts in candidates]

    def split_place(self, place: str, country: Optional[str] = None) -> List[str]:
        """
        Split a place string on commas, keeping county names with commas whole.

        Args:
            place (str): Place string.
            country (Optional[str]): Country whose counties to protect; guessed
                from the first or last token when not given.

        Returns:
            List[str]: Non-empty, stripped tokens.
        """
        tokens = [t.strip() for t in place.split(',') if t.strip()]
        if not tokens:
            return []
        guess = (country
                 or self.registry.detect_country_name(tokens[-1])
                 or self.registry.detect_country_name(tokens[0])
                 or self.default_country)
        pattern = self.registry.county_regexp(guess) if guess else None
        if pattern is None:
            return tokens

        protected = pattern.sub(lambda m: m.group(0).replace(',', COMMA_PLACEHOLDER), place)
        return [t.strip().replace(COMMA_PLACEHOLDER, ',') for t in protected.split(',') if t.strip()]

    def __parse(self, original: str, country: Optional[str]) -> List[PlaceParts]:
        tokens = self.split_place(original, country) if original else []
        if not tokens:
            return [PlaceParts(original=original)]

        if (len(tokens) > 1 and self.registry.is_country_name(tokens[0])
                and not self.registry.is_country_name(tokens[-1])):
            tokens = list(reversed(tokens))

        if len(tokens) >= 3:
            candidates = [self.__from_many(tokens)]
        elif len(tokens) == 2:
            candidates = [self.__from_pair(tokens, country)]
        else:
            candidates = self.__from_single(tokens[0], country)

        fallback_country = country or self.default_country
        for parts in candidates:
            parts.original = original
            parts.parts = list(tokens)
            if not parts.country and fallback_country:
                parts.country = fallback_country
            if parts.country:
                parts.country = self.registry.detect_country_name(parts.country) or parts.country
            parts.update_current()
        logger.debug(f"Parsed place '{original}' into {len(candidates)} candidate(s)")
        return candidates

    def __from_many(self, tokens: List[str]) -> PlaceParts:
        town, county, country = tokens[-3:]
        if self.registry.is_country_name(town):
            return PlaceParts(country=country, left_parts=tokens[:-1])
        return PlaceParts(town=town, county=county, country=country, left_parts=tokens[:-3])

    def __from_pair(self, tokens: List[str], country: Optional[str]) -> PlaceParts:
        first, second = tokens
        if self.registry.is_country_name(second):
            if self.registry.is_county_name(first, second) and not self.__is_known_town(first, second):
                return PlaceParts(county=first, country=second)
            return PlaceParts(town=first, country=second)
        return PlaceParts(town=first, county=second)

    def __is_known_town(self, name: str, country: Optional[str]) -> bool:
        if self.resolver is None:
            return False
        return self.resolver.find_town(name, country) is not None or bool(self.resolver.guess_town(name, country=country))

    def __from_single(self, token: str, country: Optional[str]) -> List[PlaceParts]:
        if self.resolver is not None:
            candidates = []
            seen = set()
            for guess in self.resolver.guess_town(token, country=country):
                if (guess.county, guess.country) in seen:
                    continue
                seen.add((guess.county, guess.country))
                candidates.append(PlaceParts(town=guess.town, county=guess.county, country=guess.country))
            if candidates:
                return candidates
        if self.registry.is_country_name(token):
            return [PlaceParts(country=token)]
        return [PlaceParts(town=token)]
