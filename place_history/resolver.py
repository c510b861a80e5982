"""
resolver.py - Temporal resolution of historical place names.

TownResolver answers, for a place string and a date:
    - which town, county and country the place belonged to that year,
    - whether the county and country written in the record agree with that,
    - what the place is called today,
    - which county a bare town name most likely belonged to (guess_town).

Failures are reported as data (Response values), never raised.

Module: place_history.resolver
"""
import logging
from typing import Any, List, Optional, Tuple

from .cache import PlaceCache, set_cache_enabled
from .config import PlaceConfig
from .country_registry import CountryRegistry
from .models import (
    PlaceParts, PureTowns, Response, TownData, TownFact, TownGuess, TownRanges, TownValidity, fold_name
)
from .place_date import year_of
from .place_parser import PlaceInput, PlaceParser, join_place

logger = logging.getLogger(__name__)


class TownResolver:
    """
    Resolves places against the registry's gazetteers.

    Attributes:
        registry (CountryRegistry): Country data.
        cache (PlaceCache): Cache for town guesses and parsed places.
        config (PlaceConfig): Configuration (default country).
        parser (PlaceParser): Parser used for place strings.
    """

    def __init__(self, registry: CountryRegistry, cache: Optional[PlaceCache] = None,
                 config: Optional[PlaceConfig] = None) -> None:
        self.registry = registry
        self.cache = cache if cache is not None else registry.cache
        self.config = config if config is not None else registry.config
        self.parser = PlaceParser(registry, resolver=self, cache=self.cache,
                                  default_country=self.config.default_country)

    @classmethod
    def from_config(cls, config: Optional[PlaceConfig] = None) -> "TownResolver":
        """
        Build a resolver, and its registry, from configuration.

        Switches caching on or off as configured. The registry gets a cache of
        its own, bounded by the configured max_entries.
        """
        config = config if config is not None else PlaceConfig()
        set_cache_enabled(config.cache_enabled)
        registry = CountryRegistry.from_config(config)
        return cls(registry, config=config)

    def get_place_parts(self, place: PlaceInput, country: Optional[str] = None) -> List[PlaceParts]:
        return self.parser.get_place_parts(place, country)

    # Town guesses

    def guess_town(self, name: Optional[str], date: Any = None, country: Optional[str] = None,
                   only_map: bool = False) -> List[TownGuess]:
        """
        Guess county and country of a bare town name from the flat town sources.

        For each candidate country the newest source not newer than the year
        is used (the newest source when there is no year, the oldest when the
        year predates every source), and every spelling variant of the name is
        tried. Without any source match the detailed town histories are used.

        Args:
            name (Optional[str]): Town name.
            date: Record date (anything year_of accepts).
            country (Optional[str]): Restrict the guess to one country.
            only_map (bool): Only keep guesses with a map reference.

        Returns:
            List[TownGuess]: Zero, one or several guesses.
        """
        if not name or not name.strip():
            return []
        year = year_of(date)
        key = f"{name.strip()}|{year}|{country or ''}|{only_map}"
        guesses = self.cache.get_or_set(
            'guess_town', key, lambda: self.__guess_town(name.strip(), year, country, only_map))
        return list(guesses)

    def __candidate_countries(self, country: Optional[str]) -> List[str]:
        if country:
            data = self.registry.get_country_data(country)
            return [data.name] if data else []
        return self.registry.registered_country_names()

    def __guess_town(self, name: str, year: Optional[int], country: Optional[str], only_map: bool) -> List[TownGuess]:
        guesses: List[TownGuess] = []
        for country_name in self.__candidate_countries(country):
            sources = self.registry.get_sorted_town_sources(country_name)
            if not sources:
                continue
            source_year, source = self.__pick_source(sources, year)
            for variant in self.registry.get_town_variants(name, country_name):
                entry = source.data.get(variant)
                if entry is None:
                    continue
                guess = TownGuess(
                    town=variant,
                    county=entry.get('county'),
                    country=country_name,
                    map=entry.get('map'),
                    orig=entry.get('orig'),
                    source_year=source_year,
                )
                if guess not in guesses:
                    guesses.append(guess)

        if not guesses:
            guesses = self.__guess_from_history(name, year, country)
        if only_map:
            guesses = [g for g in guesses if g.map]
        logger.debug(f"Guessed {len(guesses)} place(s) for town '{name}' in year {year}")
        return guesses

    @staticmethod
    def __pick_source(sources, year: Optional[int]):
        if year is None:
            return sources[0]
        for source_year, source in sources:
            if source_year <= year:
                return source_year, source
        return sources[-1]

    def __guess_from_history(self, name: str, year: Optional[int], country: Optional[str]) -> List[TownGuess]:
        found = self.find_town(name, country)
        if found is None:
            return []
        key, entry = found
        if year is None:
            latest = entry.latest_range()
            facts = [(latest, f) for f in entry.ranges[latest]] if latest else []
        else:
            facts = entry.facts_for_year(year)
        guesses = []
        for _, fact in facts:
            guess = TownGuess(town=key, county=fact.county, country=fact.country)
            if guess not in guesses:
                guesses.append(guess)
        return guesses

    # Town lookup

    def find_town(self, name: Optional[str], country: Optional[str] = None) -> Optional[Tuple[str, TownRanges]]:
        """
        Find the history of a town.

        Looks in the given country first and falls back to all countries.
        Matches the exact name, then aliases, then ignoring case and accents.

        Returns:
            Optional[Tuple[str, TownRanges]]: (town key, history) or None.
        """
        if not name:
            return None
        if country and self.registry.get_country_data(country) is not None:
            found = self.registry.get_pure_towns(country).find(name)
            if found is not None:
                return found
        towns: PureTowns = self.registry.get_pure_towns()
        return towns.find(name)

    # Validation

    def get_valid_county_by_town_and_year(self, place: PlaceInput, date: Any = None,
                                          country: Optional[str] = None) -> List[TownData]:
        """
        Check a place against the gazetteer for the year of a record.

        Args:
            place: Place string or list of fragments.
            date: Record date; without one every recorded fact is returned as
                "No date set".
            country (Optional[str]): Country to assume when the place names none.

        Returns:
            List[TownData]: One record per contributing gazetteer fact, or a
            single "Not found" record.
        """
        return [data for _, data in self._resolve(place, date, country)]

    def _resolve(self, place: PlaceInput, date: Any = None,
                 country: Optional[str] = None) -> List[Tuple[PlaceParts, TownData]]:
        year = year_of(date)
        results = []
        for parts in self.get_place_parts(place, country):
            results.extend((parts, data) for data in self.__resolve_parts(parts, year))
        return results

    def __resolve_parts(self, parts: PlaceParts, year: Optional[int]) -> List[TownData]:
        if not parts.town:
            return [TownData.not_found()]
        found = self.find_town(parts.town, parts.country)
        if found is None:
            return [TownData.not_found()]
        _, entry = found

        if year is None:
            return [
                self.__town_data(parts, range_key, fact, no_date=True)
                for range_key, facts in entry.sorted_ranges()
                for fact in facts
            ]
        matches = entry.facts_for_year(year)
        if not matches:
            return [TownData.not_found()]
        return [self.__town_data(parts, range_key, fact) for range_key, fact in matches]

    def __town_data(self, parts: PlaceParts, range_key: str, fact: TownFact, no_date: bool = False) -> TownData:
        if no_date:
            town_response = county_response = country_response = response = Response.NO_DATE_SET
        else:
            town_response = self.__compare_town(parts.town, fact.town)
            county_response = self.__compare_county(parts.county, fact.county, fact.country)
            country_response = self.__compare_country(parts.country, fact.country)
            responses = (town_response, county_response, country_response)
            response = Response.VALID if all(r == Response.VALID for r in responses) else Response.INVALID
        return TownData(
            response=response,
            town_response=town_response,
            county_response=county_response,
            country_response=country_response,
            range=range_key,
            town=fact.town,
            county=fact.county,
            country=fact.country,
            left_parts=fact.left_parts,
        )

    def __compare_town(self, supplied: Optional[str], towns: Tuple[str, ...]) -> Response:
        if not towns:
            return Response.VALID
        names = {fold_name(t) for t in towns}
        return Response.VALID if fold_name(supplied) in names else Response.INVALID

    def __compare_county(self, supplied: Optional[str], expected: Optional[str], country: Optional[str]) -> Response:
        if not expected:
            return Response.VALID
        if not supplied:
            return Response.INVALID
        aliases = {fold_name(a) for a in self.registry.county_aliases(expected, country)}
        return Response.VALID if fold_name(supplied) in aliases else Response.INVALID

    def __compare_country(self, supplied: Optional[str], expected: Optional[str]) -> Response:
        if not expected:
            return Response.VALID
        if not supplied:
            return Response.INVALID
        supplied_name = self.registry.detect_country_name(supplied) or supplied
        expected_name = self.registry.detect_country_name(expected) or expected
        return Response.VALID if fold_name(supplied_name) == fold_name(expected_name) else Response.INVALID

    # Current names

    def get_current_name_of_town(self, place: PlaceInput, only_if_different: bool = False) -> List[str]:
        """
        Present-day name(s) of a place.

        Uses the open-ended latest range of the town's history.

        Args:
            place: Place string or list of fragments.
            only_if_different (bool): Leave out names equal to the place as written.

        Returns:
            List[str]: Formatted place strings, possibly empty.
        """
        names: List[str] = []
        for parts in self.get_place_parts(place):
            if not parts.town:
                continue
            found = self.find_town(parts.town, parts.country)
            if found is None:
                continue
            _, entry = found
            latest = entry.latest_range()
            if latest is None:
                continue
            for fact in entry.ranges[latest]:
                current = format_fact(fact)
                if only_if_different and fold_name(current) in (fold_name(parts.current), fold_name(parts.original)):
                    continue
                if current not in names:
                    names.append(current)
        return names

    def get_town_validity(self, place: PlaceInput, date: Any = None, obj_id: Optional[str] = None,
                          type: Optional[str] = None) -> List[TownValidity]:
        """
        Validation records with suggestions for one place occurrence.

        Args:
            place: Place string or list of fragments.
            date: Record date.
            obj_id (Optional[str]): Identifier of the record holding the place.
            type (Optional[str]): Kind of record, e.g. 'BIRT'.

        Returns:
            List[TownValidity]: One record per resolution result.
        """
        year = year_of(date)
        return [
            build_town_validity(parts, data, year, obj_id, type)
            for parts, data in self._resolve(place, year)
        ]


def format_fact(fact: TownFact) -> str:
    """A gazetteer fact as a place string: left parts, town, county, country."""
    town = fact.town[0] if fact.town else None
    segments = list(fact.left_parts) + [town, fact.county, fact.country]
    return ', '.join(s for s in segments if s)


def build_town_validity(parts: PlaceParts, data: TownData, year: Optional[int],
                        obj_id: Optional[str] = None, type: Optional[str] = None) -> TownValidity:
    """Combine what a record says (parts) with what the gazetteer says (data)."""
    validity = TownValidity(
        original=parts.original or join_place(parts.parts),
        current=parts.current,
        response=data.response,
        town_response=data.town_response,
        county_response=data.county_response,
        country_response=data.country_response,
        year=year,
        range=data.range,
        type=type,
        obj_id=obj_id,
        valid_town=data.town,
        valid_county=data.county,
        valid_country=data.country,
        left_parts=list(parts.left_parts),
        valid_left_parts=data.left_parts,
    )
    if data.town_response == Response.INVALID:
        validity.invalid_town = parts.town
        validity.suggested_town = data.town[0] if data.town else None
    if data.county_response == Response.INVALID:
        validity.invalid_county = parts.county
        validity.suggested_county = data.county
    if data.country_response == Response.INVALID:
        validity.invalid_country = parts.country
        validity.suggested_country = data.country
    return validity
