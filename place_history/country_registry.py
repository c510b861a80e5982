"""
country_registry.py - Registry of countries, their translations, counties and gazetteers.

The CountryRegistry is built once at start-up (usually with
CountryRegistry.from_config) and passed to the parser and resolver. It answers
country-name questions (detection, canonicalization, membership), provides the
per-country county regex used to protect commas inside county names, and
exposes both the flat town sources and the detailed town histories.

Module: place_history.country_registry
"""
import re
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from .cache import PlaceCache
from .config import DATA_DIR, PlaceConfig, load_yaml_file
from .models import CountryData, PureTowns, TownRanges, TownSource, _unique
from .range import split_overlapping_ranges
from .towns import parse_towns

logger = logging.getLogger(__name__)

TRANSLATIONS_DIR = DATA_DIR / 'translations'
DEFAULT_COUNTRY_FILES = [
    'united_states.yaml',
    'germany.yaml',
    'romania.yaml',
    'hungary.yaml',
    'austria.yaml',
]


def load_translation_table(table: Union[str, Dict[str, str], None]) -> Dict[str, str]:
    """
    Resolve a translation table given inline or by bundled table name.

    Args:
        table: Inline mapping (English -> localized), a bundled table name such
            as 'hu', or None.

    Returns:
        Dict[str, str]: The mapping, {} if it cannot be found.
    """
    if not table:
        return {}
    if isinstance(table, dict):
        return {str(k): str(v) for k, v in table.items() if k and v}
    path = TRANSLATIONS_DIR / f"{table}.yaml"
    return {str(k): str(v) for k, v in load_yaml_file(path).items() if k and v}


def load_country_file(path: Path) -> Optional[CountryData]:
    """
    Load one country dataset from a YAML file.

    Args:
        path (Path): File with `name` and optional `translations`, `counties`,
            `town_sources`, `towns_detailed` and `letter_variants` keys.

    Returns:
        Optional[CountryData]: The dataset, or None if the file is unusable.
    """
    raw = load_yaml_file(Path(path))
    name = raw.get('name')
    if not name:
        logger.error(f"Country file {path} has no 'name', skipped")
        return None
    sources = [TownSource.from_dict(s) for s in raw.get('town_sources') or [] if isinstance(s, dict)]
    data = CountryData(
        name=str(name),
        translations=load_translation_table(raw.get('translations')),
        counties={str(k): str(v if v else k) for k, v in (raw.get('counties') or {}).items()},
        town_sources=sources,
        towns_detailed=raw.get('towns_detailed') or None,
        letter_variants={str(k): str(v) for k, v in (raw.get('letter_variants') or {}).items()},
    )
    logger.info(f"Loaded country data for {data.name} from {path}")
    return data


def generate_town_variants(town_name: str, letter_variants: Dict[str, str]) -> List[str]:
    """
    Alternative spellings of a town name.

    Each mapping applies in both directions, one occurrence at a time, so
    {'c': 'cz'} turns 'Kecel' into 'Keczel' and 'Keczel' into 'Kecel'.

    Args:
        town_name (str): Name as written.
        letter_variants (Dict[str, str]): Spelling substitutions.

    Returns:
        List[str]: The original name first, followed by its unique variants.
    """
    variants = [town_name]
    mapping: Dict[str, str] = {}
    for pattern, replacement in letter_variants.items():
        mapping[pattern] = replacement
        mapping[replacement] = pattern
    for pattern, replacement in mapping.items():
        if not pattern:
            continue
        position = town_name.find(pattern)
        while position != -1:
            variant = town_name[:position] + replacement + town_name[position + len(pattern):]
            if variant not in variants:
                variants.append(variant)
            position = town_name.find(pattern, position + 1)
    return variants


class CountryRegistry:
    """
    Catalog of countries known to the resolver.

    Attributes:
        config (PlaceConfig): Configuration supplying the English country table.
        cache (PlaceCache): Cache used for every memoized lookup; each registry
            gets its own unless one is passed in.
    """

    def __init__(self, config: Optional[PlaceConfig] = None, cache: Optional[PlaceCache] = None) -> None:
        self.config = config if config is not None else PlaceConfig()
        self.cache = cache if cache is not None else PlaceCache(self.config.cache_max_entries)
        self.__countries: Dict[str, CountryData] = {}
        self.__raw_tables: List[Dict[str, str]] = list(self.config.extra_translations.values())

    @classmethod
    def from_config(cls, config: Optional[PlaceConfig] = None, cache: Optional[PlaceCache] = None,
                    country_files: Optional[List[Path]] = None) -> "CountryRegistry":
        """
        Build a registry from dataset files.

        Args:
            config (Optional[PlaceConfig]): Configuration; defaults to PlaceConfig().
            cache (Optional[PlaceCache]): Cache to use; defaults to a new cache sized
                from the configuration.
            country_files (Optional[List[Path]]): Files to load, overriding the
                configured files and the bundled defaults.

        Returns:
            CountryRegistry: Registry with every loadable country registered.
        """
        registry = cls(config, cache)
        files = country_files or registry.config.country_files or [DATA_DIR / f for f in DEFAULT_COUNTRY_FILES]
        for path in files:
            data = load_country_file(path)
            if data:
                registry.register_country(data)
        logger.info(f"Registered {len(registry.registered_country_names())} countries")
        return registry

    def register_country(self, data: CountryData) -> None:
        """Register (or replace) a country; clears every cache."""
        if data.name in self.__countries:
            logger.info(f"Replacing country data for {data.name}")
        self.__countries[data.name] = data
        if data.translations and not any(table is data.translations for table in self.__raw_tables):
            self.__raw_tables.append(data.translations)
        self.cache.clear()
        logger.debug(f"Registered country {data.name}")

    def get_country_data(self, country: Optional[str]) -> Optional[CountryData]:
        if not country:
            return None
        data = self.__countries.get(country)
        if data is None:
            detected = self.detect_country_name(country)
            data = self.__countries.get(detected) if detected else None
        return data

    def registered_country_names(self) -> List[str]:
        return list(self.__countries.keys())

    def countries_with_detailed_towns(self) -> List[str]:
        return [name for name, data in self.__countries.items() if data.towns_detailed]

    def get_all_country_names(self) -> List[str]:
        """Registered names plus every key and value of their translation tables."""
        names = []
        for name, data in self.__countries.items():
            names.append(name)
            for key, value in data.translations.items():
                names.extend((key, value))
        return _unique(names)

    def get_counties_for_country(self, country: str) -> Dict[str, str]:
        data = self.get_country_data(country)
        return dict(data.counties) if data else {}

    def get_town_sources_for_country(self, country: str) -> List[TownSource]:
        data = self.get_country_data(country)
        return list(data.town_sources) if data else []

    def get_detailed_towns_for_country(self, country: str) -> Optional[Dict[str, Any]]:
        data = self.get_country_data(country)
        return data.towns_detailed if data else None

    # Country names

    def detect_country_name(self, name: Optional[str]) -> Optional[str]:
        """
        Canonical English name of a country written in any known language.

        Args:
            name (Optional[str]): Country name as written.

        Returns:
            Optional[str]: Canonical name, or None if it is not a known country.
        """
        if not name or not str(name).strip():
            return None
        key = str(name).strip().lower()
        return self.cache.get_or_set('detect_country_name', key, lambda: self.__detect_country_name(key))

    def __detect_country_name(self, key: str) -> Optional[str]:
        english = self.config.get_english_country_name(key)
        if english:
            return self.__registered_name_for(english)

        for data in self.__countries.values():
            for english_name in data.translations:
                if english_name.lower() == key:
                    return english_name

        for country_name, data in self.__countries.items():
            for english_name, translated in data.translations.items():
                if translated.lower() == key and english_name == country_name:
                    return english_name

        for table in self.__raw_tables:
            for english_name, translated in table.items():
                if english_name.lower() == key or translated.lower() == key:
                    return english_name
        return None

    def __registered_name_for(self, english: str) -> str:
        if english in self.__countries:
            return english
        for country_name in self.__countries:
            if re.match(rf"{re.escape(country_name)}(?:\s|,|$)", english):
                return country_name
        return english

    def is_country_name(self, name: Optional[str]) -> bool:
        """True if the name is any spelling of a known country."""
        if not name or not str(name).strip():
            return False
        key = str(name).strip().lower()
        return self.cache.get_or_set('is_country_name', key, lambda: self.__is_country_name(key))

    def __is_country_name(self, key: str) -> bool:
        if any(n.lower() == key for n in self.get_all_country_names()):
            return True
        if self.config.get_english_country_name(key):
            return True
        return any(
            english_name.lower() == key or translated.lower() == key
            for table in self.__raw_tables
            for english_name, translated in table.items()
        )

    # Counties

    def county_regexp(self, country: Optional[str]) -> Optional[Pattern]:
        """
        Regex matching any county name or display name of a country.

        Names are tried longest first and only match between non-letters, so
        'Pest' never matches inside 'Budapest'.

        Args:
            country (Optional[str]): Country name in any known spelling.

        Returns:
            Optional[Pattern]: Compiled, case-insensitive regex or None if the
            country has no counties.
        """
        data = self.get_country_data(country)
        if data is None or not data.counties:
            return None

        def build() -> Pattern:
            names = {n for pair in data.counties.items() for n in pair if n}
            ordered = sorted(names, key=lambda n: (-len(n), n))
            alternation = '|'.join(re.escape(n) for n in ordered)
            return re.compile(rf"(?<![^\W\d_])(?:{alternation})(?![^\W\d_])", re.IGNORECASE)

        return self.cache.get_or_set('county_regexp', data.name, build)

    def is_county_name(self, name: Optional[str], country: Optional[str] = None) -> bool:
        """True if the name is a county (or county display name) of the country, or of any country."""
        if not name:
            return False
        key = name.strip().lower()
        if country:
            data = self.get_country_data(country)
            countries = [data] if data else []
        else:
            countries = list(self.__countries.values())
        return any(
            key == county.lower() or key == display.lower()
            for data in countries
            for county, display in data.counties.items()
        )

    def county_aliases(self, county: Optional[str], country: Optional[str] = None) -> List[str]:
        """Every spelling of a county: itself plus its name/display-name partner."""
        if not county:
            return []
        key = county.strip().lower()
        aliases = [county]
        data = self.get_country_data(country)
        countries = [data] if data else list(self.__countries.values())
        for data in countries:
            for name, display in data.counties.items():
                if key in (name.lower(), display.lower()):
                    aliases.extend((name, display))
        return _unique(aliases)

    # Towns

    def get_town_variants(self, town_name: str, country: Optional[str]) -> List[str]:
        data = self.get_country_data(country)
        if data is None or not data.letter_variants:
            return [town_name]
        key = f"{data.name}|{town_name}"
        return list(self.cache.get_or_set(
            'town_variants', key, lambda: generate_town_variants(town_name, data.letter_variants)))

    def get_sorted_town_sources(self, country: Optional[str]) -> List[Tuple[int, TownSource]]:
        """
        Town sources of a country, newest first.

        Returns:
            List[Tuple[int, TownSource]]: (effective year, source) pairs; a
            source without a year counts as the current year.
        """
        data = self.get_country_data(country)
        if data is None:
            return []

        def build() -> List[Tuple[int, TownSource]]:
            current_year = date.today().year
            stamped = [(s.year if s.year is not None else current_year, s) for s in data.town_sources]
            return sorted(stamped, key=lambda pair: pair[0], reverse=True)

        return self.cache.get_or_set('sorted_town_sources', data.name, build)

    def find_town_in_all_countries(self, town_name: str) -> List[Tuple[str, str]]:
        """
        Every country knowing the town, as (country, where) pairs.

        `where` is 'detailed' for towns with a recorded history and 'source'
        for towns only listed in a flat town source.
        """
        found = []
        for name, data in self.__countries.items():
            if data.towns_detailed and town_name in data.towns_detailed:
                found.append((name, 'detailed'))
            elif any(town_name in source.data for source in data.town_sources):
                found.append((name, 'source'))
        return found

    def get_best_country_for_town(self, town_name: str) -> Optional[str]:
        """Country to prefer for a town; countries with detailed history win."""
        found = self.find_town_in_all_countries(town_name)
        for name, where in found:
            if where == 'detailed':
                return name
        return found[0][0] if found else None

    def get_combined_detailed_towns_by_country(self) -> Dict[str, Dict[str, Any]]:
        return {name: data.towns_detailed for name, data in self.__countries.items() if data.towns_detailed}

    def get_combined_detailed_towns(self) -> Dict[str, TownRanges]:
        """
        All detailed town histories in one flat dictionary.

        Facts carry their country. A town known in several countries gets its
        ranges re-split so each disjoint period lists the facts of every country.
        """
        by_town: Dict[str, List[TownRanges]] = {}
        for country_name, towns in self.get_combined_detailed_towns_by_country().items():
            for town_name, raw in towns.items():
                by_town.setdefault(town_name, []).append(TownRanges.from_raw(town_name, raw, country_name))

        combined: Dict[str, TownRanges] = {}
        for town_name, entries in by_town.items():
            if len(entries) == 1:
                combined[town_name] = entries[0]
                continue
            merged = TownRanges(names=_unique(n for entry in entries for n in entry.names))
            pairs = [(r, fact) for entry in entries for r, facts in entry.ranges.items() for fact in facts]
            for cell, facts in split_overlapping_ranges(pairs):
                merged.add_facts(cell, facts)
            combined[town_name] = merged
            logger.debug(f"Merged history of '{town_name}' from {len(entries)} countries")
        return combined

    def get_pure_towns(self, country: Optional[str] = None) -> PureTowns:
        """
        Normalized town histories for one country, or for all countries combined.

        Args:
            country (Optional[str]): Country in any known spelling; None for all.

        Returns:
            PureTowns: Normalized towns (empty if the country has no detailed data).
        """
        if country:
            data = self.get_country_data(country)
            if data is None or not data.towns_detailed:
                return PureTowns()
            return parse_towns(data.towns_detailed, country=data.name, cache=self.cache)
        return self.cache.get_or_set(
            'pure_towns', '__combined__', lambda: parse_towns(self.get_combined_detailed_towns(), cache=self.cache))
