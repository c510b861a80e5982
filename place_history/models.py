"""
models.py - Data records for historical place resolution.

Defines the immutable facts loaded from gazetteer data (TownFact), the
per-town history (TownRanges), the normalized town dictionary (PureTowns),
country datasets (CountryData, TownSource) and the records returned to callers
(PlaceParts, TownGuess, TownData, TownValidity).

Module: place_history.models
"""
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from unidecode import unidecode

from .range import in_range, parse_range, range_sort_key

logger = logging.getLogger(__name__)


class Response(str, Enum):
    """Outcome of resolving one field or one fact."""
    VALID = "Valid"
    INVALID = "Invalid"
    NOT_FOUND = "Not found"
    NO_DATE_SET = "No date set"

    def __str__(self) -> str:
        return self.value


def fold_name(name: Optional[str]) -> str:
    """Case and diacritic insensitive form of a name, used for lookups."""
    if not name:
        return ''
    return unidecode(str(name)).casefold().strip()


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    return tuple(str(v) for v in value if v)


def _unique(items: Iterable[Any]) -> List[Any]:
    result = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


@dataclass(frozen=True)
class TownFact:
    """
    What a town was during one range of years.

    Attributes:
        town (Tuple[str, ...]): Town name(s); several names are simultaneous
            successors or components.
        county (Optional[str]): County the town belonged to.
        country (Optional[str]): Country the town belonged to.
        left_parts (Tuple[str, ...]): Sub-locality tokens, e.g. a district
            of the town.
    """
    town: Tuple[str, ...]
    county: Optional[str] = None
    country: Optional[str] = None
    left_parts: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, value: Any, town_name: str, country: Optional[str] = None) -> Optional["TownFact"]:
        """
        Build a fact from the raw gazetteer shape.

        Args:
            value: A fact dict, a bare county string or None.
            town_name (str): Name of the town the fact belongs to.
            country (Optional[str]): Country used when the fact does not name one.

        Returns:
            Optional[TownFact]: The fact, or None if the value carries no fact.
        """
        if value is None:
            return None
        if isinstance(value, str):
            return cls(town=(town_name,), county=value, country=country)
        if isinstance(value, dict):
            towns = _as_tuple(value.get('town')) or (town_name,)
            left_parts = value.get('leftParts', value.get('left_parts'))
            return cls(
                town=towns,
                county=value.get('county') or None,
                country=value.get('country') or country,
                left_parts=_as_tuple(left_parts),
            )
        logger.warning(f"Ignoring unsupported fact for town '{town_name}': {value!r}")
        return None

    def with_towns(self, towns: Iterable[str]) -> "TownFact":
        return replace(self, town=tuple(towns))

    def with_country(self, country: Optional[str]) -> "TownFact":
        return replace(self, country=country)


@dataclass
class TownRanges:
    """
    Full history of one town: range -> facts, plus alternative names.

    Attributes:
        ranges (Dict[str, List[TownFact]]): Facts keyed by primitive range.
        names (List[str]): Aliases the town is also known by.
    """
    ranges: Dict[str, List[TownFact]] = field(default_factory=dict)
    names: List[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, town_name: str, raw: Any, country: Optional[str] = None) -> "TownRanges":
        """
        Resolve the raw gazetteer entry of one town.

        Args:
            town_name (str): Town name (the dictionary key in the gazetteer).
            raw: A per-range dict with an optional 'names' list, or a bare county string.
            country (Optional[str]): Dataset country applied to facts without one.

        Returns:
            TownRanges: The normalized entry (possibly empty).
        """
        entry = cls()
        if raw is None:
            return entry
        if isinstance(raw, str):
            entry.ranges['-'] = [TownFact(town=(town_name,), county=raw, country=country)]
            return entry
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring unsupported entry for town '{town_name}': {raw!r}")
            return entry

        for key, value in raw.items():
            if key == 'names':
                for name in _as_tuple(value):
                    entry.add_name(name)
                continue
            if parse_range(key) is None:
                logger.warning(f"Ignoring invalid range '{key}' for town '{town_name}'")
                continue
            values = value if isinstance(value, list) else [value]
            facts = [TownFact.from_raw(v, town_name, country) for v in values]
            facts = [f for f in facts if f is not None]
            if facts:
                entry.ranges[key] = _unique(facts)
        return entry

    def copy(self) -> "TownRanges":
        return TownRanges(ranges={k: list(v) for k, v in self.ranges.items()}, names=list(self.names))

    def sorted_ranges(self) -> List[Tuple[str, List[TownFact]]]:
        """Ranges with their facts in chronological order."""
        return sorted(self.ranges.items(), key=lambda item: range_sort_key(item[0]))

    def add_name(self, name: str) -> None:
        if name and name not in self.names:
            self.names.append(name)

    def add_facts(self, range_key: str, facts: Iterable[TownFact]) -> None:
        existing = self.ranges.setdefault(range_key, [])
        for fact in facts:
            if fact not in existing:
                existing.append(fact)

    def facts_for_year(self, year: Optional[int]) -> List[Tuple[str, TownFact]]:
        """(range, fact) pairs of every range containing the year."""
        return [
            (range_key, fact)
            for range_key, facts in self.sorted_ranges()
            if in_range(year, range_key)
            for fact in facts
        ]

    def latest_range(self) -> Optional[str]:
        """The open-ended range starting last, or None if the history has no open end."""
        open_ended = [r for r in self.ranges if parse_range(r) is not None and parse_range(r)[1] is None]
        if not open_ended:
            return None
        return max(open_ended, key=range_sort_key)


class PureTowns(dict):
    """
    Normalized town dictionary: every town, named as key or as destination,
    has an entry.

    Lookups go through `find`, which tries the exact key, then aliases, then a
    case and diacritic insensitive match.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._index: Optional[Dict[str, str]] = None

    def _build_index(self) -> Dict[str, str]:
        index: Dict[str, str] = {}
        aliases: Dict[str, str] = {}
        for key, entry in self.items():
            index.setdefault(fold_name(key), key)
            for alias in entry.names:
                aliases.setdefault(alias, key)
        for alias, key in aliases.items():
            index.setdefault(fold_name(alias), key)
        return index

    def find(self, name: Optional[str]) -> Optional[Tuple[str, TownRanges]]:
        """
        Look a town up by name.

        Args:
            name (Optional[str]): Town name as written in a record.

        Returns:
            Optional[Tuple[str, TownRanges]]: (key, entry) or None if unknown.
        """
        if not name:
            return None
        name = name.strip()
        if name in self:
            return name, self[name]
        for key, entry in self.items():
            if name in entry.names:
                return key, entry
        if self._index is None:
            self._index = self._build_index()
        key = self._index.get(fold_name(name))
        if key is None:
            return None
        return key, self[key]


@dataclass
class TownSource:
    """
    Flat, year-stamped gazetteer used for quick town -> county lookups.

    Attributes:
        source (Dict[str, str]): Title of the source per language code.
        year (Optional[int]): Year the source describes; None means current.
        data (Dict[str, Dict[str, Any]]): town -> {county, map?, orig?}.
    """
    source: Dict[str, str] = field(default_factory=dict)
    year: Optional[int] = None
    data: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TownSource":
        year = raw.get('year', raw.get('_year'))
        try:
            year = int(year) if year not in (None, '') else None
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid town source year: {year!r}")
            year = None
        data = {}
        for town, value in (raw.get('data') or {}).items():
            if isinstance(value, str):
                value = {'county': value}
            if isinstance(value, dict):
                data[town] = value
        return cls(source=dict(raw.get('source', raw.get('_source')) or {}), year=year, data=data)


@dataclass
class CountryData:
    """
    Everything known about one country.

    Attributes:
        name (str): Canonical English country name.
        translations (Dict[str, str]): English name -> localized name.
        counties (Dict[str, str]): County name -> display name.
        town_sources (List[TownSource]): Flat gazetteers.
        towns_detailed (Optional[Dict[str, Any]]): Raw per-town history data.
        letter_variants (Dict[str, str]): Spelling substitutions, e.g. {'c': 'cz'}.
    """
    name: str
    translations: Dict[str, str] = field(default_factory=dict)
    counties: Dict[str, str] = field(default_factory=dict)
    town_sources: List[TownSource] = field(default_factory=list)
    towns_detailed: Optional[Dict[str, Any]] = None
    letter_variants: Dict[str, str] = field(default_factory=dict)


@dataclass
class PlaceParts:
    """
    A place string split into its administrative parts.

    Attributes:
        town, county, country: Recognised parts (None when absent).
        left_parts (List[str]): Tokens left of the town, most specific first.
        current (str): Canonical rendering of the parts.
        original (str): The input as received.
        parts (List[str]): Tokens in the order they were classified.
    """
    town: Optional[str] = None
    county: Optional[str] = None
    country: Optional[str] = None
    left_parts: List[str] = field(default_factory=list)
    current: str = ''
    original: str = ''
    parts: List[str] = field(default_factory=list)

    def update_current(self) -> str:
        segments = list(self.left_parts) + [self.town, self.county, self.country]
        self.current = ', '.join(s for s in segments if s)
        return self.current

    def copy(self) -> "PlaceParts":
        return replace(self, left_parts=list(self.left_parts), parts=list(self.parts))


@dataclass(frozen=True)
class TownGuess:
    """One answer from a flat gazetteer (or from town history) for a bare town name."""
    town: str
    county: Optional[str] = None
    country: Optional[str] = None
    map: Optional[str] = None
    orig: Optional[str] = None
    source_year: Optional[int] = None


@dataclass
class TownData:
    """Resolution of one place against one gazetteer fact."""
    response: Response
    town_response: Response
    county_response: Response
    country_response: Response
    range: Optional[str] = None
    town: Tuple[str, ...] = ()
    county: Optional[str] = None
    country: Optional[str] = None
    left_parts: Tuple[str, ...] = ()

    @classmethod
    def not_found(cls) -> "TownData":
        return cls(
            response=Response.NOT_FOUND,
            town_response=Response.NOT_FOUND,
            county_response=Response.NOT_FOUND,
            country_response=Response.NOT_FOUND,
        )


@dataclass
class TownValidity:
    """
    Validation result for one place occurrence, with suggestions.

    `invalid_*` hold what the record said when it disagrees with the
    gazetteer, `valid_*` what the gazetteer says for that year, and
    `suggested_*` the value to use instead (only set for invalid fields).
    """
    original: str
    current: str
    response: Response
    town_response: Response
    county_response: Response
    country_response: Response
    year: Optional[int] = None
    range: Optional[str] = None
    type: Optional[str] = None
    obj_id: Optional[str] = None
    invalid_town: Optional[str] = None
    valid_town: Tuple[str, ...] = ()
    suggested_town: Optional[str] = None
    invalid_county: Optional[str] = None
    valid_county: Optional[str] = None
    suggested_county: Optional[str] = None
    invalid_country: Optional[str] = None
    valid_country: Optional[str] = None
    suggested_country: Optional[str] = None
    left_parts: List[str] = field(default_factory=list)
    valid_left_parts: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.response == Response.VALID

    @property
    def valid_fact(self) -> TownFact:
        """What the gazetteer says for the year, as a TownFact."""
        return TownFact(town=tuple(self.valid_town), county=self.valid_county, country=self.valid_country,
                        left_parts=tuple(self.valid_left_parts))
