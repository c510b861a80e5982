"""
towns.py - Town history normalizer.

Turns raw per-country gazetteer histories into PureTowns: a dictionary in
which every town mentioned anywhere (as an entry or only as the destination of
some other town) has a complete timeline and its aliases, and in which parent
towns list their assimilated components for the years they were part of them.

Raw gazetteer shape, per town:

    Buda:
      names: [Ofen]
      "-1872": {town: Buda, county: Pest-Pilis-Solt-Kiskun}
      "1873-": {town: Budapest, county: Budapest}

Range values may be a fact dict, a list of fact dicts (a merger or split), a
bare county string or null. A town with no recorded history can be given as a
bare county string.

Module: place_history.towns
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .cache import PlaceCache, dataset_hash, place_caches
from .models import PureTowns, TownFact, TownRanges, _unique
from .range import (
    extract_separation_years, from_tuple, parse_range, split_overlapping_ranges, split_range
)

logger = logging.getLogger(__name__)


def load_towns(towns: Mapping[str, Any], country: Optional[str] = None) -> Dict[str, TownRanges]:
    """
    Resolve every explicit entry of a raw gazetteer into TownRanges.

    Args:
        towns: town -> raw entry, or town -> TownRanges.
        country (Optional[str]): Country stamped on facts that do not name one.

    Returns:
        Dict[str, TownRanges]: Fresh entries, safe to modify.
    """
    loaded: Dict[str, TownRanges] = {}
    for town_name, raw in towns.items():
        if isinstance(raw, TownRanges):
            entry = raw.copy()
            if country:
                entry.ranges = {
                    r: [f if f.country else f.with_country(country) for f in facts]
                    for r, facts in entry.ranges.items()
                }
        else:
            entry = TownRanges.from_raw(town_name, raw, country)
        loaded[town_name] = entry
    return loaded


def parse_towns(towns: Mapping[str, Any], country: Optional[str] = None,
                cache: Optional[PlaceCache] = None) -> PureTowns:
    """
    Normalize a raw gazetteer into PureTowns.

    The result is cached by a hash of the input, so repeated calls with the
    same data return the same object. Callers must not modify it.

    Args:
        towns: Raw gazetteer (town -> raw entry or TownRanges).
        country (Optional[str]): Dataset country.
        cache (Optional[PlaceCache]): Cache to use; defaults to place_caches.

    Returns:
        PureTowns: Normalized towns.
    """
    cache = cache if cache is not None else place_caches
    key = dataset_hash(towns, salt=country)
    return cache.get_or_set('pure_towns', key, lambda: _normalize_towns(towns, country))


def parse_towns_by_country(country_based: Mapping[str, Mapping[str, Any]],
                           cache: Optional[PlaceCache] = None) -> Dict[str, PureTowns]:
    """Normalize each country's gazetteer separately."""
    return {country: parse_towns(towns, country=country, cache=cache) for country, towns in country_based.items()}


def _normalize_towns(towns: Mapping[str, Any], country: Optional[str]) -> PureTowns:
    explicit = load_towns(towns, country)
    pure = PureTowns((name, entry.copy()) for name, entry in explicit.items())

    synthesized = _synthesize_destinations(explicit, pure)
    renames = _link_renames(explicit, pure)
    inherited = _inherit_parent_history(explicit, pure)
    assimilated = _split_assimilated_parents(explicit, pure)

    logger.debug(
        f"Normalized {len(explicit)} towns{' of ' + country if country else ''}: "
        f"{synthesized} synthesized, {renames} renames, {inherited} inherited histories, "
        f"{assimilated} assimilated components"
    )
    return pure


def _sole_parent(town_name: str, facts: List[TownFact]) -> Optional[str]:
    """The single other town a range points to, if the range is a plain pointer."""
    if len(facts) != 1:
        return None
    fact = facts[0]
    if len(fact.town) != 1 or fact.left_parts or fact.town[0] == town_name:
        return None
    return fact.town[0]


def _synthesize_destinations(explicit: Dict[str, TownRanges], pure: PureTowns) -> int:
    """
    Create entries for towns that only appear as destinations.

    A destination inherits the history of each parent up to the first range
    naming it, plus every range naming it restricted to the facts (and name)
    of the destination itself.
    """
    contributions: Dict[str, List[Tuple[str, TownFact]]] = {}
    parents: Dict[str, int] = {}

    for parent_name, entry in explicit.items():
        ordered = entry.sorted_ranges()
        destinations = _unique(
            town for _, facts in ordered for fact in facts for town in fact.town
            if town != parent_name and town not in explicit
        )
        for destination in destinations:
            pairs = contributions.setdefault(destination, [])
            parents[destination] = parents.get(destination, 0) + 1
            history: Optional[List[Tuple[str, TownFact]]] = []
            for range_key, facts in ordered:
                naming = [f for f in facts if destination in f.town]
                if naming:
                    # A parent becoming only a district (left_parts) of the destination
                    # does not pass its earlier history on
                    if history is not None and any(not f.left_parts for f in naming):
                        pairs.extend(history)
                    history = None
                    pairs.extend((range_key, TownFact(town=(destination,), county=f.county, country=f.country))
                                 for f in naming)
                elif history is not None:
                    history.extend((range_key, fact) for fact in facts)

    for destination, pairs in contributions.items():
        entry = TownRanges()
        if parents[destination] == 1:
            for range_key, fact in pairs:
                entry.add_facts(range_key, [fact])
        else:
            for cell, facts in split_overlapping_ranges(pairs):
                entry.add_facts(cell, facts)
        pure[destination] = entry
    return len(contributions)


def _link_renames(explicit: Dict[str, TownRanges], pure: PureTowns) -> int:
    """Cross-link aliases of towns that were simply renamed."""
    count = 0
    for source_name, entry in explicit.items():
        for facts in entry.ranges.values():
            destination = _sole_parent(source_name, facts)
            if destination is None or destination in explicit:
                continue
            target = pure[destination]
            for alias in [source_name] + entry.names:
                if alias != destination:
                    target.add_name(alias)
            pure[source_name].add_name(destination)
            count += 1
    return count


def _inherit_parent_history(explicit: Dict[str, TownRanges], pure: PureTowns) -> int:
    """
    Replace "was part of" placeholders with the parent's own history.

    A child whose earliest range is an open-start pointer to a parent gets the
    parent's ranges, cut off before the child's separation year.
    """
    count = 0
    for child_name, entry in explicit.items():
        ordered = entry.sorted_ranges()
        if not ordered:
            continue
        first_range, facts = ordered[0]
        start, end = parse_range(first_range)
        if start is not None or end is None:
            continue
        parent_name = _sole_parent(child_name, facts)
        if parent_name is None or parent_name not in pure:
            continue

        years = extract_separation_years(child_name, entry.ranges, parent_name)
        if not years:
            continue
        cut = from_tuple(None, years[0] - 1)
        history: Dict[str, List[TownFact]] = {}
        for parent_range, parent_facts in pure[parent_name].sorted_ranges():
            for piece in split_range(parent_range, cut):
                if piece.by:
                    history.setdefault(piece.range, []).extend(parent_facts)
        if not history:
            continue

        target = pure[child_name]
        rest = {r: f for r, f in target.ranges.items() if r != first_range}
        target.ranges = history
        for range_key, range_facts in rest.items():
            target.add_facts(range_key, range_facts)
        logger.debug(f"'{child_name}' inherits the history of '{parent_name}' until {years[0] - 1}")
        count += 1
    return count


def _split_assimilated_parents(explicit: Dict[str, TownRanges], pure: PureTowns) -> int:
    """
    Record assimilated children as components of their parent.

    For every explicit child pointing to an explicit parent through an
    open-start or open-end range, the parent's ranges are split at that range
    and the child is added to the towns of the overlapping pieces. Each such
    range is applied on its own, so a child absorbed more than once is listed
    for every period it was a component.
    """
    components: Dict[str, List[Tuple[str, str]]] = {}
    for child_name, entry in explicit.items():
        for range_key, facts in entry.sorted_ranges():
            start, end = parse_range(range_key)
            if (start is None) == (end is None):
                continue
            parent_name = _sole_parent(child_name, facts)
            if parent_name is None or parent_name not in explicit:
                continue
            components.setdefault(parent_name, []).append((child_name, range_key))

    count = 0
    for parent_name, children in components.items():
        target = pure[parent_name]
        for child_name, component_range in children:
            logger.debug(f"'{child_name}' is part of '{parent_name}' in {component_range}")
            split: Dict[str, List[TownFact]] = {}
            for parent_range, parent_facts in target.sorted_ranges():
                for piece in split_range(parent_range, component_range):
                    facts = [_with_component(f, child_name) if piece.by else f for f in parent_facts]
                    for fact in facts:
                        if fact not in split.setdefault(piece.range, []):
                            split[piece.range].append(fact)
            target.ranges = split
            count += 1
    return count


def _with_component(fact: TownFact, component: str) -> TownFact:
    if component in fact.town:
        return fact
    return fact.with_towns(fact.town + (component,))
