"""
range.py - Year interval algebra for historical gazetteers.

Ranges are kept as plain strings so they can be used directly as dictionary
keys in gazetteer data:

    "-" or ""      unbounded
    "-1872"        open start, up to and including 1872
    "1873-"        open end, from 1873 onwards
    "1873-1949"    closed, both years inclusive

Sequences such as (1873, None) or [None, 1949] are accepted wherever a range
is read. All comparisons are numeric, never string based. Invalid ranges are
treated as non-matching and never raise.

Module: place_history.range
"""
__all__ = [
    'PrimitiveRange', 'SplitResult', 'parse_range', 'from_tuple', 'in_range',
    'is_intersected_range', 'split_range', 'parse_range_bounds', 'is_range_contained',
    'extract_split_points', 'generate_split_ranges', 'split_overlapping_ranges',
    'find_matching_range_for_split_range', 'extract_separation_years', 'range_sort_key'
]

import math
import re
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

logger = logging.getLogger(__name__)

PrimitiveRange = str
RangeLike = Union[str, Sequence[Any]]
Bounds = Tuple[Optional[int], Optional[int]]
T = TypeVar('T')

RANGE_RE = re.compile(r"^(\d*)-(\d*)$")


@dataclass(frozen=True)
class SplitResult:
    """
    One piece of a range produced by split_range.

    Attributes:
        range (str): The piece as a primitive range string.
        to (bool): The piece belongs to the range being split.
        by (bool): The piece also lies inside the splitting range.
    """
    range: PrimitiveRange
    to: bool = False
    by: bool = False


def _to_bound(value: Any) -> Tuple[bool, Optional[int]]:
    if value is None or value == '':
        return True, None
    if isinstance(value, bool):
        return False, None
    if isinstance(value, float) and math.isinf(value):
        return True, None
    try:
        return True, int(value)
    except (TypeError, ValueError):
        return False, None


def parse_range(range_value: RangeLike) -> Optional[Bounds]:
    """
    Validate a range and return its numeric bounds.

    Args:
        range_value: Range string or (start, end) sequence.

    Returns:
        Optional[Tuple[Optional[int], Optional[int]]]: (start, end) with None for an
        open bound, or None when the range is not valid.
    """
    if isinstance(range_value, str):
        if range_value in ('', '-'):
            return None, None
        match = RANGE_RE.match(range_value)
        if not match:
            return None
        start = int(match.group(1)) if match.group(1) else None
        end = int(match.group(2)) if match.group(2) else None
    elif isinstance(range_value, (list, tuple)):
        if len(range_value) > 2:
            return None
        values = list(range_value) + [None] * (2 - len(range_value))
        ok_start, start = _to_bound(values[0])
        ok_end, end = _to_bound(values[1])
        if not (ok_start and ok_end):
            return None
    else:
        return None

    if start is not None and end is not None and start > end:
        return None
    return start, end


def from_tuple(start: Optional[int] = None, end: Optional[int] = None) -> PrimitiveRange:
    """Build a primitive range string from optional bounds."""
    if start is None and end is None:
        return '-'
    if start is None:
        return f"-{int(end)}"
    if end is None:
        return f"{int(start)}-"
    return f"{int(start)}-{int(end)}"


def _low(value: Optional[int]) -> float:
    return -math.inf if value is None else value


def _high(value: Optional[int]) -> float:
    return math.inf if value is None else value


def in_range(year: Any, range_value: RangeLike, true_if_no_year: bool = False) -> bool:
    """
    Check whether a year falls inside a range.

    Args:
        year: Year as int or numeric string; None or '' means "no year".
        range_value: Range string or (start, end) sequence.
        true_if_no_year (bool): Result to return when no year is given.

    Returns:
        bool: True if the year is inside the range.
    """
    bounds = parse_range(range_value)
    if bounds is None:
        return False
    if year is None or year == '':
        return true_if_no_year
    try:
        year = int(year)
    except (TypeError, ValueError):
        return true_if_no_year
    start, end = bounds
    return _low(start) <= year <= _high(end)


def is_intersected_range(range1: RangeLike, range2: RangeLike) -> bool:
    """
    Check whether two ranges share at least one year.

    Unbounded ranges intersect everything; invalid ranges intersect nothing.
    """
    bounds1 = parse_range(range1)
    bounds2 = parse_range(range2)
    if bounds1 is None or bounds2 is None:
        return False
    start1, end1 = bounds1
    start2, end2 = bounds2
    return _low(start1) <= _high(end2) and _low(start2) <= _high(end1)


def split_range(to: RangeLike, by: RangeLike) -> List[SplitResult]:
    """
    Split the range `to` at the boundaries of the range `by`.

    Produces, in chronological order, the part of `to` before any overlap, the
    overlap itself and the part of `to` after the overlap. Without an overlap
    the whole of `to` is returned as a single piece.

    Args:
        to: Range being carved up.
        by: Range providing the cut points.

    Returns:
        List[SplitResult]: Ordered, adjacent pieces covering `to` exactly.
    """
    to_bounds = parse_range(to)
    if to_bounds is None:
        return []
    to_start, to_end = to_bounds

    if not is_intersected_range(to, by):
        return [SplitResult(from_tuple(to_start, to_end), to=True)]

    by_start, by_end = parse_range(by)
    overlap_start = max(_low(to_start), _low(by_start))
    overlap_end = min(_high(to_end), _high(by_end))

    results: List[SplitResult] = []
    if _low(to_start) < overlap_start:
        results.append(SplitResult(from_tuple(to_start, overlap_start - 1), to=True))

    results.append(SplitResult(
        from_tuple(overlap_start if math.isfinite(overlap_start) else None,
                   overlap_end if math.isfinite(overlap_end) else None),
        to=True,
        by=True,
    ))

    if _high(to_end) > overlap_end:
        results.append(SplitResult(from_tuple(overlap_end + 1, to_end), to=True))

    return results


def parse_range_bounds(range_value: RangeLike) -> Bounds:
    """Like parse_range but returns (None, None) for invalid input."""
    bounds = parse_range(range_value)
    return bounds if bounds is not None else (None, None)


def is_range_contained(contained: RangeLike, container: RangeLike) -> bool:
    """Check whether `contained` lies completely inside `container`."""
    inner = parse_range(contained)
    outer = parse_range(container)
    if inner is None or outer is None:
        return False
    return _low(inner[0]) >= _low(outer[0]) and _high(inner[1]) <= _high(outer[1])


def extract_split_points(ranges: Iterable[RangeLike]) -> List[int]:
    """
    Collect every year at which some range starts or stops being valid.

    A range contributes its start and the year after its end.
    """
    points = set()
    for range_value in ranges:
        bounds = parse_range(range_value)
        if bounds is None:
            continue
        start, end = bounds
        if start is not None:
            points.add(start)
        if end is not None:
            points.add(end + 1)
    return sorted(points)


def generate_split_ranges(split_points: Sequence[int]) -> List[PrimitiveRange]:
    """Closed ranges between consecutive split points."""
    return [from_tuple(split_points[i], split_points[i + 1] - 1) for i in range(len(split_points) - 1)]


def find_matching_range_for_split_range(split: RangeLike, ranges_to_values: Sequence[Tuple[RangeLike, T]]) -> List[T]:
    """Values of every entry whose range fully contains `split`."""
    return [value for range_value, value in ranges_to_values if is_range_contained(split, range_value)]


def split_overlapping_ranges(ranges_to_values: Sequence[Tuple[RangeLike, T]]) -> List[Tuple[PrimitiveRange, List[T]]]:
    """
    Partition possibly overlapping ranges into disjoint cells.

    Every cell carries the values of all input ranges that contain it. Cells
    nobody covers are dropped, so the union of the cells equals the union of
    the inputs with no year covered twice.

    Args:
        ranges_to_values: (range, value) pairs.

    Returns:
        List[Tuple[str, List]]: Chronologically ordered (cell, values) pairs.
    """
    valid = [(r, v) for r, v in ranges_to_values if parse_range(r) is not None]
    if not valid:
        return []

    bounds = [parse_range(r) for r, _ in valid]
    split_points = extract_split_points(r for r, _ in valid)
    if not split_points:
        # Every input is unbounded
        return [('-', [v for _, v in valid])]

    cells: List[PrimitiveRange] = []
    first_point = split_points[0]
    if any(start is None or start < first_point for start, _ in bounds):
        cells.append(from_tuple(None, first_point - 1))

    cells.extend(generate_split_ranges(split_points))

    last_point = split_points[-1]
    if any(end is None or end >= last_point for _, end in bounds):
        cells.append(from_tuple(last_point, None))

    result = []
    for cell in cells:
        values = find_matching_range_for_split_range(cell, valid)
        if values:
            result.append((cell, values))
    return result


def extract_separation_years(child_name: str, child_ranges: Mapping[str, Iterable[Any]], parent_name: str) -> List[int]:
    """
    Years in which a child locality became independent of its parent.

    A range in which the child is recorded solely as the parent ends the
    dependency (the year after its end is a separation year); a range in which
    the child is recorded under its own name starts one.

    Args:
        child_name (str): Name of the dependent locality.
        child_ranges: Mapping of range -> facts, each fact exposing a `town` sequence.
        parent_name (str): Name of the parent locality.

    Returns:
        List[int]: Sorted, unique separation years.
    """
    years = set()
    for range_key, facts in child_ranges.items():
        bounds = parse_range(range_key)
        if bounds is None or not facts:
            continue
        start, end = bounds
        for fact in facts:
            towns = list(getattr(fact, 'town', ()) or ())
            points_to_parent = parent_name in towns
            if child_name not in towns and points_to_parent and len(towns) == 1:
                if end is not None:
                    years.add(end + 1)
            elif child_name in towns and not points_to_parent:
                if start is not None:
                    years.add(start)
    return sorted(years)


def range_sort_key(range_value: RangeLike) -> Tuple[float, float]:
    """Sort key ordering ranges chronologically, invalid ranges last."""
    bounds = parse_range(range_value)
    if bounds is None:
        return math.inf, math.inf
    return _low(bounds[0]), _high(bounds[1])
