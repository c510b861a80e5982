"""
place_date.py - Year extraction for historical place resolution.

Place resolution only needs the year of a record. PlaceDate accepts a plain
year, a GEDCOM date string (parsed with ged4py), a ged4py DateValue, or any
date-like object exposing `year_num` or `year`, and reduces ranges and periods
to one year according to a simplification policy ('first' or 'last').

Module: place_history.place_date
"""
import re
import logging
from typing import Any, Optional

from ged4py.date import DateValue

logger = logging.getLogger(__name__)

YEAR_RE = re.compile(r'(?<!\d)(\d{3,4})(?!\d)')


class PlaceDate:
    """
    Wraps a record date and exposes its year.

    Attributes:
        original: The date as supplied.
        date: Parsed DateValue, plain int year, fallback string, or None.
        simplify_range_policy: 'first' or 'last' year of a range or period.
    """
    __slots__ = [
        'original',
        'date',
        'simplify_range_policy'
    ]

    def __init__(self, date: Any, simplify_range_policy: str = 'first'):
        self.original = date
        self.simplify_range_policy: str = simplify_range_policy
        self.date = self._parse(date)

    def _parse(self, date: Any) -> Any:
        if date is None or isinstance(date, bool):
            return None
        if isinstance(date, PlaceDate):
            return date.date
        if isinstance(date, (int, DateValue)):
            return date
        if isinstance(date, str):
            text = date.strip()
            if not text:
                return None
            if text.isdigit():
                return int(text)
            try:
                return DateValue.parse(text)
            except Exception as e:
                logger.warning(f"Failed to parse date string '{date}': {e}")
                return text
        return date

    @property
    def year(self) -> Optional[int]:
        """
        The year of the date, or None if it has none.

        Returns:
            int or None: Year as integer.
        """
        date = self.date
        if date is None:
            return None
        if isinstance(date, int):
            return date
        if isinstance(date, str):
            return self._year_from_text(date)
        if isinstance(date, DateValue):
            return self._year_from_date_value(date)

        year_num = getattr(date, 'year_num', None)
        if year_num is not None:
            return int(year_num)
        year = getattr(date, 'year', None)
        if year is not None:
            try:
                return int(year)
            except (TypeError, ValueError):
                return self._year_from_text(str(year))
        return self._year_from_text(str(date))

    def _year_from_date_value(self, value: DateValue) -> Optional[int]:
        kind = getattr(value, 'kind', None)
        kind_name = getattr(kind, 'name', '')
        if kind_name in ('RANGE', 'PERIOD'):
            first = getattr(value, 'date1', None)
            last = getattr(value, 'date2', None)
            single = last if self.simplify_range_policy == 'last' else first
            single = single if single is not None else (first or last)
        elif kind_name == 'PHRASE':
            return self._year_from_text(getattr(value, 'phrase', '') or '')
        else:
            single = getattr(value, 'date', None)

        year = getattr(single, 'year', None)
        if year is not None:
            return int(year)
        return self._year_from_text(str(value))

    def _year_from_text(self, text: str) -> Optional[int]:
        match = YEAR_RE.search(text or '')
        if match:
            return int(match.group(1))
        logger.warning(f"Unable to find a year in date '{text}'")
        return None


def year_of(date: Any, simplify_range_policy: str = 'first') -> Optional[int]:
    """
    Year of any supported date value.

    Args:
        date: int, GEDCOM date string, DateValue, date-like object or None.
        simplify_range_policy (str): Which end of a range to use.

    Returns:
        Optional[int]: The year, or None if the value carries none.
    """
    if date is None:
        return None
    return PlaceDate(date, simplify_range_policy).year
