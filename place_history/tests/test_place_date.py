import datetime

import pytest
from ged4py.date import DateValue

from place_history.place_date import PlaceDate, year_of


@pytest.mark.parametrize("date, expected", [
    (1900, 1900),
    ("1900", 1900),
    ("  1759 ", 1759),
    ("JUL 1913", 1913),
    ("15 JUL 1913", 1913),
    ("ABT 1762", 1762),
    ("bef 1832", 1832),
    ("AFT 1951", 1951),
])
def test_simple_years(date, expected):
    """Test the year of plain and approximate dates."""
    assert year_of(date) == expected


@pytest.mark.parametrize("date", [None, "", "   ", True])
def test_no_year(date):
    """Test values that carry no year."""
    assert year_of(date) is None


def test_range_policy():
    """Test that ranges and periods reduce to their first or last year."""
    assert year_of("BET 1900 AND 1910") == 1900
    assert year_of("BET 1900 AND 1910", simplify_range_policy='last') == 1910
    assert year_of("FROM 1850 TO 1860") == 1850
    assert year_of("FROM 1850 TO 1860", simplify_range_policy='last') == 1860


def test_date_value_input():
    """Test that an already parsed ged4py DateValue is accepted."""
    value = DateValue.parse("12 MAR 1873")
    assert PlaceDate(value).date is value
    assert year_of(value) == 1873


def test_phrase_with_year():
    """Test that a year is found inside a free-text phrase."""
    assert year_of("(about 1890)") == 1890


def test_phrase_without_year():
    assert year_of("(unknown)") is None


def test_date_like_objects():
    """Test objects exposing a year attribute, such as datetime.date."""
    assert year_of(datetime.date(1921, 5, 1)) == 1921

    class Legacy:
        year_num = 1848

    assert year_of(Legacy()) == 1848


def test_place_date_wraps_place_date():
    inner = PlaceDate("ABT 1900")
    assert PlaceDate(inner).year == 1900
    assert inner.original == "ABT 1900"
