import pytest

from place_history.geocoding import format_place_for_geocoding
from place_history.place_parser import PlaceParser


@pytest.mark.parametrize("place, expected", [
    ("Magyarország, Budapest", "Budapest, Hungary"),
    ("Budapest, Budapest, Magyarország", "Budapest, Hungary"),
    ("Óbuda, Budapest, Budapest, Magyarország", "Óbuda, Budapest, Hungary"),
    ("Eisenstadt, Burgenland, Österreich", "Eisenstadt, Burgenland, Austria"),
    (["Szentendre", "Pest megye", "Magyarország"], "Szentendre, Pest megye, Hungary"),
    ("Nowhere", "Nowhere"),
])
def test_format_place_for_geocoding(resolver, place, expected):
    """Test geocoder queries: specific to general, English country name, no repeats."""
    assert format_place_for_geocoding(place, resolver) == expected


@pytest.mark.parametrize("place", ["", None, [None, " "]])
def test_empty_place(resolver, place):
    assert format_place_for_geocoding(place, resolver) == ""


def test_with_parser(registry):
    """Test that a bare PlaceParser can be used instead of a resolver."""
    parser = PlaceParser(registry)
    assert format_place_for_geocoding("Hungary, Pest megye, Szentendre", parser) == "Szentendre, Pest megye, Hungary"
