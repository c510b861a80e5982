"""
Tests for PlaceParser: splitting and classifying place strings.
"""
import pytest

from place_history.place_parser import PlaceParser, join_place


def only(candidates):
    assert len(candidates) == 1
    return candidates[0]


class TestJoinPlace:
    def test_string(self):
        assert join_place("  Budapest, Hungary ") == "Budapest, Hungary"

    def test_fragments(self):
        assert join_place(["Budapest", None, " ", "Hungary"]) == "Budapest, Hungary"

    def test_none(self):
        assert join_place(None) == ""


class TestSplitPlace:
    def test_protects_county_commas(self, resolver):
        tokens = resolver.parser.split_place("Kispest, Pest, Pilis, Solt, Kiskun, Hungary")
        assert tokens == ["Kispest", "Pest, Pilis, Solt, Kiskun", "Hungary"]

    def test_country_from_first_token(self, resolver):
        tokens = resolver.parser.split_place("Magyarország, Pest, Pilis, Solt, Kiskun, Kispest")
        assert tokens == ["Magyarország", "Pest, Pilis, Solt, Kiskun", "Kispest"]

    def test_explicit_country(self, resolver):
        tokens = resolver.parser.split_place("Kispest, Pest, Pilis, Solt, Kiskun", country="Hungary")
        assert tokens == ["Kispest", "Pest, Pilis, Solt, Kiskun"]

    def test_unknown_country_splits_on_every_comma(self, resolver):
        tokens = resolver.parser.split_place("Kispest, Pest, Pilis, Solt, Kiskun")
        assert tokens == ["Kispest", "Pest", "Pilis", "Solt", "Kiskun"]

    def test_empty_tokens_dropped(self, resolver):
        assert resolver.parser.split_place(" Budapest ,, Hungary, ") == ["Budapest", "Hungary"]
        assert resolver.parser.split_place(" , ") == []


class TestThreeOrMoreTokens:
    def test_town_county_country(self, resolver):
        parts = only(resolver.get_place_parts("Budapest, Pest megye, Magyarország"))
        assert parts.town == "Budapest"
        assert parts.county == "Pest megye"
        assert parts.country == "Hungary"
        assert parts.left_parts == []
        assert parts.current == "Budapest, Pest megye, Hungary"
        assert parts.original == "Budapest, Pest megye, Magyarország"

    def test_reversed_order(self, resolver):
        parts = only(resolver.get_place_parts("Magyarország, Pest megye, Budapest"))
        assert (parts.town, parts.county, parts.country) == ("Budapest", "Pest megye", "Hungary")

    def test_county_with_commas(self, resolver):
        parts = only(resolver.get_place_parts("Kispest, Pest, Pilis, Solt, Kiskun, Hungary"))
        assert parts.town == "Kispest"
        assert parts.county == "Pest, Pilis, Solt, Kiskun"
        assert parts.country == "Hungary"

    def test_left_parts(self, resolver):
        parts = only(resolver.get_place_parts("Óbuda, Budapest, Budapest, Hungary"))
        assert parts.left_parts == ["Óbuda"]
        assert parts.town == "Budapest"
        assert parts.current == "Óbuda, Budapest, Budapest, Hungary"
        assert parts.parts == ["Óbuda", "Budapest", "Budapest", "Hungary"]


class TestTwoTokens:
    def test_town_and_country(self, resolver):
        parts = only(resolver.get_place_parts("Szentendre, Magyarország"))
        assert (parts.town, parts.county, parts.country) == ("Szentendre", None, "Hungary")

    def test_county_and_country(self, resolver):
        parts = only(resolver.get_place_parts("Fejér megye, Magyarország"))
        assert (parts.town, parts.county, parts.country) == (None, "Fejér megye", "Hungary")

    def test_known_town_named_like_county(self, resolver):
        """A town wins over a county of the same name."""
        parts = only(resolver.get_place_parts("Budapest, Hungary"))
        assert parts.town == "Budapest"
        assert parts.county is None

    def test_town_and_county(self, resolver):
        parts = only(resolver.get_place_parts("Szentendre, Pest"))
        assert (parts.town, parts.county, parts.country) == ("Szentendre", "Pest", None)

    def test_country_argument_fills_missing_country(self, resolver):
        parts = only(resolver.get_place_parts("Szentendre, Pest", country="Magyarország"))
        assert parts.country == "Hungary"
        assert parts.current == "Szentendre, Pest, Hungary"


class TestSingleToken:
    def test_town_from_source(self, resolver):
        parts = only(resolver.get_place_parts("Kecel"))
        assert (parts.town, parts.county, parts.country) == ("Kecel", "Bács-Kiskun", "Hungary")

    def test_country(self, resolver):
        parts = only(resolver.get_place_parts("Magyarország"))
        assert parts.town is None
        assert parts.country == "Hungary"
        assert parts.current == "Hungary"

    def test_unknown(self, resolver):
        parts = only(resolver.get_place_parts("Nowhere"))
        assert parts.town == "Nowhere"
        assert parts.county is None
        assert parts.country is None

    def test_without_resolver(self, registry):
        parser = PlaceParser(registry)
        parts = only(parser.get_place_parts("Kecel"))
        assert parts.town == "Kecel"
        assert parts.county is None


@pytest.mark.parametrize("place", ["", None, [], "  "])
def test_empty_place(resolver, place):
    parts = only(resolver.get_place_parts(place))
    assert parts.town is None
    assert parts.current == ""


def test_fragments_input(resolver):
    parts = only(resolver.get_place_parts(["Budapest", None, "Magyarország"]))
    assert parts.original == "Budapest, Magyarország"
    assert parts.country == "Hungary"


def test_default_country(registry):
    parser = PlaceParser(registry, default_country="Hungary")
    parts = only(parser.get_place_parts("Tóváros, Fejér"))
    assert parts.country == "Hungary"
    assert parts.current == "Tóváros, Fejér, Hungary"


def test_results_are_copies(resolver, cache):
    first = only(resolver.get_place_parts("Budapest, Pest megye, Magyarország"))
    first.town = "Changed"
    first.left_parts.append("Changed")
    second = only(resolver.get_place_parts("Budapest, Pest megye, Magyarország"))
    assert second.town == "Budapest"
    assert second.left_parts == []
    assert cache.stats()['place_parts'] >= 1


def test_parts_roundtrip_through_current(resolver):
    """Parsing the canonical rendering gives the same parts."""
    first = only(resolver.get_place_parts("Magyarország, Pest megye, Budapest"))
    second = only(resolver.get_place_parts(first.current))
    assert (second.town, second.county, second.country) == (first.town, first.county, first.country)
