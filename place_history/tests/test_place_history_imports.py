import pytest


@pytest.mark.parametrize(
    "symbol_name",
    [
        "TownResolver",
        "CountryRegistry",
        "PlaceConfig",
        "PlaceParser",
        "PlaceParts",
        "TownValidity",
        "Response",
        "parse_towns",
        "split_overlapping_ranges",
        "format_place_for_geocoding",
        "year_of",
        "clear_place_caches",
    ],
)
def test_import_symbol(symbol_name):
    """Test that each key symbol can be imported from place_history."""
    module = __import__("place_history", fromlist=[symbol_name])
    symbol = getattr(module, symbol_name, None)
    assert symbol is not None, f"{symbol_name} could not be imported"


@pytest.mark.parametrize("symbol_name", ["PlaceValidator", "ValidationPipeline", "PlaceRecord", "ValidationReport"])
def test_import_validation_symbol(symbol_name):
    """Test that the validation API can be imported from place_history.validation."""
    module = __import__("place_history.validation", fromlist=[symbol_name])
    assert getattr(module, symbol_name, None) is not None


def test_import_failure():
    """Test that importing a non-existent symbol raises ImportError or AttributeError."""
    with pytest.raises((ImportError, AttributeError)):
        from place_history import NotARealClass  # noqa: F401
