from pathlib import Path

import pytest

from place_history.cache import DEFAULT_MAX_ENTRIES
from place_history.config import PlaceConfig, load_yaml_file


def test_invalid_config_path_type():
    with pytest.raises(TypeError):
        PlaceConfig(config_path="place_config.yaml")


def test_defaults_without_file():
    config = PlaceConfig()
    assert config.default_country is None
    assert config.country_files == []
    assert config.cache_enabled is True
    assert config.cache_max_entries == DEFAULT_MAX_ENTRIES
    assert config.get_config() == {}


def test_missing_file_gives_empty_config(tmp_path):
    config = PlaceConfig(config_path=tmp_path / "missing.yaml")
    assert config.get_config() == {}


def test_invalid_yaml_gives_empty_config(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("default_country: [unclosed", encoding="utf-8")
    config = PlaceConfig(config_path=path)
    assert config.get_config() == {}
    assert config.default_country is None


def test_load_from_yaml(tmp_path):
    path = tmp_path / "place_config.yaml"
    path.write_text(
        "default_country: Hungary\n"
        "country_substitutions:\n"
        "  Magyar Királyság: Hungary\n"
        "country_files:\n"
        "  - extra/croatia.yaml\n"
        "  - /data/slovakia.yaml\n"
        "extra_translations:\n"
        "  hr:\n"
        "    Hungary: Mađarska\n"
        "cache:\n"
        "  enabled: false\n"
        "  max_entries: 50\n",
        encoding="utf-8",
    )
    config = PlaceConfig(config_path=path)
    assert config.default_country == "Hungary"
    assert config.country_files == [tmp_path / "extra" / "croatia.yaml", Path("/data/slovakia.yaml")]
    assert config.extra_translations == {"hr": {"Hungary": "Mađarska"}}
    assert config.cache_enabled is False
    assert config.cache_max_entries == 50
    assert config.get_english_country_name("Magyar Királyság") == "Hungary"


@pytest.mark.parametrize("value", ["none", "None", "", None])
def test_default_country_none(value):
    config = PlaceConfig(config_updates={"default_country": value})
    assert config.default_country is None


def test_set_and_update_config_refresh_derived_data():
    config = PlaceConfig()
    config.set_config("default_country", "Austria")
    assert config.default_country == "Austria"
    config.update_config({"default_country": "Hungary", "cache": {"max_entries": 10}})
    assert config.default_country == "Hungary"
    assert config.cache_max_entries == 10
    assert config.get_config("missing", "fallback") == "fallback"


class TestEnglishCountryNames:
    @pytest.mark.parametrize("name, expected", [
        ("Hungary", "Hungary"),
        ("hungary", "Hungary"),
        ("USA", "United States"),
        ("United States of America", "United States"),
        ("England", "United Kingdom"),
        ("Kingdom of Hungary", "Hungary"),
        ("  Austria ", "Austria"),
    ])
    def test_known(self, place_config, name, expected):
        assert place_config.get_english_country_name(name) == expected

    def test_unknown(self, place_config):
        assert place_config.get_english_country_name("Unknownland") is None
        assert place_config.get_english_country_name("") is None


class TestLoadYamlFile:
    def test_missing(self, tmp_path):
        assert load_yaml_file(tmp_path / "nope.yaml") == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert load_yaml_file(path) == {}

    def test_mapping(self, tmp_path):
        path = tmp_path / "ok.yaml"
        path.write_text("Hungary: Magyarország\n", encoding="utf-8")
        assert load_yaml_file(path) == {"Hungary": "Magyarország"}
