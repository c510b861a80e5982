"""
config.py - Configuration and canonical English country names for place resolution.

Provides PlaceConfig for loading the default country, extra country aliases,
dataset file locations, extra translation tables and cache settings from a
YAML configuration file, and builds the canonical English country table used
by country detection.

Module: place_history.config
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pycountry

from .cache import DEFAULT_MAX_ENTRIES

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / 'data'
ENGLISH_ALIASES_FILE = DATA_DIR / 'translations' / 'en.yaml'


def load_yaml_file(path: Path) -> dict:
    """
    Read a YAML mapping from disk.

    Args:
        path (Path): File to read.

    Returns:
        dict: Parsed mapping, or {} if the file is missing or unreadable.
    """
    if not path.exists():
        logger.error(f"YAML file not found: {path}")
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Failed to load YAML from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Expected a mapping in {path}, got {type(data).__name__}")
        return {}
    return data


class PlaceConfig:
    """
    PlaceConfig manages loading of place resolution settings from a YAML file.

    Attributes:
        default_country (Optional[str]): Country assumed when a place names none.
        english_country_names_lower (Dict[str, str]): Lowercase English name or alias -> canonical English name.
        country_files (List[Path]): Country dataset files to register.
        extra_translations (Dict[str, Dict[str, str]]): Raw translation tables by language.
        cache_enabled (bool): Whether caching should be on.
        cache_max_entries (int): Bound for each string-keyed cache category.
    """

    def __init__(self, config_path: Optional[Path] = None, config_updates: Optional[dict] = None) -> None:
        """Initialize PlaceConfig with country data and optional configuration.

        Args:
            config_path: Optional path to the configuration YAML file.
            config_updates: Optional dict of settings applied on top of the file.

        Raises:
            TypeError: If config_path is not a Path or None.
        """
        if config_path is not None and not isinstance(config_path, Path):
            raise TypeError("config_path must be a pathlib.Path or None")
        self.__config_path: Optional[Path] = config_path
        self.default_country: Optional[str] = None
        self.english_country_names_lower: Dict[str, str] = {}
        self.country_files: List[Path] = []
        self.extra_translations: Dict[str, Dict[str, str]] = {}
        self.cache_enabled: bool = True
        self.cache_max_entries: int = DEFAULT_MAX_ENTRIES

        self.__config = {}
        if config_path:
            self.load_config()
        if config_updates:
            self.update_config(config_updates)
        self.initialize_country_data()

    def load_config(self) -> None:
        """Load configuration from the YAML file; a missing or invalid file gives an empty config."""
        if self.__config_path and self.__config_path.exists():
            try:
                with open(self.__config_path, 'r', encoding='utf-8') as f:
                    self.__config = yaml.safe_load(f) or {}
            except Exception as e:
                logger.error(f"Failed to load place config from {self.__config_path}: {e}")
                self.__config = {}
        else:
            if self.__config_path:
                logger.warning(f"Place config file not found: {self.__config_path}")
            self.__config = {}

    def get_config(self, key: Optional[str] = None, default=None):
        """
        Get the configuration dictionary or a specific key value.

        Args:
            key: Optional key to retrieve a specific value. If None, returns entire config.
            default: Default value to return if key is not found.

        Returns:
            The entire config dict if key is None, otherwise the value for the key.
        """
        if key is None:
            return self.__config.copy()
        return self.__config.get(key, default)

    def set_config(self, key: str, value) -> None:
        """Set a single configuration value and refresh derived data."""
        self.__config[key] = value
        self.initialize_country_data()

    def update_config(self, settings_dict: dict) -> None:
        """
        Update multiple configuration values from a dict.

        Args:
            settings_dict: Dictionary of key-value pairs to update in the config.
        """
        self.__config.update(settings_dict)
        self.initialize_country_data()

    def initialize_country_data(self) -> None:
        """
        Initialize derived settings from the loaded configuration.

        Builds the canonical English country table from pycountry (current and
        historic countries), the bundled English aliases and the configured
        country substitutions.
        """
        config = self.__config
        country_substitutions = config.get('country_substitutions') or {}
        default_country = config.get('default_country')
        if not default_country or str(default_country).strip().lower() == 'none':
            default_country = None
        self.default_country = default_country

        english: Dict[str, str] = {}
        for country in pycountry.countries:
            canonical = getattr(country, 'common_name', None) or country.name
            english[country.name] = canonical
            official_name = getattr(country, 'official_name', None)
            if official_name:
                english.setdefault(official_name, canonical)
            english.setdefault(canonical, canonical)
        for country in pycountry.historic_countries:
            english.setdefault(country.name, country.name)

        aliases = load_yaml_file(ENGLISH_ALIASES_FILE) if ENGLISH_ALIASES_FILE.exists() else {}
        english.update({str(k): str(v) for k, v in aliases.items() if k and v})
        english.update({str(k): str(v) for k, v in country_substitutions.items() if k and v})
        self.english_country_names_lower = {k.lower(): v for k, v in english.items()}

        base_dir = self.__config_path.parent if self.__config_path else Path.cwd()
        self.country_files = []
        for file_name in config.get('country_files') or []:
            path = Path(file_name)
            self.country_files.append(path if path.is_absolute() else base_dir / path)

        self.extra_translations = {
            str(lang): dict(table) for lang, table in (config.get('extra_translations') or {}).items()
            if isinstance(table, dict)
        }

        cache_config = config.get('cache') or {}
        self.cache_enabled = bool(cache_config.get('enabled', True))
        self.cache_max_entries = int(cache_config.get('max_entries', DEFAULT_MAX_ENTRIES))

    def get_english_country_name(self, country_name: str) -> Optional[str]:
        """Canonical English name for an English country name or alias, or None."""
        if not country_name:
            return None
        return self.english_country_names_lower.get(country_name.strip().lower())
