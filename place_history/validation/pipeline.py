"""
Pipeline for running place checks.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import yaml

from place_history.validation.base import PlaceCheck, get_check_registry
from place_history.validation.model import PlaceRecord, ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"


@dataclass
class ValidationConfig:
    """
    Configuration for place validation.

    Attributes:
        checks: Dict of check_id -> settings ('enabled' plus check parameters)
        config_file: Path to YAML config file (optional)
    """
    checks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    config_file: Optional[Path] = None

    def __post_init__(self) -> None:
        """Load configuration from file if config_file is specified."""
        if self.config_file:
            self._load_from_file()

    def _load_from_file(self) -> None:
        """
        Load configuration from YAML file.

        Reads the 'validation' section from the YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid YAML.
        """
        path = Path(self.config_file)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing {path}: {e}")

        checks_config = (data.get('validation') or {}).get('checks') or {}
        for check_id, settings in checks_config.items():
            self.checks[check_id] = self._normalize_settings(settings)
        logger.info(f"Loaded validation config from {path}")

    @staticmethod
    def _normalize_settings(settings: Any) -> Dict[str, Any]:
        if isinstance(settings, bool):
            return {'enabled': settings}
        if isinstance(settings, dict):
            return dict(settings)
        return {}

    def is_enabled(self, check_id: str) -> bool:
        """
        Check if a check is enabled.

        Returns:
            True if enabled (default if not specified), False otherwise
        """
        return bool(self.checks.get(check_id, {}).get('enabled', True))

    def check_params(self, check_id: str) -> Dict[str, Any]:
        """Settings of a check other than 'enabled', passed to its constructor."""
        return {k: v for k, v in self.checks.get(check_id, {}).items() if k != 'enabled'}

    @classmethod
    def default(cls) -> ValidationConfig:
        """Configuration from the bundled config.yaml."""
        return cls(config_file=DEFAULT_CONFIG_FILE)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> ValidationConfig:
        return cls(config_file=yaml_path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValidationConfig:
        """
        Create configuration from dictionary.

        Args:
            data: Dictionary with a 'checks' key mapping check_id to settings
                (a dict, or a bool meaning enabled/disabled)

        Returns:
            ValidationConfig instance
        """
        checks = {k: cls._normalize_settings(v) for k, v in (data.get('checks') or {}).items()}
        return cls(checks=checks)


@dataclass
class ValidationPipeline:
    """
    Pipeline for running place checks on a collection of records.

    Attributes:
        checks: List of check instances to run
        config: Configuration for the pipeline
        app_hooks: Optional application hooks for progress reporting
    """
    checks: List[PlaceCheck] = field(default_factory=list)
    config: ValidationConfig = field(default_factory=ValidationConfig)
    app_hooks: Optional[Any] = field(default=None)

    def __post_init__(self) -> None:
        """Initialize checks from registry if none provided."""
        if not self.checks:
            self._load_checks_from_registry()

    def _load_checks_from_registry(self) -> None:
        """Instantiate every registered check with its configured settings."""
        registry = get_check_registry()
        for check_id, check_cls in registry.items():
            enabled = self.config.is_enabled(check_id)
            params = self.config.check_params(check_id)
            try:
                check = check_cls(enabled=enabled, app_hooks=self.app_hooks, **params)
                self.checks.append(check)
                logger.debug(f"Loaded check: {check_id} (enabled={enabled})")
            except Exception as e:
                logger.error(f"Failed to load check {check_id}: {e}")

    def run(self, records: Iterable[Any], resolver: Any) -> ValidationReport:
        """
        Run all enabled checks on the records.

        Args:
            records: PlaceRecord objects (or values PlaceRecord.coerce accepts)
            resolver: TownResolver used for gazetteer lookups

        Returns:
            ValidationReport with every issue found
        """
        report = ValidationReport()
        record_list = [PlaceRecord.coerce(r) for r in records]
        report.records_checked = len(record_list)

        logger.debug(f"Validating {len(record_list)} place records")

        enabled_checks = [c for c in self.checks if c.enabled]
        total_checks = len(enabled_checks)
        self._report_step(info="Validating places", target=total_checks, reset_counter=True, plus_step=0)

        for check_num, check in enumerate(enabled_checks, start=1):
            if self._stop_requested("Place validation stopped by user"):
                logger.info(f"Validation stopped after {check_num - 1} checks")
                return report
            try:
                logger.debug(f"Running check: {check.check_id}")
                check.run(record_list, resolver, report, check_num, total_checks)
                self._report_step(plus_step=1)
                self._update_key_value("place_issues", len(report.issues))
            except Exception as e:
                logger.error(f"Error in check {check.check_id}: {e}", exc_info=True)

        return report

    def _report_step(self, info: str = "", target: Optional[int] = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        if self.app_hooks and callable(getattr(self.app_hooks, "report_step", None)):
            self.app_hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
        else:
            logger.debug(info)

    def _update_key_value(self, key: str, value: Any) -> None:
        if self.app_hooks and callable(getattr(self.app_hooks, "update_key_value", None)):
            self.app_hooks.update_key_value(key, value)

    def _stop_requested(self, logger_stop_message: str = "Stop requested by user") -> bool:
        if self.app_hooks and callable(getattr(self.app_hooks, "stop_requested", None)):
            if self.app_hooks.stop_requested():
                if logger_stop_message:
                    logger.info(logger_stop_message)
                return True
        return False
