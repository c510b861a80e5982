from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional
import logging

from place_history.app_hooks import AppHooks
from place_history.resolver import TownResolver
from place_history.validation.model import ValidationReport
from place_history.validation.pipeline import ValidationConfig, ValidationPipeline

logger = logging.getLogger(__name__)


class PlaceValidator:
    """
    High-level interface for validating the places of a record collection.

    This is a convenience wrapper around ValidationPipeline.

    Example:
        validator = PlaceValidator(resolver, records=[
            PlaceRecord("Kispest, Pest megye, Hungary", 1900, obj_id="@I1@", type="BIRT"),
        ])
        report = validator.report
        print(report.summary())
    """

    def __init__(
        self,
        resolver: TownResolver,
        records: Optional[Iterable[Any]] = None,
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[Path] = None,
        app_hooks: Optional[AppHooks] = None
    ) -> None:
        """
        Initialize place validation.

        Args:
            resolver: TownResolver used for gazetteer lookups
            records: Optional records to validate straight away
            config_dict: Dictionary to configure checks (e.g., {'checks': {'duplicates': False}})
            config_file: Path to YAML config file
            app_hooks: Optional application hooks for progress reporting
        """
        self.resolver = resolver
        self.app_hooks = app_hooks

        if config_dict:
            self.config = ValidationConfig.from_dict(config_dict)
        elif config_file:
            self.config = ValidationConfig(config_file=config_file)
        else:
            self.config = ValidationConfig.default()

        self.pipeline = ValidationPipeline(config=self.config, app_hooks=app_hooks)

        self._report: Optional[ValidationReport] = None
        self.records = list(records) if records else []
        if self.records:
            self._report = self.validate()

    def validate(self, records: Optional[Iterable[Any]] = None) -> ValidationReport:
        """
        Validate the given records (or the records given at construction).

        Returns:
            ValidationReport with every issue found
        """
        if records is not None:
            self.records = list(records)
        logger.info(f"Validating {len(self.records)} place records")
        self._report = self.pipeline.run(self.records, self.resolver)
        return self._report

    @property
    def report(self) -> Optional[ValidationReport]:
        """Get the report of the last validation run."""
        return self._report
