"""
Base classes for place validation checks.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Type

from place_history.validation.model import PlaceRecord, ValidationReport

logger = logging.getLogger(__name__)

_CHECK_REGISTRY: Dict[str, Type['PlaceCheck']] = {}


def register_check(cls: Type['PlaceCheck']) -> Type['PlaceCheck']:
    """Make a check class available to ValidationPipeline under its check_id."""
    if getattr(cls, 'check_id', None):
        _CHECK_REGISTRY[cls.check_id] = cls
        logger.debug(f"Registered place check: {cls.check_id}")
    else:
        logger.warning(f"Check {cls.__name__} missing 'check_id' attribute, not registered")
    return cls


def get_check_registry() -> Dict[str, Type['PlaceCheck']]:
    """Registered checks by check_id (a copy)."""
    return _CHECK_REGISTRY.copy()


@dataclass
class PlaceCheck(ABC):
    """
    Base class for place checks.

    Checks look at every record and add issues to the report; they never
    change the records.

    Attributes:
        check_id: Unique identifier for this check
        enabled: Whether this check is enabled (can be set via config)
        app_hooks: Optional application hooks for progress reporting
    """
    check_id: str = ""
    enabled: bool = True
    app_hooks: Any = None

    @abstractmethod
    def run(self, records: List[PlaceRecord], resolver: Any, report: ValidationReport,
            check_num: int = None, total_checks: int = None) -> None:
        """
        Check the records and add findings to the report.

        Args:
            records: Records to check
            resolver: TownResolver used for gazetteer lookups
            report: Report to add issues to
        """
        pass

    def __post_init__(self):
        if not self.check_id:
            raise ValueError(f"{self.__class__.__name__} must define check_id")

    def _report_step(self, info: str = "", target: int = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        hooks = self.app_hooks
        if hooks is not None and callable(getattr(hooks, "report_step", None)):
            hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
        elif info:
            logger.debug(info)

    def _stop_requested(self, message: str = "") -> bool:
        hooks = self.app_hooks
        stop = hooks is not None and callable(getattr(hooks, "stop_requested", None)) and hooks.stop_requested()
        if stop and message:
            logger.debug(message)
        return bool(stop)
