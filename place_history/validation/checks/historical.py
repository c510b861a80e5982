"""
Historical validity check: does the place match the gazetteer for the record's year?
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, List

from place_history.models import Response
from place_history.resolver import format_fact
from place_history.validation.base import PlaceCheck, register_check
from place_history.validation.model import PlaceIssue, PlaceRecord, ValidationReport

logger = logging.getLogger(__name__)


@register_check
@dataclass
class HistoricalCheck(PlaceCheck):
    """
    Resolves every (place, date) and reports disagreements with the gazetteer.

    Issues reported:
        - invalid_place (warning): county/country/town differ from the
          gazetteer for that year; suggestions attached
        - place_not_found (info): town or year not covered by any gazetteer
        - no_date (info): record has no date, so the place cannot be checked
    """
    check_id: str = "historical"
    report_not_found: bool = True
    report_no_date: bool = True

    def run(self, records: List[PlaceRecord], resolver: Any, report: ValidationReport,
            check_num: int = None, total_checks: int = None) -> None:
        prefix = f"Validation ({check_num}/{total_checks}): " if check_num and total_checks else "Validation: "
        self._report_step(info=f"{prefix}Checking places against history", target=len(records),
                          reset_counter=True, plus_step=0)

        for idx, record in enumerate(records):
            if idx % 100 == 0:
                if self._stop_requested("Historical check stopped"):
                    break
                self._report_step(plus_step=100 if idx else 0)

            place = record.place_str
            if not place:
                continue
            validities = resolver.get_town_validity(record.place, record.date, record.obj_id, record.type)
            responses = [v.response for v in validities]

            if Response.VALID in responses:
                continue
            if Response.INVALID in responses:
                invalid = tuple(v for v in validities if v.response == Response.INVALID)
                suggestions = sorted({format_fact(v.valid_fact) for v in invalid})
                report.add_issue(PlaceIssue(
                    issue_type='invalid_place',
                    severity='warning',
                    message=f"'{place}' does not match the gazetteer for {invalid[0].year}: "
                            f"expected {' or '.join(suggestions)}",
                    place=place,
                    obj_id=record.obj_id,
                    record_type=record.type,
                    validity=invalid,
                ))
            elif Response.NO_DATE_SET in responses:
                if self.report_no_date:
                    report.add_issue(PlaceIssue(
                        issue_type='no_date',
                        severity='info',
                        message=f"'{place}' has no date and cannot be checked",
                        place=place,
                        obj_id=record.obj_id,
                        record_type=record.type,
                        validity=tuple(validities),
                    ))
            elif self.report_not_found:
                report.add_issue(PlaceIssue(
                    issue_type='place_not_found',
                    severity='info',
                    message=f"'{place}' is not covered by any gazetteer",
                    place=place,
                    obj_id=record.obj_id,
                    record_type=record.type,
                ))
