"""
Data models for place validation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

from place_history.models import TownValidity
from place_history.place_parser import join_place


@dataclass
class PlaceRecord:
    """
    One place occurrence to validate.

    Attributes:
        place: Place string or list of fragments.
        date: Date of the record (anything place_history.place_date.year_of accepts).
        obj_id: Identifier of the record holding the place (e.g. a GEDCOM xref).
        type: Kind of record or event (e.g. 'BIRT').
    """
    place: Union[str, Sequence[Optional[str]], None]
    date: Any = None
    obj_id: Optional[str] = None
    type: Optional[str] = None

    @property
    def place_str(self) -> str:
        return join_place(self.place)

    @classmethod
    def coerce(cls, value: Any) -> PlaceRecord:
        """Accept a PlaceRecord, a dict of its fields, a (place, date) tuple or a bare place."""
        if isinstance(value, PlaceRecord):
            return value
        if isinstance(value, dict):
            return cls(place=value.get('place'), date=value.get('date'),
                       obj_id=value.get('obj_id'), type=value.get('type'))
        if isinstance(value, tuple):
            return cls(*value)
        return cls(place=value)


Severity = Literal["info", "warning", "error"]


@dataclass
class PlaceIssue:
    """A problem found with one place occurrence."""
    issue_type: str
    severity: Severity
    message: str
    place: str
    obj_id: Optional[str] = None
    record_type: Optional[str] = None
    validity: Tuple[TownValidity, ...] = ()


@dataclass
class DuplicateCluster:
    """
    Distinct place strings that are probably spellings of the same place.

    Attributes:
        places: Member strings, most frequent first.
        counts: Occurrences of each member in the validated records.
    """
    places: List[str] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def preferred(self) -> Optional[str]:
        return self.places[0] if self.places else None


@dataclass
class ValidationReport:
    """
    Results of a validation run, grouped by kind of issue.

    The report is diagnostic only; records are never modified.
    """
    issues: List[PlaceIssue] = field(default_factory=list)
    duplicates: List[DuplicateCluster] = field(default_factory=list)
    records_checked: int = 0

    def add_issue(self, issue: PlaceIssue) -> None:
        self.issues.append(issue)

    def by_type(self, issue_type: str) -> List[PlaceIssue]:
        return [i for i in self.issues if i.issue_type == issue_type]

    @property
    def invalid(self) -> List[PlaceIssue]:
        return self.by_type('invalid_place')

    @property
    def not_found(self) -> List[PlaceIssue]:
        return self.by_type('place_not_found')

    @property
    def no_date(self) -> List[PlaceIssue]:
        return self.by_type('no_date')

    @property
    def formatting(self) -> List[PlaceIssue]:
        return [i for i in self.issues if i.issue_type.startswith('format_')]

    def summary(self) -> Dict[str, int]:
        """Counts per category."""
        return {
            'records_checked': self.records_checked,
            'invalid': len(self.invalid),
            'not_found': len(self.not_found),
            'no_date': len(self.no_date),
            'formatting': len(self.formatting),
            'duplicates': len(self.duplicates),
            'issues': len(self.issues),
        }
