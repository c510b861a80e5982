"""
Formatting check: typing mistakes in place strings.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
import logging
from typing import Any, List, Tuple

from place_history.validation.base import PlaceCheck, register_check
from place_history.validation.model import PlaceIssue, PlaceRecord, ValidationReport

logger = logging.getLogger(__name__)

DOUBLE_SPACE_RE = re.compile(r"\S {2,}\S")
DOUBLE_COMMA_RE = re.compile(r",\s*,")
SPACE_BEFORE_COMMA_RE = re.compile(r"\s+,")
NO_SPACE_AFTER_COMMA_RE = re.compile(r",(?=[^\s,])")


@register_check
@dataclass
class FormattingCheck(PlaceCheck):
    """
    Finds formatting mistakes in place strings.

    Issues reported (all severity 'info'):
        - format_double_space: two or more spaces between words
        - format_double_comma: empty part between commas
        - format_whitespace: leading/trailing space, space before a comma,
          missing space after a comma
        - format_missing_parts: fewer parts than town, county, country
        - format_capitalization: part starting in lower case, all-caps
          word, capital letter inside a word
    """
    check_id: str = "formatting"
    min_parts: int = 3

    def run(self, records: List[PlaceRecord], resolver: Any, report: ValidationReport,
            check_num: int = None, total_checks: int = None) -> None:
        prefix = f"Validation ({check_num}/{total_checks}): " if check_num and total_checks else "Validation: "
        self._report_step(info=f"{prefix}Checking place formatting", target=len(records),
                          reset_counter=True, plus_step=0)

        checked = {}
        for idx, record in enumerate(records):
            if idx % 100 == 0:
                if self._stop_requested("Formatting check stopped"):
                    break
                self._report_step(plus_step=100 if idx else 0)

            text = record.place if isinstance(record.place, str) else record.place_str
            if not text or not text.strip():
                continue
            if text not in checked:
                checked[text] = self.find_problems(text)
            for issue_type, message in checked[text]:
                report.add_issue(PlaceIssue(
                    issue_type=issue_type,
                    severity='info',
                    message=f"'{text}': {message}",
                    place=text,
                    obj_id=record.obj_id,
                    record_type=record.type,
                ))

    def find_problems(self, text: str) -> List[Tuple[str, str]]:
        """
        Formatting problems of one place string.

        Returns:
            List[Tuple[str, str]]: (issue_type, message) pairs.
        """
        problems = []
        if DOUBLE_SPACE_RE.search(text):
            problems.append(('format_double_space', 'double space'))
        if DOUBLE_COMMA_RE.search(text):
            problems.append(('format_double_comma', 'double comma'))
        if text != text.strip():
            problems.append(('format_whitespace', 'leading or trailing whitespace'))
        if SPACE_BEFORE_COMMA_RE.search(text):
            problems.append(('format_whitespace', 'space before comma'))
        if NO_SPACE_AFTER_COMMA_RE.search(text):
            problems.append(('format_whitespace', 'missing space after comma'))

        parts = [p.strip() for p in text.split(',') if p.strip()]
        if len(parts) < self.min_parts:
            problems.append(('format_missing_parts', f"only {len(parts)} part(s), county or country missing"))

        for part in parts:
            problem = self._capitalization_problem(part)
            if problem:
                problems.append(('format_capitalization', f"'{part}' {problem}"))
        return problems

    @staticmethod
    def _capitalization_problem(part: str) -> str:
        first_letter = next((c for c in part if c.isalpha()), None)
        if first_letter is not None and first_letter.islower():
            return 'starts in lower case'
        for word in part.split():
            letters = [c for c in word if c.isalpha()]
            if len(letters) > 3 and all(c.isupper() for c in letters):
                return 'is written in capitals'
            for previous, current in zip(word, word[1:]):
                if previous.isalpha() and previous.islower() and current.isupper():
                    return 'has a capital letter inside a word'
        return ''
