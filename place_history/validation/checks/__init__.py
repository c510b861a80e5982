"""
Built-in place checks.

Import checks here to automatically register them.
"""

from place_history.validation.checks.historical import HistoricalCheck
from place_history.validation.checks.formatting import FormattingCheck
from place_history.validation.checks.duplicates import DuplicatesCheck

__all__ = [
    'HistoricalCheck',
    'FormattingCheck',
    'DuplicatesCheck',
]
