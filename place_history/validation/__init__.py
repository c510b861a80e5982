"""
Validation module for the places of a whole record collection.

Runs every place occurrence through the resolver and adds checks that look
at the collection as a whole, such as near-duplicate spellings.

Main components:
    - PlaceCheck: Base class for creating custom checks
    - ValidationPipeline: Orchestrates running multiple checks
    - PlaceValidator: High-level wrapper
    - Built-in checks: historical validity, formatting, duplicates
"""

from place_history.validation.base import PlaceCheck, register_check, get_check_registry
from place_history.validation.pipeline import ValidationPipeline, ValidationConfig
from place_history.validation.model import PlaceRecord, PlaceIssue, DuplicateCluster, ValidationReport
from place_history.validation.validator import PlaceValidator

# Import checks to ensure they're registered
from place_history.validation import checks

__all__ = [
    'PlaceCheck',
    'register_check',
    'get_check_registry',
    'ValidationPipeline',
    'ValidationConfig',
    'PlaceValidator',
    'PlaceRecord',
    'PlaceIssue',
    'DuplicateCluster',
    'ValidationReport',
    'checks',
]
