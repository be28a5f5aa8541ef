"""Domain models for the Hu moment comparison toolkit.

Parsed tables are immutable once read; result models are frozen dataclasses
built in a single pass by the services package.
"""

from .diff_result import ComparisonResult, ValueDifference
from .match_result import OverallResult, ReferenceOutcome, SegmentationStatus
from .parsed_table import ParsedTable, Row

__all__ = [
    # Table models
    "ParsedTable",
    "Row",
    # Keyed diff results
    "ComparisonResult",
    "ValueDifference",
    # Vector match results
    "OverallResult",
    "ReferenceOutcome",
    "SegmentationStatus",
]
