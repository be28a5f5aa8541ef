from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Vector match result models.

One ReferenceOutcome is produced per reference table per comparison run.
Outcomes are built in two phases (score every reference, then stamp the
closest-match / overall result flags) and are immutable afterwards.
"""

__all__ = [
    "OverallResult",
    "ReferenceOutcome",
    "SegmentationStatus",
]


class SegmentationStatus(Enum):
    """How completely a reference's rows could be aligned to the query rows.

    - NO: no row pair was compared
    - PARTIAL: some, but fewer than the query's row count
    - YES: every query row had a counterpart
    """
    NO = "No"
    PARTIAL = "Partial"
    YES = "Yes"


class OverallResult(Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


@dataclass(frozen=True)
class ReferenceOutcome:
    """Final per-reference verdict of a vector match run.

    ``average_distance`` is None when no rows were compared. ``error`` is set
    only for references that could not be read at all.
    """
    reference_path: str
    rows_compared: int
    average_distance: float | None
    segmentation_status: SegmentationStatus
    vector_columns_present: bool
    is_closest_match: bool
    overall_result: OverallResult
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.overall_result is OverallResult.SUCCESS

    @property
    def is_usable(self) -> bool:
        return self.error is None
