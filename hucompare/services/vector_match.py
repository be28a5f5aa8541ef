from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from ..models.match_result import OverallResult, ReferenceOutcome, SegmentationStatus
from ..models.parsed_table import ParsedTable
from .columns import HU_COLUMNS, missing_columns, resolve_columns
from .numeric import parse_number

"""Vector match engine.

Every table (query and references) is reduced to an (n, 7) array of Hu
moment vectors. Each reference is scored against the query by index-aligned
rows (no key matching): the mean of the per-row Euclidean distances over
min(query rows, reference rows) rows.

Scoring and verdicts are two explicit phases:

1. score_reference / unusable_reference build one ScoredReference each
2. finalize selects the closest reference by index and stamps
   is_closest_match / overall_result onto new ReferenceOutcome records
"""

__all__ = [
    "VECTOR_SIZE",
    "VectorSet",
    "ScoredReference",
    "extract_vectors",
    "euclidean_distance",
    "average_distance",
    "segmentation_status",
    "score_reference",
    "unusable_reference",
    "select_best",
    "finalize",
    "compare_vectors",
]

VECTOR_SIZE = len(HU_COLUMNS)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VectorSet:
    """Numeric vectors extracted from one table.

    ``columns_present`` is False when the header lacks any of hu1..hu7; the
    set is then always empty.
    """
    vectors: np.ndarray  # shape (n, VECTOR_SIZE)
    columns_present: bool

    def __len__(self) -> int:
        return int(self.vectors.shape[0])


@dataclass(frozen=True)
class ScoredReference:
    """Phase-1 score of one reference, before best-match selection."""
    reference_path: str
    rows_compared: int
    average_distance: float | None
    segmentation_status: SegmentationStatus
    vector_columns_present: bool
    error: str | None = None


def _empty_vectors() -> np.ndarray:
    return np.empty((0, VECTOR_SIZE), dtype=float)


def extract_vectors(table: ParsedTable) -> VectorSet:
    """Extract one 7-element vector per data row.

    A row is kept only when all seven resolved cells exist and parse as real
    numbers; any other row is dropped on its own without affecting the rest
    of the table.
    """
    indexes = resolve_columns(table.headers)
    if indexes is None:
        logger.debug(
            "%s: missing vector columns %s", table.source, missing_columns(table.headers)
        )
        return VectorSet(vectors=_empty_vectors(), columns_present=False)

    frame = table.to_frame()
    if frame.empty:
        return VectorSet(vectors=_empty_vectors(), columns_present=True)

    # 列幅が足りない行は NaN 埋め -> 数値化失敗として行ごと除外
    cells = frame.reindex(columns=list(indexes))
    valid = cells.map(lambda cell: parse_number(cell) is not None).all(axis=1)
    if not valid.all():
        logger.debug(
            "%s: dropped %d row(s) without numeric Hu values (lines %s)",
            table.source, int((~valid).sum()), list(cells.index[~valid]),
        )
    kept = cells.loc[valid].map(parse_number)
    vectors = kept.to_numpy(dtype=float).reshape(-1, VECTOR_SIZE)
    return VectorSet(vectors=vectors, columns_present=True)


def euclidean_distance(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Euclidean distance between two vectors of exactly VECTOR_SIZE elements."""
    left = np.asarray(a, dtype=float)
    right = np.asarray(b, dtype=float)
    if left.shape != (VECTOR_SIZE,) or right.shape != (VECTOR_SIZE,):
        raise ValueError(
            f"vectors must have {VECTOR_SIZE} elements, got {left.shape} and {right.shape}"
        )
    return float(np.sqrt(np.sum((left - right) ** 2)))


def average_distance(query: np.ndarray, reference: np.ndarray) -> tuple[int, float | None]:
    """Mean per-row distance over index-aligned rows.

    Returns:
        (rows_compared, average) where average is None when no rows align
    """
    rows_compared = min(len(query), len(reference))
    if rows_compared == 0:
        return 0, None
    deltas = query[:rows_compared] - reference[:rows_compared]
    distances = np.sqrt(np.sum(deltas ** 2, axis=1))
    return rows_compared, float(np.mean(distances))


def segmentation_status(rows_compared: int, query_count: int) -> SegmentationStatus:
    if rows_compared == 0:
        return SegmentationStatus.NO
    if rows_compared == query_count:
        return SegmentationStatus.YES
    return SegmentationStatus.PARTIAL


def score_reference(query: VectorSet, reference: ParsedTable) -> ScoredReference:
    """Phase 1: score one parsed reference table against the query vectors."""
    reference_vectors = extract_vectors(reference)
    rows_compared, average = average_distance(query.vectors, reference_vectors.vectors)
    logger.debug(
        "%s: vectors=%d rows_compared=%d average=%s",
        reference.source, len(reference_vectors), rows_compared, average,
    )
    return ScoredReference(
        reference_path=reference.source,
        rows_compared=rows_compared,
        average_distance=average,
        segmentation_status=segmentation_status(rows_compared, len(query)),
        vector_columns_present=reference_vectors.columns_present,
    )


def unusable_reference(reference_path: str, error: str) -> ScoredReference:
    """Phase 1 placeholder for a reference that could not be read or parsed."""
    return ScoredReference(
        reference_path=reference_path,
        rows_compared=0,
        average_distance=None,
        segmentation_status=SegmentationStatus.NO,
        vector_columns_present=False,
        error=error,
    )


def select_best(scored: Sequence[ScoredReference]) -> int | None:
    """Index of the strictly smallest finite average distance.

    Ties keep the earliest reference. References without a defined (or with a
    non-finite) average are not candidates. None when there is no candidate.
    """
    best_index: int | None = None
    best_distance = math.inf
    for index, item in enumerate(scored):
        distance = item.average_distance
        if distance is None or not math.isfinite(distance):
            continue
        if best_index is None or distance < best_distance:
            best_index = index
            best_distance = distance
    return best_index


def finalize(scored: Sequence[ScoredReference]) -> list[ReferenceOutcome]:
    """Phase 2: stamp closest-match and overall result onto final outcomes."""
    best_index = select_best(scored)
    outcomes: list[ReferenceOutcome] = []
    for index, item in enumerate(scored):
        is_closest = index == best_index
        success = (
            is_closest
            and item.segmentation_status is not SegmentationStatus.NO
            and item.vector_columns_present
        )
        outcomes.append(
            ReferenceOutcome(
                reference_path=item.reference_path,
                rows_compared=item.rows_compared,
                average_distance=item.average_distance,
                segmentation_status=item.segmentation_status,
                vector_columns_present=item.vector_columns_present,
                is_closest_match=is_closest,
                overall_result=OverallResult.SUCCESS if success else OverallResult.FAILURE,
                error=item.error,
            )
        )
    return outcomes


def compare_vectors(query: ParsedTable, references: Iterable[ParsedTable]) -> list[ReferenceOutcome]:
    """Score every reference against the query and return one outcome each.

    Outcomes keep the order of ``references``.
    """
    query_vectors = extract_vectors(query)
    if not query_vectors.columns_present:
        logger.warning("query %s lacks Hu columns %s", query.source, missing_columns(query.headers))
    scored = [score_reference(query_vectors, reference) for reference in references]
    return finalize(scored)
