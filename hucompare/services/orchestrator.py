from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..logging.error_log import (
    EMPTY_INPUT,
    READ_FAILURE,
    ROW_WIDTH,
    ErrorLogBuffer,
    ErrorRecord,
)
from ..models.diff_result import ComparisonResult
from ..models.match_result import ReferenceOutcome
from ..models.parsed_table import ParsedTable
from ..tables.reader import EmptyInputError, RowWidthError, TableReadError, read_table
from .keyed_diff import compare_keyed
from .progress import ProgressTracker
from .vector_match import (
    ScoredReference,
    extract_vectors,
    finalize,
    score_reference,
    unusable_reference,
)

logger = logging.getLogger(__name__)

"""Run orchestration for the diff and match tools.

File I/O happens here; the engines only ever see parsed tables. This keeps
compare_keyed / compare_vectors pure so any front end (CLI, a desktop
window, a notebook) can call them from a worker thread and render the
result objects itself.

- run_diff: both files are required; any read failure aborts the run
- run_match: a failing query aborts the run, a failing reference becomes an
  unusable outcome and the rest of the batch is still scored
"""


class ComparisonError(Exception):
    """Fatal error that prevents a comparison run from producing a result."""
    pass


@dataclass(frozen=True)
class MatchRun:
    """Result of one match run over a query file and its references."""
    query_source: str
    query_vector_count: int
    query_columns_present: bool
    outcomes: tuple[ReferenceOutcome, ...]

    @property
    def best_outcome(self) -> ReferenceOutcome | None:
        return next((o for o in self.outcomes if o.is_closest_match), None)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_success)

    @property
    def unusable_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.is_usable)


def _read_required(path: Path, *, strict: bool, encoding: str) -> ParsedTable:
    try:
        return read_table(path, strict=strict, encoding=encoding)
    except (OSError, TableReadError) as e:
        raise ComparisonError(f"Failed to read input file {path}: {e}") from e


def run_diff(
    first_path: Path, second_path: Path, tolerance: float, *, encoding: str = "utf-8"
) -> ComparisonResult:
    """Read two tables strictly and compare them on the key column.

    Raises:
        ComparisonError: If either file cannot be read or parsed
    """
    first = _read_required(first_path, strict=True, encoding=encoding)
    second = _read_required(second_path, strict=True, encoding=encoding)
    logger.debug(
        "diff: %s (%d rows) vs %s (%d rows)",
        first_path, first.row_count, second_path, second.row_count,
    )
    return compare_keyed(first, second, tolerance)


def _error_record(path: Path, error: Exception) -> ErrorRecord:
    if isinstance(error, EmptyInputError):
        return ErrorRecord.create(str(path), -1, EMPTY_INPUT, str(error))
    if isinstance(error, RowWidthError):
        return ErrorRecord.create(str(path), error.line_number, ROW_WIDTH, str(error))
    return ErrorRecord.create(str(path), -1, READ_FAILURE, str(error))


def run_match(
    query_path: Path,
    reference_paths: Sequence[Path],
    *,
    encoding: str = "utf-8",
    error_log: ErrorLogBuffer | None = None,
) -> MatchRun:
    """Score every reference file against the query file.

    Args:
        query_path: Table whose rows are matched
        reference_paths: Candidate tables, in the order used for tie-breaking
        encoding: Text encoding of all input files
        error_log: Optional buffer that receives one record per unusable reference

    Raises:
        ComparisonError: No references given, or the query cannot be read
    """
    if not reference_paths:
        raise ComparisonError("at least one reference file is required")

    query = _read_required(query_path, strict=False, encoding=encoding)
    query_vectors = extract_vectors(query)
    if not query_vectors.columns_present:
        logger.warning(f"query file {query_path.name} lacks one or more Hu columns (Hu1-Hu7)")
    elif len(query_vectors) == 0:
        logger.warning(f"query file {query_path.name} contains no rows with Hu1-Hu7 values")

    scored: list[ScoredReference] = []
    with ProgressTracker(len(reference_paths)) as progress:
        for path in reference_paths:
            progress.start_file(path)
            try:
                reference = read_table(path, strict=False, encoding=encoding)
            except (OSError, TableReadError) as e:
                # 参照ファイル単位の失敗: バッチ全体は継続
                logger.warning(f"reference {path.name} unusable: {e}")
                if error_log is not None:
                    error_log.append(_error_record(path, e))
                scored.append(unusable_reference(str(path), str(e)))
                progress.finish_file(success=False)
                continue
            item = score_reference(query_vectors, reference)
            if not item.vector_columns_present:
                logger.info(f"reference {path.name} lacks one or more Hu columns (Hu1-Hu7)")
            scored.append(item)
            progress.finish_file(success=True)

    return MatchRun(
        query_source=str(query_path),
        query_vector_count=len(query_vectors),
        query_columns_present=query_vectors.columns_present,
        outcomes=tuple(finalize(scored)),
    )
