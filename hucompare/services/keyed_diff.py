from __future__ import annotations

import logging

from ..models.diff_result import ComparisonResult, ValueDifference
from ..models.parsed_table import ParsedTable, Row
from .numeric import is_valid_tolerance, parse_number

"""Keyed diff engine.

Aligns two tables on their key column (column 0) and compares every other
column of rows present on both sides:

- both cells numeric: reported when |a - b| is strictly greater than tolerance
- otherwise: reported when the raw texts are not exactly equal (non-numeric)

Key ordering in every output list is the sorted order of the key strings, so
results do not depend on row order in the inputs.
"""

__all__ = [
    "KEY_COLUMN_INDEX",
    "compare_keyed",
    "compare_cells",
    "column_name",
]

KEY_COLUMN_INDEX = 0

logger = logging.getLogger(__name__)


def _key_map(table: ParsedTable) -> dict[str, Row]:
    rows: dict[str, Row] = {}
    for row in table.rows:
        key = row.key
        if key in rows:
            logger.debug(
                "duplicate key %r in %s (line %d overrides line %d)",
                key, table.source, row.line_number, rows[key].line_number,
            )
        rows[key] = row  # 重複キーは後勝ち
    return rows


def column_name(headers: tuple[str, ...], index: int) -> str:
    """Display name of column ``index``: the header text, or "Column i" if blank/absent."""
    if 0 <= index < len(headers) and headers[index] != "":
        return headers[index]
    return f"Column {index}"


def compare_cells(
    key: str, column: str, left: str, right: str, tolerance: float
) -> ValueDifference | None:
    """Compare one aligned cell pair; return a ValueDifference or None."""
    left_number = parse_number(left)
    right_number = parse_number(right)
    if left_number is not None and right_number is not None:
        delta = abs(left_number - right_number)
        if delta > tolerance:
            return ValueDifference(key=key, column=column, left=left, right=right, delta=delta)
        return None
    if left != right:
        return ValueDifference(key=key, column=column, left=left, right=right, delta=None)
    return None


def compare_keyed(first: ParsedTable, second: ParsedTable, tolerance: float) -> ComparisonResult:
    """Compare two tables row-by-row on the key column.

    Args:
        first: Table whose headers name the columns in the output
        second: Table compared against ``first``
        tolerance: Finite, non-negative numeric threshold

    Returns:
        ComparisonResult with every difference in key order, then column order

    Raises:
        ValueError: If tolerance is negative or not finite
    """
    if not is_valid_tolerance(tolerance):
        raise ValueError(f"tolerance must be a finite number >= 0, got {tolerance!r}")

    headers_match = first.headers == second.headers
    if not headers_match:
        logger.debug("header mismatch: %s vs %s", first.source, second.source)

    first_rows = _key_map(first)
    second_rows = _key_map(second)

    only_in_first: list[str] = []
    only_in_second: list[str] = []
    differences: list[ValueDifference] = []

    for key in sorted(first_rows.keys() | second_rows.keys()):
        left = first_rows.get(key)
        right = second_rows.get(key)
        if left is None:
            only_in_second.append(key)
            continue
        if right is None:
            only_in_first.append(key)
            continue

        column_count = min(len(left), len(right))
        for index in range(KEY_COLUMN_INDEX + 1, column_count):
            difference = compare_cells(
                key,
                column_name(first.headers, index),
                left.values[index],
                right.values[index],
                tolerance,
            )
            if difference is not None:
                differences.append(difference)

    logger.debug(
        "keyed diff: keys=%d/%d differences=%d", len(first_rows), len(second_rows), len(differences)
    )
    return ComparisonResult(
        first_headers=first.headers,
        second_headers=second.headers,
        headers_match=headers_match,
        first_row_count=len(first_rows),
        second_row_count=len(second_rows),
        only_in_first=tuple(only_in_first),
        only_in_second=tuple(only_in_second),
        differences=tuple(differences),
        tolerance=tolerance,
    )
