from __future__ import annotations

from dataclasses import dataclass

"""Keyed diff result models.

ValueDifference is produced for an aligned cell pair that differs beyond the
tolerance (numeric) or differs at all (non-numeric). ComparisonResult
aggregates one diff run between two tables.
"""

__all__ = [
    "ComparisonResult",
    "ValueDifference",
]


@dataclass(frozen=True)
class ValueDifference:
    """A single cell-level difference between two key-aligned rows.

    Attributes:
        key: Key column value shared by both rows
        column: Display name of the compared column
        left: Raw cell text from the first table
        right: Raw cell text from the second table
        delta: Absolute numeric difference, or None when either cell is non-numeric
    """
    key: str
    column: str
    left: str
    right: str
    delta: float | None = None

    @property
    def is_numeric(self) -> bool:
        return self.delta is not None


@dataclass(frozen=True)
class ComparisonResult:
    """Aggregated outcome of comparing two tables keyed by column 0.

    Row counts are distinct-key counts (duplicate keys collapse, last wins).
    ``differences`` always holds every difference found; display truncation
    is a reporting concern.
    """
    first_headers: tuple[str, ...]
    second_headers: tuple[str, ...]
    headers_match: bool
    first_row_count: int
    second_row_count: int
    only_in_first: tuple[str, ...]
    only_in_second: tuple[str, ...]
    differences: tuple[ValueDifference, ...]
    tolerance: float

    @property
    def difference_count(self) -> int:
        return len(self.differences)
