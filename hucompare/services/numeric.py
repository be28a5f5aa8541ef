from __future__ import annotations

import math
from typing import Any

"""Cell text -> real number conversion shared by the diff and match engines."""

__all__ = [
    "is_valid_tolerance",
    "parse_number",
]


def parse_number(text: Any) -> float | None:
    """Parse a cell as a real number, returning None when it is not one.

    Surrounding whitespace is tolerated and the ``nan`` / ``inf`` / ``infinity``
    literals count as real numbers. Python's digit-group underscores
    (``1_000``) are rejected so that only plain decimal notation is accepted.
    Missing cells (None / NaN padding from a DataFrame) are not numbers.
    """
    if not isinstance(text, str):
        return None
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def is_valid_tolerance(value: float) -> bool:
    return math.isfinite(value) and value >= 0
