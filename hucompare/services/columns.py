from __future__ import annotations

from collections.abc import Sequence

"""Logical column resolution for Hu moment vectors.

Maps the fixed, ordered set of logical names hu1..hu7 onto zero-based column
indexes of a header row. A header that lacks any of the names resolves to
None rather than raising: such a table simply cannot take part in vector
comparison.
"""

__all__ = [
    "HU_COLUMNS",
    "resolve_columns",
    "missing_columns",
]

HU_COLUMNS: tuple[str, ...] = ("hu1", "hu2", "hu3", "hu4", "hu5", "hu6", "hu7")


def _scan(headers: Sequence[str], names: Sequence[str]) -> dict[str, int]:
    wanted = {name.lower() for name in names}
    found: dict[str, int] = {}
    # 左→右に走査し、同名列は後勝ち
    for index, header in enumerate(headers):
        normalized = header.strip().lower()
        if normalized in wanted:
            found[normalized] = index
    return found


def resolve_columns(
    headers: Sequence[str], names: Sequence[str] = HU_COLUMNS
) -> tuple[int, ...] | None:
    """Resolve logical names to header indexes.

    Matching trims each header cell and ignores case. When a name occurs in
    several columns the last one wins. Headers outside ``names`` are ignored.

    Returns:
        One index per name, in ``names`` order, or None if any name is absent.
    """
    found = _scan(headers, names)
    indexes = []
    for name in names:
        index = found.get(name.lower())
        if index is None:
            return None
        indexes.append(index)
    return tuple(indexes)


def missing_columns(headers: Sequence[str], names: Sequence[str] = HU_COLUMNS) -> list[str]:
    """Return the logical names that have no matching header, in ``names`` order."""
    found = _scan(headers, names)
    return [name for name in names if name.lower() not in found]
