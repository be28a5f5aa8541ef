from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

"""ParsedTable / Row models for the Hu moment comparison toolkit.

A ParsedTable is the in-memory form of one comma-delimited export: the header
cells in file order plus every non-blank data row as raw, untyped text.
Tables are fully materialized and never mutated after parsing.
"""

__all__ = [
    "ParsedTable",
    "Row",
]


@dataclass(frozen=True)
class Row:
    """One data row of a parsed table.

    ``line_number`` is the physical 1-based line in the source (header = 1),
    so skipped blank lines still count.
    """
    values: tuple[str, ...]
    line_number: int

    def __len__(self) -> int:
        return len(self.values)

    @property
    def key(self) -> str:
        """Value of the key column (column 0)."""
        return self.values[0]


@dataclass(frozen=True)
class ParsedTable:
    """Header + rows of a single delimited table.

    Headers are order-significant and may contain duplicates or blank cells.
    """
    headers: tuple[str, ...]
    rows: tuple[Row, ...]
    source: str = "<memory>"  # ファイルパス (レポート表示用)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_frame(self) -> pd.DataFrame:
        """Return the raw cell text as a DataFrame indexed by source line number.

        Columns are positional (0..width-1). Rows shorter than the widest row
        are padded with missing values; nothing is converted to numbers here.
        """
        frame = pd.DataFrame(
            [list(row.values) for row in self.rows],
            index=[row.line_number for row in self.rows],
            dtype=object,
        )
        return frame
