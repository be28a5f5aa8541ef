from __future__ import annotations

from pathlib import Path

from ..models.parsed_table import ParsedTable, Row

"""Delimited table reader.

- 1行目をヘッダとして扱い、2行目以降をデータ行とする。
- Fields are split on ',' only: no quoting, no escaping, and a trailing comma
  yields a trailing empty field. Exports with embedded commas or quotes are
  not supported.
- All-whitespace lines after the header are skipped but still advance the
  physical line number used in error messages.

Strict mode (keyed diff): cells are kept verbatim and every row must have
exactly as many fields as the header. Lenient mode (vector match): cells are
trimmed and rows of any width are accepted; bad rows are dealt with later,
one row at a time.
"""

__all__ = [
    "TableReadError",
    "EmptyInputError",
    "RowWidthError",
    "parse_table",
    "read_table",
    "split_line",
]

DELIMITER = ","


class TableReadError(Exception):
    """Base error for tables that cannot be read or parsed."""


class EmptyInputError(TableReadError):
    """Raised when the input has no header line."""

    def __init__(self, source: str) -> None:
        super().__init__(f'File "{source}" is empty.')
        self.source = source


class RowWidthError(TableReadError):
    """Raised in strict mode when a row's field count differs from the header's."""

    def __init__(self, source: str, line_number: int, found: int, expected: int) -> None:
        super().__init__(
            f'Row {line_number} in "{source}" has {found} columns but header has {expected}.'
        )
        self.source = source
        self.line_number = line_number
        self.found = found
        self.expected = expected


def split_line(line: str) -> list[str]:
    """Split one line on the delimiter, keeping empty trailing fields."""
    return line.split(DELIMITER)


def _split_lines(text: str) -> list[str]:
    # \r\n / \r / \n を行区切りとして扱う (末尾改行は空行を生成しない)
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_table(text: str, source: str = "<memory>", *, strict: bool = True) -> ParsedTable:
    """Parse raw delimited text into a ParsedTable.

    Parameters
    ----------
    text: raw file content
    source: path or label used in error messages and reports
    strict: True for the keyed diff path, False for the vector match path

    Raises
    ------
    EmptyInputError: no header line
    RowWidthError: strict mode only, row width differs from header width
    """
    # ヘッダ行が無いのは空ファイルのみ ("\n" は空ヘッダ 1 列)
    if text == "":
        raise EmptyInputError(source)
    lines = _split_lines(text)

    headers = tuple(split_line(lines[0]))
    rows: list[Row] = []
    for line_number, line in enumerate(lines[1:], start=2):
        if line.strip() == "":
            continue
        cells = split_line(line)
        if strict:
            if len(cells) != len(headers):
                raise RowWidthError(source, line_number, len(cells), len(headers))
        else:
            cells = [c.strip() for c in cells]
        rows.append(Row(values=tuple(cells), line_number=line_number))

    return ParsedTable(headers=headers, rows=tuple(rows), source=source)


def read_table(path: Path | str, *, strict: bool = True, encoding: str = "utf-8") -> ParsedTable:
    """Read a delimited file from disk and parse it.

    OSError (missing file, permission) propagates unchanged; undecodable
    content and unknown codec names are reported as TableReadError.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        raise TableReadError(f'File "{path}" is not valid {encoding} text: {e}') from e
    except LookupError as e:
        raise TableReadError(f"unknown encoding: {encoding}") from e
    return parse_table(text, str(path), strict=strict)
