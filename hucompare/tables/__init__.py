from .reader import EmptyInputError, RowWidthError, TableReadError, parse_table, read_table

__all__ = [
    "EmptyInputError",
    "RowWidthError",
    "TableReadError",
    "parse_table",
    "read_table",
]
