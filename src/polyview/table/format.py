"""Column resolution and cell formatting shared by the table renderers."""

from collections.abc import Mapping, Sequence
from typing import Any

from ..iur.elements import Column, Table
from .sort import get_value, sort_data


def row_keys(row: Any) -> list[str]:
    if isinstance(row, Mapping):
        return [str(k) for k in row]
    if isinstance(row, (list, tuple)):
        return [str(item[0]) for item in row if isinstance(item, (list, tuple)) and len(item) == 2]
    return []


def effective_columns(table: Table) -> list[Column]:
    """Declared columns, or one column per key of the first row."""
    if table.columns:
        return list(table.columns)
    if not table.data:
        return []
    return [Column(key=key, header=key.replace("_", " ").capitalize()) for key in row_keys(table.data[0])]


def sorted_rows(table: Table) -> list[Any]:
    if table.sort_column:
        return sort_data(table.data, table.sort_column, table.sort_direction)
    return list(table.data)


def format_cell(column: Column, row: Any) -> str:
    value = get_value(row, column.key) if column.key is not None else None
    if callable(column.formatter):
        return str(column.formatter(value))
    if value is None:
        return ""
    return str(value)


def align_text(text: str, width: int, align: str) -> str:
    if align == "right":
        return text.rjust(width)
    if align == "center":
        return text.center(width)
    return text.ljust(width)


def table_matrix(table: Table) -> tuple[list[Column], list[list[str]]]:
    """Columns and formatted cell text, rows already sorted."""
    columns = effective_columns(table)
    rows = [[format_cell(column, row) for column in columns] for row in sorted_rows(table)]
    return columns, rows


def column_widths(columns: Sequence[Column], rows: Sequence[Sequence[str]]) -> list[int]:
    widths = []
    for index, column in enumerate(columns):
        width = max([len(column.header or "")] + [len(row[index]) for row in rows])
        if column.width is not None:
            width = min(width, column.width)
        widths.append(width)
    return widths
