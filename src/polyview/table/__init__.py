"""Table helpers shared by the renderers."""

from .sort import SortDirection, get_value, sort_data
from .format import align_text, column_widths, effective_columns, format_cell, sorted_rows, table_matrix

__all__ = [
    "SortDirection",
    "get_value",
    "sort_data",
    "effective_columns",
    "sorted_rows",
    "format_cell",
    "align_text",
    "table_matrix",
    "column_widths",
]
