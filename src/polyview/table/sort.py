"""Table row sorting."""

from collections.abc import Mapping, Sequence
from enum import Enum
from functools import cmp_to_key
from numbers import Number
from typing import Any


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def get_value(row: Any, key: str) -> Any:
    """
    Read ``key`` from a mapping, a sequence of pairs or an object.

    Missing keys read as None.
    """
    if isinstance(row, Mapping):
        return row.get(key)
    if isinstance(row, (list, tuple)):
        for item in row:
            if isinstance(item, (list, tuple)) and len(item) == 2 and item[0] == key:
                return item[1]
        return None
    return getattr(row, key, None)


def _compare(a: Any, b: Any) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1

    if isinstance(a, Number) and isinstance(b, Number) and not isinstance(a, bool) and not isinstance(b, bool):
        left, right = a, b
    elif isinstance(a, str) and isinstance(b, str):
        left, right = a, b
    else:
        # Mixed types compare as strings.
        left, right = str(a), str(b)
    return (left > right) - (left < right)


def sort_data(rows: Sequence[Any], key: str | None, direction: SortDirection | str = SortDirection.ASC) -> list[Any]:
    """
    Sort table rows by one column.

    None values come first when ascending and last when descending. The
    sort is stable, so rows with equal values keep their order.

    Examples:
        >>> sort_data([{"id": 2}, {"id": None}, {"id": 1}], "id")
        [{'id': None}, {'id': 1}, {'id': 2}]
    """
    if not rows:
        return []
    if key is None:
        return list(rows)

    descending = SortDirection(direction) is SortDirection.DESC
    return sorted(
        rows,
        key=cmp_to_key(lambda a, b: _compare(get_value(a, key), get_value(b, key))),
        reverse=descending,
    )
