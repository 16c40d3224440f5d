"""
IUR Traversal
Shared tree walking used by renderers, routing and validation.
"""

from collections.abc import Callable
from typing import Any, Literal, TypeVar

from returns.result import Failure, Result, Success

from ..styles import Style
from .elements import Element, Layout, TextInput

T = TypeVar("T")

Order = Literal["pre", "post", "both"]
Visitor = Callable[[Element, T], T]


def traverse(
    root: Element | None,
    callback: Visitor,
    initial: T,
    order: Order = "pre",
    include_hidden: bool = False,
) -> T:
    """
    Fold ``callback`` over every element.

    With ``order="both"`` the callback sees each element twice, before and
    after its children. Hidden elements, and everything beneath them, are
    skipped unless ``include_hidden`` is set.
    """
    if order not in ("pre", "post", "both"):
        raise ValueError(f"Unknown traversal order: {order!r}")
    if root is None:
        return initial
    return _walk(root, callback, initial, order, include_hidden)


def _walk(element: Element, callback: Visitor, acc: Any, order: Order, include_hidden: bool) -> Any:
    if not element.visible and not include_hidden:
        return acc

    if order in ("pre", "both"):
        acc = callback(element, acc)
    for child in element.child_elements():
        acc = _walk(child, callback, acc, order, include_hidden)
    if order in ("post", "both"):
        acc = callback(element, acc)
    return acc


def iter_elements(root: Element | None, include_hidden: bool = False) -> list[Element]:
    """Elements in pre-order."""
    def visit(element: Element, elements: list[Element]) -> list[Element]:
        elements.append(element)
        return elements

    return traverse(root, visit, [], include_hidden=include_hidden)


def find_by_id(root: Element | None, element_id: str, include_hidden: bool = True) -> Element | None:
    """First element with the given id, or None."""
    for element in iter_elements(root, include_hidden=include_hidden):
        if element.id == element_id:
            return element
    return None


def collect_styles(root: Element | None) -> list[Style]:
    """Every resolved style attached to a visible element, in pre-order."""
    return [e.style for e in iter_elements(root) if e.style is not None]


def count_elements(root: Element | None, include_hidden: bool = False) -> int:
    return traverse(root, lambda _, n: n + 1, 0, include_hidden=include_hidden)


def count_by_type(root: Element | None, include_hidden: bool = False) -> dict[str, int]:
    def visit(element: Element, counts: dict[str, int]) -> dict[str, int]:
        counts[element.kind] = counts.get(element.kind, 0) + 1
        return counts

    return traverse(root, visit, {}, include_hidden=include_hidden)


def get_all_ids(root: Element | None, include_hidden: bool = True) -> list[str]:
    return [e.id for e in iter_elements(root, include_hidden=include_hidden) if e.id is not None]


def validate_iur(root: Element | None) -> Result[None, list[str]]:
    """
    Structural sanity checks on a built tree.

    Issues are ``"<kind>:<detail>"`` strings: ``duplicate_id``,
    ``missing_id_on_text_input`` and ``empty_layout``.
    """
    issues: list[str] = []
    seen: set[str] = set()

    for element in iter_elements(root, include_hidden=True):
        if element.id is not None:
            if element.id in seen:
                issues.append(f"duplicate_id:{element.id}")
            seen.add(element.id)
        if isinstance(element, TextInput) and element.id is None:
            issues.append("missing_id_on_text_input")
        if isinstance(element, Layout) and not element.children:
            issues.append(f"empty_layout:{element.id or element.kind}")

    if issues:
        return Failure(issues)
    return Success(None)
