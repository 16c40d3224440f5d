"""
Style Graph Resolver
Resolves named styles, with single inheritance and inline overrides, to flat
``Style`` values.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from returns.result import Failure, Result, Success

from ..core import get_logger
from ..core.errors import CircularStyleReferenceError
from ..declaration.models import Document, StyleNode
from .style import Style, is_attribute_pair, to_attribute_dict

logger = get_logger(__name__)

StyleRef = str | Style | Mapping[str, Any] | list[Any] | tuple[Any, ...] | None


@dataclass(frozen=True)
class StyleRefIssue:
    """Why a style reference is invalid (for Result pattern)."""

    reason: str
    name: str | None = None


class StyleResolver:
    """
    Resolves style references against one style graph.

    The graph is immutable for the lifetime of the resolver, so resolved
    inheritance chains are memoized per style name. Overrides are applied
    on top of the memoized value and are never cached.

    Examples:
        >>> resolver = StyleResolver([
        ...     StyleNode(name="base", attributes={"fg": "white", "padding": 1}),
        ...     StyleNode(name="alert", extends="base", attributes={"fg": "red"}),
        ... ])
        >>> resolver.resolve("alert").to_dict()
        {'fg': 'red', 'padding': 1}
    """

    def __init__(self, styles: Document | Mapping[str, StyleNode] | Iterable[StyleNode] = ()) -> None:
        if isinstance(styles, Document):
            self._graph = styles.style_graph()
        elif isinstance(styles, Mapping):
            self._graph = dict(styles)
        else:
            self._graph = {}
            for style in styles:
                self._graph.setdefault(style.name, style)
        self._resolved: dict[str, Style] = {}

    @property
    def graph(self) -> dict[str, StyleNode]:
        return dict(self._graph)

    def has_style(self, name: str) -> bool:
        return name in self._graph

    def resolve(self, style_name: str, overrides: Mapping[str, Any] | Iterable[Any] | None = None) -> Style:
        """
        Resolve a named style to a flat style.

        An unknown name resolves to an empty style (plus overrides) rather
        than failing; only inheritance cycles are errors.

        Raises:
            CircularStyleReferenceError: If the ``extends`` chain loops
            InvalidStyleError: If a style declares unknown attributes
        """
        base = self._resolved.get(style_name)
        if base is None:
            node = self._graph.get(style_name)
            if node is None:
                logger.debug("style_not_found", style=style_name)
                base = Style()
            else:
                base = self._resolve_node(node, ())
                self._resolved[style_name] = base

        if overrides:
            return base.merge(Style.new(overrides))
        return base

    def _resolve_node(self, node: StyleNode, seen: tuple[str, ...]) -> Style:
        if node.name in seen:
            chain = [*seen, node.name]
            logger.error("circular_style_reference", chain=chain)
            raise CircularStyleReferenceError(chain)

        own = Style.new(node.attributes)
        if node.extends is None:
            return own

        parent = self._graph.get(node.extends)
        if parent is None:
            logger.debug("style_parent_missing", style=node.name, parent=node.extends)
            return own

        return self._resolve_node(parent, (*seen, node.name)).merge(own)

    def resolve_style_ref(self, style_ref: StyleRef) -> Style | None:
        """
        Resolve any style reference shape.

        Shapes:
        - ``"header"``: named style
        - ``{"fg": "red"}`` or ``[("fg", "red"), ...]``: inline attributes
        - ``["header", ("fg", "green"), ...]``: named style with overrides

        Returns None for an absent or empty reference.
        """
        if style_ref is None or style_ref == "" or style_ref == [] or style_ref == ():
            return None
        if isinstance(style_ref, Style):
            return style_ref
        if isinstance(style_ref, str):
            return self.resolve(style_ref)
        if isinstance(style_ref, Mapping):
            return Style.new(style_ref)

        first, *rest = style_ref
        if is_attribute_pair(first) or isinstance(first, Mapping):
            return Style.new(style_ref)
        if isinstance(first, str):
            return self.resolve(first, to_attribute_dict(rest))
        return Style.new(style_ref)

    def validate_style_ref(self, style_ref: StyleRef) -> Result[None, StyleRefIssue]:
        """
        Check that a named reference points at a declared style.

        Inline references are always accepted here; their attribute names
        are checked when the style is built.
        """
        name = _referenced_name(style_ref)
        if name is None or name in self._graph:
            return Success(None)
        return Failure(StyleRefIssue(reason="style_not_found", name=name))

    def all_resolved(self) -> dict[str, Style]:
        """Resolve every declared style."""
        return {name: self.resolve(name) for name in self._graph}


def _referenced_name(style_ref: StyleRef) -> str | None:
    if isinstance(style_ref, str):
        return style_ref or None
    if isinstance(style_ref, (list, tuple)) and style_ref:
        first = style_ref[0]
        if isinstance(first, str) and not is_attribute_pair(first):
            return first
    return None
