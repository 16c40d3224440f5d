"""Declaration Data Models."""

from collections.abc import Iterator
from typing import Any
from pydantic import BaseModel, ConfigDict, Field

# Child collections, in traversal order.
CHILD_COLLECTIONS = ("children", "items", "columns", "tabs", "nodes")

# Node names that declare data rather than UI.
NON_VISUAL_NODES = frozenset({"state", "style", "signal"})


class DeclarationNode(BaseModel):
    """A named node of the declared UI tree."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Node kind, e.g. 'button' or 'vbox'")
    attrs: dict[str, Any] = Field(default_factory=dict)
    children: list["DeclarationNode"] = Field(default_factory=list)
    items: list["DeclarationNode"] = Field(default_factory=list)
    columns: list["DeclarationNode"] = Field(default_factory=list)
    tabs: list["DeclarationNode"] = Field(default_factory=list)
    nodes: list["DeclarationNode"] = Field(default_factory=list)
    location: str | None = Field(default=None, description="Source location from the front end")

    @property
    def id(self) -> Any:
        return self.attrs.get("id")

    def get(self, key: str, default: Any = None) -> Any:
        return self.attrs.get(key, default)

    def collection(self, key: str) -> list["DeclarationNode"]:
        """Children stored under one collection key."""
        return getattr(self, key)

    def iter_children(self) -> Iterator["DeclarationNode"]:
        """Every direct child across all collection keys."""
        for key in CHILD_COLLECTIONS:
            yield from getattr(self, key)

    @property
    def is_visual(self) -> bool:
        return self.name not in NON_VISUAL_NODES


class StyleNode(BaseModel):
    """Named style with optional single parent."""

    model_config = ConfigDict(frozen=True)

    name: str
    extends: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    location: str | None = None


class Document(BaseModel):
    """A complete declaration: UI roots plus the named-style graph."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="untitled")
    roots: list[DeclarationNode] = Field(default_factory=list)
    styles: list[StyleNode] = Field(default_factory=list)

    def style_graph(self) -> dict[str, StyleNode]:
        """Style name to node; the first declaration of a name wins."""
        graph: dict[str, StyleNode] = {}
        for style in self.styles:
            graph.setdefault(style.name, style)
        return graph

    def walk(self) -> Iterator[DeclarationNode]:
        """Pre-order walk over every node reachable from the roots."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.iter_children())))

    def initial_state(self) -> dict[str, Any]:
        """Merged attributes of every top-level ``state`` node."""
        state: dict[str, Any] = {}
        for node in self.roots:
            if node.name == "state":
                state.update(node.attrs)
        return state

    def has_state(self) -> bool:
        return any(node.name == "state" for node in self.roots)


DeclarationNode.model_rebuild()
