"""
IUR Tree Builder
Converts declaration trees into typed IUR elements, resolving styles on the
way.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..core import get_logger
from ..declaration.models import DeclarationNode, Document
from ..styles import Style, StyleResolver
from . import elements as iur

logger = get_logger(__name__)

BuildFn = Callable[[DeclarationNode], iur.Element | None]


class TreeBuilder:
    """
    Builds IUR trees from declaration nodes.

    The catalog maps node names to build methods. Non-visual nodes (state,
    signal and style declarations) and unknown names produce nothing.

    Examples:
        >>> builder = TreeBuilder()
        >>> node = DeclarationNode(name="button", attrs={"id": "go", "label": "Go"})
        >>> builder.build_node(node).label
        'Go'
    """

    def __init__(self, resolver: StyleResolver | None = None) -> None:
        self.resolver = resolver or StyleResolver()
        self._catalog: dict[str, BuildFn] = {
            "text": self.build_text,
            "button": self.build_button,
            "label": self.build_label,
            "text_input": self.build_text_input,
            "gauge": self.build_gauge,
            "sparkline": self.build_sparkline,
            "bar_chart": self.build_bar_chart,
            "line_chart": self.build_line_chart,
            "table": self.build_table,
            "menu": self.build_menu,
            "menu_item": self.build_menu_item,
            "context_menu": self.build_context_menu,
            "tabs": self.build_tabs,
            "tab": self.build_tab,
            "tree_view": self.build_tree_view,
            "tree_node": self.build_tree_node,
            "vbox": self.build_vbox,
            "hbox": self.build_hbox,
        }

    @classmethod
    def for_document(cls, document: Document) -> "TreeBuilder":
        return cls(StyleResolver(document))

    @property
    def known_names(self) -> frozenset[str]:
        return frozenset(self._catalog)

    def build(self, tree: Document | DeclarationNode | Iterable[DeclarationNode]) -> iur.Element | None:
        """
        Build the IUR root.

        The root is the first top-level node that produces an element.
        """
        if isinstance(tree, Document):
            roots: Iterable[DeclarationNode] = tree.roots
        elif isinstance(tree, DeclarationNode):
            roots = [tree]
        else:
            roots = tree

        for node in roots:
            element = self.build_node(node)
            if element is not None:
                logger.debug("iur_built", root=element.kind, id=element.id)
                return element

        logger.debug("iur_empty")
        return None

    def build_node(self, node: DeclarationNode) -> iur.Element | None:
        """Convert one declaration node by name lookup."""
        if not node.is_visual:
            return None
        build_fn = self._catalog.get(node.name)
        if build_fn is None:
            logger.debug("unknown_node_skipped", name=node.name, location=node.location)
            return None
        return build_fn(node)

    def build_style(self, style_ref: Any) -> Style | None:
        """Pass a style reference through the resolver."""
        return self.resolver.resolve_style_ref(style_ref)

    def _common(self, node: DeclarationNode) -> dict[str, Any]:
        return {
            "id": node.get("id"),
            "visible": node.get("visible", True),
            "style": self.build_style(node.get("style")),
        }

    # Widget builders

    def build_text(self, node: DeclarationNode) -> iur.Text:
        return iur.Text(content=node.get("content"), **self._common(node))

    def build_button(self, node: DeclarationNode) -> iur.Button:
        return iur.Button(
            label=node.get("label"),
            on_click=node.get("on_click"),
            disabled=node.get("disabled", False),
            **self._common(node),
        )

    def build_label(self, node: DeclarationNode) -> iur.Label:
        return iur.Label(for_id=node.get("for"), text=node.get("text"), **self._common(node))

    def build_text_input(self, node: DeclarationNode) -> iur.TextInput:
        return iur.TextInput(
            value=node.get("value"),
            placeholder=node.get("placeholder"),
            input_type=node.get("type", "text"),
            on_change=node.get("on_change"),
            on_submit=node.get("on_submit"),
            form_id=node.get("form_id"),
            disabled=node.get("disabled", False),
            **self._common(node),
        )

    # Data visualization builders

    def build_gauge(self, node: DeclarationNode) -> iur.Gauge:
        return iur.Gauge(
            value=node.get("value"),
            min=node.get("min", 0),
            max=node.get("max", 100),
            label=node.get("label"),
            width=node.get("width"),
            height=node.get("height"),
            color_zones=node.get("color_zones"),
            **self._common(node),
        )

    def build_sparkline(self, node: DeclarationNode) -> iur.Sparkline:
        return iur.Sparkline(
            data=node.get("data") or [],
            width=node.get("width"),
            height=node.get("height"),
            color=node.get("color"),
            show_dots=node.get("show_dots", False),
            show_area=node.get("show_area", False),
            **self._common(node),
        )

    def build_bar_chart(self, node: DeclarationNode) -> iur.BarChart:
        return iur.BarChart(
            data=node.get("data") or [],
            width=node.get("width"),
            height=node.get("height"),
            orientation=node.get("orientation", "horizontal"),
            show_labels=node.get("show_labels", True),
            **self._common(node),
        )

    def build_line_chart(self, node: DeclarationNode) -> iur.LineChart:
        return iur.LineChart(
            data=node.get("data") or [],
            width=node.get("width"),
            height=node.get("height"),
            show_dots=node.get("show_dots", True),
            show_area=node.get("show_area", False),
            **self._common(node),
        )

    # Tables

    def build_table(self, node: DeclarationNode) -> iur.Table:
        columns = [self.build_column(c) for c in _nested(node, "columns", "column")]
        if not columns:
            columns = self._normalize_columns(node.get("columns"))

        return iur.Table(
            data=node.get("data") or [],
            columns=columns,
            selected_row=node.get("selected_row"),
            height=node.get("height"),
            on_row_select=node.get("on_row_select"),
            on_sort=node.get("on_sort"),
            sort_column=node.get("sort_column"),
            sort_direction=node.get("sort_direction", "asc"),
            **self._common(node),
        )

    def build_column(self, node: DeclarationNode | Mapping[str, Any]) -> iur.Column:
        attrs = node.attrs if isinstance(node, DeclarationNode) else node
        return iur.Column(
            key=attrs.get("key"),
            header=attrs.get("header"),
            sortable=attrs.get("sortable", True),
            formatter=attrs.get("formatter"),
            width=attrs.get("width"),
            align=attrs.get("align", "left"),
        )

    def _normalize_columns(self, columns: Any) -> list[iur.Column] | None:
        if columns is None:
            return None
        result = []
        for column in columns:
            if isinstance(column, iur.Column):
                result.append(column)
            elif isinstance(column, (DeclarationNode, Mapping)):
                result.append(self.build_column(column))
            elif isinstance(column, str):
                result.append(iur.Column(key=column, header=column))
        return result

    # Navigation

    def build_menu(self, node: DeclarationNode) -> iur.Menu:
        return iur.Menu(
            title=node.get("title"),
            position=node.get("position"),
            items=[self.build_menu_item(i) for i in _nested(node, "items", "menu_item")],
            **self._common(node),
        )

    def build_menu_item(self, node: DeclarationNode) -> iur.MenuItem:
        submenu = [self.build_menu_item(i) for i in _nested(node, "items", "menu_item")]
        return iur.MenuItem(
            label=node.get("label"),
            action=node.get("action"),
            disabled=node.get("disabled", False),
            submenu=submenu or None,
            icon=node.get("icon"),
            shortcut=node.get("shortcut"),
            **self._common(node),
        )

    def build_context_menu(self, node: DeclarationNode) -> iur.ContextMenu:
        return iur.ContextMenu(
            trigger_on=node.get("trigger_on", "right_click"),
            items=[self.build_menu_item(i) for i in _nested(node, "items", "menu_item")],
            **self._common(node),
        )

    def build_tabs(self, node: DeclarationNode) -> iur.Tabs:
        return iur.Tabs(
            active_tab=node.get("active_tab"),
            position=node.get("position"),
            on_change=node.get("on_change"),
            tabs=[self.build_tab(t) for t in _nested(node, "tabs", "tab")],
            **self._common(node),
        )

    def build_tab(self, node: DeclarationNode) -> iur.Tab:
        return iur.Tab(
            label=node.get("label"),
            icon=node.get("icon"),
            disabled=node.get("disabled", False),
            closable=node.get("closable", False),
            content=self.build_children(node),
            **self._common(node),
        )

    def build_tree_view(self, node: DeclarationNode) -> iur.TreeView:
        return iur.TreeView(
            selected_node=node.get("selected_node"),
            expanded_nodes=node.get("expanded_nodes"),
            on_select=node.get("on_select"),
            on_toggle=node.get("on_toggle"),
            show_root=node.get("show_root", True),
            root_nodes=[self.build_tree_node(n) for n in _nested(node, "nodes", "tree_node")],
            **self._common(node),
        )

    def build_tree_node(self, node: DeclarationNode) -> iur.TreeNode:
        children = [self.build_tree_node(n) for n in _nested(node, "nodes", "tree_node")]
        return iur.TreeNode(
            label=node.get("label"),
            value=node.get("value"),
            expanded=node.get("expanded", False),
            icon=node.get("icon"),
            icon_expanded=node.get("icon_expanded"),
            selectable=node.get("selectable", True),
            children=children or None,
            **self._common(node),
        )

    # Layouts

    def build_vbox(self, node: DeclarationNode) -> iur.VBox:
        return iur.VBox(children=self.build_children(node), **self._layout_fields(node))

    def build_hbox(self, node: DeclarationNode) -> iur.HBox:
        return iur.HBox(children=self.build_children(node), **self._layout_fields(node))

    def _layout_fields(self, node: DeclarationNode) -> dict[str, Any]:
        return {
            "spacing": node.get("spacing", 0),
            "padding": node.get("padding"),
            "align_items": node.get("align_items"),
            "justify_content": node.get("justify_content"),
            **self._common(node),
        }

    def build_children(self, node: DeclarationNode) -> list[iur.Element]:
        """Build the generic children of a node, dropping anything unbuildable."""
        built = (self.build_node(child) for child in node.children)
        return [element for element in built if element is not None]


def _nested(node: DeclarationNode, key: str, child_name: str) -> list[DeclarationNode]:
    # A dedicated collection wins; otherwise pick matching generic children.
    dedicated = node.collection(key)
    if dedicated:
        return list(dedicated)
    return [child for child in node.children if child.name == child_name]


def build_iur(tree: Document | DeclarationNode, resolver: StyleResolver | None = None) -> iur.Element | None:
    """
    Convenience function to build an IUR tree

    Uses the document's own styles when no resolver is given.
    """
    if resolver is None and isinstance(tree, Document):
        resolver = StyleResolver(tree)
    return TreeBuilder(resolver).build(tree)
