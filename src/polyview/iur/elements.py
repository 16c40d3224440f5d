"""Intermediate UI Representation (IUR) elements.

Every element exposes ``child_elements()`` for structural traversal and
``metadata()`` for renderers. Metadata always carries ``type``, ``id``,
``style`` and ``visible``.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..styles import Style


class Element(BaseModel):
    """Base IUR element."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ClassVar[str] = "element"

    id: str | None = None
    style: Style | None = None
    visible: bool = True

    def child_elements(self) -> list["Element"]:
        """Structural children; empty for leaves."""
        return []

    def metadata(self) -> dict[str, Any]:
        meta = {"type": self.kind, "id": self.id, "style": self.style, "visible": self.visible}
        meta.update(self._extra_metadata())
        return meta

    def _extra_metadata(self) -> dict[str, Any]:
        return {}


# Widgets


class Text(Element):
    kind: ClassVar[str] = "text"

    content: str | None = None

    def _extra_metadata(self) -> dict[str, Any]:
        return {"content": self.content}


class Button(Element):
    kind: ClassVar[str] = "button"

    label: str | None = None
    on_click: Any = None
    disabled: bool = False

    def _extra_metadata(self) -> dict[str, Any]:
        return {"label": self.label, "on_click": self.on_click, "disabled": self.disabled}


class Label(Element):
    kind: ClassVar[str] = "label"

    for_id: str | None = None
    text: str | None = None

    def _extra_metadata(self) -> dict[str, Any]:
        return {"for": self.for_id, "text": self.text}


class TextInput(Element):
    kind: ClassVar[str] = "text_input"

    value: Any = None
    placeholder: str | None = None
    input_type: str = "text"
    on_change: Any = None
    on_submit: Any = None
    form_id: str | None = None
    disabled: bool = False

    def _extra_metadata(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "placeholder": self.placeholder,
            "input_type": self.input_type,
            "on_change": self.on_change,
            "on_submit": self.on_submit,
            "form_id": self.form_id,
            "disabled": self.disabled,
        }


# Data visualization


class Gauge(Element):
    kind: ClassVar[str] = "gauge"

    value: float | None = None
    min: float = 0
    max: float = 100
    label: str | None = None
    width: int | None = None
    height: int | None = None
    color_zones: list[Any] | None = None

    def _extra_metadata(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "min": self.min,
            "max": self.max,
            "label": self.label,
            "width": self.width,
            "height": self.height,
            "color_zones": self.color_zones,
        }


class Sparkline(Element):
    kind: ClassVar[str] = "sparkline"

    data: list[Any] = Field(default_factory=list)
    width: int | None = None
    height: int | None = None
    color: str | None = None
    show_dots: bool = False
    show_area: bool = False

    def _extra_metadata(self) -> dict[str, Any]:
        return {"data": self.data, "width": self.width, "height": self.height, "color": self.color}


class BarChart(Element):
    kind: ClassVar[str] = "bar_chart"

    data: list[Any] = Field(default_factory=list)
    width: int | None = None
    height: int | None = None
    orientation: str = "horizontal"
    show_labels: bool = True

    def _extra_metadata(self) -> dict[str, Any]:
        return {"data": self.data, "orientation": self.orientation, "show_labels": self.show_labels}


class LineChart(Element):
    kind: ClassVar[str] = "line_chart"

    data: list[Any] = Field(default_factory=list)
    width: int | None = None
    height: int | None = None
    show_dots: bool = True
    show_area: bool = False

    def _extra_metadata(self) -> dict[str, Any]:
        return {"data": self.data, "show_dots": self.show_dots, "show_area": self.show_area}


# Tables


class Column(BaseModel):
    """Table column definition (not an element)."""

    model_config = ConfigDict(frozen=True)

    key: str | None = None
    header: str | None = None
    sortable: bool = True
    formatter: Any = None
    width: int | None = None
    align: str = "left"


class Table(Element):
    kind: ClassVar[str] = "table"

    data: list[Any] = Field(default_factory=list)
    columns: list[Column] | None = None
    selected_row: int | None = None
    height: int | None = None
    on_row_select: Any = None
    on_sort: Any = None
    sort_column: str | None = None
    sort_direction: str = "asc"

    def _extra_metadata(self) -> dict[str, Any]:
        return {
            "columns": self.columns,
            "row_count": len(self.data),
            "selected_row": self.selected_row,
            "on_row_select": self.on_row_select,
            "on_sort": self.on_sort,
            "sort_column": self.sort_column,
            "sort_direction": self.sort_direction,
        }


# Navigation


class MenuItem(Element):
    kind: ClassVar[str] = "menu_item"

    label: str | None = None
    action: Any = None
    disabled: bool = False
    submenu: list["MenuItem"] | None = None
    icon: str | None = None
    shortcut: str | None = None

    def child_elements(self) -> list[Element]:
        return list(self.submenu or [])

    def _extra_metadata(self) -> dict[str, Any]:
        return {"label": self.label, "action": self.action, "disabled": self.disabled, "shortcut": self.shortcut}


class Menu(Element):
    kind: ClassVar[str] = "menu"

    title: str | None = None
    position: str | None = None
    items: list[MenuItem] = Field(default_factory=list)

    def child_elements(self) -> list[Element]:
        return list(self.items)

    def _extra_metadata(self) -> dict[str, Any]:
        return {"title": self.title, "position": self.position}


class ContextMenu(Element):
    kind: ClassVar[str] = "context_menu"

    trigger_on: str = "right_click"
    items: list[MenuItem] = Field(default_factory=list)

    def child_elements(self) -> list[Element]:
        return list(self.items)

    def _extra_metadata(self) -> dict[str, Any]:
        return {"trigger_on": self.trigger_on}


class Tab(Element):
    kind: ClassVar[str] = "tab"

    label: str | None = None
    icon: str | None = None
    disabled: bool = False
    closable: bool = False
    content: list[Element] = Field(default_factory=list)

    def child_elements(self) -> list[Element]:
        return list(self.content)

    def _extra_metadata(self) -> dict[str, Any]:
        return {"label": self.label, "disabled": self.disabled, "closable": self.closable}


class Tabs(Element):
    kind: ClassVar[str] = "tabs"

    active_tab: str | None = None
    position: str | None = None
    on_change: Any = None
    tabs: list[Tab] = Field(default_factory=list)

    def child_elements(self) -> list[Element]:
        return list(self.tabs)

    def _extra_metadata(self) -> dict[str, Any]:
        return {"active_tab": self.active_tab, "position": self.position, "on_change": self.on_change}


class TreeNode(Element):
    kind: ClassVar[str] = "tree_node"

    label: str | None = None
    value: Any = None
    expanded: bool = False
    icon: str | None = None
    icon_expanded: str | None = None
    selectable: bool = True
    children: list["TreeNode"] | None = None

    def child_elements(self) -> list[Element]:
        return list(self.children or [])

    def _extra_metadata(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value, "expanded": self.expanded, "selectable": self.selectable}


class TreeView(Element):
    kind: ClassVar[str] = "tree_view"

    selected_node: str | None = None
    expanded_nodes: list[str] | None = None
    on_select: Any = None
    on_toggle: Any = None
    show_root: bool = True
    root_nodes: list[TreeNode] = Field(default_factory=list)

    def child_elements(self) -> list[Element]:
        return list(self.root_nodes)

    def _extra_metadata(self) -> dict[str, Any]:
        return {
            "selected_node": self.selected_node,
            "expanded_nodes": self.expanded_nodes,
            "on_select": self.on_select,
            "on_toggle": self.on_toggle,
            "show_root": self.show_root,
        }


# Layouts


class Layout(Element):
    """Ordered container of child elements."""

    spacing: int = 0
    padding: int | None = None
    align_items: str | None = None
    justify_content: str | None = None
    children: list[Element] = Field(default_factory=list)

    def child_elements(self) -> list[Element]:
        return list(self.children)

    def _extra_metadata(self) -> dict[str, Any]:
        return {
            "spacing": self.spacing,
            "padding": self.padding,
            "align_items": self.align_items,
            "justify_content": self.justify_content,
        }


class VBox(Layout):
    kind: ClassVar[str] = "vbox"


class HBox(Layout):
    kind: ClassVar[str] = "hbox"


LAYOUT_TYPES = (VBox, HBox)

MenuItem.model_rebuild()
TreeNode.model_rebuild()
