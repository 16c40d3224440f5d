"""
Desktop Renderer
Renders IUR trees to nested native-widget specifications.

A spec is a plain dict ``{"widget", "id", "props", "children"}`` that a
toolkit binding can instantiate one-to-one.
"""

from typing import Any

from ..iur import elements as iur
from ..table import effective_columns, sorted_rows
from .protocol import BaseRenderer
from .types import Platform

Spec = dict[str, Any]

# IUR kind to native widget class.
WIDGET_CLASSES = {
    "text": "Label",
    "label": "Label",
    "button": "Button",
    "text_input": "Entry",
    "gauge": "ProgressBar",
    "sparkline": "Canvas",
    "bar_chart": "Canvas",
    "line_chart": "Canvas",
    "table": "Grid",
    "menu": "MenuBar",
    "menu_item": "MenuItem",
    "context_menu": "PopupMenu",
    "tabs": "Notebook",
    "tab": "Page",
    "tree_view": "TreeView",
    "tree_node": "TreeItem",
    "vbox": "Column",
    "hbox": "Row",
}


def _drop_none(props: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in props.items() if v is not None}


class DesktopRenderer(BaseRenderer):
    """Native widget spec renderer."""

    platform = Platform.DESKTOP

    def spec(self, element: iur.Element, children: list[Spec], **props: Any) -> Spec:
        if element.style is not None and not element.style.is_empty():
            props["style"] = element.style.to_dict()
        return {
            "widget": WIDGET_CLASSES[element.kind],
            "id": element.id,
            "props": _drop_none(props),
            "children": children,
        }

    # Widgets

    def visit_text(self, element: iur.Text, children: list[Spec]) -> Spec:
        return self.spec(element, children, text=element.content or "")

    def visit_label(self, element: iur.Label, children: list[Spec]) -> Spec:
        return self.spec(element, children, text=element.text or "", buddy=element.for_id)

    def visit_button(self, element: iur.Button, children: list[Spec]) -> Spec:
        return self.spec(
            element, children, text=element.label or "", sensitive=not element.disabled, on_click=element.on_click
        )

    def visit_text_input(self, element: iur.TextInput, children: list[Spec]) -> Spec:
        return self.spec(
            element,
            children,
            text=element.value,
            placeholder=element.placeholder,
            masked=element.input_type == "password",
            sensitive=not element.disabled,
            on_change=element.on_change,
            on_submit=element.on_submit,
            group=element.form_id,
        )

    # Data visualization

    def visit_gauge(self, element: iur.Gauge, children: list[Spec]) -> Spec:
        return self.spec(
            element,
            children,
            value=element.value,
            minimum=element.min,
            maximum=element.max,
            text=element.label,
            size=(element.width, element.height) if element.width or element.height else None,
        )

    def visit_sparkline(self, element: iur.Sparkline, children: list[Spec]) -> Spec:
        return self.spec(element, children, plot="sparkline", data=list(element.data), color=element.color)

    def visit_bar_chart(self, element: iur.BarChart, children: list[Spec]) -> Spec:
        return self.spec(element, children, plot="bar", data=list(element.data), orientation=element.orientation)

    def visit_line_chart(self, element: iur.LineChart, children: list[Spec]) -> Spec:
        return self.spec(element, children, plot="line", data=list(element.data), show_area=element.show_area)

    def visit_table(self, element: iur.Table, children: list[Spec]) -> Spec:
        columns = [column.model_dump(exclude_none=True) for column in effective_columns(element)]
        return self.spec(
            element,
            children,
            columns=columns,
            rows=sorted_rows(element),
            selected_row=element.selected_row,
            sort_column=element.sort_column,
            sort_direction=element.sort_direction,
            on_row_select=element.on_row_select,
            on_sort=element.on_sort,
        )

    # Navigation

    def visit_menu_item(self, element: iur.MenuItem, children: list[Spec]) -> Spec:
        return self.spec(
            element,
            children,
            text=element.label or "",
            action=element.action,
            accelerator=element.shortcut,
            icon=element.icon,
            sensitive=not element.disabled,
        )

    def visit_menu(self, element: iur.Menu, children: list[Spec]) -> Spec:
        return self.spec(element, children, title=element.title, position=element.position)

    def visit_context_menu(self, element: iur.ContextMenu, children: list[Spec]) -> Spec:
        return self.spec(element, children, trigger=element.trigger_on)

    def visit_tab(self, element: iur.Tab, children: list[Spec]) -> Spec:
        return self.spec(
            element, children, title=element.label or "", icon=element.icon, closable=element.closable,
            sensitive=not element.disabled,
        )

    def visit_tabs(self, element: iur.Tabs, children: list[Spec]) -> Spec:
        return self.spec(
            element, children, current=element.active_tab, position=element.position, on_change=element.on_change
        )

    def visit_tree_node(self, element: iur.TreeNode, children: list[Spec]) -> Spec:
        return self.spec(
            element,
            children,
            text=element.label or "",
            value=element.value,
            expanded=element.expanded,
            icon=element.icon_expanded if element.expanded and element.icon_expanded else element.icon,
            selectable=element.selectable,
        )

    def visit_tree_view(self, element: iur.TreeView, children: list[Spec]) -> Spec:
        return self.spec(
            element,
            children,
            selected=element.selected_node,
            expanded=element.expanded_nodes,
            show_root=element.show_root,
            on_select=element.on_select,
            on_toggle=element.on_toggle,
        )

    # Layouts

    def _layout(self, element: iur.Layout, children: list[Spec]) -> Spec:
        return self.spec(
            element,
            children,
            spacing=element.spacing,
            padding=element.padding,
            align=element.align_items,
            justify=element.justify_content,
        )

    def visit_vbox(self, element: iur.VBox, children: list[Spec]) -> Spec:
        return self._layout(element, children)

    def visit_hbox(self, element: iur.HBox, children: list[Spec]) -> Spec:
        return self._layout(element, children)
