"""
Web Renderer
Renders IUR trees to HTML fragments.

Interaction bindings become ``data-on-*`` attributes naming the bound
action, so a browser transport can post the matching event back.
"""

from html import escape
from typing import Any

from ..iur import elements as iur
from ..routing.handlers import ActionHandler, CallHandler, PayloadHandler, normalize_handler
from ..styles import Style
from ..table import table_matrix
from .protocol import BaseRenderer
from .types import Platform

TEXT_ATTR_CSS = {
    "bold": "font-weight: bold",
    "dim": "opacity: 0.6",
    "italic": "font-style: italic",
    "underline": "text-decoration: underline",
    "strikethrough": "text-decoration: line-through",
    "reverse": "filter: invert(1)",
}


def _color(value: Any) -> str:
    if isinstance(value, tuple):
        return "rgb({}, {}, {})".format(*value)
    return str(value)


def _size(value: Any) -> str:
    return f"{value}px" if isinstance(value, int) else str(value)


def style_to_css(style: Style | None) -> str:
    if style is None:
        return ""
    rules = []
    if style.fg is not None:
        rules.append(f"color: {_color(style.fg)}")
    if style.bg is not None:
        rules.append(f"background-color: {_color(style.bg)}")
    rules.extend(TEXT_ATTR_CSS[attr] for attr in style.attrs)
    for key in ("padding", "margin", "width", "height"):
        value = getattr(style, key)
        if value is not None:
            rules.append(f"{key}: {_size(value)}")
    if style.align is not None:
        rules.append(f"text-align: {style.align}")
    if style.spacing is not None:
        rules.append(f"gap: {_size(style.spacing)}")
    return "; ".join(rules)


def binding_name(handler: Any) -> str | None:
    """Name a browser transport posts back for a binding."""
    normalized = normalize_handler(handler)
    if isinstance(normalized, (ActionHandler, PayloadHandler)):
        return normalized.action
    if isinstance(normalized, CallHandler):
        return normalized.name
    return None


class WebRenderer(BaseRenderer):
    """HTML renderer."""

    platform = Platform.WEB

    def tag(self, tag_name: str, element: iur.Element, body: str = "", void: bool = False, **attrs: Any) -> str:
        attrs = {
            "class": attrs.pop("class", f"pv-{element.kind.replace('_', '-')}"),
            "id": element.id,
            "style": style_to_css(element.style) or None,
            **attrs,
        }

        rendered = []
        for key, value in attrs.items():
            if value is None or value is False:
                continue
            attr = key.rstrip("_").replace("_", "-")
            rendered.append(attr if value is True else f'{attr}="{escape(str(value))}"')
        opening = f"<{tag_name} {' '.join(rendered)}>" if rendered else f"<{tag_name}>"
        return opening if void else f"{opening}{body}</{tag_name}>"

    # Widgets

    def visit_text(self, element: iur.Text, children: list[str]) -> str:
        return self.tag("span", element, escape(element.content or ""))

    def visit_label(self, element: iur.Label, children: list[str]) -> str:
        return self.tag("label", element, escape(element.text or ""), for_=element.for_id)

    def visit_button(self, element: iur.Button, children: list[str]) -> str:
        return self.tag(
            "button",
            element,
            escape(element.label or ""),
            type="button",
            disabled=element.disabled,
            data_on_click=binding_name(element.on_click),
        )

    def visit_text_input(self, element: iur.TextInput, children: list[str]) -> str:
        return self.tag(
            "input",
            element,
            void=True,
            type=element.input_type,
            name=element.id,
            value=element.value,
            placeholder=element.placeholder,
            form=element.form_id,
            disabled=element.disabled,
            data_on_change=binding_name(element.on_change),
            data_on_submit=binding_name(element.on_submit),
        )

    # Data visualization

    def visit_gauge(self, element: iur.Gauge, children: list[str]) -> str:
        meter = self.tag("meter", element, value=element.value, min=element.min, max=element.max)
        if element.label:
            return f"<figure>{meter}<figcaption>{escape(element.label)}</figcaption></figure>"
        return meter

    def _chart(self, element: iur.Element, kind: str, data: list[Any]) -> str:
        points = ",".join(escape(str(point)) for point in data)
        return self.tag("div", element, role="img", data_chart=kind, data_points=points)

    def visit_sparkline(self, element: iur.Sparkline, children: list[str]) -> str:
        return self._chart(element, "sparkline", element.data)

    def visit_bar_chart(self, element: iur.BarChart, children: list[str]) -> str:
        return self._chart(element, "bar", element.data)

    def visit_line_chart(self, element: iur.LineChart, children: list[str]) -> str:
        return self._chart(element, "line", element.data)

    def visit_table(self, element: iur.Table, children: list[str]) -> str:
        columns, rows = table_matrix(element)

        headers = []
        for column in columns:
            sort = None
            if element.sort_column is not None and column.key == element.sort_column:
                sort = "ascending" if element.sort_direction == "asc" else "descending"
            attr = f' aria-sort="{sort}"' if sort else ""
            headers.append(f"<th{attr}>{escape(column.header or '')}</th>")

        body = []
        for index, row in enumerate(rows):
            selected = ' aria-selected="true"' if element.selected_row == index else ""
            cells = "".join(f"<td>{escape(cell)}</td>" for cell in row)
            body.append(f'<tr data-row="{index}"{selected}>{cells}</tr>')

        content = f"<thead><tr>{''.join(headers)}</tr></thead><tbody>{''.join(body)}</tbody>"
        return self.tag(
            "table",
            element,
            content,
            data_on_row_select=binding_name(element.on_row_select),
            data_on_sort=binding_name(element.on_sort),
        )

    # Navigation

    def visit_menu_item(self, element: iur.MenuItem, children: list[str]) -> str:
        label = escape(element.label or "")
        if element.shortcut:
            label += f" <kbd>{escape(element.shortcut)}</kbd>"
        submenu = f"<ul>{''.join(children)}</ul>" if children else ""
        return self.tag(
            "li",
            element,
            label + submenu,
            aria_disabled="true" if element.disabled else None,
            data_on_click=binding_name(element.action),
        )

    def visit_menu(self, element: iur.Menu, children: list[str]) -> str:
        return self.tag("nav", element, f"<ul>{''.join(children)}</ul>", aria_label=element.title)

    def visit_context_menu(self, element: iur.ContextMenu, children: list[str]) -> str:
        return self.tag("ul", element, "".join(children), role="menu", data_trigger=element.trigger_on)

    def visit_tab(self, element: iur.Tab, children: list[str]) -> str:
        return self.tag("section", element, "".join(children), role="tabpanel", aria_label=element.label)

    def visit_tabs(self, element: iur.Tabs, children: list[str]) -> str:
        tabs = [tab for tab in element.tabs if tab.visible]
        buttons = "".join(
            f'<button role="tab" aria-selected="{str(tab.id == element.active_tab).lower()}">'
            f"{escape(tab.label or '')}</button>"
            for tab in tabs
        )
        return self.tag(
            "div",
            element,
            f'<div role="tablist">{buttons}</div>{"".join(children)}',
            data_on_change=binding_name(element.on_change),
        )

    def visit_tree_node(self, element: iur.TreeNode, children: list[str]) -> str:
        label = escape(element.label or "")
        nested = f'<ul role="group">{"".join(children)}</ul>' if children else ""
        return self.tag(
            "li",
            element,
            label + nested,
            role="treeitem",
            aria_expanded=str(element.expanded).lower() if children else None,
            data_value=element.value,
        )

    def visit_tree_view(self, element: iur.TreeView, children: list[str]) -> str:
        return self.tag(
            "ul",
            element,
            "".join(children),
            role="tree",
            data_on_select=binding_name(element.on_select),
            data_on_toggle=binding_name(element.on_toggle),
        )

    # Layouts

    def _layout(self, element: iur.Layout, children: list[str], direction: str) -> str:
        return self.tag(
            "div",
            element,
            "".join(children),
            data_direction=direction,
            data_spacing=element.spacing or None,
            data_padding=element.padding,
            data_align=element.align_items,
            data_justify=element.justify_content,
        )

    def visit_vbox(self, element: iur.VBox, children: list[str]) -> str:
        return self._layout(element, children, "column")

    def visit_hbox(self, element: iur.HBox, children: list[str]) -> str:
        return self._layout(element, children, "row")
