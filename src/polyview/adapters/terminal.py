"""
Terminal Renderer
Renders IUR trees to plain text lines.

Every converted node is a ``list[str]``; the root is the full screen.
"""

from collections.abc import Sequence
from typing import Any

from ..iur import elements as iur
from ..table import align_text, column_widths, table_matrix
from .protocol import BaseRenderer
from .state import RendererState
from .types import Platform

Lines = list[str]

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
DEFAULT_BAR_WIDTH = 20


def _numbers(data: Sequence[Any]) -> list[float]:
    values = []
    for point in data:
        if isinstance(point, (int, float)) and not isinstance(point, bool):
            values.append(float(point))
        elif isinstance(point, dict) and isinstance(point.get("value"), (int, float)):
            values.append(float(point["value"]))
        elif isinstance(point, (list, tuple)) and len(point) == 2 and isinstance(point[1], (int, float)):
            values.append(float(point[1]))
    return values


def _labelled(data: Sequence[Any]) -> list[tuple[str, float]]:
    pairs = []
    for index, point in enumerate(data):
        if isinstance(point, dict):
            pairs.append((str(point.get("label", index)), float(point.get("value", 0))))
        elif isinstance(point, (list, tuple)) and len(point) == 2:
            pairs.append((str(point[0]), float(point[1])))
        elif isinstance(point, (int, float)):
            pairs.append((str(index), float(point)))
    return pairs


def sparkline(values: Sequence[float], width: int | None = None) -> str:
    if width is not None and len(values) > width:
        values = values[-width:]
    if not values:
        return ""
    low, high = min(values), max(values)
    span = (high - low) or 1.0
    top = len(SPARK_BLOCKS) - 1
    return "".join(SPARK_BLOCKS[round((v - low) / span * top)] for v in values)


def _indent(lines: Lines, prefix: str = "  ") -> Lines:
    return [prefix + line for line in lines]


class TerminalRenderer(BaseRenderer):
    """Text-mode renderer."""

    platform = Platform.TERMINAL

    @staticmethod
    def to_text(state: RendererState) -> str:
        return "\n".join(state.root or [])

    # Widgets

    def visit_text(self, element: iur.Text, children: list[Lines]) -> Lines:
        return (element.content or "").splitlines() or [""]

    def visit_button(self, element: iur.Button, children: list[Lines]) -> Lines:
        label = f"[ {element.label or ''} ]"
        return [f"{label} (disabled)" if element.disabled else label]

    def visit_label(self, element: iur.Label, children: list[Lines]) -> Lines:
        return [element.text or ""]

    def visit_text_input(self, element: iur.TextInput, children: list[Lines]) -> Lines:
        if element.value not in (None, ""):
            shown = "*" * len(str(element.value)) if element.input_type == "password" else str(element.value)
        else:
            shown = element.placeholder or ""
        return [f"[{shown.ljust(DEFAULT_BAR_WIDTH)}]"]

    # Data visualization

    def visit_gauge(self, element: iur.Gauge, children: list[Lines]) -> Lines:
        width = element.width or DEFAULT_BAR_WIDTH
        value = element.value or 0
        span = (element.max - element.min) or 1
        ratio = min(max((value - element.min) / span, 0.0), 1.0)
        filled = round(ratio * width)
        bar = "█" * filled + "░" * (width - filled)
        lines = [element.label] if element.label else []
        lines.append(f"{bar} {value:g}")
        return lines

    def visit_sparkline(self, element: iur.Sparkline, children: list[Lines]) -> Lines:
        return [sparkline(_numbers(element.data), element.width)]

    def visit_line_chart(self, element: iur.LineChart, children: list[Lines]) -> Lines:
        return [sparkline(_numbers(element.data), element.width)]

    def visit_bar_chart(self, element: iur.BarChart, children: list[Lines]) -> Lines:
        pairs = _labelled(element.data)
        if not pairs:
            return []
        width = element.width or DEFAULT_BAR_WIDTH
        peak = max(value for _, value in pairs) or 1.0
        label_width = max(len(label) for label, _ in pairs)

        lines = []
        for label, value in pairs:
            bar = "█" * round(value / peak * width)
            prefix = f"{label.ljust(label_width)} " if element.show_labels else ""
            lines.append(f"{prefix}{bar} {value:g}")
        return lines

    def visit_table(self, element: iur.Table, children: list[Lines]) -> Lines:
        columns, rows = table_matrix(element)
        if not columns:
            return ["No columns defined"]
        widths = column_widths(columns, rows)

        header_cells = []
        for column, width in zip(columns, widths):
            indicator = ""
            if element.sort_column is not None and element.sort_column == column.key:
                indicator = " ↑" if element.sort_direction == "asc" else " ↓"
            header_cells.append(align_text(column.header or "", width, column.align) + indicator)

        separator = "+".join("-" * (width + 2) for width in widths)
        lines = [separator, "| " + " | ".join(header_cells) + " |", separator]
        for index, row in enumerate(rows):
            cells = [align_text(cell[:width], width, column.align) for cell, column, width in zip(row, columns, widths)]
            marker = "> " if element.selected_row == index else "| "
            lines.append(marker + " | ".join(cells) + " |")
        lines.append(separator)
        return lines

    # Navigation

    def visit_menu_item(self, element: iur.MenuItem, children: list[Lines]) -> Lines:
        text = element.label or ""
        if element.icon:
            text = f"{element.icon} {text}"
        if element.shortcut:
            text = f"{text}  ({element.shortcut})"
        if element.disabled:
            text = f"{text} -"
        return [text] + [line for child in children for line in _indent(child)]

    def visit_menu(self, element: iur.Menu, children: list[Lines]) -> Lines:
        lines = [element.title] if element.title else []
        return lines + [line for child in children for line in _indent(child)]

    def visit_context_menu(self, element: iur.ContextMenu, children: list[Lines]) -> Lines:
        return [line for child in children for line in child]

    def visit_tab(self, element: iur.Tab, children: list[Lines]) -> Lines:
        return [line for child in children for line in child]

    def visit_tabs(self, element: iur.Tabs, children: list[Lines]) -> Lines:
        tabs = [tab for tab in element.tabs if tab.visible]
        if not tabs:
            return []
        active = next((i for i, tab in enumerate(tabs) if tab.id == element.active_tab), 0)
        header = " ".join(
            f"[{tab.label or ''}]" if i == active else f" {tab.label or ''} " for i, tab in enumerate(tabs)
        )
        return [header] + children[active]

    def visit_tree_node(self, element: iur.TreeNode, children: list[Lines]) -> Lines:
        if children:
            marker = "▾" if element.expanded else "▸"
        else:
            marker = "•"
        icon = element.icon_expanded if element.expanded and element.icon_expanded else element.icon
        label = f"{icon} {element.label or ''}" if icon else element.label or ""
        lines = [f"{marker} {label}"]
        if element.expanded:
            lines += [line for child in children for line in _indent(child)]
        return lines

    def visit_tree_view(self, element: iur.TreeView, children: list[Lines]) -> Lines:
        return [line for child in children for line in child]

    # Layouts

    def visit_vbox(self, element: iur.VBox, children: list[Lines]) -> Lines:
        lines: Lines = []
        for index, child in enumerate(children):
            if index and element.spacing:
                lines.extend([""] * element.spacing)
            lines.extend(child)
        return _indent(lines, " " * element.padding) if element.padding else lines

    def visit_hbox(self, element: iur.HBox, children: list[Lines]) -> Lines:
        if not children:
            return []
        height = max(len(child) for child in children)
        widths = [max((len(line) for line in child), default=0) for child in children]
        gap = " " * max(element.spacing, 1)

        lines = []
        for row in range(height):
            cells = [
                (child[row] if row < len(child) else "").ljust(width) for child, width in zip(children, widths)
            ]
            lines.append(gap.join(cells).rstrip())
        return _indent(lines, " " * element.padding) if element.padding else lines
