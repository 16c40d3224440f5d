"""Intermediate UI Representation: typed elements, builder and traversal."""

from .elements import (
    LAYOUT_TYPES,
    BarChart,
    Button,
    Column,
    ContextMenu,
    Element,
    Gauge,
    HBox,
    Label,
    Layout,
    LineChart,
    Menu,
    MenuItem,
    Sparkline,
    Tab,
    Table,
    Tabs,
    Text,
    TextInput,
    TreeNode,
    TreeView,
    VBox,
)
from .builder import TreeBuilder, build_iur
from .traversal import (
    collect_styles,
    count_by_type,
    count_elements,
    find_by_id,
    get_all_ids,
    iter_elements,
    traverse,
    validate_iur,
)

__all__ = [
    # Elements
    "Element",
    "Layout",
    "VBox",
    "HBox",
    "LAYOUT_TYPES",
    "Text",
    "Button",
    "Label",
    "TextInput",
    "Gauge",
    "Sparkline",
    "BarChart",
    "LineChart",
    "Column",
    "Table",
    "Menu",
    "MenuItem",
    "ContextMenu",
    "Tab",
    "Tabs",
    "TreeNode",
    "TreeView",
    # Building
    "TreeBuilder",
    "build_iur",
    # Traversal
    "traverse",
    "iter_elements",
    "find_by_id",
    "collect_styles",
    "count_elements",
    "count_by_type",
    "get_all_ids",
    "validate_iur",
]
