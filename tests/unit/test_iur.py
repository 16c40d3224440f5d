"""Tests for IUR building and traversal."""

import time

import pytest
from returns.pipeline import is_successful

from polyview.declaration import DeclarationNode, parse_document
from polyview.iur import (
    Button,
    Column,
    HBox,
    Table,
    Tabs,
    Text,
    TextInput,
    TreeBuilder,
    TreeView,
    VBox,
    build_iur,
    collect_styles,
    count_by_type,
    count_elements,
    find_by_id,
    get_all_ids,
    iter_elements,
    traverse,
    validate_iur,
)


# ============================================================================
# Builder
# ============================================================================

def test_build_login_form(login_document):
    """Test building a whole document with resolved styles."""
    root = build_iur(login_document)

    assert isinstance(root, VBox)
    assert root.spacing == 1
    heading, label, field, button = root.children
    assert heading.content == "Sign in"
    assert heading.style.fg == "cyan"
    assert heading.style.padding == 1
    assert label.for_id == "email"
    assert isinstance(field, TextInput)
    assert field.form_id == "login_form"
    assert isinstance(button, Button)
    assert button.on_click == "submit_login"


def test_build_skips_state_and_unknown_nodes():
    """Test non-visual and unknown nodes produce nothing."""
    builder = TreeBuilder()
    root = builder.build([
        DeclarationNode(name="state", attrs={"count": 0}),
        DeclarationNode(
            name="vbox",
            attrs={"id": "root"},
            children=[DeclarationNode(name="marquee", attrs={"id": "m"}), DeclarationNode(name="text", attrs={"id": "t"})],
        ),
    ])

    assert isinstance(root, VBox)
    assert [child.id for child in root.children] == ["t"]
    assert builder.build_node(DeclarationNode(name="signal")) is None


def test_build_empty():
    """Test an empty tree builds nothing."""
    assert TreeBuilder().build([]) is None


def test_build_table_columns_from_children():
    """Test column declarations nested under a table."""
    node = DeclarationNode(
        name="table",
        attrs={"id": "users", "data": [{"name": "a"}], "sort_column": "name"},
        children=[DeclarationNode(name="column", attrs={"key": "name", "header": "Name", "align": "right"})],
    )

    table = TreeBuilder().build_node(node)
    assert isinstance(table, Table)
    assert table.columns == [Column(key="name", header="Name", align="right")]
    assert table.sort_column == "name"


def test_build_table_columns_from_attribute():
    """Test column definitions given as an attribute."""
    node = DeclarationNode(name="table", attrs={"columns": ["id", {"key": "name", "sortable": False}]})

    table = TreeBuilder().build_node(node)
    assert [c.key for c in table.columns] == ["id", "name"]
    assert table.columns[1].sortable is False


def test_build_tabs_with_content():
    """Test tabs each build their own content subtree."""
    document = parse_document({
        "ui": [
            {
                "tabs#main": {
                    "active_tab": "b",
                    "tabs": [
                        {"tab#a": {"label": "A", "children": ["first"]}},
                        {"tab#b": {"label": "B", "children": [{"button#x": {"label": "X"}}]}},
                    ],
                }
            }
        ]
    })

    tabs = build_iur(document)
    assert isinstance(tabs, Tabs)
    assert [tab.id for tab in tabs.tabs] == ["a", "b"]
    assert isinstance(tabs.tabs[0].content[0], Text)
    assert tabs.tabs[1].content[0].label == "X"


def test_build_nested_tree_nodes():
    """Test tree views with arbitrarily deep nodes."""
    document = parse_document({
        "ui": [
            {
                "tree_view#files": {
                    "nodes": [
                        {"tree_node#src": {"label": "src", "nodes": [{"tree_node#pkg": {"label": "pkg", "nodes": [{"tree_node#mod": {"label": "mod.py"}}]}}]}}
                    ]
                }
            }
        ]
    })

    tree = build_iur(document)
    assert isinstance(tree, TreeView)
    (src,) = tree.root_nodes
    (pkg,) = src.children
    (mod,) = pkg.children
    assert mod.label == "mod.py"
    assert mod.children is None


def test_build_menu_from_generic_children():
    """Test menu items given as generic children."""
    node = DeclarationNode(
        name="menu",
        attrs={"id": "m", "title": "File"},
        children=[
            DeclarationNode(name="menu_item", attrs={"id": "open", "label": "Open", "action": "open"}),
            DeclarationNode(name="text", attrs={"id": "ignored"}),
        ],
    )

    menu = TreeBuilder().build_node(node)
    assert [item.id for item in menu.items] == ["open"]
    assert menu.items[0].action == "open"


def test_build_inline_style_override():
    """Test style references with overrides."""
    document = parse_document({
        "styles": {"base": {"fg": "white", "attrs": ["bold"]}},
        "ui": [{"text#t": {"content": "hi", "style": ["base", ["fg", "red"]]}}],
    })

    text = build_iur(document)
    assert text.style.fg == "red"
    assert text.style.attrs == ("bold",)


def test_element_metadata():
    """Test metadata always carries the common keys."""
    meta = Button(id="b", label="Go").metadata()

    assert meta["type"] == "button"
    assert meta["id"] == "b"
    assert meta["visible"] is True
    assert meta["style"] is None
    assert meta["label"] == "Go"


# ============================================================================
# Traversal
# ============================================================================

@pytest.fixture
def tree():
    return VBox(
        id="root",
        children=[
            Text(id="a", content="a"),
            HBox(id="row", children=[Button(id="b"), Button(id="hidden", visible=False)]),
            VBox(id="gone", visible=False, children=[Text(id="deep")]),
        ],
    )


def test_traverse_orders(tree):
    """Test pre, post and both orders."""
    collect = lambda e, acc: [*acc, e.id]

    assert traverse(tree, collect, []) == ["root", "a", "row", "b"]
    assert traverse(tree, collect, [], order="post") == ["a", "b", "row", "root"]
    assert traverse(HBox(id="h", children=[Text(id="t")]), collect, [], order="both") == ["h", "t", "t", "h"]


def test_traverse_bad_order(tree):
    """Test unknown traversal order."""
    with pytest.raises(ValueError):
        traverse(tree, lambda e, acc: acc, None, order="sideways")


def test_hidden_subtrees_skipped(tree):
    """Test hidden elements and their descendants are skipped."""
    assert [e.id for e in iter_elements(tree)] == ["root", "a", "row", "b"]
    assert count_elements(tree) == 4
    assert count_elements(tree, include_hidden=True) == 7


def test_iter_elements_wide_tree():
    """Test a wide tree is collected in order within a linear budget."""
    root = VBox(id="root", children=[Text(id=f"t{i}", content="x") for i in range(20000)])

    started = time.perf_counter()
    elements = iter_elements(root)
    elapsed = time.perf_counter() - started

    assert len(elements) == 20001
    assert elements[0] is root
    assert elements[-1].id == "t19999"
    assert get_all_ids(root)[1:4] == ["t0", "t1", "t2"]
    assert elapsed < 1.0


def test_find_by_id(tree):
    """Test lookup includes hidden elements by default."""
    assert find_by_id(tree, "deep").id == "deep"
    assert find_by_id(tree, "deep", include_hidden=False) is None
    assert find_by_id(None, "a") is None


def test_count_by_type_and_ids(tree):
    """Test aggregate helpers."""
    assert count_by_type(tree) == {"vbox": 1, "text": 1, "hbox": 1, "button": 1}
    assert get_all_ids(tree) == ["root", "a", "row", "b", "hidden", "gone", "deep"]


def test_collect_styles(login_document):
    """Test styles of visible elements are collected."""
    styles = collect_styles(build_iur(login_document))
    assert [style.fg for style in styles] == ["cyan"]


def test_validate_iur():
    """Test structural issues."""
    assert is_successful(validate_iur(VBox(id="v", children=[Text(id="t")])))

    result = validate_iur(VBox(id="v", children=[Text(id="t"), Text(id="t"), TextInput(), HBox(id="empty")]))
    assert result.failure() == ["duplicate_id:t", "missing_id_on_text_input", "empty_layout:empty"]
