"""
Route Table Builder
Extracts the deduplicated interaction bindings of a declared tree.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from ..core import get_logger
from ..declaration.models import DeclarationNode, Document
from ..iur.elements import Element
from ..iur.traversal import iter_elements
from .events import EventKind
from .handlers import ActionHandler, PayloadHandler, handler_key, handler_payload, normalize_handler
from .routes import Route, RouteTable

logger = get_logger(__name__)

# Binding attributes per element kind, in extraction order.
CLICK_BINDINGS: dict[str, tuple[str, ...]] = {
    "button": ("on_click",),
    "menu_item": ("action",),
    "table": ("on_row_select", "on_sort"),
    "tabs": ("on_change",),
    "tree_view": ("on_select", "on_toggle"),
}
CHANGE_BINDINGS: dict[str, tuple[str, ...]] = {"text_input": ("on_change",)}
SUBMIT_BINDINGS: dict[str, tuple[str, ...]] = {"text_input": ("on_submit",)}

Tree = Document | DeclarationNode | Element | Iterable[DeclarationNode]


def extract_routes(tree: Tree) -> RouteTable:
    """
    Build the route table for a declaration tree or an IUR tree.

    Hidden entities and everything beneath them contribute nothing. Within
    each kind, routes sharing a dedup key collapse to the first one found.
    """
    entities = list(iter_entities(tree))

    table = RouteTable(
        click=_collect(entities, EventKind.CLICK, CLICK_BINDINGS),
        change=_collect(entities, EventKind.CHANGE, CHANGE_BINDINGS),
        submit=_collect(entities, EventKind.SUBMIT, SUBMIT_BINDINGS),
    )
    logger.debug(
        "routes_extracted",
        click=len(table.click),
        change=len(table.change),
        submit=len(table.submit),
    )
    return table


def iter_entities(tree: Tree) -> Iterator[DeclarationNode | Element]:
    """Visible declaration nodes or IUR elements of a tree, in pre-order."""
    if isinstance(tree, Element):
        yield from iter_elements(tree)
        return

    if isinstance(tree, Document):
        roots: Iterable[DeclarationNode] = tree.roots
    elif isinstance(tree, DeclarationNode):
        roots = [tree]
    else:
        roots = tree

    for root in roots:
        yield from _walk_declaration(root)


def _walk_declaration(node: DeclarationNode) -> Iterator[DeclarationNode]:
    if not node.is_visual or node.get("visible", True) is False:
        return
    yield node
    for child in node.iter_children():
        yield from _walk_declaration(child)


def entity_kind(entity: DeclarationNode | Element) -> str:
    return entity.name if isinstance(entity, DeclarationNode) else entity.kind


def entity_attr(entity: DeclarationNode | Element, name: str) -> Any:
    if isinstance(entity, DeclarationNode):
        return entity.get(name)
    return getattr(entity, name, None)


def _source(entity: DeclarationNode | Element, kind: EventKind) -> Any:
    # Submit bindings belong to their form group when there is one.
    if kind is EventKind.SUBMIT:
        return entity_attr(entity, "form_id") or entity_attr(entity, "id")
    return entity_attr(entity, "id")


def build_route(kind: EventKind, raw_handler: Any, source: Any) -> Route | None:
    handler = normalize_handler(raw_handler)
    if handler is None:
        return None

    key = handler_key(handler, source)
    if key is None:
        logger.debug("route_without_key_skipped", kind=kind.value, handler=repr(raw_handler))
        return None

    return Route(kind=kind, key=key, handler=handler, payload=handler_payload(handler), source=source)


def _collect(
    entities: list[DeclarationNode | Element],
    kind: EventKind,
    bindings: dict[str, tuple[str, ...]],
) -> tuple[Route, ...]:
    routes: list[Route] = []
    seen: set[Any] = set()

    for entity in entities:
        for attr in bindings.get(entity_kind(entity), ()):
            route = build_route(kind, entity_attr(entity, attr), _source(entity, kind))
            if route is None:
                continue
            if _dedup_key(route) in seen:
                logger.debug("duplicate_route_dropped", kind=kind.value, key=route.key, source=route.source)
                continue
            seen.add(_dedup_key(route))
            routes.append(route)

    return tuple(routes)


def _dedup_key(route: Route) -> tuple[str, Any]:
    """Action names and element ids are separate namespaces."""
    namespace = "action" if isinstance(route.handler, (ActionHandler, PayloadHandler)) else "source"
    try:
        hash(route.key)
    except TypeError:
        return namespace, repr(route.key)
    return namespace, route.key
