"""Declaration Parser - JSON documents to declaration trees."""

from collections.abc import Mapping
from typing import Any

from ..core import get_logger
from ..core.errors import ValidationError
from ..core.json import JSONParseError, loads_object, validate_json_depth
from .models import CHILD_COLLECTIONS, DeclarationNode, Document, StyleNode

logger = get_logger(__name__)

LAYOUT_SHORTCUTS = {"row": "hbox", "col": "vbox", "column_layout": "vbox"}

# Nodes whose click binding is named 'action' rather than 'on_click'.
ACTION_BOUND = frozenset({"menu_item"})


class DeclarationParser:
    """Parses declaration documents into a ``Document``."""

    def __init__(self) -> None:
        self._id_counter = 0

    def parse(self, content: str | bytes | Mapping[str, Any]) -> Document:
        """
        Parse a declaration document.

        Args:
            content: JSON text or an already-decoded mapping

        Returns:
            Document with UI roots and named styles

        Raises:
            ValidationError: If the document is malformed
        """
        self._id_counter = 0

        if isinstance(content, (str, bytes)):
            try:
                doc = loads_object(content)
                validate_json_depth(doc)
            except JSONParseError as e:
                logger.error("json_parse_failed", error=str(e))
                raise ValidationError(f"Invalid declaration JSON: {e}", entity="document") from e
        elif isinstance(content, Mapping):
            doc = dict(content)
        else:
            raise ValidationError(
                f"Expected JSON text or mapping, got {type(content).__name__}", entity="document"
            )

        app = doc.get("app") or {}
        if not isinstance(app, Mapping):
            raise ValidationError("'app' section must be an object", entity="document", path=("app",))

        roots: list[DeclarationNode] = []
        state = doc.get("state")
        if state:
            if not isinstance(state, Mapping):
                raise ValidationError("'state' section must be an object", entity="state", path=("state",))
            roots.append(DeclarationNode(name="state", attrs=dict(state), location="state"))

        roots.extend(self._expand_ui(doc.get("ui", [])))
        styles = self._expand_styles(doc.get("styles", {}))

        logger.debug("document_parsed", roots=len(roots), styles=len(styles))
        return Document(name=app.get("name", "untitled"), roots=roots, styles=styles)

    def _expand_styles(self, styles: Any) -> list[StyleNode]:
        """
        Expand style declarations.

        Supports:
        - Mapping form: {header: {extends: base, fg: cyan}}
        - List form: [{name: header, extends: base, attributes: {fg: cyan}}]
        """
        result = []

        if isinstance(styles, Mapping):
            for name, body in styles.items():
                body = dict(body or {})
                extends = body.pop("extends", None)
                result.append(
                    StyleNode(name=name, extends=extends, attributes=body, location=f"styles/{name}")
                )
        elif isinstance(styles, list):
            for index, body in enumerate(styles):
                if not isinstance(body, Mapping) or "name" not in body:
                    raise ValidationError(
                        "Style declaration requires a 'name'", entity="style", path=("styles", index)
                    )
                result.append(
                    StyleNode(
                        name=body["name"],
                        extends=body.get("extends"),
                        attributes=dict(body.get("attributes", {})),
                        location=f"styles[{index}]",
                    )
                )
        elif styles:
            raise ValidationError("'styles' must be an object or a list", entity="document", path=("styles",))

        return result

    def _expand_ui(self, ui: Any) -> list[DeclarationNode]:
        if isinstance(ui, Mapping):
            ui = ui.get("components", [])
        if not isinstance(ui, list):
            raise ValidationError("'ui' must be a list of components", entity="document", path=("ui",))
        return self._expand_components(ui, "ui")

    def _expand_components(self, components: list[Any], path: str) -> list[DeclarationNode]:
        """Recursively expand component list"""
        result = []
        for index, comp in enumerate(components):
            node = self._expand_component(comp, f"{path}[{index}]")
            if node is not None:
                result.append(node)
        return result

    def _next_id(self, kind: str) -> str:
        comp_id = f"{kind}-{self._id_counter}"
        self._id_counter += 1
        return comp_id

    def _expand_component(self, comp: Any, path: str) -> DeclarationNode | None:
        """
        Expand a single component.

        Formats:
        - Bare string: "Hello" -> text node with that content
        - Explicit: {type: button, id: save, attrs: {...}, on_event: {...}, children: [...]}
        - Compact: {"button#save": {label: Save, "@click": save, children: [...]}}
        """
        if isinstance(comp, str):
            return DeclarationNode(
                name="text", attrs={"id": self._next_id("text"), "content": comp}, location=path
            )

        if not isinstance(comp, Mapping):
            logger.warning("component_skipped", path=path, type=type(comp).__name__)
            return None

        if "type" in comp:
            attrs = dict(comp.get("attrs") or comp.get("props") or {})
            if comp.get("id") is not None:
                attrs["id"] = comp["id"]
            if comp.get("style") is not None:
                attrs["style"] = comp["style"]
            return self._build_node(
                comp["type"], attrs, dict(comp.get("on_event") or {}), comp, path
            )

        if len(comp) != 1:
            raise ValidationError(
                "Compact component must have exactly one 'type#id' key", entity="component", path=(path,)
            )

        key, body = next(iter(comp.items()))
        body = dict(body) if isinstance(body, Mapping) else {}
        kind, _, comp_id = key.partition("#")

        attrs: dict[str, Any] = {}
        events: dict[str, Any] = {}
        collections: dict[str, Any] = {}
        for k, v in body.items():
            if k.startswith("@"):
                events[k[1:]] = v
            elif k in CHILD_COLLECTIONS:
                collections[k] = v
            else:
                attrs[k] = v
        if comp_id:
            attrs["id"] = comp_id

        return self._build_node(kind, attrs, events, collections, path)

    def _build_node(
        self,
        kind: str,
        attrs: dict[str, Any],
        events: dict[str, Any],
        collections: Mapping[str, Any],
        path: str,
    ) -> DeclarationNode:
        if kind in LAYOUT_SHORTCUTS:
            kind = LAYOUT_SHORTCUTS[kind]

        if "id" not in attrs:
            attrs["id"] = self._next_id(kind)

        for event, handler in events.items():
            if event == "click" and kind in ACTION_BOUND:
                attrs["action"] = handler
            else:
                attrs[f"on_{event}"] = handler

        expanded = {
            key: self._expand_components(list(collections.get(key) or []), f"{path}/{key}")
            for key in CHILD_COLLECTIONS
        }
        return DeclarationNode(name=kind, attrs=attrs, location=path, **expanded)


def parse_document(content: str | bytes | Mapping[str, Any]) -> Document:
    """
    Convenience function to parse a declaration document

    Args:
        content: JSON text or mapping

    Returns:
        Document
    """
    return DeclarationParser().parse(content)
