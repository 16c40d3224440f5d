"""
Declaration Validation
Compile-time checks over a parsed document.

Every problem is reported as a ``ValidationError`` carrying the node kind,
its declared id, the path from the document root and the source location.
"""

from collections.abc import Iterator
from typing import Any

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core import get_logger
from ..core.errors import CircularStyleReferenceError, InvalidStyleError, ValidationError
from ..routing.extractor import CHANGE_BINDINGS, CLICK_BINDINGS, SUBMIT_BINDINGS
from ..routing.handlers import PayloadHandler, is_malformed, normalize_handler
from ..styles import Style, StyleResolver
from .models import DeclarationNode, Document

logger = get_logger(__name__)

Path = tuple[str, ...]


def _binding_attrs(kind: str) -> tuple[str, ...]:
    attrs: list[str] = []
    for table in (CLICK_BINDINGS, CHANGE_BINDINGS, SUBMIT_BINDINGS):
        attrs.extend(a for a in table.get(kind, ()) if a not in attrs)
    return tuple(attrs)


def _walk(document: Document) -> Iterator[tuple[DeclarationNode, Path]]:
    def visit(node: DeclarationNode, path: Path) -> Iterator[tuple[DeclarationNode, Path]]:
        yield node, path
        for key in ("children", "items", "columns", "tabs", "nodes"):
            for index, child in enumerate(node.collection(key)):
                yield from visit(child, (*path, f"{key}[{index}]"))

    for index, root in enumerate(document.roots):
        if root.is_visual:
            yield from visit(root, (f"ui[{index}]",))


class DocumentValidator:
    """
    Validates declaration documents before compilation.

    Example:
        >>> result = DocumentValidator().validate(document)
        >>> if not is_successful(result):
        ...     for error in result.failure():
        ...         print(error)
    """

    def validate(self, document: Document) -> Result[None, list[ValidationError]]:
        """Run every check and collect all problems."""
        errors: list[ValidationError] = []
        nodes = list(_walk(document))
        resolver = StyleResolver(document)

        errors.extend(self._check_styles(document, resolver))
        errors.extend(self._check_ids(nodes))
        errors.extend(self._check_label_targets(nodes))
        errors.extend(self._check_style_refs(nodes, resolver))
        errors.extend(self._check_handlers(nodes, document))

        if errors:
            logger.info("document_invalid", document=document.name, errors=len(errors))
            return Failure(errors)
        return Success(None)

    def check(self, document: Document) -> None:
        """
        Raises:
            ValidationError: The first problem found
        """
        result = self.validate(document)
        if not is_successful(result):
            raise result.failure()[0]

    def _error(self, message: str, node: DeclarationNode, path: Path) -> ValidationError:
        return ValidationError(message, entity=node.name, identifier=node.id, path=path, location=node.location)

    def _check_styles(self, document: Document, resolver: StyleResolver) -> list[ValidationError]:
        errors = []
        for style in document.styles:
            path = ("styles", style.name)
            try:
                Style.new(style.attributes)
            except InvalidStyleError as e:
                errors.append(
                    InvalidStyleError(field=e.field, value=e.value, identifier=style.name, path=path, location=style.location)
                )
                continue
            try:
                resolver.resolve(style.name)
            except CircularStyleReferenceError as e:
                errors.append(
                    ValidationError(
                        f"Circular style reference: {' -> '.join(e.chain)}",
                        entity="style",
                        identifier=style.name,
                        path=path,
                        location=style.location,
                    )
                )
        return errors

    def _check_ids(self, nodes: list[tuple[DeclarationNode, Path]]) -> list[ValidationError]:
        errors = []
        seen: dict[Any, Path] = {}
        for node, path in nodes:
            if node.id is None:
                continue
            if node.id in seen:
                errors.append(
                    self._error(f"Duplicate element id (first declared at {'/'.join(seen[node.id])})", node, path)
                )
            else:
                seen[node.id] = path
        return errors

    def _check_label_targets(self, nodes: list[tuple[DeclarationNode, Path]]) -> list[ValidationError]:
        ids = {node.id for node, _ in nodes if node.id is not None}
        return [
            self._error(f"Label references unknown element {node.get('for')!r}", node, path)
            for node, path in nodes
            if node.name == "label" and node.get("for") is not None and node.get("for") not in ids
        ]

    def _check_style_refs(
        self, nodes: list[tuple[DeclarationNode, Path]], resolver: StyleResolver
    ) -> list[ValidationError]:
        errors = []
        for node, path in nodes:
            ref = node.get("style")
            if ref is None:
                continue

            named = resolver.validate_style_ref(ref)
            if not is_successful(named):
                errors.append(self._error(f"Unknown style {named.failure().name!r}", node, path))
                continue

            try:
                resolver.resolve_style_ref(ref)
            except InvalidStyleError as e:
                errors.append(self._error(str(e.reason), node, path))
            except CircularStyleReferenceError:
                # Reported once per style by _check_styles.
                continue
        return errors

    def _check_handlers(self, nodes: list[tuple[DeclarationNode, Path]], document: Document) -> list[ValidationError]:
        errors = []
        declared_state = document.initial_state() if document.has_state() else None

        for node, path in nodes:
            for attr in _binding_attrs(node.name):
                handler = normalize_handler(node.get(attr))
                if handler is None:
                    continue
                if is_malformed(handler):
                    errors.append(self._error(f"Malformed handler for {attr!r}", node, path))
                    continue
                if declared_state is not None and isinstance(handler, PayloadHandler):
                    unknown = [key for key in handler.payload if key not in declared_state]
                    if unknown:
                        errors.append(
                            self._error(f"Handler for {attr!r} sets undeclared state keys {unknown}", node, path)
                        )
        return errors


def validate_document(document: Document) -> Result[None, list[ValidationError]]:
    """Convenience function to validate a document"""
    return DocumentValidator().validate(document)
