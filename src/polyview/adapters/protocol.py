"""
Renderer Adapter Contract
Protocol every render target satisfies, plus a base implementation that
handles traversal, widget registration and diff-aware updates.
"""

from abc import ABC
from collections.abc import Mapping
from typing import Any, ClassVar, Protocol, runtime_checkable

from returns.result import Failure, Result, Success

from ..core import get_logger
from ..iur.elements import Element
from .state import RendererState
from .types import Platform, RenderError

logger = get_logger(__name__)

RenderResult = Result[RendererState, RenderError]


@runtime_checkable
class RendererAdapter(Protocol):
    """The three operations the coordinator depends on."""

    platform: Platform

    def render(self, iur: Element | None, opts: Mapping[str, Any] | None = None) -> RenderResult: ...

    def update(
        self, iur: Element | None, state: RendererState, opts: Mapping[str, Any] | None = None
    ) -> RenderResult: ...

    def destroy(self, state: RendererState) -> None: ...


class BaseRenderer(ABC):
    """
    Abstract base class for renderer adapters.

    Subclasses provide one ``visit_<kind>(element, children)`` method per
    IUR kind. Conversion is bottom-up: each method receives its already
    converted visible children. Hidden elements and their subtrees are never
    converted. Every converted element with an id is registered in the
    state's widget map.
    """

    platform: ClassVar[Platform]

    def render(self, iur: Element | None, opts: Mapping[str, Any] | None = None) -> RenderResult:
        """Convert an IUR tree into a fresh renderer state."""
        state = RendererState.new(self.platform, config=dict(opts or {}))

        widgets: dict[str, Any] = {}
        root = self.convert_iur(iur, widgets) if iur is not None else None
        if root is None:
            return Failure(RenderError("no_root_widget"))

        state = state.model_copy(update={"root": root, "widgets": widgets}).put_metadata("last_iur", iur)
        logger.debug("rendered", platform=self.platform.value, widgets=len(widgets))
        return Success(state)

    def update(
        self, iur: Element | None, state: RendererState, opts: Mapping[str, Any] | None = None
    ) -> RenderResult:
        """
        Re-render against an existing state.

        Returns the same state when neither the tree nor the config changed.
        The version is bumped whenever the root or the config changes.
        """
        if not state.is_platform(self.platform):
            return Failure(RenderError("platform_mismatch", state.platform.value))

        config = {**state.config, **(opts or {})}
        config_changed = config != state.config
        iur_changed = state.get_metadata("last_iur") != iur
        if not (iur_changed or config_changed):
            return Success(state)

        widgets: dict[str, Any] = {}
        root = self.convert_iur(iur, widgets) if iur is not None else None
        if root is None:
            return Failure(RenderError("no_root_widget"))

        root_changed = root != state.root
        updated = state.model_copy(
            update={
                "root": root,
                "widgets": widgets,
                "config": config,
                "metadata": {**state.metadata, "last_iur": iur},
            }
        )
        if root_changed or config_changed:
            updated = updated.bump_version()
        return Success(updated)

    def destroy(self, state: RendererState) -> None:
        """Release platform resources. Pure-data renderers hold none."""
        logger.debug("destroyed", platform=self.platform.value, version=state.version)

    def convert_iur(self, element: Element, widgets: dict[str, Any]) -> Any:
        if not element.visible:
            return None

        children = []
        for child in element.child_elements():
            converted = self.convert_iur(child, widgets)
            if converted is not None:
                children.append(converted)

        node = self.convert_element(element, children)
        if node is not None and element.id is not None:
            widgets[element.id] = node
        return node

    def convert_element(self, element: Element, children: list[Any]) -> Any:
        visitor = getattr(self, f"visit_{element.kind}", None)
        if visitor is None:
            logger.debug("unsupported_element", platform=self.platform.value, kind=element.kind)
            return None
        return visitor(element, children)
