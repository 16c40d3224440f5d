"""
Renderer State
Immutable per-adapter state: root widget, widget registry and version.

Every operation returns a new state; the adapter that created a state is its
only writer.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from returns.result import Failure, Result, Success

from ..core.errors import StateError
from .types import Platform


class RendererState(BaseModel):
    """State held by one renderer adapter."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    platform: Platform
    root: Any = None
    widgets: dict[str, Any] = Field(default_factory=dict)
    version: int = Field(default=1, ge=1)
    config: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def new(
        cls,
        platform: Platform | str,
        config: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "RendererState":
        return cls(platform=Platform(platform), config=dict(config or {}), metadata=dict(metadata or {}))

    # Root

    def put_root(self, root: Any) -> "RendererState":
        return self.model_copy(update={"root": root})

    def get_root(self) -> Result[Any, StateError]:
        if self.root is None:
            return Failure(StateError("no_root_widget"))
        return Success(self.root)

    def get_root_or_raise(self) -> Any:
        """
        Raises:
            StateError: If no root has been set
        """
        if self.root is None:
            raise StateError("no_root_widget")
        return self.root

    # Widgets

    def put_widget(self, widget_id: str, widget: Any) -> "RendererState":
        return self.model_copy(update={"widgets": {**self.widgets, widget_id: widget}})

    def get_widget(self, widget_id: str) -> Result[Any, StateError]:
        if widget_id not in self.widgets:
            return Failure(StateError("widget_not_found", widget_id))
        return Success(self.widgets[widget_id])

    def delete_widget(self, widget_id: str) -> "RendererState":
        if widget_id not in self.widgets:
            return self
        widgets = {k: v for k, v in self.widgets.items() if k != widget_id}
        return self.model_copy(update={"widgets": widgets})

    def has_widget(self, widget_id: str) -> bool:
        return widget_id in self.widgets

    def widget_ids(self) -> list[str]:
        return list(self.widgets)

    def widget_count(self) -> int:
        return len(self.widgets)

    # Version

    def bump_version(self) -> "RendererState":
        return self.model_copy(update={"version": self.version + 1})

    # Config and metadata

    def get_config(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def put_config(self, key: str, value: Any) -> "RendererState":
        return self.model_copy(update={"config": {**self.config, key: value}})

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def put_metadata(self, key: str, value: Any) -> "RendererState":
        return self.model_copy(update={"metadata": {**self.metadata, key: value}})

    def is_platform(self, platform: Platform | str) -> bool:
        return self.platform == Platform.parse(platform)
