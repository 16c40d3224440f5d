"""
Renderer adapters
Platform renderers and the multi-platform render coordinator
"""

from .types import Platform, RenderError, RenderFailure
from .state import RendererState
from .protocol import BaseRenderer, RendererAdapter, RenderResult
from .terminal import TerminalRenderer
from .desktop import DesktopRenderer
from .web import WebRenderer
from .registry import AdapterRegistry
from .coordinator import RenderCoordinator, conflict_resolution, deep_merge, merge_states

__all__ = [
    # Types
    "Platform",
    "RenderError",
    "RenderFailure",
    "RenderResult",
    "RendererState",
    # Adapters
    "RendererAdapter",
    "BaseRenderer",
    "TerminalRenderer",
    "DesktopRenderer",
    "WebRenderer",
    "AdapterRegistry",
    # Coordination
    "RenderCoordinator",
    "merge_states",
    "deep_merge",
    "conflict_resolution",
]
