"""
polyview
Declarative UI compiler and multi-platform rendering runtime.
"""

from .adapters import Platform, RenderCoordinator, RendererState, RenderError, RenderFailure, merge_states
from .compiler import CompiledUI, UICompiler
from .declaration import Document, DeclarationNode, StyleNode, parse_document
from .iur import TreeBuilder, build_iur
from .routing import Dispatcher, EventKind, Signal, dispatch, extract_routes, make_signal
from .styles import Style, StyleResolver

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Declarations
    "Document",
    "DeclarationNode",
    "StyleNode",
    "parse_document",
    # Styles
    "Style",
    "StyleResolver",
    # IUR
    "TreeBuilder",
    "build_iur",
    # Routing
    "EventKind",
    "Signal",
    "make_signal",
    "extract_routes",
    "Dispatcher",
    "dispatch",
    # Rendering
    "Platform",
    "RendererState",
    "RenderError",
    "RenderFailure",
    "RenderCoordinator",
    "merge_states",
    # Compiler
    "CompiledUI",
    "UICompiler",
]
