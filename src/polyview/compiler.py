"""
UI Compiler
Runs the declaration pipeline: validation, style resolution, IUR building
and route extraction.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .core import LRUCache, fingerprint, get_logger, get_settings
from .core.config import Settings
from .declaration.models import Document
from .declaration.parser import DeclarationParser
from .declaration.validator import DocumentValidator
from .iur.builder import TreeBuilder
from .iur.elements import Element
from .monitoring.metrics import MetricsCollector, metrics_collector
from .monitoring.tracer import trace_operation
from .routing.dispatcher import Dispatcher
from .routing.extractor import extract_routes
from .routing.routes import RouteTable
from .styles import StyleResolver

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompiledUI:
    """Everything the runtime needs from one document."""

    iur: Element | None
    routes: RouteTable
    initial_state: dict[str, Any] = field(default_factory=dict)
    resolver: StyleResolver = field(default_factory=StyleResolver)
    name: str = "untitled"


class UICompiler:
    """
    Compiles declaration documents.

    Compiled results are memoized by a fingerprint of the document, so
    compiling an unchanged document twice is a cache hit.

    Example:
        >>> compiler = UICompiler()
        >>> compiled = compiler.compile(document)
        >>> state = compiler.dispatch(compiled, compiled.initial_state, event)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        dispatcher: Dispatcher | None = None,
        metrics: MetricsCollector | None = None,
        validate: bool = True,
    ) -> None:
        self.settings = settings or get_settings()
        self.metrics = metrics or metrics_collector
        self.dispatcher = dispatcher or Dispatcher(metrics=self.metrics)
        self.validator = DocumentValidator() if validate else None
        self.parser = DeclarationParser()
        self.cache: LRUCache[CompiledUI] | None = (
            LRUCache(max_size=self.settings.cache_size, ttl_seconds=self.settings.cache_ttl)
            if self.settings.enable_cache
            else None
        )

    def compile(self, document: Document | str | bytes | Mapping[str, Any]) -> CompiledUI:
        """
        Compile a document (or raw declaration text/mapping).

        Raises:
            ValidationError: If the document fails validation
            CircularStyleReferenceError: If a used style's inheritance loops
        """
        if not isinstance(document, Document):
            document = self.parser.parse(document)

        key = fingerprint(document.model_dump()) if self.cache is not None else None
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                self.metrics.record_compile("hit")
                logger.debug("compile_cache_hit", document=document.name)
                return cached

        with trace_operation("compile", document=document.name):
            if self.validator is not None:
                self.validator.check(document)

            resolver = StyleResolver(document)
            iur = TreeBuilder(resolver).build(document)
            compiled = CompiledUI(
                iur=iur,
                routes=extract_routes(document),
                initial_state=document.initial_state(),
                resolver=resolver,
                name=document.name,
            )

        if key is not None:
            self.cache.set(key, compiled)
            self.metrics.set_cache_size(len(self.cache))
            self.metrics.record_compile("miss")
        else:
            self.metrics.record_compile("disabled")
        return compiled

    def dispatch(self, compiled: CompiledUI, state: Mapping[str, Any], event: Any) -> Mapping[str, Any]:
        """Apply one event to ``state`` using the compiled routes."""
        return self.dispatcher.dispatch(state, event, compiled.routes)

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()
            self.metrics.set_cache_size(0)
