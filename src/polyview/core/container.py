"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from ..adapters.coordinator import RenderCoordinator
from ..adapters.registry import AdapterRegistry
from ..compiler import UICompiler
from ..monitoring.metrics import MetricsCollector, metrics_collector
from ..routing.dispatcher import Dispatcher
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None, metrics: MetricsCollector | None = None) -> None:
        self.settings = settings
        self.metrics = metrics

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide runtime settings."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        """Provide the metrics collector (process-wide unless injected)."""
        return self.metrics or metrics_collector

    @singleton
    @provider
    def provide_adapter_registry(self) -> AdapterRegistry:
        """Provide the built-in renderer adapters."""
        return AdapterRegistry()

    @singleton
    @provider
    def provide_coordinator(
        self, registry: AdapterRegistry, settings: Settings, metrics: MetricsCollector
    ) -> RenderCoordinator:
        """Provide render coordinator."""
        return RenderCoordinator(registry=registry, settings=settings, metrics=metrics)

    @singleton
    @provider
    def provide_dispatcher(self, metrics: MetricsCollector) -> Dispatcher:
        """Provide event dispatcher."""
        return Dispatcher(metrics=metrics)

    @singleton
    @provider
    def provide_compiler(self, settings: Settings, dispatcher: Dispatcher, metrics: MetricsCollector) -> UICompiler:
        """Provide UI compiler with all dependencies."""
        return UICompiler(settings=settings, dispatcher=dispatcher, metrics=metrics)


def create_container(settings: Settings | None = None, metrics: MetricsCollector | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings, metrics)])
