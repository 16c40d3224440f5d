"""
Render Coordinator
Fans one IUR tree out to several renderer adapters and reconciles state.

Per-platform failures (unknown platform, adapter exception, timeout) are
contained in the result map. Only when every requested platform fails does
the call itself fail, with a ``RenderFailure`` reason.
"""

import os
import sys
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core import get_logger, get_settings, LogContext
from ..core.config import Settings
from ..core.id import new_render_id
from ..iur.elements import Element
from ..monitoring.metrics import MetricsCollector, metrics_collector
from .protocol import RendererAdapter, RenderResult
from .registry import AdapterRegistry
from .state import RendererState
from .types import Platform, RenderError, RenderFailure

logger = get_logger(__name__)

PlatformKey = Platform | str
MultiRenderResult = dict[PlatformKey, RenderResult]
CoordinatedResult = Result[MultiRenderResult, RenderFailure]

# Modules whose presence means we are serving HTTP.
WEB_MODULES = ("django", "flask", "fastapi", "starlette", "aiohttp.web")
# GUI toolkits whose presence means a desktop app.
DESKTOP_MODULES = ("tkinter", "PyQt5", "PyQt6", "PySide6", "gi", "wx")
DISPLAY_VARS = ("DISPLAY", "WAYLAND_DISPLAY")
DESKTOP_SESSION_VARS = (
    "XDG_CURRENT_DESKTOP",
    "XDG_SESSION_TYPE",
    "GNOME_DESKTOP_SESSION_ID",
    "KDE_FULL_SESSION",
    "SESSION_MANAGER",
)


def deep_merge(left: Mapping[str, Any], right: Mapping[str, Any]) -> dict[str, Any]:
    """Key-wise recursive merge; non-mapping values from ``right`` replace."""
    merged = dict(left)
    for key, value in right.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_states(states: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Fold states left to right, last write wins at every level.

    Examples:
        >>> merge_states([{"count": 1, "nested": {"a": 1}}, {"count": 2, "nested": {"b": 2}}])
        {'count': 2, 'nested': {'a': 1, 'b': 2}}
    """
    merged: dict[str, Any] = {}
    for state in states:
        merged = deep_merge(merged, state)
    return merged


def conflict_resolution(old_state: Mapping[str, Any], new_state: Mapping[str, Any]) -> Mapping[str, Any]:
    """The new state wins unconditionally."""
    return new_state


def _normalize_render_result(result: Any) -> RenderResult:
    # Adapters written outside this package may return a bare state or an
    # ("ok", state) / ("error", reason) pair.
    if isinstance(result, Result):
        if is_successful(result):
            return result
        failure = result.failure()
        return result if isinstance(failure, RenderError) else Failure(RenderError("adapter_error", failure))
    if isinstance(result, RendererState):
        return Success(result)
    if isinstance(result, tuple) and len(result) == 2:
        tag, value = result
        if tag == "ok" and isinstance(value, RendererState):
            return Success(value)
        if tag == "error":
            return Failure(value if isinstance(value, RenderError) else RenderError("adapter_error", value))
    return Failure(RenderError("invalid_result", type(result).__name__))


def _aggregate(results: MultiRenderResult, failure: RenderFailure) -> CoordinatedResult:
    if any(is_successful(result) for result in results.values()):
        return Success(results)
    return Failure(failure)


class RenderCoordinator:
    """
    Multi-platform render coordinator.

    Example:
        >>> coordinator = RenderCoordinator()
        >>> result = coordinator.concurrent_render(iur, [Platform.TERMINAL, Platform.WEB])
        >>> result.unwrap()[Platform.WEB].unwrap().root
        '<div ...>...</div>'
    """

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        settings: Settings | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.registry = registry or AdapterRegistry()
        self.settings = settings or get_settings()
        self.metrics = metrics or metrics_collector

    # Platform detection and selection

    def detect_platform(
        self,
        environ: Mapping[str, str] | None = None,
        modules: Mapping[str, Any] | None = None,
    ) -> Platform:
        """
        Guess the platform of the current process.

        The configured default wins; then a loaded web framework means web;
        a loaded GUI toolkit, a display server or a desktop session means
        desktop; anything else is a terminal.
        """
        configured = Platform.parse(self.settings.default_platform or "")
        if configured is not None:
            return configured

        environ = os.environ if environ is None else environ
        modules = sys.modules if modules is None else modules

        if any(name in modules for name in WEB_MODULES):
            return Platform.WEB
        if any(name in modules for name in DESKTOP_MODULES):
            return Platform.DESKTOP
        if any(environ.get(var) for var in DISPLAY_VARS + DESKTOP_SESSION_VARS):
            return Platform.DESKTOP
        return Platform.TERMINAL

    def is_terminal(self) -> bool:
        return self.detect_platform() is Platform.TERMINAL

    def is_desktop(self) -> bool:
        return self.detect_platform() is Platform.DESKTOP

    def is_web(self) -> bool:
        return self.detect_platform() is Platform.WEB

    def supports_platform(self, platform: PlatformKey) -> bool:
        return platform in self.registry

    def select_renderer(self, platform: PlatformKey) -> Result[RendererAdapter, RenderError]:
        return self.registry.select(platform)

    def select_renderers(self, platforms: Iterable[PlatformKey]) -> Result[list[RendererAdapter], RenderError]:
        """All adapters, or the first platform that has none."""
        adapters = []
        for platform in platforms:
            selected = self.select_renderer(platform)
            if not is_successful(selected):
                return Failure(selected.failure())
            adapters.append(selected.unwrap())
        return Success(adapters)

    def available_renderers(self) -> list[Platform]:
        return self.registry.platforms()

    def enabled_renderers(self) -> list[Platform]:
        enabled = set(self.settings.enabled_platforms)
        return [p for p in self.available_renderers() if p.value in enabled]

    # Rendering

    def render_all(self, iur: Element | None, opts: Mapping[str, Any] | None = None) -> CoordinatedResult:
        """Render on every enabled platform."""
        return self.render_on(iur, self.enabled_renderers(), opts)

    def render_on(
        self, iur: Element | None, platforms: Iterable[PlatformKey], opts: Mapping[str, Any] | None = None
    ) -> CoordinatedResult:
        """Render on each platform in turn."""
        with LogContext(render_id=new_render_id()):
            results: MultiRenderResult = {}
            for platform in platforms:
                results[_key(platform)] = self._render_one(iur, platform, opts)

            outcome = _aggregate(results, RenderFailure.ALL_FAILED)
            self._log_outcome("render_on", results, outcome)
            return outcome

    def concurrent_render(
        self,
        iur: Element | None,
        platforms: Iterable[PlatformKey],
        opts: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> CoordinatedResult:
        """
        Render on all platforms at once, within a shared time budget.

        A platform still running when the budget runs out is recorded as a
        ``timeout`` failure and abandoned; its eventual result is discarded.
        """
        budget = self.settings.render_timeout if timeout is None else timeout
        requested = [_key(p) for p in platforms]
        results: MultiRenderResult = {}

        if not requested:
            return Failure(RenderFailure.ALL_FAILED_OR_TIMEOUT)

        with LogContext(render_id=new_render_id()):
            executor = ThreadPoolExecutor(
                max_workers=len(requested),
                thread_name_prefix="polyview-render",
            )
            try:
                futures: dict[PlatformKey, Future[RenderResult]] = {
                    platform: executor.submit(self._render_one, iur, platform, opts) for platform in requested
                }
                wait(futures.values(), timeout=budget)

                for platform, future in futures.items():
                    if future.done() and not future.cancelled():
                        error = future.exception()
                        if error is None:
                            results[platform] = future.result()
                        else:
                            results[platform] = Failure(RenderError("exception", error))
                    else:
                        future.cancel()
                        logger.warning("render_timeout", platform=_label(platform), timeout=budget)
                        self.metrics.record_render(_label(platform), "timeout", budget)
                        results[platform] = Failure(RenderError("timeout", budget))
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

            outcome = _aggregate(results, RenderFailure.ALL_FAILED_OR_TIMEOUT)
            self._log_outcome("concurrent_render", results, outcome)
            return outcome

    def update_on(
        self,
        iur: Element | None,
        states: Mapping[PlatformKey, RendererState],
        opts: Mapping[str, Any] | None = None,
    ) -> CoordinatedResult:
        """Update each platform's existing state with a new tree."""
        results: MultiRenderResult = {}
        for platform, state in states.items():
            selected = self.select_renderer(platform)
            if not is_successful(selected):
                results[_key(platform)] = Failure(selected.failure())
                continue
            try:
                results[_key(platform)] = _normalize_render_result(selected.unwrap().update(iur, state, opts))
            except KeyboardInterrupt:
                raise
            except BaseException as e:
                logger.warning("update_failed", platform=_label(platform), error=str(e))
                self.metrics.record_error(type(e).__name__, "coordinator")
                results[_key(platform)] = Failure(RenderError("exception", e))

        outcome = _aggregate(results, RenderFailure.ALL_FAILED)
        self._log_outcome("update_on", results, outcome)
        return outcome

    def destroy_all(self, states: Mapping[PlatformKey, RendererState]) -> None:
        """Destroy every state; a failing adapter does not stop the others."""
        for platform, state in states.items():
            adapter = self.registry.get(platform)
            if adapter is None:
                continue
            try:
                adapter.destroy(state)
            except KeyboardInterrupt:
                raise
            except BaseException as e:
                logger.warning("destroy_failed", platform=_label(platform), error=str(e))
                self.metrics.record_error(type(e).__name__, "coordinator")

    def _render_one(self, iur: Element | None, platform: PlatformKey, opts: Mapping[str, Any] | None) -> RenderResult:
        label = _label(platform)
        selected = self.select_renderer(platform)
        if not is_successful(selected):
            logger.warning("invalid_platform", platform=label)
            self.metrics.record_render(label, "invalid_platform", 0.0)
            return Failure(selected.failure())

        start = time.perf_counter()
        try:
            outcome = _normalize_render_result(selected.unwrap().render(iur, opts))
        except KeyboardInterrupt:
            raise
        except BaseException as e:
            logger.warning("render_failed", platform=label, error=str(e), error_type=type(e).__name__)
            self.metrics.record_error(type(e).__name__, "coordinator")
            outcome = Failure(RenderError("exception", e))

        status = "success" if is_successful(outcome) else "failure"
        self.metrics.record_render(label, status, time.perf_counter() - start)
        return outcome

    def _log_outcome(self, operation: str, results: MultiRenderResult, outcome: CoordinatedResult) -> None:
        failed = [_label(p) for p, r in results.items() if not is_successful(r)]
        if is_successful(outcome):
            logger.info(operation, platforms=len(results), failed=failed)
        else:
            logger.error(f"{operation}_failed", reason=outcome.failure().value, failed=failed)

    # State reconciliation

    merge_states = staticmethod(merge_states)
    conflict_resolution = staticmethod(conflict_resolution)

    def sync_state(self, state: Mapping[str, Any], renderer_states: Mapping[PlatformKey, RendererState]) -> None:
        """Hook for a stateful transport; nothing to do in-process."""
        logger.debug("sync_state", platforms=len(renderer_states))

    def broadcast_state(self, state: Mapping[str, Any], renderer_states: Mapping[PlatformKey, RendererState]) -> None:
        """Hook for a stateful transport; nothing to do in-process."""
        logger.debug("broadcast_state", platforms=len(renderer_states))


def _key(platform: PlatformKey) -> PlatformKey:
    return Platform.parse(platform) or platform


def _label(platform: PlatformKey) -> str:
    return platform.value if isinstance(platform, Platform) else str(platform)
