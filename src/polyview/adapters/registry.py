"""
Adapter Registry
Platform to renderer lookup table
"""

from returns.result import Failure, Result, Success

from ..core import get_logger
from .desktop import DesktopRenderer
from .protocol import RendererAdapter
from .terminal import TerminalRenderer
from .types import Platform, RenderError
from .web import WebRenderer

logger = get_logger(__name__)


class AdapterRegistry:
    """
    Registry of renderer adapters, one per platform.

    Starts with the built-in terminal, desktop and web renderers; hosts may
    replace any of them.
    """

    def __init__(self, adapters: dict[Platform, RendererAdapter] | None = None) -> None:
        if adapters is None:
            adapters = {
                Platform.TERMINAL: TerminalRenderer(),
                Platform.DESKTOP: DesktopRenderer(),
                Platform.WEB: WebRenderer(),
            }
        self._adapters: dict[Platform, RendererAdapter] = dict(adapters)

    def register(self, platform: Platform | str, adapter: RendererAdapter) -> None:
        """Register (or replace) the adapter for a platform."""
        resolved = Platform(platform)
        if resolved in self._adapters:
            logger.info("adapter_replaced", platform=resolved.value, adapter=type(adapter).__name__)
        self._adapters[resolved] = adapter

    def unregister(self, platform: Platform | str) -> None:
        resolved = Platform.parse(platform)
        if resolved is not None:
            self._adapters.pop(resolved, None)

    def get(self, platform: Platform | str) -> RendererAdapter | None:
        resolved = Platform.parse(platform)
        return self._adapters.get(resolved) if resolved is not None else None

    def select(self, platform: Platform | str) -> Result[RendererAdapter, RenderError]:
        adapter = self.get(platform)
        if adapter is None:
            return Failure(RenderError("invalid_platform", platform))
        return Success(adapter)

    def platforms(self) -> list[Platform]:
        return list(self._adapters)

    def __contains__(self, platform: object) -> bool:
        return isinstance(platform, (Platform, str)) and self.get(platform) is not None

    def __len__(self) -> int:
        return len(self._adapters)
