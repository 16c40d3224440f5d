"""
Adapter Type Definitions
Platforms and render failure values
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Platform(str, Enum):
    """Render targets known to the coordinator."""

    TERMINAL = "terminal"
    DESKTOP = "desktop"
    WEB = "web"

    @classmethod
    def parse(cls, value: "Platform | str") -> "Platform | None":
        """The platform for ``value``, or None if it names no known platform."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class RenderError:
    """
    Why one platform failed (for Result pattern).

    Reasons used by the coordinator: ``invalid_platform``, ``exception``,
    ``timeout`` and ``invalid_result``. Adapters may supply their own.
    """

    reason: str
    detail: Any = None


class RenderFailure(str, Enum):
    """Aggregate failure when no requested platform succeeded."""

    ALL_FAILED = "all_renderers_failed"
    ALL_FAILED_OR_TIMEOUT = "all_renderers_failed_or_timeout"
