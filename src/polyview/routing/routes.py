"""Route and Route Table types."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .events import EventKind
from .handlers import Handler


@dataclass(frozen=True)
class Route:
    """One interaction binding: how a (kind, key/source) maps to a state update."""

    kind: EventKind
    key: Any
    handler: Handler
    payload: dict[str, Any] = field(default_factory=dict)
    source: Any = None


@dataclass(frozen=True)
class RouteTable:
    """Deduplicated routes per event kind, in discovery order."""

    click: tuple[Route, ...] = ()
    change: tuple[Route, ...] = ()
    submit: tuple[Route, ...] = ()

    def for_kind(self, kind: EventKind | str) -> tuple[Route, ...]:
        return getattr(self, EventKind(kind).value)

    def keys(self, kind: EventKind | str) -> list[Any]:
        return [route.key for route in self.for_kind(kind)]

    def find_by_source(self, kind: EventKind | str, source: Any) -> Route | None:
        return next((r for r in self.for_kind(kind) if r.source == source), None)

    def find_by_key(self, kind: EventKind | str, key: Any) -> Route | None:
        return next((r for r in self.for_kind(kind) if r.key == key), None)

    def __iter__(self) -> Iterator[Route]:
        yield from self.click
        yield from self.change
        yield from self.submit

    def __len__(self) -> int:
        return len(self.click) + len(self.change) + len(self.submit)

    def to_dict(self) -> dict[str, list[Route]]:
        return {kind.value: list(self.for_kind(kind)) for kind in EventKind}
