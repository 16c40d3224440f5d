"""
Event Dispatcher
Matches incoming events against a route table and applies state updates.

Dispatch is synchronous and never raises for runtime failures: unmatched
events, unknown event kinds and failing external calls all leave the state
unchanged (the very same object is returned).
"""

import copy
from collections.abc import Callable, Mapping
from typing import Any

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core import get_logger
from ..monitoring.metrics import MetricsCollector, metrics_collector
from .events import EventKind, event_data, event_kind, event_type
from .handlers import CallHandler
from .routes import Route, RouteTable

logger = get_logger(__name__)

State = Mapping[str, Any]
Fallback = Callable[[State, Any], State]

# Payload fields naming the originating element, highest priority first.
SOURCE_FIELDS = ("widget_id", "button_id", "input_id", "form_id", "id")

# Payload fields naming the route key, per kind, highest priority first.
ROUTE_KEY_FIELDS: dict[EventKind, tuple[str, ...]] = {
    EventKind.CLICK: ("action", "button_id", "widget_id", "id"),
    EventKind.CHANGE: ("input_id", "widget_id", "field", "action", "id"),
    EventKind.SUBMIT: ("form_id", "action", "id"),
}

# Routing metadata stripped from a submit payload that carries no form data.
SUBMIT_METADATA_FIELDS = frozenset(
    {"form_id", "action", "platform", "widget_id", "button_id", "input_id", "id"}
)

# Wrapper tags accepted around a state returned by an external call.
ACCEPTED_RESULT_TAGS = frozenset({"ok", "continue", "noreply"})


def source_keys(data: Mapping[str, Any]) -> list[Any]:
    return [data[f] for f in SOURCE_FIELDS if data.get(f) is not None]


def route_key(kind: EventKind, data: Mapping[str, Any]) -> Any:
    for field_name in ROUTE_KEY_FIELDS[kind]:
        value = data.get(field_name)
        if value is not None:
            return value
    return None


def action_keys(kind: EventKind, data: Mapping[str, Any]) -> list[Any]:
    keys = [route_key(kind, data), data.get("action")]
    return [k for i, k in enumerate(keys) if k is not None and k not in keys[:i]]


def find_matching_route(routes: RouteTable, event: Any, kind: EventKind) -> Route | None:
    """
    Select at most one route.

    Source matches always beat key matches; within a tier the first route
    in table order wins.
    """
    data = event_data(event)
    candidates = routes.for_kind(kind)

    sources = source_keys(data)
    for route in candidates:
        if route.source is not None and route.source in sources:
            return route

    keys = action_keys(kind, data)
    for route in candidates:
        if route.key in keys:
            return route
    return None


def default_updates(kind: EventKind, event: Any, route: Route) -> dict[str, Any]:
    """State changes for a route whose handler is not an external call."""
    updates = dict(route.payload)
    data = event_data(event)

    if kind is EventKind.CHANGE:
        value = data.get("value")
        if route.source is not None and value is not None:
            updates[route.source] = value
    elif kind is EventKind.SUBMIT:
        form_data = data.get("data")
        if isinstance(form_data, Mapping):
            updates.update(form_data)
        else:
            updates.update({k: v for k, v in data.items() if k not in SUBMIT_METADATA_FIELDS})

    return updates


def normalize_call_result(result: Any) -> Result[State, str]:
    """Accept a state-shaped value or a tagged wrapper around one."""
    if isinstance(result, Mapping):
        return Success(result)
    if isinstance(result, tuple) and len(result) == 2:
        tag, value = result
        if isinstance(tag, str) and tag in ACCEPTED_RESULT_TAGS and isinstance(value, Mapping):
            return Success(value)
    if isinstance(result, Result) and is_successful(result):
        return normalize_call_result(result.unwrap())
    return Failure(f"unrecognized result shape: {type(result).__name__}")


def invoke_call(handler: CallHandler, state: State, event: Any, route: Route) -> Result[State, str]:
    """
    Run an external call.

    The call receives a deep copy of the state so a handler that mutates
    its argument and then fails cannot alter the caller's state.
    """
    if not handler.resolved:
        return Failure(f"unresolved external call: {handler.name}")
    try:
        result = handler.call(copy.deepcopy(state), event, route)
    except KeyboardInterrupt:
        raise
    except BaseException as e:
        # SystemExit and GeneratorExit from host code are contained as well.
        logger.warning("handler_raised", handler=handler.name, error=str(e), error_type=type(e).__name__)
        return Failure(f"{type(e).__name__}: {e}")
    return normalize_call_result(result)


class Dispatcher:
    """
    Event dispatcher.

    ``fallbacks`` maps an event kind to a callable ``(state, event) ->
    state`` used when no route matches; ``on_unrecognized`` handles events of
    any other type. Subclasses may override ``unmatched`` and
    ``unrecognized`` instead.

    Example:
        >>> table = extract_routes(document)
        >>> dispatcher = Dispatcher(table)
        >>> state = dispatcher.dispatch(state, {"type": CLICK_EVENT, "data": {"button_id": "save"}})
    """

    def __init__(
        self,
        routes: RouteTable | None = None,
        fallbacks: Mapping[EventKind | str, Fallback] | None = None,
        on_unrecognized: Fallback | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.routes = routes or RouteTable()
        self.fallbacks = {EventKind(k): v for k, v in (fallbacks or {}).items()}
        self.on_unrecognized = on_unrecognized
        self.metrics = metrics or metrics_collector

    def dispatch(self, state: State, event: Any, routes: RouteTable | None = None) -> State:
        """Return the next state for ``event`` (or ``state`` itself if nothing applies)."""
        table = routes if routes is not None else self.routes
        kind = event_kind(event)

        if kind is None:
            self.metrics.record_dispatch("unknown", "ignored")
            logger.debug("event_unrecognized", type=event_type(event))
            return self.unrecognized(state, event)

        route = find_matching_route(table, event, kind)
        if route is None:
            self.metrics.record_dispatch(kind.value, "unmatched")
            logger.debug("event_unmatched", kind=kind.value)
            return self.unmatched(kind, state, event)

        logger.debug("route_matched", kind=kind.value, key=route.key, source=route.source)
        return self.apply(kind, state, event, route)

    def apply(self, kind: EventKind, state: State, event: Any, route: Route) -> State:
        """Apply a matched route."""
        if isinstance(route.handler, CallHandler):
            outcome = invoke_call(route.handler, state, event, route)
            if not is_successful(outcome):
                self.metrics.record_dispatch(kind.value, "rejected")
                self.metrics.record_error("handler_rejected", "dispatcher")
                logger.warning(
                    "handler_result_rejected",
                    kind=kind.value,
                    key=route.key,
                    reason=outcome.failure(),
                )
                return state
            self.metrics.record_dispatch(kind.value, "matched")
            return outcome.unwrap()

        self.metrics.record_dispatch(kind.value, "matched")
        updates = default_updates(kind, event, route)
        if not updates:
            return state
        return {**state, **updates}

    def unmatched(self, kind: EventKind, state: State, event: Any) -> State:
        """No route matched an event of a recognized kind."""
        fallback = self.fallbacks.get(kind)
        if fallback is None:
            return state
        return fallback(state, event)

    def unrecognized(self, state: State, event: Any) -> State:
        """The event's type is not one of the recognized kinds."""
        if self.on_unrecognized is None:
            return state
        return self.on_unrecognized(state, event)


def dispatch(state: State, event: Any, routes: RouteTable) -> State:
    """
    Convenience function to dispatch one event

    Args:
        state: Current application state
        event: Mapping or envelope with ``type`` and ``data``
        routes: Route table to match against

    Returns:
        Next state
    """
    return Dispatcher(routes).dispatch(state, event)
