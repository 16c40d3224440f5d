"""
Handler Variants
Binding values declared on interactive elements, normalized once into a
closed set of tagged variants.

Accepted declaration shapes:
- ``"save"``: action name
- ``("save", {"dirty": False})`` or ``{"action": "save", "payload": {...}}``:
  action with static payload
- ``{"call": "pkg.module:function", "args": [...]}``,
  ``{"target": "pkg.module", "operation": "function", "args": [...]}``,
  ``(module, "function", [...])`` or a plain callable: external call
"""

import importlib
import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import reduce
from typing import Any

from ..core import get_logger

logger = get_logger(__name__)


class CallSignature(str, Enum):
    """Which leading arguments an external call accepts before its fixed args."""

    STATE_EVENT_ROUTE = "state_event_route"
    STATE_EVENT = "state_event"
    EVENT = "event"
    ARGS = "args"


# Most specific first.
_SIGNATURE_ORDER = (
    (CallSignature.STATE_EVENT_ROUTE, 3),
    (CallSignature.STATE_EVENT, 2),
    (CallSignature.EVENT, 1),
    (CallSignature.ARGS, 0),
)


@dataclass(frozen=True)
class ActionHandler:
    action: str


@dataclass(frozen=True)
class PayloadHandler:
    action: str
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallHandler:
    """
    External call bound to an element.

    ``function`` is None when the target could not be imported or has no
    such operation; ``signature`` is None when no variant binds. Either way
    the handler is kept so dispatch can treat it as a no-op.
    """

    name: str
    function: Callable[..., Any] | None = None
    args: tuple[Any, ...] = ()
    signature: CallSignature | None = None

    @property
    def resolved(self) -> bool:
        return self.function is not None and self.signature is not None

    def call(self, state: Any, event: Any, route: Any) -> Any:
        if self.function is None or self.signature is None:
            raise LookupError(f"Unresolved external call: {self.name}")

        if self.signature is CallSignature.STATE_EVENT_ROUTE:
            return self.function(state, event, route, *self.args)
        if self.signature is CallSignature.STATE_EVENT:
            return self.function(state, event, *self.args)
        if self.signature is CallSignature.EVENT:
            return self.function(event, *self.args)
        return self.function(*self.args)


@dataclass(frozen=True)
class UnknownHandler:
    raw: Any


Handler = ActionHandler | PayloadHandler | CallHandler | UnknownHandler


def normalize_handler(raw: Any) -> Handler | None:
    """Classify a declared binding value. None means no binding."""
    if raw is None:
        return None
    if isinstance(raw, (ActionHandler, PayloadHandler, CallHandler, UnknownHandler)):
        return raw

    if isinstance(raw, str):
        return ActionHandler(raw) if raw else UnknownHandler(raw)

    if isinstance(raw, Mapping):
        return _from_mapping(raw)

    if isinstance(raw, (list, tuple)):
        return _from_sequence(raw)

    if callable(raw):
        return build_call(raw, getattr(raw, "__qualname__", repr(raw)), ())

    return UnknownHandler(raw)


def _from_mapping(raw: Mapping[str, Any]) -> Handler:
    args = raw.get("args", ())
    if not isinstance(args, (list, tuple)):
        return UnknownHandler(raw)

    if "call" in raw:
        path = raw["call"]
        if not isinstance(path, str) or ":" not in path:
            return UnknownHandler(raw)
        module_name, _, operation = path.partition(":")
        return build_call(resolve_target(module_name, operation), path, args)

    if "target" in raw and "operation" in raw:
        target, operation = raw["target"], raw["operation"]
        if not isinstance(operation, str):
            return UnknownHandler(raw)
        return build_call(resolve_target(target, operation), _call_name(target, operation), args)

    if "action" in raw:
        action = raw["action"]
        payload = raw.get("payload")
        if not isinstance(action, str) or not action:
            return UnknownHandler(raw)
        if payload is None:
            return ActionHandler(action)
        if isinstance(payload, Mapping):
            return PayloadHandler(action, dict(payload))

    return UnknownHandler(raw)


def _from_sequence(raw: Sequence[Any]) -> Handler:
    if len(raw) == 2 and isinstance(raw[0], str) and raw[0] and isinstance(raw[1], Mapping):
        return PayloadHandler(raw[0], dict(raw[1]))

    if len(raw) == 3 and isinstance(raw[1], str) and isinstance(raw[2], (list, tuple)):
        target, operation, args = raw
        return build_call(resolve_target(target, operation), _call_name(target, operation), args)

    return UnknownHandler(raw)


def _call_name(target: Any, operation: str) -> str:
    target_name = target if isinstance(target, str) else getattr(target, "__name__", repr(target))
    return f"{target_name}:{operation}"


def resolve_target(target: Any, operation: str) -> Callable[..., Any] | None:
    """
    Look up ``operation`` on a module, class or object.

    A string target is imported as a module; ``operation`` may be dotted
    (``"Handlers.save"``).
    """
    if isinstance(target, str):
        try:
            target = importlib.import_module(target)
        except ImportError as e:
            logger.warning("handler_target_import_failed", target=target, error=str(e))
            return None

    try:
        function = reduce(getattr, operation.split("."), target)
    except AttributeError:
        logger.warning("handler_operation_missing", operation=operation)
        return None
    return function if callable(function) else None


def select_signature(function: Callable[..., Any], args: Sequence[Any]) -> CallSignature | None:
    """Pick the widest call shape ``function`` accepts, given its fixed args."""
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None

    for variant, leading in _SIGNATURE_ORDER:
        try:
            signature.bind(*([None] * leading), *args)
        except TypeError:
            continue
        return variant
    return None


def build_call(function: Callable[..., Any] | None, name: str, args: Sequence[Any]) -> CallHandler:
    args = tuple(args)
    if function is None:
        return CallHandler(name=name, args=args)
    return CallHandler(name=name, function=function, args=args, signature=select_signature(function, args))


def handler_key(handler: Handler, source: Any) -> Any:
    """
    Dedup key of a binding.

    Named actions are keyed by their name; external calls and unknown shapes
    have no intrinsic name and fall back to the originating element id.
    """
    if isinstance(handler, (ActionHandler, PayloadHandler)):
        return handler.action
    return source


def handler_payload(handler: Handler) -> dict[str, Any]:
    if isinstance(handler, PayloadHandler):
        return dict(handler.payload)
    return {}


def is_malformed(handler: Handler) -> bool:
    """True for shapes that can never update state."""
    if isinstance(handler, UnknownHandler):
        return True
    return isinstance(handler, CallHandler) and not handler.resolved
