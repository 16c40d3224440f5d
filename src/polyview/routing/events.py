"""
Event Envelopes
The three recognized interaction event kinds and the shapes the dispatcher
accepts for them.
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core.id import SignalID, new_signal_id


class EventKind(str, Enum):
    """Interaction kinds a route can bind."""

    CLICK = "click"
    CHANGE = "change"
    SUBMIT = "submit"


CLICK_EVENT = "ui.button.clicked"
CHANGE_EVENT = "ui.input.changed"
SUBMIT_EVENT = "ui.form.submitted"

EVENT_TYPES: dict[str, EventKind] = {
    CLICK_EVENT: EventKind.CLICK,
    CHANGE_EVENT: EventKind.CHANGE,
    SUBMIT_EVENT: EventKind.SUBMIT,
}

EVENT_TYPE_FOR_KIND: dict[EventKind, str] = {kind: type_ for type_, kind in EVENT_TYPES.items()}

# Limits on payloads of built signals
MAX_PAYLOAD_SIZE = 10_000  # Approximate bytes
MAX_PAYLOAD_DEPTH = 10  # Containers nested below the payload itself
MAX_STRING_LENGTH = 1_000


class Signal(BaseModel):
    """
    Rich event envelope.

    Transports may attach identity, origin and time; the dispatcher only
    ever reads ``type`` and ``data``.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    id: SignalID = Field(default_factory=new_signal_id)
    source: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def kind(self) -> EventKind | None:
        return EVENT_TYPES.get(self.type)


def make_signal(kind: EventKind | str, source: str | None = None, **data: Any) -> Signal:
    """Build an envelope for one of the recognized kinds."""
    return Signal(type=EVENT_TYPE_FOR_KIND[EventKind(kind)], data=data, source=source)


def event_type(event: Any) -> str | None:
    """``type`` of a plain mapping or an envelope object."""
    if isinstance(event, Mapping):
        value = event.get("type")
    else:
        value = getattr(event, "type", None)
    return value if isinstance(value, str) else None


def event_data(event: Any) -> Mapping[str, Any]:
    """``data`` payload, or an empty mapping when absent or not a mapping."""
    if isinstance(event, Mapping):
        data = event.get("data")
    else:
        data = getattr(event, "data", None)
    return data if isinstance(data, Mapping) else {}


def event_kind(event: Any) -> EventKind | None:
    type_ = event_type(event)
    return EVENT_TYPES.get(type_) if type_ is not None else None


def match_signal(event: Any, kind: EventKind | str) -> bool:
    """True when ``event`` is of the given kind."""
    return event_kind(event) is EventKind(kind)


# Payload checks


def _children(value: Any) -> Iterable[Any] | None:
    if isinstance(value, Mapping):
        return value.values()
    if isinstance(value, (list, tuple)):
        return value
    return None


def payload_size(value: Any) -> int:
    """Approximate encoded size of a payload value in bytes."""
    if isinstance(value, str):
        return len(value.encode("utf-8")) + 10
    if isinstance(value, (bool, int, float, Enum)):
        return 20
    children = _children(value)
    if children is not None:
        return sum(payload_size(child) for child in children)
    return 10


def _too_deep(value: Any, remaining: int) -> bool:
    children = _children(value)
    if children is None:
        return False
    if remaining < 0:
        return True
    return any(_too_deep(child, remaining - 1) for child in children)


def _strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
        return
    for child in _children(value) or ():
        yield from _strings(child)


def validate_payload(payload: Any) -> Result[None, str]:
    """
    Bound a payload before it travels in a signal.

    Failures are ``invalid_payload`` (not a mapping), ``payload_too_deep``,
    ``payload_too_large`` and ``string_too_long``, checked in that order.
    """
    if not isinstance(payload, Mapping):
        return Failure("invalid_payload")
    if _too_deep(payload, MAX_PAYLOAD_DEPTH):
        return Failure("payload_too_deep")
    if payload_size(payload) > MAX_PAYLOAD_SIZE:
        return Failure("payload_too_large")
    if any(len(s) > MAX_STRING_LENGTH for s in _strings(payload)):
        return Failure("string_too_long")
    return Success(None)


# Signal builders


def build_signal(
    kind: EventKind | str,
    payload: Mapping[str, Any] | None = None,
    source: str | None = None,
    validate: bool = True,
) -> Result[Signal, str]:
    """
    Envelope for a widget event, with the payload checked first.

    Example:
        >>> build_signal("click", {"button_id": "save"}).unwrap().type
        'ui.button.clicked'
    """
    data = dict(payload or {})
    if validate:
        checked = validate_payload(data)
        if not is_successful(checked):
            return Failure(checked.failure())
    return Success(Signal(type=EVENT_TYPE_FOR_KIND[EventKind(kind)], data=data, source=source))


def click_signal(
    button_id: str, extra: Mapping[str, Any] | None = None, source: str | None = None, validate: bool = True
) -> Result[Signal, str]:
    return build_signal(EventKind.CLICK, {**(extra or {}), "button_id": button_id}, source, validate)


def change_signal(
    input_id: str,
    value: Any,
    extra: Mapping[str, Any] | None = None,
    source: str | None = None,
    validate: bool = True,
) -> Result[Signal, str]:
    return build_signal(EventKind.CHANGE, {**(extra or {}), "input_id": input_id, "value": value}, source, validate)


def submit_signal(
    form_id: str, form_data: Mapping[str, Any] | None = None, source: str | None = None, validate: bool = True
) -> Result[Signal, str]:
    """Submit envelope with the form fields inline beside ``form_id``."""
    return build_signal(EventKind.SUBMIT, {**(form_data or {}), "form_id": form_id}, source, validate)
