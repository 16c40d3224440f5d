"""
Event routing
Route table extraction, event dispatch and form helpers.
"""

from .events import (
    CHANGE_EVENT,
    CLICK_EVENT,
    EVENT_TYPES,
    SUBMIT_EVENT,
    EventKind,
    Signal,
    build_signal,
    change_signal,
    click_signal,
    event_data,
    event_kind,
    event_type,
    make_signal,
    match_signal,
    submit_signal,
    validate_payload,
)
from .handlers import (
    ActionHandler,
    CallHandler,
    CallSignature,
    Handler,
    PayloadHandler,
    UnknownHandler,
    handler_key,
    is_malformed,
    normalize_handler,
)
from .routes import Route, RouteTable
from .extractor import build_route, extract_routes
from .dispatcher import Dispatcher, dispatch, find_matching_route
from .forms import (
    build_form_submit_signal,
    collect_form_data,
    form_input_ids,
    validate_email,
    validate_form,
    validate_format,
    validate_length,
    validate_required,
)

__all__ = [
    # Events
    "EventKind",
    "Signal",
    "CLICK_EVENT",
    "CHANGE_EVENT",
    "SUBMIT_EVENT",
    "EVENT_TYPES",
    "make_signal",
    "event_type",
    "event_data",
    "event_kind",
    "match_signal",
    "validate_payload",
    "build_signal",
    "click_signal",
    "change_signal",
    "submit_signal",
    # Handlers
    "Handler",
    "ActionHandler",
    "PayloadHandler",
    "CallHandler",
    "CallSignature",
    "UnknownHandler",
    "normalize_handler",
    "handler_key",
    "is_malformed",
    # Routes
    "Route",
    "RouteTable",
    "build_route",
    "extract_routes",
    # Dispatch
    "Dispatcher",
    "dispatch",
    "find_matching_route",
    # Forms
    "collect_form_data",
    "form_input_ids",
    "build_form_submit_signal",
    "validate_required",
    "validate_email",
    "validate_length",
    "validate_format",
    "validate_form",
]
