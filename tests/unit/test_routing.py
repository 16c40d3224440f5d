"""Tests for handler normalization, route extraction and event dispatch."""

import sys

import pytest
from hypothesis import given, strategies as st
from prometheus_client import CollectorRegistry
from returns.result import Success

from polyview.declaration import DeclarationNode, Document, parse_document
from polyview.iur import Button, TextInput, VBox, build_iur
from polyview.monitoring.metrics import MetricsCollector
from polyview.routing import (
    CHANGE_EVENT,
    CLICK_EVENT,
    SUBMIT_EVENT,
    ActionHandler,
    CallHandler,
    CallSignature,
    Dispatcher,
    EventKind,
    PayloadHandler,
    Route,
    RouteTable,
    UnknownHandler,
    dispatch,
    event_kind,
    extract_routes,
    find_matching_route,
    is_malformed,
    make_signal,
    normalize_handler,
)
from polyview.routing.handlers import select_signature

this_module = sys.modules[__name__]


# ============================================================================
# External call targets
# ============================================================================

def full_handler(state, event, route, amount):
    return {**state, "count": state.get("count", 0) + amount, "route": route.key}


def state_event_handler(state, event):
    return ("ok", {**state, "seen": event["data"].get("button_id")})


def event_only_handler(event):
    return {"only": event["type"]}


def no_args_handler():
    return ("continue", {"reset": True})


def raising_handler(state, event):
    state["count"] = 999
    raise RuntimeError("boom")


def exiting_handler(state, event):
    sys.exit(1)


def bad_shape_handler(state, event):
    return 42


def result_handler(state, event):
    return Success({**state, "via": "returns"})


class Handlers:
    @staticmethod
    def save(state, event):
        return {**state, "saved": True}


def click(**data):
    return {"type": CLICK_EVENT, "data": data}


@pytest.fixture
def dispatcher():
    return Dispatcher(metrics=MetricsCollector(registry=CollectorRegistry()))


# ============================================================================
# Handler normalization
# ============================================================================

def test_normalize_action_and_payload():
    """Test atom and pair shapes."""
    assert normalize_handler("save") == ActionHandler("save")
    assert normalize_handler(["save", {"dirty": False}]) == PayloadHandler("save", {"dirty": False})
    assert normalize_handler({"action": "save", "payload": {"n": 1}}) == PayloadHandler("save", {"n": 1})
    assert normalize_handler({"action": "save"}) == ActionHandler("save")
    assert normalize_handler(None) is None


def test_normalize_external_calls():
    """Test every external call shape."""
    by_path = normalize_handler({"call": "json:dumps", "args": []})
    assert isinstance(by_path, CallHandler)
    assert by_path.resolved
    assert by_path.name == "json:dumps"

    by_target = normalize_handler({"target": this_module, "operation": "Handlers.save"})
    assert by_target.function is Handlers.save
    assert by_target.signature is CallSignature.STATE_EVENT

    by_tuple = normalize_handler((this_module, "full_handler", [5]))
    assert by_tuple.args == (5,)
    assert by_tuple.signature is CallSignature.STATE_EVENT_ROUTE

    assert normalize_handler(event_only_handler).signature is CallSignature.EVENT


def test_normalize_unknown_shapes():
    """Test shapes that are never valid."""
    assert isinstance(normalize_handler(""), UnknownHandler)
    assert isinstance(normalize_handler(42), UnknownHandler)
    assert isinstance(normalize_handler({"call": "missing_colon"}), UnknownHandler)
    assert isinstance(normalize_handler(["a", "b", "c", "d"]), UnknownHandler)


def test_unresolved_call_is_malformed():
    """Test missing modules and operations keep a placeholder."""
    missing_module = normalize_handler({"call": "polyview_no_such_module:fn"})
    missing_operation = normalize_handler({"target": "json", "operation": "nope"})

    for handler in (missing_module, missing_operation):
        assert isinstance(handler, CallHandler)
        assert not handler.resolved
        assert is_malformed(handler)


def test_select_signature_widest_first():
    """Test signature selection by arity."""
    assert select_signature(full_handler, [1]) is CallSignature.STATE_EVENT_ROUTE
    assert select_signature(state_event_handler, []) is CallSignature.STATE_EVENT
    assert select_signature(no_args_handler, []) is CallSignature.ARGS
    assert select_signature(no_args_handler, [1]) is None


# ============================================================================
# Route extraction
# ============================================================================

def test_extract_login_routes(login_document):
    """Test click and submit routes of the login form."""
    table = extract_routes(login_document)

    (click_route,) = table.click
    assert click_route.key == "submit_login"
    assert click_route.source == "go"

    (submit_route,) = table.submit
    assert submit_route.key == "submit_login"
    assert submit_route.source == "login_form"
    assert submit_route.payload == {"submitted": True}
    assert table.change == ()


def test_extract_all_click_bindings():
    """Test every click-producing attribute."""
    document = parse_document({
        "ui": [
            {
                "vbox#root": {
                    "children": [
                        {"button#b": {"@click": "press"}},
                        {"menu#m": {"items": [{"menu_item#mi": {"@click": "open"}}]}},
                        {"table#t": {"@row_select": "pick", "@sort": "sort"}},
                        {"tabs#tabs": {"@change": "switch"}},
                        {"tree_view#tv": {"@select": "choose", "@toggle": "fold"}},
                    ]
                }
            }
        ]
    })

    table = extract_routes(document)
    assert table.keys(EventKind.CLICK) == ["press", "open", "pick", "sort", "switch", "choose", "fold"]


def test_extract_change_and_submit_fallback():
    """Test change routes and submit source falling back to the input id."""
    document = parse_document({"ui": [{"text_input#name": {"@change": "typed", "@submit": "send"}}]})

    table = extract_routes(document)
    assert table.find_by_key("change", "typed").source == "name"
    assert table.find_by_key("submit", "send").source == "name"


def test_external_call_keyed_by_source():
    """Test external calls take the element id as key."""
    node = DeclarationNode(name="button", attrs={"id": "inc", "on_click": (this_module, "full_handler", [1])})

    (route,) = extract_routes(node).click
    assert route.key == "inc"
    assert isinstance(route.handler, CallHandler)


def test_dedup_first_wins():
    """Test routes sharing a key collapse to the first."""
    document = parse_document({
        "ui": [{"hbox#row": {"children": [{"button#a": {"@click": "go"}}, {"button#b": {"@click": ["go", {"x": 1}]}}]}}]
    })

    (route,) = extract_routes(document).click
    assert route.source == "a"
    assert route.payload == {}


def test_dedup_separates_action_names_from_element_ids(dispatcher):
    """Test an external call on element "save" and an action named "save" both survive."""
    node = DeclarationNode(name="vbox", attrs={"id": "root"}, children=[
        DeclarationNode(name="button", attrs={"id": "save", "on_click": (this_module, "full_handler", [1])}),
        DeclarationNode(name="button", attrs={"id": "b", "on_click": ["save", {"saved": True}]}),
    ])
    routes = extract_routes(node)

    call_route, action_route = routes.click
    assert (call_route.key, call_route.source) == ("save", "save")
    assert isinstance(call_route.handler, CallHandler)
    assert (action_route.key, action_route.source) == ("save", "b")
    assert isinstance(action_route.handler, PayloadHandler)

    state = {"count": 1}
    assert dispatcher.dispatch(state, click(button_id="b"), routes) == {"count": 1, "saved": True}
    assert dispatcher.dispatch(state, click(button_id="save"), routes) == {"count": 2, "route": "save"}


def test_hidden_nodes_contribute_no_routes():
    """Test invisible subtrees are skipped."""
    document = parse_document({
        "ui": [{"vbox#root": {"children": [{"vbox#hidden": {"visible": False, "children": [{"button#b": {"@click": "go"}}]}}]}}]
    })

    assert len(extract_routes(document)) == 0


def test_extract_from_iur(login_document):
    """Test extraction over the IUR gives the same table."""
    assert extract_routes(build_iur(login_document)) == extract_routes(login_document)


@st.composite
def button_trees(draw):
    actions = st.sampled_from(["save", "load", "quit", "help"])
    handlers = st.one_of(actions, st.tuples(actions, st.just({"n": 1})).map(list), st.none())
    count = draw(st.integers(min_value=0, max_value=12))
    buttons = [
        DeclarationNode(name="button", attrs={"id": f"b{i}", "on_click": draw(handlers)}) for i in range(count)
    ]
    inputs = [
        DeclarationNode(name="text_input", attrs={"id": f"i{i}", "on_change": draw(actions), "form_id": draw(st.sampled_from(["f1", "f2", None])), "on_submit": draw(actions)})
        for i in range(draw(st.integers(min_value=0, max_value=6)))
    ]
    return Document(roots=[DeclarationNode(name="vbox", attrs={"id": "root"}, children=buttons + inputs)])


@given(button_trees())
def test_dedup_keys_unique(document):
    """Property: no two routes of one kind share a dedup key."""
    table = extract_routes(document)

    for kind in EventKind:
        keys = table.keys(kind)
        assert len(keys) == len(set(keys))


# ============================================================================
# Route matching
# ============================================================================

def test_source_match_beats_key_match():
    """Test a source match wins over an earlier key match."""
    by_key = Route(kind=EventKind.CLICK, key="save", handler=ActionHandler("save"), payload={"by": "key"}, source="other")
    by_source = Route(kind=EventKind.CLICK, key="load", handler=ActionHandler("load"), payload={"by": "source"}, source="btn")
    table = RouteTable(click=(by_key, by_source))

    event = click(widget_id="btn", action="save")
    assert find_matching_route(table, event, EventKind.CLICK) is by_source
    assert dispatch({}, event, table) == {"by": "source"}


def test_key_match_uses_kind_primary_field():
    """Test each kind's primary key field."""
    route = Route(kind=EventKind.CHANGE, key="email", handler=ActionHandler("email"), source=None)
    table = RouteTable(change=(route,))

    assert find_matching_route(table, {"type": CHANGE_EVENT, "data": {"input_id": "email"}}, EventKind.CHANGE) is route
    assert find_matching_route(table, {"type": CHANGE_EVENT, "data": {"field": "email"}}, EventKind.CHANGE) is route
    assert find_matching_route(table, {"type": CHANGE_EVENT, "data": {"action": "email"}}, EventKind.CHANGE) is route
    assert find_matching_route(table, {"type": CHANGE_EVENT, "data": {}}, EventKind.CHANGE) is None


# ============================================================================
# Dispatch
# ============================================================================

def test_login_submit_end_to_end(login_document):
    """Test the declared form submit yields the merged state."""
    routes = extract_routes(login_document)
    event = {"type": SUBMIT_EVENT, "data": {"form_id": "login_form", "data": {"email": "a@b.com"}}}

    assert dispatch({}, event, routes) == {"submitted": True, "email": "a@b.com"}


def test_submit_without_form_data_strips_metadata():
    """Test submit payload minus routing fields."""
    route = Route(kind=EventKind.SUBMIT, key="send", handler=ActionHandler("send"), source="f")
    event = {"type": SUBMIT_EVENT, "data": {"form_id": "f", "platform": "web", "name": "Ada", "age": 36}}

    assert dispatch({}, event, RouteTable(submit=(route,))) == {"name": "Ada", "age": 36}


def test_change_writes_value_under_source():
    """Test change events store the value under the route source."""
    routes = extract_routes(parse_document({"ui": [{"text_input#email": {"@change": "typed"}}]}))
    event = make_signal(EventKind.CHANGE, input_id="email", value="a@b")

    assert dispatch({"email": ""}, event, routes) == {"email": "a@b"}


def test_signal_envelope_accepted(login_document):
    """Test rich envelopes dispatch like plain mappings."""
    signal = make_signal("click", source="web", button_id="go")

    assert signal.kind is EventKind.CLICK
    assert event_kind(signal) is EventKind.CLICK
    assert dispatch({}, signal, extract_routes(login_document)) == {}


def test_unchanged_state_is_same_object(dispatcher, login_document):
    """Test no-op dispatches return the very same state."""
    routes = extract_routes(login_document)
    state = {"count": 1}

    assert dispatcher.dispatch(state, click(button_id="go"), routes) is state
    assert dispatcher.dispatch(state, click(button_id="nothing"), routes) is state
    assert dispatcher.dispatch(state, {"type": "ui.window.resized", "data": {}}, routes) is state
    assert dispatcher.dispatch(state, {"no": "type"}, routes) is state


def test_external_call_signatures(dispatcher):
    """Test each call shape receives the right arguments."""
    def route_for(raw, source):
        node = DeclarationNode(name="button", attrs={"id": source, "on_click": raw})
        return extract_routes(node)

    state = {"count": 1}
    assert dispatcher.dispatch(state, click(button_id="a"), route_for((this_module, "full_handler", [2]), "a")) == {
        "count": 3,
        "route": "a",
    }
    assert dispatcher.dispatch(state, click(button_id="b"), route_for(state_event_handler, "b")) == {
        "count": 1,
        "seen": "b",
    }
    assert dispatcher.dispatch(state, click(button_id="c"), route_for(event_only_handler, "c")) == {"only": CLICK_EVENT}
    assert dispatcher.dispatch(state, click(button_id="d"), route_for(no_args_handler, "d")) == {"reset": True}
    assert dispatcher.dispatch(state, click(button_id="e"), route_for(result_handler, "e")) == {
        "count": 1,
        "via": "returns",
    }


def test_raising_handler_leaves_state_unchanged(dispatcher):
    """Test a handler that mutates its argument and raises."""
    routes = extract_routes(DeclarationNode(name="button", attrs={"id": "x", "on_click": raising_handler}))
    state = {"count": 1, "nested": {"a": [1, 2]}}
    snapshot = {"count": 1, "nested": {"a": [1, 2]}}

    result = dispatcher.dispatch(state, click(button_id="x"), routes)
    assert result is state
    assert state == snapshot


def test_exiting_handler_contained(dispatcher):
    """Test a handler calling sys.exit does not escape dispatch."""
    routes = extract_routes(DeclarationNode(name="button", attrs={"id": "quit", "on_click": (this_module, "exiting_handler", [])}))
    state = {"count": 1}

    assert dispatcher.dispatch(state, click(button_id="quit"), routes) is state


def test_bad_result_and_unresolved_calls_rejected(dispatcher):
    """Test unrecognized results and unresolved targets keep the state."""
    state = {"count": 1}
    bad = extract_routes(DeclarationNode(name="button", attrs={"id": "x", "on_click": bad_shape_handler}))
    missing = extract_routes(DeclarationNode(name="button", attrs={"id": "y", "on_click": {"call": "json:nope"}}))

    assert dispatcher.dispatch(state, click(button_id="x"), bad) is state
    assert dispatcher.dispatch(state, click(button_id="y"), missing) is state


def test_fallback_overrides(login_document):
    """Test host overrides for unmatched and unrecognized events."""
    dispatcher = Dispatcher(
        extract_routes(login_document),
        fallbacks={"click": lambda state, event: {**state, "unmatched": True}},
        on_unrecognized=lambda state, event: {**state, "ignored": event_kind(event)},
        metrics=MetricsCollector(registry=CollectorRegistry()),
    )

    assert dispatcher.dispatch({}, click(button_id="nope")) == {"unmatched": True}
    assert dispatcher.dispatch({}, {"type": "custom", "data": {}}) == {"ignored": None}


def test_dispatch_metrics():
    """Test dispatch outcomes are counted."""
    registry = CollectorRegistry()
    dispatcher = Dispatcher(metrics=MetricsCollector(registry=registry))

    dispatcher.dispatch({}, click(button_id="nope"))
    dispatcher.dispatch({}, {"type": "custom"})

    assert registry.get_sample_value("polyview_dispatch_total", {"kind": "click", "outcome": "unmatched"}) == 1.0
    assert registry.get_sample_value("polyview_dispatch_total", {"kind": "unknown", "outcome": "ignored"}) == 1.0


def test_subclass_overrides_unmatched():
    """Test the unmatched hook can be overridden by subclassing."""
    class CountingDispatcher(Dispatcher):
        def unmatched(self, kind, state, event):
            return {**state, "misses": state.get("misses", 0) + 1}

    dispatcher = CountingDispatcher(metrics=MetricsCollector(registry=CollectorRegistry()))
    assert dispatcher.dispatch({"misses": 1}, click(id="x")) == {"misses": 2}


def test_iur_routes_from_elements():
    """Test routes over typed elements."""
    root = VBox(id="root", children=[Button(id="b", on_click="go"), TextInput(id="i", on_change="typed")])

    table = extract_routes(root)
    assert table.keys("click") == ["go"]
    assert table.keys("change") == ["typed"]
