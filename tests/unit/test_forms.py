"""Tests for form helpers and signal builders."""

import re

import pytest
from returns.pipeline import is_successful

from polyview.declaration import parse_document
from polyview.iur import build_iur
from polyview.routing import (
    CHANGE_EVENT,
    CLICK_EVENT,
    SUBMIT_EVENT,
    EventKind,
    build_form_submit_signal,
    build_signal,
    change_signal,
    click_signal,
    collect_form_data,
    dispatch,
    extract_routes,
    form_input_ids,
    make_signal,
    match_signal,
    submit_signal,
    validate_email,
    validate_form,
    validate_format,
    validate_length,
    validate_payload,
    validate_required,
)


@pytest.fixture
def signup():
    return parse_document({
        "state": {"email": "", "password": "", "submitted": False},
        "ui": [
            {
                "vbox#root": {
                    "children": [
                        {"text_input#email": {"value": "a@b.com", "form_id": "signup"}},
                        {"text_input#password": {"value": "secret", "type": "password", "form_id": "signup"}},
                        {"text_input#search": {"value": "q", "form_id": "search"}},
                        {"text_input#honeypot": {"value": "x", "form_id": "signup", "visible": False}},
                        {"text_input#note": {"value": "n"}},
                        {"button#go": {"@click": ["submit_signup", {"submitted": True}]}},
                    ]
                }
            }
        ],
    })


# ============================================================================
# Form data
# ============================================================================

def test_collect_form_data(signup):
    """Test values of a form's visible inputs, keyed by id."""
    assert collect_form_data(signup, "signup") == {"email": "a@b.com", "password": "secret"}
    assert collect_form_data(signup, "search") == {"search": "q"}
    assert collect_form_data(signup, "missing") == {}


def test_collect_form_data_from_iur(signup):
    """Test the built tree gives the same data as the declaration."""
    assert collect_form_data(build_iur(signup), "signup") == collect_form_data(signup, "signup")


def test_form_input_ids(signup):
    """Test input ids in document order."""
    assert form_input_ids(signup, "signup") == ["email", "password"]
    assert form_input_ids(signup, "missing") == []


def test_build_form_submit_signal():
    """Test the envelope shape and that extras cannot replace form fields."""
    signal = build_form_submit_signal("signup", {"email": "a@b.com"}, {"attempt": 2, "form_id": "other"})

    assert signal.type == SUBMIT_EVENT
    assert signal.data == {"attempt": 2, "form_id": "signup", "data": {"email": "a@b.com"}}


def test_submit_collected_form_end_to_end(signup):
    """Test collecting a form and dispatching its submit signal."""
    login = parse_document({
        "state": {"email": "", "password": ""},
        "ui": [{"text_input#email": {"form_id": "signup", "@submit": "send"}}],
    })
    signal = build_form_submit_signal("signup", collect_form_data(signup, "signup"))

    assert dispatch({"email": "", "password": ""}, signal, extract_routes(login)) == {
        "email": "a@b.com",
        "password": "secret",
    }


# ============================================================================
# Validators
# ============================================================================

def test_validate_required():
    """Test None and empty strings count as missing."""
    assert is_successful(validate_required({"email": "a", "password": "p"}, ["email", "password"]))
    assert validate_required({"email": "a"}, ["email", "password"]).failure() == ["password"]
    assert validate_required({"email": "", "password": None}, ["email", "password"]).failure() == ["email", "password"]
    assert is_successful(validate_required({"count": 0, "flag": False}, ["count", "flag"]))


def test_validate_email():
    """Test the loose email shape."""
    assert is_successful(validate_email({"email": "user@example.com"}, "email"))
    assert validate_email({"email": "invalid"}, "email").failure() == "invalid_format"
    assert validate_email({"email": "@example.com"}, "email").failure() == "invalid_format"
    assert validate_email({"email": "a@b@c.com"}, "email").failure() == "invalid_format"
    assert validate_email({"email": "user@localhost"}, "email").failure() == "invalid_format"
    assert validate_email({"email": 42}, "email").failure() == "invalid_format"
    assert validate_email({}, "email").failure() == "missing"


def test_validate_length():
    """Test bounds, missing values and non-strings."""
    assert is_successful(validate_length({"name": "john_doe"}, "name", 3, 20))
    assert validate_length({"name": "jo"}, "name", 3, 20).failure() == "too_short"
    assert validate_length({"name": "x" * 30}, "name", 3, 10).failure() == "too_long"
    assert is_successful(validate_length({"name": "a" * 100}, "name", 0))
    assert validate_length({}, "name", 1).failure() == "missing"
    assert validate_length({"name": 5}, "name", 1).failure() == "invalid_type"


def test_validate_format():
    """Test string and compiled patterns."""
    assert is_successful(validate_format({"zip": "12345"}, "zip", r"^\d{5}$"))
    assert validate_format({"zip": "ABCDE"}, "zip", r"^\d{5}$").failure() == "invalid_format"
    assert is_successful(validate_format({"user": "John123"}, "user", re.compile(r"^[a-z0-9_]+$", re.IGNORECASE)))
    assert is_successful(validate_format({"code": "ab12cd"}, "code", r"\d+"))
    assert validate_format({}, "zip", r"\d").failure() == "missing"
    assert validate_format({"zip": 12345}, "zip", r"\d").failure() == "invalid_type"


def test_validate_form_reports_all_fields():
    """Test every failing field is reported together."""
    result = validate_form(
        {"email": "bad", "password": "pass"},
        [("required", "email"), ("required", "password"), ("email", "email"), ("length", "password", 8)],
    )

    assert result.failure() == {"email": "invalid_format", "password": "too_short"}


def test_validate_form_first_failure_per_field():
    """Test the first failing rule names a field's reason."""
    result = validate_form({"email": ""}, [("required", "email"), ("email", "email"), ("format", "zip", r"\d")])

    assert result.failure() == {"email": "required", "zip": "missing"}
    assert is_successful(validate_form({"email": "a@b.co"}, [("required", "email"), ("length", "email", 1, 10)]))


def test_validate_form_unknown_rule():
    """Test unknown rule names are programming errors."""
    with pytest.raises(ValueError):
        validate_form({}, [("checksum", "card")])


# ============================================================================
# Signals
# ============================================================================

def test_click_change_submit_signals():
    """Test each builder's type and payload."""
    click = click_signal("save_btn", {"position": [10, 20], "button_id": "ignored"}).unwrap()
    assert click.type == CLICK_EVENT
    assert click.data == {"position": [10, 20], "button_id": "save_btn"}

    change = change_signal("email", "new@example.com", source="/tests").unwrap()
    assert change.type == CHANGE_EVENT
    assert change.data == {"input_id": "email", "value": "new@example.com"}
    assert change.source == "/tests"

    submit = submit_signal("login_form", {"email": "a@b.com"}).unwrap()
    assert submit.type == SUBMIT_EVENT
    assert submit.data == {"email": "a@b.com", "form_id": "login_form"}


def test_built_signals_dispatch():
    """Test built signals route like hand-written events."""
    routes = extract_routes(parse_document({
        "ui": [{"text_input#email": {"form_id": "login_form", "@change": "typed", "@submit": ["send", {"submitted": True}]}}]
    }))
    state = {"email": "", "submitted": False}

    state = dispatch(state, change_signal("email", "a@b.com").unwrap(), routes)
    assert state == {"email": "a@b.com", "submitted": False}

    state = dispatch(state, submit_signal("login_form", {"email": "c@d.com"}).unwrap(), routes)
    assert state == {"email": "c@d.com", "submitted": True}


def test_match_signal():
    """Test matching envelopes and plain events by kind."""
    signal = make_signal("click", button_id="b")

    assert match_signal(signal, EventKind.CLICK)
    assert match_signal(signal, "click")
    assert not match_signal(signal, "change")
    assert match_signal({"type": SUBMIT_EVENT}, "submit")
    assert not match_signal({"type": "ui.window.resized"}, "click")
    assert not match_signal(None, "click")


def test_validate_payload_limits():
    """Test payload bounds."""
    assert is_successful(validate_payload({"button_id": "save"}))
    assert validate_payload(["not", "a", "mapping"]).failure() == "invalid_payload"
    assert validate_payload({"data": "a" * 2000}).failure() == "string_too_long"
    assert validate_payload({"items": ["a" * 2000]}).failure() == "string_too_long"
    assert validate_payload({f"k{i}": "x" * 900 for i in range(12)}).failure() == "payload_too_large"


def test_validate_payload_depth():
    """Test ten nested containers pass and eleven do not."""
    def nested(levels):
        payload = {"leaf": 1}
        for _ in range(levels):
            payload = {"child": payload}
        return payload

    # nested(n) holds n + 1 mappings, so n of them sit below the top level
    assert is_successful(validate_payload(nested(10)))
    assert validate_payload(nested(11)).failure() == "payload_too_deep"


def test_build_signal_validation_optional():
    """Test oversized payloads are rejected unless validation is off."""
    payload = {"data": "a" * 2000}

    assert build_signal("click", payload).failure() == "string_too_long"
    assert build_signal("click", payload, validate=False).unwrap().data == payload
    assert click_signal("b", payload).failure() == "string_too_long"
