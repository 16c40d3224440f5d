"""
Form Helpers
Forms are implicit groups of text inputs sharing a ``form_id``. Helpers here
collect their values, build submit envelopes and validate submitted data.

Validators return ``Result``: ``Success(None)`` when the data passes, or a
``Failure`` naming what is wrong.

Example:
    >>> data = collect_form_data(document, "login")
    >>> result = validate_form(data, [("required", "email"), ("email", "email")])
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core import get_logger
from .events import SUBMIT_EVENT, Signal
from .extractor import Tree, entity_attr, entity_kind, iter_entities

logger = get_logger(__name__)

FORM_INPUT_KIND = "text_input"

# Failure reasons for a single field
REQUIRED = "required"
MISSING = "missing"
INVALID_FORMAT = "invalid_format"
INVALID_TYPE = "invalid_type"
TOO_SHORT = "too_short"
TOO_LONG = "too_long"


def _form_inputs(tree: Tree, form_id: str) -> Iterable[Any]:
    for entity in iter_entities(tree):
        if entity_kind(entity) == FORM_INPUT_KIND and entity_attr(entity, "form_id") == form_id:
            yield entity


def collect_form_data(tree: Tree, form_id: str) -> dict[str, Any]:
    """
    Current value of every visible input in a form, keyed by input id.

    Works over a document, declaration nodes or a built IUR tree. Inputs
    without an id are skipped.
    """
    return {
        entity_attr(entity, "id"): entity_attr(entity, "value")
        for entity in _form_inputs(tree, form_id)
        if entity_attr(entity, "id") is not None
    }


def form_input_ids(tree: Tree, form_id: str) -> list[str]:
    """Ids of a form's visible inputs, in document order."""
    return [
        entity_attr(entity, "id") for entity in _form_inputs(tree, form_id) if entity_attr(entity, "id") is not None
    ]


def build_form_submit_signal(form_id: str, data: Mapping[str, Any], extra: Mapping[str, Any] | None = None) -> Signal:
    """
    Submit envelope carrying form data under ``data``.

    ``extra`` fields sit beside ``form_id`` and ``data`` and may not
    replace them.
    """
    payload = {**(extra or {}), "form_id": form_id, "data": dict(data)}
    return Signal(type=SUBMIT_EVENT, data=payload)


# Validators


def _blank(value: Any) -> bool:
    return value is None or value == ""


def validate_required(form_data: Mapping[str, Any], fields: Sequence[str]) -> Result[None, list[str]]:
    """Fail with the fields that are absent, None or empty strings."""
    missing = [f for f in fields if _blank(form_data.get(f))]
    if missing:
        return Failure(missing)
    return Success(None)


def _valid_email(value: str) -> bool:
    parts = value.split("@")
    if len(parts) != 2:
        return False
    local, domain = parts
    return bool(local) and "." in domain


def validate_email(form_data: Mapping[str, Any], field: str) -> Result[None, str]:
    """
    Loose email shape: one ``@`` with text before it and a dot after it.

    Returns:
        Failure(``missing``) when absent, Failure(``invalid_format``) otherwise
    """
    value = form_data.get(field)
    if value is None:
        return Failure(MISSING)
    if not isinstance(value, str) or not _valid_email(value):
        return Failure(INVALID_FORMAT)
    return Success(None)


def validate_length(
    form_data: Mapping[str, Any], field: str, min_length: int = 0, max_length: int | None = None
) -> Result[None, str]:
    """Bound a string field's length; ``max_length=None`` means unbounded."""
    value = form_data.get(field)
    if value is None:
        return Failure(MISSING)
    if not isinstance(value, str):
        return Failure(INVALID_TYPE)
    if len(value) < min_length:
        return Failure(TOO_SHORT)
    if max_length is not None and len(value) > max_length:
        return Failure(TOO_LONG)
    return Success(None)


def validate_format(form_data: Mapping[str, Any], field: str, pattern: str | re.Pattern[str]) -> Result[None, str]:
    """Pass when ``pattern`` is found anywhere in the field; anchor it to match whole values."""
    value = form_data.get(field)
    if value is None:
        return Failure(MISSING)
    if not isinstance(value, str):
        return Failure(INVALID_TYPE)
    if re.search(pattern, value) is None:
        return Failure(INVALID_FORMAT)
    return Success(None)


def _run(form_data: Mapping[str, Any], rule: Sequence[Any]) -> tuple[str, Result[None, Any]]:
    name, field, *args = rule
    if name == "required":
        result = validate_required(form_data, [field])
        return field, result if is_successful(result) else Failure(REQUIRED)
    if name == "email":
        return field, validate_email(form_data, field, *args)
    if name == "length":
        return field, validate_length(form_data, field, *args)
    if name == "format":
        return field, validate_format(form_data, field, *args)
    raise ValueError(f"Unknown form validation: {name!r}")


def validate_form(form_data: Mapping[str, Any], rules: Iterable[Sequence[Any]]) -> Result[None, dict[str, str]]:
    """
    Run every rule and report all failing fields at once.

    Rules are tuples: ``("required", field)``, ``("email", field)``,
    ``("length", field, min[, max])`` and ``("format", field, pattern)``.
    The first failing rule for a field sets its reason.

    Raises:
        ValueError: For an unknown rule name
    """
    errors: dict[str, str] = {}
    for rule in rules:
        field, result = _run(form_data, rule)
        if not is_successful(result) and field not in errors:
            errors[field] = result.failure()

    if errors:
        logger.debug("form_invalid", fields=sorted(errors))
        return Failure(errors)
    return Success(None)


__all__ = [
    "collect_form_data",
    "form_input_ids",
    "build_form_submit_signal",
    "validate_required",
    "validate_email",
    "validate_length",
    "validate_format",
    "validate_form",
]
