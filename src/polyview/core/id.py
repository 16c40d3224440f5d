"""ID Generation.

ULID-based identifiers for signal envelopes and render sessions. Prefixes
keep log lines readable (``sig_01J...``, ``render_01J...``).
"""

from datetime import datetime, timezone
from typing import NewType

from ulid import ULID

SignalID = NewType("SignalID", str)
"""Event envelope identifier"""

RenderID = NewType("RenderID", str)
"""Coordinated render call identifier"""


class Prefix:
    """ID prefix constants."""

    SIGNAL = "sig"
    RENDER = "render"


def generate_prefixed(prefix: str) -> str:
    """Generate a ULID with a type prefix."""
    return f"{prefix}_{ULID()}"


def new_signal_id() -> SignalID:
    return SignalID(generate_prefixed(Prefix.SIGNAL))


def new_render_id() -> RenderID:
    return RenderID(generate_prefixed(Prefix.RENDER))


def _ulid_part(id_str: str) -> str:
    return id_str.rsplit("_", 1)[-1]


def is_valid(id_str: str) -> bool:
    """Check if string is a (optionally prefixed) ULID."""
    ulid_part = _ulid_part(id_str)
    if len(ulid_part) != 26:
        return False
    try:
        ULID.from_str(ulid_part)
    except ValueError:
        return False
    return True


def extract_timestamp(id_str: str) -> datetime | None:
    """Extract creation time from a ULID, or None if malformed."""
    if not is_valid(id_str):
        return None
    return ULID.from_str(_ulid_part(id_str)).datetime.astimezone(timezone.utc)


def extract_prefix(id_str: str) -> str | None:
    """Return the type prefix, if any."""
    if "_" not in id_str:
        return None
    return id_str.rsplit("_", 1)[0]
