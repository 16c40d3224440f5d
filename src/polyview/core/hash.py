"""Fast hashing for cache keys and document fingerprints.

xxhash for speed, SHA256 when a stable cross-language digest is wanted.
"""

import hashlib
from enum import Enum
from typing import Any

import orjson
import xxhash


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"  # Fast, non-cryptographic (cache keys)
    SHA256 = "sha256"


def hash_bytes(data: bytes, algorithm: Algorithm = Algorithm.XXHASH64, truncate: int | None = None) -> str:
    """
    Hash bytes to hex digest.

    Args:
        data: Bytes to hash
        algorithm: Hash algorithm
        truncate: Optional length to truncate digest

    Returns:
        Hex digest string
    """
    if algorithm == Algorithm.XXHASH64:
        digest = xxhash.xxh64(data).hexdigest()
    elif algorithm == Algorithm.SHA256:
        digest = hashlib.sha256(data).hexdigest()
    else:
        raise ValueError(f"Unknown algorithm: {algorithm}")

    return digest[:truncate] if truncate else digest


def hash_string(text: str, algorithm: Algorithm = Algorithm.XXHASH64, truncate: int | None = None) -> str:
    """Hash a string to hex digest."""
    return hash_bytes(text.encode("utf-8"), algorithm, truncate)


def hash_fields(*fields: str, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """
    Hash multiple fields together (deterministic).

    Examples:
        >>> hash_fields("doc", "terminal") == hash_fields("doc", "terminal")
        True
    """
    return hash_string("\x00".join(fields), algorithm)


# orjson encodes integers in [-2**63, 2**64 - 1] natively.
INT_MIN = -(2**63)
INT_MAX = 2**64 - 1


def _widen_ints(obj: Any) -> Any:
    """Replace integers orjson rejects with a tagged decimal string."""
    if isinstance(obj, int) and not isinstance(obj, bool) and not INT_MIN <= obj <= INT_MAX:
        return {"__int__": str(obj)}
    if isinstance(obj, dict):
        return {(str(k) if isinstance(k, int) else k): _widen_ints(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_widen_ints(v) for v in obj]
    return obj


def fingerprint(obj: Any, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """
    Structural fingerprint of a JSON-like object.

    Keys are sorted so equal mappings hash equally regardless of insertion
    order. Values orjson cannot encode (callables, modules) hash by repr;
    integers wider than 64 bits hash by their decimal digits.
    """
    option = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS
    try:
        encoded = orjson.dumps(obj, default=repr, option=option)
    except orjson.JSONEncodeError:
        encoded = orjson.dumps(_widen_ints(obj), default=repr, option=option)
    return hash_bytes(encoded, algorithm)


__all__ = [
    "Algorithm",
    "hash_bytes",
    "hash_string",
    "hash_fields",
    "fingerprint",
]
