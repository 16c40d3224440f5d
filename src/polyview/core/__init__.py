"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    PolyviewError,
    ValidationError,
    InvalidStyleError,
    StyleResolutionError,
    CircularStyleReferenceError,
    StateError,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import JSONParseError, loads_object, safe_json_dumps, validate_json_depth
from .hash import Algorithm, hash_string, hash_bytes, hash_fields, fingerprint
from .cache import LRUCache, Stats


def create_container(settings: Settings | None = None, metrics=None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings, metrics)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "PolyviewError",
    "ValidationError",
    "InvalidStyleError",
    "StyleResolutionError",
    "CircularStyleReferenceError",
    "StateError",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "JSONParseError",
    "loads_object",
    "safe_json_dumps",
    "validate_json_depth",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_bytes",
    "hash_fields",
    "fingerprint",
    # Caching
    "LRUCache",
    "Stats",
    # DI
    "create_container",
]
