"""Exception hierarchy for declaration-time and resolve-time failures.

Runtime dispatch and render failures never raise; they are reported as
``returns`` containers instead (see ``routing.dispatcher`` and
``adapters.coordinator``).
"""

from typing import Any, Sequence


class PolyviewError(Exception):
    """Base class for all polyview errors."""

    pass


class ValidationError(PolyviewError):
    """Declaration failed validation.

    Carries enough structure for an actionable message: the entity kind,
    its declared identifier, the path from the document root and the
    source location when the front end recorded one.
    """

    def __init__(
        self,
        message: str,
        entity: str | None = None,
        identifier: Any = None,
        path: Sequence[Any] = (),
        location: str | None = None,
    ) -> None:
        self.reason = message
        self.entity = entity
        self.identifier = identifier
        self.path = tuple(path)
        self.location = location
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.reason]
        if self.entity is not None:
            target = self.entity if self.identifier is None else f"{self.entity} {self.identifier!r}"
            parts.append(f"in {target}")
        if self.path:
            parts.append("at " + "/".join(str(p) for p in self.path))
        if self.location:
            parts.append(f"({self.location})")
        return " ".join(parts)


class InvalidStyleError(ValidationError):
    """Unknown style attribute name or invalid attribute value."""

    def __init__(self, field: str | None = None, value: Any = None, **kwargs: Any) -> None:
        self.field = field
        self.value = value
        if field is None:
            message = "Invalid style attribute"
        elif value is None:
            message = f"Invalid style field: {field!r}"
        else:
            message = f"Invalid style value for {field!r}: {value!r}"
        super().__init__(message, entity=kwargs.pop("entity", "style"), **kwargs)


class StyleResolutionError(PolyviewError):
    """Style graph could not be resolved."""

    pass


class CircularStyleReferenceError(StyleResolutionError):
    """Style inheritance loops back on itself."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = list(chain)
        rendered = " -> ".join(self.chain)
        super().__init__(
            f"Circular style reference detected: {rendered}. "
            "Remove the 'extends' from one of the styles in the chain."
        )


class StateError(PolyviewError):
    """Renderer state lookup failed."""

    def __init__(self, reason: str, id: Any = None) -> None:
        self.reason = reason
        self.id = id
        if reason == "no_root_widget":
            message = "No root widget set in renderer state"
        elif reason == "widget_not_found" and id is not None:
            message = f"No widget found for ID {id!r}"
        elif reason == "widget_not_found":
            message = "No widget found for the given ID"
        else:
            message = f"Renderer state error: {reason!r}"
        super().__init__(message)
