"""Platform-neutral style value."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import InvalidStyleError

STYLE_KEYS = ("fg", "bg", "attrs", "padding", "margin", "width", "height", "align", "spacing")
TEXT_ATTRS = frozenset({"bold", "dim", "italic", "underline", "reverse", "strikethrough"})
ALIGNMENTS = frozenset({"left", "center", "right", "top", "bottom", "start", "end", "stretch"})

Color = str | tuple[int, int, int]
Size = int | str


class Style(BaseModel):
    """
    Flat style attribute set.

    ``attrs`` is an ordered set of text attributes: merging unions it.
    Every other field is scalar: merging lets the more specific side win.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fg: Color | None = None
    bg: Color | None = None
    attrs: tuple[str, ...] = ()
    padding: int | None = None
    margin: int | None = None
    width: Size | None = None
    height: Size | None = None
    align: str | None = None
    spacing: int | None = None

    @field_validator("attrs", mode="before")
    @classmethod
    def normalize_attrs(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = (v,)
        return tuple(dict.fromkeys(v))

    @field_validator("attrs")
    @classmethod
    def validate_attrs(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        unknown = [a for a in v if a not in TEXT_ATTRS]
        if unknown:
            raise ValueError(f"unknown text attributes {unknown}")
        return v

    @field_validator("align")
    @classmethod
    def validate_align(cls, v: str | None) -> str | None:
        if v is not None and v not in ALIGNMENTS:
            raise ValueError(f"unknown alignment {v!r}")
        return v

    @classmethod
    def new(cls, attributes: Mapping[str, Any] | Iterable[Any] | None = None) -> "Style":
        """
        Build a style from a mapping or a sequence of (key, value) pairs.

        Raises:
            InvalidStyleError: On unknown attribute names or invalid values
        """
        values = to_attribute_dict(attributes)
        for key in values:
            if key not in STYLE_KEYS:
                raise InvalidStyleError(field=key)
        try:
            return cls(**values)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first.get("loc") else None
            raise InvalidStyleError(field=field, value=values.get(field, first.get("input"))) from e

    def merge(self, other: "Style | None") -> "Style":
        """Overlay ``other`` on this style. Text attributes are unioned."""
        if other is None:
            return self

        merged: dict[str, Any] = {}
        for key in STYLE_KEYS:
            if key == "attrs":
                merged[key] = tuple(dict.fromkeys(self.attrs + other.attrs))
            else:
                value = getattr(other, key)
                merged[key] = value if value is not None else getattr(self, key)
        return Style(**merged)

    @classmethod
    def merge_many(cls, styles: Iterable["Style | None"]) -> "Style":
        """Fold styles left to right; later ones win."""
        result = cls()
        for style in styles:
            result = result.merge(style)
        return result

    def is_empty(self) -> bool:
        return self == Style()

    def to_dict(self) -> dict[str, Any]:
        """Only the attributes that are set."""
        return {
            key: value
            for key in STYLE_KEYS
            if (value := getattr(self, key)) is not None and value != ()
        }


def is_attribute_pair(item: Any) -> bool:
    """True for a two-part (key, value) pair whose key is a style attribute."""
    return (
        isinstance(item, (tuple, list))
        and len(item) == 2
        and isinstance(item[0], str)
        and item[0] in STYLE_KEYS
    )


def to_attribute_dict(attributes: Mapping[str, Any] | Iterable[Any] | None) -> dict[str, Any]:
    """Normalize a mapping or pair sequence to a dict, later pairs winning."""
    if attributes is None:
        return {}
    if isinstance(attributes, Mapping):
        return dict(attributes)

    values: dict[str, Any] = {}
    for item in attributes:
        if isinstance(item, Mapping):
            values.update(item)
        elif isinstance(item, (tuple, list)) and len(item) == 2 and isinstance(item[0], str):
            values[item[0]] = item[1]
        else:
            raise InvalidStyleError(value=item)
    return values
