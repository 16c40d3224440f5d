"""Style values and named-style resolution."""

from .style import ALIGNMENTS, STYLE_KEYS, TEXT_ATTRS, Style
from .resolver import StyleRef, StyleRefIssue, StyleResolver

__all__ = [
    "ALIGNMENTS",
    "STYLE_KEYS",
    "TEXT_ATTRS",
    "Style",
    "StyleRef",
    "StyleRefIssue",
    "StyleResolver",
]
