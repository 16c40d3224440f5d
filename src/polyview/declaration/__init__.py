"""
Declaration front end
Converts JSON documents to declaration trees
"""

from .models import CHILD_COLLECTIONS, NON_VISUAL_NODES, DeclarationNode, Document, StyleNode
from .parser import DeclarationParser, parse_document

__all__ = [
    "CHILD_COLLECTIONS",
    "NON_VISUAL_NODES",
    "DeclarationNode",
    "Document",
    "StyleNode",
    "DeclarationParser",
    "parse_document",
]
