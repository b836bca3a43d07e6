"""RCL concrete syntax tree module.

Exports the node types and the text renderings of a tree.
"""
from __future__ import annotations

from rcl.cst.nodes import (
    LEAF_KINDS,
    TRIVIA_KINDS,
    Child,
    Node,
    NodeKind,
    NumberKind,
    Span,
    span_of,
)
from rcl.cst.printer import field_labels, render_source, to_sexp

__all__ = [
    # Core node types
    "Span",
    "Node",
    "Child",
    "span_of",
    # Enums
    "NodeKind",
    "NumberKind",
    "LEAF_KINDS",
    "TRIVIA_KINDS",
    # Printers
    "render_source",
    "to_sexp",
    "field_labels",
]
