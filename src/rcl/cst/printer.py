"""Text renderings of an RCL concrete syntax tree.

``render_source`` rebuilds the exact source from the tree's leaf tokens.
The tree drops only ordinary whitespace, so the gaps between consecutive
leaf tokens are filled from the original buffer and checked to be pure
whitespace.

``to_sexp`` gives a compact, tree-sitter-like debug rendering::

    (source_file body: (expr_binop_chain operands: (ident "a") binop: (binop "+") ...))
"""
from __future__ import annotations

import json
import re

from rcl.cst.nodes import Node

_ORDINARY_WHITESPACE = re.compile(rb"[ \t\r\n\f]*")


def render_source(tree: Node, source: str | bytes, encoding: str = "utf-8") -> str:
    """Reconstruct the source text of ``tree`` from its leaf tokens.

    Parameters
    ----------
    tree:
        A tree produced by ``rcl.parse`` from ``source``.
    source:
        The buffer the tree was parsed from.
    encoding:
        Encoding used by the parse.

    Returns
    -------
    str
        Text equal to ``source`` when the tree covers it completely.

    Raises
    ------
    ValueError
        If anything other than whitespace lies between two leaf tokens,
        meaning the tree does not account for part of the source.
    """
    buf = source.encode(encoding) if isinstance(source, str) else source
    parts: list[str] = []
    position = 0
    for token in tree.iter_tokens():
        parts.append(_gap(buf, position, token.offset, encoding))
        parts.append(token.value)
        position = token.end
    parts.append(_gap(buf, position, len(buf), encoding))
    return "".join(parts)


def _gap(buf: bytes, start: int, end: int, encoding: str) -> str:
    if start > end:
        raise ValueError(f"Leaf tokens overlap at byte {end}")
    gap = buf[start:end]
    if _ORDINARY_WHITESPACE.fullmatch(gap) is None:
        raise ValueError(f"Bytes {start}..{end} are not covered by the tree: {gap!r}")
    return gap.decode(encoding)


def to_sexp(node: Node) -> str:
    """Render ``node`` as a single-line S-expression of named children.

    Leaf nodes include their text; children stored under a field are
    prefixed with ``name:``.  A child named by more than one field takes
    the first name.  The tree is walked with an explicit stack, so chains
    of any length render.
    """
    parts: list[str] = []
    stack: list[tuple[Node | str, str | None]] = [(node, None)]
    while stack:
        item, label = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        if label:
            parts.append(f"{label}: ")
        if item.value is not None:
            parts.append(f"({item.kind.value} {json.dumps(item.value, ensure_ascii=False)})")
            continue
        parts.append(f"({item.kind.value}")
        labels = field_labels(item)
        stack.append((")", None))
        for child in reversed(item.named_children):
            stack.append((child, labels.get(id(child))))
            stack.append((" ", None))
    return "".join(parts)


def field_labels(node: Node) -> dict[int, str]:
    """Map ``id(child)`` to the first field name that refers to it."""
    labels: dict[int, str] = {}
    for name, children in node.fields:
        for child in children:
            labels.setdefault(id(child), name)
    return labels
