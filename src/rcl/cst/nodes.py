"""Concrete syntax tree node definitions for RCL.

The tree is a strict ownership tree of frozen dataclasses, so a parsed
tree is immutable and hashable.  Every node has a ``NodeKind`` tag
rather than a class of its own; the grammar's productions map one to one
onto the kinds, and downstream code dispatches on ``node.kind``.

Every leaf of the tree is a ``Token``.  Leaf nodes (identifiers,
literals, operators, trivia) own exactly one token; interior nodes own
their sub-nodes together with the punctuation and keyword tokens their
production consumed.  Named fields point at children the node already
owns, so the field view and the ordered ``children`` never disagree.

All nodes carry a ``Span`` of byte offsets into the encoded source.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from rcl.grammar.tokens import Token


# ---------------------------------------------------------------------------
# Source location
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open byte range ``[start, end)`` within the source buffer.

    Parameters
    ----------
    start:
        0-based byte offset of the first byte.
    end:
        0-based byte offset *past* the last byte.
    line:
        1-based line number of the first character.
    col:
        1-based column number of the first character.
    """

    start: int
    end: int
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Span({self.start}..{self.end} @ {self.line}:{self.col})"

    def __len__(self) -> int:
        return self.end - self.start

    @classmethod
    def of_token(cls, token: Token) -> "Span":
        """Return the span covered by a single token."""
        return cls(start=token.offset, end=token.end, line=token.line, col=token.col)

    def merge(self, other: "Span") -> "Span":
        """Return a span that covers both ``self`` and ``other``."""
        first = self if self.start <= other.start else other
        return Span(
            start=first.start,
            end=max(self.end, other.end),
            line=first.line,
            col=first.col,
        )


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class NodeKind(Enum):
    """Every kind of node the parser can produce.

    The value is the production name used in debug output.
    """

    SOURCE_FILE = "source_file"

    # Trivia
    BLANK = "blank"
    COMMENT = "comment"

    # Leaves
    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    UNOP = "unop"
    BINOP = "binop"

    # Expressions
    EXPR_UNOP = "expr_unop"
    EXPR_BINOP_CHAIN = "expr_binop_chain"
    EXPR_CALL = "expr_call"
    EXPR_INDEX = "expr_index"
    EXPR_FIELD = "expr_field"
    EXPR_TERM_BRACES = "expr_term_braces"
    EXPR_TERM_BRACKETS = "expr_term_brackets"
    EXPR_TERM_PARENS = "expr_term_parens"
    EXPR_STMT = "expr_stmt"

    # Statements
    STMT_LET = "stmt_let"

    # Sequence items
    SEQ_ELEM = "seq_elem"
    SEQ_ASSOC_EXPR = "seq_assoc_expr"
    SEQ_ASSOC_IDENT = "seq_assoc_ident"
    SEQ_STMT = "seq_stmt"
    SEQ_FOR = "seq_for"
    SEQ_IF = "seq_if"


class NumberKind(Enum):
    """Lexical shape of a number literal."""

    BINARY = auto()
    HEXADECIMAL = auto()
    DECIMAL = auto()


LEAF_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.BLANK,
    NodeKind.COMMENT,
    NodeKind.IDENT,
    NodeKind.STRING,
    NodeKind.NUMBER,
    NodeKind.UNOP,
    NodeKind.BINOP,
})

TRIVIA_KINDS: frozenset[NodeKind] = frozenset({NodeKind.BLANK, NodeKind.COMMENT})


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

Child = Union["Node", Token]
FieldValue = Union["Node", Sequence["Node"]]


def span_of(child: Child) -> Span:
    """Return the span of a node or token child."""
    if isinstance(child, Token):
        return Span.of_token(child)
    return child.span


@dataclass(frozen=True, slots=True, eq=False)
class Node:
    """A single CST node.

    Parameters
    ----------
    kind:
        The production this node was built from.
    span:
        Byte range from the first consumed token to the last.
    children:
        Every owned child in document order: sub-nodes, trivia nodes and
        anonymous punctuation/keyword tokens.
    fields:
        ``(name, nodes)`` pairs naming specific children.  Single-valued
        fields hold a one-element tuple.
    number_kind:
        Lexical variant, set only on ``NUMBER`` nodes.
    """

    kind: NodeKind
    span: Span
    children: tuple[Child, ...] = ()
    fields: tuple[tuple[str, tuple["Node", ...]], ...] = ()
    number_kind: NumberKind | None = None

    def __repr__(self) -> str:
        if self.kind in LEAF_KINDS:
            return f"Node({self.kind.value}, {self.value!r}, {self.span.start}..{self.span.end})"
        return f"Node({self.kind.value}, {self.span.start}..{self.span.end})"

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        """Structural equality, compared with an explicit stack so that deep
        trees do not hit the interpreter's recursion limit."""
        if not isinstance(other, Node):
            return NotImplemented
        pending: list[tuple[Node, Node]] = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if left._shape() != right._shape() or left._field_layout() != right._field_layout():
                return False
            for a, b in zip(left.children, right.children):
                if isinstance(a, Node) and isinstance(b, Node):
                    pending.append((a, b))
                elif a != b:
                    return False
        return True

    def __hash__(self) -> int:
        return hash(self._shape())

    def _shape(self) -> tuple[NodeKind, Span, NumberKind | None, int]:
        return (self.kind, self.span, self.number_kind, len(self.children))

    def _field_layout(self) -> tuple[tuple[str, tuple[int, ...]], ...]:
        """Fields as ``(name, child positions)`` pairs."""
        position = {id(child): i for i, child in enumerate(self.children)}
        return tuple((name, tuple(position.get(id(n), -1) for n in nodes)) for name, nodes in self.fields)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        kind: NodeKind,
        children: Sequence[Child],
        fields: Mapping[str, FieldValue] | None = None,
        number_kind: NumberKind | None = None,
    ) -> "Node":
        """Assemble a node whose span runs from its first child to its last.

        Raises
        ------
        ValueError
            If ``children`` is empty or a field names a node that is not
            one of ``children``.
        """
        if not children:
            raise ValueError(f"A {kind.value} node needs at least one child")
        owned = {id(c) for c in children}
        field_items: list[tuple[str, tuple[Node, ...]]] = []
        for name, value in (fields or {}).items():
            nodes = (value,) if isinstance(value, Node) else tuple(value)
            for node in nodes:
                if id(node) not in owned:
                    raise ValueError(f"Field {name!r} of {kind.value} is not an owned child")
            field_items.append((name, nodes))
        first = span_of(children[0])
        span = first.merge(span_of(children[-1]))
        return cls(
            kind=kind,
            span=span,
            children=tuple(children),
            fields=tuple(field_items),
            number_kind=number_kind,
        )

    @classmethod
    def leaf(cls, kind: NodeKind, token: Token, number_kind: NumberKind | None = None) -> "Node":
        """Wrap a single token as a leaf node."""
        return cls(kind=kind, span=Span.of_token(token), children=(token,), number_kind=number_kind)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    @property
    def value(self) -> str | None:
        """Source text of a leaf node; ``None`` for interior nodes."""
        if self.kind in LEAF_KINDS:
            token = self.children[0]
            assert isinstance(token, Token)
            return token.value
        return None

    @property
    def is_trivia(self) -> bool:
        """Return True for blank and comment nodes."""
        return self.kind in TRIVIA_KINDS

    @property
    def named_children(self) -> tuple["Node", ...]:
        """Children that are nodes, excluding anonymous tokens."""
        return tuple(c for c in self.children if isinstance(c, Node))

    @property
    def field_names(self) -> tuple[str, ...]:
        """Names of the fields this node carries, in declaration order."""
        return tuple(name for name, _ in self.fields)

    def children_by_field_name(self, name: str) -> tuple["Node", ...]:
        """Return every child stored under field ``name`` (empty if absent)."""
        for field_name, nodes in self.fields:
            if field_name == name:
                return nodes
        return ()

    def child_by_field_name(self, name: str) -> "Node | None":
        """Return the first child stored under field ``name``, if any."""
        nodes = self.children_by_field_name(name)
        return nodes[0] if nodes else None

    @property
    def operator(self) -> str | None:
        """The operator symbol of a binop chain or unary expression."""
        if self.kind is NodeKind.EXPR_BINOP_CHAIN:
            op = self.child_by_field_name("operator") or self.child_by_field_name("binop")
        elif self.kind is NodeKind.EXPR_UNOP:
            op = self.child_by_field_name("op")
        else:
            return None
        return op.value if op is not None else None

    def walk(self) -> Iterator["Node"]:
        """Yield this node and every descendant node in pre-order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.named_children))

    def iter_tokens(self) -> Iterator[Token]:
        """Yield every leaf token under this node in document order."""
        stack: list[Child] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, Token):
                yield item
            else:
                stack.extend(reversed(item.children))
