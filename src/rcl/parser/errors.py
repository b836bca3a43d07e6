"""Parse error types for the RCL parser.

All parse errors carry source-location information so that the CLI can
display precise, actionable error messages.  Parsing is fail-fast: the
parser raises the first error it meets and never repairs the input.
"""
from __future__ import annotations

from collections.abc import Iterable

from rcl.cst.nodes import Span
from rcl.grammar.tokens import Token, TokenType, describe


class ParseError(Exception):
    """A syntax error at a known location.

    Parameters
    ----------
    message:
        Human-readable description of the error.
    span:
        Source location of the offending token.
    expected:
        Token types that would have been accepted at this position.
    found:
        The token that was encountered, if available.
    """

    def __init__(
        self,
        message: str,
        span: Span,
        expected: Iterable[TokenType] = (),
        found: Token | None = None,
    ) -> None:
        self.message = message
        self.span = span
        self.expected: tuple[TokenType, ...] = tuple(sorted(set(expected), key=lambda t: t.name))
        self.found = found
        super().__init__(str(self))

    @property
    def offset(self) -> int:
        """0-based byte offset of the error."""
        return self.span.start

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def col(self) -> int:
        return self.span.col

    @property
    def found_type(self) -> TokenType | None:
        """The kind of token actually found."""
        return self.found.type if self.found is not None else None

    def __str__(self) -> str:
        loc = f"{self.span.line}:{self.span.col}"
        text = f"{type(self).__name__} at {loc}: {self.message}"
        if self.expected:
            text += f" (expected {', '.join(describe(t) for t in self.expected)}"
            if self.found is not None:
                text += f"; found {describe(self.found.type)}"
            return text + ")"
        if self.found is not None:
            return f"{text} (found {describe(self.found.type)})"
        return text


class UnexpectedToken(ParseError):
    """The parser expected one of a known token set and found something else."""


class AmbiguousOperatorChain(UnexpectedToken):
    """A binary operator differs from the operator its chain started with.

    RCL has no operator precedence, so ``a + b - c`` must be written
    with explicit grouping such as ``(a + b) - c``.
    """

    def __init__(self, chain_operator: Token, found: Token) -> None:
        self.chain_operator = chain_operator
        super().__init__(
            f"Operator {found.value!r} cannot follow a {chain_operator.value!r} chain "
            "without parentheses; RCL has no operator precedence",
            Span.of_token(found),
            (chain_operator.type,),
            found,
        )


class UnclosedGroup(ParseError):
    """An opening ``{``, ``[`` or ``(`` has no matching closer before end of input."""

    def __init__(self, opener: Token, closer: TokenType, found: Token) -> None:
        self.opener = opener
        super().__init__(
            f"{opener.value!r} opened at {opener.line}:{opener.col} is never closed",
            Span.of_token(found),
            (closer,),
            found,
        )


class TrailingInput(ParseError):
    """Tokens remain after a complete top-level expression."""


class NestingTooDeep(ParseError):
    """The input nests deeper than the configured limit."""
