"""RCL Recursive-Descent Parser.

Converts a flat list of ``Token`` objects into a concrete syntax tree
rooted at a ``SOURCE_FILE`` node.

Trivia
------
``BLANK`` and ``COMMENT`` tokens are significant only at *prefix*
positions: at the start of the file, after a statement's ``;`` or ``=``,
and before sequence items and call arguments.  There they become
``blank``/``comment`` nodes, kept as leading siblings of the node that
follows.  Everywhere else a ``BLANK`` token is ordinary whitespace and
is skipped, while a ``COMMENT`` token is a syntax error.

No precedence
-------------
RCL has no operator precedence.  Every binary operator has a chain
production of its own, ``operand (op operand)+``, where every operator in
the chain is the same symbol and every operand is a postfix expression.
``a + b - c`` is therefore an error, as is ``a + -b``; both need
explicit parentheses.

Errors
------
Parsing is fail-fast: the first error raises a ``ParseError`` subclass
and no partial tree is returned.

Depth
-----
Postfix chains, unary chains and statement chains are parsed with
loops.  Every open group, call argument list, index bracket and nested
``let`` value counts one level, bounded by ``ParserConfig.max_depth``.
Each recursive path passes through one of these, so the bound also caps
the Python stack.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from rcl.config import ParserConfig
from rcl.cst.nodes import Child, FieldValue, Node, NodeKind, NumberKind, Span
from rcl.grammar.tokens import BINARY_OPERATORS, UNARY_OPERATORS, Token, TokenType, describe
from rcl.lexer.lexer import Lexer
from rcl.parser.errors import (
    AmbiguousOperatorChain,
    NestingTooDeep,
    ParseError,
    TrailingInput,
    UnclosedGroup,
    UnexpectedToken,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal tables
# ---------------------------------------------------------------------------

_TERM_START = frozenset({
    TokenType.LBRACE,
    TokenType.LBRACKET,
    TokenType.LPAREN,
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.IDENT,
})
_GROUPS: dict[TokenType, tuple[TokenType, NodeKind]] = {
    TokenType.LBRACE: (TokenType.RBRACE, NodeKind.EXPR_TERM_BRACES),
    TokenType.LBRACKET: (TokenType.RBRACKET, NodeKind.EXPR_TERM_BRACKETS),
    TokenType.LPAREN: (TokenType.RPAREN, NodeKind.EXPR_TERM_PARENS),
}
_CLOSERS: dict[TokenType, TokenType] = {opener: closer for opener, (closer, _) in _GROUPS.items()}

# A comprehension header waiting for its body: (kind, children, fields).
_Header = tuple[NodeKind, list[Child], dict[str, FieldValue]]


def _number_kind(text: str) -> NumberKind:
    if text.startswith("0b"):
        return NumberKind.BINARY
    if text.startswith("0x"):
        return NumberKind.HEXADECIMAL
    return NumberKind.DECIMAL


class Parser:
    """Recursive descent parser that produces a CST from tokens.

    Parameters
    ----------
    tokens:
        The flat token list produced by the lexer, including trivia.
        Must end with the ``EOF`` token.
    config:
        Parser settings; only ``max_depth`` is used here.
    """

    def __init__(self, tokens: list[Token], config: ParserConfig | None = None) -> None:
        if not tokens or tokens[-1].type is not TokenType.EOF:
            raise ValueError("Token list must end with an EOF token")
        self._tokens: list[Token] = tokens
        self._pos: int = 0
        self._depth: int = 0
        self._max_depth: int = (config or ParserConfig()).max_depth
        self._open: list[Token] = []  # unclosed delimiters, innermost last

    # ------------------------------------------------------------------
    # Navigation helpers
    # ------------------------------------------------------------------

    def _significant_index(self, index: int) -> int:
        """Return the index of the first non-BLANK token at or after ``index``."""
        while self._tokens[index].type is TokenType.BLANK:
            index += 1
        return index

    def _current(self) -> Token:
        """Return the current significant token without consuming it."""
        return self._tokens[self._significant_index(self._pos)]

    def _peek(self, offset: int = 1) -> Token:
        """Return the significant token ``offset`` positions ahead without consuming."""
        index = self._significant_index(self._pos)
        for _ in range(offset):
            if self._tokens[index].type is TokenType.EOF:
                break
            index = self._significant_index(index + 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        """Consume and return the current significant token."""
        index = self._significant_index(self._pos)
        tok = self._tokens[index]
        if tok.type is not TokenType.EOF:
            self._pos = index + 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._current().type in types

    def _match(self, *types: TokenType) -> Token | None:
        """Consume and return the current token if it matches; else None."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """Consume the current token if it matches, else raise a ``ParseError``."""
        if self._check(token_type):
            return self._advance()
        raise self._unexpected(message, (token_type,))

    def _expect_closer(self, opener: Token, closer: TokenType, *alternatives: TokenType) -> Token:
        """Consume the closing delimiter of ``opener``."""
        if self._check(closer):
            return self._advance()
        raise self._unexpected(f"Expected {describe(closer)} to close {opener.value!r}", (closer, *alternatives))

    def _unexpected(self, message: str, expected: frozenset[TokenType] | tuple[TokenType, ...]) -> ParseError:
        """Build the error for the current token.

        Running out of input while a delimiter is still open is reported as
        ``UnclosedGroup`` for the innermost one.
        """
        tok = self._current()
        if tok.type is TokenType.EOF and self._open:
            opener = self._open[-1]
            return UnclosedGroup(opener, _CLOSERS[opener.type], tok)
        if tok.is_keyword and TokenType.IDENT in expected:
            message = f"{message}; {tok.value!r} is a reserved word"
        return UnexpectedToken(message, Span.of_token(tok), expected, tok)

    @contextmanager
    def _nested(self, opener: Token | None = None) -> Iterator[None]:
        """Count one level of nesting for the duration of a sub-parse.

        When ``opener`` is given it stays on the open-delimiter stack until
        the block exits.
        """
        if self._depth >= self._max_depth:
            tok = opener if opener is not None else self._current()
            raise NestingTooDeep(
                f"Input nests deeper than the maximum depth of {self._max_depth}",
                Span.of_token(tok),
                (),
                tok,
            )
        self._depth += 1
        if opener is not None:
            self._open.append(opener)
        try:
            yield
        finally:
            self._depth -= 1
            if opener is not None:
                self._open.pop()

    # ------------------------------------------------------------------
    # Trivia
    # ------------------------------------------------------------------

    def _parse_prefix(self) -> list[Node]:
        """Parse: ``{ BLANK | COMMENT }`` at a position that allows trivia."""
        trivia: list[Node] = []
        while True:
            tok = self._tokens[self._pos]
            if tok.type is TokenType.BLANK:
                trivia.append(Node.leaf(NodeKind.BLANK, tok))
            elif tok.type is TokenType.COMMENT:
                trivia.append(Node.leaf(NodeKind.COMMENT, tok))
            else:
                return trivia
            self._pos += 1

    # ------------------------------------------------------------------
    # Top-level parse
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        """Parse the token stream and return the root ``SOURCE_FILE`` node.

        Raises
        ------
        ParseError
            On the first syntax error.
        """
        children: list[Child] = list(self._parse_prefix())
        body = self._parse_expr()
        children.append(body)

        trailing = self._parse_prefix()
        while trailing and trailing[-1].kind is NodeKind.BLANK:
            trailing.pop()
        children.extend(trailing)

        tok = self._current()
        if tok.type is not TokenType.EOF:
            raise TrailingInput(
                "Unexpected input after the end of the expression",
                Span.of_token(tok),
                (TokenType.EOF,),
                tok,
            )
        return Node.build(NodeKind.SOURCE_FILE, children, {"body": body})

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_expr(self) -> Node:
        """Parse: ``{ stmt ';' { prefix } } expr_op``"""
        links: list[tuple[Node, Token, list[Node]]] = []
        while self._check(TokenType.LET):
            stmt = self._parse_stmt()
            semicolon = self._expect(TokenType.SEMICOLON, "Expected ';' after let binding")
            links.append((stmt, semicolon, self._parse_prefix()))

        body = self._parse_expr_op()
        for stmt, semicolon, trivia in reversed(links):
            body = Node.build(
                NodeKind.EXPR_STMT,
                [stmt, semicolon, *trivia, body],
                {"stmt": stmt, "body": body},
            )
        return body

    def _parse_stmt(self) -> Node:
        """Parse: ``'let' IDENT '=' { prefix } expr``"""
        let_tok = self._expect(TokenType.LET, "Expected 'let'")
        ident = self._parse_ident("Expected a name after 'let'")
        assign = self._expect(TokenType.ASSIGN, "Expected '=' after the bound name")
        trivia = self._parse_prefix()
        with self._nested():
            value = self._parse_expr()
        return Node.build(
            NodeKind.STMT_LET,
            [let_tok, ident, assign, *trivia, value],
            {"ident": ident, "value": value},
        )

    def _parse_ident(self, message: str) -> Node:
        tok = self._current()
        if tok.type is not TokenType.IDENT:
            raise self._unexpected(message, (TokenType.IDENT,))
        return Node.leaf(NodeKind.IDENT, self._advance())

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _parse_expr_op(self) -> Node:
        """Parse: ``expr_unop | expr_not_op | binop_chain``"""
        if self._check(*UNARY_OPERATORS):
            return self._parse_unop()
        first = self._parse_not_op()
        if self._check(*BINARY_OPERATORS):
            return self._parse_binop_chain(first)
        return first

    def _parse_unop(self) -> Node:
        """Parse: ``unop { unop } expr_not_op``, nesting right to left."""
        ops: list[Node] = []
        while self._check(*UNARY_OPERATORS):
            ops.append(Node.leaf(NodeKind.UNOP, self._advance()))
        operand = self._parse_not_op()

        tok = self._current()
        if tok.type in BINARY_OPERATORS:
            raise UnexpectedToken(
                f"Operator {tok.value!r} cannot follow a unary expression without parentheses",
                Span.of_token(tok),
                (),
                tok,
            )

        node = operand
        for op in reversed(ops):
            node = Node.build(NodeKind.EXPR_UNOP, [op, node], {"op": op, "operand": node})
        return node

    def _parse_binop_chain(self, first: Node) -> Node:
        """Parse: ``expr_not_op (op expr_not_op)+`` with one operator throughout."""
        chain_op = self._current()
        children: list[Child] = [first]
        operands: list[Node] = [first]
        binops: list[Node] = []
        while self._check(*BINARY_OPERATORS):
            tok = self._current()
            if tok.type is not chain_op.type:
                raise AmbiguousOperatorChain(chain_op, tok)
            binop = Node.leaf(NodeKind.BINOP, self._advance())
            operand = self._parse_operand()
            binops.append(binop)
            operands.append(operand)
            children.extend((binop, operand))
        return Node.build(
            NodeKind.EXPR_BINOP_CHAIN,
            children,
            {"operands": operands, "binop": binops, "operator": binops[0]},
        )

    def _parse_operand(self) -> Node:
        tok = self._current()
        if tok.type in UNARY_OPERATORS:
            raise UnexpectedToken(
                f"Operand of a binary operator cannot start with {tok.value!r}; use parentheses",
                Span.of_token(tok),
                _TERM_START,
                tok,
            )
        return self._parse_not_op()

    # ------------------------------------------------------------------
    # Postfix expressions
    # ------------------------------------------------------------------

    def _parse_not_op(self) -> Node:
        """Parse: ``term { '(' call_args ')' | '[' expr ']' | '.' IDENT }``"""
        node = self._parse_term()
        while True:
            tok = self._current()
            if tok.type is TokenType.LPAREN:
                node = self._parse_call(node)
            elif tok.type is TokenType.LBRACKET:
                node = self._parse_index(node)
            elif tok.type is TokenType.DOT:
                node = self._parse_field(node)
            else:
                return node

    def _parse_call(self, function: Node) -> Node:
        """Parse: ``'(' [ call_args ] ')'`` after ``function``."""
        open_tok = self._advance()
        children: list[Child] = [function, open_tok]
        args: list[Node] = []
        with self._nested(open_tok):
            while True:
                children.extend(self._parse_prefix())
                if self._check(TokenType.RPAREN):
                    break
                arg = self._parse_expr()
                args.append(arg)
                children.append(arg)
                comma = self._match(TokenType.COMMA)
                if comma is None:
                    break
                children.append(comma)
            children.append(self._expect_closer(open_tok, TokenType.RPAREN, TokenType.COMMA))
        return Node.build(NodeKind.EXPR_CALL, children, {"function": function, "args": args})

    def _parse_index(self, collection: Node) -> Node:
        """Parse: ``'[' expr ']'`` after ``collection``."""
        open_tok = self._advance()
        with self._nested(open_tok):
            index = self._parse_expr()
            close_tok = self._expect_closer(open_tok, TokenType.RBRACKET)
        return Node.build(
            NodeKind.EXPR_INDEX,
            [collection, open_tok, index, close_tok],
            {"collection": collection, "index": index},
        )

    def _parse_field(self, inner: Node) -> Node:
        """Parse: ``'.' IDENT`` after ``inner``."""
        dot = self._advance()
        name = self._parse_ident("Expected a field name after '.'")
        return Node.build(NodeKind.EXPR_FIELD, [inner, dot, name], {"inner": inner, "field": name})

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    def _parse_term(self) -> Node:
        """Parse a term: group, string, number, or identifier."""
        tok = self._current()
        if tok.type in _GROUPS:
            return self._parse_group()
        if tok.type is TokenType.STRING:
            return Node.leaf(NodeKind.STRING, self._advance())
        if tok.type is TokenType.NUMBER:
            return Node.leaf(NodeKind.NUMBER, self._advance(), _number_kind(tok.value))
        if tok.type is TokenType.IDENT:
            return Node.leaf(NodeKind.IDENT, self._advance())
        raise self._unexpected("Expected an expression", _TERM_START)

    def _parse_group(self) -> Node:
        """Parse: ``'{' [ seqs ] '}'``, ``'[' [ seqs ] ']'`` or ``'(' [ seqs ] ')'``"""
        open_tok = self._advance()
        closer, kind = _GROUPS[open_tok.type]
        children: list[Child] = [open_tok]
        items: list[Node] = []
        with self._nested(open_tok):
            while True:
                children.extend(self._parse_prefix())
                if self._check(closer):
                    break
                item = self._parse_seq()
                items.append(item)
                children.append(item)
                comma = self._match(TokenType.COMMA)
                if comma is None:
                    break
                children.append(comma)
            children.append(self._expect_closer(open_tok, closer, TokenType.COMMA))
        return Node.build(kind, children, {"items": items})

    # ------------------------------------------------------------------
    # Sequence items
    # ------------------------------------------------------------------

    def _parse_seq(self) -> Node:
        """Parse one sequence item.

        ``let``, ``for`` and ``if`` headers each wrap the item that
        follows them, so a run of headers is collected first and then
        folded around the innermost item.
        """
        headers: list[_Header] = []
        while True:
            if self._check(TokenType.LET):
                stmt = self._parse_stmt()
                semicolon = self._expect(TokenType.SEMICOLON, "Expected ';' after let binding")
                headers.append((NodeKind.SEQ_STMT, [stmt, semicolon], {"stmt": stmt}))
            elif self._check(TokenType.FOR):
                headers.append(self._parse_for_header())
            elif self._check(TokenType.IF):
                headers.append(self._parse_if_header())
            else:
                break

        body = self._parse_seq_item()
        for kind, children, fields in reversed(headers):
            body = Node.build(kind, [*children, body], {**fields, "body": body})
        return body

    def _parse_for_header(self) -> _Header:
        """Parse: ``'for' IDENT { ',' IDENT } 'in' expr ':'``"""
        for_tok = self._advance()
        idents = [self._parse_ident("Expected a loop variable after 'for'")]
        children: list[Child] = [for_tok, idents[0]]
        while True:
            comma = self._match(TokenType.COMMA)
            if comma is None:
                break
            ident = self._parse_ident("Expected a loop variable after ','")
            idents.append(ident)
            children.extend((comma, ident))
        if not self._check(TokenType.IN):
            raise self._unexpected("Expected 'in' after the loop variables", (TokenType.IN, TokenType.COMMA))
        children.append(self._advance())
        collection = self._parse_expr()
        children.append(collection)
        children.append(self._expect(TokenType.COLON, "Expected ':' after the collection of a for loop"))
        return NodeKind.SEQ_FOR, children, {"idents": idents, "collection": collection}

    def _parse_if_header(self) -> _Header:
        """Parse: ``'if' expr ':'``"""
        if_tok = self._advance()
        condition = self._parse_expr()
        colon = self._expect(TokenType.COLON, "Expected ':' after the condition of an if")
        return NodeKind.SEQ_IF, [if_tok, condition, colon], {"condition": condition}

    def _parse_seq_item(self) -> Node:
        """Parse: ``IDENT '=' expr | expr_op ':' expr | expr_op``"""
        if self._check(TokenType.IDENT) and self._peek().type is TokenType.ASSIGN:
            name = self._parse_ident("Expected a field name")
            assign = self._advance()
            value = self._parse_expr()
            return Node.build(
                NodeKind.SEQ_ASSOC_IDENT,
                [name, assign, value],
                {"field": name, "value": value},
            )

        key = self._parse_expr_op()
        colon = self._match(TokenType.COLON)
        if colon is None:
            return Node.build(NodeKind.SEQ_ELEM, [key], {"value": key})
        value = self._parse_expr()
        return Node.build(
            NodeKind.SEQ_ASSOC_EXPR,
            [key, colon, value],
            {"field": key, "value": value},
        )


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def parse(source: str | bytes, config: ParserConfig | None = None) -> Node:
    """Parse an RCL source buffer and return the root ``SOURCE_FILE`` node.

    Parameters
    ----------
    source:
        Complete RCL source, as text or encoded bytes.
    config:
        Parser settings; defaults to ``ParserConfig()``.

    Returns
    -------
    Node
        The concrete syntax tree.

    Raises
    ------
    LexError
        If the source contains invalid characters or unterminated strings.
    ParseError
        On the first syntax error.

    Example
    -------
    ::

        from rcl.parser import parse
        tree = parse('let x = 1; x + x')
        tree.child_by_field_name("body").kind  # NodeKind.EXPR_STMT
    """
    config = config or ParserConfig()
    tokens = Lexer(source, config.encoding).tokenize()
    tree = Parser(tokens, config).parse()
    logger.debug("Parsed %d tokens into a tree spanning %d bytes", len(tokens), len(tree.span))
    return tree
