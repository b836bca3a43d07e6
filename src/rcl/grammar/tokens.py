"""Token definitions for RCL.

Defines the complete token vocabulary used by the RCL lexer.  Every
keyword, operator, punctuation mark, literal kind and trivia kind is a
member of the ``TokenType`` enum, and every scanned token is a ``Token``
dataclass that carries its type, raw text, and source position.

Keywords are reserved: the lexer scans the longest identifier-shaped
lexeme first and only then looks it up in ``KEYWORDS``, so ``letter``
is one identifier while ``let`` is always the keyword.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Exhaustive enumeration of all RCL token types."""

    # -----------------------------------------------------------------
    # Keywords
    # -----------------------------------------------------------------
    LET = auto()
    FOR = auto()
    IN = auto()
    IF = auto()
    AND = auto()
    OR = auto()
    NOT = auto()

    # -----------------------------------------------------------------
    # Binary / unary operator symbols
    # -----------------------------------------------------------------
    PIPE = auto()     # |
    STAR = auto()     # *
    PLUS = auto()     # +
    MINUS = auto()    # -
    SLASH = auto()    # /
    LT = auto()       # <
    LTE = auto()      # <=
    GT = auto()       # >
    GTE = auto()      # >=
    EQ = auto()       # ==
    NEQ = auto()      # !=

    # -----------------------------------------------------------------
    # Punctuation
    # -----------------------------------------------------------------
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LPAREN = auto()
    RPAREN = auto()
    COLON = auto()
    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()
    ASSIGN = auto()   # =

    # -----------------------------------------------------------------
    # Literals and identifiers
    # -----------------------------------------------------------------
    STRING = auto()
    NUMBER = auto()
    IDENT = auto()

    # -----------------------------------------------------------------
    # Trivia / structure
    # -----------------------------------------------------------------
    COMMENT = auto()
    BLANK = auto()
    EOF = auto()


# Mapping from reserved word text to its TokenType.
KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
    "let": TokenType.LET,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "if": TokenType.IF,
}

# Symbol tokens, longest first so that ``<=`` wins over ``<``.
SYMBOLS: dict[str, TokenType] = {
    "<=": TokenType.LTE,
    ">=": TokenType.GTE,
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
    "|": TokenType.PIPE,
    "*": TokenType.STAR,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "=": TokenType.ASSIGN,
}

# Every binary operator gets its own chain production; there is no
# precedence between these.
BINARY_OPERATORS: frozenset[TokenType] = frozenset({
    TokenType.AND,
    TokenType.OR,
    TokenType.PIPE,
    TokenType.STAR,
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.SLASH,
    TokenType.LT,
    TokenType.LTE,
    TokenType.GT,
    TokenType.GTE,
    TokenType.EQ,
    TokenType.NEQ,
})

UNARY_OPERATORS: frozenset[TokenType] = frozenset({TokenType.NOT, TokenType.MINUS})

TRIVIA: frozenset[TokenType] = frozenset({TokenType.COMMENT, TokenType.BLANK})

_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.STRING: "string",
    TokenType.NUMBER: "number",
    TokenType.IDENT: "identifier",
    TokenType.COMMENT: "comment",
    TokenType.BLANK: "blank line",
    TokenType.EOF: "end of input",
}
_DESCRIPTIONS.update({tt: f"'{text}'" for text, tt in KEYWORDS.items()})
_DESCRIPTIONS.update({tt: f"'{text}'" for text, tt in SYMBOLS.items()})


def describe(token_type: TokenType) -> str:
    """Return a human-readable name for ``token_type``, e.g. ``'+'`` or ``identifier``."""
    return _DESCRIPTIONS[token_type]


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with source-location metadata.

    Parameters
    ----------
    type:
        The ``TokenType`` variant for this token.
    value:
        The raw text as it appeared in the source.
    offset:
        0-based byte offset of the first byte of the token.
    end:
        0-based byte offset *past* the last byte of the token.
    line:
        1-based line number in the source file.
    col:
        1-based character column of the first character of the token.
    """

    type: TokenType
    value: str
    offset: int
    end: int
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"

    @property
    def is_keyword(self) -> bool:
        """Return True if this token is a reserved word."""
        return self.type in _KEYWORD_TYPES

    @property
    def is_trivia(self) -> bool:
        """Return True for comment and blank tokens."""
        return self.type in TRIVIA


_KEYWORD_TYPES: frozenset[TokenType] = frozenset(KEYWORDS.values())
