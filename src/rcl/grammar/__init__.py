"""RCL grammar module.

Exports token definitions and formal grammar constants.
"""
from __future__ import annotations

from rcl.grammar.grammar import (
    FULL_GRAMMAR,
    GRAMMAR_LEXICAL,
    GRAMMAR_OPERATOR,
    GRAMMAR_POSTFIX,
    GRAMMAR_ROOT,
    GRAMMAR_SEQUENCE,
    GRAMMAR_STATEMENT,
)
from rcl.grammar.tokens import (
    BINARY_OPERATORS,
    KEYWORDS,
    SYMBOLS,
    UNARY_OPERATORS,
    Token,
    TokenType,
    describe,
)

__all__ = [
    # Token types
    "TokenType",
    "Token",
    "KEYWORDS",
    "SYMBOLS",
    "BINARY_OPERATORS",
    "UNARY_OPERATORS",
    "describe",
    # Grammar constants
    "FULL_GRAMMAR",
    "GRAMMAR_ROOT",
    "GRAMMAR_STATEMENT",
    "GRAMMAR_OPERATOR",
    "GRAMMAR_POSTFIX",
    "GRAMMAR_SEQUENCE",
    "GRAMMAR_LEXICAL",
]
