"""RCL Lexer module.

Exports the ``Lexer`` class, the ``tokenize`` convenience function and
the lexical error types.
"""
from __future__ import annotations

from rcl.lexer.lexer import LexError, Lexer, UnterminatedString, tokenize

__all__ = ["Lexer", "tokenize", "LexError", "UnterminatedString"]
