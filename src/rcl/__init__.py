"""rcl-parser: a concrete-syntax parser for RCL, a reasonable configuration language.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import rcl

    # Parse RCL source into a concrete syntax tree
    tree = rcl.parse('''
        // Ports to expose.
        let base = 8000;
        [for i in [1, 2, 3]: base + i]
    ''')

    body = tree.child_by_field_name("body")
    body.kind
    # NodeKind.EXPR_STMT

    # Inspect the raw token stream
    tokens = rcl.tokenize('{a = 1}')

    rcl.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from rcl.config import ParserConfig

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from rcl.cst.nodes import Node
    from rcl.grammar.tokens import Token


def parse(source: str | bytes, config: ParserConfig | None = None) -> "Node":
    """Parse RCL source into a concrete syntax tree.

    Parameters
    ----------
    source:
        Complete RCL source, as text or encoded bytes.
    config:
        Optional parser settings.

    Returns
    -------
    Node
        The root ``SOURCE_FILE`` node.

    Raises
    ------
    rcl.lexer.LexError
        If the source contains invalid characters or unterminated strings.
    rcl.parser.ParseError
        On the first syntax error.
    """
    from rcl.parser.parser import parse as _parse

    return _parse(source, config)


def tokenize(source: str | bytes, encoding: str = "utf-8") -> list["Token"]:
    """Tokenize RCL source, including comment and blank tokens.

    Parameters
    ----------
    source:
        Complete RCL source, as text or encoded bytes.
    encoding:
        Source encoding.

    Returns
    -------
    list[Token]
        Tokens in source order, terminated by ``EOF``.
    """
    from rcl.lexer.lexer import tokenize as _tokenize

    return _tokenize(source, encoding)


__all__ = [
    "__version__",
    "parse",
    "tokenize",
    "ParserConfig",
]
