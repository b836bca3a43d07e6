#!/usr/bin/env python3
"""Example: Error reporting (rcl-parser)

RCL has no operator precedence, so mixing operators without
parentheses is a syntax error.  This example shows the errors the
parser raises and the location details they carry.

Usage:
    python examples/02_error_reporting.py
"""
from __future__ import annotations

import rcl
from rcl.lexer import LexError
from rcl.parser import AmbiguousOperatorChain, ParseError

SOURCES = [
    "a + b - c",
    "(a + b) - c",
    "a + -b",
    "[1, 2",
    'name = "unterminated',
    "let in = 1; in",
]


def main() -> None:
    for source in SOURCES:
        try:
            tree = rcl.parse(source)
        except AmbiguousOperatorChain as exc:
            print(f"{source!r}: mixed {exc.chain_operator.value!r} chain at byte {exc.offset}")
        except ParseError as exc:
            print(f"{source!r}: {exc}")
        except LexError as exc:
            print(f"{source!r}: {exc}")
        else:
            body = tree.child_by_field_name("body")
            print(f"{source!r}: ok ({body.kind.value if body else '?'})")


if __name__ == "__main__":
    main()
