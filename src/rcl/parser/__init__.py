"""RCL Parser module.

Exports the ``Parser`` class, the ``parse`` convenience function, and
parse error types.
"""
from __future__ import annotations

from rcl.parser.errors import (
    AmbiguousOperatorChain,
    NestingTooDeep,
    ParseError,
    TrailingInput,
    UnclosedGroup,
    UnexpectedToken,
)
from rcl.parser.parser import Parser, parse

__all__ = [
    "Parser",
    "parse",
    "ParseError",
    "UnexpectedToken",
    "AmbiguousOperatorChain",
    "UnclosedGroup",
    "TrailingInput",
    "NestingTooDeep",
]
