"""Corpus tests: parse every case in tests/corpus/*.yaml.

A case either has an ``sexp`` key, the expected debug rendering of the
tree, or an ``error`` key naming the exception class together with the
byte ``offset`` it must point at.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from rcl.cst.printer import render_source, to_sexp
from rcl.lexer import LexError
from rcl.parser import ParseError, parse

CORPUS_DIR = Path(__file__).parent.parent / "corpus"


def _load_cases() -> list[Any]:
    cases = []
    for path in sorted(CORPUS_DIR.glob("*.yaml")):
        for case in yaml.safe_load(path.read_text(encoding="utf-8")):
            cases.append(pytest.param(case, id=f"{path.stem}: {case['name']}"))
    return cases


CASES = _load_cases()


def test_corpus_is_not_empty() -> None:
    assert len(CASES) > 10


@pytest.mark.parametrize("case", CASES)
def test_corpus_case(case: dict[str, Any]) -> None:
    source = case["source"]
    if "error" in case:
        with pytest.raises((LexError, ParseError)) as exc_info:
            parse(source)
        assert type(exc_info.value).__name__ == case["error"]
        assert exc_info.value.offset == case["offset"]
        return

    tree = parse(source)
    assert to_sexp(tree) == case["sexp"]
    assert render_source(tree, source) == source
