"""Test that the 3-line quickstart API works for rcl-parser."""
from __future__ import annotations


def test_quickstart_parse_import() -> None:
    import rcl

    assert callable(rcl.parse)
    assert callable(rcl.tokenize)


def test_quickstart_version(expected_version: str) -> None:
    import rcl

    assert rcl.__version__ == expected_version


def test_quickstart_parse(sample_config: str) -> None:
    import rcl
    from rcl.cst import NodeKind

    tree = rcl.parse(sample_config)
    assert tree.kind is NodeKind.SOURCE_FILE
    body = tree.child_by_field_name("body")
    assert body is not None
    assert body.kind is NodeKind.EXPR_STMT


def test_quickstart_tokenize() -> None:
    import rcl

    tokens = rcl.tokenize("{a = 1}")
    assert [t.value for t in tokens][:5] == ["{", "a", "=", "1", "}"]


def test_quickstart_config() -> None:
    import rcl

    tree = rcl.parse("[1]", rcl.ParserConfig(max_depth=8))
    assert tree.span.end == 3


def test_quickstart_package_name(package_name: str) -> None:
    import importlib

    assert importlib.import_module(package_name).__name__ == "rcl"
