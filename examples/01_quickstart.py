#!/usr/bin/env python3
"""Example: Quickstart (rcl-parser)

Minimal working example: parse an RCL document, walk its concrete
syntax tree, and reproduce the source from the tree.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install rcl-parser
"""
from __future__ import annotations

import rcl
from rcl.cst import NodeKind, render_source, to_sexp

RCL_SOURCE = '''\
// Ports to expose.
let base = 8000;

{
  // One listener per service.
  listeners = [for i, name in ["web", "api"]: { name = name, port = base + i }],
  debug = false,
}
'''


def main() -> None:
    print(f"rcl-parser version: {rcl.__version__}")

    # Step 1: Parse RCL source into a concrete syntax tree
    tree = rcl.parse(RCL_SOURCE)
    body = tree.child_by_field_name("body")
    print(f"Top-level expression: {body.kind.value if body else None}")

    # Step 2: Walk the tree and collect every bound or assigned name
    names: list[str] = []
    for node in tree.walk():
        if node.kind is NodeKind.STMT_LET:
            name = node.child_by_field_name("ident")
        elif node.kind is NodeKind.SEQ_ASSOC_IDENT:
            name = node.child_by_field_name("field")
        else:
            continue
        if name is not None and name.value is not None:
            names.append(name.value)
    print(f"Names: {', '.join(names)}")

    # Step 3: Comments survive in the tree
    comments = [node.value for node in tree.walk() if node.kind is NodeKind.COMMENT]
    print(f"Comments: {len(comments)}")
    for comment in comments:
        print(f"  {comment.rstrip() if comment else ''}")

    # Step 4: The tree reproduces its source exactly
    assert render_source(tree, RCL_SOURCE) == RCL_SOURCE
    print("Round trip: ok")

    # Step 5: Compact debug rendering
    print(to_sexp(tree)[:200])


if __name__ == "__main__":
    main()
