"""CLI entry point for rcl-parser.

Invoked as::

    rcl-parse [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m rcl.cli.main

Commands
--------
parse       Parse an RCL file and show its concrete syntax tree
tokens      List the tokens of an RCL file
check       Parse one or more RCL files and report syntax errors
grammar     Print the RCL grammar
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rcl.config import ParserConfig
    from rcl.cst.nodes import Node

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> bytes:
    """Read an RCL source file, exiting on error."""
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {escape(str(exc))}")
        sys.exit(1)


def _load_config(path: str | None) -> "ParserConfig":
    """Load a parser config file, exiting on error."""
    from rcl.config import ConfigError, ParserConfig

    if path is None:
        return ParserConfig()
    try:
        return ParserConfig.from_file(path)
    except (OSError, ConfigError) as exc:
        err_console.print(f"[red]Config error[/red] in {path}: {escape(str(exc))}")
        sys.exit(1)


def _parse_or_exit(source: bytes, path: str, config: "ParserConfig") -> "Node":
    """Parse RCL source, printing the error and exiting on failure."""
    from rcl.lexer import LexError
    from rcl.parser import ParseError, parse

    try:
        return parse(source, config)
    except LexError as exc:
        err_console.print(f"[red]Lex error[/red] in {path}: {escape(str(exc))}")
        sys.exit(1)
    except ParseError as exc:
        err_console.print(f"[red]Parse error[/red] in {path}: {escape(str(exc))}")
        sys.exit(1)


def _rich_tree(node: "Node") -> Tree:
    """Build a Rich tree view of a CST, labelling field children."""
    from rcl.cst.printer import field_labels

    root = Tree(_node_label(node, None))
    stack: list[tuple["Node", Tree]] = [(node, root)]
    while stack:
        current, branch = stack.pop()
        labels = field_labels(current)
        for child in current.named_children:
            sub = branch.add(_node_label(child, labels.get(id(child))))
            stack.append((child, sub))
    return root


def _node_label(node: "Node", field_name: str | None) -> str:
    label = f"[bold]{node.kind.value}[/bold] [dim]{node.span.start}..{node.span.end}[/dim]"
    if node.value is not None:
        label += f" [green]{escape(repr(node.value))}[/green]"
    if field_name is not None:
        label = f"[cyan]{field_name}:[/cyan] {label}"
    return label


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="rcl-parser")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Concrete-syntax parser for RCL configuration files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from rcl import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]rcl-parser[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["tree", "sexp"], case_sensitive=False),
    default="tree",
    help="How to show the syntax tree",
)
@click.option("--config", "config_path", default=None, help="YAML parser configuration file")
def parse_command(file: str, output_format: str, config_path: str | None) -> None:
    """Parse an RCL file and show its concrete syntax tree.

    FILE is the path to the .rcl file to parse.
    """
    from rcl.cst.printer import to_sexp

    config = _load_config(config_path)
    source = _read_source(file)
    tree = _parse_or_exit(source, file, config)

    if output_format == "sexp":
        click.echo(to_sexp(tree))
    else:
        console.print(_rich_tree(tree))


# ---------------------------------------------------------------------------
# tokens command
# ---------------------------------------------------------------------------


@cli.command(name="tokens")
@click.argument("file", type=click.Path(exists=False))
def tokens_command(file: str) -> None:
    """List the tokens of an RCL file, trivia included.

    FILE is the path to the .rcl file to tokenize.
    """
    from rcl.lexer import LexError, tokenize

    source = _read_source(file)
    try:
        tokens = tokenize(source)
    except LexError as exc:
        err_console.print(f"[red]Lex error[/red] in {file}: {escape(str(exc))}")
        sys.exit(1)

    table = Table(title=f"Tokens: {file}")
    table.add_column("Kind", style="bold", min_width=10)
    table.add_column("Text")
    table.add_column("Location", min_width=8)
    table.add_column("Bytes", min_width=8)
    for token in tokens:
        table.add_row(
            token.type.name,
            escape(repr(token.value)),
            f"{token.line}:{token.col}",
            f"{token.offset}..{token.end}",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=False))
@click.option("--config", "config_path", default=None, help="YAML parser configuration file")
def check_command(files: tuple[str, ...], config_path: str | None) -> None:
    """Parse RCL files and report the first syntax error in each.

    FILES are paths to .rcl files.
    """
    from rcl.lexer import LexError
    from rcl.parser import ParseError, parse

    config = _load_config(config_path)
    failures = 0
    for file in files:
        source = _read_source(file)
        try:
            parse(source, config)
        except (LexError, ParseError) as exc:
            failures += 1
            err_console.print(f"[red]FAIL[/red] {file}: {escape(str(exc))}")
        else:
            console.print(f"[green]OK[/green] {file}")

    console.print(f"\n[bold]Summary:[/bold] {len(files) - failures} ok, {failures} failed")
    if failures:
        sys.exit(1)


# ---------------------------------------------------------------------------
# grammar command
# ---------------------------------------------------------------------------


@cli.command(name="grammar")
def grammar_command() -> None:
    """Print the RCL grammar in EBNF notation."""
    from rcl.grammar import FULL_GRAMMAR

    console.print(Syntax(FULL_GRAMMAR.strip(), "text", line_numbers=False))


if __name__ == "__main__":
    cli()
