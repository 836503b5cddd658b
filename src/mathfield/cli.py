#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/cli.py
r"""Command-line interface for mathfield.

Examples
--------
Normalize markup to its canonical form:
    $ mathfield normalize "x^{2}+\frac 1 2"
    x^2+\frac{1}{2}

Render as plain text:
    $ mathfield text "\frac{a}{b}"
    (a)/(b)

Validate markup (exit status 1 on parse errors):
    $ mathfield check "\frac{a}{"

Show the node tree, read from stdin:
    $ echo "\sqrt{x}" | mathfield tree - --rich
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from mathfield import __version__
from mathfield.config import load_options
from mathfield.constants import DEFAULT_LOG_LEVEL, EXIT_PARSE_ERROR, EXIT_SUCCESS, EXIT_USAGE_ERROR
from mathfield.core.nodes import Block, Node
from mathfield.exceptions import ConfigError, ParsingError
from mathfield.logging_utils import configure_logging
from mathfield.options import EditorOptions
from mathfield.parser.latex import parse_latex
from mathfield.parser.materialize import materialize

logger = logging.getLogger(__name__)


def check_rich_available() -> bool:
    """Check if Rich library is available.

    Returns
    -------
    bool
        True if Rich is available, False otherwise

    """
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mathfield",
        description="Parse, normalize and inspect LaTeX math markup.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Configuration file (.toml, .yaml, .json or pyproject.toml)")
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and component names")
    parser.add_argument("--rich", action="store_true", help="Use rich formatting for output (requires rich)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("normalize", "Print the canonical LaTeX form"),
        ("text", "Print the plain-text rendering"),
        ("check", "Validate markup; exit status 1 when malformed"),
        ("tree", "Print the node tree"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("expression", help="LaTeX markup, or '-' to read from stdin")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else parsed_args.log_level
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_expression(expression: str) -> str:
    if expression == "-":
        return sys.stdin.read().strip()
    return expression


def _describe(node: Node) -> str:
    label = type(node).__name__
    for attr in ("command", "char", "name", "open_delim", "environment"):
        value = getattr(node, attr, None)
        if isinstance(value, str) and value:
            label += f" {value}"
            break
    return f"{label} #{node.id}"


def _block_label(owner: Node, index: int, block: Block) -> str:
    for attr, value in vars(owner).items():
        if value is block:
            return f"{attr} #{block.id}"
    return f"block[{index}] #{block.id}"


def format_tree(root: Block) -> str:
    """Render the node tree as indented plain text."""
    lines = [f"root #{root.id}"]

    def walk(block: Block, depth: int) -> None:
        for node in block.children():
            lines.append("  " * depth + _describe(node))
            for index, child_block in enumerate(node.blocks):
                lines.append("  " * (depth + 1) + _block_label(node, index, child_block))
                walk(child_block, depth + 2)

    walk(root, 1)
    return "\n".join(lines)


def print_rich_tree(root: Block) -> None:
    """Print the node tree with rich."""
    from rich.console import Console
    from rich.tree import Tree

    def walk(block: Block, branch: Tree) -> None:
        for node in block.children():
            node_branch = branch.add(f"[bold]{_describe(node)}[/bold]")
            for index, child_block in enumerate(node.blocks):
                walk(child_block, node_branch.add(f"[dim]{_block_label(node, index, child_block)}[/dim]"))

    tree = Tree(f"root #{root.id}")
    walk(root, tree)
    Console().print(tree)


def _report_parse_error(error: ParsingError, use_rich: bool) -> None:
    if use_rich:
        from rich.console import Console

        console = Console(stderr=True)
        console.print(f"[red]Error:[/red] {error.message}")
        console.print(error.excerpt(), markup=False)
    else:
        print(f"Error: {error.message}", file=sys.stderr)
        print(error.excerpt(), file=sys.stderr)


def main(args: Optional[list[str]] = None) -> int:
    """Execute the command-line interface.

    Parameters
    ----------
    args : list of str, optional
        Arguments to parse; defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit status: 0 on success, 1 on malformed markup, 2 on usage or
        configuration errors

    """
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return int(e.code) if isinstance(e.code, int) else EXIT_USAGE_ERROR

    _setup_logging_level(parsed_args)

    if parsed_args.rich and not check_rich_available():
        print(
            "Error: --rich requires the optional 'rich' dependency. Install with: pip install mathfield[rich]",
            file=sys.stderr,
        )
        return EXIT_USAGE_ERROR

    try:
        options: EditorOptions = load_options(parsed_args.config)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    expression = _read_expression(parsed_args.expression)
    try:
        nodes = parse_latex(expression)
    except ParsingError as e:
        _report_parse_error(e, parsed_args.rich)
        return EXIT_PARSE_ERROR

    if parsed_args.command == "check":
        print("OK")
        return EXIT_SUCCESS

    root = materialize(nodes, options.unknown_commands)
    if parsed_args.command == "normalize":
        print(root.latex())
    elif parsed_args.command == "text":
        print(root.text())
    elif parsed_args.rich:
        print_rich_tree(root)
    else:
        print(format_tree(root))
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
