#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/parser/materialize.py
"""Build editable formula trees from parsed syntax trees.

``TreeBuilder`` walks the syntax tree and inserts nodes through a ``Cursor``,
exactly as an interactive edit would. For every composite it creates, it
saves the cursor position, descends to fill each freshly created block, and
restores the position afterwards.

A few syntax patterns are recognised before the generic translation:

- a script whose base is a large operator (``\\sum_{i}^{n}``) becomes a
  ``LargeOperator`` with its limit blocks filled
- a subscript whose base is ``\\lim`` becomes a ``Limit``; a superscript on
  a limit stays a separate ``Superscript``
- ``\\sqrt`` with an optional argument becomes an ``NthRoot``, even when the
  optional argument is empty

"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from mathfield.commands.catalog import (
    is_large_operator,
    is_limit_command,
    is_operator_name,
    lookup_command,
    lookup_symbol,
)
from mathfield.commands.composites import (
    Accent,
    Binomial,
    Brackets,
    Fraction,
    LargeOperator,
    Limit,
    Matrix,
    NthRoot,
    SquareRoot,
    Subscript,
    SupSub,
    Superscript,
    TextStyle,
)
from mathfield.commands.leaves import MathSymbol, OperatorName, RawCommand, TextChar, create_leaf, leaf_for_glyph
from mathfield.constants import DEFAULT_UNKNOWN_COMMANDS, UnknownCommandPolicy
from mathfield.core.cursor import Cursor
from mathfield.core.nodes import Block, Node, RootBlock
from mathfield.exceptions import ValidationError
from mathfield.parser.ast import (
    AstNode,
    AstVisitor,
    Char,
    Command,
    Digit,
    Group,
    LeftRight,
    MatrixAst,
    Space,
    SubscriptAst,
    SubSupAst,
    SuperscriptAst,
    Symbol,
    TextArg,
    UnknownCommand,
    decode_text,
)

logger = logging.getLogger(__name__)


def _text_of(argument: list[AstNode]) -> str:
    return "".join(node.text for node in argument if isinstance(node, TextArg))


def _is_large_operator_base(base: Optional[AstNode]) -> bool:
    return isinstance(base, Command) and not base.args and is_large_operator(base.name)


def _is_limit_base(base: Optional[AstNode]) -> bool:
    return isinstance(base, Command) and not base.args and is_limit_command(base.name)


class TreeBuilder(AstVisitor):
    """Insert the nodes described by a syntax tree at a cursor.

    Parameters
    ----------
    cursor : Cursor
        Insertion point; left just after the inserted content
    unknown_commands : {'keep', 'text'}, default 'keep'
        Materialize unknown commands as opaque ``RawCommand`` leaves, or as
        ``\\text`` spans showing the command name

    """

    def __init__(self, cursor: Cursor, unknown_commands: UnknownCommandPolicy = DEFAULT_UNKNOWN_COMMANDS):
        """Initialize the builder."""
        if unknown_commands not in ("keep", "text"):
            raise ValidationError(
                f"unknown_commands must be 'keep' or 'text', got {unknown_commands!r}",
                "unknown_commands",
                unknown_commands,
            )
        self.cursor = cursor
        self.unknown_commands = unknown_commands

    def build(self, nodes: Iterable[AstNode]) -> None:
        """Insert every node of ``nodes`` at the cursor, in order."""
        for node in nodes:
            node.accept(self)

    def _insert(self, node: Node) -> None:
        self.cursor.insert(node, eject=False)

    def _fill(self, block: Block, nodes: Iterable[AstNode]) -> None:
        saved = self.cursor.get_position()
        self.cursor.move_to(block)
        self.build(nodes)
        self.cursor.restore_position(saved)

    def _fill_text(self, block: Block, raw: str) -> None:
        saved = self.cursor.get_position()
        self.cursor.move_to(block)
        for char in decode_text(raw):
            self._insert(TextChar(char))
        self.cursor.restore_position(saved)

    # Tokens

    def visit_char(self, node: Char) -> None:
        self._insert(leaf_for_glyph(node.char))

    def visit_digit(self, node: Digit) -> None:
        self._insert(leaf_for_glyph(node.char))

    def visit_symbol(self, node: Symbol) -> None:
        if node.command is None:
            self._insert(leaf_for_glyph(node.char))
            return
        spec = lookup_symbol(node.command)
        if spec is None:
            self._insert(MathSymbol(node.char, node.command))
        else:
            self._insert(create_leaf(spec))

    def visit_space(self, node: Space) -> None:
        pass

    def visit_group(self, node: Group) -> None:
        self.build(node.children)

    def visit_text_arg(self, node: TextArg) -> None:
        for char in node.chars:
            self._insert(TextChar(char))

    def visit_unknown_command(self, node: UnknownCommand) -> None:
        logger.debug("Materializing unknown command %s (policy=%s)", node.name, self.unknown_commands)
        if self.unknown_commands == "keep":
            self._insert(RawCommand(node.name))
            return
        span = TextStyle("\\text")
        self._insert(span)
        self._fill_text(span.content, node.name)

    # Commands

    def visit_command(self, node: Command) -> None:
        """Create the composite or leaf for a catalog command and fill its blocks."""
        name = node.name
        if is_operator_name(name):
            self._insert(OperatorName(name[1:], name))
            return
        if is_large_operator(name):
            self._insert(LargeOperator(name, lower=False, upper=False))
            return
        if is_limit_command(name):
            self._insert(Limit(name, lower=False))
            return

        spec = lookup_command(name)
        if spec is None:
            raise ValidationError(f"Command {name} has no argument spec", "name", name)

        if spec.kind in ("fraction", "binomial"):
            stacked = Fraction(name) if spec.kind == "fraction" else Binomial(name)
            self._insert(stacked)
            self._fill(stacked.numerator, node.args[0])
            self._fill(stacked.denominator, node.args[1])
        elif spec.kind == "sqrt":
            if node.optional is None:
                root = SquareRoot()
                self._insert(root)
                self._fill(root.radicand, node.args[0])
            else:
                nth = NthRoot()
                self._insert(nth)
                self._fill(nth.index, node.optional)
                self._fill(nth.radicand, node.args[0])
        elif spec.kind == "accent":
            accent = Accent(name)
            self._insert(accent)
            self._fill(accent.content, node.args[0])
        elif spec.kind == "style":
            style = TextStyle(name)
            self._insert(style)
            if style.text_mode:
                self._fill_text(style.content, _text_of(node.args[0]))
            else:
                self._fill(style.content, node.args[0])
        elif spec.kind == "operatorname":
            self._insert(OperatorName(_text_of(node.args[0])))

    def visit_left_right(self, node: LeftRight) -> None:
        brackets = Brackets(node.open_delim, node.close_delim)
        self._insert(brackets)
        self._fill(brackets.content, node.children)

    def visit_matrix(self, node: MatrixAst) -> None:
        rows = len(node.rows)
        cols = max(len(row) for row in node.rows)
        matrix = Matrix(node.environment, rows, cols)  # type: ignore[arg-type]
        self._insert(matrix)
        for r, row in enumerate(node.rows):
            for c, cell in enumerate(row):
                self._fill(matrix.cells[r][c], cell)

    # Scripts

    def _build_base(self, base: Optional[AstNode]) -> None:
        if base is not None:
            base.accept(self)

    def visit_subscript(self, node: SubscriptAst) -> None:
        if _is_large_operator_base(node.base):
            operator = LargeOperator(node.base.name, lower=True, upper=False)  # type: ignore[union-attr]
            self._insert(operator)
            self._fill(operator.lower, node.sub)  # type: ignore[arg-type]
            return
        if _is_limit_base(node.base):
            limit = Limit(node.base.name, lower=True)  # type: ignore[union-attr]
            self._insert(limit)
            self._fill(limit.lower, node.sub)  # type: ignore[arg-type]
            return
        self._build_base(node.base)
        script = Subscript()
        self._insert(script)
        self._fill(script.sub, node.sub)

    def visit_superscript(self, node: SuperscriptAst) -> None:
        if _is_large_operator_base(node.base):
            operator = LargeOperator(node.base.name, lower=False, upper=True)  # type: ignore[union-attr]
            self._insert(operator)
            self._fill(operator.upper, node.sup)  # type: ignore[arg-type]
            return
        self._build_base(node.base)
        script = Superscript()
        self._insert(script)
        self._fill(script.sup, node.sup)

    def visit_subsup(self, node: SubSupAst) -> None:
        if _is_large_operator_base(node.base):
            operator = LargeOperator(node.base.name, lower=True, upper=True)  # type: ignore[union-attr]
            self._insert(operator)
            self._fill(operator.lower, node.sub)  # type: ignore[arg-type]
            self._fill(operator.upper, node.sup)  # type: ignore[arg-type]
            return
        if _is_limit_base(node.base):
            limit = Limit(node.base.name, lower=True)  # type: ignore[union-attr]
            self._insert(limit)
            self._fill(limit.lower, node.sub)  # type: ignore[arg-type]
            script = Superscript()
            self._insert(script)
            self._fill(script.sup, node.sup)
            return
        self._build_base(node.base)
        pair = SupSub()
        self._insert(pair)
        self._fill(pair.sub, node.sub)
        self._fill(pair.sup, node.sup)


def materialize(nodes: Iterable[AstNode], unknown_commands: UnknownCommandPolicy = DEFAULT_UNKNOWN_COMMANDS) -> RootBlock:
    """Build a new document root from parsed nodes.

    Parameters
    ----------
    nodes : iterable of AstNode
        Output of ``parse_latex``
    unknown_commands : {'keep', 'text'}, default 'keep'
        Policy for unknown commands

    Returns
    -------
    RootBlock
        A fresh root holding the materialized tree

    """
    root = RootBlock()
    TreeBuilder(Cursor(root), unknown_commands).build(nodes)
    return root
