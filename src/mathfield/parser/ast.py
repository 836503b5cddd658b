#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/parser/ast.py
"""Intermediate syntax tree produced by the LaTeX parser.

The parser never builds formula nodes directly. It produces the small,
immutable-by-convention dataclass tree defined here, which is then either
materialized into an editable tree (``mathfield.parser.materialize``) or
serialized back to markup (``to_latex``).

AST Node Kinds
--------------
Tokens:
    - Char (ASCII letter), Digit, Symbol (glyph with optional command)
    - Space (whitespace run; removed during post-processing)
    - UnknownCommand (opaque backslash command missing from the catalog)

Structure:
    - Group (braced group; spliced into its surroundings after parsing)
    - Command (catalog command with optional and required arguments)
    - TextArg (raw text-mode argument)
    - LeftRight (``\\left``/``\\right`` pair)
    - SubscriptAst, SuperscriptAst, SubSupAst (scripts merged with their base)
    - MatrixAst (matrix environment)

Nodes compare structurally through the dataclass ``__eq__``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from mathfield.constants import EMPTY_CELL_MARKER, TEXT_BACKSLASH
from mathfield.renderers.latex import join_latex


def decode_text(raw: str) -> list[str]:
    """Split raw text-mode content into characters.

    ``\\{`` and ``\\}`` decode to braces and ``\\textbackslash`` (optionally
    followed by ``{}``) to a backslash. Other backslash sequences are kept
    character by character.

    Examples
    --------
        >>> decode_text("a\\\\{b")
        ['a', '{', 'b']
        >>> decode_text("\\\\textbackslash{}n")
        ['\\\\', 'n']

    """
    chars: list[str] = []
    index = 0
    while index < len(raw):
        char = raw[index]
        if char == "\\" and index + 1 < len(raw) and raw[index + 1] in "{}":
            chars.append(raw[index + 1])
            index += 2
            continue
        if raw.startswith(TEXT_BACKSLASH, index):
            chars.append("\\")
            index += len(TEXT_BACKSLASH)
            if raw.startswith("{}", index):
                index += 2
            continue
        chars.append(char)
        index += 1
    return chars


class AstNode(ABC):
    """Base class for all syntax tree nodes."""

    @abstractmethod
    def accept(self, visitor: AstVisitor) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : AstVisitor
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


@dataclass
class Char(AstNode):
    """An ASCII letter."""

    char: str

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_char(self)


@dataclass
class Digit(AstNode):
    """A decimal digit."""

    char: str

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_digit(self)


@dataclass
class Symbol(AstNode):
    """A glyph, optionally written as a catalog command.

    Parameters
    ----------
    char : str
        Display glyph
    command : str or None, default None
        Command it was written as (``"\\alpha"``); None for a plain glyph

    """

    char: str
    command: Optional[str] = None

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_symbol(self)


@dataclass
class Space(AstNode):
    """A run of whitespace."""

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_space(self)


@dataclass
class Group(AstNode):
    """A braced group ``{...}``."""

    children: list[AstNode] = field(default_factory=list)

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_group(self)


@dataclass
class TextArg(AstNode):
    """Raw content of a text-mode argument (``\\text{...}``).

    ``text`` keeps the argument as written; ``chars`` holds the decoded
    characters (see ``decode_text``). Equality compares ``chars`` only, so
    ``\\text{\\\\}`` and ``\\text{\\textbackslash\\textbackslash}`` are equal.

    """

    text: str = field(compare=False)
    chars: tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.chars = tuple(decode_text(self.text))

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_text_arg(self)


@dataclass
class Command(AstNode):
    """A catalog command and its arguments.

    Parameters
    ----------
    name : str
        Command including the backslash
    args : list of list of AstNode, default empty list
        Required arguments in order; a text-mode argument is a single
        ``TextArg``
    optional : list of AstNode or None, default None
        Optional ``[...]`` argument; None when absent, an empty list when
        written as ``[]``

    """

    name: str
    args: list[list[AstNode]] = field(default_factory=list)
    optional: Optional[list[AstNode]] = None

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_command(self)


@dataclass
class LeftRight(AstNode):
    """A ``\\left<open> ... \\right<close>`` pair."""

    open_delim: str
    close_delim: str
    children: list[AstNode] = field(default_factory=list)

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_left_right(self)


@dataclass
class SubscriptAst(AstNode):
    """A subscript merged with the node before it (None at sequence start)."""

    base: Optional[AstNode]
    sub: list[AstNode] = field(default_factory=list)

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_subscript(self)


@dataclass
class SuperscriptAst(AstNode):
    """A superscript merged with the node before it (None at sequence start)."""

    base: Optional[AstNode]
    sup: list[AstNode] = field(default_factory=list)

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_superscript(self)


@dataclass
class SubSupAst(AstNode):
    """A subscript and a superscript on one base.

    Parameters
    ----------
    base : AstNode or None
        Node the scripts attach to
    sub : list of AstNode
        Subscript argument
    sup : list of AstNode
        Superscript argument
    sub_first : bool, default True
        Whether ``_`` was written before ``^``; ignored by equality

    """

    base: Optional[AstNode]
    sub: list[AstNode] = field(default_factory=list)
    sup: list[AstNode] = field(default_factory=list)
    sub_first: bool = field(default=True, compare=False)

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_subsup(self)


@dataclass
class MatrixAst(AstNode):
    """A matrix environment; ``rows[r][c]`` is the content of one cell."""

    environment: str
    rows: list[list[list[AstNode]]] = field(default_factory=list)

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_matrix(self)


@dataclass
class UnknownCommand(AstNode):
    """A backslash command the catalog does not know, kept verbatim."""

    name: str

    def accept(self, visitor: AstVisitor) -> Any:
        return visitor.visit_unknown_command(self)


ScriptAst = Union[SubscriptAst, SuperscriptAst, SubSupAst]


class AstVisitor(ABC):
    """Abstract base class for syntax tree visitors."""

    @abstractmethod
    def visit_char(self, node: Char) -> Any:
        """Visit a Char node."""
        pass

    @abstractmethod
    def visit_digit(self, node: Digit) -> Any:
        """Visit a Digit node."""
        pass

    @abstractmethod
    def visit_symbol(self, node: Symbol) -> Any:
        """Visit a Symbol node."""
        pass

    @abstractmethod
    def visit_space(self, node: Space) -> Any:
        """Visit a Space node."""
        pass

    @abstractmethod
    def visit_group(self, node: Group) -> Any:
        """Visit a Group node."""
        pass

    @abstractmethod
    def visit_text_arg(self, node: TextArg) -> Any:
        """Visit a TextArg node."""
        pass

    @abstractmethod
    def visit_command(self, node: Command) -> Any:
        """Visit a Command node.

        Parameters
        ----------
        node : Command
            The command to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_left_right(self, node: LeftRight) -> Any:
        """Visit a LeftRight node."""
        pass

    @abstractmethod
    def visit_subscript(self, node: SubscriptAst) -> Any:
        """Visit a SubscriptAst node."""
        pass

    @abstractmethod
    def visit_superscript(self, node: SuperscriptAst) -> Any:
        """Visit a SuperscriptAst node."""
        pass

    @abstractmethod
    def visit_subsup(self, node: SubSupAst) -> Any:
        """Visit a SubSupAst node."""
        pass

    @abstractmethod
    def visit_matrix(self, node: MatrixAst) -> Any:
        """Visit a MatrixAst node."""
        pass

    @abstractmethod
    def visit_unknown_command(self, node: UnknownCommand) -> Any:
        """Visit an UnknownCommand node."""
        pass


class AstLatexSerializer(AstVisitor):
    """Serialize syntax trees back to markup.

    Output follows the same brace and spacing conventions as
    ``LatexRenderer``, except that scripts keep the order they were
    written in.

    """

    def serialize(self, nodes: list[AstNode]) -> str:
        """Serialize a node sequence."""
        return join_latex(node.accept(self) for node in nodes)

    def _braced(self, nodes: list[AstNode]) -> str:
        return "{" + self.serialize(nodes) + "}"

    def _script(self, marker: str, nodes: list[AstNode]) -> str:
        content = self.serialize(nodes)
        if len(content) == 1:
            return marker + content
        return marker + "{" + content + "}"

    def _base(self, base: Optional[AstNode]) -> str:
        return base.accept(self) if base is not None else ""

    def visit_char(self, node: Char) -> str:
        return node.char

    def visit_digit(self, node: Digit) -> str:
        return node.char

    def visit_symbol(self, node: Symbol) -> str:
        return node.command if node.command is not None else node.char

    def visit_space(self, node: Space) -> str:
        return ""

    def visit_group(self, node: Group) -> str:
        return self._braced(node.children)

    def visit_text_arg(self, node: TextArg) -> str:
        return node.text

    def visit_command(self, node: Command) -> str:
        out = node.name
        if node.optional is not None:
            out += "[" + self.serialize(node.optional) + "]"
        for arg in node.args:
            out += self._braced(arg)
        return out

    def visit_left_right(self, node: LeftRight) -> str:
        return join_latex(["\\left" + node.open_delim, self.serialize(node.children), "\\right" + node.close_delim])

    def visit_subscript(self, node: SubscriptAst) -> str:
        return join_latex([self._base(node.base), self._script("_", node.sub)])

    def visit_superscript(self, node: SuperscriptAst) -> str:
        return join_latex([self._base(node.base), self._script("^", node.sup)])

    def visit_subsup(self, node: SubSupAst) -> str:
        sub, sup = self._script("_", node.sub), self._script("^", node.sup)
        scripts = sub + sup if node.sub_first else sup + sub
        return join_latex([self._base(node.base), scripts])

    def visit_matrix(self, node: MatrixAst) -> str:
        rows = [" & ".join(self.serialize(cell) for cell in row) for row in node.rows]
        if len(rows) > 1 and not rows[-1]:
            rows[-1] = EMPTY_CELL_MARKER
        return "\\begin{" + node.environment + "}" + " \\\\ ".join(rows) + "\\end{" + node.environment + "}"

    def visit_unknown_command(self, node: UnknownCommand) -> str:
        return node.name


def to_latex(nodes: list[AstNode]) -> str:
    """Serialize a parsed node sequence back to markup.

    Examples
    --------
        >>> from mathfield.parser import parse_latex
        >>> to_latex(parse_latex("x^{2}"))
        'x^2'

    """
    return AstLatexSerializer().serialize(nodes)
