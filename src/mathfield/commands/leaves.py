#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/commands/leaves.py
"""Leaf node classes: symbols, digits, operators and opaque commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mathfield.commands.catalog import GLYPHS, SymbolSpec, lookup_symbol, symbol_for_char
from mathfield.core.nodes import Leaf

if TYPE_CHECKING:
    from mathfield.renderers.base import NodeVisitor


class MathSymbol(Leaf):
    """A single character or symbol.

    Parameters
    ----------
    char : str
        Display glyph
    command : str, optional
        LaTeX form when it differs from ``char`` (``"\\leq"`` for ``≤``)
    degrades_to : str, optional
        LaTeX form of the symbol this one collapses into on backspace

    """

    def __init__(self, char: str, command: str | None = None, degrades_to: str | None = None):
        """Create a symbol leaf."""
        super().__init__()
        self.char = char
        self.command = command
        self.degrades_to = degrades_to

    @property
    def latex_form(self) -> str:
        """LaTeX emitted for this symbol."""
        return self.command if self.command is not None else self.char

    def can_degrade(self) -> bool:
        """Whether a backspace replaces this symbol instead of removing it."""
        return self.degrades_to is not None

    def degraded(self) -> MathSymbol | None:
        """Return the one-step simpler symbol, or None when there is none.

        The returned leaf never degrades further, so a second backspace
        removes it outright.

        """
        if self.degrades_to is None:
            return None
        spec = lookup_symbol(self.degrades_to)
        if spec is None:
            return MathSymbol(self.degrades_to)
        return create_leaf(spec, degradable=False)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_symbol(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.latex_form!r}, id={self.id})"


class Variable(MathSymbol):
    """A single Latin letter."""

    def __init__(self, letter: str):
        """Create a variable leaf."""
        super().__init__(letter)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_variable(self)


class Digit(MathSymbol):
    """A decimal digit."""

    def __init__(self, digit: str):
        """Create a digit leaf."""
        super().__init__(digit)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_digit(self)


class BinaryOperator(MathSymbol):
    """A binary operator such as ``+`` or ``\\times``."""

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_binary_operator(self)


class Relation(MathSymbol):
    """A relation such as ``=`` or ``\\leq``."""

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_relation(self)


class Punctuation(MathSymbol):
    """A comma, semicolon or colon."""

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_punctuation(self)


class Spacing(MathSymbol):
    """An explicit spacing command (``\\,``, ``\\quad``, ``~``...)."""

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_spacing(self)


class TextChar(Leaf):
    """One character of a text-mode span; emitted verbatim."""

    def __init__(self, char: str):
        """Create a text character leaf."""
        super().__init__()
        self.char = char

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_text_char(self)

    def __repr__(self) -> str:
        return f"TextChar({self.char!r}, id={self.id})"


class OperatorName(Leaf):
    """An upright function name such as ``\\sin`` or ``\\operatorname{foo}``.

    Parameters
    ----------
    name : str
        Displayed name without backslash
    command : str, optional
        Catalog command (``"\\sin"``); None for ``\\operatorname`` names

    """

    def __init__(self, name: str, command: str | None = None):
        """Create an operator-name leaf."""
        super().__init__()
        self.name = name
        self.command = command

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_operator_name(self)

    def __repr__(self) -> str:
        return f"OperatorName({self.name!r}, id={self.id})"


class RawCommand(Leaf):
    """An unrecognized backslash command kept as an opaque token."""

    def __init__(self, command: str):
        """Create an opaque command leaf."""
        super().__init__()
        self.command = command

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_raw_command(self)

    def __repr__(self) -> str:
        return f"RawCommand({self.command!r}, id={self.id})"


_LEAF_CLASSES: dict[str, type[MathSymbol]] = {
    "ordinary": MathSymbol,
    "binary": BinaryOperator,
    "relation": Relation,
    "punctuation": Punctuation,
    "spacing": Spacing,
}


def create_leaf(spec: SymbolSpec, degradable: bool = True) -> MathSymbol:
    """Create the leaf described by a catalog entry.

    Parameters
    ----------
    spec : SymbolSpec
        Catalog entry
    degradable : bool, default True
        Carry the entry's degradation target; False yields a plain leaf

    Returns
    -------
    MathSymbol
        A new detached leaf

    """
    cls = _LEAF_CLASSES[spec.kind]
    command = spec.latex if spec.latex != spec.char else None
    degrades_to = spec.degrades_to if degradable else None
    return cls(spec.char, command, degrades_to)


def leaf_for_glyph(char: str) -> MathSymbol:
    """Create the leaf for a plain character appearing in markup.

    Letters become ``Variable``, digits ``Digit``, and grammar glyphs their
    operator class. The leaf's LaTeX form is always ``char`` itself.

    """
    if char.isascii() and char.isalpha():
        return Variable(char)
    if char.isascii() and char.isdigit():
        return Digit(char)
    spec = GLYPHS.get(char)
    if spec is not None:
        return create_leaf(spec)
    return MathSymbol(char)


def create_symbol_from_char(char: str) -> Leaf:
    """Map a typed character to a leaf.

    Typing differs from parsing for a few keys: ``*`` produces ``\\cdot``,
    and glyphs with a catalog command (``≤``) produce that command's leaf so
    they keep their degradation target.

    Parameters
    ----------
    char : str
        A single typed character

    Returns
    -------
    Leaf
        A new detached leaf

    """
    if char == "*":
        return create_leaf(lookup_symbol("\\cdot"))  # type: ignore[arg-type]
    if char.isascii():
        return leaf_for_glyph(char)
    spec = symbol_for_char(char)
    if spec is not None:
        return create_leaf(spec)
    return MathSymbol(char)
