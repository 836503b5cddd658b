#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/commands/__init__.py
"""Command catalog: leaf and composite node classes plus the static symbol tables.

The tables in ``catalog`` are the persisted schema of the markup format
(command names, arities, optional-argument counts and degradation targets)
and are versioned through ``CATALOG_VERSION``.

"""

from __future__ import annotations

from mathfield.commands.catalog import (
    CATALOG_VERSION,
    COMMAND_SPECS,
    CommandSpec,
    SymbolSpec,
    lookup_command,
    lookup_symbol,
    symbol_for_char,
)
from mathfield.commands.composites import (
    Accent,
    Binomial,
    Brackets,
    Fraction,
    LargeOperator,
    Limit,
    Matrix,
    MatrixCell,
    NthRoot,
    SquareRoot,
    Subscript,
    SupSub,
    Superscript,
    TextStyle,
)
from mathfield.commands.leaves import (
    BinaryOperator,
    Digit,
    MathSymbol,
    OperatorName,
    Punctuation,
    RawCommand,
    Relation,
    Spacing,
    TextChar,
    Variable,
    create_leaf,
    create_symbol_from_char,
    leaf_for_glyph,
)

__all__ = [
    "CATALOG_VERSION",
    "COMMAND_SPECS",
    "Accent",
    "BinaryOperator",
    "Binomial",
    "Brackets",
    "CommandSpec",
    "Digit",
    "Fraction",
    "LargeOperator",
    "Limit",
    "MathSymbol",
    "Matrix",
    "MatrixCell",
    "NthRoot",
    "OperatorName",
    "Punctuation",
    "RawCommand",
    "Relation",
    "Spacing",
    "SquareRoot",
    "Subscript",
    "SupSub",
    "Superscript",
    "SymbolSpec",
    "TextChar",
    "TextStyle",
    "Variable",
    "create_leaf",
    "create_symbol_from_char",
    "leaf_for_glyph",
    "lookup_command",
    "lookup_symbol",
    "symbol_for_char",
]
