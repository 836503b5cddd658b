#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/parser/__init__.py
"""LaTeX parsing for mathfield.

The package is split in three parts:

- ast: dataclass syntax tree nodes and the ``to_latex`` serializer
- latex: the recursive-descent ``LatexParser``
- materialize: ``TreeBuilder``, turning syntax trees into editable trees

Examples
--------
    >>> from mathfield.parser import materialize, parse_latex
    >>> root = materialize(parse_latex(r"\\sum_{i=1}^{n} i"))
    >>> root.latex()
    '\\\\sum_{i=1}^{n}i'

"""

from __future__ import annotations

from mathfield.parser.ast import (
    AstLatexSerializer,
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
    to_latex,
)
from mathfield.parser.latex import LatexParser, parse_latex, try_parse_latex
from mathfield.parser.materialize import TreeBuilder, materialize

__all__ = [
    "AstLatexSerializer",
    "AstNode",
    "AstVisitor",
    "Char",
    "Command",
    "Digit",
    "Group",
    "LatexParser",
    "LeftRight",
    "MatrixAst",
    "Space",
    "SubSupAst",
    "SubscriptAst",
    "SuperscriptAst",
    "Symbol",
    "TextArg",
    "TreeBuilder",
    "UnknownCommand",
    "decode_text",
    "materialize",
    "parse_latex",
    "to_latex",
    "try_parse_latex",
]
