#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/__init__.py
r"""mathfield - the editing engine behind an interactive math-expression editor.

mathfield keeps a formula as a tree of nodes arranged in blocks, exposes a
cursor and selection for navigating and editing that tree the way a person
reads two-dimensional notation, and converts between the tree and LaTeX
markup with round-trip guarantees.

Rendering, hit-testing, keyboard dispatch and undo storage are left to the
host application, which drives a ``MathDocument``.

Key Features
------------
- Node/block tree with stable per-document identifiers
- Cursor movement into and out of fractions, roots, scripts, limits and
  matrices, with Up/Down between stacked blocks
- Protective deletion and one-step symbol degradation (``≤`` to ``<``)
- Recursive-descent LaTeX parser with position-aware errors
- Canonical LaTeX serializer and plain-text projection

Examples
--------
    >>> from mathfield import MathDocument
    >>> doc = MathDocument(r"\sum_{i=1}^{n} x_{i}")
    >>> doc.latex()
    '\\sum_{i=1}^{n}x_i'
    >>> doc.text()
    'sum_i = 1^nx_i'

"""

from __future__ import annotations

__version__ = "0.1.0"

from mathfield.constants import Direction
from mathfield.controller import DocumentSnapshot, MathDocument
from mathfield.core.cursor import Cursor, CursorPath, CursorPosition, Selection
from mathfield.core.nodes import Block, Composite, Fragment, Leaf, Node, RootBlock
from mathfield.exceptions import (
    ConfigError,
    MathFieldError,
    NotAttachedError,
    ParsingError,
    StructuralIntegrityError,
    ValidationError,
)
from mathfield.options import EditorOptions
from mathfield.parser import materialize, parse_latex, to_latex, try_parse_latex

__all__ = [
    "__version__",
    "Block",
    "Composite",
    "ConfigError",
    "Cursor",
    "CursorPath",
    "CursorPosition",
    "Direction",
    "DocumentSnapshot",
    "EditorOptions",
    "Fragment",
    "Leaf",
    "MathDocument",
    "MathFieldError",
    "Node",
    "NotAttachedError",
    "ParsingError",
    "RootBlock",
    "Selection",
    "StructuralIntegrityError",
    "ValidationError",
    "materialize",
    "parse_latex",
    "to_latex",
    "try_parse_latex",
]
