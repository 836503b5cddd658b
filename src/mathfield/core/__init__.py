#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/core/__init__.py
"""Formula tree model and the cursor that edits it."""

from __future__ import annotations

from mathfield.core.cursor import Cursor, CursorPath, CursorPosition, Selection
from mathfield.core.nodes import Block, Composite, Fragment, Leaf, Node, RootBlock

__all__ = [
    "Block",
    "Composite",
    "Cursor",
    "CursorPath",
    "CursorPosition",
    "Fragment",
    "Leaf",
    "Node",
    "RootBlock",
    "Selection",
]
