#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/renderers/__init__.py
"""Renderers turning formula trees into markup or plain text.

- NodeVisitor: abstract visitor with one ``visit_*`` method per node class
- LatexRenderer: canonical LaTeX serializer
- TextRenderer: plain-text projection for non-visual contexts

Examples
--------
    >>> from mathfield.renderers import LatexRenderer
    >>> LatexRenderer().render_block(document.root)

"""

from __future__ import annotations

from mathfield.renderers.base import BaseRenderer, NodeVisitor
from mathfield.renderers.latex import LatexRenderer, join_latex
from mathfield.renderers.text import TextRenderer

__all__ = [
    "BaseRenderer",
    "LatexRenderer",
    "NodeVisitor",
    "TextRenderer",
    "join_latex",
]
