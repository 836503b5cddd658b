#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/renderers/latex.py
"""LaTeX serializer for the formula tree.

Canonicalization rules
----------------------
- Juxtaposed nodes are concatenated without whitespace. The one exception is
  a command name made of letters followed by output starting with a letter,
  which needs a single separating space (``\\alpha b``).
- A subscript or superscript whose content serializes to exactly one
  character omits the braces (``x^2``); anything else is braced
  (``x^{nm}``, ``x^{}``).
- Large-operator and limit bounds are always braced (``\\sum_{i}^{n}``).
- Required command arguments are always braced (``\\frac{1}{2}``).
- Matrices serialize as ``\\begin{env}a & b \\\\ c & d\\end{env}``.
  An empty last row is written as ``{}`` (``\\begin{env}a \\\\ {}\\end{env}``).

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

from mathfield.constants import EMPTY_CELL_MARKER, TEXT_BACKSLASH
from mathfield.renderers.base import BaseRenderer

if TYPE_CHECKING:
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
    )
    from mathfield.core.nodes import Block

_TRAILING_LETTER_COMMAND = re.compile(r"\\[A-Za-z]+$")
_LEADING_LETTER = re.compile(r"^[A-Za-z]")

# Characters that must be escaped inside text-mode spans
_TEXT_ESCAPES = {"{": "\\{", "}": "\\}"}


def join_latex(pieces: Iterable[str]) -> str:
    """Concatenate LaTeX fragments, separating a letter command from a following letter.

    Parameters
    ----------
    pieces : iterable of str
        Fragments in order

    Returns
    -------
    str
        The joined markup

    Examples
    --------
        >>> join_latex(["\\\\alpha", "b"])
        '\\\\alpha b'
        >>> join_latex(["a", "+", "b"])
        'a+b'

    """
    out: list[str] = []
    previous = ""
    for piece in pieces:
        if not piece:
            continue
        if _TRAILING_LETTER_COMMAND.search(previous) and _LEADING_LETTER.match(piece):
            out.append(" ")
        out.append(piece)
        previous = piece
    return "".join(out)


class LatexRenderer(BaseRenderer):
    """Render tree nodes to canonical LaTeX markup."""

    def join(self, pieces: Iterable[str]) -> str:
        """Concatenate siblings with the letter-command spacing rule."""
        return join_latex(pieces)

    def _braced(self, block: Block) -> str:
        return "{" + self.render_block(block) + "}"

    def _script(self, marker: str, block: Block) -> str:
        content = self.render_block(block)
        if len(content) == 1:
            return marker + content
        return marker + "{" + content + "}"

    # Leaves

    def visit_symbol(self, node: MathSymbol) -> str:
        """Emit the symbol's command or glyph."""
        return node.latex_form

    def visit_variable(self, node: Variable) -> str:
        return node.latex_form

    def visit_digit(self, node: Digit) -> str:
        return node.latex_form

    def visit_binary_operator(self, node: BinaryOperator) -> str:
        return node.latex_form

    def visit_relation(self, node: Relation) -> str:
        return node.latex_form

    def visit_punctuation(self, node: Punctuation) -> str:
        return node.latex_form

    def visit_spacing(self, node: Spacing) -> str:
        return node.latex_form

    def visit_text_char(self, node: TextChar) -> str:
        """Emit the character verbatim, escaping braces."""
        return _TEXT_ESCAPES.get(node.char, node.char)

    def visit_operator_name(self, node: OperatorName) -> str:
        """Emit ``\\sin`` for catalog names, ``\\operatorname{...}`` otherwise."""
        if node.command is not None:
            return node.command
        return "\\operatorname{" + node.name + "}"

    def visit_raw_command(self, node: RawCommand) -> str:
        return node.command

    # Composites

    def visit_fraction(self, node: Fraction) -> str:
        """Emit ``\\frac{num}{den}`` with the node's own fraction command."""
        return node.command + self._braced(node.numerator) + self._braced(node.denominator)

    def visit_binomial(self, node: Binomial) -> str:
        return node.command + self._braced(node.numerator) + self._braced(node.denominator)

    def visit_square_root(self, node: SquareRoot) -> str:
        return "\\sqrt" + self._braced(node.radicand)

    def visit_nth_root(self, node: NthRoot) -> str:
        """Emit ``\\sqrt[n]{x}``; an index containing ``]`` is wrapped in braces."""
        index = self.render_block(node.index)
        if "]" in index:
            index = "{" + index + "}"
        return "\\sqrt[" + index + "]" + self._braced(node.radicand)

    def visit_subscript(self, node: Subscript) -> str:
        return self._script("_", node.sub)

    def visit_superscript(self, node: Superscript) -> str:
        return self._script("^", node.sup)

    def visit_supsub(self, node: SupSub) -> str:
        """Emit the subscript before the superscript."""
        return self._script("_", node.sub) + self._script("^", node.sup)

    def visit_brackets(self, node: Brackets) -> str:
        return join_latex(
            ["\\left" + node.open_delim, self.render_block(node.content), "\\right" + node.close_delim]
        )

    def visit_accent(self, node: Accent) -> str:
        return node.command + self._braced(node.content)

    def visit_text_style(self, node: TextStyle) -> str:
        """Emit ``\\mathbb{...}``; text-mode content is copied character by character.

        Braces in text are escaped. Every backslash becomes ``\\textbackslash``,
        terminated by ``{}`` when a letter follows.

        """
        if node.text_mode:
            children = list(node.content.children())
            pieces = []
            for index, child in enumerate(children):
                if getattr(child, "char", None) != "\\":
                    pieces.append(child.accept(self))
                    continue
                following = children[index + 1] if index + 1 < len(children) else None
                if _LEADING_LETTER.match(getattr(following, "char", "")):
                    pieces.append(TEXT_BACKSLASH + "{}")
                else:
                    pieces.append(TEXT_BACKSLASH)
            return node.command + "{" + "".join(pieces) + "}"
        return node.command + self._braced(node.content)

    def visit_large_operator(self, node: LargeOperator) -> str:
        """Emit the operator followed by braced lower and upper limits."""
        out = node.command
        if node.lower is not None:
            out += "_" + self._braced(node.lower)
        if node.upper is not None:
            out += "^" + self._braced(node.upper)
        return out

    def visit_limit(self, node: Limit) -> str:
        out = node.command
        if node.lower is not None:
            out += "_" + self._braced(node.lower)
        return out

    def visit_matrix(self, node: Matrix) -> str:
        """Emit a matrix environment with `` & `` and `` \\\\ `` separators.

        An empty last row below other rows is written as ``{}`` so that it is
        not read back as a trailing separator.

        """
        rows = [" & ".join(self.render_block(cell) for cell in row) for row in node.cells]
        if len(rows) > 1 and not rows[-1]:
            rows[-1] = EMPTY_CELL_MARKER
        body = " \\\\ ".join(rows)
        return "\\begin{" + node.environment + "}" + body + "\\end{" + node.environment + "}"
