#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/renderers/text.py
"""Plain-text projection of the formula tree for non-visual contexts."""

from __future__ import annotations

from typing import TYPE_CHECKING

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


class TextRenderer(BaseRenderer):
    """Render tree nodes as readable plain text.

    Operators and relations are padded with spaces, fractions become
    ``(a)/(b)``, roots ``sqrt(x)`` and matrices nested lists
    (``[[a, b], [c, d]]``). Accents keep their mark: ``\\hat{x}`` gives ``x`` followed by U+0302.

    """

    def visit_symbol(self, node: MathSymbol) -> str:
        return node.char

    def visit_variable(self, node: Variable) -> str:
        return node.char

    def visit_digit(self, node: Digit) -> str:
        return node.char

    def visit_binary_operator(self, node: BinaryOperator) -> str:
        return f" {node.char} "

    def visit_relation(self, node: Relation) -> str:
        return f" {node.char} "

    def visit_punctuation(self, node: Punctuation) -> str:
        return f"{node.char} "

    def visit_spacing(self, node: Spacing) -> str:
        return " " if node.char else ""

    def visit_text_char(self, node: TextChar) -> str:
        return node.char

    def visit_operator_name(self, node: OperatorName) -> str:
        return node.name

    def visit_raw_command(self, node: RawCommand) -> str:
        return node.command

    def visit_fraction(self, node: Fraction) -> str:
        return f"({self.render_block(node.numerator)})/({self.render_block(node.denominator)})"

    def visit_binomial(self, node: Binomial) -> str:
        return f"({self.render_block(node.numerator)} {self.render_block(node.denominator)})"

    def visit_square_root(self, node: SquareRoot) -> str:
        return f"sqrt({self.render_block(node.radicand)})"

    def visit_nth_root(self, node: NthRoot) -> str:
        return f"root({self.render_block(node.index)})({self.render_block(node.radicand)})"

    def visit_subscript(self, node: Subscript) -> str:
        return "_" + self.render_block(node.sub)

    def visit_superscript(self, node: Superscript) -> str:
        return "^" + self.render_block(node.sup)

    def visit_supsub(self, node: SupSub) -> str:
        return f"_{self.render_block(node.sub)}^{self.render_block(node.sup)}"

    def visit_brackets(self, node: Brackets) -> str:
        return node.open_char + self.render_block(node.content) + node.close_char

    def visit_accent(self, node: Accent) -> str:
        """Follow the content with the combining mark; longer content is parenthesized first."""
        content = self.render_block(node.content)
        if len(content) != 1:
            content = f"({content})"
        return content + node.mark

    def visit_text_style(self, node: TextStyle) -> str:
        return self.render_block(node.content)

    def visit_large_operator(self, node: LargeOperator) -> str:
        out = node.command.lstrip("\\")
        if node.lower is not None:
            out += "_" + self.render_block(node.lower)
        if node.upper is not None:
            out += "^" + self.render_block(node.upper)
        return out

    def visit_limit(self, node: Limit) -> str:
        out = node.command.lstrip("\\")
        if node.lower is not None:
            out += "_" + self.render_block(node.lower)
        return out

    def visit_matrix(self, node: Matrix) -> str:
        rows = ["[" + ", ".join(self.render_block(cell) for cell in row) + "]" for row in node.cells]
        return "[" + ", ".join(rows) + "]"
