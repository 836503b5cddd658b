#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the canonical LaTeX serializer."""

import pytest

from mathfield.commands.catalog import lookup_symbol
from mathfield.commands.composites import (
    Brackets,
    Fraction,
    LargeOperator,
    Limit,
    Matrix,
    NthRoot,
    Subscript,
    SupSub,
    Superscript,
    TextStyle,
)
from mathfield.commands.leaves import Digit, OperatorName, TextChar, Variable, create_leaf
from mathfield.core.nodes import RootBlock
from mathfield.renderers.latex import LatexRenderer, join_latex


def _fill(block, text):
    for char in text:
        block.append(Digit(char) if char.isdigit() else Variable(char))


@pytest.mark.unit
class TestJoinLatex:
    """Test the juxtaposition rule."""

    def test_letter_command_before_letter(self):
        """Test that a letter command is separated from a following letter."""
        assert join_latex(["\\alpha", "b"]) == "\\alpha b"

    def test_no_space_otherwise(self):
        """Test that nothing else gets a separator."""
        assert join_latex(["a", "+", "b"]) == "a+b"
        assert join_latex(["\\alpha", "2"]) == "\\alpha2"
        assert join_latex(["\\{", "a"]) == "\\{a"
        assert join_latex(["\\frac{1}{2}", "x"]) == "\\frac{1}{2}x"

    def test_empty_pieces_skipped(self):
        """Test that empty fragments do not break the rule."""
        assert join_latex(["\\sin", "", "x"]) == "\\sin x"


@pytest.mark.unit
class TestScripts:
    """Test brace omission for scripts."""

    def test_single_character_script_unbraced(self):
        """Test ``x^2``."""
        root = RootBlock()
        root.append(Variable("x"))
        script = root.append(Superscript())
        _fill(script.sup, "2")

        assert root.latex() == "x^2"

    def test_multi_character_script_braced(self):
        """Test ``x_{nm}``."""
        root = RootBlock()
        root.append(Variable("x"))
        script = root.append(Subscript())
        _fill(script.sub, "nm")

        assert root.latex() == "x_{nm}"

    def test_empty_script_braced(self):
        """Test that an empty script keeps its braces."""
        root = RootBlock()
        root.append(Superscript())

        assert root.latex() == "^{}"

    def test_command_script_braced(self):
        """Test that a one-symbol command script is still braced."""
        root = RootBlock()
        script = root.append(Superscript())
        script.sup.append(create_leaf(lookup_symbol("\\alpha")))

        assert root.latex() == "^{\\alpha}"

    def test_supsub_emits_subscript_first(self):
        """Test the canonical order of combined scripts."""
        pair = SupSub()
        _fill(pair.sup, "2")
        _fill(pair.sub, "ij")

        assert pair.latex() == "_{ij}^2"


@pytest.mark.unit
class TestComposites:
    """Test composite serialization."""

    def test_fraction_always_braced(self):
        """Test that required arguments are braced."""
        fraction = Fraction("\\dfrac")
        _fill(fraction.numerator, "1")
        _fill(fraction.denominator, "2")

        assert fraction.latex() == "\\dfrac{1}{2}"

    def test_nth_root(self):
        """Test the optional index."""
        nth = NthRoot()
        _fill(nth.index, "3")
        _fill(nth.radicand, "x")

        assert nth.latex() == "\\sqrt[3]{x}"

    def test_large_operator_limits_braced(self):
        """Test that limits are always braced."""
        operator = LargeOperator("\\sum")
        _fill(operator.lower, "i")
        _fill(operator.upper, "n")

        assert operator.latex() == "\\sum_{i}^{n}"
        assert LargeOperator("\\int", lower=False, upper=False).latex() == "\\int"

    def test_limit(self):
        """Test a limit with and without its lower block."""
        limit = Limit("\\lim")
        _fill(limit.lower, "n")

        assert limit.latex() == "\\lim_{n}"
        assert Limit("\\lim", lower=False).latex() == "\\lim"

    def test_brackets(self):
        """Test ``\\left``/``\\right`` output, including letter delimiters."""
        parens = Brackets("(")
        _fill(parens.content, "x")
        angle = Brackets.of_kind("angle")
        _fill(angle.content, "v")

        assert parens.latex() == "\\left(x\\right)"
        assert angle.latex() == "\\left\\langle v\\right\\rangle"

    def test_text_style(self):
        """Test text-mode and math-mode spans."""
        text = TextStyle("\\text")
        for char in "a {b}":
            text.content.append(TextChar(char))
        bold = TextStyle("\\mathbf")
        _fill(bold.content, "v")

        assert text.latex() == "\\text{a \\{b\\}}"
        assert bold.latex() == "\\mathbf{v}"

    def test_text_backslash(self):
        """Test that every backslash is spelled out, with ``{}`` before a letter."""
        span = TextStyle("\\text")
        for char in "\\}\\a\\":
            span.content.append(TextChar(char))

        assert span.latex() == "\\text{\\textbackslash\\}\\textbackslash{}a\\textbackslash}"

    def test_operator_names(self):
        """Test catalog and custom operator names."""
        root = RootBlock()
        root.append(OperatorName("sin", "\\sin"))
        root.append(Variable("x"))
        root.append(OperatorName("rank"))

        assert root.latex() == "\\sin x\\operatorname{rank}"

    def test_matrix(self):
        """Test matrix environments."""
        matrix = Matrix("pmatrix", 2, 2)
        for cell, text in zip(matrix.blocks, "abcd"):
            _fill(cell, text)

        assert matrix.latex() == "\\begin{pmatrix}a & b \\\\ c & d\\end{pmatrix}"

    def test_render_sequence(self):
        """Test rendering a list of sibling nodes."""
        nodes = [Variable("a"), create_leaf(lookup_symbol("\\cdot")), Variable("b")]

        assert LatexRenderer().render_sequence(nodes) == "a\\cdot b"
