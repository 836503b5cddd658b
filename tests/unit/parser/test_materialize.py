#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for building editable trees from parsed markup."""

import pytest

from mathfield.commands.composites import (
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
    OperatorName,
    RawCommand,
    Relation,
    TextChar,
    Variable,
)
from mathfield.core.cursor import Cursor
from mathfield.core.nodes import RootBlock
from mathfield.exceptions import ValidationError
from mathfield.parser.ast import decode_text
from mathfield.parser.latex import parse_latex
from mathfield.parser.materialize import TreeBuilder, materialize


def _build(markup, unknown_commands="keep"):
    return materialize(parse_latex(markup), unknown_commands)


def _kinds(block):
    return [type(node) for node in block.children()]


@pytest.mark.unit
class TestLeaves:
    """Test leaf materialization."""

    def test_letters_digits_operators(self):
        """Test that plain tokens become the matching leaf classes."""
        root = _build("x+1=y")

        assert _kinds(root) == [Variable, BinaryOperator, Digit, Relation, Variable]

    def test_catalog_symbol_keeps_degradation(self):
        """Test that a parsed relation can still degrade."""
        root = _build("a\\leq b")
        relation = root.child_at(1)

        assert isinstance(relation, Relation)
        assert relation.can_degrade()

    def test_operator_name(self):
        """Test catalog and custom operator names."""
        root = _build("\\sin x\\operatorname{rank}")
        sin, _, rank = root.children()

        assert isinstance(sin, OperatorName) and sin.command == "\\sin"
        assert isinstance(rank, OperatorName) and rank.name == "rank" and rank.command is None

    def test_unknown_command_kept(self):
        """Test the default policy for unknown commands."""
        root = _build("\\foo")

        assert isinstance(root.first_child, RawCommand)
        assert root.latex() == "\\foo"

    def test_unknown_command_as_text(self):
        """Test the text policy for unknown commands."""
        root = _build("\\foo", unknown_commands="text")
        span = root.first_child

        assert isinstance(span, TextStyle)
        assert span.command == "\\text"
        assert root.latex() == "\\text{\\textbackslash{}foo}"

    def test_invalid_policy(self):
        """Test builder validation."""
        with pytest.raises(ValidationError):
            TreeBuilder(Cursor(RootBlock()), "drop")


@pytest.mark.unit
class TestComposites:
    """Test composite materialization."""

    def test_fraction_blocks_filled(self):
        """Test that both fraction blocks are filled in order."""
        root = _build("\\frac{a+b}{2}")
        fraction = root.first_child

        assert isinstance(fraction, Fraction)
        assert fraction.numerator.latex() == "a+b"
        assert fraction.denominator.latex() == "2"

    def test_content_after_composite_stays_outside(self):
        """Test that the cursor returns after filling a composite."""
        root = _build("\\sqrt{x}y")

        assert _kinds(root) == [SquareRoot, Variable]

    def test_nth_root(self):
        """Test that an optional argument produces an nth root."""
        nth = _build("\\sqrt[3]{x}").first_child

        assert isinstance(nth, NthRoot)
        assert nth.index.latex() == "3"
        assert nth.radicand.latex() == "x"

    def test_empty_index_still_nth_root(self):
        """Test that ``\\sqrt[]{x}`` keeps its (empty) index."""
        root = _build("\\sqrt[]{x}")

        assert isinstance(root.first_child, NthRoot)
        assert root.latex() == "\\sqrt[]{x}"

    def test_scripts(self):
        """Test subscript, superscript and combined scripts."""
        assert _kinds(_build("x_1")) == [Variable, Subscript]
        assert _kinds(_build("x^2")) == [Variable, Superscript]
        pair = _build("x_i^2").child_at(1)
        assert isinstance(pair, SupSub)
        assert pair.sub.latex() == "i" and pair.sup.latex() == "2"

    def test_large_operator_limits(self):
        """Test that scripts on a large operator fill its limits."""
        operator = _build("\\sum_{i=1}^{n}").first_child

        assert isinstance(operator, LargeOperator)
        assert operator.lower.latex() == "i=1"
        assert operator.upper.latex() == "n"

    def test_large_operator_partial_limits(self):
        """Test operators with one or no limit."""
        lower_only = _build("\\int_0").first_child
        bare = _build("\\prod").first_child

        assert lower_only.upper is None and lower_only.lower.latex() == "0"
        assert bare.blocks == ()

    def test_limit(self):
        """Test that a subscript on ``\\lim`` becomes its lower block."""
        limit = _build("\\lim_{x\\to 0}").first_child

        assert isinstance(limit, Limit)
        assert limit.lower.latex() == "x\\to0"

    def test_limit_with_superscript(self):
        """Test that a superscript on a limit stays a separate script."""
        root = _build("\\lim_{n}^{2}")

        assert _kinds(root) == [Limit, Superscript]

    def test_brackets(self):
        """Test ``\\left``/``\\right`` pairs."""
        brackets = _build("\\left[x\\right)").first_child

        assert isinstance(brackets, Brackets)
        assert (brackets.open_delim, brackets.close_delim) == ("[", ")")
        assert brackets.content.latex() == "x"

    def test_matrix(self):
        """Test matrix cells filled by position."""
        matrix = _build("\\begin{bmatrix}1 & 2 \\\\ 3 & 4\\end{bmatrix}").first_child

        assert isinstance(matrix, Matrix)
        assert matrix.environment == "bmatrix"
        assert [[cell.latex() for cell in row] for row in matrix.cells] == [["1", "2"], ["3", "4"]]

    def test_text_mode_style(self):
        """Test that text spans hold text characters."""
        span = _build("\\text{a b}").first_child

        assert isinstance(span, TextStyle)
        assert all(isinstance(node, TextChar) for node in span.content.children())
        assert len(span.content) == 3

    def test_math_style(self):
        """Test that math styles hold math content."""
        span = _build("\\mathbb{R}").first_child

        assert _kinds(span.content) == [Variable]

    def test_escaped_braces_in_text(self):
        """Test that ``\\{`` inside text is one character."""
        span = _build("\\text{\\{x\\}}").first_child

        assert [node.char for node in span.content.children()] == ["{", "x", "}"]
        assert span.latex() == "\\text{\\{x\\}}"


@pytest.mark.unit
class TestTreeBuilder:
    """Test insertion through a cursor."""

    def test_build_at_cursor(self):
        """Test that nodes are inserted at the cursor and the cursor ends after them."""
        root = materialize(parse_latex("ab"))
        cursor = Cursor(root).move_to(root, left=root.first_child)

        TreeBuilder(cursor).build(parse_latex("\\frac{1}{2}"))
        assert root.latex() == "a\\frac{1}{2}b"
        assert isinstance(cursor.left, Fraction)
        assert cursor.parent is root

    def test_nodes_get_ids(self):
        """Test that materialized nodes are registered with the root."""
        root = _build("\\frac{a}{b}")

        assert all(node.id is not None for node in root.pre_order())

    def test_decode_text(self):
        """Test decoding of escaped braces."""
        assert decode_text("a\\{b\\}") == ["a", "{", "b", "}"]
        assert decode_text("\\alpha") == list("\\alpha")
        assert decode_text("a\\textbackslash\\}") == ["a", "\\", "}"]
        assert decode_text("\\textbackslash{}n") == ["\\", "n"]
        assert decode_text("\\\\") == ["\\", "\\"]


@pytest.mark.unit
class TestReparseEquality:
    """Test that serialized trees parse back to the syntax tree they came from."""

    @pytest.mark.parametrize(
        "markup",
        [
            "\\text{\\\\}",
            "\\text{\\\\a}",
            "\\text{a\\textbackslash}",
            "\\text{\\foo bar}",
            "\\text{a{b}c}",
            "\\begin{pmatrix}a \\\\ {}\\end{pmatrix}",
            "\\begin{pmatrix} \\\\ {}\\end{pmatrix}",
            "\\begin{bmatrix}a & \\\\ & \\end{bmatrix}",
            "\\begin{vmatrix}\\end{vmatrix}",
            "x^2_3",
            "\\lim_a^b",
            "\\sqrt[]{x}",
        ],
    )
    def test_reparse(self, markup):
        """Test parse, materialize, serialize, parse."""
        nodes = parse_latex(markup)

        assert parse_latex(materialize(nodes).latex()) == nodes

    def test_text_backslashes_materialize_once(self):
        """Test that a doubled backslash in text is two characters, spelled out on output."""
        root = _build("\\text{\\\\}")
        span = root.first_child

        assert [node.char for node in span.content.children()] == ["\\", "\\"]
        assert root.latex() == "\\text{\\textbackslash\\textbackslash}"

    def test_one_column_matrix_keeps_rows(self):
        """Test that an R x 1 matrix with an empty last row keeps its shape."""
        root = RootBlock()
        root.append(Matrix("pmatrix", 2, 1))
        markup = root.latex()

        assert markup == "\\begin{pmatrix} \\\\ {}\\end{pmatrix}"
        assert _build(markup).first_child.rows == 2
