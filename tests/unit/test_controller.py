#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the MathDocument editing facade.

Tests cover:
- Keyboard typing, command entry and auto-exit spans
- Deletion through the document (degradation, protective deletion)
- Markup replacement and its failure handling
- Selection, clipboard and literal paste fallback
- Snapshots and insertion helpers

"""

import pytest

from mathfield.commands.composites import Brackets, Fraction, LargeOperator, Matrix, SupSub
from mathfield.commands.leaves import RawCommand
from mathfield.controller import DocumentSnapshot, MathDocument
from mathfield.core.cursor import CursorPath
from mathfield.exceptions import ParsingError, ValidationError
from mathfield.options import EditorOptions


@pytest.mark.unit
class TestTyping:
    """Test keyboard-style input."""

    def test_plain_characters(self, doc):
        """Test letters, digits and operators."""
        doc.typed_text("x+1=y")

        assert doc.latex() == "x+1=y"

    def test_spaces_ignored_in_math(self, doc):
        """Test that spaces do not create nodes in math mode."""
        doc.typed_text("a + b")

        assert doc.latex() == "a+b"

    def test_star_is_cdot(self, doc):
        """Test that ``*`` types a centred dot."""
        doc.typed_text("a*b")

        assert doc.latex() == "a\\cdot b"

    def test_superscript_then_leave(self, doc):
        """Test typing a script and moving out of it."""
        doc.typed_text("x^2")
        assert doc.move_right()
        doc.typed_text("+1")

        assert doc.latex() == "x^2+1"

    def test_subscript_completed_into_pair(self, doc):
        """Test that ``^`` after a subscript completes a combined script."""
        doc.typed_text("x_1")
        doc.move_right()
        doc.typed_text("^2")

        assert isinstance(doc.root.child_at(1), SupSub)
        assert doc.latex() == "x_1^2"

    def test_superscript_completed_into_pair(self, doc):
        """Test the mirrored case, keeping the cursor in the new subscript."""
        doc.typed_text("x^2")
        doc.move_right()
        doc.typed_text("_i")

        assert doc.latex() == "x_i^2"
        assert doc.cursor.parent is doc.root.child_at(1).sub

    def test_slash_takes_left_operand(self, doc):
        """Test that ``/`` turns the operand on the left into a numerator."""
        doc.typed_text("a+12/3")

        assert doc.latex() == "a+\\frac{12}{3}"

    def test_slash_on_empty_side(self, doc):
        """Test that ``/`` after an operator creates an empty fraction."""
        doc.typed_text("a+/")

        fraction = doc.root.last_child
        assert isinstance(fraction, Fraction)
        assert doc.cursor.parent is fraction.numerator

    def test_brackets_close_on_matching_glyph(self, doc):
        """Test that typing the closing glyph leaves the bracket pair."""
        doc.typed_text("(a)+1")

        assert isinstance(doc.root.first_child, Brackets)
        assert doc.latex() == "\\left(a\\right)+1"

    def test_absolute_value_bars(self, doc):
        """Test that a second bar closes an absolute value."""
        doc.typed_text("|x|")

        assert doc.latex() == "\\left|x\\right|"
        assert doc.cursor.parent is doc.root

    def test_unmatched_closing_bracket_is_literal(self, doc):
        """Test a closing bracket with no open pair."""
        doc.typed_text("a)")

        assert doc.latex() == "a)"

    def test_reserved_character_is_escaped(self, doc):
        """Test that reserved characters become their escaped command."""
        doc.typed_text("a&b")

        assert doc.latex() == "a\\&b"


@pytest.mark.unit
class TestCommandEntry:
    """Test typed ``\\name`` commands."""

    def test_command_finalized_by_space(self, doc):
        """Test that a space completes the command and is swallowed."""
        doc.typed_text("a\\leq b")

        assert doc.latex() == "a\\leq b"
        assert doc.pending_command is None

    def test_command_finalized_by_non_letter(self, doc):
        """Test that a non-letter completes the command and is then typed."""
        doc.typed_text("\\alpha+1")

        assert doc.latex() == "\\alpha+1"

    def test_pending_until_flushed(self, doc):
        """Test that an unterminated command waits in the buffer."""
        doc.typed_text("\\beta")
        assert doc.pending_command == "\\beta"
        assert doc.latex() == ""

        doc.flush_command()
        assert doc.pending_command is None
        assert doc.latex() == "\\beta"

    def test_backspace_edits_pending_command(self, doc):
        """Test that backspace shortens the buffer before touching the tree."""
        doc.typed_text("x\\al")

        assert doc.backspace()
        assert doc.pending_command == "\\a"
        doc.backspace()
        doc.backspace()
        assert doc.pending_command is None
        assert doc.latex() == "x"

    def test_composite_command_enters_it(self, doc):
        """Test that ``\\sqrt`` puts the cursor in the radicand."""
        doc.typed_text("\\sqrt x")

        assert doc.latex() == "\\sqrt{x}"

    def test_operator_name_command(self, doc):
        """Test typed function names."""
        doc.typed_text("\\sin x")

        assert doc.latex() == "\\sin x"

    def test_single_character_command(self, doc):
        """Test escaped single characters such as ``\\{``."""
        doc.typed_text("\\{")

        assert doc.latex() == "\\{"

    def test_unknown_command_kept(self, doc):
        """Test the default policy for a typed unknown command."""
        doc.typed_text("\\foo x")

        assert isinstance(doc.root.first_child, RawCommand)
        assert doc.latex() == "\\foo x"

    def test_unknown_command_as_text(self):
        """Test the text policy, leaving the cursor after the span."""
        doc = MathDocument(options=EditorOptions(unknown_commands="text"))
        doc.typed_text("\\foo x")

        assert doc.latex() == "\\text{\\textbackslash{}foo}x"

    def test_insert_command_return_value(self, doc):
        """Test that only catalog commands report success."""
        assert doc.insert_command("\\alpha")
        assert not doc.insert_command("\\nosuchthing")


@pytest.mark.unit
class TestTextSpans:
    """Test text-mode typing and auto-exit styles."""

    def test_text_mode_keeps_spaces(self, doc):
        """Test that text spans take characters literally."""
        doc.insert_text_style("\\text")
        doc.typed_text("a b/c")

        assert doc.latex() == "\\text{a b/c}"

    def test_auto_exit_style(self, doc):
        """Test that a blackboard span is left after one leaf."""
        doc.insert_text_style("\\mathbb")
        doc.typed_text("RR")

        assert doc.latex() == "\\mathbb{R}R"

    def test_auto_exit_disabled(self):
        """Test that removing a style from the option keeps the cursor inside."""
        doc = MathDocument(options=EditorOptions(auto_exit_styles=()))
        doc.insert_text_style("\\mathbb")
        doc.typed_text("RR")

        assert doc.latex() == "\\mathbb{RR}"


@pytest.mark.unit
class TestDeletion:
    """Test deletion through the document."""

    def test_degradation_then_removal(self, doc):
        """Test that backspace degrades a relation before removing it."""
        doc.typed_text("a\\leq b")
        doc.move_left()

        doc.backspace()
        assert doc.latex() == "a<b"
        doc.backspace()
        assert doc.latex() == "ab"

    def test_empty_fraction_removed(self, doc):
        """Test that backspace in an empty fraction removes it."""
        doc.typed_text("a")
        doc.insert_fraction()

        assert doc.backspace()
        assert doc.latex() == "a"
        assert doc.cursor.parent is doc.root

    def test_non_empty_fraction_escaped(self, doc):
        """Test that backspace at the start of a filled block leaves the fraction intact."""
        doc.typed_text("a")
        fraction = doc.insert_fraction()
        doc.typed_text("b")
        doc.move_left()

        doc.backspace()
        assert doc.latex() == "a\\frac{b}{}"
        assert doc.cursor.right is fraction

        doc.backspace()
        assert doc.latex() == "\\frac{b}{}"

    def test_backspace_enters_filled_composite(self):
        """Test that backspace after a filled fraction moves into its last block."""
        doc = MathDocument("\\frac{a}{b}")

        doc.backspace()
        assert doc.latex() == "\\frac{a}{b}"
        assert doc.cursor.parent is doc.root.first_child.denominator

    def test_delete_forward(self):
        """Test forward deletion."""
        doc = MathDocument("ab")
        doc.move_to_start()

        assert doc.delete_forward()
        assert doc.latex() == "b"

    def test_backspace_at_root_start(self, doc):
        """Test that nothing happens at the very start."""
        assert not doc.backspace()


@pytest.mark.unit
class TestSetLatex:
    """Test replacing content from markup."""

    def test_replaces_content(self, doc):
        """Test a successful replacement with the cursor at the end."""
        assert doc.set_latex("x+1")

        assert doc.latex() == "x+1"
        assert doc.cursor.right is None
        assert doc.cursor.left is doc.root.last_child

    def test_malformed_markup_leaves_tree(self, doc):
        """Test that bad markup is ignored and reported."""
        doc.set_latex("x+1")
        root = doc.root

        assert not doc.set_latex("\\frac{a}")
        assert doc.root is root
        assert doc.latex() == "x+1"

    def test_strict_raises(self, doc):
        """Test strict mode per call and per options."""
        with pytest.raises(ParsingError):
            doc.set_latex("\\frac{a}", strict=True)

        strict = MathDocument(options=EditorOptions(strict_set_latex=True))
        with pytest.raises(ParsingError):
            strict.set_latex("{a")

    def test_constructor_markup_is_strict(self):
        """Test that initial markup must parse."""
        with pytest.raises(ParsingError):
            MathDocument("\\frac{a}")

    def test_text_projection(self):
        """Test the plain-text accessor."""
        assert MathDocument("\\frac{a}{b}").text() == "(a)/(b)"

    def test_find_node_by_id(self):
        """Test identifier lookup through the document."""
        doc = MathDocument("a+b")
        node = doc.root.child_at(1)

        assert doc.find_node_by_id(node.id) is node
        assert doc.find_node_by_id(10_000) is None


@pytest.mark.unit
class TestSelectionAndClipboard:
    """Test selection and clipboard operations."""

    def test_select_all_idempotent(self):
        """Test that selecting everything twice is the same as once."""
        doc = MathDocument("a+\\frac{1}{2}")
        doc.select_all()
        first = doc.selection_latex()
        doc.select_all()

        assert first == doc.selection_latex() == "a+\\frac{1}{2}"

    def test_select_all_from_nested_block(self):
        """Test that select_all reaches the root from inside a composite."""
        doc = MathDocument("x+\\frac{a}{b}")
        doc.move_left()
        doc.select_all()

        assert doc.selection_latex() == "x+\\frac{a}{b}"
        assert doc.cursor.parent is doc.root

    def test_clear_selection_idempotent(self):
        """Test clearing with and without a selection."""
        doc = MathDocument("ab")
        doc.clear_selection()
        doc.select_left()
        doc.clear_selection()
        doc.clear_selection()

        assert doc.selection_latex() == ""
        assert doc.latex() == "ab"

    def test_copy_keeps_content(self):
        """Test copying the selection."""
        doc = MathDocument("a+b")
        doc.select_left()

        assert doc.copy() == "b"
        assert doc.latex() == "a+b"

    def test_cut_removes_selection(self):
        """Test cutting the selection."""
        doc = MathDocument("a+b")
        doc.select_left()
        doc.select_left()

        assert doc.cut() == "+b"
        assert doc.latex() == "a"

    def test_typing_replaces_selection(self):
        """Test that inserting a node deletes the selection first."""
        doc = MathDocument("a+b")
        doc.select_left()
        doc.typed_text("c")

        assert doc.latex() == "a+c"

    def test_paste_markup(self):
        """Test pasting valid markup at the cursor."""
        doc = MathDocument("ab")
        doc.move_to_start()
        doc.move_right()

        assert doc.paste("\\frac{1}{2}")
        assert doc.latex() == "a\\frac{1}{2}b"

    def test_paste_replaces_selection(self):
        """Test that a selection is replaced by the pasted content."""
        doc = MathDocument("a+b")
        doc.select_left()

        doc.paste("\\sqrt{2}")
        assert doc.latex() == "a+\\sqrt{2}"

    def test_paste_literal_fallback(self, doc):
        """Test that unparseable text is inserted with reserved characters escaped."""
        assert not doc.paste("a}b")

        assert doc.latex() == "a\\}b"

    def test_paste_without_fallback_raises(self):
        """Test the fallback switched off."""
        doc = MathDocument(options=EditorOptions(literal_paste_fallback=False))

        with pytest.raises(ParsingError):
            doc.paste("a}b")
        assert doc.latex() == ""


@pytest.mark.unit
class TestSnapshots:
    """Test document snapshots."""

    def test_restore_content_and_cursor(self):
        """Test that restore brings back markup and cursor location."""
        doc = MathDocument("\\frac{a}{b}")
        doc.move_left()
        snapshot = doc.snapshot()

        assert snapshot.cursor == CursorPath(((0, 1),), 1)

        doc.typed_text("c")
        assert doc.latex() == "\\frac{a}{bc}"

        doc.restore(snapshot)
        assert doc.latex() == "\\frac{a}{b}"
        doc.typed_text("x")
        assert doc.latex() == "\\frac{a}{bx}"

    def test_restore_one_column_matrix(self, doc):
        """Test that an empty R x 1 matrix keeps its rows and the cursor its cell."""
        doc.insert_matrix("pmatrix", 2, 1)
        assert doc.move_down()
        snapshot = doc.snapshot()
        doc.typed_text("xyz")

        doc.restore(snapshot)
        matrix = doc.root.first_child

        assert doc.latex() == "\\begin{pmatrix} \\\\ {}\\end{pmatrix}"
        assert matrix.rows == 2
        assert doc.cursor.parent is matrix.cells[1][0]

    def test_restore_unresolvable_path(self):
        """Test that a stale path falls back to the end of the formula."""
        doc = MathDocument("ab")
        stale = DocumentSnapshot("ab", CursorPath(((0, 0),), 0))

        doc.restore(stale)
        assert doc.cursor.parent is doc.root
        assert doc.cursor.right is None

    def test_path_round_trips_through_lists(self):
        """Test the JSON-friendly path form."""
        path = CursorPath(((1, 0), (0, 2)), 3)

        assert CursorPath.from_list(path.to_list()) == path


@pytest.mark.unit
class TestInsertionHelpers:
    """Test the insert_* helpers."""

    def test_fraction_wraps_selection(self):
        """Test that a selection becomes the numerator."""
        doc = MathDocument("ab")
        doc.select_all()
        doc.insert_fraction()
        doc.typed_text("2")

        assert doc.latex() == "\\frac{ab}{2}"

    def test_brackets_wrap_selection(self):
        """Test that a selection becomes the bracket content."""
        doc = MathDocument("ab")
        doc.select_all()
        doc.insert_brackets("square")

        assert doc.latex() == "\\left[ab\\right]"

    def test_nth_root(self, doc):
        """Test typing the index and then the radicand."""
        doc.insert_nth_root()
        doc.typed_text("3")
        doc.move_right()
        doc.typed_text("x")

        assert doc.latex() == "\\sqrt[3]{x}"

    def test_large_operator(self, doc):
        """Test filling both limits with vertical movement."""
        operator = doc.insert_large_operator("\\sum")
        doc.typed_text("i=1")
        assert doc.move_up()
        doc.typed_text("n")

        assert isinstance(operator, LargeOperator)
        assert doc.latex() == "\\sum_{i=1}^{n}"

    def test_limit(self, doc):
        """Test the limit helper."""
        doc.insert_limit()
        doc.typed_text("x")

        assert doc.latex() == "\\lim_{x}"

    def test_one_column_matrix_survives_set_latex(self, doc):
        """Test that a filled first row and an empty last row both come back."""
        doc.insert_matrix("pmatrix", 2, 1)
        doc.typed_text("a")
        markup = doc.latex()

        copy = MathDocument()
        assert copy.set_latex(markup)
        assert markup == "\\begin{pmatrix}a \\\\ {}\\end{pmatrix}"
        assert copy.root.first_child.rows == 2
        assert copy.latex() == markup

    def test_matrix_defaults(self, doc):
        """Test a matrix from the option defaults, moving between cells."""
        matrix = doc.insert_matrix()
        doc.typed_text("a")
        doc.move_right()
        doc.typed_text("b")

        assert isinstance(matrix, Matrix)
        assert (matrix.environment, matrix.rows, matrix.cols) == ("pmatrix", 2, 2)
        assert matrix.get_cell(0, 1).latex() == "b"

    def test_symbols_and_operator_names(self, doc):
        """Test symbol and function-name insertion."""
        doc.insert_symbol("\\pi")
        doc.insert_operator_name("sin")
        doc.insert_operator_name("rank")

        assert doc.latex() == "\\pi\\sin\\operatorname{rank}"

    def test_invalid_arguments(self, doc):
        """Test helper validation."""
        with pytest.raises(ValidationError):
            doc.insert_symbol("\\nosuchsymbol")
        with pytest.raises(ValidationError):
            doc.insert_fraction("\\half")
        with pytest.raises(ValidationError):
            doc.insert_accent("\\wobble")

    def test_vertical_preference_option(self):
        """Test that the entry preference selects the numerator from the right."""
        doc = MathDocument("\\frac{a}{b}", EditorOptions(left_right_into_cmd_goes="up"))
        doc.move_left()
        doc.typed_text("c")

        assert doc.latex() == "\\frac{ac}{b}"

    def test_move_to_start_and_end(self):
        """Test absolute movement in the root block."""
        doc = MathDocument("ab")
        doc.move_to_start()
        doc.typed_text("x")
        doc.move_to_end()
        doc.typed_text("y")

        assert doc.latex() == "xaby"


@pytest.mark.unit
class TestStructuralCommands:
    """Test typed commands that only make sense inside markup."""

    def test_left_opens_parentheses(self, doc):
        """Test that ``\\left`` starts a bracket pair."""
        doc.typed_text("\\left x)")

        assert doc.latex() == "\\left(x\\right)"

    def test_markup_only_commands_become_text(self, doc):
        """Test that ``\\end`` is kept as text so the markup stays parseable."""
        assert not doc.insert_command("\\end")

        assert doc.latex() == "\\text{\\textbackslash{}end}"
        assert MathDocument(doc.latex()).latex() == doc.latex()
