#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end editing sessions through MathDocument."""

import pytest

from mathfield.controller import MathDocument
from mathfield.options import EditorOptions


@pytest.mark.integration
class TestEditingSessions:
    """Test realistic sequences of edits."""

    def test_quadratic_formula(self):
        """Test building the quadratic formula from the keyboard."""
        doc = MathDocument()
        doc.typed_text("x=")
        doc.insert_fraction()
        doc.typed_text("-b\\pm \\sqrt b^2")
        doc.move_right()
        doc.typed_text("-4ac")
        doc.move_right()
        doc.move_down()
        doc.typed_text("2a")

        assert doc.latex() == "x=\\frac{-b\\pm\\sqrt{b^2-4ac}}{2a}"
        assert doc.text() == "x = ( \u2212 b ± sqrt(b^2 \u2212 4ac))/(2a)"

    def test_cut_and_paste_reorders(self):
        """Test moving a term with the clipboard."""
        doc = MathDocument("ab")
        doc.select_left()
        clipboard = doc.cut()
        doc.move_to_start()
        doc.paste(clipboard)

        assert doc.latex() == "ba"

    def test_undo_with_snapshots(self):
        """Test a snapshot-based undo stack."""
        doc = MathDocument()
        history = []
        for chunk in ("x", "^2", "+1"):
            history.append(doc.snapshot())
            doc.typed_text(chunk)
            if chunk == "^2":
                doc.move_right()

        assert doc.latex() == "x^2+1"
        doc.restore(history.pop())
        assert doc.latex() == "x^2"
        doc.restore(history.pop())
        assert doc.latex() == "x"
        doc.typed_text("y")
        assert doc.latex() == "xy"

    def test_matrix_navigation(self):
        """Test moving between matrix cells horizontally and vertically."""
        doc = MathDocument()
        doc.insert_matrix("bmatrix", 2, 2)
        doc.typed_text("a")
        doc.move_right()
        doc.typed_text("b")
        doc.move_right()
        doc.typed_text("c")
        doc.move_up()
        doc.typed_text("x")

        markup = doc.latex()
        assert markup == "\\begin{bmatrix}ax & b \\\\ c & \\end{bmatrix}"
        assert MathDocument(markup).latex() == markup

    def test_edit_loaded_markup(self):
        """Test editing inside a formula that was set from markup."""
        doc = MathDocument("\\frac{a}{b}+c")
        doc.move_left()
        doc.move_left()
        doc.move_left()
        doc.typed_text("2")

        assert doc.latex() == "\\frac{a}{b2}+c"

    def test_delete_whole_fraction_from_outside(self):
        """Test clearing a fraction block by block and then removing it."""
        doc = MathDocument("\\frac{a}{b}")
        doc.backspace()
        doc.backspace()
        assert doc.latex() == "\\frac{a}{}"

        # Leaving the denominator keeps the numerator safe
        doc.backspace()
        assert doc.cursor.right is doc.root.first_child

        doc.delete_forward()
        doc.delete_forward()
        doc.delete_forward()

        assert doc.latex() == ""

    def test_text_policy_session(self):
        """Test unknown commands under the text policy across load and typing."""
        doc = MathDocument("\\foo+1", EditorOptions(unknown_commands="text"))
        doc.typed_text("+\\bar x")

        assert doc.latex() == "\\text{\\textbackslash{}foo}+1+\\bar{x}"
