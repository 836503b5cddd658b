#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the static command catalog and leaf factories."""

import pytest

from mathfield.commands.catalog import (
    COMMAND_SPECS,
    SYMBOLS,
    bracket_kind,
    is_known_command,
    is_large_operator,
    is_limit_command,
    is_operator_name,
    lookup_command,
    lookup_symbol,
    symbol_for_char,
)
from mathfield.commands.leaves import (
    BinaryOperator,
    Digit,
    MathSymbol,
    Punctuation,
    Relation,
    Spacing,
    Variable,
    create_leaf,
    create_symbol_from_char,
    leaf_for_glyph,
)


@pytest.mark.unit
class TestLookups:
    """Test catalog lookups."""

    def test_lookup_command_symbol(self):
        """Test looking up a Greek letter."""
        spec = lookup_symbol("\\alpha")

        assert spec is not None
        assert spec.char == "α"
        assert spec.kind == "ordinary"

    def test_lookup_plain_glyph(self):
        """Test that plain glyphs resolve through the glyph table."""
        spec = lookup_symbol("<")

        assert spec is not None
        assert spec.kind == "relation"
        assert spec.degrades_to is None

    def test_lookup_unknown(self):
        """Test that unknown forms return None."""
        assert lookup_symbol("\\notacommand") is None
        assert lookup_command("\\alpha") is None

    def test_degradation_targets_resolve(self):
        """Test that every degradation target is itself in the catalog."""
        for spec in SYMBOLS.values():
            if spec.degrades_to is not None:
                assert lookup_symbol(spec.degrades_to) is not None, spec.latex

    def test_command_arities(self):
        """Test argument specs of common commands."""
        assert lookup_command("\\frac").args == 2
        assert lookup_command("\\sqrt").opt_args == 1
        assert lookup_command("\\hat").args == 1
        assert lookup_command("\\text").text_mode
        assert not lookup_command("\\mathbb").text_mode
        assert lookup_command("\\operatorname").kind == "operatorname"

    def test_every_command_spec_is_known(self):
        """Test that the parser recognizes every argument-taking command."""
        for name in COMMAND_SPECS:
            assert is_known_command(name)

    def test_command_classification(self):
        """Test the operator, large-operator and limit predicates."""
        assert is_operator_name("\\sin")
        assert not is_operator_name("sin")
        assert is_large_operator("\\sum")
        assert is_large_operator("\\int")
        assert is_limit_command("\\limsup")
        assert not is_known_command("\\foo")
        assert is_known_command("\\left")

    def test_symbol_for_char(self):
        """Test reverse lookup from glyph to command."""
        assert symbol_for_char("≤").latex in ("\\leq", "\\le")
        assert symbol_for_char("α").latex == "\\alpha"
        assert symbol_for_char("x") is None

    def test_bracket_kind(self):
        """Test classifying delimiter pairs."""
        assert bracket_kind("(", ")") == "paren"
        assert bracket_kind("|", "|") == "abs"
        assert bracket_kind("\\langle", "\\rangle") == "angle"
        assert bracket_kind("(", "]") is None


@pytest.mark.unit
class TestLeafFactories:
    """Test creation of leaves from catalog entries and characters."""

    def test_create_leaf_classes(self):
        """Test that the symbol kind selects the leaf class."""
        assert isinstance(create_leaf(lookup_symbol("\\times")), BinaryOperator)
        assert isinstance(create_leaf(lookup_symbol("\\leq")), Relation)
        assert isinstance(create_leaf(lookup_symbol(",")), Punctuation)
        assert isinstance(create_leaf(lookup_symbol("\\quad")), Spacing)
        assert type(create_leaf(lookup_symbol("\\pi"))) is MathSymbol

    def test_create_leaf_latex_form(self):
        """Test that command symbols keep their command."""
        leaf = create_leaf(lookup_symbol("\\leq"))

        assert leaf.char == "≤"
        assert leaf.latex_form == "\\leq"
        assert leaf.can_degrade()

    def test_non_degradable_leaf(self):
        """Test that degradation can be switched off."""
        leaf = create_leaf(lookup_symbol("\\leq"), degradable=False)

        assert not leaf.can_degrade()
        assert leaf.degraded() is None

    def test_degraded_leaf_does_not_degrade_further(self):
        """Test that degradation is one step only."""
        degraded = create_leaf(lookup_symbol("\\subseteq")).degraded()

        assert degraded.latex_form == "\\subset"
        assert not degraded.can_degrade()

    def test_leaf_for_glyph(self):
        """Test plain characters from markup."""
        assert isinstance(leaf_for_glyph("x"), Variable)
        assert isinstance(leaf_for_glyph("7"), Digit)
        assert isinstance(leaf_for_glyph("+"), BinaryOperator)
        assert isinstance(leaf_for_glyph("="), Relation)
        assert leaf_for_glyph("-").latex_form == "-"
        assert leaf_for_glyph("-").char == "−"
        assert type(leaf_for_glyph("!")) is MathSymbol

    def test_typed_star_is_cdot(self):
        """Test that typing ``*`` produces a centred dot."""
        assert create_symbol_from_char("*").latex_form == "\\cdot"

    def test_typed_unicode_maps_to_command(self):
        """Test that a typed glyph with a catalog command keeps degradation."""
        leaf = create_symbol_from_char("≠")

        assert isinstance(leaf, Relation)
        assert leaf.can_degrade()

    def test_typed_unknown_unicode(self):
        """Test that unknown glyphs become plain symbols."""
        leaf = create_symbol_from_char("☃")

        assert type(leaf) is MathSymbol
        assert leaf.latex_form == "☃"
