#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for EditorOptions."""

from dataclasses import FrozenInstanceError

import pytest

from mathfield.constants import DEFAULT_AUTO_EXIT_STYLES
from mathfield.exceptions import ValidationError
from mathfield.options import EditorOptions


@pytest.mark.unit
class TestEditorOptions:
    """Test option defaults, validation and cloning."""

    def test_defaults(self):
        """Test the default values."""
        options = EditorOptions()

        assert options.left_right_into_cmd_goes is None
        assert options.unknown_commands == "keep"
        assert options.auto_exit_styles == DEFAULT_AUTO_EXIT_STYLES
        assert not options.strict_set_latex
        assert options.literal_paste_fallback
        assert (options.default_matrix_env, options.default_matrix_rows, options.default_matrix_cols) == (
            "pmatrix",
            2,
            2,
        )

    def test_frozen(self):
        """Test that options cannot be mutated in place."""
        options = EditorOptions()

        with pytest.raises(FrozenInstanceError):
            options.unknown_commands = "text"

    def test_create_updated(self):
        """Test deriving a modified copy."""
        options = EditorOptions()
        updated = options.create_updated(left_right_into_cmd_goes="down")

        assert updated.left_right_into_cmd_goes == "down"
        assert options.left_right_into_cmd_goes is None

    def test_list_styles_become_tuple(self):
        """Test that list input is normalized so options stay hashable."""
        options = EditorOptions(auto_exit_styles=["\\mathbb"])

        assert options.auto_exit_styles == ("\\mathbb",)
        assert hash(options) == hash(EditorOptions(auto_exit_styles=("\\mathbb",)))

    @pytest.mark.parametrize(
        "field,value",
        [
            ("left_right_into_cmd_goes", "sideways"),
            ("unknown_commands", "drop"),
            ("default_matrix_env", "array"),
            ("default_matrix_rows", 0),
            ("default_matrix_cols", "3"),
            ("auto_exit_styles", ("mathbb",)),
        ],
    )
    def test_invalid_values(self, field, value):
        """Test that each field rejects bad values and names itself."""
        with pytest.raises(ValidationError) as exc_info:
            EditorOptions(**{field: value})
        assert exc_info.value.parameter_name == field

    def test_field_names(self):
        """Test the list of configurable fields."""
        names = EditorOptions.field_names()

        assert "unknown_commands" in names
        assert "default_matrix_cols" in names
        assert len(names) == 8
