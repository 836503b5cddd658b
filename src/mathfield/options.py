#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/options.py
"""Editor options.

``EditorOptions`` is an immutable dataclass. Use ``create_updated`` to derive
a modified copy:

    >>> options = EditorOptions()
    >>> stacked = options.create_updated(left_right_into_cmd_goes="up")

"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from mathfield.constants import (
    DEFAULT_AUTO_EXIT_STYLES,
    DEFAULT_LEFT_RIGHT_INTO_CMD_GOES,
    DEFAULT_MATRIX_COLS,
    DEFAULT_MATRIX_ENV,
    DEFAULT_MATRIX_ROWS,
    DEFAULT_UNKNOWN_COMMANDS,
    MATRIX_ENVIRONMENTS,
    MatrixEnvironment,
    UnknownCommandPolicy,
    VerticalPreference,
)
from mathfield.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class EditorOptions(CloneFrozenMixin):
    """Behavioural options for a ``MathDocument``.

    Parameters
    ----------
    left_right_into_cmd_goes : {'up', 'down'} or None, default None
        When Left/Right enters a vertically stacked composite (fraction,
        limits, scripts pair), enter its upper or lower block. None enters
        the block nearest the side the cursor comes from.
    unknown_commands : {'keep', 'text'}, default 'keep'
        Materialize unknown commands as opaque leaves, or as ``\\text`` spans
    auto_exit_styles : tuple of str
        Style commands the cursor leaves after one typed leaf
    strict_set_latex : bool, default False
        Raise ``ParsingError`` from ``set_latex`` instead of logging and
        returning False
    literal_paste_fallback : bool, default True
        Insert pasted text character by character when it does not parse
    default_matrix_env : str, default 'pmatrix'
        Environment used by ``insert_matrix`` when none is given
    default_matrix_rows : int, default 2
        Row count used by ``insert_matrix`` when none is given
    default_matrix_cols : int, default 2
        Column count used by ``insert_matrix`` when none is given

    """

    left_right_into_cmd_goes: VerticalPreference | None = field(
        default=DEFAULT_LEFT_RIGHT_INTO_CMD_GOES,
        metadata={"help": "Block entered when moving horizontally into a stacked composite (up/down)"},
    )
    unknown_commands: UnknownCommandPolicy = field(
        default=DEFAULT_UNKNOWN_COMMANDS,
        metadata={"help": "How unknown commands are materialized (keep/text)"},
    )
    auto_exit_styles: tuple[str, ...] = field(
        default=DEFAULT_AUTO_EXIT_STYLES,
        metadata={"help": "Style commands the cursor leaves after a single typed leaf"},
    )
    strict_set_latex: bool = field(
        default=False,
        metadata={"help": "Raise on malformed markup in set_latex instead of returning False"},
    )
    literal_paste_fallback: bool = field(
        default=True,
        metadata={"help": "Insert unparseable pasted text as literal characters"},
    )
    default_matrix_env: MatrixEnvironment = field(
        default=DEFAULT_MATRIX_ENV,
        metadata={"help": "Matrix environment for insert_matrix"},
    )
    default_matrix_rows: int = field(
        default=DEFAULT_MATRIX_ROWS,
        metadata={"help": "Matrix rows for insert_matrix", "type": int},
    )
    default_matrix_cols: int = field(
        default=DEFAULT_MATRIX_COLS,
        metadata={"help": "Matrix columns for insert_matrix", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        if self.left_right_into_cmd_goes not in (None, "up", "down"):
            raise ValidationError(
                f"left_right_into_cmd_goes must be 'up', 'down' or None, got {self.left_right_into_cmd_goes!r}",
                "left_right_into_cmd_goes",
                self.left_right_into_cmd_goes,
            )
        if self.unknown_commands not in ("keep", "text"):
            raise ValidationError(
                f"unknown_commands must be 'keep' or 'text', got {self.unknown_commands!r}",
                "unknown_commands",
                self.unknown_commands,
            )
        if self.default_matrix_env not in MATRIX_ENVIRONMENTS:
            raise ValidationError(
                f"default_matrix_env must be one of {', '.join(MATRIX_ENVIRONMENTS)}, got {self.default_matrix_env!r}",
                "default_matrix_env",
                self.default_matrix_env,
            )
        for name in ("default_matrix_rows", "default_matrix_cols"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValidationError(f"{name} must be a positive integer, got {value!r}", name, value)

        # Lists from config files become tuples so the options stay hashable
        if not isinstance(self.auto_exit_styles, tuple):
            object.__setattr__(self, "auto_exit_styles", tuple(self.auto_exit_styles))
        for command in self.auto_exit_styles:
            if not isinstance(command, str) or not command.startswith("\\"):
                raise ValidationError(
                    f"auto_exit_styles entries must be commands such as '\\\\mathbb', got {command!r}",
                    "auto_exit_styles",
                    command,
                )

    @classmethod
    def field_names(cls) -> list[str]:
        """Return the names of all option fields."""
        return [f.name for f in fields(cls)]
