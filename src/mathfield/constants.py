#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the mathfield library.

Constants are organized by category:
1. Type Definitions - Literal types and the Direction enum
2. Editing Defaults - default option values used by the editor
3. Markup Constants - reserved characters and separators of the LaTeX grammar
4. Configuration - configuration file names
5. Logging - default level and package logger name
6. CLI Exit Codes - process exit statuses
"""

from __future__ import annotations

from enum import IntEnum
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

MatrixEnvironment = Literal["matrix", "pmatrix", "bmatrix", "Bmatrix", "vmatrix", "Vmatrix"]
BracketKind = Literal["paren", "square", "curly", "abs", "angle"]
VerticalPreference = Literal["up", "down"]
UnknownCommandPolicy = Literal["keep", "text"]


class Direction(IntEnum):
    """Horizontal direction used for cursor movement and sibling links."""

    LEFT = -1
    RIGHT = 1

    @property
    def opposite(self) -> Direction:
        """Return the other direction."""
        return Direction.RIGHT if self is Direction.LEFT else Direction.LEFT


L = Direction.LEFT
R = Direction.RIGHT

# =============================================================================
# Editing Defaults
# =============================================================================

DEFAULT_MATRIX_ENV: MatrixEnvironment = "pmatrix"
DEFAULT_MATRIX_ROWS = 2
DEFAULT_MATRIX_COLS = 2
DEFAULT_LEFT_RIGHT_INTO_CMD_GOES: VerticalPreference | None = None
DEFAULT_UNKNOWN_COMMANDS: UnknownCommandPolicy = "keep"
DEFAULT_AUTO_EXIT_STYLES: tuple[str, ...] = ("\\mathbb", "\\mathcal", "\\mathfrak", "\\mathscr")

MATRIX_ENVIRONMENTS: tuple[MatrixEnvironment, ...] = ("matrix", "pmatrix", "bmatrix", "Bmatrix", "vmatrix", "Vmatrix")

# =============================================================================
# Markup Constants
# =============================================================================

# Characters that may appear directly in markup as operator/punctuation glyphs
OPERATOR_GLYPHS = "+-*/=<>!|()[],.;:'?"

# Characters with grammar meaning that can never be plain glyphs
RESERVED_CHARS = "\\{}_^&#$%"

# Text-mode spelling of a backslash character
TEXT_BACKSLASH = "\\textbackslash"

# Written for an empty last row that has no column separator to mark it
EMPTY_CELL_MARKER = "{}"

ROW_SEPARATOR = "\\\\"
COLUMN_SEPARATOR = "&"

# =============================================================================
# Configuration
# =============================================================================

CONFIG_FILENAMES = [".mathfield.toml", ".mathfield.yaml", ".mathfield.yml", ".mathfield.json"]
PYPROJECT_SECTION = "mathfield"

# =============================================================================
# Logging
# =============================================================================

DEFAULT_LOG_LEVEL = "WARNING"
LOGGER_NAME = "mathfield"

# =============================================================================
# CLI Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1
EXIT_USAGE_ERROR = 2
