#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/commands/composites.py
"""Composite node classes.

Each class here owns one or more ``Block`` objects and describes how the
cursor moves between them:

- Fraction and Binomial stack a numerator over a denominator
- SquareRoot holds a radicand; NthRoot adds an index block before it
- Subscript, Superscript and SupSub attach scripts to the preceding node;
  in SupSub the superscript is the upper block and the subscript the lower
- Brackets wrap a single block in a ``\\left``/``\\right`` delimiter pair
- Accent and TextStyle wrap a single block in a one-argument command
- LargeOperator and Limit carry optional limit blocks
- Matrix owns an R x C grid of ``MatrixCell`` blocks

Vertically stacked composites (``vertical = True``) do not link their
blocks for Left/Right movement: reaching the edge of one of their blocks
leaves the composite. Up/Down reaches the mirror block instead.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mathfield.commands.catalog import (
    ACCENTS,
    BRACKET_PAIRS,
    DELIMITERS,
    INTEGRALS,
    LARGE_OPERATORS,
    LIMIT_COMMANDS,
    MATRIX_DELIMITERS,
    TEXT_STYLES,
    bracket_kind,
)
from mathfield.constants import BracketKind, Direction, MatrixEnvironment
from mathfield.core.nodes import Block, Composite, RootBlock
from mathfield.exceptions import ValidationError

if TYPE_CHECKING:
    from mathfield.renderers.base import NodeVisitor


class Fraction(Composite):
    """A numerator stacked over a denominator.

    Parameters
    ----------
    command : str, default "\\\\frac"
        One of ``\\frac``, ``\\dfrac``, ``\\tfrac``, ``\\cfrac``

    """

    vertical = True

    def __init__(self, command: str = "\\frac"):
        """Create a fraction with empty numerator and denominator."""
        super().__init__()
        self.command = command
        self.numerator = self._own(Block())
        self.denominator = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        """Numerator then denominator."""
        return (self.numerator, self.denominator)

    def upper_block(self) -> Block | None:
        """Return the numerator."""
        return self.numerator

    def lower_block(self) -> Block | None:
        """Return the denominator."""
        return self.denominator

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_fraction(self)


class Binomial(Composite):
    """A binomial coefficient; laid out like a fraction without the bar."""

    vertical = True

    def __init__(self, command: str = "\\binom"):
        """Create a binomial with empty top and bottom blocks."""
        super().__init__()
        self.command = command
        self.numerator = self._own(Block())
        self.denominator = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.numerator, self.denominator)

    def upper_block(self) -> Block | None:
        return self.numerator

    def lower_block(self) -> Block | None:
        return self.denominator

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_binomial(self)


class SquareRoot(Composite):
    """A square root with one radicand block."""

    def __init__(self) -> None:
        """Create a square root with an empty radicand."""
        super().__init__()
        self.radicand = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.radicand,)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_square_root(self)


class NthRoot(Composite):
    """A root with an index block followed by a radicand block.

    Left/Right movement passes from the index straight into the radicand and
    back, so the two blocks read as one line.

    """

    def __init__(self) -> None:
        """Create a root with empty index and radicand."""
        super().__init__()
        self.index = self._own(Block())
        self.radicand = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.index, self.radicand)

    def block_after(self, block: Block, direction: Direction) -> Block | None:
        """Link the index to the radicand in reading order."""
        if block is self.index and direction is Direction.RIGHT:
            return self.radicand
        if block is self.radicand and direction is Direction.LEFT:
            return self.index
        return None

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_nth_root(self)


class Subscript(Composite):
    """A subscript attached to the node on its left."""

    def __init__(self) -> None:
        """Create an empty subscript."""
        super().__init__()
        self.sub = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.sub,)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_subscript(self)


class Superscript(Composite):
    """A superscript attached to the node on its left."""

    def __init__(self) -> None:
        """Create an empty superscript."""
        super().__init__()
        self.sup = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.sup,)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_superscript(self)


class SupSub(Composite):
    """Combined superscript and subscript.

    The superscript is the upper block (reached with Up) and comes first in
    reading order; the subscript is the lower block. Serialization emits the
    subscript first (``_{a}^{b}``).

    """

    vertical = True

    def __init__(self) -> None:
        """Create empty superscript and subscript blocks."""
        super().__init__()
        self.sup = self._own(Block())
        self.sub = self._own(Block())

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.sup, self.sub)

    def upper_block(self) -> Block | None:
        return self.sup

    def lower_block(self) -> Block | None:
        return self.sub

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_supsub(self)


class Brackets(Composite):
    """Content wrapped in an auto-paired delimiter pair.

    Parameters
    ----------
    open_delim : str, default "("
        ``\\left`` delimiter, as written in LaTeX
    close_delim : str, optional
        ``\\right`` delimiter; defaults to the partner of ``open_delim``

    """

    def __init__(self, open_delim: str = "(", close_delim: str | None = None):
        """Create brackets around an empty block."""
        super().__init__()
        if open_delim not in DELIMITERS:
            raise ValidationError(f"Unknown delimiter: {open_delim!r}", "open_delim", open_delim)
        if close_delim is None:
            close_delim = _partner(open_delim)
        if close_delim not in DELIMITERS:
            raise ValidationError(f"Unknown delimiter: {close_delim!r}", "close_delim", close_delim)
        self.open_delim = open_delim
        self.close_delim = close_delim
        self.content = self._own(Block())

    @classmethod
    def of_kind(cls, kind: BracketKind) -> Brackets:
        """Create brackets for one of the paired kinds (``"paren"``, ``"abs"``...)."""
        if kind not in BRACKET_PAIRS:
            raise ValidationError(f"Unknown bracket kind: {kind!r}", "kind", kind)
        open_delim, close_delim = BRACKET_PAIRS[kind]
        return cls(open_delim, close_delim)

    @property
    def kind(self) -> BracketKind | None:
        """Paired kind, or None for an unpaired or unusual delimiter pair."""
        return bracket_kind(self.open_delim, self.close_delim)

    @property
    def open_char(self) -> str:
        """Display glyph of the opening delimiter."""
        return DELIMITERS[self.open_delim]

    @property
    def close_char(self) -> str:
        """Display glyph of the closing delimiter."""
        return DELIMITERS[self.close_delim]

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.content,)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_brackets(self)


def _partner(open_delim: str) -> str:
    for open_, close in BRACKET_PAIRS.values():
        if open_ == open_delim:
            return close
    partners = {"\\lbrace": "\\rbrace", "\\lfloor": "\\rfloor", "\\lceil": "\\rceil", "\\lvert": "\\rvert"}
    return partners.get(open_delim, open_delim)


class Accent(Composite):
    """An accent over (or under) a block; the mark never changes."""

    def __init__(self, command: str = "\\hat"):
        """Create an accent around an empty block."""
        super().__init__()
        name = command.lstrip("\\")
        if name not in ACCENTS:
            raise ValidationError(f"Unknown accent: {command!r}", "command", command)
        self.command = command
        self.content = self._own(Block())

    @property
    def mark(self) -> str:
        """Combining character drawn by this accent."""
        return ACCENTS[self.command.lstrip("\\")]

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.content,)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_accent(self)


class TextStyle(Composite):
    """A styled span such as ``\\mathbb{R}`` or ``\\text{if}``.

    Text-mode spans (``\\text``, ``\\textbf``...) hold ``TextChar`` leaves and
    serialize them verbatim. Math styles hold ordinary math content.

    """

    def __init__(self, command: str = "\\text"):
        """Create a styled span around an empty block."""
        super().__init__()
        name = command.lstrip("\\")
        if name not in TEXT_STYLES:
            raise ValidationError(f"Unknown text style: {command!r}", "command", command)
        self.command = command
        self.content = self._own(Block())

    @property
    def text_mode(self) -> bool:
        """Whether the span holds raw text rather than math."""
        return TEXT_STYLES[self.command.lstrip("\\")]

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.content,)

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_text_style(self)


class LargeOperator(Composite):
    """A sum, product, integral or big set operator with optional limits.

    The upper limit is reachable with Up and the lower limit with Down. Both
    limits are independently optional; an operator without limits behaves
    like a leaf.

    Parameters
    ----------
    command : str, default "\\\\sum"
        Operator command
    lower : bool, default True
        Create a lower limit block
    upper : bool, default True
        Create an upper limit block

    """

    vertical = True

    def __init__(self, command: str = "\\sum", lower: bool = True, upper: bool = True):
        """Create a large operator with empty limit blocks."""
        super().__init__()
        if command.lstrip("\\") not in LARGE_OPERATORS:
            raise ValidationError(f"Unknown large operator: {command!r}", "command", command)
        self.command = command
        self.upper = self._own(Block()) if upper else None
        self.lower = self._own(Block()) if lower else None

    @property
    def symbol(self) -> str:
        """Display glyph of the operator."""
        return LARGE_OPERATORS[self.command.lstrip("\\")]

    @property
    def is_integral(self) -> bool:
        """Whether the operator is an integral sign."""
        return self.command.lstrip("\\") in INTEGRALS

    @property
    def blocks(self) -> tuple[Block, ...]:
        """Upper limit then lower limit, whichever exist."""
        return tuple(block for block in (self.upper, self.lower) if block is not None)

    def upper_block(self) -> Block | None:
        return self.upper

    def lower_block(self) -> Block | None:
        return self.lower

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_large_operator(self)


class Limit(Composite):
    """A limit-style operator (``\\lim``, ``\\liminf``, ``\\limsup``)."""

    vertical = True

    def __init__(self, command: str = "\\lim", lower: bool = True):
        """Create a limit with an optional empty lower block."""
        super().__init__()
        if command.lstrip("\\") not in LIMIT_COMMANDS:
            raise ValidationError(f"Unknown limit command: {command!r}", "command", command)
        self.command = command
        self.lower = self._own(Block()) if lower else None

    @property
    def name(self) -> str:
        """Displayed operator name."""
        return LIMIT_COMMANDS[self.command.lstrip("\\")]

    @property
    def blocks(self) -> tuple[Block, ...]:
        return (self.lower,) if self.lower is not None else ()

    def lower_block(self) -> Block | None:
        return self.lower

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_limit(self)


class MatrixCell(Block):
    """A matrix block that knows its grid coordinates."""

    def __init__(self, row: int, col: int):
        """Create an empty cell at ``(row, col)``."""
        super().__init__()
        self.row = row
        self.col = col

    def __repr__(self) -> str:
        return f"MatrixCell(row={self.row}, col={self.col}, id={self.id})"


class Matrix(Composite):
    """An R x C grid of cells inside a matrix environment.

    Cells are linked in row-major order for Left/Right movement: leaving the
    last cell of a row continues in the first cell of the next row. Up/Down
    keep the column.

    Parameters
    ----------
    environment : str, default "pmatrix"
        One of ``matrix``, ``pmatrix``, ``bmatrix``, ``Bmatrix``,
        ``vmatrix``, ``Vmatrix``
    rows : int, default 2
        Number of rows (at least 1)
    cols : int, default 2
        Number of columns (at least 1)

    """

    def __init__(self, environment: MatrixEnvironment = "pmatrix", rows: int = 2, cols: int = 2):
        """Create a matrix of empty cells."""
        super().__init__()
        if environment not in MATRIX_DELIMITERS:
            raise ValidationError(f"Unknown matrix environment: {environment!r}", "environment", environment)
        if rows < 1 or cols < 1:
            raise ValidationError(f"Matrix dimensions must be positive, got {rows}x{cols}", "rows/cols", (rows, cols))
        self.environment = environment
        self.cells: list[list[MatrixCell]] = []
        for row in range(rows):
            self.cells.append([self._own(MatrixCell(row, col)) for col in range(cols)])

    @property
    def rows(self) -> int:
        """Number of rows."""
        return len(self.cells)

    @property
    def cols(self) -> int:
        """Number of columns."""
        return len(self.cells[0])

    @property
    def delimiters(self) -> tuple[str, str]:
        """Display glyphs around the grid."""
        return MATRIX_DELIMITERS[self.environment]

    @property
    def blocks(self) -> tuple[Block, ...]:
        """All cells in row-major order."""
        return tuple(cell for row in self.cells for cell in row)

    def get_cell(self, row: int, col: int) -> MatrixCell | None:
        """Return the cell at ``(row, col)``, or None when out of range."""
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return self.cells[row][col]
        return None

    def first_cell(self) -> MatrixCell:
        """Return the top-left cell."""
        return self.cells[0][0]

    def last_cell(self) -> MatrixCell:
        """Return the bottom-right cell."""
        return self.cells[-1][-1]

    def cell_left(self, cell: MatrixCell) -> MatrixCell | None:
        """Return the cell to the left within the same row."""
        return self.get_cell(cell.row, cell.col - 1)

    def cell_right(self, cell: MatrixCell) -> MatrixCell | None:
        """Return the cell to the right within the same row."""
        return self.get_cell(cell.row, cell.col + 1)

    def cell_up(self, cell: MatrixCell) -> MatrixCell | None:
        """Return the cell above in the same column."""
        return self.get_cell(cell.row - 1, cell.col)

    def cell_down(self, cell: MatrixCell) -> MatrixCell | None:
        """Return the cell below in the same column."""
        return self.get_cell(cell.row + 1, cell.col)

    def block_after(self, block: Block, direction: Direction) -> Block | None:
        """Continue through the cells in row-major order."""
        if not isinstance(block, MatrixCell):
            return None
        index = block.row * self.cols + block.col + int(direction)
        if 0 <= index < self.rows * self.cols:
            return self.cells[index // self.cols][index % self.cols]
        return None

    def block_above(self, block: Block) -> Block | None:
        return self.cell_up(block) if isinstance(block, MatrixCell) else None

    def block_below(self, block: Block) -> Block | None:
        return self.cell_down(block) if isinstance(block, MatrixCell) else None

    def add_row(self, after: int | None = None) -> list[MatrixCell]:
        """Insert a row of empty cells below row ``after`` (default: at the bottom)."""
        position = self.rows if after is None else after + 1
        new_row = [self._own(MatrixCell(position, col)) for col in range(self.cols)]
        self.cells.insert(position, new_row)
        self._renumber()
        self._register_cells(new_row)
        return new_row

    def add_column(self, after: int | None = None) -> list[MatrixCell]:
        """Insert a column of empty cells right of column ``after`` (default: at the end)."""
        position = self.cols if after is None else after + 1
        new_cells: list[MatrixCell] = []
        for row_index, row in enumerate(self.cells):
            cell = self._own(MatrixCell(row_index, position))
            row.insert(position, cell)
            new_cells.append(cell)
        self._renumber()
        self._register_cells(new_cells)
        return new_cells

    def _renumber(self) -> None:
        for row_index, row in enumerate(self.cells):
            for col_index, cell in enumerate(row):
                cell.row = row_index
                cell.col = col_index

    def _register_cells(self, cells: list[MatrixCell]) -> None:
        root = self.root()
        if isinstance(root, RootBlock):
            for cell in cells:
                cell.id = root.next_id()

    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor."""
        return visitor.visit_matrix(self)
