#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/controller.py
r"""Document facade tying the tree, the cursor, and the parser together.

A ``MathDocument`` owns one root block and one cursor. It is what keyboard,
pointer and clipboard handlers talk to: every call completes synchronously
and the document assumes exclusive access for its duration.

Examples
--------
Typing and reading back markup:

    >>> doc = MathDocument()
    >>> doc.typed_text("x^2")
    >>> doc.move_right()
    True
    >>> doc.typed_text("+1")
    >>> doc.latex()
    'x^2+1'

Replacing the content from markup:

    >>> doc.set_latex(r"\frac{a}{b}")
    True
    >>> doc.set_latex(r"\frac{a}{")
    False
    >>> doc.latex()
    '\\frac{a}{b}'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from mathfield.commands.catalog import (
    ACCENTS,
    BINOMIAL_COMMANDS,
    FRACTION_COMMANDS,
    TEXT_STYLES,
    is_known_command,
    is_large_operator,
    is_limit_command,
    is_operator_name,
    lookup_symbol,
)
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
    Digit,
    MathSymbol,
    OperatorName,
    RawCommand,
    TextChar,
    Variable,
    create_leaf,
    create_symbol_from_char,
)
from mathfield.constants import MATRIX_ENVIRONMENTS, BracketKind, Direction, MatrixEnvironment
from mathfield.core.cursor import Cursor, CursorPath
from mathfield.core.nodes import Block, Composite, Node, RootBlock
from mathfield.exceptions import ParsingError, ValidationError
from mathfield.options import EditorOptions
from mathfield.parser.latex import parse_latex
from mathfield.parser.materialize import TreeBuilder, materialize

logger = logging.getLogger(__name__)

# Typed characters opening a bracket pair
_TYPED_BRACKETS: dict[str, BracketKind] = {"(": "paren", "[": "square", "{": "curly", "|": "abs"}

# Characters that cannot appear bare in markup, and the command standing for each
_RESERVED_LITERALS = {
    "\\": "\\backslash",
    "{": "\\{",
    "}": "\\}",
    "_": "\\_",
    "#": "\\#",
    "$": "\\$",
    "%": "\\%",
    "&": "\\&",
    "~": "\\sim",
}


@dataclass(frozen=True)
class DocumentSnapshot:
    """Value snapshot of a document: its markup and the cursor location."""

    latex: str
    cursor: CursorPath


class MathDocument:
    """An editable formula with a cursor.

    Parameters
    ----------
    latex : str, optional
        Initial content
    options : EditorOptions, optional
        Editor behaviour; defaults to ``EditorOptions()``

    Attributes
    ----------
    root : RootBlock
        Top-level block of the formula
    cursor : Cursor
        The editing position

    Raises
    ------
    ParsingError
        If ``latex`` is given and malformed

    """

    def __init__(self, latex: Optional[str] = None, options: Optional[EditorOptions] = None):
        """Create a document, optionally seeded with markup."""
        self.options = options or EditorOptions()
        self.root = RootBlock()
        self.cursor = self._new_cursor(self.root)
        self._command_buffer: Optional[str] = None
        if latex:
            self.set_latex(latex, strict=True)

    def __repr__(self) -> str:
        return f"MathDocument({self.latex()!r})"

    def _new_cursor(self, root: Block) -> Cursor:
        return Cursor(root, self.options.left_right_into_cmd_goes, self.options.auto_exit_styles)

    # ------------------------------------------------------------------
    # Markup in and out
    # ------------------------------------------------------------------

    def latex(self) -> str:
        """Serialize the whole formula to canonical LaTeX."""
        return self.root.latex()

    def text(self) -> str:
        """Render the whole formula as plain text."""
        return self.root.text()

    def selection_latex(self) -> str:
        """Serialize the selection, or return an empty string without one."""
        selection = self.cursor.selection
        return selection.latex() if selection is not None else ""

    def set_latex(self, latex: str, strict: Optional[bool] = None) -> bool:
        """Replace the formula with parsed markup.

        The markup is parsed and materialized into a fresh root first; the
        current tree is only replaced when that succeeds. The cursor ends up
        at the end of the new formula.

        Parameters
        ----------
        latex : str
            Replacement markup
        strict : bool, optional
            Raise on malformed markup; defaults to ``options.strict_set_latex``

        Returns
        -------
        bool
            True if the formula was replaced; False if the markup was
            malformed and the formula left untouched

        Raises
        ------
        ParsingError
            If the markup is malformed and ``strict`` is enabled

        """
        strict = self.options.strict_set_latex if strict is None else strict
        try:
            nodes = parse_latex(latex)
        except ParsingError as e:
            if strict:
                raise
            logger.warning("Ignoring malformed markup %r: %s", latex, e)
            return False

        self.root = materialize(nodes, self.options.unknown_commands)
        self.cursor = self._new_cursor(self.root)
        self.cursor.move_to_end()
        self._command_buffer = None
        return True

    def find_node_by_id(self, node_id: int) -> Node | Block | None:
        """Return the attached node or block with identifier ``node_id``."""
        return self.root.find_by_id(node_id)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> DocumentSnapshot:
        """Capture the formula and cursor location as plain values."""
        return DocumentSnapshot(self.latex(), self.cursor.path())

    def restore(self, snapshot: DocumentSnapshot) -> None:
        """Return to a state captured with ``snapshot``.

        Raises
        ------
        ParsingError
            If the snapshot markup does not parse (it always does for
            snapshots taken from a document)

        """
        self.root = materialize(parse_latex(snapshot.latex), self.options.unknown_commands)
        self.cursor = self._new_cursor(self.root)
        if not self.cursor.move_to_path(self.root, snapshot.cursor):
            logger.debug("Snapshot cursor path no longer resolves; cursor placed at the end")
        self._command_buffer = None

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def move_left(self) -> bool:
        """Move the cursor one step left."""
        return self.cursor.move_left()

    def move_right(self) -> bool:
        """Move the cursor one step right."""
        return self.cursor.move_right()

    def move_up(self) -> bool:
        """Move the cursor to the block above."""
        return self.cursor.move_up()

    def move_down(self) -> bool:
        """Move the cursor to the block below."""
        return self.cursor.move_down()

    def move_to_start(self) -> None:
        """Move the cursor to the start of the formula."""
        if self.root.first_child is None:
            self.cursor.move_to(self.root)
        else:
            self.cursor.move_to(self.root, right=self.root.first_child)

    def move_to_end(self) -> None:
        """Move the cursor to the end of the formula."""
        self.cursor.move_to(self.root)

    # ------------------------------------------------------------------
    # Selection and clipboard
    # ------------------------------------------------------------------

    def select(self, direction: Direction) -> bool:
        """Grow or shrink the selection by one sibling."""
        return self.cursor.select(direction)

    def select_left(self) -> bool:
        return self.cursor.select_left()

    def select_right(self) -> bool:
        return self.cursor.select_right()

    def select_all(self) -> None:
        """Select the whole formula."""
        self.cursor.select_all()

    def clear_selection(self) -> None:
        """Drop the selection without changing the formula."""
        self.cursor.clear_selection()

    def copy(self) -> str:
        """Return the selection as markup."""
        return self.selection_latex()

    def cut(self) -> str:
        """Return the selection as markup and delete it."""
        latex = self.selection_latex()
        self.cursor.delete_selection()
        return latex

    def paste(self, text: str) -> bool:
        """Insert markup at the cursor, replacing any selection.

        Markup that does not parse is inserted as literal characters instead
        (unless ``options.literal_paste_fallback`` is off).

        Returns
        -------
        bool
            True if the text parsed as markup; False if it was inserted
            literally

        Raises
        ------
        ParsingError
            If the text does not parse and the literal fallback is disabled

        """
        try:
            nodes = parse_latex(text)
        except ParsingError as e:
            if not self.options.literal_paste_fallback:
                raise
            logger.info("Pasted text is not valid markup (%s); inserting it literally", e)
            self.cursor.delete_selection()
            for char in text:
                if not char.isspace():
                    self.cursor.insert(self._literal_node(char), eject=False)
            return False

        self.cursor.delete_selection()
        TreeBuilder(self.cursor, self.options.unknown_commands).build(nodes)
        return True

    @staticmethod
    def _literal_node(char: str) -> Node:
        command = _RESERVED_LITERALS.get(char)
        if command is not None:
            spec = lookup_symbol(command)
            if spec is not None:
                return create_leaf(spec, degradable=False)
        if char == "^":
            span = TextStyle("\\text")
            span.content.append(TextChar(char))
            return span
        return create_symbol_from_char(char)

    # ------------------------------------------------------------------
    # Deletion and raw insertion
    # ------------------------------------------------------------------

    def backspace(self) -> bool:
        """Delete leftwards (see ``Cursor.backspace``)."""
        if self._command_buffer is not None:
            self._command_buffer = self._command_buffer[:-1] or None
            return True
        return self.cursor.backspace()

    def delete_forward(self) -> bool:
        """Delete rightwards (see ``Cursor.delete_forward``)."""
        return self.cursor.delete_forward()

    def insert(self, node: Node) -> None:
        """Insert a detached node at the cursor."""
        self.cursor.insert(node)

    def _insert_composite(
        self,
        node: Composite,
        enter: Optional[Block],
        wrap: Optional[Block] = None,
        after_wrap: Optional[Block] = None,
    ) -> Composite:
        """Insert ``node`` and move the cursor into it.

        A selection is moved into ``wrap`` when given; the cursor then goes
        to the end of ``after_wrap`` (or of ``wrap``). Otherwise the cursor
        goes to the end of ``enter``, or stays after the node when None.

        """
        wrapped = self.cursor.delete_selection()
        self.cursor.insert(node, eject=False)
        if wrapped and wrap is not None:
            for child in wrapped:
                wrap.append(child)
            enter = after_wrap if after_wrap is not None else wrap
        if enter is not None:
            self.cursor.move_to(enter)
        return node

    # ------------------------------------------------------------------
    # Insertion helpers
    # ------------------------------------------------------------------

    def insert_fraction(self, command: str = "\\frac") -> Fraction:
        """Insert a fraction; a selection becomes the numerator."""
        if command not in FRACTION_COMMANDS:
            raise ValidationError(f"Unknown fraction command: {command!r}", "command", command)
        fraction = Fraction(command)
        self._insert_composite(fraction, fraction.numerator, fraction.numerator, fraction.denominator)
        return fraction

    def insert_binomial(self, command: str = "\\binom") -> Binomial:
        """Insert a binomial coefficient; a selection becomes the top."""
        if command not in BINOMIAL_COMMANDS:
            raise ValidationError(f"Unknown binomial command: {command!r}", "command", command)
        binomial = Binomial(command)
        self._insert_composite(binomial, binomial.numerator, binomial.numerator, binomial.denominator)
        return binomial

    def insert_square_root(self) -> SquareRoot:
        """Insert a square root; a selection becomes the radicand."""
        root = SquareRoot()
        self._insert_composite(root, root.radicand, root.radicand)
        return root

    def insert_nth_root(self) -> NthRoot:
        """Insert an nth root with the cursor in its index."""
        root = NthRoot()
        self._insert_composite(root, root.index, root.radicand, root.index)
        return root

    def insert_superscript(self) -> Composite:
        """Insert a superscript, or complete a subscript on the left into a pair."""
        left = self.cursor.left
        if isinstance(left, Subscript) and self.cursor.selection is None:
            pair = self._pair_script(left)
            self.cursor.move_to(pair.sup)
            return pair
        if isinstance(left, SupSub) and self.cursor.selection is None:
            self.cursor.move_to(left.sup)
            return left
        script = Superscript()
        self._insert_composite(script, script.sup, script.sup)
        return script

    def insert_subscript(self) -> Composite:
        """Insert a subscript, or complete a superscript on the left into a pair."""
        left = self.cursor.left
        if isinstance(left, Superscript) and self.cursor.selection is None:
            pair = self._pair_script(left)
            self.cursor.move_to(pair.sub)
            return pair
        if isinstance(left, SupSub) and self.cursor.selection is None:
            self.cursor.move_to(left.sub)
            return left
        script = Subscript()
        self._insert_composite(script, script.sub, script.sub)
        return script

    def _pair_script(self, single: Subscript | Superscript) -> SupSub:
        pair = SupSub()
        source, target = (single.sub, pair.sub) if isinstance(single, Subscript) else (single.sup, pair.sup)
        block = single.parent
        if block is None:
            raise ValidationError("Script to complete is not attached", "script", single)
        block.replace_child(single, pair)
        for child in list(source.children()):
            target.append(child.remove())
        self.cursor.move_to(block, pair)
        return pair

    def insert_brackets(self, kind: BracketKind = "paren") -> Brackets:
        """Insert a bracket pair; a selection becomes the content."""
        brackets = Brackets.of_kind(kind)
        self._insert_composite(brackets, brackets.content, brackets.content)
        return brackets

    def insert_text_style(self, command: str = "\\text") -> TextStyle:
        """Insert a styled span (``\\mathbb``, ``\\text``...)."""
        if command.lstrip("\\") not in TEXT_STYLES:
            raise ValidationError(f"Unknown text style: {command!r}", "command", command)
        span = TextStyle(command)
        self._insert_composite(span, span.content, span.content)
        return span

    def insert_accent(self, command: str = "\\hat") -> Accent:
        """Insert an accent; a selection becomes the accented content."""
        if command.lstrip("\\") not in ACCENTS:
            raise ValidationError(f"Unknown accent: {command!r}", "command", command)
        accent = Accent(command)
        self._insert_composite(accent, accent.content, accent.content)
        return accent

    def insert_large_operator(self, command: str = "\\sum", lower: bool = True, upper: bool = True) -> LargeOperator:
        """Insert a large operator with the cursor in its lower limit (or upper, or after it)."""
        operator = LargeOperator(command, lower=lower, upper=upper)
        self._insert_composite(operator, operator.lower if operator.lower is not None else operator.upper)
        return operator

    def insert_limit(self, command: str = "\\lim") -> Limit:
        """Insert a limit with the cursor in its lower block."""
        limit = Limit(command)
        self._insert_composite(limit, limit.lower)
        return limit

    def insert_matrix(
        self,
        environment: Optional[MatrixEnvironment] = None,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
    ) -> Matrix:
        """Insert a matrix with the cursor in its first cell.

        Missing arguments come from the ``default_matrix_*`` options. A
        selection becomes the content of the first cell.

        """
        matrix = Matrix(
            environment or self.options.default_matrix_env,
            rows or self.options.default_matrix_rows,
            cols or self.options.default_matrix_cols,
        )
        self._insert_composite(matrix, matrix.first_cell(), matrix.first_cell())
        return matrix

    def insert_symbol(self, command: str) -> Node:
        """Insert a catalog symbol such as ``\\alpha`` or ``\\leq``.

        Raises
        ------
        ValidationError
            If ``command`` is not a catalog symbol

        """
        spec = lookup_symbol(command)
        if spec is None:
            raise ValidationError(f"Unknown symbol: {command!r}", "command", command)
        leaf = create_leaf(spec)
        self.cursor.insert(leaf)
        return leaf

    def insert_operator_name(self, name: str) -> OperatorName:
        """Insert an upright function name (``sin``, or any name via ``\\operatorname``)."""
        name = name.lstrip("\\")
        command = "\\" + name
        leaf = OperatorName(name, command if is_operator_name(command) else None)
        self.cursor.insert(leaf)
        return leaf

    def insert_command(self, name: str) -> bool:
        """Insert whatever a typed ``\\name`` stands for.

        ``\\left`` opens a pair of parentheses. Markup-only commands that
        cannot stand on their own (``\\right``, ``\\begin``, ``\\end``,
        ``\\operatorname``) are inserted as a ``\\text`` span.

        Returns
        -------
        bool
            True for catalog commands; False when the command was unknown or
            markup-only and inserted as an opaque token or text span

        """
        bare = name[1:]
        if lookup_symbol(name) is not None:
            self.insert_symbol(name)
        elif is_operator_name(name):
            self.insert_operator_name(bare)
        elif is_large_operator(name):
            self.insert_large_operator(name)
        elif is_limit_command(name):
            self.insert_limit(name)
        elif name in FRACTION_COMMANDS:
            self.insert_fraction(name)
        elif name in BINOMIAL_COMMANDS:
            self.insert_binomial(name)
        elif name == "\\sqrt":
            self.insert_square_root()
        elif name == "\\nthroot":
            self.insert_nth_root()
        elif bare in ACCENTS:
            self.insert_accent(name)
        elif bare in TEXT_STYLES:
            self.insert_text_style(name)
        elif bare in MATRIX_ENVIRONMENTS:
            self.insert_matrix(bare)  # type: ignore[arg-type]
        elif name == "\\left":
            self.insert_brackets("paren")
        elif is_known_command(name):
            # \right, \begin and the like cannot stand alone in markup
            logger.debug("Typed structural command %s inserted as text", name)
            self._insert_text_span(name)
            return False
        else:
            logger.debug("Typed unknown command %s", name)
            if self.options.unknown_commands == "text":
                self._insert_text_span(name)
            else:
                self.cursor.insert(RawCommand(name))
            return False
        return True

    def _insert_text_span(self, name: str) -> TextStyle:
        """Insert ``\\text{name}`` and leave the cursor after it."""
        span = self.insert_text_style("\\text")
        for char in name:
            span.content.append(TextChar(char))
        if span.parent is not None:
            self.cursor.move_to(span.parent, span)
        return span

    # ------------------------------------------------------------------
    # Typing
    # ------------------------------------------------------------------

    @property
    def pending_command(self) -> Optional[str]:
        """The ``\\name`` typed so far and not yet finalised, if any."""
        return self._command_buffer

    def flush_command(self) -> None:
        """Finalise a pending typed command."""
        name, self._command_buffer = self._command_buffer, None
        if name is not None and name != "\\":
            self.insert_command(name)

    def typed_text(self, text: str) -> None:
        r"""Apply characters as if typed on a keyboard.

        In math mode ``/`` creates a fraction (taking the operand on its
        left as numerator), ``^`` and ``_`` create scripts, ``(`` ``[`` ``{``
        ``|`` create brackets, and a closing bracket leaves the matching
        bracket pair. ``\`` starts command entry, finalised by a space or any
        non-letter. Spaces are ignored except inside text-mode spans, which
        take every character literally.

        """
        for char in text:
            self._type_char(char)

    def _in_text_mode(self) -> bool:
        owner = self.cursor.parent.owner
        return isinstance(owner, TextStyle) and owner.text_mode

    def _type_char(self, char: str) -> None:
        if self._command_buffer is not None:
            if char.isascii() and char.isalpha():
                self._command_buffer += char
                return
            name, self._command_buffer = self._command_buffer, None
            if name == "\\":
                # Single-character command such as \{ or \,
                if lookup_symbol("\\" + char) is not None:
                    self.insert_symbol("\\" + char)
                else:
                    self.cursor.insert(self._literal_node(char))
                return
            self.insert_command(name)
            if char == " ":
                return

        if self._in_text_mode():
            self.cursor.insert(TextChar(char))
            return

        if char == "\\":
            self._command_buffer = "\\"
        elif char.isspace():
            return
        elif char == "/":
            self._type_fraction()
        elif char == "^":
            self.insert_superscript()
        elif char == "_":
            self.insert_subscript()
        elif char in _TYPED_BRACKETS or char in ")]}":
            if self._close_bracket(char):
                return
            if char in _TYPED_BRACKETS:
                self.insert_brackets(_TYPED_BRACKETS[char])
            else:
                self.cursor.insert(self._literal_node(char))
        elif char in _RESERVED_LITERALS:
            self.cursor.insert(self._literal_node(char))
        else:
            self.cursor.insert(create_symbol_from_char(char))

    def _close_bracket(self, char: str) -> bool:
        """Leave the enclosing bracket pair when ``char`` is its closing glyph."""
        owner = self.cursor.parent.owner
        if not isinstance(owner, Brackets) or owner.parent is None:
            return False
        if char != owner.close_char:
            return False
        self.cursor.move_to(owner.parent, owner)
        return True

    def _type_fraction(self) -> None:
        """Create a fraction from ``/``, taking the operand on the left as numerator."""
        if self.cursor.selection is not None:
            self.insert_fraction()
            return
        operand: list[Node] = []
        node = self.cursor.left
        while node is not None and _is_operand(node):
            operand.append(node)
            node = node.left
        if not operand:
            self.insert_fraction()
            return
        fraction = Fraction()
        block = self.cursor.parent
        block.insert_child(fraction, self.cursor.right)
        for child in reversed(operand):
            fraction.numerator.append(child.remove())
        self.cursor.move_to(fraction.denominator)


def _is_operand(node: Node) -> bool:
    if isinstance(node, (Variable, Digit, Subscript, Superscript, SupSub)):
        return True
    # Greek letters and other ordinary symbols, but not operators or relations
    return type(node) is MathSymbol
