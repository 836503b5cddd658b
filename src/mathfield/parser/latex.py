#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/parser/latex.py
r"""Recursive-descent parser from LaTeX markup to the syntax tree.

The parser walks an index over the input string; there is no separate
tokenizer. Parsing happens in two passes per sequence:

1. A raw pass reads tokens (characters, commands with their arguments,
   groups, ``\left``/``\right`` pairs, matrix environments, and script
   markers with their argument).
2. A post-processing pass splices braced groups into their surroundings,
   drops whitespace, and merges each script marker with the node before
   it. A ``_`` immediately followed by a ``^`` (or the reverse) merges into
   a single ``SubSupAst``.

Supported Markup
----------------
- Letters, digits, operator glyphs and other printable characters
- Catalog symbols (``\alpha``, ``\leq``, ``\,`` ...)
- Commands with arguments (``\frac{a}{b}``, ``\sqrt[3]{x}``, ``\hat x``)
- Text-mode arguments (``\text{a b}``, ``\operatorname{foo}``)
- ``\left( ... \right)`` with any catalog delimiter
- ``\begin{pmatrix} a & b \\ c & d \end{pmatrix}`` and the other matrix
  environments, nested to any depth

Unknown commands are kept as ``UnknownCommand`` tokens; every other
malformed input raises ``ParsingError`` carrying the offending position
and what was expected there.

"""

from __future__ import annotations

import logging
from typing import Optional

from mathfield.commands.catalog import (
    DELIMITERS,
    CommandSpec,
    is_large_operator,
    is_limit_command,
    is_operator_name,
    lookup_command,
    lookup_symbol,
    symbol_for_char,
)
from mathfield.constants import COLUMN_SEPARATOR, MATRIX_ENVIRONMENTS, OPERATOR_GLYPHS, RESERVED_CHARS, ROW_SEPARATOR
from mathfield.exceptions import ParsingError
from mathfield.parser.ast import (
    AstNode,
    Char,
    Command,
    Digit,
    Group,
    LeftRight,
    MatrixAst,
    Space,
    SubscriptAst,
    SubSupAst,
    SuperscriptAst,
    Symbol,
    TextArg,
    UnknownCommand,
)

logger = logging.getLogger(__name__)

# Terminator kinds recognised by _parse_sequence
_CLOSE_BRACE = "}"
_CLOSE_BRACKET = "]"
_RIGHT = "\\right"
_END = "\\end"
_COLUMN = COLUMN_SEPARATOR
_ROW = ROW_SEPARATOR

_MATRIX_CELL_STOPS = frozenset({_COLUMN, _ROW, _END})


class _ScriptMarker(AstNode):
    """A ``_`` or ``^`` with its argument, before merging with a base."""

    def __init__(self, kind: str, argument: list[AstNode], position: int):
        self.kind = kind
        self.argument = argument
        self.position = position

    def accept(self, visitor):  # pragma: no cover - merged away before anyone visits
        raise TypeError("Script markers are merged during parsing")


class LatexParser:
    r"""Parse LaTeX math markup into a list of syntax tree nodes.

    Parameters
    ----------
    text : str
        Markup to parse (the content of a math formula, without ``$``)

    Examples
    --------
    Basic usage:

        >>> LatexParser(r"\frac{1}{2}").parse()
        [Command(name='\\frac', args=[[Digit(char='1')], [Digit(char='2')]], optional=None)]

    """

    def __init__(self, text: str):
        """Initialize the parser over ``text``."""
        self.text = text
        self.pos = 0

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self) -> list[AstNode]:
        """Parse the whole input.

        Returns
        -------
        list of AstNode
            Top-level node sequence

        Raises
        ------
        ParsingError
            If the input is malformed or not fully consumed

        """
        self.pos = 0
        nodes = self._parse_sequence(frozenset())
        if not self._at_end():
            raise self._error("end of input")
        return nodes

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _error(self, expected: str, position: Optional[int] = None) -> ParsingError:
        where = self.pos if position is None else position
        found = self.text[where] if where < len(self.text) else "end of input"
        return ParsingError(
            f"Parse error at position {where}: expected {expected}, found {found!r}",
            position=where,
            expected=expected,
            source=self.text,
        )

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise self._error(repr(char))
        self.pos += 1

    def _starts_with_command(self, name: str) -> bool:
        """Whether the input continues with command ``name`` not followed by more letters."""
        if not self.text.startswith(name, self.pos):
            return False
        after = self.pos + len(name)
        return not (after < len(self.text) and self.text[after].isascii() and self.text[after].isalpha())

    def _read_command_name(self) -> str:
        """Read ``\\name`` (letters) or ``\\c`` (one non-letter) at the cursor."""
        start = self.pos
        self.pos += 1
        if self._at_end():
            raise self._error("command name after '\\'", start)
        char = self.text[self.pos]
        if char.isascii() and char.isalpha():
            end = self.pos
            while end < len(self.text) and self.text[end].isascii() and self.text[end].isalpha():
                end += 1
            self.pos = end
            return self.text[start:end]
        self.pos += 1
        return "\\" + char

    def _peek_terminator(self) -> Optional[str]:
        char = self._peek()
        if char == "}":
            return _CLOSE_BRACE
        if char == "&":
            return _COLUMN
        if char == "\\":
            if self._peek(1) == "\\":
                return _ROW
            if self._starts_with_command(_RIGHT):
                return _RIGHT
            if self._starts_with_command(_END):
                return _END
        return None

    # ------------------------------------------------------------------
    # Sequences
    # ------------------------------------------------------------------

    def _parse_sequence(self, stops: frozenset[str]) -> list[AstNode]:
        """Parse tokens until end of input or one of ``stops``, then post-process."""
        items: list[AstNode] = []
        while not self._at_end():
            terminator = self._peek_terminator()
            if terminator is None and _CLOSE_BRACKET in stops and self._peek() == "]":
                terminator = _CLOSE_BRACKET
            if terminator is not None:
                if terminator in stops:
                    break
                raise self._error(_describe_stops(stops))
            items.append(self._parse_token())
        return self._finish(items)

    def _parse_token(self) -> AstNode:
        char = self._peek()
        start = self.pos

        if char.isspace():
            self._skip_whitespace()
            return Space()
        if char == "{":
            return Group(self._parse_group())
        if char in "_^":
            self.pos += 1
            return _ScriptMarker(char, self._parse_argument(f"argument after '{char}'"), start)
        if char == "\\":
            return self._parse_command()
        if char in RESERVED_CHARS:
            raise self._error("math content")

        self.pos += 1
        if char.isascii() and char.isalpha():
            return Char(char)
        if char.isascii() and char.isdigit():
            return Digit(char)
        if char == "~":
            spec = lookup_symbol("~")
            return Symbol(spec.char if spec is not None else " ", "~")
        if char in OPERATOR_GLYPHS:
            return Symbol(char)
        if char.isprintable():
            spec = symbol_for_char(char)
            return Symbol(char, spec.latex if spec is not None else None)
        raise self._error("printable character", start)

    def _parse_group(self) -> list[AstNode]:
        self._expect("{")
        children = self._parse_sequence(frozenset({_CLOSE_BRACE}))
        self._expect("}")
        return children

    def _parse_argument(self, expected: str) -> list[AstNode]:
        """Parse a braced group, or a single following token."""
        self._skip_whitespace()
        if self._at_end() or self._peek_terminator() is not None or self._peek() in "_^":
            raise self._error(expected)
        if self._peek() == "{":
            return self._parse_group()
        return self._finish([self._parse_token()])

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _parse_command(self) -> AstNode:
        start = self.pos
        name = self._read_command_name()

        if name == "\\left":
            return self._parse_left_right()
        if name == "\\begin":
            return self._parse_environment(start)

        symbol = lookup_symbol(name)
        if symbol is not None:
            return Symbol(symbol.char, name)
        if is_operator_name(name) or is_large_operator(name) or is_limit_command(name):
            return Command(name)

        spec = lookup_command(name)
        if spec is not None:
            return self._parse_command_arguments(spec)

        logger.debug("Unknown command %s at position %d", name, start)
        return UnknownCommand(name)

    def _parse_command_arguments(self, spec: CommandSpec) -> Command:
        optional: Optional[list[AstNode]] = None
        if spec.opt_args:
            self._skip_whitespace()
            if self._peek() == "[":
                self.pos += 1
                optional = self._parse_sequence(frozenset({_CLOSE_BRACKET}))
                self._expect("]")

        args: list[list[AstNode]] = []
        for index in range(spec.args):
            expected = f"argument {index + 1} of {spec.name}"
            if spec.text_mode:
                args.append([TextArg(self._read_text_argument(expected))])
            else:
                args.append(self._parse_argument(expected))
        return Command(spec.name, args, optional)

    def _read_text_argument(self, expected: str) -> str:
        """Read a text-mode argument verbatim, matching nested braces."""
        self._skip_whitespace()
        if self._at_end():
            raise self._error(expected)
        if self._peek() != "{":
            char = self._peek()
            if char in "}\\&_^":
                raise self._error(expected)
            self.pos += 1
            return char

        start = self.pos
        self.pos += 1
        depth = 1
        while not self._at_end():
            char = self.text[self.pos]
            if char == "\\" and self.pos + 1 < len(self.text):
                self.pos += 2
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    self.pos += 1
                    return self.text[start + 1 : self.pos - 1]
            self.pos += 1
        raise self._error("'}' closing text argument", len(self.text))

    def _read_delimiter(self) -> str:
        self._skip_whitespace()
        start = self.pos
        if self._at_end():
            raise self._error("delimiter")
        if self._peek() == "\\":
            delimiter = self._read_command_name()
        else:
            delimiter = self.text[self.pos]
            self.pos += 1
        if delimiter not in DELIMITERS:
            raise self._error("delimiter", start)
        return delimiter

    def _parse_left_right(self) -> LeftRight:
        open_delim = self._read_delimiter()
        children = self._parse_sequence(frozenset({_RIGHT}))
        if not self._starts_with_command(_RIGHT):
            raise self._error("\\right")
        self.pos += len(_RIGHT)
        close_delim = self._read_delimiter()
        return LeftRight(open_delim, close_delim, children)

    def _read_environment_name(self) -> str:
        self._skip_whitespace()
        self._expect("{")
        start = self.pos
        while not self._at_end() and self._peek() != "}":
            self.pos += 1
        name = self.text[start : self.pos].strip()
        self._expect("}")
        return name

    def _parse_environment(self, start: int) -> MatrixAst:
        name_position = self.pos
        environment = self._read_environment_name()
        if environment not in MATRIX_ENVIRONMENTS:
            raise self._error("matrix environment name", name_position)

        rows: list[list[list[AstNode]]] = []
        row: list[list[AstNode]] = []
        row_start = self.pos
        while True:
            row.append(self._parse_sequence(_MATRIX_CELL_STOPS))
            terminator = self._peek_terminator()
            if terminator == _COLUMN:
                self.pos += 1
            elif terminator == _ROW:
                self.pos += 2
                rows.append(row)
                row = []
                row_start = self.pos
            elif terminator == _END:
                row_written = bool(self.text[row_start : self.pos].strip())
                self.pos += len(_END)
                end_position = self.pos
                closing = self._read_environment_name()
                if closing != environment:
                    raise self._error(f"\\end{{{environment}}}", end_position)
                break
            else:
                raise self._error(f"\\end{{{environment}}} closing the environment opened at {start}")

        # A row separator followed only by whitespace before \end does not open a new row
        if not (rows and row == [[]] and not row_written):
            rows.append(row)

        width = max(len(cells) for cells in rows)
        for cells in rows:
            cells.extend([] for _ in range(width - len(cells)))
        return MatrixAst(environment, rows)

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    def _finish(self, items: list[AstNode]) -> list[AstNode]:
        """Splice groups, drop whitespace, and merge script markers with their base."""
        flat: list[AstNode] = []
        for item in items:
            if isinstance(item, Group):
                flat.extend(item.children)
            elif not isinstance(item, Space):
                flat.append(item)

        result: list[AstNode] = []
        merged_here: set[int] = set()
        for item in flat:
            if not isinstance(item, _ScriptMarker):
                result.append(item)
                continue

            previous = result[-1] if result else None
            if id(previous) in merged_here:
                # Complete a script pair written as _a^b or ^b_a
                if item.kind == "^" and isinstance(previous, SubscriptAst):
                    result[-1] = SubSupAst(previous.base, previous.sub, item.argument, sub_first=True)
                    continue
                if item.kind == "_" and isinstance(previous, SuperscriptAst):
                    result[-1] = SubSupAst(previous.base, item.argument, previous.sup, sub_first=False)
                    continue

            base = result.pop() if result else None
            script: AstNode
            if item.kind == "_":
                script = SubscriptAst(base, item.argument)
            else:
                script = SuperscriptAst(base, item.argument)
            merged_here.add(id(script))
            result.append(script)
        return result


def _describe_stops(stops: frozenset[str]) -> str:
    if not stops:
        return "math content"
    return " or ".join(sorted(repr(stop) for stop in stops))


def parse_latex(text: str) -> list[AstNode]:
    r"""Parse markup into a syntax tree.

    Parameters
    ----------
    text : str
        LaTeX math markup

    Returns
    -------
    list of AstNode
        Top-level node sequence

    Raises
    ------
    ParsingError
        If the markup is malformed

    Examples
    --------
        >>> parse_latex("x_1")
        [SubscriptAst(base=Char(char='x'), sub=[Digit(char='1')])]

    """
    return LatexParser(text).parse()


def try_parse_latex(text: str) -> Optional[list[AstNode]]:
    """Parse markup, returning None instead of raising on malformed input."""
    try:
        return parse_latex(text)
    except ParsingError as e:
        logger.debug("Could not parse %r: %s", text, e)
        return None
