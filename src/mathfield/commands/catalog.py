#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/commands/catalog.py
"""Static command catalog for the LaTeX grammar and the editor.

The catalog is the closest thing mathfield has to a persisted schema: it
lists every command the parser accepts, how many arguments each command
takes, and which symbols degrade into simpler ones on backspace. Bump
``CATALOG_VERSION`` whenever an entry is added, removed, or changes arity.

Tables
------
- ``SYMBOLS``: zero-argument commands (and a few non-command glyphs) that
  produce a single leaf, keyed by their LaTeX form (``"\\alpha"``, ``"~"``)
- ``OPERATOR_NAMES``: upright function names (``\\sin``, ``\\log``...)
- ``LARGE_OPERATORS``: commands that take limits (``\\sum``, ``\\int``...)
- ``LIMIT_COMMANDS``: ``\\lim`` and friends
- ``ACCENTS``: accent command to combining mark
- ``TEXT_STYLES``: style commands and whether their argument is raw text
- ``COMMAND_SPECS``: argument-taking commands and their arities
- ``DELIMITERS`` / ``BRACKET_PAIRS``: ``\\left``/``\\right`` delimiters

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from mathfield.constants import BracketKind, MatrixEnvironment

CATALOG_VERSION = "1.0"

SymbolKind = Literal["ordinary", "binary", "relation", "punctuation", "spacing"]
CommandKind = Literal["fraction", "binomial", "sqrt", "accent", "style", "operatorname"]


@dataclass(frozen=True)
class SymbolSpec:
    """Catalog entry for a single-leaf symbol.

    Parameters
    ----------
    latex : str
        Canonical LaTeX form, e.g. ``"\\leq"``
    char : str
        Display glyph
    kind : SymbolKind
        Leaf class to create
    degrades_to : str or None
        LaTeX form of the simpler symbol reached by one backspace

    """

    latex: str
    char: str
    kind: SymbolKind = "ordinary"
    degrades_to: str | None = None


@dataclass(frozen=True)
class CommandSpec:
    """Catalog entry for a command taking arguments.

    Parameters
    ----------
    name : str
        Command including the backslash
    kind : CommandKind
        Composite family the command materializes into
    args : int
        Number of required arguments
    opt_args : int
        Number of optional bracketed arguments, parsed before required ones
    text_mode : bool
        Whether required arguments are read as raw text instead of math

    """

    name: str
    kind: CommandKind
    args: int
    opt_args: int = 0
    text_mode: bool = False


# =============================================================================
# Symbols
# =============================================================================

GREEK_LETTERS: dict[str, str] = {
    "alpha": "α",
    "beta": "β",
    "gamma": "γ",
    "delta": "δ",
    "epsilon": "ε",
    "varepsilon": "ε",
    "zeta": "ζ",
    "eta": "η",
    "theta": "θ",
    "vartheta": "ϑ",
    "iota": "ι",
    "kappa": "κ",
    "varkappa": "ϰ",
    "lambda": "λ",
    "mu": "μ",
    "nu": "ν",
    "xi": "ξ",
    "pi": "π",
    "varpi": "ϖ",
    "rho": "ρ",
    "varrho": "ϱ",
    "sigma": "σ",
    "varsigma": "ς",
    "tau": "τ",
    "upsilon": "υ",
    "phi": "φ",
    "varphi": "ϕ",
    "chi": "χ",
    "psi": "ψ",
    "omega": "ω",
    "digamma": "ϝ",
    "Gamma": "Γ",
    "Delta": "Δ",
    "Theta": "Θ",
    "Lambda": "Λ",
    "Xi": "Ξ",
    "Pi": "Π",
    "Sigma": "Σ",
    "Upsilon": "Υ",
    "Phi": "Φ",
    "Psi": "Ψ",
    "Omega": "Ω",
}

BINARY_OPERATORS: dict[str, str] = {
    "pm": "±",
    "mp": "∓",
    "times": "×",
    "div": "÷",
    "cdot": "·",
    "ast": "∗",
    "star": "⋆",
    "circ": "∘",
    "bullet": "•",
    "diamond": "◇",
    "wr": "≀",
    "amalg": "⨿",
    "dotplus": "∔",
    "dagger": "†",
    "ddagger": "‡",
    "ltimes": "⋉",
    "rtimes": "⋊",
    "oplus": "⊕",
    "ominus": "⊖",
    "otimes": "⊗",
    "oslash": "⊘",
    "odot": "⊙",
    "boxplus": "⊞",
    "boxminus": "⊟",
    "boxtimes": "⊠",
    "boxdot": "⊡",
    "cup": "∪",
    "cap": "∩",
    "sqcup": "⊔",
    "sqcap": "⊓",
    "uplus": "⊎",
    "setminus": "∖",
    "land": "∧",
    "wedge": "∧",
    "lor": "∨",
    "vee": "∨",
}

# name -> (glyph, degradation target)
RELATIONS: dict[str, tuple[str, str | None]] = {
    "leq": ("≤", "<"),
    "le": ("≤", "<"),
    "geq": ("≥", ">"),
    "ge": ("≥", ">"),
    "neq": ("≠", "="),
    "ne": ("≠", "="),
    "leqq": ("≦", None),
    "geqq": ("≧", None),
    "approx": ("≈", None),
    "approxeq": ("≊", None),
    "equiv": ("≡", None),
    "sim": ("∼", None),
    "simeq": ("≃", None),
    "cong": ("≅", None),
    "propto": ("∝", None),
    "ll": ("≪", None),
    "gg": ("≫", None),
    "prec": ("≺", None),
    "succ": ("≻", None),
    "preceq": ("⪯", None),
    "succeq": ("⪰", None),
    "mid": ("∣", None),
    "nmid": ("∤", None),
    "parallel": ("∥", None),
    "perp": ("⊥", None),
    "models": ("⊧", None),
    "vdash": ("⊢", None),
    "dashv": ("⊣", None),
    "asymp": ("≍", None),
    "doteq": ("≐", None),
    "subset": ("⊂", None),
    "supset": ("⊃", None),
    "subseteq": ("⊆", "\\subset"),
    "supseteq": ("⊇", "\\supset"),
    "subsetneq": ("⊊", None),
    "supsetneq": ("⊋", None),
    "sqsubseteq": ("⊑", None),
    "sqsupseteq": ("⊒", None),
    "in": ("∈", None),
    "ni": ("∋", None),
    "notin": ("∉", "\\in"),
    "to": ("→", None),
    "gets": ("←", None),
    "rightarrow": ("→", None),
    "leftarrow": ("←", None),
    "leftrightarrow": ("↔", None),
    "longrightarrow": ("⟶", None),
    "longleftarrow": ("⟵", None),
    "longleftrightarrow": ("⟷", None),
    "Rightarrow": ("⇒", None),
    "Leftarrow": ("⇐", None),
    "Leftrightarrow": ("⇔", None),
    "Longrightarrow": ("⟹", None),
    "Longleftarrow": ("⟸", None),
    "Longleftrightarrow": ("⟺", None),
    "implies": ("⟹", None),
    "iff": ("⟺", None),
    "uparrow": ("↑", None),
    "downarrow": ("↓", None),
    "updownarrow": ("↕", None),
    "Uparrow": ("⇑", None),
    "Downarrow": ("⇓", None),
    "mapsto": ("↦", None),
    "longmapsto": ("⟼", None),
    "hookleftarrow": ("↩", None),
    "hookrightarrow": ("↪", None),
    "nearrow": ("↗", None),
    "searrow": ("↘", None),
    "swarrow": ("↙", None),
    "nwarrow": ("↖", None),
    "rightleftharpoons": ("⇌", None),
}

ORDINARY_SYMBOLS: dict[str, str] = {
    "emptyset": "∅",
    "varnothing": "∅",
    "neg": "¬",
    "lnot": "¬",
    "forall": "∀",
    "exists": "∃",
    "nexists": "∄",
    "top": "⊤",
    "bot": "⊥",
    "partial": "∂",
    "nabla": "∇",
    "infty": "∞",
    "aleph": "ℵ",
    "beth": "ℶ",
    "gimel": "ℷ",
    "Re": "ℜ",
    "Im": "ℑ",
    "wp": "℘",
    "ell": "ℓ",
    "hbar": "ℏ",
    "ldots": "…",
    "dots": "…",
    "cdots": "⋯",
    "vdots": "⋮",
    "ddots": "⋱",
    "prime": "′",
    "angle": "∠",
    "triangle": "△",
    "square": "□",
    "therefore": "∴",
    "because": "∵",
    "degree": "°",
    "surd": "√",
    "flat": "♭",
    "natural": "♮",
    "sharp": "♯",
    "clubsuit": "♣",
    "diamondsuit": "♢",
    "heartsuit": "♡",
    "spadesuit": "♠",
    "checkmark": "✓",
    "langle": "⟨",
    "rangle": "⟩",
    "lceil": "⌈",
    "rceil": "⌉",
    "lfloor": "⌊",
    "rfloor": "⌋",
    "lbrace": "{",
    "rbrace": "}",
    "vert": "|",
    "Vert": "‖",
    "backslash": "\\",
}

# Escaped single-character commands
ESCAPED_SYMBOLS: dict[str, str] = {
    "{": "{",
    "}": "}",
    "|": "‖",
    "#": "#",
    "$": "$",
    "%": "%",
    "&": "&",
    "_": "_",
}

SPACING: dict[str, str] = {
    "\\,": " ",
    "\\:": " ",
    "\\;": " ",
    "\\!": "",
    "\\ ": " ",
    "\\quad": " ",
    "\\qquad": "  ",
    "\\thinspace": " ",
    "~": " ",
}


def _build_symbols() -> dict[str, SymbolSpec]:
    table: dict[str, SymbolSpec] = {}
    for name, char in GREEK_LETTERS.items():
        table["\\" + name] = SymbolSpec("\\" + name, char)
    for name, char in BINARY_OPERATORS.items():
        table["\\" + name] = SymbolSpec("\\" + name, char, "binary")
    for name, (char, target) in RELATIONS.items():
        table["\\" + name] = SymbolSpec("\\" + name, char, "relation", target)
    for name, char in ORDINARY_SYMBOLS.items():
        table["\\" + name] = SymbolSpec("\\" + name, char)
    for name, char in ESCAPED_SYMBOLS.items():
        table["\\" + name] = SymbolSpec("\\" + name, char)
    for latex, char in SPACING.items():
        table[latex] = SymbolSpec(latex, char, "spacing")
    return table


SYMBOLS: dict[str, SymbolSpec] = _build_symbols()

# Plain glyphs that parse as themselves; degradation targets resolve here too
GLYPHS: dict[str, SymbolSpec] = {
    "+": SymbolSpec("+", "+", "binary"),
    "-": SymbolSpec("-", "−", "binary"),
    "*": SymbolSpec("*", "*", "binary"),
    "/": SymbolSpec("/", "/", "binary"),
    "=": SymbolSpec("=", "=", "relation"),
    "<": SymbolSpec("<", "<", "relation"),
    ">": SymbolSpec(">", ">", "relation"),
    ",": SymbolSpec(",", ",", "punctuation"),
    ";": SymbolSpec(";", ";", "punctuation"),
    ":": SymbolSpec(":", ":", "punctuation"),
}

# Reverse lookup from display glyph to canonical command (first entry wins)
_CHAR_TO_SYMBOL: dict[str, SymbolSpec] = {}
for _spec in SYMBOLS.values():
    if _spec.kind != "spacing" and len(_spec.char) == 1:
        _CHAR_TO_SYMBOL.setdefault(_spec.char, _spec)
del _spec

# =============================================================================
# Operator names, large operators, limits
# =============================================================================

OPERATOR_NAMES: tuple[str, ...] = (
    "sin",
    "cos",
    "tan",
    "cot",
    "sec",
    "csc",
    "arcsin",
    "arccos",
    "arctan",
    "sinh",
    "cosh",
    "tanh",
    "coth",
    "log",
    "lg",
    "ln",
    "exp",
    "min",
    "max",
    "sup",
    "inf",
    "det",
    "dim",
    "ker",
    "hom",
    "deg",
    "arg",
    "gcd",
    "Pr",
    "bmod",
)

LARGE_OPERATORS: dict[str, str] = {
    "sum": "∑",
    "prod": "∏",
    "coprod": "∐",
    "int": "∫",
    "iint": "∬",
    "iiint": "∭",
    "oint": "∮",
    "bigcup": "⋃",
    "bigcap": "⋂",
    "bigsqcup": "⨆",
    "bigvee": "⋁",
    "bigwedge": "⋀",
    "bigodot": "⨀",
    "bigoplus": "⨁",
    "bigotimes": "⨂",
    "biguplus": "⨄",
}

# Integrals render their limits beside the sign rather than above/below it
INTEGRALS: frozenset[str] = frozenset({"int", "iint", "iiint", "oint"})

LIMIT_COMMANDS: dict[str, str] = {
    "lim": "lim",
    "liminf": "lim inf",
    "limsup": "lim sup",
}

# =============================================================================
# Accents and styles
# =============================================================================

ACCENTS: dict[str, str] = {
    "vec": "⃗",
    "bar": "̄",
    "hat": "̂",
    "dot": "̇",
    "ddot": "̈",
    "tilde": "̃",
    "acute": "́",
    "grave": "̀",
    "breve": "̆",
    "check": "̌",
    "overline": "̄",
    "underline": "̲",
    "widehat": "̂",
    "widetilde": "̃",
    "overbrace": "⏞",
    "underbrace": "⏟",
}

# style name -> argument is raw text
TEXT_STYLES: dict[str, bool] = {
    "text": True,
    "textrm": True,
    "textit": True,
    "textbf": True,
    "textsf": True,
    "texttt": True,
    "mathrm": False,
    "mathit": False,
    "mathbf": False,
    "mathsf": False,
    "mathtt": False,
    "mathbb": False,
    "mathcal": False,
    "mathfrak": False,
    "mathscr": False,
    "boldsymbol": False,
}

# =============================================================================
# Argument-taking commands
# =============================================================================


def _build_command_specs() -> dict[str, CommandSpec]:
    specs: dict[str, CommandSpec] = {}
    for name in ("frac", "dfrac", "tfrac", "cfrac"):
        specs["\\" + name] = CommandSpec("\\" + name, "fraction", 2)
    for name in ("binom", "dbinom", "tbinom"):
        specs["\\" + name] = CommandSpec("\\" + name, "binomial", 2)
    specs["\\sqrt"] = CommandSpec("\\sqrt", "sqrt", 1, opt_args=1)
    for name in ACCENTS:
        specs["\\" + name] = CommandSpec("\\" + name, "accent", 1)
    for name, text_mode in TEXT_STYLES.items():
        specs["\\" + name] = CommandSpec("\\" + name, "style", 1, text_mode=text_mode)
    specs["\\operatorname"] = CommandSpec("\\operatorname", "operatorname", 1, text_mode=True)
    return specs


COMMAND_SPECS: dict[str, CommandSpec] = _build_command_specs()

FRACTION_COMMANDS: tuple[str, ...] = ("\\frac", "\\dfrac", "\\tfrac", "\\cfrac")
BINOMIAL_COMMANDS: tuple[str, ...] = ("\\binom", "\\dbinom", "\\tbinom")

# =============================================================================
# Delimiters and matrices
# =============================================================================

# \left / \right delimiter -> display glyph
DELIMITERS: dict[str, str] = {
    "(": "(",
    ")": ")",
    "[": "[",
    "]": "]",
    "|": "|",
    "/": "/",
    ".": "",
    "\\{": "{",
    "\\}": "}",
    "\\lbrace": "{",
    "\\rbrace": "}",
    "\\langle": "⟨",
    "\\rangle": "⟩",
    "\\|": "‖",
    "\\Vert": "‖",
    "\\vert": "|",
    "\\lvert": "|",
    "\\rvert": "|",
    "\\lfloor": "⌊",
    "\\rfloor": "⌋",
    "\\lceil": "⌈",
    "\\rceil": "⌉",
}

# bracket kind -> (open delimiter, close delimiter)
BRACKET_PAIRS: dict[BracketKind, tuple[str, str]] = {
    "paren": ("(", ")"),
    "square": ("[", "]"),
    "curly": ("\\{", "\\}"),
    "abs": ("|", "|"),
    "angle": ("\\langle", "\\rangle"),
}

MATRIX_DELIMITERS: dict[MatrixEnvironment, tuple[str, str]] = {
    "matrix": ("", ""),
    "pmatrix": ("(", ")"),
    "bmatrix": ("[", "]"),
    "Bmatrix": ("{", "}"),
    "vmatrix": ("|", "|"),
    "Vmatrix": ("‖", "‖"),
}

# =============================================================================
# Lookups
# =============================================================================


def lookup_symbol(latex: str) -> SymbolSpec | None:
    """Return the symbol entry for a LaTeX form (command or plain glyph).

    Parameters
    ----------
    latex : str
        Command including the backslash (``"\\leq"``), or a plain glyph
        (``"<"``)

    Returns
    -------
    SymbolSpec or None
        Matching entry, or None when the catalog has no such symbol

    """
    spec = SYMBOLS.get(latex)
    if spec is None:
        spec = GLYPHS.get(latex)
    return spec


def lookup_command(name: str) -> CommandSpec | None:
    """Return the argument spec for ``name`` (including backslash), if any."""
    return COMMAND_SPECS.get(name)


def symbol_for_char(char: str) -> SymbolSpec | None:
    """Return the catalog symbol whose display glyph is ``char``."""
    return _CHAR_TO_SYMBOL.get(char)


def is_operator_name(name: str) -> bool:
    """Whether ``name`` (including backslash) is an upright function name."""
    return name.startswith("\\") and name[1:] in OPERATOR_NAMES


def is_large_operator(name: str) -> bool:
    """Whether ``name`` (including backslash) is a large operator."""
    return name.startswith("\\") and name[1:] in LARGE_OPERATORS


def is_limit_command(name: str) -> bool:
    """Whether ``name`` (including backslash) is a limit-style operator."""
    return name.startswith("\\") and name[1:] in LIMIT_COMMANDS


def is_known_command(name: str) -> bool:
    """Whether the parser recognizes ``name`` (including backslash)."""
    return (
        name in SYMBOLS
        or name in COMMAND_SPECS
        or is_operator_name(name)
        or is_large_operator(name)
        or is_limit_command(name)
        or name in ("\\left", "\\right", "\\begin", "\\end")
    )


def bracket_kind(open_delim: str, close_delim: str) -> BracketKind | None:
    """Return the bracket kind matching a delimiter pair, or None."""
    for kind, pair in BRACKET_PAIRS.items():
        if pair == (open_delim, close_delim):
            return kind
    return None
