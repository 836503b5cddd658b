#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/renderers/base.py
"""Visitor and renderer base classes for the formula tree.

Every node class implements ``accept(visitor)`` by calling the matching
``visit_*`` method. Renderers subclass ``NodeVisitor`` and return a string
from each visit method, so rendering a node is simply ``node.accept(renderer)``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
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
        BinaryOperator,
        Digit,
        MathSymbol,
        OperatorName,
        Punctuation,
        RawCommand,
        Relation,
        Spacing,
        TextChar,
        Variable,
    )
    from mathfield.core.nodes import Block, Node


class NodeVisitor(ABC):
    """Abstract base class for formula tree visitors.

    Subclasses implement one ``visit_*`` method per node class. Leaf visits
    come first, followed by composite visits.

    Examples
    --------
    Counting variables:

        >>> class VariableCounter(NodeVisitor):
        ...     def visit_variable(self, node):
        ...         return 1
        ...     # remaining visit_* methods return 0 or recurse into blocks

    """

    # Leaves

    @abstractmethod
    def visit_symbol(self, node: MathSymbol) -> Any:
        """Visit a plain MathSymbol node.

        Parameters
        ----------
        node : MathSymbol
            The symbol to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_variable(self, node: Variable) -> Any:
        """Visit a Variable node."""
        pass

    @abstractmethod
    def visit_digit(self, node: Digit) -> Any:
        """Visit a Digit node."""
        pass

    @abstractmethod
    def visit_binary_operator(self, node: BinaryOperator) -> Any:
        """Visit a BinaryOperator node."""
        pass

    @abstractmethod
    def visit_relation(self, node: Relation) -> Any:
        """Visit a Relation node."""
        pass

    @abstractmethod
    def visit_punctuation(self, node: Punctuation) -> Any:
        """Visit a Punctuation node."""
        pass

    @abstractmethod
    def visit_spacing(self, node: Spacing) -> Any:
        """Visit a Spacing node."""
        pass

    @abstractmethod
    def visit_text_char(self, node: TextChar) -> Any:
        """Visit a TextChar node."""
        pass

    @abstractmethod
    def visit_operator_name(self, node: OperatorName) -> Any:
        """Visit an OperatorName node."""
        pass

    @abstractmethod
    def visit_raw_command(self, node: RawCommand) -> Any:
        """Visit a RawCommand node."""
        pass

    # Composites

    @abstractmethod
    def visit_fraction(self, node: Fraction) -> Any:
        """Visit a Fraction node.

        Parameters
        ----------
        node : Fraction
            The fraction to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_binomial(self, node: Binomial) -> Any:
        """Visit a Binomial node."""
        pass

    @abstractmethod
    def visit_square_root(self, node: SquareRoot) -> Any:
        """Visit a SquareRoot node."""
        pass

    @abstractmethod
    def visit_nth_root(self, node: NthRoot) -> Any:
        """Visit an NthRoot node."""
        pass

    @abstractmethod
    def visit_subscript(self, node: Subscript) -> Any:
        """Visit a Subscript node."""
        pass

    @abstractmethod
    def visit_superscript(self, node: Superscript) -> Any:
        """Visit a Superscript node."""
        pass

    @abstractmethod
    def visit_supsub(self, node: SupSub) -> Any:
        """Visit a SupSub node."""
        pass

    @abstractmethod
    def visit_brackets(self, node: Brackets) -> Any:
        """Visit a Brackets node."""
        pass

    @abstractmethod
    def visit_accent(self, node: Accent) -> Any:
        """Visit an Accent node."""
        pass

    @abstractmethod
    def visit_text_style(self, node: TextStyle) -> Any:
        """Visit a TextStyle node."""
        pass

    @abstractmethod
    def visit_large_operator(self, node: LargeOperator) -> Any:
        """Visit a LargeOperator node."""
        pass

    @abstractmethod
    def visit_limit(self, node: Limit) -> Any:
        """Visit a Limit node."""
        pass

    @abstractmethod
    def visit_matrix(self, node: Matrix) -> Any:
        """Visit a Matrix node."""
        pass


class BaseRenderer(NodeVisitor, ABC):
    """Base class for renderers producing a string per node.

    Subclasses implement the ``visit_*`` methods and may override
    ``join`` to control how sibling output is concatenated.

    """

    def render(self, node: Node) -> str:
        """Render a single node (and its subtree).

        Parameters
        ----------
        node : Node
            Node to render

        Returns
        -------
        str
            Rendered output

        """
        return node.accept(self)

    def render_sequence(self, nodes: Iterable[Node]) -> str:
        """Render a run of siblings."""
        return self.join(node.accept(self) for node in nodes)

    def render_block(self, block: Block) -> str:
        """Render the content of a block."""
        return self.render_sequence(block.children())

    def join(self, pieces: Iterable[str]) -> str:
        """Concatenate rendered siblings."""
        return "".join(pieces)
