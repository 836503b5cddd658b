#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/core/nodes.py
"""Node and block classes for the editable formula tree.

This module defines the data structure every other part of mathfield works on.
A formula is a tree of nodes arranged in blocks:

- A ``Block`` is an ordered, possibly empty sequence of sibling nodes stored as
  a doubly-linked list. It only exposes its two ends (``first_child`` and
  ``last_child``).
- A ``Leaf`` node (symbol, digit, operator name...) owns nothing.
- A ``Composite`` node (fraction, root, script, matrix...) owns one or more
  blocks. The blocks belong exclusively to their composite.

Every node has a non-owning ``parent`` reference to the block containing it,
and non-owning ``left``/``right`` references to its neighbours in that block.
The block in turn points back at its ``owner`` composite, or at nothing for
the document root.

Identifiers
-----------
Node and block identifiers come from a per-document counter held by the
``RootBlock``. They are assigned the first time a node becomes attached under
a root and never change afterwards, so the hit-testing layer can map screen
elements back to tree nodes.

"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterator, TypeVar

from mathfield.constants import Direction, VerticalPreference
from mathfield.exceptions import NotAttachedError, StructuralIntegrityError

if TYPE_CHECKING:
    from mathfield.renderers.base import NodeVisitor

BlockT = TypeVar("BlockT", bound="Block")


class Node(ABC):
    """Base class for every node of the formula tree.

    Attributes
    ----------
    id : int or None
        Per-document identifier; ``None`` until the node is attached under a
        ``RootBlock``
    parent : Block or None
        Block that contains this node
    left : Node or None
        Sibling immediately to the left within ``parent``
    right : Node or None
        Sibling immediately to the right within ``parent``

    """

    def __init__(self) -> None:
        """Create a detached node."""
        self.id: int | None = None
        self.parent: Block | None = None
        self.left: Node | None = None
        self.right: Node | None = None

    @abstractmethod
    def accept(self, visitor: NodeVisitor) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : NodeVisitor
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def blocks(self) -> tuple[Block, ...]:
        """Blocks owned by this node, in reading order. Empty for leaves."""
        return ()

    @property
    def is_leaf(self) -> bool:
        """Whether this node owns no blocks."""
        return not self.blocks

    @property
    def owner(self) -> Composite | None:
        """Composite owning the block this node sits in, if any."""
        return self.parent.owner if self.parent is not None else None

    def sibling(self, direction: Direction) -> Node | None:
        """Return the neighbour in ``direction``."""
        return self.left if direction is Direction.LEFT else self.right

    def remove(self) -> Node:
        """Unlink this node from its parent block.

        Former neighbours are reconnected to each other, or the block's end
        pointers are updated when this node sat at an edge.

        Returns
        -------
        Node
            This node, now detached

        Raises
        ------
        NotAttachedError
            If the node has no parent block

        """
        block = self.parent
        if block is None:
            raise NotAttachedError(self.id)

        if self.left is not None:
            self.left.right = self.right
        else:
            block.first_child = self.right

        if self.right is not None:
            self.right.left = self.left
        else:
            block.last_child = self.left

        self.parent = None
        self.left = None
        self.right = None
        return self

    # ------------------------------------------------------------------
    # Traversal (read-only)
    # ------------------------------------------------------------------

    def children(self) -> Iterator[Node]:
        """Iterate over first-level content of every owned block, left to right."""
        for block in self.blocks:
            yield from block.children()

    def children_reversed(self) -> Iterator[Node]:
        """Iterate over first-level content of every owned block, right to left."""
        for block in reversed(self.blocks):
            yield from block.children_reversed()

    def child_count(self) -> int:
        """Return the number of first-level children across all blocks."""
        return sum(len(block) for block in self.blocks)

    def has_children(self) -> bool:
        """Whether any owned block has content."""
        return any(not block.is_empty for block in self.blocks)

    def pre_order(self) -> Iterator[Node]:
        """Yield this node, then its descendants depth-first."""
        yield self
        for child in self.children():
            yield from child.pre_order()

    def post_order(self) -> Iterator[Node]:
        """Yield descendants depth-first, then this node."""
        for child in self.children():
            yield from child.post_order()
        yield self

    def descendants(self) -> list[Node]:
        """Collect this node and all descendants in post-order."""
        return list(self.post_order())

    def leftmost_leaf(self) -> Node:
        """Return the leftmost node of this subtree that has no children."""
        node: Node = self
        while True:
            first = next(node.children(), None)
            if first is None:
                return node
            node = first

    def rightmost_leaf(self) -> Node:
        """Return the rightmost node of this subtree that has no children."""
        node: Node = self
        while True:
            last = next(node.children_reversed(), None)
            if last is None:
                return node
            node = last

    def depth(self) -> int:
        """Return the number of composite nodes enclosing this node."""
        depth = 0
        owner = self.owner
        while owner is not None:
            depth += 1
            owner = owner.owner
        return depth

    def root(self) -> Block | None:
        """Return the outermost block containing this node, or None when detached."""
        block = self.parent
        if block is None:
            return None
        return block.root()

    def is_ancestor_of(self, node: Node) -> bool:
        """Whether ``node`` lies inside one of this node's blocks (at any depth)."""
        current = node.owner
        while current is not None:
            if current is self:
                return True
            current = current.owner
        return False

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def latex(self) -> str:
        """Serialize this node to LaTeX markup."""
        from mathfield.renderers.latex import LatexRenderer

        return LatexRenderer().render(self)

    def text(self) -> str:
        """Render this node as plain text."""
        from mathfield.renderers.text import TextRenderer

        return TextRenderer().render(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


class Leaf(Node, ABC):
    """A node that owns no blocks."""


class Composite(Node, ABC):
    """A node owning one or more blocks.

    Subclasses create their blocks in ``__init__`` through ``_own`` and expose
    them, in reading order, from the ``blocks`` property. The navigation hooks
    below describe how the cursor travels between those blocks; the defaults
    suit a composite whose blocks are laid out left to right.

    """

    #: Whether the blocks are stacked vertically (fraction, scripts, limits)
    vertical: bool = False

    def _own(self, block: BlockT) -> BlockT:
        block.owner = self
        return block

    def entry_block(self, side: Direction, prefer: VerticalPreference | None = None) -> Block | None:
        """Return the block the cursor enters when crossing into this node.

        Parameters
        ----------
        side : Direction
            Side the cursor comes from: ``LEFT`` when moving right into the
            node, ``RIGHT`` when moving left into it
        prefer : {'up', 'down'} or None
            For vertically stacked composites, enter the upper or lower block
            regardless of side

        """
        blocks = self.blocks
        if not blocks:
            return None
        if self.vertical and prefer is not None:
            upper, lower = self.upper_block(), self.lower_block()
            chosen = upper if prefer == "up" else lower
            if chosen is not None:
                return chosen
        return blocks[0] if side is Direction.LEFT else blocks[-1]

    def upper_block(self) -> Block | None:
        """Block reached by Up inside this composite, if any."""
        return None

    def lower_block(self) -> Block | None:
        """Block reached by Down inside this composite, if any."""
        return None

    def block_after(self, block: Block, direction: Direction) -> Block | None:
        """Return the next block in linear Left/Right order, or None to exit."""
        return None

    def block_above(self, block: Block) -> Block | None:
        """Return the block Up leads to from ``block``, or None."""
        upper, lower = self.upper_block(), self.lower_block()
        if block is lower and upper is not None:
            return upper
        return None

    def block_below(self, block: Block) -> Block | None:
        """Return the block Down leads to from ``block``, or None."""
        upper, lower = self.upper_block(), self.lower_block()
        if block is upper and lower is not None:
            return lower
        return None

    def is_empty(self) -> bool:
        """Whether every owned block is empty."""
        return all(block.is_empty for block in self.blocks)


class Block:
    """An ordered sibling list owned by a composite node or by the document.

    Attributes
    ----------
    id : int or None
        Per-document identifier
    owner : Composite or None
        Composite node owning this block; None for a root block or a block
        not yet given to a composite
    first_child : Node or None
        Leftmost child
    last_child : Node or None
        Rightmost child

    """

    def __init__(self) -> None:
        """Create an empty, unowned block."""
        self.id: int | None = None
        self.owner: Composite | None = None
        self.first_child: Node | None = None
        self.last_child: Node | None = None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert_child(self, node: Node, before: Node | None = None) -> Node:
        """Splice ``node`` into this block immediately before ``before``.

        Parameters
        ----------
        node : Node
            Detached node to insert
        before : Node or None, default None
            Existing child to insert in front of; None appends at the end

        Returns
        -------
        Node
            The inserted node

        Raises
        ------
        StructuralIntegrityError
            If ``node`` is already attached, or ``before`` is not a child of
            this block

        """
        if node.parent is not None:
            raise StructuralIntegrityError("Cannot insert a node that is already attached", node.id)
        if before is not None and before.parent is not self:
            raise StructuralIntegrityError("Insertion anchor is not a child of this block", before.id)

        left = before.left if before is not None else self.last_child
        node.parent = self
        node.left = left
        node.right = before

        if left is not None:
            left.right = node
        else:
            self.first_child = node

        if before is not None:
            before.left = node
        else:
            self.last_child = node

        root = self.root()
        if isinstance(root, RootBlock):
            root.register(node)
        return node

    def insert_after(self, node: Node, after: Node | None) -> Node:
        """Splice ``node`` immediately after ``after`` (None prepends)."""
        if after is None:
            return self.insert_child(node, self.first_child)
        if after.parent is not self:
            raise StructuralIntegrityError("Insertion anchor is not a child of this block", after.id)
        return self.insert_child(node, after.right)

    def append(self, node: Node) -> Node:
        """Insert ``node`` as the last child."""
        return self.insert_child(node)

    def prepend(self, node: Node) -> Node:
        """Insert ``node`` as the first child."""
        return self.insert_child(node, self.first_child)

    def replace_child(self, old: Node, new: Node) -> Node:
        """Put ``new`` where ``old`` stands and detach ``old``."""
        if old.parent is not self:
            raise StructuralIntegrityError("Node to replace is not a child of this block", old.id)
        self.insert_child(new, old)
        old.remove()
        return new

    def clear(self) -> None:
        """Remove every child."""
        while self.first_child is not None:
            self.first_child.remove()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """Whether the block has no children."""
        return self.first_child is None

    def end(self, direction: Direction) -> Node | None:
        """Return the child at the ``direction`` end."""
        return self.first_child if direction is Direction.LEFT else self.last_child

    def children(self) -> Iterator[Node]:
        """Iterate over children from left to right."""
        child = self.first_child
        while child is not None:
            following = child.right
            yield child
            child = following

    def children_reversed(self) -> Iterator[Node]:
        """Iterate over children from right to left."""
        child = self.last_child
        while child is not None:
            preceding = child.left
            yield child
            child = preceding

    def __iter__(self) -> Iterator[Node]:
        return self.children()

    def __len__(self) -> int:
        return sum(1 for _ in self.children())

    def __bool__(self) -> bool:
        # A block is always truthy; use ``is_empty`` to test for content.
        return True

    def index_of(self, node: Node) -> int:
        """Return the position of ``node`` among the children."""
        for index, child in enumerate(self.children()):
            if child is node:
                return index
        raise StructuralIntegrityError("Node is not a child of this block", node.id)

    def child_at(self, index: int) -> Node | None:
        """Return the child at ``index`` or None when out of range."""
        if index < 0:
            return None
        for position, child in enumerate(self.children()):
            if position == index:
                return child
        return None

    def pre_order(self) -> Iterator[Node]:
        """Yield every node inside this block depth-first."""
        for child in self.children():
            yield from child.pre_order()

    def root(self) -> Block:
        """Return the outermost block this block is nested in (itself if unowned)."""
        block = self
        while block.owner is not None and block.owner.parent is not None:
            block = block.owner.parent
        return block

    def is_attached(self) -> bool:
        """Whether this block hangs, through its owners, from a ``RootBlock``."""
        return isinstance(self.root(), RootBlock) and (self.owner is None or self.owner.parent is not None)

    def latex(self) -> str:
        """Serialize the block's content to LaTeX."""
        from mathfield.renderers.latex import LatexRenderer

        return LatexRenderer().render_block(self)

    def text(self) -> str:
        """Render the block's content as plain text."""
        from mathfield.renderers.text import TextRenderer

        return TextRenderer().render_block(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, children={len(self)})"


class RootBlock(Block):
    """The top-level block of a document.

    Holds the per-document identifier sequence. Nodes and blocks receive an
    identifier from it when they first become attached beneath this root.

    """

    def __init__(self) -> None:
        """Create an empty root with a fresh identifier sequence."""
        super().__init__()
        self._ids = itertools.count(1)
        self.id = self.next_id()

    def next_id(self) -> int:
        """Return the next unused identifier."""
        return next(self._ids)

    def register(self, node: Node) -> None:
        """Assign identifiers to ``node`` and everything beneath it that lacks one."""
        stack: list[Node] = [node]
        while stack:
            current = stack.pop()
            if current.id is None:
                current.id = self.next_id()
            for block in current.blocks:
                if block.id is None:
                    block.id = self.next_id()
                stack.extend(block.children())

    def find_by_id(self, node_id: int) -> Node | Block | None:
        """Return the attached node or block carrying ``node_id``."""
        if self.id == node_id:
            return self
        for node in self.pre_order():
            if node.id == node_id:
                return node
            for block in node.blocks:
                if block.id == node_id:
                    return block
        return None


class Fragment:
    """A contiguous run of siblings within one block.

    Parameters
    ----------
    left_end : Node
        Leftmost node of the run
    right_end : Node, optional
        Rightmost node of the run; defaults to ``left_end``

    """

    def __init__(self, left_end: Node, right_end: Node | None = None):
        """Create a fragment spanning ``left_end`` to ``right_end``."""
        self.left_end = left_end
        self.right_end = right_end if right_end is not None else left_end

    @property
    def block(self) -> Block | None:
        """Block containing the fragment."""
        return self.left_end.parent

    def __iter__(self) -> Iterator[Node]:
        node: Node | None = self.left_end
        while node is not None:
            yield node
            if node is self.right_end:
                break
            node = node.right

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def nodes(self) -> list[Node]:
        """Return the nodes of the fragment as a list."""
        return list(self)

    def latex(self) -> str:
        """Serialize the fragment to LaTeX."""
        from mathfield.renderers.latex import LatexRenderer

        return LatexRenderer().render_sequence(self.nodes())

    def text(self) -> str:
        """Render the fragment as plain text."""
        from mathfield.renderers.text import TextRenderer

        return "".join(TextRenderer().render(node) for node in self)

    def remove(self) -> list[Node]:
        """Detach every node of the fragment from the tree.

        Returns
        -------
        list of Node
            The detached nodes, left to right

        """
        nodes = self.nodes()
        for node in nodes:
            node.remove()
        return nodes
