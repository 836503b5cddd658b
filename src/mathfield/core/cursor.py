#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/core/cursor.py
"""Cursor and selection engine.

The cursor always sits inside exactly one block (its ``parent``), between a
``left`` and a ``right`` neighbour, either of which may be None at the block
edges. All editing flows through it:

Movement
    ``move_left``/``move_right`` cross leaves, enter composites and leave
    blocks at their edges. ``move_up``/``move_down`` jump to the mirror block
    of the enclosing composite (numerator/denominator, limits, matrix rows).
    Movement never raises; at structural boundaries it returns False.

Editing
    ``insert`` splices a node at the cursor; ``backspace`` and
    ``delete_forward`` implement the deletion policy (degradation,
    entering composites, protective escape-and-delete).

Selection
    A selection is a contiguous run of siblings in the cursor's block,
    extended and contracted one node at a time with ``select``.

Editing on a cursor whose neighbours or block are inconsistent with the tree
raises ``StructuralIntegrityError``; a correct caller never sees it.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from mathfield.constants import DEFAULT_AUTO_EXIT_STYLES, Direction, VerticalPreference
from mathfield.core.nodes import Block, Composite, Fragment, Node
from mathfield.exceptions import StructuralIntegrityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorPosition:
    """Snapshot of a cursor location (block and both neighbours)."""

    parent: Block
    left: Node | None
    right: Node | None


@dataclass(frozen=True)
class CursorPath:
    """Tree-independent cursor location.

    Parameters
    ----------
    steps : tuple of (int, int)
        From the root down: index of the composite within its block, then
        index of the block within the composite
    offset : int
        Number of nodes left of the cursor in the final block

    """

    steps: tuple[tuple[int, int], ...]
    offset: int

    def to_list(self) -> list:
        """Return a JSON-friendly representation."""
        return [[list(step) for step in self.steps], self.offset]

    @classmethod
    def from_list(cls, data: list) -> CursorPath:
        """Rebuild a path from ``to_list`` output."""
        steps, offset = data
        return cls(tuple((int(a), int(b)) for a, b in steps), int(offset))


class Selection(Fragment):
    """A run of selected siblings plus the direction it grew in.

    The anchor is the end where the selection started; the focus is the end
    next to the cursor.

    """

    def __init__(self, left_end: Node, right_end: Node, direction: Direction = Direction.RIGHT):
        """Create a selection from ``left_end`` to ``right_end``."""
        super().__init__(left_end, right_end)
        self.direction = direction

    @property
    def anchor(self) -> Node:
        """End of the selection where it started."""
        return self.left_end if self.direction is Direction.RIGHT else self.right_end

    @property
    def focus(self) -> Node:
        """End of the selection next to the cursor."""
        return self.right_end if self.direction is Direction.RIGHT else self.left_end


class Cursor:
    """Editing position inside a formula tree.

    Parameters
    ----------
    root : Block
        Block the cursor starts in (at its start)
    left_right_into_cmd_goes : {'up', 'down'} or None, default None
        When moving Left/Right into a vertically stacked composite, enter the
        upper or lower block instead of the block nearest the entry side
    auto_exit_styles : iterable of str
        Style commands whose span is left right after a single leaf is typed

    Attributes
    ----------
    parent : Block
        Block containing the cursor
    left : Node or None
        Node immediately left of the cursor
    right : Node or None
        Node immediately right of the cursor
    selection : Selection or None
        Active selection, always within ``parent``

    """

    def __init__(
        self,
        root: Block,
        left_right_into_cmd_goes: VerticalPreference | None = None,
        auto_exit_styles: Iterable[str] = DEFAULT_AUTO_EXIT_STYLES,
    ):
        """Create a cursor at the start of ``root``."""
        self.parent: Block = root
        self.left: Node | None = None
        self.right: Node | None = root.first_child
        self.selection: Selection | None = None
        self.left_right_into_cmd_goes = left_right_into_cmd_goes
        self.auto_exit_styles = frozenset(auto_exit_styles)

    def __repr__(self) -> str:
        return f"Cursor(parent={self.parent!r}, left={self.left!r}, right={self.right!r})"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def side(self, direction: Direction) -> Node | None:
        """Return the neighbour on ``direction``."""
        return self.left if direction is Direction.LEFT else self.right

    def _place(self, block: Block, left: Node | None, right: Node | None) -> None:
        self.parent = block
        self.left = left
        self.right = right

    def _place_at_edge(self, block: Block, edge: Direction) -> None:
        if edge is Direction.LEFT:
            self._place(block, None, block.first_child)
        else:
            self._place(block, block.last_child, None)

    def _cross(self, node: Node, direction: Direction) -> None:
        if direction is Direction.RIGHT:
            self.left, self.right = node, node.right
        else:
            self.left, self.right = node.left, node

    def _place_beside(self, node: Node, direction: Direction) -> bool:
        """Put the cursor right after (RIGHT) or right before (LEFT) ``node``."""
        if node.parent is None:
            return False
        self.parent = node.parent
        if direction is Direction.RIGHT:
            self.left, self.right = node, node.right
        else:
            self.left, self.right = node.left, node
        return True

    def offset(self) -> int:
        """Return the number of nodes left of the cursor in its block."""
        count = 0
        node = self.left
        while node is not None:
            count += 1
            node = node.left
        return count

    def _place_at_offset(self, block: Block, offset: int) -> None:
        left = block.child_at(offset - 1) if offset > 0 else None
        if left is None and offset > 0:
            left = block.last_child
        right = left.right if left is not None else block.first_child
        self._place(block, left, right)

    def _check_integrity(self) -> None:
        block = self.parent
        if self.left is not None and (self.left.parent is not block or self.left.right is not self.right):
            raise StructuralIntegrityError("Cursor's left neighbour is not adjacent within its block", self.left.id)
        if self.right is not None and (self.right.parent is not block or self.right.left is not self.left):
            raise StructuralIntegrityError("Cursor's right neighbour is not adjacent within its block", self.right.id)
        if self.left is None and block.first_child is not self.right:
            raise StructuralIntegrityError("Cursor claims block start but is not there", block.id)
        if self.right is None and block.last_child is not self.left:
            raise StructuralIntegrityError("Cursor claims block end but is not there", block.id)
        current = block
        while current.owner is not None:
            container = current.owner.parent
            if container is None:
                raise StructuralIntegrityError("Cursor block is detached from the tree", block.id)
            current = container

    # ------------------------------------------------------------------
    # Horizontal movement
    # ------------------------------------------------------------------

    def move(self, direction: Direction) -> bool:
        """Move one step in ``direction``.

        Crosses a leaf, enters a composite, moves to the next block of the
        enclosing composite, or leaves the enclosing composite. Clears any
        selection.

        Returns
        -------
        bool
            True if the cursor moved; False at the edge of the root block

        """
        self.clear_selection()
        sibling = self.side(direction)
        if sibling is None:
            return self._move_out(direction)
        if isinstance(sibling, Composite):
            block = sibling.entry_block(direction.opposite, self.left_right_into_cmd_goes)
            if block is not None:
                self._place_at_edge(block, direction.opposite)
                return True
        self._cross(sibling, direction)
        return True

    def move_left(self) -> bool:
        """Move one step to the left."""
        return self.move(Direction.LEFT)

    def move_right(self) -> bool:
        """Move one step to the right."""
        return self.move(Direction.RIGHT)

    def _move_out(self, direction: Direction) -> bool:
        owner = self.parent.owner
        if owner is None:
            return False
        next_block = owner.block_after(self.parent, direction)
        if next_block is not None:
            self._place_at_edge(next_block, direction.opposite)
            return True
        return self._place_beside(owner, direction)

    # ------------------------------------------------------------------
    # Vertical movement
    # ------------------------------------------------------------------

    def move_up(self) -> bool:
        """Move to the block above (numerator, upper limit, superscript, row above)."""
        return self._move_vertical(up=True)

    def move_down(self) -> bool:
        """Move to the block below (denominator, lower limit, subscript, row below)."""
        return self._move_vertical(up=False)

    def _move_vertical(self, up: bool) -> bool:
        self.clear_selection()
        block = self.parent
        offset = self.offset()
        while block.owner is not None:
            owner = block.owner
            target = owner.block_above(block) if up else owner.block_below(block)
            if target is not None:
                self._place_at_offset(target, offset)
                return True
            container = owner.parent
            if container is None:
                return False
            offset = container.index_of(owner)
            block = container
        return False

    # ------------------------------------------------------------------
    # Absolute positioning
    # ------------------------------------------------------------------

    def move_to_start(self) -> Cursor:
        """Move to the start of the current block."""
        self.clear_selection()
        self._place_at_edge(self.parent, Direction.LEFT)
        return self

    def move_to_end(self) -> Cursor:
        """Move to the end of the current block."""
        self.clear_selection()
        self._place_at_edge(self.parent, Direction.RIGHT)
        return self

    def move_to(self, block: Block, left: Node | None = None, right: Node | None = None) -> Cursor:
        """Place the cursor in ``block`` between ``left`` and ``right``.

        Passing only one neighbour derives the other from it. Passing
        neither places the cursor at the end of the block.

        Raises
        ------
        StructuralIntegrityError
            If the neighbours are not adjacent children of ``block``

        """
        self.clear_selection()
        if left is None and right is None:
            self._place_at_edge(block, Direction.RIGHT)
            return self
        if left is not None and right is None:
            right = left.right
        elif right is not None and left is None:
            left = right.left
        self._place(block, left, right)
        self._check_integrity()
        return self

    def get_position(self) -> CursorPosition:
        """Capture the current location."""
        return CursorPosition(self.parent, self.left, self.right)

    def restore_position(self, position: CursorPosition) -> Cursor:
        """Return to a location captured with ``get_position``.

        The right neighbour is re-read from the tree, so the cursor stays
        valid when nodes were inserted after ``left`` since the capture.

        """
        self.clear_selection()
        left = position.left
        right = left.right if left is not None else position.parent.first_child
        self._place(position.parent, left, right)
        return self

    def path(self) -> CursorPath:
        """Return the cursor location as block indices from the root."""
        steps: list[tuple[int, int]] = []
        block = self.parent
        while block.owner is not None:
            owner = block.owner
            container = owner.parent
            if container is None:
                raise StructuralIntegrityError("Cursor block is detached from the tree", block.id)
            steps.append((container.index_of(owner), owner.blocks.index(block)))
            block = container
        steps.reverse()
        return CursorPath(tuple(steps), self.offset())

    def move_to_path(self, root: Block, path: CursorPath) -> bool:
        """Place the cursor at ``path`` below ``root``.

        Returns
        -------
        bool
            True if the path resolved; otherwise the cursor is placed at the
            end of ``root`` and False is returned

        """
        self.clear_selection()
        block = root
        for node_index, block_index in path.steps:
            node = block.child_at(node_index)
            if node is None or not 0 <= block_index < len(node.blocks):
                self._place_at_edge(root, Direction.RIGHT)
                return False
            block = node.blocks[block_index]
        self._place_at_offset(block, path.offset)
        return True

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def insert(self, node: Node, eject: bool = True) -> Cursor:
        """Insert ``node`` at the cursor and move past it.

        Any active selection is deleted first. Inserting a leaf into an
        auto-exit style span moves the cursor out after the span.

        Parameters
        ----------
        node : Node
            Detached node to insert
        eject : bool, default True
            Apply the auto-exit rule

        Raises
        ------
        StructuralIntegrityError
            If the cursor is inconsistent with the tree

        """
        self.delete_selection()
        self._check_integrity()
        self.parent.insert_child(node, self.right)
        self.left = node

        owner = self.parent.owner
        if (
            eject
            and node.is_leaf
            and owner is not None
            and getattr(owner, "command", None) in self.auto_exit_styles
            and owner.parent is not None
        ):
            self._place_beside(owner, Direction.RIGHT)
        return self

    def backspace(self) -> bool:
        """Delete leftwards.

        In order: delete an active selection; degrade a degradable symbol
        one step; remove a leaf; remove an empty composite or enter a
        non-empty one at the end of its last block; at a block start, escape
        the owning composite (removing it only when all its blocks are
        empty).

        Returns
        -------
        bool
            True if the tree or the cursor changed

        """
        if self.selection is not None:
            self.delete_selection()
            return True
        self._check_integrity()

        target = self.left
        if target is None:
            return self._delete_out_of(Direction.LEFT)

        degraded = getattr(target, "degraded", None)
        if degraded is not None and target.can_degrade():  # type: ignore[attr-defined]
            replacement = degraded()
            self.parent.replace_child(target, replacement)
            self.left = replacement
            return True

        return self._delete_adjacent(target, Direction.LEFT)

    def delete_forward(self) -> bool:
        """Delete rightwards; the mirror of ``backspace`` without degradation."""
        if self.selection is not None:
            self.delete_selection()
            return True
        self._check_integrity()

        target = self.right
        if target is None:
            return self._delete_out_of(Direction.RIGHT)
        return self._delete_adjacent(target, Direction.RIGHT)

    def _delete_adjacent(self, target: Node, direction: Direction) -> bool:
        if isinstance(target, Composite) and target.blocks and not target.is_empty():
            # Entering instead of deleting keeps non-empty content safe
            block = target.blocks[-1] if direction is Direction.LEFT else target.blocks[0]
            self._place_at_edge(block, direction.opposite)
            return True
        if direction is Direction.LEFT:
            self.left = target.left
        else:
            self.right = target.right
        target.remove()
        return True

    def _delete_out_of(self, direction: Direction) -> bool:
        owner = self.parent.owner
        if owner is None:
            return False
        container = owner.parent
        if container is None:
            raise StructuralIntegrityError("Cursor block is detached from the tree", self.parent.id)
        if owner.is_empty():
            logger.debug("Removing empty %s", type(owner).__name__)
            left, right = owner.left, owner.right
            owner.remove()
            self._place(container, left, right)
            return True
        logger.debug("Escaping non-empty %s without deleting it", type(owner).__name__)
        return self._place_beside(owner, direction)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, direction: Direction) -> bool:
        """Grow or shrink the selection by one sibling in ``direction``.

        Returns
        -------
        bool
            False at the block edge, where nothing changes

        """
        node = self.side(direction)
        if node is None:
            return False

        selection = self.selection
        if selection is None:
            self.selection = Selection(node, node, direction)
        elif selection.direction is direction:
            if direction is Direction.RIGHT:
                self.selection = Selection(selection.left_end, node, direction)
            else:
                self.selection = Selection(node, selection.right_end, direction)
        elif direction is Direction.RIGHT:
            if node is selection.right_end:
                self.selection = None
            else:
                self.selection = Selection(node.right, selection.right_end, selection.direction)  # type: ignore[arg-type]
        else:
            if node is selection.left_end:
                self.selection = None
            else:
                self.selection = Selection(selection.left_end, node.left, selection.direction)  # type: ignore[arg-type]

        self._cross(node, direction)
        return True

    def select_left(self) -> bool:
        """Extend the selection one sibling to the left."""
        return self.select(Direction.LEFT)

    def select_right(self) -> bool:
        """Extend the selection one sibling to the right."""
        return self.select(Direction.RIGHT)

    def select_all(self) -> Cursor:
        """Select every node of the root block, whatever the cursor depth."""
        root = self.parent.root()
        return self._select_whole(root)

    def select_block(self) -> Cursor:
        """Select every node of the cursor's current block."""
        return self._select_whole(self.parent)

    def _select_whole(self, block: Block) -> Cursor:
        self.clear_selection()
        self._place_at_edge(block, Direction.RIGHT)
        if block.first_child is not None and block.last_child is not None:
            self.selection = Selection(block.first_child, block.last_child, Direction.RIGHT)
        return self

    def clear_selection(self) -> Cursor:
        """Drop the selection without touching the tree."""
        self.selection = None
        return self

    def delete_selection(self) -> list[Node]:
        """Remove the selected nodes and collapse the cursor in their place.

        Returns
        -------
        list of Node
            The removed nodes, detached, left to right (empty without a
            selection)

        """
        selection = self.selection
        if selection is None:
            return []
        block = selection.block
        if block is None:
            raise StructuralIntegrityError("Selection is not attached to a block")
        left = selection.left_end.left
        right = selection.right_end.right
        removed = selection.remove()
        self.selection = None
        self._place(block, left, right)
        return removed
