"""
Quadtree Spatial Index
======================

A region quadtree over borrowed references to Bounded elements.

The tree never copies or owns what it stores. Elements must stay alive and
keep returning the same bounds for as long as the tree references them; the
index is built once per scan and thrown away with the records.

Placement Rules:
    - An element descends into the single child quadrant that strictly
      contains it. The split line belongs to the lower quadrant: a rectangle
      fits the left half only if its right edge is < the vertical split.
    - An element that straddles a split line stays at the current node,
      regardless of depth.
    - A leaf holding more than `capacity` elements splits once, unless it
      is already at `max_depth`. Below that depth a leaf grows unbounded.

Query Semantics:
    `query()` is a containment descent, NOT a radius search. It yields the
    elements of every node on the path toward the query rectangle. Elements
    sitting in a sibling quadrant are not visited, even when they are
    geometrically adjacent, unless the query rectangle itself straddles the
    split lines of a node that fully contains it (then all four children
    are visited). Callers that need true proximity filter the candidates.

Traversal Order:
    Own elements first, then TOP_LEFT, TOP_RIGHT, BOTTOM_RIGHT, BOTTOM_LEFT.
    Elements at one node keep their insertion order.

Example:
    from stash_scanner.index import QuadTree
    from stash_scanner.models.bounds import Bounds

    tree = QuadTree(Bounds(0, 0, 16, 16))
    tree.insert(Bounds(0, 0, 1, 1))
    tree.insert(Bounds(14, 14, 1, 1))
    assert len(tree) == 2
    nearby = list(tree.query(Bounds(13, 13, 2, 2)))
"""

from enum import IntEnum
from typing import Generic, Iterator, List, Optional, TypeVar

from stash_scanner.models.bounds import Bounded, Bounds


T = TypeVar("T", bound=Bounded)

DEFAULT_CAPACITY = 4
DEFAULT_MAX_DEPTH = 10


class Quadrant(IntEnum):
    """Child slots of a split node, in traversal order."""

    TOP_LEFT = 0
    TOP_RIGHT = 1
    BOTTOM_RIGHT = 2
    BOTTOM_LEFT = 3


class QuadTree(Generic[T]):
    """
    Node of a region quadtree. The root is just a node at depth 0.

    Attributes:
        bounds: Region covered by this node
        capacity: Element count a leaf may hold before it tries to split
        depth: Distance from the root
        max_depth: Nodes at this depth never split
        elements: Elements held directly by this node, in insertion order
        children: Four child nodes indexed by Quadrant, or None for a leaf
    """

    def __init__(
        self,
        bounds: Bounds,
        capacity: int = DEFAULT_CAPACITY,
        max_depth: int = DEFAULT_MAX_DEPTH,
        depth: int = 0,
    ) -> None:
        self.bounds = bounds
        self.capacity = capacity
        self.max_depth = max_depth
        self.depth = depth
        self.elements: List[T] = []
        self.children: Optional[List["QuadTree[T]"]] = None

    # =========================================================================
    # Mutation
    # =========================================================================

    def insert(self, element: T) -> None:
        """
        Insert an element, splitting this leaf if it overflows.

        Args:
            element: Any object exposing bounds()
        """
        quadrant = self._get_quadrant(element.bounds())

        if self.children is not None:
            if quadrant is not None:
                self.children[quadrant].insert(element)
            else:
                self.elements.append(element)
            return

        self.elements.append(element)
        if len(self.elements) > self.capacity:
            self.split()

    def split(self) -> None:
        """
        Subdivide this leaf into four exact quadrants.

        Held elements that fit a quadrant move down; the rest stay here.
        Does nothing at max_depth.

        Raises:
            RuntimeError: If the node already has children
        """
        if self.depth >= self.max_depth:
            return

        if self.children is not None:
            raise RuntimeError(
                f"split() on a node that is already split (depth={self.depth}, "
                f"bounds={self.bounds})"
            )

        half_width = self.bounds.width / 2.0
        half_height = self.bounds.height / 2.0
        x, y = self.bounds.x, self.bounds.y

        origins = {
            Quadrant.TOP_LEFT: (x, y),
            Quadrant.TOP_RIGHT: (x + half_width, y),
            Quadrant.BOTTOM_RIGHT: (x + half_width, y + half_height),
            Quadrant.BOTTOM_LEFT: (x, y + half_height),
        }
        children: List[QuadTree[T]] = [
            QuadTree(
                Bounds(origins[q][0], origins[q][1], half_width, half_height),
                capacity=self.capacity,
                max_depth=self.max_depth,
                depth=self.depth + 1,
            )
            for q in Quadrant
        ]

        remaining: List[T] = []
        for element in self.elements:
            quadrant = self._get_quadrant(element.bounds())
            if quadrant is not None:
                children[quadrant].insert(element)
            else:
                remaining.append(element)

        self.children = children
        self.elements = remaining

    def clear(self) -> None:
        """Drop every element and collapse back into a single leaf."""
        self.elements.clear()
        if self.children is not None:
            for child in self.children:
                child.clear()
            self.children = None

    # =========================================================================
    # Traversal
    # =========================================================================

    def __iter__(self) -> Iterator[T]:
        """Yield every element, depth-first in quadrant order."""
        pending: List[QuadTree[T]] = [self]
        while pending:
            node = pending.pop()
            yield from node.elements
            if node.children is not None:
                # Reversed so TOP_LEFT comes off the stack first
                pending.extend(reversed(node.children))

    def query(self, element: Bounded) -> Iterator[T]:
        """
        Yield the elements the tree considers near `element`.

        `element` need not be stored in the tree. The returned iterator is
        lazy and does not modify the tree, so calling query() again with the
        same argument yields the same sequence.

        A node with children that does not contain `element` ends the
        traversal. Nodes still waiting on the stack are not visited.

        Args:
            element: Query rectangle, or anything exposing bounds()

        Returns:
            Iterator over stored elements on the containment path
        """
        target = element.bounds()
        pending: List[QuadTree[T]] = [self]
        while pending:
            node = pending.pop()
            yield from node.elements

            if node.children is None:
                continue

            quadrant = node._get_quadrant(target)
            if quadrant is not None:
                pending.append(node.child(quadrant))
            elif node._contains(target):
                pending.extend(reversed(node.children))
            else:
                # Target pokes out of this node: the whole traversal ends here
                return

    def child(self, quadrant: int) -> "QuadTree[T]":
        """
        Return the child node in the given quadrant.

        Raises:
            RuntimeError: On a leaf, or for an index outside 0..3
        """
        if self.children is None:
            raise RuntimeError(f"Leaf node at depth {self.depth} has no children")
        if not 0 <= quadrant < len(self.children):
            raise RuntimeError(f"Invalid quadrant index: {quadrant}")
        return self.children[quadrant]

    def __len__(self) -> int:
        count = len(self.elements)
        if self.children is not None:
            for child in self.children:
                count += len(child)
        return count

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def dump(self) -> str:
        """Render the tree one node per line, indented by depth."""
        lines = [f"{'    ' * self.depth}{self.elements!r}"]
        if self.children is not None:
            for child in self.children:
                lines.append(child.dump())
        return "\n".join(lines)

    # =========================================================================
    # Geometry helpers
    # =========================================================================

    def _get_quadrant(self, r: Bounds) -> Optional[Quadrant]:
        """Quadrant strictly containing `r`, or None if it straddles a split."""
        mid_x = self.bounds.x + self.bounds.width / 2.0
        mid_y = self.bounds.y + self.bounds.height / 2.0

        fits_left = r.x >= self.bounds.x and r.right < mid_x
        fits_right = r.x >= mid_x and r.right < self.bounds.right
        fits_top = r.y >= self.bounds.y and r.bottom < mid_y
        fits_bottom = r.y >= mid_y and r.bottom < self.bounds.bottom

        if fits_top and fits_left:
            return Quadrant.TOP_LEFT
        if fits_top and fits_right:
            return Quadrant.TOP_RIGHT
        if fits_bottom and fits_right:
            return Quadrant.BOTTOM_RIGHT
        if fits_bottom and fits_left:
            return Quadrant.BOTTOM_LEFT
        return None

    def _contains(self, r: Bounds) -> bool:
        """True if `r` lies inside this node, far edges exclusive."""
        return (
            r.x >= self.bounds.x
            and r.right < self.bounds.right
            and r.y >= self.bounds.y
            and r.bottom < self.bounds.bottom
        )
