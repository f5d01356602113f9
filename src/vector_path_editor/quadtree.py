# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import TYPE_CHECKING, Self

from .bounds import BoundingRect, Rect
from .log import get_logger
from .path import Point

if TYPE_CHECKING:
    from .config import EditorConfig

logger = get_logger(__name__)


class Quadtree[T: Rect]:
    """
    Region quadtree over axis-aligned rectangles.

    Children are numbered ``0`` (top right), ``1`` (top left), ``2`` (bottom
    left) and ``3`` (bottom right). A rectangle is pushed down only if it lies
    strictly inside a single quadrant; rectangles straddling a midline stay at
    the node where they were inserted, and so do rectangles reaching beyond
    the root bounds. Below ``max_levels`` nodes never split
    and simply accumulate more than ``max_objects`` rectangles.
    """

    def __init__(
        self,
        bounds: Rect,
        max_objects: int = 10,
        max_levels: int = 5,
        level: int = 0,
    ) -> None:
        self.bounds = bounds
        self.max_objects = max_objects
        self.max_levels = max_levels
        self.level = level
        self.objects: list[T] = []
        self.nodes: list[Quadtree[T]] = []

    @classmethod
    def from_config(cls, config: EditorConfig) -> Self:
        """Empty root node covering ``config.world_bounds``."""
        return cls(config.world_bounds, config.max_objects, config.max_levels)

    def split(self) -> None:
        """Create the four child nodes."""
        w, h = self.bounds.width / 2, self.bounds.height / 2
        x, y = self.bounds.x, self.bounds.y
        level = self.level + 1
        self.nodes = [
            Quadtree(Rect(x0, y0, w, h), self.max_objects, self.max_levels, level)
            for x0, y0 in ((x + w, y), (x, y), (x, y + h), (x + w, y + h))
        ]
        logger.debug("Split quadtree node at level %d (%s)", self.level, self.bounds)

    def get_index(self, rect: Rect) -> int:
        """
        Index of the quadrant that fully contains ``rect``, or ``-1`` if the
        rectangle touches or crosses a midline or leaves this node's bounds.
        """
        if not self.bounds.contains(rect):
            return -1

        mid_x = self.bounds.x + self.bounds.width / 2
        mid_y = self.bounds.y + self.bounds.height / 2

        top = rect.y < mid_y and rect.bottom < mid_y
        bottom = rect.y > mid_y

        if rect.x < mid_x and rect.right < mid_x:
            if top:
                return 1
            if bottom:
                return 2
        elif rect.x > mid_x:
            if top:
                return 0
            if bottom:
                return 3
        return -1

    def insert(self, rect: T) -> None:
        if self.nodes:
            index = self.get_index(rect)
            if index != -1:
                self.nodes[index].insert(rect)
                return

        self.objects.append(rect)

        if len(self.objects) > self.max_objects and self.level < self.max_levels:
            if not self.nodes:
                self.split()

            remaining: list[T] = []
            for obj in self.objects:
                index = self.get_index(obj)
                if index != -1:
                    self.nodes[index].insert(obj)
                else:
                    remaining.append(obj)
            self.objects = remaining

    def retrieve(self, query: Rect) -> list[T]:
        """
        Candidate rectangles for ``query``.

        The result contains every stored rectangle that intersects ``query``
        and possibly some that do not; callers needing exact overlap must
        filter themselves.
        """
        found: list[T] = []
        self._retrieve(query, found)
        return found

    def _retrieve(self, query: Rect, found: list[T]) -> None:
        found.extend(self.objects)
        if not self.nodes:
            return

        index = self.get_index(query)
        if index != -1:
            self.nodes[index]._retrieve(query, found)
        else:
            for node in self.nodes:
                if node.bounds.intersects(query):
                    node._retrieve(query, found)

    def retrieve_point(self, point: Point, tolerance: float = 0) -> list[T]:
        """Candidates for a hit test at ``point`` with the given tolerance."""
        query = Rect(point.x, point.y, 0, 0).expanded(tolerance)
        return self.retrieve(query)

    def clear(self) -> None:
        """Drop all rectangles and children."""
        self.objects = []
        for node in self.nodes:
            node.clear()
        self.nodes = []

    @property
    def depth(self) -> int:
        """Number of levels below this node."""
        return 1 + max((node.depth for node in self.nodes), default=-1)

    def __len__(self) -> int:
        return len(self.objects) + sum(len(node) for node in self.nodes)


def build_index(
    rects: Iterable[BoundingRect],
    bounds: Rect | None = None,
    config: EditorConfig | None = None,
) -> Quadtree[BoundingRect]:
    """
    Build a fresh index over ``rects``.

    :param bounds: Root bounds; defaults to the configured world bounds.
    """
    if config is None:
        from .config import EditorConfig

        config = EditorConfig()

    tree: Quadtree[BoundingRect] = Quadtree(
        bounds if bounds is not None else config.world_bounds,
        config.max_objects,
        config.max_levels,
    )
    for rect in rects:
        tree.insert(rect)
    return tree


def cull[I](
    items: Iterable[I],
    index: Quadtree[BoundingRect],
    viewport: Rect,
    *,
    key: Callable[[I], Hashable],
    padding: float = 0,
) -> list[I]:
    """
    Items whose bounding record is a candidate for the padded viewport.

    The input order (and thus the z-order of a render list) is preserved.
    """
    visible = {r.id for r in index.retrieve(viewport.expanded(padding))}
    return [item for item in items if key(item) in visible]
