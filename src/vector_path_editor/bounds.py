# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from .path import ClosePath, CubicTo, PathModel, Point, command_points
from .transform import AffineMatrix, apply_transform

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def intersects(self, other: Rect) -> bool:
        """Overlap test on closed intervals; touching edges intersect."""
        return not (
            self.right < other.x
            or other.right < self.x
            or self.bottom < other.y
            or other.bottom < self.y
        )

    def contains(self, other: Rect) -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def contains_point(self, p: Point) -> bool:
        return self.x <= p.x <= self.right and self.y <= p.y <= self.bottom

    def expanded(self, padding: float) -> Rect:
        """Grow by ``padding`` on every side."""
        return Rect(
            self.x - padding,
            self.y - padding,
            self.width + 2 * padding,
            self.height + 2 * padding,
        )

    @staticmethod
    def from_points(points: Iterable[Point]) -> Rect | None:
        """Bounding box of ``points``, or ``None`` if there are none."""
        pts = list(points)
        if not pts:
            return None
        xs, ys = [p.x for p in pts], [p.y for p in pts]
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    @staticmethod
    def union(rects: Iterable[Rect]) -> Rect | None:
        """Smallest rectangle containing all ``rects``."""
        corners: list[Point] = []
        for r in rects:
            corners += [Point(r.x, r.y), Point(r.right, r.bottom)]
        return Rect.from_points(corners)


@dataclass(frozen=True)
class BoundingRect(Rect):
    """Bounding rectangle of one indexed shape."""

    id: Hashable = field(kw_only=True)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


# ------------------------------------------------------------------------------
# Path bounds
# ------------------------------------------------------------------------------


def _cubic_extrema(
    p0: npt.NDArray[np.float64],
    p1: npt.NDArray[np.float64],
    p2: npt.NDArray[np.float64],
    p3: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    r"""
    Interior extreme points of cubic Bézier segments.

    For control points of shape ``(n, 2)``, the derivative of each coordinate is
    proportional to :math:`a t^2 + b t + c` with

    .. math::

        a = p_3 - 3 p_2 + 3 p_1 - p_0, \quad
        b = 2 (p_2 - 2 p_1 + p_0), \quad
        c = p_1 - p_0.

    :return: Array of shape ``(n, 2, 2)`` holding, per segment, axis and root,
        the coordinate value at the root, or NaN where the root does not lie
        in :math:`(0, 1)`.
    """
    import numpy as np

    a = p3 - 3 * p2 + 3 * p1 - p0
    b = 2 * (p2 - 2 * p1 + p0)
    c = p1 - p0

    with np.errstate(divide="ignore", invalid="ignore"):
        sq = np.sqrt(b * b - 4 * a * c)
        quadratic = np.stack([(-b + sq) / (2 * a), (-b - sq) / (2 * a)], axis=-1)
        linear = np.stack([-c / b, np.full_like(b, np.nan)], axis=-1)
    degenerate = np.abs(a) < 1e-12
    t = np.where(degenerate[..., None], linear, quadratic)
    t = np.where((t > 0) & (t < 1), t, np.nan)

    s = 1 - t
    return (
        s**3 * p0[..., None]
        + 3 * s**2 * t * p1[..., None]
        + 3 * s * t**2 * p2[..., None]
        + t**3 * p3[..., None]
    )


def path_bounds(model: PathModel, *, tight: bool = True) -> Rect | None:
    """
    Bounding box of a canonical path in its local coordinates.

    :param tight: Include the true extrema of cubic segments. Otherwise the
        hull of all anchors and handles is returned, which is cheaper and
        always contains the curve.
    :return: ``None`` for an empty path.
    """
    if model.is_empty:
        return None
    if not tight:
        return Rect.from_points(p for cmd in model for p in command_points(cmd))

    import numpy as np

    anchors = np.array([tuple(a.position) for a in model.anchors], dtype=np.float64)
    lo, hi = anchors.min(axis=0), anchors.max(axis=0)

    segments: list[tuple[Point, Point, Point, Point]] = []
    previous = model[0]
    for cmd in model[1:]:
        if isinstance(cmd, CubicTo) and not isinstance(previous, ClosePath):
            segments.append((previous.target, cmd.cp1, cmd.cp2, cmd.target))
        previous = cmd

    if segments:
        p0, p1, p2, p3 = (
            np.array([tuple(s[i]) for s in segments], dtype=np.float64)
            for i in range(4)
        )
        extrema = _cubic_extrema(p0, p1, p2, p3)
        # One column per axis
        flat = extrema.transpose(1, 0, 2).reshape(2, -1)
        lo = np.fmin(lo, np.nanmin(flat, axis=1, initial=np.inf))
        hi = np.fmax(hi, np.nanmax(flat, axis=1, initial=-np.inf))

    return Rect(float(lo[0]), float(lo[1]), float(hi[0] - lo[0]), float(hi[1] - lo[1]))


def transform_rect(m: AffineMatrix, rect: Rect) -> Rect:
    """Axis-aligned bounds of ``rect`` after applying ``m``."""
    corners = [
        Point(rect.x, rect.y),
        Point(rect.right, rect.y),
        Point(rect.right, rect.bottom),
        Point(rect.x, rect.bottom),
    ]
    result = Rect.from_points(apply_transform(m, p) for p in corners)
    assert result is not None
    return result


# ------------------------------------------------------------------------------
# Shape trees
# ------------------------------------------------------------------------------


class Shape(Protocol):
    """Anything with an identifier that can be indexed."""

    @property
    def id(self) -> Hashable: ...


def flatten_bounds[S: Shape](
    shapes: Iterable[S],
    *,
    measure: Callable[[S], Rect | None],
    children: Callable[[S], Iterable[S]] = lambda _: (),
) -> list[BoundingRect]:
    """
    Flatten a (possibly nested) shape tree into one bounding record per shape.

    Shapes are visited depth-first with parents before their children, so the
    result preserves document order. A shape whose ``measure`` is ``None``
    (for example a group) receives the union of its children's bounds; a
    shape without either is skipped.

    :param measure: Bounds of a single shape in scene coordinates.
    :param children: Nested shapes of a shape.
    """
    result: list[BoundingRect] = []

    def visit(shape: S) -> Rect | None:
        slot = len(result)
        own = measure(shape)
        nested = [r for child in children(shape) if (r := visit(child)) is not None]
        rect = own if own is not None else Rect.union(nested)
        if rect is not None:
            record = BoundingRect(rect.x, rect.y, rect.width, rect.height, id=shape.id)
            result.insert(slot, record)
        return rect

    for shape in shapes:
        visit(shape)
    return result
