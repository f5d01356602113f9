# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, NamedTuple

from .path import Point


class AffineMatrix(NamedTuple):
    r"""
    2×3 affine matrix ``[a, b, c, d, tx, ty]`` acting as

    .. math::

        x' = a x + c y + t_x, \quad y' = b x + d y + t_y.
    """

    a: float
    b: float
    c: float
    d: float
    tx: float
    ty: float


IDENTITY: Final = AffineMatrix(1, 0, 0, 1, 0, 0)


def multiply(m1: AffineMatrix, m2: AffineMatrix) -> AffineMatrix:
    """Matrix product ``m1 × m2``, i.e. ``m2`` is applied first."""
    a1, b1, c1, d1, tx1, ty1 = m1
    a2, b2, c2, d2, tx2, ty2 = m2
    return AffineMatrix(
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * tx2 + c1 * ty2 + tx1,
        b1 * tx2 + d1 * ty2 + ty1,
    )


def translation(x: float, y: float) -> AffineMatrix:
    return AffineMatrix(1, 0, 0, 1, x, y)


def rotation(theta: float) -> AffineMatrix:
    """Rotation by ``theta`` radians."""
    c, s = math.cos(theta), math.sin(theta)
    return AffineMatrix(c, s, -s, c, 0, 0)


def skew(skew_x: float, skew_y: float) -> AffineMatrix:
    """Skew by the angles ``skew_x`` and ``skew_y`` in radians."""
    return AffineMatrix(1, math.tan(skew_y), math.tan(skew_x), 1, 0, 0)


def scaling(scale_x: float, scale_y: float) -> AffineMatrix:
    return AffineMatrix(scale_x, 0, 0, scale_y, 0, 0)


def compose(
    translate: tuple[float, float] | Point = (0, 0),
    rotation_radians: float = 0,
    skew_x: float = 0,
    skew_y: float = 0,
    scale_x: float = 1,
    scale_y: float = 1,
) -> AffineMatrix:
    """
    Build the matrix ``Translate × Rotate × Skew × Scale``.

    Angles are in radians.
    """
    x, y = translate
    m = translation(x, y)
    m = multiply(m, rotation(rotation_radians))
    m = multiply(m, skew(skew_x, skew_y))
    return multiply(m, scaling(scale_x, scale_y))


@dataclass(frozen=True)
class Decomposition:
    """
    Translate/rotate/scale components of an affine matrix.

    Skew is never recovered and always reported as zero.

    :ivar rotation: Rotation in degrees.
    """

    x: float
    y: float
    rotation: float
    scale_x: float
    scale_y: float
    skew_x: float = 0.0
    skew_y: float = 0.0


def determinant(m: AffineMatrix) -> float:
    return m.a * m.d - m.b * m.c


def decompose(m: AffineMatrix) -> Decomposition:
    """
    Split ``m`` into translation, rotation and scale.

    The rotation is ``atan2(b, a)``, the scales are the column norms. If the
    determinant is negative, the scale belonging to the smaller of ``a`` and
    ``d`` is negated. Any skew in ``m`` is folded into these values, so
    :func:`compose` and :func:`decompose` are only inverse for skew-free
    matrices.
    """
    a, b, c, d, tx, ty = m
    scale_x = math.hypot(a, b)
    scale_y = math.hypot(c, d)
    rot = math.degrees(math.atan2(b, a)) if a != 0 or b != 0 else 0.0

    if determinant(m) < 0:
        if a < d:
            scale_x = -scale_x
        else:
            scale_y = -scale_y

    return Decomposition(tx, ty, rot, scale_x, scale_y)


def invert(m: AffineMatrix) -> AffineMatrix:
    """
    Inverse matrix.

    :raises ValueError: If ``m`` is singular.
    """
    det = determinant(m)
    if det == 0 or not math.isfinite(det):
        raise ValueError(f"Singular matrix: {m}")
    a, b, c, d, tx, ty = m
    return AffineMatrix(
        d / det,
        -b / det,
        -c / det,
        a / det,
        (c * ty - d * tx) / det,
        (b * tx - a * ty) / det,
    )


def apply_transform(m: AffineMatrix, p: Point) -> Point:
    return Point(m.a * p.x + m.c * p.y + m.tx, m.b * p.x + m.d * p.y + m.ty)
