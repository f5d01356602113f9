# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from .log import get_logger
from .path import CubicTo, Point

logger = get_logger(__name__)

#: Largest sweep approximated by a single cubic segment.
MAX_SEGMENT_SWEEP: Final = math.pi / 2


@dataclass(frozen=True)
class ArcCenter:
    r"""
    Center parameterization of an elliptical arc.

    A point on the arc at angle :math:`θ` (in radians) is

    .. math::

        c + R(φ) ⋅ (r_x \cos θ, r_y \sin θ).

    :ivar center: Ellipse center.
    :ivar rx: Horizontal radius (after out-of-range correction).
    :ivar ry: Vertical radius (after out-of-range correction).
    :ivar phi: Rotation of the x-axis in radians.
    :ivar theta1: Start angle in radians.
    :ivar dtheta: Signed sweep in radians, positive for ``sweep=True``.
    """

    center: Point
    rx: float
    ry: float
    phi: float
    theta1: float
    dtheta: float

    def point_at(self, theta: float) -> Point:
        """Point on the ellipse at angle ``theta``."""
        return self.map_unit(math.cos(theta), math.sin(theta))

    def map_unit(self, u: float, v: float) -> Point:
        """Map a point of the unit-circle frame onto the ellipse frame."""
        cos_phi, sin_phi = math.cos(self.phi), math.sin(self.phi)
        x, y = self.rx * u, self.ry * v
        return Point(
            self.center.x + x * cos_phi - y * sin_phi,
            self.center.y + x * sin_phi + y * cos_phi,
        )


def _angle(ux: float, uy: float, vx: float, vy: float) -> float:
    """Signed angle from ``u`` to ``v`` in radians."""
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def arc_center(
    start: Point,
    rx: float,
    ry: float,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
) -> ArcCenter | None:
    """
    Convert an endpoint-parameterized arc into its center parameterization.

    Follows https://www.w3.org/TR/SVG/implnote.html#ArcConversionEndpointToCenter,
    including the correction of out-of-range radii.

    :param rotation: Rotation of the ellipse x-axis in degrees.
    :return: ``None`` for a degenerate arc (a zero radius, coincident
        endpoints, or a center that is not representable as a float).
    """
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0 or start == end:
        return None

    phi = math.radians(rotation % 360)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    # Midpoint frame: rotate the half chord into the ellipse axes
    dx2, dy2 = (start.x - end.x) / 2, (start.y - end.y) / 2
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # Scale radii up if no ellipse with the given radii reaches both endpoints
    qx, qy = x1p / rx, y1p / ry
    lam = qx * qx + qy * qy
    if lam > 1:
        s = math.sqrt(lam)
        rx, ry = rx * s, ry * s

    rx2, ry2 = rx * rx, ry * ry
    num = rx2 * ry2 - rx2 * y1p * y1p - ry2 * x1p * x1p
    den = rx2 * y1p * y1p + ry2 * x1p * x1p
    coef = math.sqrt(max(num / den, 0.0)) if den else 0.0
    if large_arc == sweep:
        coef = -coef

    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    center = Point(
        cos_phi * cxp - sin_phi * cyp + (start.x + end.x) / 2,
        sin_phi * cxp + cos_phi * cyp + (start.y + end.y) / 2,
    )

    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    theta1 = _angle(1, 0, ux, uy)
    dtheta = _angle(ux, uy, vx, vy)
    if sweep and dtheta < 0:
        dtheta += 2 * math.pi
    elif not sweep and dtheta > 0:
        dtheta -= 2 * math.pi

    # Radii or chords beyond the float range
    if not (center.is_finite and math.isfinite(theta1) and math.isfinite(dtheta)):
        return None

    return ArcCenter(center, rx, ry, phi, theta1, dtheta)


def arc_to_cubic(
    start: Point,
    rx: float,
    ry: float,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
) -> list[CubicTo]:
    r"""
    Approximate an elliptical arc by cubic Bézier segments.

    The sweep is split into :math:`n = \lceil |Δθ| / 90° \rceil` equal parts.
    For a part of sweep :math:`δ` starting at :math:`θ`, the handles on the
    unit circle are placed along the tangents at distance

    .. math::

        t = \frac{8}{3} \frac{\sin^2(δ/4)}{\sin(δ/2)},

    and all points are mapped back through the ellipse radii and rotation.
    The end point of the last segment is exactly ``end``.

    :param rotation: Rotation of the ellipse x-axis in degrees.
    :return: The segments in order; empty for a degenerate arc.
    """
    arc = arc_center(start, rx, ry, rotation, large_arc, sweep, end)
    if arc is None:
        logger.debug("Degenerate arc from %s to %s skipped", start, end)
        return []

    # Guard against rounding pushing an exact quarter turn into a second segment
    count = max(1, math.ceil(abs(arc.dtheta) / MAX_SEGMENT_SWEEP - 1e-9))
    delta = arc.dtheta / count
    t = 8 / 3 * math.sin(delta / 4) ** 2 / math.sin(delta / 2)

    segments: list[CubicTo] = []
    theta = arc.theta1
    for i in range(count):
        cos1, sin1 = math.cos(theta), math.sin(theta)
        theta += delta
        cos2, sin2 = math.cos(theta), math.sin(theta)

        cp1 = arc.map_unit(cos1 - t * sin1, sin1 + t * cos1)
        cp2 = arc.map_unit(cos2 + t * sin2, sin2 - t * cos2)
        target = end if i == count - 1 else arc.map_unit(cos2, sin2)
        segments.append(CubicTo(cp1, cp2, target.x, target.y))
    return segments
