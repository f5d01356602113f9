# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
from collections.abc import Sequence

from .arc import arc_to_cubic
from .errors import InvalidPathError, PathParseError
from .log import get_logger
from .path import ClosePath, CubicTo, LineTo, MoveTo, PathCommand, PathModel, Point
from .path_parser import ARITY, PathParser

logger = get_logger(__name__)


def _to_float(s: str) -> float:
    try:
        v = float(s)
    except ValueError as e:
        raise PathParseError(f"Invalid number: {s!r}") from e
    if not math.isfinite(v):
        raise PathParseError(f"Non-finite number: {s!r}")
    return v


class PathNormalizer:
    """
    Convert raw path items into a canonical :class:`~.path.PathModel`.

    Tracks the current point and the most recent off-curve control point, which
    smooth commands reflect through the current point. For quadratic commands
    the remembered control is the quadratic one, not a cubic handle.
    """

    def __init__(self) -> None:
        self.commands: list[PathCommand] = []
        self.last_point: Point = Point(0, 0)
        self.last_control: Point = Point(0, 0)
        self.start: Point = Point(0, 0)
        self.previous: str = ""

    def normalize(self, raw: Sequence[Sequence[str]]) -> PathModel:
        """
        Normalize all items of a single contour.

        Normalization stops at anything that would start a second contour;
        the dropped items are logged.

        :raises PathParseError: For items with a wrong parameter count, invalid
            numbers, or a path that does not start with a move.
        """
        for idx, item in enumerate(raw):
            if not self.feed(item):
                logger.warning(
                    "Dropped %d command(s) beyond the first contour", len(raw) - idx
                )
                break
        return PathModel(self.commands)

    def feed(self, item: Sequence[str]) -> bool:
        """
        Normalize one raw item.

        :return: ``False`` if the item belongs to a further contour and was
            not consumed.
        """
        if not item:
            raise PathParseError("Empty path item")

        cmd = item[0]
        key = cmd.upper()
        values = [_to_float(s) for s in item[1:]]
        if ARITY.get(key) != len(values):
            raise PathParseError(f"Invalid path item: {list(item)!r}")
        if not self.commands and key != "M":
            raise PathParseError("Path must start with a move")
        if self.commands and isinstance(self.commands[-1], ClosePath):
            return False

        origin = self.last_point if cmd != key else Point(0, 0)

        def pt(i: int) -> Point:
            return Point(origin.x + values[i], origin.y + values[i + 1])

        match key:
            case "M":
                p = pt(0)
                if len(self.commands) > 1:
                    return False
                # A move directly after the initial move replaces it
                self.commands[:] = [MoveTo(p.x, p.y)]
                self.start = self.last_point = self.last_control = p
            case "L":
                self._line_to(pt(0))
            case "H":
                self._line_to(Point(origin.x + values[0], self.last_point.y))
            case "V":
                self._line_to(Point(self.last_point.x, origin.y + values[0]))
            case "C":
                self._cubic_to(pt(0), pt(2), pt(4))
            case "S":
                if self.previous in ("C", "S"):
                    cp1 = self.last_control.reflect(self.last_point)
                else:
                    cp1 = self.last_point
                self._cubic_to(cp1, pt(0), pt(2))
            case "Q":
                self._quadratic_to(pt(0), pt(2))
            case "T":
                if self.previous in ("Q", "T"):
                    qc = self.last_control.reflect(self.last_point)
                else:
                    qc = self.last_point
                self._quadratic_to(qc, pt(0))
            case "A":
                rx, ry, rotation, large_arc, sweep = values[:5]
                end = pt(5)
                segments = arc_to_cubic(
                    self.last_point, rx, ry, rotation, large_arc != 0, sweep != 0, end
                )
                if segments:
                    self.commands.extend(segments)
                    self.last_point = end
                    self.last_control = segments[-1].cp2
            case "Z":
                self.commands.append(ClosePath())
                self.last_point = self.last_control = self.start
            case _:
                raise PathParseError(f"Invalid path command: {cmd!r}")

        self.previous = key
        return True

    def _line_to(self, p: Point) -> None:
        self.commands.append(LineTo(p.x, p.y))
        self.last_point = self.last_control = p

    def _cubic_to(self, cp1: Point, cp2: Point, p: Point) -> None:
        self.commands.append(CubicTo(cp1, cp2, p.x, p.y))
        self.last_point, self.last_control = p, cp2

    def _quadratic_to(self, qc: Point, p: Point) -> None:
        """Degree elevation of a quadratic segment with control ``qc``."""
        start = self.last_point
        cp1 = start + (qc - start) * (2 / 3)
        cp2 = p + (qc - p) * (2 / 3)
        self.commands.append(CubicTo(cp1, cp2, p.x, p.y))
        self.last_point, self.last_control = p, qc


def normalize_items(raw: Sequence[Sequence[str]]) -> PathModel:
    """
    Normalize items as produced by :meth:`~.path_parser.PathParser.parse`.

    :raises PathParseError: If the items are malformed.
    """
    return PathNormalizer().normalize(raw)


def normalize_path(path: str) -> PathModel:
    """
    Parse a path with the full ``M L H V C S Q T A Z`` grammar (absolute or
    relative) into a canonical path using only ``M L C Z``.

    A path that cannot be parsed yields an empty model instead of an error.
    """
    try:
        return normalize_items(PathParser.parse(path))
    except (PathParseError, InvalidPathError) as e:
        logger.debug("Treating unparsable path as empty: %s", e)
        return PathModel()
