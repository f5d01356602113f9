# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Final, assert_never, final, overload, override

from .errors import InvalidPathError

_number_strip_trailing_zeros: Final = re.compile(r"^(-?[0-9]*\.([0-9]*[1-9])?)0*$")
_number_strip_dot: Final = re.compile(r"\.$")
_format_spec: Final = re.compile(r"^(?:\.(?P<decimals>[0-9]+))?$")


def format_number(v: float, d: int | None = None) -> str:
    """
    Format a float as an SVG number.

    With ``d=None`` the shortest representation that round-trips through
    :func:`float` is used. Trailing zeros and a dangling decimal point are
    removed in both cases.
    """
    s = f"{v:.{d}f}" if d is not None else repr(float(v))
    s = _number_strip_trailing_zeros.sub(r"\1", s)
    return _number_strip_dot.sub("", s)


@dataclass(frozen=True)
class Point:
    """Immutable 2D point."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        """Iterate as ``(x, y)``."""
        yield self.x
        yield self.y

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, other: float) -> Point:
        return Point(self.x * other, self.y * other)

    __rmul__ = __mul__

    def reflect(self, center: Point) -> Point:
        """Point reflection through ``center``: :math:`2 c - p`."""
        return Point(2 * center.x - self.x, 2 * center.y - self.y)

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @override
    def __str__(self) -> str:
        return f"({format_number(self.x)}, {format_number(self.y)})"


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------


@final
@dataclass(frozen=True)
class MoveTo:
    """Start of the contour."""

    key: ClassVar[str] = "M"

    x: float
    y: float

    @property
    def target(self) -> Point:
        return Point(self.x, self.y)

    def translated(self, dx: float, dy: float) -> MoveTo:
        return MoveTo(self.x + dx, self.y + dy)


@final
@dataclass(frozen=True)
class LineTo:
    """Straight segment from the previous anchor."""

    key: ClassVar[str] = "L"

    x: float
    y: float

    @property
    def target(self) -> Point:
        return Point(self.x, self.y)

    def translated(self, dx: float, dy: float) -> LineTo:
        return LineTo(self.x + dx, self.y + dy)


@final
@dataclass(frozen=True)
class CubicTo:
    """
    Cubic Bézier segment from the previous anchor.

    :ivar cp1: Handle leaving the previous anchor.
    :ivar cp2: Handle entering this anchor.
    """

    key: ClassVar[str] = "C"

    cp1: Point
    cp2: Point
    x: float
    y: float

    @property
    def target(self) -> Point:
        return Point(self.x, self.y)

    def translated(self, dx: float, dy: float) -> CubicTo:
        d = Point(dx, dy)
        return CubicTo(self.cp1 + d, self.cp2 + d, self.x + dx, self.y + dy)


@final
@dataclass(frozen=True)
class ClosePath:
    """Terminal marker closing the contour."""

    key: ClassVar[str] = "Z"


type PathCommand = MoveTo | LineTo | CubicTo | ClosePath
type OnCurveCommand = MoveTo | LineTo | CubicTo


def command_points(cmd: PathCommand) -> list[Point]:
    """All points carried by ``cmd``: handles first, target last."""
    match cmd:
        case MoveTo() | LineTo():
            return [cmd.target]
        case CubicTo(cp1=cp1, cp2=cp2):
            return [cp1, cp2, cmd.target]
        case ClosePath():
            return []
        case _:
            assert_never(cmd)


# ------------------------------------------------------------------------------
# Path model
# ------------------------------------------------------------------------------


@dataclass(frozen=True)
class Anchor:
    """
    On-curve point of a path, derived from the command at ``index``.

    :ivar incoming: ``cp2`` of the command at ``index`` if it is a cubic.
    :ivar outgoing: ``cp1`` of the command at ``index + 1`` if it is a cubic.
    """

    index: int
    position: Point
    incoming: Point | None
    outgoing: Point | None


class PathModel:
    """
    Canonical single-contour path made of ``M``, ``L``, ``C`` and ``Z`` commands.

    The empty model is valid and represents a path with nothing to render.
    Commands are immutable; editing replaces them.
    """

    def __init__(
        self, commands: Iterable[PathCommand] = (), *, validate: bool = True
    ) -> None:
        self.commands: list[PathCommand] = list(commands)
        if validate:
            self.validate()

    def validate(self) -> None:
        """
        Check the model invariants.

        :raises InvalidPathError: If the model is non-empty and does not start
            with a move, contains a move after the start, contains a close
            anywhere but at the end, or carries a non-finite coordinate.
        """
        last = len(self.commands) - 1
        for idx, cmd in enumerate(self.commands):
            match cmd:
                case MoveTo():
                    if idx != 0:
                        raise InvalidPathError(f"MoveTo at index {idx}")
                case LineTo() | CubicTo():
                    if idx == 0:
                        raise InvalidPathError("Path must start with MoveTo")
                case ClosePath():
                    if idx == 0:
                        raise InvalidPathError("Path must start with MoveTo")
                    if idx != last:
                        raise InvalidPathError(f"ClosePath at index {idx}")
                case _:
                    assert_never(cmd)
            if not all(p.is_finite for p in command_points(cmd)):
                raise InvalidPathError(f"Non-finite coordinate at index {idx}")

    def clone(self) -> PathModel:
        return PathModel(self.commands, validate=False)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    @property
    def is_closed(self) -> bool:
        return bool(self.commands) and isinstance(self.commands[-1], ClosePath)

    @property
    def anchors(self) -> list[Anchor]:
        """Derived anchors for every command except the close."""
        result: list[Anchor] = []
        for idx, cmd in enumerate(self.commands):
            if isinstance(cmd, ClosePath):
                continue
            incoming = cmd.cp2 if isinstance(cmd, CubicTo) else None
            nxt = self.commands[idx + 1] if idx + 1 < len(self.commands) else None
            outgoing = nxt.cp1 if isinstance(nxt, CubicTo) else None
            result.append(Anchor(idx, cmd.target, incoming, outgoing))
        return result

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(self.commands)

    @overload
    def __getitem__(self, idx: int) -> PathCommand: ...
    @overload
    def __getitem__(self, idx: slice) -> list[PathCommand]: ...

    def __getitem__(self, idx: int | slice) -> PathCommand | list[PathCommand]:
        return self.commands[idx]

    @override
    def __eq__(self, other: Any) -> bool:
        if isinstance(other, PathModel):
            return self.commands == other.commands
        return NotImplemented

    def as_string(self, decimals: int | None = None) -> str:
        """Canonical path string, see :func:`~.path_serialize.serialize_path`."""
        from .path_serialize import serialize_path

        return serialize_path(self, decimals)

    @override
    def __str__(self) -> str:
        return self.as_string()

    @override
    def __repr__(self) -> str:
        return f"PathModel({self.commands!r})"

    @override
    def __format__(self, format_spec: str) -> str:
        """
        Format as a path string.

        The only supported specifier is ``.N`` for ``N`` decimals.
        """
        m = _format_spec.match(format_spec)
        if m is None:
            raise ValueError(f"Invalid format specifier: {format_spec!r}")
        decimals = m.group("decimals")
        return self.as_string(int(decimals) if decimals is not None else None)
