# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Iterable
from typing import assert_never

from .path import ClosePath, CubicTo, LineTo, MoveTo, PathCommand, format_number


def serialize_command(cmd: PathCommand, decimals: int | None = None) -> str:
    """
    Serialize a single canonical command.

    Cubic segments are written as ``C cp1x cp1y, cp2x cp2y, x y``.
    """

    def f(v: float) -> str:
        return format_number(v, decimals)

    match cmd:
        case MoveTo(x=x, y=y) | LineTo(x=x, y=y):
            return f"{cmd.key} {f(x)} {f(y)}"
        case CubicTo(cp1=cp1, cp2=cp2, x=x, y=y):
            return f"C {f(cp1.x)} {f(cp1.y)}, {f(cp2.x)} {f(cp2.y)}, {f(x)} {f(y)}"
        case ClosePath():
            return "Z"
        case _:
            assert_never(cmd)


def serialize_path(commands: Iterable[PathCommand], decimals: int | None = None) -> str:
    """
    Serialize a canonical path (a :class:`~.path.PathModel` or any iterable of
    commands) into an absolute, space-separated path string.

    :param decimals: Fixed number of decimals, or ``None`` for the shortest
        representation that parses back to the identical float.
    """
    return " ".join(serialize_command(cmd, decimals) for cmd in commands)
