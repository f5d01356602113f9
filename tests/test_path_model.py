# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math

import pytest

from vector_path_editor.errors import InvalidPathError
from vector_path_editor.path import (
    Anchor,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    PathCommand,
    PathModel,
    Point,
    command_points,
)

curve: PathModel = PathModel(
    [
        MoveTo(0, 0),
        CubicTo(Point(0, 10), Point(10, 10), 10, 0),
        LineTo(20, 0),
        CubicTo(Point(25, 5), Point(30, 5), 30, 0),
        ClosePath(),
    ]
)


def test_point_arithmetic() -> None:
    """Vector operations on points."""
    p, q = Point(1, 2), Point(3, 5)
    assert p + q == Point(4, 7)
    assert q - p == Point(2, 3)
    assert -p == Point(-1, -2)
    assert 2 * p == p * 2 == Point(2, 4)
    assert p.reflect(q) == Point(5, 8)
    assert tuple(p) == (1, 2)
    assert str(Point(0.5, 2.0)) == "(0.5, 2)"


def test_anchors() -> None:
    """Anchors carry the handles glued to them."""
    assert curve.anchors == [
        Anchor(0, Point(0, 0), None, Point(0, 10)),
        Anchor(1, Point(10, 0), Point(10, 10), None),
        Anchor(2, Point(20, 0), None, Point(25, 5)),
        Anchor(3, Point(30, 0), Point(30, 5), None),
    ]


def test_sequence_protocol() -> None:
    """Length, iteration, indexing and equality."""
    assert len(curve) == 5
    assert list(curve)[0] == MoveTo(0, 0)
    assert curve[2] == LineTo(20, 0)
    assert curve[-1] == ClosePath()
    assert curve[1:3] == [CubicTo(Point(0, 10), Point(10, 10), 10, 0), LineTo(20, 0)]
    assert curve.is_closed
    assert not curve.is_empty
    assert PathModel().is_empty
    assert not PathModel().is_closed


def test_clone_is_independent() -> None:
    """Replacing commands of a clone leaves the original untouched."""
    clone = curve.clone()
    assert clone == curve
    clone.commands[2] = LineTo(21, 0)
    assert clone != curve
    assert curve[2] == LineTo(20, 0)


def test_string_conversions() -> None:
    """String conversion with and without fixed decimals."""
    model = PathModel([MoveTo(0, 0), LineTo(1 / 3, 2 / 3)])
    assert str(model) == "M 0 0 L 0.3333333333333333 0.6666666666666666"
    assert model.as_string(2) == "M 0 0 L 0.33 0.67"
    assert f"{model:.1}" == "M 0 0 L 0.3 0.7"
    assert f"{model}" == str(model)
    with pytest.raises(ValueError, match="Invalid format specifier"):
        f"{model:m}"


def test_translated() -> None:
    """Translation moves every point of a command."""
    cubic = CubicTo(Point(0, 10), Point(10, 10), 10, 0)
    assert cubic.translated(1, 2) == CubicTo(Point(1, 12), Point(11, 12), 11, 2)
    assert command_points(cubic) == [Point(0, 10), Point(10, 10), Point(10, 0)]
    assert command_points(ClosePath()) == []


@pytest.mark.parametrize(
    "commands,message",
    [
        ([LineTo(1, 1)], "must start with MoveTo"),
        ([ClosePath()], "must start with MoveTo"),
        ([MoveTo(0, 0), MoveTo(1, 1)], "MoveTo at index 1"),
        ([MoveTo(0, 0), ClosePath(), LineTo(1, 1)], "ClosePath at index 1"),
        ([MoveTo(0, 0), LineTo(math.inf, 0)], "Non-finite"),
        ([MoveTo(0, 0), CubicTo(Point(math.nan, 0), Point(0, 0), 1, 1)], "Non-finite"),
    ],
)
def test_invariants(commands: list[PathCommand], message: str) -> None:
    """Invalid command sequences are rejected."""
    with pytest.raises(InvalidPathError, match=message):
        PathModel(commands)
    # Skipping validation defers the check
    model = PathModel(commands, validate=False)
    with pytest.raises(ValueError):
        model.validate()
