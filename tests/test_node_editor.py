# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import pytest

from vector_path_editor.config import EditorConfig
from vector_path_editor.errors import GestureError, InvalidPathError
from vector_path_editor.node_editor import Handle, HandleKind, NodeEditor
from vector_path_editor.path import CubicTo, LineTo, MoveTo, PathModel, Point
from vector_path_editor.path_normalize import normalize_path

two_curves = "M 0 0 C 0 10 10 10 10 0 C 10 -10 20 -10 20 0"


def find(editor: NodeEditor, kind: HandleKind, index: int) -> Handle:
    (handle,) = (h for h in editor.handles() if h.kind is kind and h.index == index)
    return handle


class Recorder:
    def __init__(self) -> None:
        self.live: list[PathModel] = []
        self.commits: list[str] = []

    def editor(self, path_data: str) -> NodeEditor:
        return NodeEditor(
            path_data, on_live_update=self.live.append, on_commit=self.commits.append
        )


def test_handles() -> None:
    """Anchors of all commands; cp2 at its own anchor, cp1 at the previous one."""
    editor = NodeEditor(two_curves + " Z")
    assert [(h.kind, h.index, h.owner) for h in editor.handles()] == [
        (HandleKind.ANCHOR, 0, 0),
        (HandleKind.CP1, 0, 1),
        (HandleKind.ANCHOR, 1, 1),
        (HandleKind.CP2, 1, 1),
        (HandleKind.CP1, 1, 2),
        (HandleKind.ANCHOR, 2, 2),
        (HandleKind.CP2, 2, 2),
    ]
    cp1 = find(editor, HandleKind.CP1, 0)
    assert cp1.position == Point(0, 10)
    assert cp1.anchor == Point(0, 0)


def test_rigid_anchor_drag() -> None:
    """An anchor carries its own cp2 and the next cp1, nothing else."""
    rec = Recorder()
    editor = rec.editor(two_curves)
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    model = gesture.move_by(3, -4)

    first, second = model[1], model[2]
    assert isinstance(first, CubicTo) and isinstance(second, CubicTo)
    assert first.cp1 == Point(0, 10)
    assert first.cp2 == Point(13, 6)
    assert first.target == Point(13, -4)
    assert second.cp1 == Point(13, -14)
    assert second.cp2 == Point(20, -10)
    assert second.target == Point(20, 0)


def test_anchor_without_curves() -> None:
    """Anchors of line segments move alone."""
    editor = NodeEditor("M 0 0 L 10 0 L 10 10")
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    gesture.move_to(Point(12, 2))
    assert gesture.end() == "M 0 0 L 12 2 L 10 10"


@pytest.mark.parametrize(
    "kind,index,expected",
    [
        (HandleKind.CP1, 0, CubicTo(Point(1, 11), Point(10, 10), 10, 0)),
        (HandleKind.CP2, 1, CubicTo(Point(0, 10), Point(11, 11), 10, 0)),
    ],
)
def test_control_drag_moves_nothing_else(
    kind: HandleKind, index: int, expected: CubicTo
) -> None:
    """Dragging one handle leaves the anchor and the opposite handle alone."""
    editor = NodeEditor(two_curves)
    gesture = editor.begin_drag(find(editor, kind, index))
    model = gesture.move_by(1, 1)
    assert model[1] == expected
    assert model[2] == normalize_path(two_curves)[2]


def test_live_updates_and_commit() -> None:
    """Each step reports the working copy; the end commits exactly once."""
    rec = Recorder()
    editor = rec.editor("M 0 0 L 10 0")
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    gesture.move_by(1, 0)
    gesture.move_by(1, 0)

    assert [m[1] for m in rec.live] == [LineTo(11, 0), LineTo(12, 0)]
    assert rec.commits == []
    assert editor.path_data == "M 0 0 L 10 0"

    assert gesture.end() == "M 0 0 L 12 0"
    assert rec.commits == ["M 0 0 L 12 0"]
    assert editor.path_data == "M 0 0 L 12 0"
    assert not gesture.active


def test_live_snapshots_are_independent() -> None:
    """Live-update snapshots are not changed by later steps."""
    rec = Recorder()
    editor = rec.editor("M 0 0 L 10 0")
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 0))
    gesture.move_by(1, 1)
    gesture.move_by(1, 1)
    assert rec.live[0][0] == MoveTo(1, 1)
    assert rec.live[1][0] == MoveTo(2, 2)


def test_cancel_never_commits() -> None:
    """A cancelled gesture leaves the persisted path unchanged."""
    rec = Recorder()
    editor = rec.editor("M 0 0 L 10 0")
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    gesture.move_by(5, 5)
    gesture.cancel()
    assert rec.commits == []
    assert editor.path_data == "M 0 0 L 10 0"

    # A new gesture may start afterwards
    editor.begin_drag(find(editor, HandleKind.ANCHOR, 1)).cancel()


def test_new_gesture_sees_last_commit() -> None:
    """Every gesture starts from the persisted path."""
    editor = NodeEditor("M 0 0 L 10 0")
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    gesture.move_by(0, 5)
    gesture.end()

    stale = Handle(HandleKind.ANCHOR, 1, 1, Point(10, 0), Point(10, 0))
    with pytest.raises(GestureError, match="does not belong"):
        editor.begin_drag(stale)

    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    assert gesture.position == Point(10, 5)


def test_gesture_misuse() -> None:
    """Finished gestures and concurrent gestures are rejected."""
    editor = NodeEditor("M 0 0 L 10 0")
    anchor = find(editor, HandleKind.ANCHOR, 1)
    gesture = editor.begin_drag(anchor)
    with pytest.raises(GestureError, match="in progress"):
        editor.begin_drag(anchor)
    gesture.end()

    with pytest.raises(GestureError, match="already ended"):
        gesture.move_by(1, 1)
    with pytest.raises(GestureError, match="already ended"):
        gesture.end()
    with pytest.raises(GestureError, match="already ended"):
        gesture.cancel()

    foreign = Handle(HandleKind.CP2, 1, 1, Point(0, 0), Point(10, 0))
    with pytest.raises(GestureError, match="does not belong"):
        editor.begin_drag(foreign)


def test_overflowing_move_is_rejected() -> None:
    """A move that overflows a coordinate leaves the working copy untouched."""
    rec = Recorder()
    editor = rec.editor("M 0 0 C 0 1e308 1e308 1e308 1e308 0")
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    with pytest.raises(InvalidPathError, match="Non-finite"):
        gesture.move_by(1e308, 0)
    assert rec.live == []
    assert gesture.position == Point(1e308, 0)
    assert gesture.model[1] == CubicTo(Point(0, 1e308), Point(1e308, 1e308), 1e308, 0)

    # The gesture stays usable
    gesture.move_by(-1e308, 0)
    assert gesture.position == Point(0, 0)
    gesture.cancel()
    assert rec.commits == []


def test_commit_decimals() -> None:
    """Committed strings honour the configured precision."""
    editor = NodeEditor("M 0 0 L 10 0", config=EditorConfig(decimals=2))
    gesture = editor.begin_drag(find(editor, HandleKind.ANCHOR, 1))
    gesture.move_by(1 / 3, 0)
    assert gesture.end() == "M 0 0 L 10.33 0"


def test_scene_placement() -> None:
    """Handles are placed in the scene through the shape's transform."""
    editor = NodeEditor.for_shape("M 0 0 L 10 0", 100, 50, rotation=90, scale_x=2)
    anchor = find(editor, HandleKind.ANCHOR, 1)
    p = editor.scene_position(anchor)
    assert (p.x, p.y) == pytest.approx((100, 70))

    gesture = editor.begin_drag(anchor)
    gesture.move_to_scene(Point(100, 60))
    local = gesture.position
    assert (local.x, local.y) == pytest.approx((5, 0))


def test_empty_path_has_no_handles() -> None:
    """Unparsable paths are empty and cannot be edited."""
    editor = NodeEditor("not a path")
    assert editor.handles() == []
    with pytest.raises(GestureError):
        editor.begin_drag(Handle(HandleKind.ANCHOR, 0, 0, Point(0, 0), Point(0, 0)))
