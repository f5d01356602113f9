# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Self, assert_never

from .config import EditorConfig
from .errors import GestureError
from .log import get_logger
from .path import ClosePath, CubicTo, LineTo, MoveTo, PathModel, Point
from .path_normalize import normalize_path
from .transform import IDENTITY, AffineMatrix, apply_transform, compose, invert

logger = get_logger(__name__)

type LiveUpdateCallback = Callable[[PathModel], None]
type CommitCallback = Callable[[str], None]


class HandleKind(Enum):
    #: On-curve point of a command.
    ANCHOR = auto()
    #: ``cp1`` of the following cubic, shown at the anchor it leaves.
    CP1 = auto()
    #: ``cp2`` of a cubic, shown at the anchor it enters.
    CP2 = auto()


@dataclass(frozen=True)
class Handle:
    """
    Draggable point of a path in its local coordinates.

    :ivar index: Index of the anchor the handle is attached to.
    :ivar owner: Index of the command that stores the point. This differs from
        ``index`` only for :attr:`HandleKind.CP1` handles.
    :ivar anchor: Position of the attached anchor, for drawing the handle line.
    """

    kind: HandleKind
    index: int
    owner: int
    position: Point
    anchor: Point


def path_handles(model: PathModel) -> list[Handle]:
    """All handles of ``model``, grouped per anchor."""
    handles: list[Handle] = []
    for a in model.anchors:
        i = a.index
        handles.append(Handle(HandleKind.ANCHOR, i, i, a.position, a.position))
        if a.incoming is not None:
            handles.append(Handle(HandleKind.CP2, i, i, a.incoming, a.position))
        if a.outgoing is not None:
            handles.append(Handle(HandleKind.CP1, i, i + 1, a.outgoing, a.position))
    return handles


def _handle_position(model: PathModel, handle: Handle) -> Point | None:
    """Current position of ``handle`` in ``model``, or ``None`` if it has none."""
    if not 0 <= handle.owner < len(model):
        return None
    cmd = model[handle.owner]
    match handle.kind:
        case HandleKind.ANCHOR:
            return None if isinstance(cmd, ClosePath) else cmd.target
        case HandleKind.CP1:
            return cmd.cp1 if isinstance(cmd, CubicTo) else None
        case HandleKind.CP2:
            return cmd.cp2 if isinstance(cmd, CubicTo) else None
        case _:
            assert_never(handle.kind)


class DragGesture:
    """
    One drag of one handle, from pointer-down to pointer-up.

    The gesture owns a private working copy of the path. Moving the handle
    changes only that copy and reports it through the live-update callback;
    the persisted path string changes once, in :meth:`end`.
    """

    def __init__(self, editor: NodeEditor, handle: Handle, model: PathModel) -> None:
        self.editor = editor
        self.handle = handle
        self._model = model
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def model(self) -> PathModel:
        """Snapshot of the working copy."""
        return self._model.clone()

    @property
    def position(self) -> Point:
        """Current local position of the dragged point."""
        p = _handle_position(self._model, self.handle)
        assert p is not None
        return p

    def _check_active(self) -> None:
        if not self._active:
            raise GestureError("Gesture has already ended")

    def move_by(self, dx: float, dy: float) -> PathModel:
        """
        Move the handle by ``(dx, dy)`` in local coordinates.

        Dragging an anchor moves the handles glued to it by the same offset:
        the ``cp2`` of its own cubic and the ``cp1`` of a following cubic.
        Dragging a control point moves nothing else.

        :return: Snapshot of the updated working copy.
        :raises InvalidPathError: If the move would leave a non-finite
            coordinate; the working copy is left unchanged.
        """
        self._check_active()
        if not (math.isfinite(dx) and math.isfinite(dy)):
            raise ValueError(f"Non-finite offset: ({dx}, {dy})")

        commands = list(self._model.commands)
        i = self.handle.owner
        d = Point(dx, dy)
        cmd = commands[i]

        match self.handle.kind, cmd:
            case HandleKind.ANCHOR, MoveTo() | LineTo():
                commands[i] = cmd.translated(dx, dy)
            case HandleKind.ANCHOR, CubicTo():
                commands[i] = replace(cmd, cp2=cmd.cp2 + d, x=cmd.x + dx, y=cmd.y + dy)
            case HandleKind.CP1, CubicTo():
                commands[i] = replace(cmd, cp1=cmd.cp1 + d)
            case HandleKind.CP2, CubicTo():
                commands[i] = replace(cmd, cp2=cmd.cp2 + d)
            case _:
                raise AssertionError(f"{self.handle.kind} cannot be stored on {cmd}")

        if self.handle.kind is HandleKind.ANCHOR and i + 1 < len(commands):
            nxt = commands[i + 1]
            if isinstance(nxt, CubicTo):
                commands[i + 1] = replace(nxt, cp1=nxt.cp1 + d)

        self._model = PathModel(commands)
        snapshot = self.model
        if self.editor.on_live_update is not None:
            self.editor.on_live_update(snapshot)
        return snapshot

    def move_to(self, point: Point) -> PathModel:
        """Move the handle to ``point`` in local coordinates."""
        self._check_active()
        d = point - self.position
        return self.move_by(d.x, d.y)

    def move_to_scene(self, point: Point) -> PathModel:
        """Move the handle to ``point`` in scene coordinates."""
        return self.move_to(apply_transform(invert(self.editor.placement), point))

    def end(self) -> str:
        """
        Finish the gesture and commit the working copy.

        :return: The new persisted path string.
        """
        self._check_active()
        self._active = False
        return self.editor._commit(self._model)

    def cancel(self) -> None:
        """Finish the gesture and discard the working copy."""
        self._check_active()
        self._active = False
        self.editor._release(self)


class NodeEditor:
    """
    Anchor and control-point editing of one persisted path string.

    The editor keeps only the persisted string between gestures. Every
    :meth:`begin_drag` normalizes it afresh, so edits made elsewhere between
    two gestures are picked up.

    :param placement: Matrix placing the path's local coordinates in the scene.
    :param on_live_update: Called with a snapshot of the working copy after
        every drag step.
    :param on_commit: Called with the new path string when a gesture ends.
    """

    def __init__(
        self,
        path_data: str,
        *,
        placement: AffineMatrix = IDENTITY,
        on_live_update: LiveUpdateCallback | None = None,
        on_commit: CommitCallback | None = None,
        config: EditorConfig | None = None,
    ) -> None:
        self._path_data = path_data
        self.placement = placement
        self.on_live_update = on_live_update
        self.on_commit = on_commit
        self.config = config if config is not None else EditorConfig()
        self._gesture: DragGesture | None = None

    @classmethod
    def for_shape(
        cls,
        path_data: str,
        x: float,
        y: float,
        rotation: float = 0,
        scale_x: float = 1,
        scale_y: float = 1,
        *,
        on_live_update: LiveUpdateCallback | None = None,
        on_commit: CommitCallback | None = None,
        config: EditorConfig | None = None,
    ) -> Self:
        """Editor for a shape placed at ``(x, y)``, rotated by ``rotation`` degrees."""
        placement = compose((x, y), math.radians(rotation), 0, 0, scale_x, scale_y)
        return cls(
            path_data,
            placement=placement,
            on_live_update=on_live_update,
            on_commit=on_commit,
            config=config,
        )

    @property
    def path_data(self) -> str:
        """The persisted path string."""
        return self._path_data

    @property
    def model(self) -> PathModel:
        """Freshly normalized model of the persisted path."""
        return normalize_path(self._path_data)

    def handles(self) -> list[Handle]:
        return path_handles(self.model)

    def scene_position(self, handle: Handle) -> Point:
        return apply_transform(self.placement, handle.position)

    def begin_drag(self, handle: Handle) -> DragGesture:
        """
        Start dragging ``handle``.

        :raises GestureError: If another gesture is in progress or ``handle``
            does not belong to the persisted path.
        """
        if self._gesture is not None:
            raise GestureError("Another gesture is in progress")
        model = self.model
        if _handle_position(model, handle) != handle.position:
            raise GestureError(f"Handle does not belong to the current path: {handle}")
        self._gesture = DragGesture(self, handle, model)
        return self._gesture

    def _release(self, gesture: DragGesture) -> None:
        if self._gesture is gesture:
            self._gesture = None

    def _commit(self, model: PathModel) -> str:
        gesture, self._gesture = self._gesture, None
        assert gesture is not None
        self._path_data = model.as_string(self.config.decimals)
        logger.debug("Committed %s drag: %s", gesture.handle.kind.name, self._path_data)
        if self.on_commit is not None:
            self.on_commit(self._path_data)
        return self._path_data
