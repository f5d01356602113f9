# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Self

import yaml

from .bounds import Rect


@dataclass(frozen=True)
class EditorConfig:
    """
    Tunables of the spatial index and the node editor.

    :ivar max_objects: Rectangles a quadtree node holds before it splits.
    :ivar max_levels: Deepest level at which a quadtree node may still split.
    :ivar world_bounds: Root bounds of the spatial index.
    :ivar viewport_padding: Margin added around the viewport when culling.
    :ivar decimals: Decimals of committed path strings; ``None`` keeps the
        shortest exact representation.
    """

    max_objects: int = 10
    max_levels: int = 5
    world_bounds: Rect = field(
        default_factory=lambda: Rect(-50000, -50000, 100000, 100000)
    )
    viewport_padding: float = 100
    decimals: int | None = None

    def __post_init__(self) -> None:
        if self.max_objects < 1:
            raise ValueError(f"max_objects must be positive, got {self.max_objects}")
        if self.max_levels < 0:
            raise ValueError(f"max_levels must not be negative, got {self.max_levels}")
        b = self.world_bounds
        if not all(math.isfinite(v) for v in (b.x, b.y, b.width, b.height)):
            raise ValueError(f"world_bounds must be finite, got {b}")
        if not (b.width > 0 and b.height > 0):
            raise ValueError(f"world_bounds must have a positive size, got {b}")
        if not math.isfinite(self.viewport_padding) or self.viewport_padding < 0:
            raise ValueError(f"Invalid viewport_padding: {self.viewport_padding}")
        if self.decimals is not None and self.decimals < 0:
            raise ValueError(f"decimals must not be negative, got {self.decimals}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        """
        Build a configuration from plain data as read from YAML.

        ``world_bounds`` is given either as ``[x, y, width, height]`` or as a
        mapping with these keys.

        :raises ValueError: For unknown keys or values of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            match key:
                case "max_objects" | "max_levels":
                    kwargs[key] = _int(key, value)
                case "decimals":
                    kwargs[key] = None if value is None else _int(key, value)
                case "viewport_padding":
                    kwargs[key] = _number(key, value)
                case "world_bounds":
                    kwargs[key] = _rect(value)
        return cls(**kwargs)


def _int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def _number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return float(value)


def _rect(value: Any) -> Rect:
    names = ("x", "y", "width", "height")
    if isinstance(value, Mapping):
        if set(value) != set(names):
            raise ValueError(f"world_bounds needs exactly the keys {names}")
        value = [value[n] for n in names]
    if not isinstance(value, list | tuple) or len(value) != 4:
        raise ValueError(f"world_bounds must be [x, y, width, height], got {value!r}")
    return Rect(*(_number(f"world_bounds.{n}", v) for n, v in zip(names, value)))


def load_config(path: str | os.PathLike[str]) -> EditorConfig:
    """
    Read an :class:`EditorConfig` from a YAML file.

    An empty file yields the defaults.

    :raises FileNotFoundError: If ``path`` does not exist.
    :raises ValueError: If the file does not hold a valid configuration.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is None:
        return EditorConfig()
    if not isinstance(data, Mapping):
        raise ValueError(f"Config must be a mapping, got {type(data).__name__}")
    return EditorConfig.from_mapping(data)
