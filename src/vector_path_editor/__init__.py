# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

import logging

from .arc import arc_to_cubic as arc_to_cubic
from .bounds import BoundingRect as BoundingRect
from .bounds import Rect as Rect
from .bounds import flatten_bounds as flatten_bounds
from .bounds import path_bounds as path_bounds
from .config import EditorConfig as EditorConfig
from .config import load_config as load_config
from .errors import GestureError as GestureError
from .errors import InvalidPathError as InvalidPathError
from .errors import PathGeometryError as PathGeometryError
from .errors import PathParseError as PathParseError
from .errors import ServiceUnavailableError as ServiceUnavailableError
from .node_editor import NodeEditor as NodeEditor
from .path import ClosePath as ClosePath
from .path import CubicTo as CubicTo
from .path import LineTo as LineTo
from .path import MoveTo as MoveTo
from .path import PathModel as PathModel
from .path import Point as Point
from .path_normalize import normalize_path as normalize_path
from .path_parser import PathParser as PathParser
from .path_serialize import serialize_path as serialize_path
from .quadtree import Quadtree as Quadtree
from .quadtree import build_index as build_index
from .quadtree import cull as cull
from .services import ServiceHandle as ServiceHandle
from .transform import AffineMatrix as AffineMatrix
from .transform import compose as compose
from .transform import decompose as decompose

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
