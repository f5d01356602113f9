# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations


class PathGeometryError(Exception):
    """Base class of all errors raised by this package."""


class PathParseError(PathGeometryError, ValueError):
    """A path string could not be tokenized."""


class InvalidPathError(PathGeometryError, ValueError):
    """A :class:`~vector_path_editor.path.PathModel` violates its invariants."""


class GestureError(PathGeometryError, RuntimeError):
    """A drag gesture was used after it ended or with a foreign handle."""


class ServiceUnavailableError(PathGeometryError, RuntimeError):
    """An external service was used while it is not ready."""
