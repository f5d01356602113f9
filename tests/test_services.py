# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import logging

import pytest

from vector_path_editor.bounds import Rect, path_bounds
from vector_path_editor.errors import ServiceUnavailableError
from vector_path_editor.path import PathModel
from vector_path_editor.path_normalize import normalize_path
from vector_path_editor.services import ServiceHandle, ServiceState


class Measurer:
    """Stand-in for an external renderer measuring path bounds."""

    def measure(self, model: PathModel) -> Rect:
        return Rect(0, 0, 1, 1)


def test_lifecycle() -> None:
    """A handle is built on init and released on dispose."""
    closed: list[Measurer] = []
    svc = ServiceHandle("measurer", Measurer, close=closed.append)
    assert svc.state is ServiceState.UNINITIALIZED
    with pytest.raises(ServiceUnavailableError, match="uninitialized"):
        svc.backend

    assert svc.init()
    assert svc.state is ServiceState.READY
    backend = svc.backend
    assert svc.init()
    assert svc.backend is backend

    svc.dispose()
    assert svc.state is ServiceState.DISPOSED
    assert closed == [backend]
    svc.dispose()
    assert closed == [backend]

    with pytest.raises(ServiceUnavailableError, match="disposed"):
        svc.init()


def test_unavailable(caplog: pytest.LogCaptureFixture) -> None:
    """A failing factory makes the handle fall back to local computation."""

    def broken() -> Measurer:
        raise OSError("no renderer")

    model = normalize_path("M 0 0 L 10 5")
    svc = ServiceHandle("measurer", broken)
    with caplog.at_level(logging.WARNING, logger="vector_path_editor"):
        assert not svc.init()
    assert svc.state is ServiceState.UNAVAILABLE
    assert "no renderer" in caplog.text

    bounds = svc.run(lambda m: m.measure(model), lambda: path_bounds(model))
    assert bounds == Rect(0, 0, 10, 5)
    with pytest.raises(ServiceUnavailableError, match="unavailable"):
        svc.backend


def test_run_prefers_backend() -> None:
    """A ready backend is used; failures of the backend fall back."""
    model = normalize_path("M 0 0 L 10 5")
    with ServiceHandle("measurer", Measurer) as svc:
        assert svc.run(lambda m: m.measure(model), lambda: None) == Rect(0, 0, 1, 1)

        def fail(m: Measurer) -> Rect:
            raise RuntimeError("crashed")

        assert svc.run(fail, lambda: path_bounds(model)) == Rect(0, 0, 10, 5)
    assert svc.state is ServiceState.DISPOSED
