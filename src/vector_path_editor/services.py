# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Callable
from enum import Enum, auto
from types import TracebackType
from typing import Self

from .errors import ServiceUnavailableError
from .log import get_logger

logger = get_logger(__name__)


class ServiceState(Enum):
    UNINITIALIZED = auto()
    READY = auto()
    UNAVAILABLE = auto()
    DISPOSED = auto()


class ServiceHandle[B]:
    """
    Explicitly managed handle to an optional external backend.

    Examples are a boolean-operations engine or a renderer that measures
    shape bounds. The backend is built by ``factory`` in :meth:`init` and
    released by ``close`` in :meth:`dispose`. If it cannot be built, the
    handle becomes unavailable and :meth:`run` computes locally instead.

    >>> with ServiceHandle("double", lambda: (lambda v: 2 * v)) as svc:
    ...     svc.run(lambda b: b(21), lambda: 0)
    42
    """

    def __init__(
        self,
        name: str,
        factory: Callable[[], B],
        *,
        close: Callable[[B], None] | None = None,
    ) -> None:
        self.name = name
        self._factory = factory
        self._close = close
        self._backend: B | None = None
        self.state = ServiceState.UNINITIALIZED

    @property
    def available(self) -> bool:
        return self.state is ServiceState.READY

    def init(self) -> bool:
        """
        Build the backend if that has not been attempted yet.

        :return: Whether the backend is ready.
        :raises ServiceUnavailableError: If the handle was disposed.
        """
        if self.state is ServiceState.DISPOSED:
            raise ServiceUnavailableError(f"Service {self.name!r} was disposed")
        if self.state is ServiceState.UNINITIALIZED:
            try:
                self._backend = self._factory()
            except Exception as e:
                logger.warning(
                    "Service %r unavailable, using local computation: %s", self.name, e
                )
                self.state = ServiceState.UNAVAILABLE
            else:
                self.state = ServiceState.READY
        return self.available

    def dispose(self) -> None:
        """Release the backend. Disposing twice has no effect."""
        backend, self._backend = self._backend, None
        was_ready = self.state is ServiceState.READY
        self.state = ServiceState.DISPOSED
        if was_ready and self._close is not None:
            assert backend is not None
            self._close(backend)

    @property
    def backend(self) -> B:
        """
        The ready backend.

        :raises ServiceUnavailableError: If the handle is not ready.
        """
        if self.state is not ServiceState.READY:
            raise ServiceUnavailableError(
                f"Service {self.name!r} is {self.state.name.lower()}"
            )
        assert self._backend is not None
        return self._backend

    def run[R](self, op: Callable[[B], R], fallback: Callable[[], R]) -> R:
        """
        Run ``op`` on the backend, or ``fallback`` if the backend is not ready
        or ``op`` fails.
        """
        if not self.available:
            return fallback()
        try:
            return op(self.backend)
        except Exception as e:
            logger.warning("Service %r failed, falling back: %s", self.name, e)
            return fallback()

    def __enter__(self) -> Self:
        self.init()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()
