# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Final

LOG_FORMAT: Final = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT: Final = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(
    level: int = logging.INFO,
    log_dir: str | os.PathLike[str] | None = None,
) -> None:
    """
    Configure console logging (and optionally a log file) for the package.

    Only the first call has an effect. If the log file cannot be created,
    logging continues on the console only.

    :param level: Level for the package logger and its handlers.
    :param log_dir: Directory for ``vector_path_editor.log``; ``None`` disables
        file logging.
    """
    global _configured
    if _configured:
        return

    logger = logging.getLogger("vector_path_editor")
    logger.setLevel(level)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    logger.addHandler(console)

    if log_dir is not None:
        try:
            d = Path(log_dir)
            d.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(d / "vector_path_editor.log", encoding="utf-8")
        except OSError as e:
            logger.warning("Could not open log file in %s: %s", log_dir, e)
        else:
            fh.setLevel(level)
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
