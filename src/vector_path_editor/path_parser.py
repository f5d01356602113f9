# This file is part of vector-path-editor.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import re
from typing import Final

from .errors import PathParseError

#: Number of parameters per command letter.
ARITY: Final[dict[str, int]] = {
    "M": 2,
    "L": 2,
    "T": 2,
    "H": 1,
    "V": 1,
    "C": 6,
    "S": 4,
    "Q": 4,
    "A": 7,
    "Z": 0,
}

_number: Final = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_flag: Final = re.compile(r"[01]")
_whitespace: Final = re.compile(r"[ \t\r\n\f]*")
_separator: Final = re.compile(r"[ \t\r\n\f]*,?[ \t\r\n\f]*")
_value_start: Final = frozenset("+-.0123456789")


class PathParser:
    """
    Tokenizer for SVG path data.

    The parser only splits a path into commands and their parameter strings;
    it neither converts numbers nor resolves relative coordinates.
    """

    def __init__(self, path: str) -> None:
        self._path: str = path
        self._pos: int = 0

    @staticmethod
    def parse(path: str) -> list[list[str]]:
        """
        Split ``path`` into items ``[command, *parameters]``.

        Implicitly repeated parameter groups are expanded into separate items,
        where a repeated ``M``/``m`` becomes ``L``/``l``. Arc flags may be
        written without separators.

        :return: The raw items; an empty list for a blank path.
        :raises PathParseError: If the path does not start with a move or is
            otherwise malformed.
        """
        return PathParser(path)._parse()

    def _error(self) -> PathParseError:
        return PathParseError(
            f"malformed path (first error at {self._pos}): {self._path!r}"
        )

    def _skip(self, pattern: re.Pattern[str]) -> None:
        m = pattern.match(self._path, self._pos)
        assert m is not None
        self._pos = m.end()

    def _at_end(self) -> bool:
        return self._pos >= len(self._path)

    def _parse(self) -> list[list[str]]:
        items: list[list[str]] = []

        self._skip(_whitespace)
        if self._at_end():
            return items
        if self._path[self._pos] not in "Mm":
            raise self._error()

        while True:
            self._skip(_whitespace)
            if self._at_end():
                return items
            cmd = self._path[self._pos]
            if cmd.upper() not in ARITY:
                raise self._error()
            self._pos += 1
            items.extend(self._parse_groups(cmd))

    def _parse_groups(self, cmd: str) -> list[list[str]]:
        arity = ARITY[cmd.upper()]
        if arity == 0:
            return [[cmd]]

        groups: list[list[str]] = []
        while True:
            group = [cmd]
            for i in range(arity):
                self._skip(_separator)
                is_flag = cmd in "Aa" and i in (3, 4)
                group.append(self._read_value(_flag if is_flag else _number))
            groups.append(group)

            self._skip(_separator)
            if self._at_end() or self._path[self._pos] not in _value_start:
                return groups

            # Subsequent pairs after a move are implicit line-tos
            if cmd == "M":
                cmd = "L"
            elif cmd == "m":
                cmd = "l"

    def _read_value(self, pattern: re.Pattern[str]) -> str:
        m = pattern.match(self._path, self._pos)
        if m is None:
            raise self._error()
        self._pos = m.end()
        return m.group()
