from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, TextIO

_GROUP_CODE_RE = re.compile(r"\s*[+-]?[0-9]+\s*")
_REAL_RE = re.compile(
    r"\s*[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|nan|inf|infinity)\s*",
    re.IGNORECASE,
)


class MalformedCodeError(ValueError):
    """A group code line that is not an integer: the stream is corrupt."""

    def __init__(self, text: str, line_number: int) -> None:
        super().__init__(f"invalid group code {text!r} at line {line_number}")
        self.text = text
        self.line_number = line_number


@dataclass(frozen=True)
class CodePair:
    code: int
    value: str


class CodePairReader:
    """Pulls group code / value pairs from a line source.

    The source may be an open text stream or any iterable of lines. End of
    stream is reported by ``next_pair()`` returning ``None``.
    """

    def __init__(self, source: TextIO | Iterable[str]) -> None:
        self._lines = iter(source)
        self._line_number = 0
        self._exhausted = False

    @property
    def line_number(self) -> int:
        return self._line_number

    def _next_line(self) -> str | None:
        if self._exhausted:
            return None
        try:
            line = next(self._lines)
        except StopIteration:
            self._exhausted = True
            return None
        self._line_number += 1
        return line.rstrip("\r\n")

    def next_pair(self) -> CodePair | None:
        code_line = self._next_line()
        if code_line is None:
            return None
        if not _GROUP_CODE_RE.fullmatch(code_line):
            raise MalformedCodeError(code_line, self._line_number)
        value = self._next_line()
        if value is None:
            return None
        return CodePair(int(code_line), value)

    def __iter__(self) -> Iterator[CodePair]:
        while True:
            pair = self.next_pair()
            if pair is None:
                return
            yield pair


def parse_float(value: str) -> float | None:
    # float() always uses "." regardless of the active locale, but also takes "1_0"
    if not _REAL_RE.fullmatch(value):
        return None
    return float(value.strip())


def parse_int(value: str) -> int | None:
    text = value.strip()
    if not _GROUP_CODE_RE.fullmatch(text):
        return None
    return int(text)
