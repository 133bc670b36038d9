"""Parser for one window row of a voice file: a count followed by that many numbers."""

from __future__ import annotations

import re

from htsbonsai.model.window import Window
from htsbonsai.parser.base import ModelParseError

_DIGITS = re.compile(r"[0-9]+")
_SPACE1 = re.compile(r"[ \t]+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|(?i:infinity|inf|nan))"
)


def _mismatch(kind: str, remaining: str) -> ModelParseError:
    return ModelParseError(
        f"{kind} at: {remaining[:20]}", recoverable=True, remaining=remaining
    )


def parse_window_row(text: str) -> tuple[str, Window]:
    """Parse ``N c1 c2 ... cN`` into a window; returns ``(rest, window)``."""
    match = _DIGITS.match(text)
    if match is None:
        raise _mismatch("Digit", text)
    count = int(match.group())
    rest = text[match.end() :]

    coefficients: list[float] = []
    while len(coefficients) < count:
        space = _SPACE1.match(rest)
        if space is None:
            raise _mismatch("Space", rest)
        after_space = rest[space.end() :]
        number = _FLOAT.match(after_space)
        if number is None:
            raise _mismatch("Float", after_space)
        coefficients.append(float(number.group()))
        rest = after_space[number.end() :]
    return rest, Window(coefficients)