"""Context questions matched against full-context labels."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field


class QuestionParseError(ValueError):
    """Raised when a question's patterns cannot be used."""


def _translate(pattern: str) -> str:
    return "".join(
        ".*" if char == "*" else "." if char == "?" else re.escape(char)
        for char in pattern
    )


@dataclass(frozen=True)
class Question:
    """A set of wildcard patterns; a label matches if any pattern matches it whole.

    ``*`` stands for any run of characters and ``?`` for any single character.
    """

    patterns: tuple[str, ...]
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        patterns = tuple(self.patterns)
        if not patterns:
            raise QuestionParseError("a question needs at least one pattern")
        for pattern in patterns:
            if not isinstance(pattern, str):
                raise QuestionParseError(f"pattern must be a string, got {pattern!r}")
        object.__setattr__(self, "patterns", patterns)
        regex = re.compile(
            "|".join(f"(?:{_translate(p)})" for p in patterns), re.DOTALL
        )
        object.__setattr__(self, "_regex", regex)

    @classmethod
    def parse(cls, patterns: Iterable[str]) -> Question:
        """Build a question from its patterns."""
        return cls(tuple(patterns))

    def test(self, label: object) -> bool:
        """Whether the label (via ``str``) matches any of the patterns."""
        return self._regex.fullmatch(str(label)) is not None