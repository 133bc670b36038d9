"""Low-level text parsers shared by the voice file readers.

Every parser takes the remaining text and returns ``(rest, result)``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from htsbonsai.model.question import Question, QuestionParseError

SEPARATOR_CHARS = " \n"
PATTERN_WILDCARD = "*?"
JPCOMMON_SYMBOLS = "!#%&+-/:=@^_|"


class ModelParseError(ValueError):
    """Raised when a voice file, or a part of it, cannot be parsed.

    ``recoverable`` is true when the text merely did not match at this point,
    so that an alternative may still be tried; ``remaining`` is the text that
    was left when parsing failed.
    """

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        remaining: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.recoverable = recoverable
        self.remaining = remaining


def _mismatch(kind: str, remaining: str) -> ModelParseError:
    return ModelParseError(
        f"{kind} at: {remaining[:20]}", recoverable=True, remaining=remaining
    )


def _fatal(error: ModelParseError) -> ModelParseError:
    return ModelParseError(str(error), recoverable=False, remaining=error.remaining)


def _take_while(text: str, accept: Callable[[str], bool]) -> tuple[str, str]:
    end = next((i for i, char in enumerate(text) if not accept(char)), len(text))
    return text[end:], text[:end]


def _take_while1(text: str, accept: Callable[[str], bool]) -> tuple[str, str]:
    rest, matched = _take_while(text, accept)
    if not matched:
        raise _mismatch("TakeWhile1", text)
    return rest, matched


def _is_separator(char: str) -> bool:
    return char in SEPARATOR_CHARS


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _is_pattern_char(char: str) -> bool:
    return char.isascii() and (
        char.isalnum() or char in PATTERN_WILDCARD or char in JPCOMMON_SYMBOLS
    )


def _is_line_char(char: str) -> bool:
    return char.isascii() and char != "\n"


def sp(text: str) -> tuple[str, str]:
    """Consume any number of spaces and newlines."""
    return _take_while(text, _is_separator)


def sp1(text: str) -> tuple[str, str]:
    """Consume at least one space or newline."""
    return _take_while1(text, _is_separator)


def parse_identifier(text: str) -> tuple[str, str]:
    """Consume an ASCII identifier (letters, digits and underscores)."""
    return _take_while1(text, _is_identifier_char)


def parse_pattern(text: str) -> tuple[str, str]:
    """Consume a label pattern: ASCII alphanumerics, wildcards and label symbols."""
    return _take_while1(text, _is_pattern_char)


def parse_ascii(text: str) -> tuple[str, str]:
    """Consume ASCII text up to the end of the line."""
    return _take_while(text, _is_line_char)


def _parse_element(text: str) -> tuple[str, str]:
    if text.startswith('"'):
        rest, pattern = parse_pattern(text[1:])
        if not rest.startswith('"'):
            raise _mismatch("Char", rest)
        return rest[1:], pattern
    return parse_pattern(text)


def parse_question(text: str) -> tuple[str, Question]:
    """Consume a comma-separated list of (optionally quoted) patterns as a question."""
    patterns: list[str] = []
    rest = text
    while True:
        try:
            rest, pattern = _parse_element(rest)
        except ModelParseError as error:
            raise _fatal(error) from error
        patterns.append(pattern)
        if not rest.startswith(","):
            break
        rest, _ = sp(rest[1:])
    try:
        question = Question.parse(patterns)
    except QuestionParseError as error:
        raise ModelParseError(
            f"Failed to parse question: {error}", recoverable=True, remaining=text
        ) from error
    return rest, question