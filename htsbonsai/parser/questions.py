"""Parser for the ``QS name { patterns }`` question lines of a tree section."""

from __future__ import annotations

from typing import Optional

from htsbonsai.model.question import Question
from htsbonsai.parser import base
from htsbonsai.parser.base import ModelParseError

QuestionPair = tuple[str, Question]


def _mismatch(kind: str, remaining: str) -> ModelParseError:
    return ModelParseError(
        f"{kind} at: {remaining[:20]}", recoverable=True, remaining=remaining
    )


def _space0(text: str) -> str:
    return text.lstrip(" \t")


def _parse_question_ident(text: str) -> tuple[str, str]:
    end = next(
        (i for i, char in enumerate(text) if not char.isascii() or char in " \n"),
        len(text),
    )
    if end == 0:
        raise _mismatch("TakeWhile1", text)
    return text[end:], text[:end]


def _parse_pattern_list_section(text: str) -> tuple[str, Question]:
    try:
        if not text.startswith("{"):
            raise _mismatch("Char", text)
        rest, _ = base.sp(text[1:])
        rest, question = base.parse_question(rest)
        rest, _ = base.sp(rest)
        if not rest.startswith("}"):
            raise _mismatch("Char", rest)
        return rest[1:], question
    except ModelParseError as error:
        raise ModelParseError(
            str(error), recoverable=False, remaining=error.remaining
        ) from error


def parse_question(text: str) -> tuple[str, QuestionPair]:
    """Parse one ``QS name { patterns }`` entry into ``(name, question)``."""
    if not text.startswith("QS"):
        raise _mismatch("Tag", text)
    rest, _ = base.sp1(text[2:])
    rest, name = _parse_question_ident(rest)
    rest, _ = base.sp1(rest)
    rest, question = _parse_pattern_list_section(rest)
    return rest, (name, question)


def _after_separator(text: str) -> Optional[str]:
    rest = _space0(text)
    if not rest.startswith("\n"):
        return None
    rest, _ = base.sp(rest[1:])
    return rest


def parse_questions(text: str) -> tuple[str, list[QuestionPair]]:
    """Parse newline-separated question entries, stopping before the first non-entry."""
    try:
        rest, item = parse_question(text)
    except ModelParseError as error:
        if error.recoverable:
            return text, []
        raise
    items = [item]
    while True:
        candidate = _after_separator(rest)
        if candidate is None:
            break
        try:
            candidate, item = parse_question(candidate)
        except ModelParseError as error:
            if error.recoverable:
                break
            raise
        items.append(item)
        rest = candidate
    return rest, items