"""Parser for the decision-tree part of a tree section."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from htsbonsai.parser import base
from htsbonsai.parser.base import ModelParseError

_SIGNED_DIGITS = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class NodeRef:
    """Reference to another node of the same tree, by its id."""

    id: int


@dataclass(frozen=True)
class PdfRef:
    """Reference to a PDF, by its (1-based) index."""

    id: int


TreeIndex = Union[NodeRef, PdfRef]


@dataclass
class RawNode:
    """A tree node as written in the file."""

    id: int
    question_name: str
    yes: TreeIndex
    no: TreeIndex


@dataclass
class RawTree:
    """A tree as written in the file."""

    state: int
    nodes: list[RawNode] = field(default_factory=list)


def _mismatch(kind: str, remaining: str) -> ModelParseError:
    return ModelParseError(
        f"{kind} at: {remaining[:20]}", recoverable=True, remaining=remaining
    )


def _fatal(error: ModelParseError) -> ModelParseError:
    return ModelParseError(str(error), recoverable=False, remaining=error.remaining)


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


def parse_signed_digits(text: str) -> tuple[str, int]:
    """Parse an optionally negative decimal integer."""
    match = _SIGNED_DIGITS.match(text)
    if match is None:
        raise _mismatch("Digit", text)
    return text[match.end() :], int(match.group())


def _parse_unquoted_index(text: str) -> tuple[str, TreeIndex]:
    try:
        rest, value = parse_signed_digits(text)
        return rest, NodeRef(value)
    except ModelParseError as error:
        if not error.recoverable:
            raise
    rest, identifier = base.parse_identifier(text)
    digits = ""
    for char in identifier:
        digits = digits + char if char.isdigit() else ""
    if not digits:
        raise _mismatch("Digit", identifier)
    return rest, PdfRef(int(digits))


def parse_tree_index(text: str) -> tuple[str, TreeIndex]:
    """Parse a node id (integer) or a PDF name such as ``"dur_s2_230"``."""
    try:
        return _parse_unquoted_index(text)
    except ModelParseError as error:
        if not error.recoverable or not text.startswith('"'):
            raise
    rest, index = _parse_unquoted_index(text[1:])
    if not rest.startswith('"'):
        raise _mismatch("Char", rest)
    return rest[1:], index


def parse_node(text: str) -> tuple[str, RawNode]:
    """Parse ``id question no yes``."""
    rest, _ = base.sp(text)
    rest, node_id = parse_signed_digits(rest)
    rest, _ = base.sp1(rest)
    rest, name = _parse_question_ident(rest)
    rest, _ = base.sp1(rest)
    rest, no = parse_tree_index(rest)
    rest, _ = base.sp1(rest)
    rest, yes = parse_tree_index(rest)
    return rest, RawNode(node_id, name, yes, no)


def _parse_node_block(text: str) -> tuple[str, list[RawNode]]:
    if not text.startswith("{"):
        raise _mismatch("Char", text)
    rest, _ = base.sp(text[1:])
    nodes: list[RawNode] = []
    try:
        rest, node = parse_node(rest)
    except ModelParseError as error:
        if not error.recoverable:
            raise
    else:
        nodes.append(node)
        while True:
            candidate = _space0(rest)
            if not candidate.startswith("\n"):
                break
            candidate = _space0(candidate[1:])
            try:
                candidate, node = parse_node(candidate)
            except ModelParseError as error:
                if not error.recoverable:
                    raise
                break
            nodes.append(node)
            rest = candidate
    rest, _ = base.sp(rest)
    if not rest.startswith("}"):
        raise _mismatch("Char", rest)
    return rest[1:], nodes


def _parse_tree_body(text: str) -> tuple[str, list[RawNode]]:
    try:
        rest, index = parse_tree_index(text)
    except ModelParseError as error:
        if not error.recoverable:
            raise
        return _parse_node_block(text)
    return rest, [RawNode(0, "", index, index)]


def parse_tree(text: str) -> tuple[str, RawTree]:
    """Parse ``{*}[state]`` followed by a single PDF or a block of nodes."""
    try:
        rest, _ = base.sp(text)
        if not rest.startswith("{*}"):
            raise _mismatch("Tag", rest)
        rest, _ = base.sp(rest[3:])
        if not rest.startswith("["):
            raise _mismatch("Char", rest)
        rest, state = parse_signed_digits(rest[1:])
        if not rest.startswith("]"):
            raise _mismatch("Char", rest)
        rest, _ = base.sp(rest[1:])
        rest, nodes = _parse_tree_body(rest)
    except ModelParseError as error:
        if error.recoverable:
            raise _fatal(error) from error
        raise
    if state < 0:
        raise ModelParseError(f"negative tree state {state}", remaining=text)
    return rest, RawTree(state, nodes)


def parse_trees(text: str) -> tuple[str, list[RawTree]]:
    """Parse one or more trees separated by line breaks."""
    rest, tree = parse_tree(text)
    trees = [tree]
    while True:
        candidate = _space0(rest)
        if not candidate.startswith("\n"):
            break
        candidate, _ = base.sp(candidate[1:])
        if not candidate:
            break
        candidate, tree = parse_tree(candidate)
        trees.append(tree)
        rest = candidate
    return rest, trees