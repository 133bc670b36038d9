"""Build a model from its tree section and its binary PDF section."""

from __future__ import annotations

import bisect
import struct
from collections.abc import Mapping

from htsbonsai.model.parameters import Model, ModelParameter
from htsbonsai.model.question import Question
from htsbonsai.model.tree import Tree, TreeLeaf, TreeNode
from htsbonsai.parser import base
from htsbonsai.parser.base import ModelParseError
from htsbonsai.parser.questions import parse_questions
from htsbonsai.parser.trees import NodeRef, PdfRef, RawTree, TreeIndex, parse_trees

Range = tuple[int, int]


def _slice(data: bytes, byte_range: Range) -> bytes:
    start, end = byte_range
    if start < 0 or end + 1 < start or end + 1 > len(data):
        raise ModelParseError(f"range {start}-{end} is outside the data")
    return bytes(data[start : end + 1])


def _trailing(remaining: bytes) -> ModelParseError:
    shown = remaining[:20].decode("utf-8", "replace")
    return ModelParseError(f"Eof at: {shown}")


def _parse_pdfs(
    block: bytes, ntree: int, pdf_len: int
) -> list[list[ModelParameter]]:
    header = 4 * ntree
    if len(block) < header:
        raise ModelParseError(f"Eof at: not enough data for {ntree} PDF counts")
    counts = struct.unpack_from(f"<{ntree}I", block)
    offset = header
    pdf = []
    for count in counts:
        size = count * pdf_len
        if len(block) - offset < 4 * size:
            raise ModelParseError(f"Eof at: not enough data for {count} PDFs")
        values = struct.unpack_from(f"<{size}f", block, offset)
        offset += 4 * size
        pdf.append(
            [
                ModelParameter.from_linear(values[k * pdf_len : (k + 1) * pdf_len])
                for k in range(count)
            ]
        )
    if offset != len(block):
        raise _trailing(block[offset:])
    return pdf


def parse_model(
    data: bytes, tree_range: Range, pdf_range: Range, pdf_len: int
) -> Model:
    """Parse the trees in ``tree_range`` and the PDFs in ``pdf_range`` of ``data``.

    Ranges are inclusive byte offsets; every PDF has ``pdf_len`` float values.
    """
    text = _slice(data, tree_range).decode("latin-1")
    rest, questions = parse_questions(text)
    rest, raw_trees = parse_trees(rest)
    rest, _ = base.sp(rest)
    if rest:
        raise ModelParseError(f"Eof at: {rest[:20]}", remaining=rest)

    pdf = _parse_pdfs(_slice(data, pdf_range), len(raw_trees), pdf_len)
    lookup = dict(questions)
    return Model([convert_tree(tree, lookup) for tree in raw_trees], pdf)


def convert_tree(tree: RawTree, questions: Mapping[str, Question]) -> Tree:
    """Turn a parsed tree into one whose nodes refer to each other by list position.

    Leaves for every referenced PDF follow the inner nodes, in ascending order.
    """
    if len(tree.nodes) == 1 and tree.nodes[0].yes == tree.nodes[0].no:
        only = tree.nodes[0].yes
        if not isinstance(only, PdfRef):
            raise ModelParseError("Malformed model file: single node refers to a node")
        return Tree(tree.state, [TreeLeaf(only.id)])

    node_positions = {node.id: position for position, node in enumerate(tree.nodes)}
    pdfs = sorted(
        ref.id
        for node in tree.nodes
        for ref in (node.yes, node.no)
        if isinstance(ref, PdfRef)
    )
    node_count = len(tree.nodes)

    def resolve(ref: TreeIndex) -> int:
        if isinstance(ref, NodeRef):
            if ref.id not in node_positions:
                raise ModelParseError(f"Malformed model file: unknown node {ref.id}")
            return node_positions[ref.id]
        return bisect.bisect_left(pdfs, ref.id) + node_count

    nodes: list = []
    for node in tree.nodes:
        if node.question_name not in questions:
            raise ModelParseError(
                f"Malformed model file: unknown question {node.question_name!r}"
            )
        nodes.append(
            TreeNode(questions[node.question_name], resolve(node.yes), resolve(node.no))
        )
    nodes.extend(TreeLeaf(pdf_index) for pdf_index in pdfs)
    return Tree(tree.state, nodes)