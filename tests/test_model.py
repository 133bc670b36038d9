import struct

import pytest

from htsbonsai.model.mean_vari import MeanVari
from htsbonsai.model.parameters import ModelParameter
from htsbonsai.model.question import Question
from htsbonsai.model.tree import Tree, TreeLeaf, TreeNode
from htsbonsai.parser.base import ModelParseError
from htsbonsai.parser.model import convert_tree, parse_model
from htsbonsai.parser.trees import NodeRef, PdfRef, RawNode, RawTree

TREE_TEXT = (
    'QS L-sil { "*-sil+*" }\n'
    "{*}[2]\n"
    "{\n"
    '0 L-sil "dur_s2_1" "dur_s2_2"\n'
    "}\n"
)


def _pack_pdfs(groups):
    counts = struct.pack(f"<{len(groups)}I", *(len(group) for group in groups))
    values = [v for group in groups for pdf in group for v in pdf]
    return counts + struct.pack(f"<{len(values)}f", *values)


def _blob(tree_text, pdf_bytes):
    tree = tree_text.encode()
    data = pdf_bytes + tree
    return data, (len(pdf_bytes), len(data) - 1), (0, len(pdf_bytes) - 1)


def _model(pdf_groups=None, pdf_len=2):
    groups = pdf_groups or [[[0.5, 0.25], [1.5, 0.75]]]
    data, tree_range, pdf_range = _blob(TREE_TEXT, _pack_pdfs(groups))
    return parse_model(data, tree_range, pdf_range, pdf_len)


def test_tree_structure():
    model = _model()
    question = Question.parse(["*-sil+*"])
    assert model.trees == [
        Tree(2, [TreeNode(question, yes=2, no=1), TreeLeaf(1), TreeLeaf(2)])
    ]


def test_matching_label_selects_yes_pdf():
    model = _model()
    assert model.get_index(2, "a-sil+b") == (2, 2)
    assert model.get_parameter(2, "a-sil+b") == ModelParameter([MeanVari(1.5, 0.75)])


def test_other_label_selects_no_pdf():
    model = _model()
    assert model.get_parameter(2, "a-pau+b") == ModelParameter([MeanVari(0.5, 0.25)])


def test_odd_pdf_len_has_msd():
    model = _model([[[0.5, 0.25, 0.75], [1.5, 0.75, 0.25]]], pdf_len=3)
    parameter = model.get_parameter(2, "x-sil+y")
    assert parameter.msd == 0.25
    assert parameter.parameters == [MeanVari(1.5, 0.75)]


def test_trailing_pdf_bytes_fail():
    data, tree_range, pdf_range = _blob(
        TREE_TEXT, _pack_pdfs([[[0.5, 0.25], [1.5, 0.75]]]) + b"\x00"
    )
    with pytest.raises(ModelParseError):
        parse_model(data, tree_range, pdf_range, 2)


def test_short_pdf_section_fails():
    data, tree_range, pdf_range = _blob(TREE_TEXT, struct.pack("<I", 2))
    with pytest.raises(ModelParseError):
        parse_model(data, tree_range, pdf_range, 2)


def test_trailing_tree_text_fails():
    data, tree_range, pdf_range = _blob(
        TREE_TEXT + "garbage", _pack_pdfs([[[0.5, 0.25], [1.5, 0.75]]])
    )
    with pytest.raises(ModelParseError):
        parse_model(data, tree_range, pdf_range, 2)


def test_convert_single_leaf():
    raw = RawTree(3, [RawNode(0, "", PdfRef(4), PdfRef(4))])
    assert convert_tree(raw, {}) == Tree(3, [TreeLeaf(4)])


def test_convert_single_node_reference_is_malformed():
    raw = RawTree(2, [RawNode(0, "", NodeRef(1), NodeRef(1))])
    with pytest.raises(ModelParseError):
        convert_tree(raw, {})


def test_convert_unknown_question():
    raw = RawTree(2, [RawNode(0, "missing", PdfRef(1), PdfRef(2))])
    with pytest.raises(ModelParseError):
        convert_tree(raw, {})


def test_convert_nested_nodes():
    question = Question.parse(["*"])
    raw = RawTree(
        2,
        [
            RawNode(0, "q", yes=NodeRef(-1), no=PdfRef(1)),
            RawNode(-1, "q", yes=PdfRef(2), no=PdfRef(3)),
        ],
    )
    tree = convert_tree(raw, {"q": question})
    assert tree.nodes[0] == TreeNode(question, yes=1, no=2)
    assert tree.nodes[2:] == [TreeLeaf(1), TreeLeaf(2), TreeLeaf(3)]
    assert tree.search_node("anything") == 2