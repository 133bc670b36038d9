import pytest

from htsbonsai.model.mean_vari import MeanVari
from htsbonsai.model.parameters import Model, ModelParameter
from htsbonsai.model.question import Question
from htsbonsai.model.tree import Tree, TreeLeaf, TreeNode


def test_from_linear_splits_means_and_variances():
    param = ModelParameter.from_linear([1.0, 2.0, 3.0, 4.0])
    assert param.parameters == [MeanVari(1.0, 3.0), MeanVari(2.0, 4.0)]
    assert param.msd is None


def test_from_linear_takes_trailing_msd():
    param = ModelParameter.from_linear([1.0, 2.0, 3.0, 4.0, 0.5])
    assert param.parameters == [MeanVari(1.0, 3.0), MeanVari(2.0, 4.0)]
    assert param.msd == 0.5


def test_zeros():
    param = ModelParameter.zeros(3, True)
    assert param.parameters == [MeanVari(0.0, 0.0)] * 3
    assert param.msd == 0.0
    assert ModelParameter.zeros(2, False).msd is None


def test_mul_scales_all_parts():
    param = ModelParameter([MeanVari(1.0, 3.0)], 0.5)
    scaled = param.mul(2.0)
    assert scaled == ModelParameter([MeanVari(2.0, 6.0)], 1.0)
    assert param == ModelParameter([MeanVari(1.0, 3.0)], 0.5)


def test_mul_then_mul_add_interpolates():
    a = ModelParameter([MeanVari(1.0, 2.0)], 0.2)
    b = ModelParameter([MeanVari(3.0, 4.0)], 0.6)
    mixed = a.mul(0.5)
    mixed.mul_add(0.5, b)
    assert mixed.parameters[0].mean == pytest.approx(2.0)
    assert mixed.parameters[0].vari == pytest.approx(3.0)
    assert mixed.msd == pytest.approx(0.4)


def test_mul_add_ignores_missing_msd():
    a = ModelParameter([MeanVari(1.0, 1.0)], None)
    a.mul_add(1.0, ModelParameter([MeanVari(1.0, 1.0)], 0.5))
    assert a.msd is None
    assert a.parameters == [MeanVari(2.0, 2.0)]


def make_model():
    question = Question.parse(["*-a+*"])
    tree = Tree(2, [TreeNode(question, 1, 2), TreeLeaf(1), TreeLeaf(2)])
    first = ModelParameter([MeanVari(1.0, 1.0)])
    second = ModelParameter([MeanVari(2.0, 2.0)])
    return Model([tree], [[first, second]]), first, second


def test_get_index_and_parameter():
    model, first, second = make_model()
    assert model.get_index(2, "x-a+y") == (2, 1)
    assert model.get_index(2, "x-b+y") == (2, 2)
    assert model.get_parameter(2, "x-a+y") is first
    assert model.get_parameter(2, "x-b+y") is second


def test_missing_state_falls_back_without_tree_index():
    model, _, _ = make_model()
    assert model.get_index(3, "x-a+y") == (None, 1)
    with pytest.raises(LookupError):
        model.get_parameter(3, "x-a+y")


def test_str_lists_trees():
    model, _, _ = make_model()
    assert str(model) == "\n    #2: 3 -> 2\n"