from htsbonsai.model.question import Question
from htsbonsai.model.tree import Tree, TreeLeaf, TreeNode


def _tree():
    silence = Question.parse(["*-sil+*"])
    pause = Question.parse(["*-pau+*"])
    return Tree(
        state=2,
        nodes=[
            TreeNode(silence, yes=2, no=1),
            TreeNode(pause, yes=3, no=4),
            TreeLeaf(5),
            TreeLeaf(7),
            TreeLeaf(11),
        ],
    )


def test_search_follows_yes_branch():
    assert _tree().search_node("a-sil+b") == 5


def test_search_follows_no_then_yes():
    assert _tree().search_node("a-pau+b") == 7


def test_search_follows_no_twice():
    assert _tree().search_node("a-k+b") == 11


def test_single_leaf_tree():
    assert Tree(state=3, nodes=[TreeLeaf(4)]).search_node("anything") == 4


def test_empty_tree_finds_nothing():
    assert Tree(state=2).search_node("a-sil+b") is None


def test_dangling_branch_finds_nothing():
    tree = Tree(state=2, nodes=[TreeNode(Question.parse(["*"]), yes=9, no=9)])
    assert tree.search_node("x") is None


def test_tree_equality():
    assert _tree() == _tree()
    assert Tree(state=2, nodes=[TreeLeaf(1)]) != Tree(state=3, nodes=[TreeLeaf(1)])