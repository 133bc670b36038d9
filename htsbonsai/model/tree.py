"""Decision trees that map a label to a PDF index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from htsbonsai.model.question import Question


@dataclass(frozen=True)
class TreeNode:
    """Inner node: go to ``yes`` if the question holds, otherwise to ``no``."""

    question: Question
    yes: int
    no: int


@dataclass(frozen=True)
class TreeLeaf:
    """Leaf holding a PDF index."""

    pdf_index: int


@dataclass
class Tree:
    """Decision tree for one state."""

    state: int
    nodes: list[Union[TreeNode, TreeLeaf]] = field(default_factory=list)

    def search_node(self, label: object) -> Optional[int]:
        """Walk the tree from the root and return the PDF index reached, if any."""
        index = 0
        while 0 <= index < len(self.nodes):
            node = self.nodes[index]
            if isinstance(node, TreeLeaf):
                return node.pdf_index
            index = node.yes if node.question.test(label) else node.no
        return None