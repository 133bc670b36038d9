"""Model parameters and the decision-tree model that selects them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from htsbonsai.model.mean_vari import MeanVari
from htsbonsai.model.tree import Tree


@dataclass
class ModelParameter:
    """Mean/variance pairs of one PDF, with its MSD weight when the stream has one."""

    parameters: list[MeanVari] = field(default_factory=list)
    msd: Optional[float] = None

    @classmethod
    def zeros(cls, size: int, is_msd: bool) -> ModelParameter:
        """All-zero parameter of the given size."""
        return cls([MeanVari(0.0, 0.0)] * size, 0.0 if is_msd else None)

    @classmethod
    def from_linear(cls, lin: Sequence[float]) -> ModelParameter:
        """Build from means, then variances, then an optional trailing MSD value."""
        half = len(lin) // 2
        parameters = [MeanVari(m, v) for m, v in zip(lin[:half], lin[half : 2 * half])]
        msd = lin[2 * half] if len(lin) > 2 * half else None
        return cls(parameters, msd)

    def mul_add(self, weight: float, other: ModelParameter) -> None:
        """Add ``weight`` times ``other`` to this parameter in place."""
        updated = [
            MeanVari(lhs.mean + weight * rhs.mean, lhs.vari + weight * rhs.vari)
            for lhs, rhs in zip(self.parameters, other.parameters)
        ]
        self.parameters[: len(updated)] = updated
        if self.msd is not None and other.msd is not None:
            self.msd += weight * other.msd

    def mul(self, weight: float) -> ModelParameter:
        """Return a copy scaled by ``weight``."""
        return ModelParameter(
            [p.weighted(weight) for p in self.parameters],
            None if self.msd is None else weight * self.msd,
        )


@dataclass
class Model:
    """Decision trees per state and the PDFs their leaves point to."""

    trees: list[Tree] = field(default_factory=list)
    pdf: list[list[ModelParameter]] = field(default_factory=list)

    def _find_tree_index(self, state_index: int) -> Optional[int]:
        return next(
            (i for i, tree in enumerate(self.trees) if tree.state == state_index), None
        )

    def get_index(
        self, state_index: int, label: object
    ) -> tuple[Optional[int], Optional[int]]:
        """Return ``(tree_index, pdf_index)``; the tree index is offset by 2."""
        tree_index = self._find_tree_index(state_index)
        tree = self.trees[0] if tree_index is None else self.trees[tree_index]
        pdf_index = tree.search_node(label)
        return (None if tree_index is None else tree_index + 2, pdf_index)

    def get_parameter(self, state_index: int, label: object) -> ModelParameter:
        """The PDF selected for ``label`` in the given state."""
        tree_index, pdf_index = self.get_index(state_index, label)
        if tree_index is None or pdf_index is None:
            raise LookupError(
                f"no tree or PDF found for state {state_index} and label {label!r}"
            )
        if pdf_index < 1:
            raise IndexError(f"PDF index {pdf_index} is out of range")
        return self.pdf[tree_index - 2][pdf_index - 1]

    def __str__(self) -> str:
        lines = "\n".join(
            f"    #{tree.state}: {len(tree.nodes)} -> {len(self.pdf[tree.state - 2])}"
            for tree in self.trees
        )
        return f"\n{lines}\n"