"""Delta windows used for parameter generation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class WindowIndex:
    """Index of a coefficient within a window of the given width."""

    index: int
    width: int

    def position(self) -> int:
        """Offset of the coefficient from the window's centre."""
        return self.index - self.width // 2


@dataclass
class Window:
    """Coefficients of one delta window."""

    coefficients: list[float] = field(default_factory=list)

    def iter_rev(self, start: int) -> Iterator[tuple[WindowIndex, float]]:
        """Yield ``(index, coefficient)`` from the last coefficient back to ``start``."""
        width = self.width()
        tail = self.coefficients[start:]
        for offset in range(len(tail) - 1, -1, -1):
            yield WindowIndex(start + offset, width), tail[offset]

    def width(self) -> int:
        """Number of coefficients."""
        return len(self.coefficients)

    def left_width(self) -> int:
        """Coefficients to the left of the centre."""
        return self.width() // 2

    def right_width(self) -> int:
        """Coefficients to the right of the centre."""
        return self.width() - self.left_width() - 1


class Windows:
    """The windows of one stream."""

    def __init__(self, windows: Iterable[Window] = ()) -> None:
        self._windows = list(windows)

    def __iter__(self) -> Iterator[Window]:
        return iter(self._windows)

    def __len__(self) -> int:
        return len(self._windows)

    def __getitem__(self, index: int) -> Window:
        return self._windows[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Windows):
            return NotImplemented
        return self._windows == other._windows

    def __repr__(self) -> str:
        return f"Windows({self._windows!r})"

    def max_width(self) -> int:
        """Half of the widest window's width (0 when there are none)."""
        return max((w.width() for w in self._windows), default=0) // 2