"""Per-stream parameters handed to parameter generation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional, overload

from htsbonsai.model.mean_vari import MeanVari
from htsbonsai.model.window import Windows

StreamEntry = tuple[list[MeanVari], float]
GvParameter = tuple[list[MeanVari], list[bool]]


class StreamParameter:
    """Stream vectors and MSD weights, one entry per state of every label.

    Each entry's vector has ``window_length * vector_length`` elements.
    """

    def __init__(self, inner: Iterable[StreamEntry] = ()) -> None:
        self._entries: list[StreamEntry] = list(inner)

    @overload
    def __getitem__(self, index: int) -> StreamEntry: ...

    @overload
    def __getitem__(self, index: slice) -> list[StreamEntry]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StreamEntry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StreamParameter):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"StreamParameter({self._entries!r})"

    def apply_additional_half_tone(
        self,
        additional_half_tone: float,
        half_tone: float,
        min_lf0: float,
        max_lf0: float,
    ) -> None:
        """Shift the first mean of every entry by ``additional_half_tone * half_tone``.

        Applied to LF0 this raises the pitch by that many half tones; the result
        is kept within ``[min_lf0, max_lf0]``.
        """
        if min_lf0 > max_lf0:
            raise ValueError("min_lf0 must not be greater than max_lf0")
        if additional_half_tone == 0.0:
            return
        shift = additional_half_tone * half_tone
        for vector, _ in self._entries:
            head = vector[0]
            mean = min(max(head.mean + shift, min_lf0), max_lf0)
            vector[0] = MeanVari(mean, head.vari)


@dataclass
class ModelStream:
    """Everything parameter generation needs for one stream."""

    vector_length: int
    stream: StreamParameter
    gv: Optional[GvParameter]
    windows: Windows