"""Interpolation weights for morphing between several voices."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator, Sequence
from typing import Optional, overload


class WeightError(ValueError):
    """Raised when interpolation weights are unusable.

    For a length mismatch, ``expected`` and ``got`` hold the lengths.
    """

    def __init__(
        self, message: str, expected: Optional[int] = None, got: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.got = got


class Weights(Sequence[float]):
    """One weight per voice, summing to 1.0."""

    __slots__ = ("_values",)

    def __init__(self, weights: Iterable[float]) -> None:
        values = tuple(float(w) for w in weights)
        total = sum(values)
        if not abs(total - 1.0) <= sys.float_info.epsilon:
            raise WeightError("Weights do not sum to 1.0")
        self._values = values

    @classmethod
    def _unchecked(cls, values: tuple[float, ...]) -> Weights:
        weights = cls.__new__(cls)
        weights._values = values
        return weights

    @classmethod
    def average(cls, nvoices: int) -> Weights:
        """Equal weights for ``nvoices`` voices."""
        if nvoices == 0:
            return cls._unchecked(())
        return cls._unchecked((1.0 / nvoices,) * nvoices)

    def check_length(self, length: int) -> None:
        """Raise unless there are exactly ``length`` weights."""
        if len(self._values) != length:
            raise WeightError(
                f"Weights length is invalid; expected {length}, got {len(self._values)}",
                expected=length,
                got=len(self._values),
            )

    @overload
    def __getitem__(self, index: int) -> float: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[float, ...]: ...

    def __getitem__(self, index):
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Weights):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"Weights({list(self._values)!r})"


class InterpolationWeight:
    """Weights for duration, and per stream for parameters and GV."""

    def __init__(self, nvoices: int = 1, nstream: int = 0) -> None:
        average = Weights.average(nvoices)
        self.nvoices = nvoices
        self._duration = average
        self._parameter = [average] * nstream
        self._gv = [average] * nstream

    def _validated(self, weight: Iterable[float]) -> Weights:
        weights = Weights(weight)
        weights.check_length(self.nvoices)
        return weights

    @staticmethod
    def _check_stream(slots: list[Weights], stream_index: int) -> None:
        if not 0 <= stream_index < len(slots):
            raise IndexError(f"stream index {stream_index} out of range")

    def duration(self) -> Weights:
        """Weights for the duration model."""
        return self._duration

    def set_duration(self, weight: Iterable[float]) -> None:
        """Set duration weights; one per voice, summing to 1.0."""
        self._duration = self._validated(weight)

    def set_parameter(self, stream_index: int, weight: Iterable[float]) -> None:
        """Set parameter weights of a stream; one per voice, summing to 1.0."""
        weights = self._validated(weight)
        self._check_stream(self._parameter, stream_index)
        self._parameter[stream_index] = weights

    def set_gv(self, stream_index: int, weight: Iterable[float]) -> None:
        """Set GV weights of a stream; one per voice, summing to 1.0."""
        weights = self._validated(weight)
        self._check_stream(self._gv, stream_index)
        self._gv[stream_index] = weights

    def parameter(self, stream_index: int) -> Weights:
        """Parameter weights of a stream."""
        self._check_stream(self._parameter, stream_index)
        return self._parameter[stream_index]

    def gv(self, stream_index: int) -> Weights:
        """GV weights of a stream."""
        self._check_stream(self._gv, stream_index)
        return self._gv[stream_index]