"""Mean and variance of a normal distribution."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class MeanVari:
    """Mean and variance (or inverted variance) of a normal distribution."""

    mean: float
    vari: float

    def __iter__(self) -> Iterator[float]:
        yield self.mean
        yield self.vari

    def with_ivar(self) -> MeanVari:
        """Return a copy whose variance is inverted, with clamping."""
        if abs(self.vari) > 1e19:
            ivar = 0.0
        elif abs(self.vari) < 1e-19:
            ivar = 1e38
        else:
            ivar = 1.0 / self.vari
        return MeanVari(self.mean, ivar)

    def with_0(self) -> MeanVari:
        """Return a copy whose variance is zero."""
        return MeanVari(self.mean, 0.0)

    def weighted(self, weight: float) -> MeanVari:
        """Return a copy with both components scaled by ``weight``."""
        return MeanVari(self.mean * weight, self.vari * weight)

    def __add__(self, other: object) -> MeanVari:
        if not isinstance(other, MeanVari):
            return NotImplemented
        return MeanVari(self.mean + other.mean, self.vari + other.vari)

    def __radd__(self, other: object) -> MeanVari:
        if isinstance(other, int) and not isinstance(other, bool) and other == 0:
            return self
        return NotImplemented

    def __mul__(self, weight: object) -> MeanVari:
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            return NotImplemented
        return self.weighted(float(weight))

    __rmul__ = __mul__