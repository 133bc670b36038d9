"""MLSA and MGLSA synthesis filters and the per-stage filter state."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from htsbonsai.vocoder.cepstrum import Coefficients, GeneralizedCoefficients

PADE = (
    1.00000000000,
    1.00000000000,
    0.00000000000,
    1.00000000000,
    0.00000000000,
    0.00000000000,
    1.00000000000,
    0.00000000000,
    0.00000000000,
    0.00000000000,
    1.00000000000,
    0.49992730000,
    0.10670050000,
    0.01170221000,
    0.00056562790,
    1.00000000000,
    0.49993910000,
    0.11070980000,
    0.01369984000,
    0.00095648530,
    0.00003041721,
)

_MAX_ORDER = 6


class Df2:
    """All-pass warped FIR section used inside the MLSA filter."""

    def __init__(self, length: int) -> None:
        self._delay = [0.0] * length

    def fir(self, x: float, alpha: float, coefficients: Sequence[float]) -> float:
        """Push ``x`` through the warped delay line and return the FIR output."""
        d = self._delay
        d[0] = x
        iaa = 1.0 - alpha * alpha
        rem = 0.0
        for i, value in enumerate(d):
            d[i], rem = alpha * value + rem, iaa * value - alpha * rem
        return sum(v * c for v, c in zip(d[2:], coefficients[2:]))


class MelLogSpectrumApproximation:
    """MLSA filter using a Pade approximation of the given order."""

    def __init__(self, nmcp: int, order: int = _MAX_ORDER) -> None:
        if not 1 <= order <= _MAX_ORDER:
            raise ValueError(f"Pade order must be between 1 and {_MAX_ORDER}, got {order}")
        start = (order - 1) * order // 2
        self.pade = PADE[start : start + order]
        self._d11 = [0.0] * order
        self._d12 = [0.0] * order
        self._d21 = [Df2(nmcp) for _ in range(order)]
        self._d22 = [0.0] * order

    def df(self, x: float, alpha: float, coefficients: Sequence[float]) -> float:
        """Filter one sample and return the output."""
        x = self._df1(x, alpha, coefficients)
        return self._df2(x, alpha, coefficients)

    def _df1(self, x: float, alpha: float, coefficients: Sequence[float]) -> float:
        aa = 1.0 - alpha * alpha
        out = 0.0
        for i in range(len(self.pade) - 1, 0, -1):
            self._d11[i] = aa * self._d12[i - 1] + alpha * self._d11[i]
            self._d12[i] = self._d11[i] * coefficients[1]
            v = self._d12[i] * self.pade[i]
            x += v if i & 1 else -v
            out += v
        self._d12[0] = x
        return x + out

    def _df2(self, x: float, alpha: float, coefficients: Sequence[float]) -> float:
        out = 0.0
        for i in range(len(self.pade) - 1, 0, -1):
            self._d22[i] = self._d21[i - 1].fir(self._d22[i - 1], alpha, coefficients)
            v = self._d22[i] * self.pade[i]
            x += v if i & 1 else -v
            out += v
        self._d22[0] = x
        return x + out


class MelGeneralizedLogSpectrumApproximation:
    """Cascade of ``n`` MGLSA sections."""

    def __init__(self, n: int, c_len: int) -> None:
        self._delays = [[0.0] * c_len for _ in range(n)]

    def df(self, x: float, alpha: float, coefficients: Sequence[float]) -> float:
        """Filter one sample and return the output."""
        for delay in self._delays:
            x = self._dff(delay, x, alpha, coefficients)
        return x

    @staticmethod
    def _dff(
        d: list[float], x: float, alpha: float, coefficients: Sequence[float]
    ) -> float:
        n = len(coefficients)
        aa = 1.0 - alpha * alpha
        y = d[0] * coefficients[1]
        for i in range(1, n - 1):
            d[i] += alpha * (d[i + 1] - d[i - 1])
            y += d[i] * coefficients[i + 1]
        x -= y
        d[1:n] = d[0 : n - 1]
        d[0] = alpha * d[0] + aa * x
        return x


@dataclass
class ZeroStage:
    """Filter state for mel-cepstral synthesis (stage 0)."""

    coefficients: Coefficients
    filter: MelLogSpectrumApproximation


@dataclass
class NonZeroStage:
    """Filter state for LSP / mel-generalized synthesis."""

    stage: int
    gamma: float
    coefficients: GeneralizedCoefficients
    filter: MelGeneralizedLogSpectrumApproximation


Stage = Union[ZeroStage, NonZeroStage]


def make_stage(stage: int, nmcp: int) -> Stage:
    """Create the filter state for the given stage number."""
    if stage == 0:
        return ZeroStage(Coefficients([]), MelLogSpectrumApproximation(nmcp))
    gamma = -1.0 / stage
    return NonZeroStage(
        stage,
        gamma,
        GeneralizedCoefficients([], gamma),
        MelGeneralizedLogSpectrumApproximation(stage, nmcp),
    )