"""Mel-cepstral and mel-generalized cepstral representations and their conversions."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

IMPULSE_RESPONSE_LENGTH = 576


def _ieee_div(numerator: float, denominator: float) -> float:
    """Divide like IEEE 754 does, yielding inf or nan instead of raising."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _ieee_exp(value: float) -> float:
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def _ieee_ln(value: float) -> float:
    if math.isnan(value):
        return math.nan
    if value > 0.0:
        return math.log(value)
    if value == 0.0:
        return -math.inf
    return math.nan


def _ieee_pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        if base == 0.0:
            return math.inf
        return math.nan


def _mc2b(cepstrum: list[float], alpha: float) -> list[float]:
    coefficients = list(cepstrum)
    if alpha != 0.0:
        for i in range(len(cepstrum) - 2, -1, -1):
            coefficients[i] = cepstrum[i] - alpha * coefficients[i + 1]
    return coefficients


def _b2mc(coefficients: list[float], alpha: float) -> list[float]:
    cepstrum = list(coefficients)
    for i in range(len(coefficients) - 2, -1, -1):
        cepstrum[i] = coefficients[i] + alpha * coefficients[i + 1]
    return cepstrum


def _freqt(cepstrum: list[float], m2: int, alpha: float) -> list[float]:
    aa = 1.0 - alpha * alpha
    out = [0.0] * (m2 + 1)
    previous = [0.0] * (m2 + 1)
    for value in cepstrum:
        previous[0] = out[0]
        out[0] = value + alpha * out[0]
        if m2 >= 1:
            previous[1] = out[1]
            out[1] = aa * previous[0] + alpha * out[1]
        for j in range(2, m2 + 1):
            previous[j] = out[j]
            out[j] = previous[j - 1] + alpha * (out[j] - out[j - 1])
    return out


def _c2ir(cepstrum: list[float], length: int) -> list[float]:
    ir = [0.0] * length
    ir[0] = _ieee_exp(cepstrum[0])
    for n in range(1, length):
        total = sum(
            k * cepstrum[k] * ir[n - k] for k in range(1, min(len(cepstrum), n + 1))
        )
        ir[n] = total / n
    return ir


def _b2en(coefficients: list[float], alpha: float) -> float:
    warped = _freqt(_b2mc(coefficients, alpha), IMPULSE_RESPONSE_LENGTH - 1, -alpha)
    return sum(x * x for x in _c2ir(warped, IMPULSE_RESPONSE_LENGTH))


def _gnorm(values: list[float], gamma: float) -> list[float]:
    if gamma != 0.0:
        k = 1.0 + gamma * values[0]
        return [_ieee_pow(k, 1.0 / gamma)] + [_ieee_div(x, k) for x in values[1:]]
    return [_ieee_exp(values[0])] + values[1:]


def _ignorm(values: list[float], gamma: float) -> list[float]:
    if gamma != 0.0:
        k = _ieee_pow(values[0], gamma)
        return [(k - 1.0) / gamma] + [x * k for x in values[1:]]
    return [_ieee_ln(values[0])] + values[1:]


@dataclass
class _Series:
    values: list[float]

    def __post_init__(self) -> None:
        self.values = [float(v) for v in self.values]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def __setitem__(self, index, value) -> None:
        self.values[index] = value


@dataclass
class Coefficients(_Series):
    """MLSA filter coefficients."""

    def b2mc(self, alpha: float) -> MelCepstrum:
        """Convert filter coefficients back to a mel-cepstrum."""
        return MelCepstrum(_b2mc(self.values, alpha), alpha)

    def b2en(self, alpha: float) -> float:
        """Energy of the impulse response described by these coefficients."""
        return _b2en(self.values, alpha)


@dataclass
class GeneralizedCoefficients(_Series):
    """MGLSA filter coefficients."""

    gamma: float = 0.0

    def b2mc(self, alpha: float) -> MelGeneralizedCepstrum:
        """Convert filter coefficients back to a mel-generalized cepstrum."""
        return MelGeneralizedCepstrum(_b2mc(self.values, alpha), alpha, self.gamma)

    def b2en(self, alpha: float) -> float:
        """Energy of the impulse response described by these coefficients."""
        return _b2en(self.values, alpha)

    def gnorm(self) -> GeneralizedCoefficients:
        """Gain-normalise the coefficients."""
        return GeneralizedCoefficients(_gnorm(self.values, self.gamma), self.gamma)

    def ignorm(self) -> GeneralizedCoefficients:
        """Undo gain normalisation."""
        return GeneralizedCoefficients(_ignorm(self.values, self.gamma), self.gamma)


@dataclass
class MelCepstrum(_Series):
    """Mel-cepstrum with its frequency warping factor."""

    alpha: float = 0.0

    def mc2b(self) -> Coefficients:
        """Convert to MLSA filter coefficients."""
        return Coefficients(_mc2b(self.values, self.alpha))

    def freqt(self, m2: int, alpha: float) -> MelCepstrum:
        """Frequency-transform into a cepstrum of order ``m2``."""
        return MelCepstrum(_freqt(self.values, m2, alpha), self.alpha)

    def c2ir(self, length: int) -> list[float]:
        """Minimum-phase impulse response of the given length."""
        return _c2ir(self.values, length)

    def postfilter_mcp(self, beta: float) -> None:
        """Emphasise formants in place while keeping the energy."""
        if beta <= 0.0 or len(self) <= 2:
            return
        coefficients = self.mc2b()
        e1 = coefficients.b2en(self.alpha)

        coefficients[1] -= beta * self.alpha * coefficients[2]
        coefficients.values[2:] = [v * (1.0 + beta) for v in coefficients.values[2:]]

        e2 = coefficients.b2en(self.alpha)
        coefficients[0] += _ieee_ln(_ieee_div(e1, e2)) / 2.0
        self.values = coefficients.b2mc(self.alpha).values


@dataclass
class MelGeneralizedCepstrum(_Series):
    """Mel-generalized cepstrum with warping factor and generalisation parameter."""

    alpha: float = 0.0
    gamma: float = 0.0

    def mc2b(self) -> GeneralizedCoefficients:
        """Convert to MGLSA filter coefficients."""
        return GeneralizedCoefficients(_mc2b(self.values, self.alpha), self.gamma)

    def freqt(self, m2: int, alpha: float) -> MelGeneralizedCepstrum:
        """Frequency-transform into a cepstrum of order ``m2``."""
        return MelGeneralizedCepstrum(
            _freqt(self.values, m2, alpha), self.alpha, self.gamma
        )

    def c2ir(self, length: int) -> list[float]:
        """Minimum-phase impulse response of the given length."""
        return _c2ir(self.values, length)

    def gnorm(self) -> MelGeneralizedCepstrum:
        """Gain-normalise the cepstrum."""
        return MelGeneralizedCepstrum(
            _gnorm(self.values, self.gamma), self.alpha, self.gamma
        )

    def ignorm(self) -> MelGeneralizedCepstrum:
        """Undo gain normalisation."""
        return MelGeneralizedCepstrum(
            _ignorm(self.values, self.gamma), self.alpha, self.gamma
        )

    def _gc2gc(self, m2: int, gamma: float) -> MelGeneralizedCepstrum:
        source = self.values
        out = [0.0] * (m2 + 1)
        out[0] = source[0]
        for i in range(1, m2 + 1):
            ss1 = 0.0
            ss2 = 0.0
            for k in range(1, min(len(source), i)):
                mk = i - k
                cc = source[k] * out[mk]
                ss1 += mk * cc
                ss2 += k * cc
            correction = (gamma * ss2 - self.gamma * ss1) / i
            out[i] = source[i] + correction if i < len(source) else correction
        return MelGeneralizedCepstrum(out, self.alpha, gamma)

    def mgc2mgc(self, m2: int, alpha: float, gamma: float) -> MelGeneralizedCepstrum:
        """Convert to order ``m2`` with the given warping and generalisation."""
        if self.alpha == alpha:
            source = self
        else:
            warp = (alpha - self.alpha) / (1.0 - self.alpha * alpha)
            source = self.freqt(m2, warp)
        return source.gnorm()._gc2gc(m2, gamma).ignorm()