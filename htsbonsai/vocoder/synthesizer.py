"""Waveform synthesis from log F0, spectral and low-pass filter parameters."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Union

from htsbonsai.vocoder.cepstrum import (
    Coefficients,
    GeneralizedCoefficients,
    MelCepstrum,
    _ieee_exp,
)
from htsbonsai.vocoder.excitation import Excitation
from htsbonsai.vocoder.filters import ZeroStage, make_stage
from htsbonsai.vocoder.lsp import LineSpectralPairs


class Vocoder:
    """Turns one frame of parameters at a time into ``fperiod`` samples.

    ``min_lf0`` and ``max_lf0`` bound the log F0 before it is turned into a
    pitch period; a log F0 equal to ``nodata`` marks an unvoiced frame.
    """

    def __init__(
        self,
        nmcp: int,
        nlpf: int,
        stage: int,
        use_log_gain: bool,
        rate: int,
        alpha: float,
        beta: float,
        volume: float,
        fperiod: int,
        *,
        min_lf0: float,
        max_lf0: float,
        nodata: float,
    ) -> None:
        if fperiod < 1:
            raise ValueError(f"fperiod must be positive, got {fperiod}")
        if min_lf0 > max_lf0:
            raise ValueError("min_lf0 must not be greater than max_lf0")
        self._stage = make_stage(stage, nmcp)
        self._excitation = Excitation(nlpf)
        self.use_log_gain = use_log_gain
        self.fperiod = fperiod
        self.rate = rate
        self.alpha = alpha
        self.beta = beta
        self.volume = volume
        self.min_lf0 = min_lf0
        self.max_lf0 = max_lf0
        self.nodata = nodata
        self._is_first = True

    def _pitch(self, lf0: float) -> float:
        if lf0 == self.nodata:
            return 0.0
        clamped = min(max(lf0, self.min_lf0), self.max_lf0)
        return self.rate / _ieee_exp(clamped)

    def _target(
        self, spectrum: Sequence[float], postfilter: bool
    ) -> Union[Coefficients, GeneralizedCoefficients]:
        stage = self._stage
        if isinstance(stage, ZeroStage):
            cepstrum = MelCepstrum(list(spectrum), self.alpha)
            if postfilter:
                cepstrum.postfilter_mcp(self.beta)
            return cepstrum.mc2b()

        lsp = LineSpectralPairs(
            list(spectrum), self.alpha, self.use_log_gain, stage.stage, stage.gamma
        )
        if postfilter:
            lsp.postfilter_lsp(self.beta)
            lsp.check_lsp_stability()
        coefficients = lsp.lsp2mgc().mc2b().gnorm()
        coefficients.values[1:] = [v * stage.gamma for v in coefficients.values[1:]]
        return coefficients

    def synthesize(
        self, lf0: float, spectrum: Sequence[float], lpf: Sequence[float]
    ) -> list[float]:
        """Synthesize one frame and return its ``fperiod`` samples."""
        pitch = self._pitch(lf0)
        stage = self._stage

        if self._is_first:
            self._is_first = False
            stage.coefficients = self._target(spectrum, postfilter=False)

        target = self._target(spectrum, postfilter=True)
        coefficients = stage.coefficients
        increments = [
            (t - c) / self.fperiod for t, c in zip(target, coefficients)
        ]
        mel_cepstral = isinstance(stage, ZeroStage)

        self._excitation.start(pitch, self.fperiod)
        samples = []
        for _ in range(self.fperiod):
            x = self._excitation.get(lpf)
            if mel_cepstral:
                if x != 0.0:
                    x *= _ieee_exp(coefficients[0])
            else:
                x *= coefficients[0]
            x = stage.filter.df(x, self.alpha, coefficients)
            coefficients.values = [
                c + inc for c, inc in zip(coefficients.values, increments)
            ]
            samples.append(x * self.volume)
        self._excitation.end(pitch)
        stage.coefficients = target
        return samples

    def __repr__(self) -> str:
        kind = "mel-cepstral" if isinstance(self._stage, ZeroStage) else "LSP"
        return f"Vocoder({kind}, rate={self.rate}, fperiod={self.fperiod})"


def _is_finite(samples: Sequence[float]) -> bool:
    return all(math.isfinite(s) for s in samples)