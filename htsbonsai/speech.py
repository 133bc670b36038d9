"""Holds frame parameters and generates speech frame by frame or all at once."""

from __future__ import annotations

import warnings
from collections.abc import Sequence

from htsbonsai.vocoder.synthesizer import Vocoder

Parameter = Sequence[Sequence[float]]


class SpeechGenerator:
    """Everything needed to generate a speech waveform.

    ``spectrum``, ``lf0`` and ``lpf`` have one entry per frame; each LF0 entry
    holds a single value and each LPF entry an odd number of coefficients.
    """

    def __init__(
        self,
        fperiod: int,
        vocoder: Vocoder,
        spectrum: Parameter,
        lf0: Parameter,
        lpf: Parameter,
    ) -> None:
        if len(spectrum) != len(lf0) or len(spectrum) != len(lpf):
            raise ValueError("The length of spectrum, lf0, and lpf must be the same.")
        if lf0 and len(lf0[0]) != 1:
            raise ValueError("The size of lf0 static vector must be 1.")
        if lpf and len(lpf[0]) % 2 == 0:
            raise ValueError(
                "The number of low-pass filter coefficient must be odd numbers."
            )
        self._fperiod = fperiod
        self._vocoder = vocoder
        self._spectrum = spectrum
        self._lf0 = lf0
        self._lpf = lpf
        self._next = 0

    def fperiod(self) -> int:
        """Number of samples produced by one call of :meth:`generate_step`."""
        return self._fperiod

    def synthesized_frames(self) -> int:
        """Number of frames already synthesized."""
        return self._next

    def generate_step(self) -> list[float]:
        """Synthesize the next frame; an empty list once all frames are done."""
        if self._next >= len(self._lf0):
            return []
        index = self._next
        samples = self._vocoder.synthesize(
            self._lf0[index][0], self._spectrum[index], self._lpf[index]
        )
        self._next += 1
        return samples

    def generate_all(self) -> list[float]:
        """Synthesize every remaining frame; earlier frames are not repeated."""
        if self._next != 0:
            warnings.warn(
                "The speech generator has already synthesized some frames.",
                stacklevel=2,
            )
        samples: list[float] = []
        while frame := self.generate_step():
            samples.extend(frame)
        return samples