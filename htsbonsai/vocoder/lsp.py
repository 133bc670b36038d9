"""Line spectral pairs and their conversion to mel-generalized cepstra."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from htsbonsai.vocoder.cepstrum import (
    MelGeneralizedCepstrum,
    _ieee_div,
    _ieee_exp,
    _ieee_ln,
)


@dataclass
class LineSpectralPairs:
    """Gain followed by line spectral pair frequencies."""

    values: list[float]
    alpha: float
    use_log_gain: bool
    stage: int
    gamma: float

    def __post_init__(self) -> None:
        self.values = [float(v) for v in self.values]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def _lsp2lpc(self) -> MelGeneralizedCepstrum:
        m = len(self.values)
        if m % 2 == 0:
            mh1 = mh2 = m // 2
        else:
            mh1, mh2 = (m + 1) // 2, (m - 1) // 2

        p = [-2.0 * math.cos(x) for x in self.values[0::2]]
        q = [-2.0 * math.cos(x) for x in self.values[1::2]]
        a0 = [0.0] * (mh1 + 1)
        a1 = [0.0] * (mh1 + 1)
        a2 = [0.0] * (mh1 + 1)
        b0 = [0.0] * (mh2 + 1)
        b1 = [0.0] * (mh2 + 1)
        b2 = [0.0] * (mh2 + 1)

        xff = 0.0
        xf = 0.0
        out = [0.0] * (m + 1)
        for k in range(m + 1):
            xx = 1.0 if k == 0 else 0.0
            if m % 2 == 1:
                a0[0] = xx
                b0[0] = xx - xff
                xff = xf
                xf = xx
            else:
                a0[0] = xx + xf
                b0[0] = xx - xf
                xf = xx
            for i in range(mh1):
                a0[i + 1] = a0[i] + p[i] * a1[i] + a2[i]
                a2[i] = a1[i]
                a1[i] = a0[i]
            for i in range(mh2):
                b0[i + 1] = b0[i] + q[i] * b1[i] + b2[i]
                b2[i] = b1[i]
                b1[i] = b0[i]
            if k > 0:
                out[k - 1] = -0.5 * (a0[mh1] + b0[mh2])

        out = [1.0] + [-v for v in out[:m]]
        return MelGeneralizedCepstrum(out, self.alpha, self.gamma)

    def lsp2mgc(self) -> MelGeneralizedCepstrum:
        """Convert to a mel-generalized cepstrum of the same order."""
        lpc = self._lsp2lpc()
        lpc[0] = _ieee_exp(self.values[0]) if self.use_log_gain else self.values[0]
        lpc = lpc.ignorm()
        scale = -float(self.stage)
        lpc.values[1:] = [v * scale for v in lpc.values[1:]]
        return lpc.mgc2mgc(len(self.values) - 1, self.alpha, self.gamma)

    def _lsp2en(self) -> float:
        return sum(x * x for x in self.lsp2mgc())

    def postfilter_lsp(self, beta: float) -> None:
        """Sharpen the spectral peaks in place while keeping the energy."""
        n = len(self.values)
        if beta <= 0.0 or n <= 2:
            return
        en1 = self._lsp2en()
        v = self.values
        buf = list(v)
        for i in range(2, n - 1):
            d1 = beta * (v[i + 1] - v[i])
            d2 = beta * (v[i] - v[i - 1])
            buf[i] = (
                v[i - 1]
                + d2
                + _ieee_div(
                    d2 * d2 * ((v[i + 1] - v[i - 1]) - (d1 + d2)), d2 * d2 + d1 * d1
                )
            )
        self.values = buf

        en2 = self._lsp2en()
        if en1 != en2:
            ratio = _ieee_div(en1, en2)
            if self.use_log_gain:
                self.values[0] += 0.5 * _ieee_ln(ratio)
            else:
                self.values[0] *= math.sqrt(ratio) if ratio >= 0.0 else math.nan

    def check_lsp_stability(self) -> None:
        """Push LSP frequencies apart and into range so the filter stays stable."""
        v = self.values
        minimum = 0.25 * math.pi / len(v)
        last = len(v) - 1
        for _ in range(4):
            found = False
            for j in range(1, last):
                gap = v[j + 1] - v[j]
                if gap < minimum:
                    v[j] -= 0.5 * (minimum - gap)
                    v[j + 1] += 0.5 * (minimum - gap)
                    found = True
            if v[1] < minimum:
                v[1] = minimum
                found = True
            if v[last] > math.pi - minimum:
                v[last] = math.pi - minimum
                found = True
            if not found:
                break