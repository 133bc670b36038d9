"""Excitation signal generation: pulse trains mixed with noise."""

from __future__ import annotations

import math
from collections.abc import Sequence

_MASK_64 = (1 << 64) - 1


class _RingBuffer:
    def __init__(self, size: int) -> None:
        self._buffer = [0.0] * size
        self._index = 0

    def __len__(self) -> int:
        return len(self._buffer)

    def add(self, offset: int, value: float) -> None:
        self._buffer[(self._index + offset) % len(self._buffer)] += value

    def pop(self) -> float:
        value = self._buffer[self._index]
        self._buffer[self._index] = 0.0
        self._index = (self._index + 1) % len(self._buffer)
        return value


class Mseq:
    """Maximal-length sequence of +1/-1 values."""

    def __init__(self) -> None:
        self._x = 0x55555555

    def __iter__(self) -> Mseq:
        return self

    def __next__(self) -> int:
        self._x >>= 1
        x0 = 1 if self._x & 0x00000001 else -1
        x28 = 1 if self._x & 0x10000000 else -1
        if x0 + x28 != 0:
            self._x &= 0x7FFFFFFF
        else:
            self._x |= 0x80000000
        return x0


class Random:
    """Deterministic pseudo-random generator with a Gaussian sampler."""

    def __init__(self) -> None:
        self._sw = False
        self._r1 = 0.0
        self._r2 = 0.0
        self._s = 0.0
        self._next = 1

    def nrandom(self) -> float:
        """Draw a standard normal sample (polar Box-Muller)."""
        if self._sw:
            self._sw = False
            return self._r2 * self._s
        self._sw = True
        while True:
            self._r1 = 2.0 * self.rnd() - 1.0
            self._r2 = 2.0 * self.rnd() - 1.0
            self._s = self._r1 * self._r1 + self._r2 * self._r2
            if not (self._s > 1.0 or self._s == 0.0):
                break
        self._s = math.sqrt(-2.0 * math.log(self._s) / self._s)
        return self._r1 * self._s

    def rnd(self) -> float:
        """Draw a uniform sample in [0, 1]."""
        self._next = (self._next * 1103515245 + 12345) & _MASK_64
        r = (self._next // 65536) % 32768
        return r / 32767.0


class Excitation:
    """Produces the excitation signal sample by sample."""

    def __init__(self, nlpf: int, gauss: bool = True) -> None:
        self._pitch = 0.0
        self._counter = 0.0
        self._increment = 0.0
        self._ring = _RingBuffer(nlpf)
        self.gauss = gauss
        self._mseq = Mseq()
        self._random = Random()

    def start(self, pitch: float, fperiod: int) -> None:
        """Begin a frame with the given pitch period (0 for unvoiced)."""
        if self._pitch != 0.0 and pitch != 0.0:
            self._increment = (pitch - self._pitch) / fperiod
        else:
            self._increment = 0.0
            self._pitch = pitch
            self._counter = pitch

    def _white_noise(self) -> float:
        if self.gauss:
            return self._random.nrandom()
        return float(next(self._mseq))

    def _next_pulse(self) -> float:
        self._counter += 1.0
        if self._counter >= self._pitch:
            self._counter -= self._pitch
            return math.sqrt(self._pitch)
        return 0.0

    def _voiced_frame(self, noise: float, pulse: float, lpf: Sequence[float]) -> None:
        center = (len(self._ring) - 1) // 2
        if noise != 0.0:
            for i, coefficient in enumerate(lpf[: len(self._ring)]):
                base = 1.0 if i == center else 0.0
                self._ring.add(i, noise * (base - coefficient))
        if pulse != 0.0:
            for i, coefficient in enumerate(lpf[: len(self._ring)]):
                self._ring.add(i, pulse * coefficient)

    def get(self, lpf: Sequence[float]) -> float:
        """Produce the next excitation sample; ``lpf`` has ``nlpf`` entries."""
        if len(self._ring) > 0:
            noise = self._white_noise()
            if self._pitch == 0.0:
                self._ring.add((len(self._ring) - 1) // 2, noise)
            else:
                pulse = self._next_pulse()
                self._voiced_frame(noise, pulse, lpf)
                self._pitch += self._increment
            return self._ring.pop()
        if self._pitch == 0.0:
            return self._white_noise()
        sample = self._next_pulse()
        self._pitch += self._increment
        return sample

    def end(self, pitch: float) -> None:
        """Finish a frame, settling on the given pitch period."""
        self._pitch = pitch