import math
from itertools import islice

import pytest

from htsbonsai.vocoder.excitation import Excitation, Mseq, Random


def test_first_uniform_sample_matches_reference_generator():
    assert Random().rnd() == pytest.approx(16838 / 32767)


def test_uniform_samples_stay_in_unit_interval():
    generator = Random()
    samples = [generator.rnd() for _ in range(1000)]
    assert min(samples) >= 0.0
    assert max(samples) <= 1.0


def test_normal_samples_are_deterministic():
    first, second = Random(), Random()
    a = [first.nrandom() for _ in range(10)]
    b = [second.nrandom() for _ in range(10)]
    assert a == b
    assert all(math.isfinite(x) for x in a)


def test_mseq_is_its_own_iterator():
    sequence = Mseq()
    assert iter(sequence) is sequence


def test_mseq_yields_signs_deterministically():
    a = list(islice(Mseq(), 200))
    b = list(islice(Mseq(), 200))
    assert a == b
    assert set(a) <= {-1, 1}
    assert a[0] == -1


def test_unvoiced_without_filter_is_gaussian_noise():
    excitation = Excitation(0)
    excitation.start(0.0, 16)
    reference = Random()
    assert [excitation.get([]) for _ in range(16)] == [
        reference.nrandom() for _ in range(16)
    ]


def test_unvoiced_with_single_tap_is_gaussian_noise():
    excitation = Excitation(1)
    excitation.start(0.0, 16)
    reference = Random()
    assert [excitation.get([1.0]) for _ in range(16)] == [
        reference.nrandom() for _ in range(16)
    ]


def test_unvoiced_with_mseq_noise():
    excitation = Excitation(0, gauss=False)
    excitation.start(0.0, 8)
    assert [excitation.get([]) for _ in range(8)] == [
        float(v) for v in islice(Mseq(), 8)
    ]


def test_voiced_without_filter_produces_pulse_train():
    excitation = Excitation(0)
    excitation.start(4.0, 8)
    samples = [excitation.get([]) for _ in range(8)]
    pulses = [i for i, value in enumerate(samples) if value != 0.0]
    assert pulses == [0, 3, 7]
    assert all(samples[i] == math.sqrt(4.0) for i in pulses)


def test_voiced_with_centre_tap_delays_pulses():
    plain = Excitation(0)
    filtered = Excitation(3)
    plain.start(4.0, 12)
    filtered.start(4.0, 12)
    direct = [plain.get([]) for _ in range(12)]
    delayed = [filtered.get([0.0, 1.0, 0.0]) for _ in range(12)]
    assert delayed[0] == 0.0
    assert delayed[1:] == direct[:-1]


def test_start_after_unvoiced_resets_counter():
    excitation = Excitation(0)
    excitation.start(0.0, 4)
    [excitation.get([]) for _ in range(4)]
    excitation.end(0.0)
    excitation.start(9.0, 4)
    assert excitation.get([]) == math.sqrt(9.0)