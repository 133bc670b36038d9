import math

import pytest

from htsbonsai.vocoder.excitation import Random
from htsbonsai.vocoder.synthesizer import Vocoder

MIN_LF0 = math.log(20.0)
MAX_LF0 = math.log(8000.0)
NODATA = -1e10
RATE = 16000
FPERIOD = 16


def make_vocoder(stage=0, nmcp=4, nlpf=0, volume=1.0, beta=0.0, alpha=0.42):
    return Vocoder(
        nmcp,
        nlpf,
        stage,
        True,
        RATE,
        alpha,
        beta,
        volume,
        FPERIOD,
        min_lf0=MIN_LF0,
        max_lf0=MAX_LF0,
        nodata=NODATA,
    )


def test_unvoiced_flat_spectrum_passes_noise_through():
    vocoder = make_vocoder()
    out = vocoder.synthesize(NODATA, [0.0] * 4, [])
    rng = Random()
    expected = [rng.nrandom() for _ in range(FPERIOD)]
    assert out == pytest.approx(expected)


def test_volume_scales_output():
    quiet = make_vocoder(volume=1.0).synthesize(NODATA, [0.0] * 4, [])
    loud = make_vocoder(volume=2.0).synthesize(NODATA, [0.0] * 4, [])
    assert loud == pytest.approx([2.0 * v for v in quiet])


def test_voiced_frame_is_a_pulse_train():
    pitch = 8.0
    lf0 = math.log(RATE / pitch)
    out = make_vocoder().synthesize(lf0, [0.0] * 4, [])
    pulses = [v for v in out if v != 0.0]
    assert len(out) == FPERIOD
    assert out[0] == pytest.approx(math.sqrt(pitch))
    assert len(pulses) in (2, 3)
    assert all(v == pytest.approx(math.sqrt(pitch)) for v in pulses)


def test_log_f0_is_clamped_to_maximum():
    high = make_vocoder().synthesize(100.0, [0.0] * 4, [])
    at_max = make_vocoder().synthesize(MAX_LF0, [0.0] * 4, [])
    assert high == at_max


def test_output_is_deterministic_across_frames():
    spectrum_a = [0.1, 0.2, -0.1, 0.05]
    spectrum_b = [0.3, -0.2, 0.1, 0.0]
    first = make_vocoder(beta=0.4)
    second = make_vocoder(beta=0.4)
    out_first = first.synthesize(5.0, spectrum_a, []) + first.synthesize(
        5.2, spectrum_b, []
    )
    out_second = second.synthesize(5.0, spectrum_a, []) + second.synthesize(
        5.2, spectrum_b, []
    )
    assert out_first == out_second
    assert len(out_first) == 2 * FPERIOD


def test_lsp_stage_produces_finite_samples():
    spectrum = [0.0, 0.4, 0.8, 1.2, 1.6, 2.0]
    vocoder = make_vocoder(stage=1, nmcp=len(spectrum))
    out = vocoder.synthesize(NODATA, spectrum, []) + vocoder.synthesize(
        5.0, spectrum, []
    )
    assert len(out) == 2 * FPERIOD
    assert all(math.isfinite(v) for v in out)


def test_lowpass_filter_ring_of_one_keeps_unvoiced_noise():
    out = make_vocoder(nlpf=1).synthesize(NODATA, [0.0] * 4, [0.5])
    rng = Random()
    assert out == pytest.approx([rng.nrandom() for _ in range(FPERIOD)])


def test_zero_fperiod_is_rejected():
    with pytest.raises(ValueError):
        Vocoder(
            4, 0, 0, True, RATE, 0.42, 0.0, 1.0, 0,
            min_lf0=MIN_LF0, max_lf0=MAX_LF0, nodata=NODATA,
        )


def test_inverted_lf0_bounds_are_rejected():
    with pytest.raises(ValueError):
        Vocoder(
            4, 0, 0, True, RATE, 0.42, 0.0, 1.0, FPERIOD,
            min_lf0=MAX_LF0, max_lf0=MIN_LF0, nodata=NODATA,
        )