import math

import pytest

from htsbonsai.speech import SpeechGenerator
from htsbonsai.vocoder.synthesizer import Vocoder

NODATA = -1e10
FPERIOD = 8


def make_vocoder():
    return Vocoder(
        4, 1, 0, True, 16000, 0.42, 0.0, 1.0, FPERIOD,
        min_lf0=math.log(20.0), max_lf0=math.log(8000.0), nodata=NODATA,
    )


def make_generator(frames=3):
    spectrum = [[0.1 * i, 0.0, 0.05, 0.0] for i in range(frames)]
    lf0 = [[NODATA] if i % 2 == 0 else [5.0] for i in range(frames)]
    lpf = [[0.5] for _ in range(frames)]
    return SpeechGenerator(FPERIOD, make_vocoder(), spectrum, lf0, lpf)


def test_generate_all_covers_every_frame():
    generator = make_generator(3)
    samples = generator.generate_all()
    assert len(samples) == 3 * FPERIOD
    assert generator.synthesized_frames() == 3


def test_steps_match_generate_all():
    stepwise = make_generator(3)
    collected = []
    while frame := stepwise.generate_step():
        assert len(frame) == stepwise.fperiod()
        collected.extend(frame)
    assert collected == make_generator(3).generate_all()


def test_generate_step_after_end_returns_nothing():
    generator = make_generator(2)
    generator.generate_all()
    assert generator.generate_step() == []
    assert generator.synthesized_frames() == 2


def test_synthesized_frames_counts_steps():
    generator = make_generator(3)
    generator.generate_step()
    generator.generate_step()
    assert generator.synthesized_frames() == 2


def test_generate_all_after_step_warns_and_returns_rest():
    generator = make_generator(3)
    first = generator.generate_step()
    with pytest.warns(UserWarning):
        rest = generator.generate_all()
    assert len(rest) == 2 * FPERIOD
    assert first + rest == make_generator(3).generate_all()


def test_empty_generator_produces_no_samples():
    generator = SpeechGenerator(FPERIOD, make_vocoder(), [], [], [])
    assert generator.generate_all() == []


def test_mismatched_lengths_are_rejected():
    with pytest.raises(ValueError, match="must be the same"):
        SpeechGenerator(FPERIOD, make_vocoder(), [[0.0] * 4], [], [[0.5]])


def test_lf0_vector_must_have_one_value():
    with pytest.raises(ValueError, match="lf0"):
        SpeechGenerator(FPERIOD, make_vocoder(), [[0.0] * 4], [[1.0, 2.0]], [[0.5]])


def test_lpf_must_have_odd_length():
    with pytest.raises(ValueError, match="odd"):
        SpeechGenerator(
            FPERIOD, make_vocoder(), [[0.0] * 4], [[NODATA]], [[0.5, 0.5]]
        )