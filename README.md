# htsbonsai

Pure-Python building blocks for HMM-based speech synthesis. The package
reads `.htsvoice` model files, mixes several voices with interpolation
weights, selects per-label duration, stream and global-variance parameters
from the decision trees, and turns frame-wise log F0, spectrum and low-pass
filter parameters into a waveform with an MLSA (mel-cepstral) or MGLSA
(line spectral pair) vocoder. It has no dependencies outside the standard
library.

## Installation

```
pip install .
```

## Modules

- `htsbonsai.parser.htsvoice`: `load_htsvoice_file(path)` and
  `load_htsvoice_bytes(data)` return a `Voice`. `parse_htsvoice(data)` does
  the same for bytes, and `split_sections(data)` splits a file into its
  `[GLOBAL]`, `[STREAM]`, `[POSITION]` and `[DATA]` bodies. Parse failures
  raise `ModelParseError` (from `htsbonsai.parser.base`); a file that
  cannot be read raises `ModelError`.
- `htsbonsai.parser.header`, `htsbonsai.parser.questions`,
  `htsbonsai.parser.trees`, `htsbonsai.parser.window_row` and
  `htsbonsai.parser.model` parse the individual parts of a voice file.
- `htsbonsai.model.voice`: `Voice`, `GlobalModelMetadata`, `StreamModels`
  and `StreamModelMetadata`.
- `htsbonsai.model.voice_set.VoiceSet`: a non-empty group of voices with
  identical global and stream metadata; otherwise `ModelError` is raised.
- `htsbonsai.model.interpolation_weight.InterpolationWeight`: per-voice
  weights for duration, and per stream for parameters and global variance.
  Each set of weights must have one entry per voice and sum to 1.0,
  otherwise `WeightError` is raised.
- `htsbonsai.model.models.Models`: combines labels, a `VoiceSet` and an
  `InterpolationWeight`; `duration()` gives one `MeanVari` per state of
  every label, and `model_stream(i)` gives a `ModelStream` with the stream
  parameters, GV parameters and windows of stream `i`.
- `htsbonsai.model.question.Question`: wildcard patterns (`*`, `?`) matched
  against the whole of `str(label)`.
- `htsbonsai.vocoder.synthesizer.Vocoder`: synthesizes one frame of
  `fperiod` samples per `synthesize(lf0, spectrum, lpf)` call. Stage 0 uses
  the MLSA filter on mel-cepstra; a non-zero stage uses the MGLSA filter on
  line spectral pairs.
- `htsbonsai.speech.SpeechGenerator`: drives a `Vocoder` over a sequence of
  frames, one frame per `generate_step()` or everything at once with
  `generate_all()`.

## Example: interpolating voices

```python
from htsbonsai.parser.htsvoice import load_htsvoice_file
from htsbonsai.model.voice_set import VoiceSet
from htsbonsai.model.interpolation_weight import InterpolationWeight
from htsbonsai.model.models import Models

sad = load_htsvoice_file("voices/sad.htsvoice")
happy = load_htsvoice_file("voices/happy.htsvoice")
voices = VoiceSet([sad, happy])

weights = InterpolationWeight(2, 3)
weights.set_duration([0.5, 0.5])
weights.set_parameter(0, [0.5, 0.5])   # spectrum
weights.set_parameter(1, [0.5, 0.5])   # log F0
weights.set_parameter(2, [1.0, 0.0])   # low-pass filter

labels = [...]  # full-context label strings
models = Models(labels, voices, weights)
durations = models.duration()
lf0_stream = models.model_stream(1)
```

## Example: vocoding frames

```python
import math

from htsbonsai.vocoder.synthesizer import Vocoder
from htsbonsai.speech import SpeechGenerator

vocoder = Vocoder(
    35, 31, 0, False, 48000, 0.55, 0.0, 1.0, 240,
    min_lf0=math.log(20.0), max_lf0=math.log(20000.0), nodata=-1.0e10,
)
spectrum = [[0.0] * 35 for _ in range(10)]
lf0 = [[math.log(200.0)] for _ in range(10)]
lpf = [[0.0] * 15 + [1.0] + [0.0] * 15 for _ in range(10)]

generator = SpeechGenerator(240, vocoder, spectrum, lf0, lpf)
samples = generator.generate_all()   # 10 * 240 floats
```

## What the package does not do

- It does not turn text into full-context labels; labels are supplied by
  the caller as strings (or objects whose `str()` is the label).
- It does not generate frame-wise parameter trajectories from a
  `ModelStream` (no parameter generation with windows and global
  variance); the spectrum, log F0 and LPF frames given to
  `SpeechGenerator` must come from elsewhere.
- It does not write audio files and has no command-line tool; synthesized
  speech is returned as a list of floats.

## Running the tests

```
pip install .[test]
pytest
```