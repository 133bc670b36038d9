"""Labels, voices and weights combined into the parameters each module needs."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import Optional

from htsbonsai.model.interpolation_weight import InterpolationWeight
from htsbonsai.model.mean_vari import MeanVari
from htsbonsai.model.stream import GvParameter, ModelStream, StreamParameter
from htsbonsai.model.voice_set import ModelError, VoiceSet


class Models:
    """Provides duration, stream and GV parameters for a sequence of labels."""

    def __init__(
        self,
        labels: Iterable[object],
        voices: VoiceSet,
        weights: InterpolationWeight,
    ) -> None:
        self.labels = list(labels)
        self.voices = voices
        self.weights = weights

    def nstate(self) -> int:
        """Number of states per label."""
        return self.voices.global_metadata().num_states

    def duration(self) -> list[MeanVari]:
        """Duration distributions, one per state of every label."""
        weights = self.weights.duration()
        return [
            mean_vari
            for label in self.labels
            for mean_vari in self.voices.weighted(
                weights,
                lambda voice, label=label: voice.duration_model.get_parameter(2, label),
            ).parameters
        ]

    def _vector_length(self, stream_index: int) -> int:
        return self.voices.stream_metadata(stream_index).vector_length

    def stream(self, stream_index: int) -> StreamParameter:
        """Stream vectors and MSD weights, one per state of every label."""
        num_states = self.voices.global_metadata().num_states
        weights = self.weights.parameter(stream_index)
        entries = []
        for label in self.labels:
            for state_index in range(2, 2 + num_states):
                parameter = self.voices.weighted(
                    weights,
                    lambda voice, label=label, state=state_index: voice.stream_models[
                        stream_index
                    ].stream_model.get_parameter(state, label),
                )
                msd = sys.float_info.max if parameter.msd is None else parameter.msd
                entries.append((parameter.parameters, msd))
        return StreamParameter(entries)

    def gv(self, stream_index: int) -> Optional[GvParameter]:
        """GV distribution and per-state switches; None when GV is off or no labels."""
        global_metadata = self.voices.global_metadata()
        if not self.voices.stream_metadata(stream_index).use_gv:
            return None
        if not self.labels:
            return None

        weights = self.weights.gv(stream_index)
        first_label = self.labels[0]

        def select(voice):
            gv_model = voice.stream_models[stream_index].gv_model
            if gv_model is None:
                raise ModelError(f"stream {stream_index} uses GV but has no GV model")
            return gv_model.get_parameter(2, first_label)

        params = self.voices.weighted(weights, select)
        switches = [
            switch
            for label in self.labels
            for switch in [not global_metadata.gv_off_context.test(label)]
            * global_metadata.num_states
        ]
        return params.parameters, switches

    def model_stream(self, stream_index: int) -> ModelStream:
        """All parameters of the given stream."""
        return ModelStream(
            vector_length=self._vector_length(stream_index),
            stream=self.stream(stream_index),
            gv=self.gv(stream_index),
            windows=self.voices.stream_windows(stream_index),
        )