"""A set of voices that can be morphed with each other."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence

from htsbonsai.model.parameters import ModelParameter
from htsbonsai.model.voice import GlobalModelMetadata, StreamModelMetadata, Voice
from htsbonsai.model.window import Windows


class ModelError(ValueError):
    """Raised when voices cannot be used together as a model."""


class VoiceSet:
    """Non-empty list of voices with identical global and stream metadata."""

    def __init__(self, voices: Iterable[Voice]) -> None:
        voices = list(voices)
        if not voices:
            raise ModelError("No HTS voice was given.")
        first = voices[0]
        for voice in voices[1:]:
            if voice.metadata != first.metadata:
                raise ModelError("The global metadata does not match.")
            if len(voice.stream_models) != len(first.stream_models):
                raise ModelError("The global metadata does not match.")
            if any(
                a.metadata != b.metadata
                for a, b in zip(voice.stream_models, first.stream_models)
            ):
                raise ModelError("The global metadata does not match.")
        self._voices = voices

    def __len__(self) -> int:
        return len(self._voices)

    def __iter__(self) -> Iterator[Voice]:
        return iter(self._voices)

    def __getitem__(self, index: int) -> Voice:
        return self._voices[index]

    def __repr__(self) -> str:
        return f"VoiceSet({len(self._voices)} voices)"

    def _first(self) -> Voice:
        return self._voices[0]

    def global_metadata(self) -> GlobalModelMetadata:
        """Global metadata, shared by every voice."""
        return self._first().metadata

    def stream_metadata(self, stream_index: int) -> StreamModelMetadata:
        """Metadata of the given stream."""
        return self._first().stream_models[stream_index].metadata

    def stream_windows(self, stream_index: int) -> Windows:
        """Windows of the given stream."""
        return self._first().stream_models[stream_index].windows

    def weighted(
        self,
        weights: Sequence[float],
        param: Callable[[Voice], ModelParameter],
    ) -> ModelParameter:
        """Select a parameter from each voice with ``param`` and mix them by ``weights``."""
        if len(weights) == 0:
            raise ModelError("No weights were given.")
        params = [param(voice) for voice in self._voices]
        result = params[0].mul(weights[0])
        for parameter, weight in zip(params[1:], list(weights)[1:]):
            result.mul_add(weight, parameter)
        return result