"""Voice model structure: metadata, duration model and stream models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from htsbonsai.model.parameters import Model
from htsbonsai.model.question import Question
from htsbonsai.model.window import Windows


@dataclass
class GlobalModelMetadata:
    """Metadata shared by every stream of a voice."""

    hts_voice_version: str
    sampling_frequency: int
    frame_period: int
    num_states: int
    num_streams: int
    stream_type: list[str]
    fullcontext_format: str
    fullcontext_version: str
    gv_off_context: Question

    def __str__(self) -> str:
        return (
            f"HTS Voice Version: {self.hts_voice_version}\n"
            f"Sampling Frequency: {self.sampling_frequency}\n"
            f"Frame Period: {self.frame_period}\n"
            f"Number of States: {self.num_states}\n"
            f"Number of Streams: {self.num_streams}\n"
            f"Streams: {', '.join(self.stream_type)}\n"
            f"Fullcontext: {self.fullcontext_format}@{self.fullcontext_version}\n"
        )


@dataclass
class StreamModelMetadata:
    """Metadata of one stream."""

    vector_length: int
    num_windows: int
    is_msd: bool
    use_gv: bool
    option: list[str] = field(default_factory=list)


@dataclass
class StreamModels:
    """Models and windows of one stream."""

    metadata: StreamModelMetadata
    stream_model: Model
    gv_model: Optional[Model]
    windows: Windows

    def __str__(self) -> str:
        text = f"  Model: {self.stream_model}"
        if self.gv_model is not None:
            text += f"  GV Model: {self.gv_model}"
        widths = ", ".join(str(window.width()) for window in self.windows)
        return f"{text}  Window Width: {widths}\n"


@dataclass
class Voice:
    """A complete voice: global metadata, duration model and stream models."""

    metadata: GlobalModelMetadata
    duration_model: Model
    stream_models: list[StreamModels] = field(default_factory=list)

    def __str__(self) -> str:
        parts = [f"Duration Model: {self.duration_model}", "Stream Models:\n"]
        parts.extend(
            f"#{index}:\n{model}" for index, model in enumerate(self.stream_models)
        )
        return "".join(parts)