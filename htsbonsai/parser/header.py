"""The ``[GLOBAL]``, ``[STREAM]`` and ``[POSITION]`` sections of a voice file."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, TypeVar, Union

from htsbonsai.model.question import Question, QuestionParseError
from htsbonsai.model.voice import GlobalModelMetadata, StreamModelMetadata
from htsbonsai.parser.base import ModelParseError
from htsbonsai.parser.deserializer import DeserializeError, Deserializer, from_str

T = TypeVar("T")
Range = tuple[int, int]


class _Field(NamedTuple):
    reader: Callable[[Deserializer], object]
    optional: bool = False


def _read_string(de: Deserializer) -> str:
    return de.parse_string()


def _read_unsigned(de: Deserializer) -> int:
    return de.parse_unsigned()


def _read_bool(de: Deserializer) -> bool:
    return de.parse_bool()


def _read_string_list(de: Deserializer) -> list[str]:
    return de.parse_seq(_read_string)


def _read_range(de: Deserializer) -> Range:
    values = de.parse_tuple(_read_unsigned)
    if len(values) != 2:
        raise DeserializeError.custom(
            f"invalid length {len(values)}, expected a tuple of size 2"
        )
    return values[0], values[1]


def _read_range_list(de: Deserializer) -> list[Range]:
    return de.parse_seq(_read_range)


def _read_optional_range(de: Deserializer) -> Optional[Range]:
    return de.parse_option(_read_range)


_GLOBAL_FIELDS = {
    "HTS_VOICE_VERSION": _Field(_read_string),
    "SAMPLING_FREQUENCY": _Field(_read_unsigned),
    "FRAME_PERIOD": _Field(_read_unsigned),
    "NUM_STATES": _Field(_read_unsigned),
    "NUM_STREAMS": _Field(_read_unsigned),
    "STREAM_TYPE": _Field(_read_string_list),
    "FULLCONTEXT_FORMAT": _Field(_read_string),
    "FULLCONTEXT_VERSION": _Field(_read_string),
    "GV_OFF_CONTEXT": _Field(_read_string_list),
    "COMMENT": _Field(_read_string),
}

_STREAM_DATA_FIELDS = {
    "VECTOR_LENGTH": _Field(_read_unsigned),
    "NUM_WINDOWS": _Field(_read_unsigned),
    "IS_MSD": _Field(_read_bool),
    "USE_GV": _Field(_read_bool),
    "OPTION": _Field(_read_string_list),
}

_POSITION_FIELDS = {
    "DURATION_PDF": _Field(_read_range),
    "DURATION_TREE": _Field(_read_range),
}

_POSITION_DATA_FIELDS = {
    "STREAM_WIN": _Field(_read_range_list),
    "STREAM_PDF": _Field(_read_range),
    "STREAM_TREE": _Field(_read_range),
    "GV_PDF": _Field(_read_optional_range, optional=True),
    "GV_TREE": _Field(_read_optional_range, optional=True),
}


@dataclass
class Global:
    """Contents of the ``[GLOBAL]`` section."""

    hts_voice_version: str
    sampling_frequency: int
    frame_period: int
    num_states: int
    num_streams: int
    stream_type: list[str]
    fullcontext_format: str
    fullcontext_version: str
    gv_off_context: list[str]
    comment: str

    def to_metadata(self) -> GlobalModelMetadata:
        """Build the voice's global metadata, parsing the GV-off question."""
        try:
            gv_off_context = Question.parse(self.gv_off_context)
        except QuestionParseError as error:
            raise ModelParseError(f"Failed to parse question: {error}") from error
        return GlobalModelMetadata(
            hts_voice_version=self.hts_voice_version,
            sampling_frequency=self.sampling_frequency,
            frame_period=self.frame_period,
            num_states=self.num_states,
            num_streams=self.num_streams,
            stream_type=list(self.stream_type),
            fullcontext_format=self.fullcontext_format,
            fullcontext_version=self.fullcontext_version,
            gv_off_context=gv_off_context,
        )


@dataclass
class StreamData:
    """Settings of one stream from the ``[STREAM]`` section."""

    vector_length: int
    num_windows: int
    is_msd: bool
    use_gv: bool
    option: list[str] = field(default_factory=list)

    def to_metadata(self) -> StreamModelMetadata:
        """Build the stream's model metadata."""
        return StreamModelMetadata(
            vector_length=self.vector_length,
            num_windows=self.num_windows,
            is_msd=self.is_msd,
            use_gv=self.use_gv,
            option=list(self.option),
        )


@dataclass
class Stream:
    """Contents of the ``[STREAM]`` section, keyed by stream name."""

    stream: dict[str, StreamData] = field(default_factory=dict)


@dataclass
class PositionData:
    """Byte ranges of one stream's data from the ``[POSITION]`` section."""

    stream_win: list[Range]
    stream_pdf: Range
    stream_tree: Range
    gv_pdf: Optional[Range] = None
    gv_tree: Optional[Range] = None


@dataclass
class Position:
    """Contents of the ``[POSITION]`` section."""

    duration_pdf: Range
    duration_tree: Range
    position: dict[str, PositionData] = field(default_factory=dict)


def _complete(values: dict[str, object], fields: Mapping[str, _Field]) -> dict[str, object]:
    for key, spec in fields.items():
        if key not in values:
            if not spec.optional:
                raise DeserializeError.custom(f"missing field `{key}`")
            values[key] = None
    return {key.lower(): value for key, value in values.items()}


def _read_record(
    de: Deserializer, fields: Mapping[str, _Field]
) -> tuple[dict[str, object], list[tuple[str, str]]]:
    """Read ``KEY:VALUE`` lines; unknown keys come back with their raw values."""
    values: dict[str, object] = {}
    extras: list[tuple[str, str]] = []

    def read_value(d: Deserializer, key: str) -> object:
        spec = fields.get(key)
        return spec.reader(d) if spec is not None else d.until_delim()

    for key, value in de.map_entries(read_value):
        if key in fields:
            if key in values:
                raise DeserializeError.custom(f"duplicate field `{key}`")
            values[key] = value
        else:
            extras.append((key, str(value)))
    return _complete(values, fields), extras


def _group_by_stream(
    entries: Iterable[tuple[str, str]],
) -> dict[str, list[tuple[str, str]]]:
    """Group ``NAME[STREAM]`` entries by stream; other keys are dropped."""
    groups: dict[str, list[tuple[str, str]]] = {}
    for key, value in entries:
        if not key.endswith("]"):
            continue
        start = key.find("[")
        if start < 0:
            continue
        groups.setdefault(key[start + 1 : -1], []).append((key[:start], value))
    return groups


def _read_group(
    entries: Iterable[tuple[str, str]],
    fields: Mapping[str, _Field],
    build: Callable[..., T],
) -> T:
    try:
        values: dict[str, object] = {}
        for key, raw in entries:
            spec = fields.get(key)
            if spec is None:
                continue
            if key in values:
                raise DeserializeError.custom(f"duplicate field `{key}`")
            values[key] = spec.reader(Deserializer(raw))
        return build(**_complete(values, fields))
    except DeserializeError as error:
        raise DeserializeError.custom(error) from error


def _read_global(de: Deserializer) -> Global:
    values, _ = _read_record(de, _GLOBAL_FIELDS)
    return Global(**values)


def _read_stream(de: Deserializer) -> Stream:
    _, extras = _read_record(de, {})
    return Stream(
        {
            name: _read_group(entries, _STREAM_DATA_FIELDS, StreamData)
            for name, entries in _group_by_stream(extras).items()
        }
    )


def _read_position(de: Deserializer) -> Position:
    values, extras = _read_record(de, _POSITION_FIELDS)
    return Position(
        duration_pdf=values["duration_pdf"],
        duration_tree=values["duration_tree"],
        position={
            name: _read_group(entries, _POSITION_DATA_FIELDS, PositionData)
            for name, entries in _group_by_stream(extras).items()
        },
    )


def _parse_header(
    text: Union[str, bytes, bytearray, memoryview], parse: Callable[[Deserializer], T]
) -> T:
    if not isinstance(text, str):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as error:
            raise ModelParseError("Failed to parse Header as UTF-8") from error
    try:
        return from_str(text, parse)
    except DeserializeError as error:
        raise ModelParseError(f"Failed to parse header:{error}") from error


def parse_global(text: Union[str, bytes, bytearray, memoryview]) -> Global:
    """Parse the body of a ``[GLOBAL]`` section."""
    return _parse_header(text, _read_global)


def parse_stream(text: Union[str, bytes, bytearray, memoryview]) -> Stream:
    """Parse the body of a ``[STREAM]`` section."""
    return _parse_header(text, _read_stream)


def parse_position(text: Union[str, bytes, bytearray, memoryview]) -> Position:
    """Parse the body of a ``[POSITION]`` section."""
    return _parse_header(text, _read_position)