"""Reader for complete ``.htsvoice`` files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from htsbonsai.model.voice import StreamModels, Voice
from htsbonsai.model.voice_set import ModelError
from htsbonsai.model.window import Window, Windows
from htsbonsai.parser import base
from htsbonsai.parser.base import ModelParseError
from htsbonsai.parser.header import (
    Global,
    Position,
    Stream,
    parse_global,
    parse_position,
    parse_stream,
)
from htsbonsai.parser.model import parse_model
from htsbonsai.parser.window_row import parse_window_row

SectionInput = Union[str, bytes, bytearray, memoryview]
_SECTIONS = ("GLOBAL", "STREAM", "POSITION", "DATA")


def _split_error(kind: str, remaining: bytes) -> ModelParseError:
    shown = remaining[:20].decode("utf-8", "replace")
    return ModelParseError(f"{kind} at: {shown}")


def _skip_newlines(raw: bytes, position: int) -> int:
    while raw.startswith(b"\n", position):
        position += 1
    return position


def split_sections(data: SectionInput) -> tuple:
    """Split a voice file into its GLOBAL, STREAM, POSITION and DATA bodies.

    The parts are ``str`` when ``data`` is ``str`` and ``bytes`` otherwise.
    """
    is_text = isinstance(data, str)
    raw = data.encode("utf-8") if is_text else bytes(data)

    position = _skip_newlines(raw, 0)
    sections = []
    for name in _SECTIONS:
        if sections:
            start = position
            position = _skip_newlines(raw, position)
            if position == start:
                raise _split_error("Char", raw[position:])
        tag = f"[{name}]\n".encode()
        if not raw.startswith(tag, position):
            raise _split_error("Tag", raw[position:])
        position += len(tag)
        if name == "DATA":
            body = raw[position:]
            position = len(raw)
        else:
            end = raw.find(b"\n[", position)
            if end < 0:
                raise _split_error("TakeUntil", raw[position:])
            body = raw[position:end]
            position = end
        sections.append(body.decode("utf-8") if is_text else body)
    return tuple(sections)


def _parse_window(data: bytes, byte_range: tuple[int, int]) -> Window:
    start, end = byte_range
    if start < 0 or end + 1 < start or end + 1 > len(data):
        raise ModelParseError(f"range {start}-{end} is outside the data")
    text = data[start : end + 1].decode("latin-1")
    rest, window = parse_window_row(text)
    rest, _ = base.sp(rest)
    if rest:
        raise ModelParseError(f"Eof at: {rest[:20]}", remaining=rest)
    return window


def _parse_data_section(
    data: bytes, global_: Global, stream: Stream, position: Position
):
    duration_model = parse_model(
        data, position.duration_tree, position.duration_pdf, global_.num_states * 2
    )

    stream_models = []
    for key in global_.stream_type:
        pos = position.position.get(key)
        if pos is None:
            raise ModelParseError("Position was not found")
        stream_data = stream.stream.get(key)
        if stream_data is None:
            raise ModelParseError("Stream was not found")

        stream_model = parse_model(
            data,
            pos.stream_tree,
            pos.stream_pdf,
            stream_data.vector_length * stream_data.num_windows * 2
            + int(stream_data.is_msd),
        )

        gv_model = None
        if stream_data.use_gv:
            if pos.gv_tree is None or pos.gv_pdf is None:
                raise ModelParseError("USE_GV is true, but positions for GV is not set")
            gv_model = parse_model(
                data, pos.gv_tree, pos.gv_pdf, stream_data.vector_length * 2
            )

        windows = Windows(_parse_window(data, window) for window in pos.stream_win)
        stream_models.append(
            StreamModels(stream_data.to_metadata(), stream_model, gv_model, windows)
        )
    return duration_model, stream_models


def parse_htsvoice(data: Union[bytes, bytearray, memoryview]) -> Voice:
    """Parse the contents of a ``.htsvoice`` file."""
    in_global, in_stream, in_position, in_data = split_sections(bytes(data))

    global_ = parse_global(in_global)
    stream = parse_stream(in_stream)
    position = parse_position(in_position)

    duration_model, stream_models = _parse_data_section(
        in_data, global_, stream, position
    )
    return Voice(
        metadata=global_.to_metadata(),
        duration_model=duration_model,
        stream_models=stream_models,
    )


def load_htsvoice_file(path: Union[str, os.PathLike]) -> Voice:
    """Read and parse a ``.htsvoice`` file."""
    try:
        data = Path(path).read_bytes()
    except OSError as error:
        raise ModelError(f"Io failed: {error}") from error
    return parse_htsvoice(data)


def load_htsvoice_bytes(data: Union[bytes, bytearray, memoryview]) -> Voice:
    """Parse ``.htsvoice`` contents held in memory."""
    return parse_htsvoice(data)