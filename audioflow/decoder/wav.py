"""Decoder for RIFF WAVE audio."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import BinaryIO, Callable, Optional

from audioflow.samples import I16_MAX, SampleFormat, SizeHint, _wrap_i16
from audioflow.source import Source

_FORMAT_PCM = 0x0001
_FORMAT_FLOAT = 0x0003
_FORMAT_EXTENSIBLE = 0xFFFE


@dataclass(frozen=True)
class _WavSpec:
    channels: int
    sample_rate: int
    bits_per_sample: int
    bytes_per_sample: int
    is_float: bool
    data_length: int

    @property
    def num_samples(self) -> int:
        return self.data_length // self.bytes_per_sample


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if data is None or len(data) < count:
        raise ValueError("unexpected end of WAV header")
    return data


def _parse_fmt(payload: bytes):
    if len(payload) < 16:
        raise ValueError("fmt chunk is too short")
    tag, channels, rate, _byte_rate, block_align, bits = struct.unpack_from("<HHIIHH", payload)
    if tag == _FORMAT_EXTENSIBLE:
        if len(payload) < 40:
            raise ValueError("extensible fmt chunk is too short")
        _cb_size, valid_bits, _mask = struct.unpack_from("<HHI", payload, 16)
        (tag,) = struct.unpack_from("<H", payload, 24)
        if valid_bits:
            if valid_bits > bits:
                raise ValueError("valid bits exceed the container size")
            bits = valid_bits
    if channels == 0:
        raise ValueError("WAV stream has no channels")
    if rate == 0:
        raise ValueError("WAV stream has a zero sample rate")
    if block_align == 0 or block_align % channels:
        raise ValueError("invalid block alignment")
    width = block_align // channels
    if bits == 0 or bits > width * 8:
        raise ValueError("invalid bits per sample")
    if tag == _FORMAT_PCM:
        if width > 4:
            raise ValueError("integer samples wider than 32 bits are not supported")
        is_float = False
    elif tag == _FORMAT_FLOAT:
        if bits != 32 or width != 4:
            raise ValueError("only 32-bit float samples are supported")
        is_float = True
    else:
        raise ValueError(f"unsupported WAV format tag {tag:#06x}")
    return channels, rate, bits, width, is_float


def _read_header(stream: BinaryIO) -> _WavSpec:
    """Parse the header and leave the stream at the start of the sample data."""
    riff = _read_exact(stream, 12)
    if riff[:4] != b"RIFF" or riff[8:] != b"WAVE":
        raise ValueError("not a RIFF WAVE stream")
    fmt = None
    while True:
        chunk_id, size = struct.unpack("<4sI", _read_exact(stream, 8))
        if chunk_id == b"data":
            if fmt is None:
                raise ValueError("data chunk comes before the fmt chunk")
            channels, rate, bits, width, is_float = fmt
            return _WavSpec(channels, rate, bits, width, is_float, size)
        if chunk_id == b"fmt ":
            if fmt is not None:
                raise ValueError("duplicate fmt chunk")
            fmt = _parse_fmt(_read_exact(stream, size))
            if size % 2:
                stream.seek(1, 1)
        else:
            stream.seek(size + size % 2, 1)


def is_wave(data: BinaryIO) -> bool:
    """Tell whether the stream holds WAV data, then restore its position."""
    position = data.tell()
    try:
        _read_header(data)
    except (ValueError, struct.error):
        return False
    finally:
        data.seek(position)
    return True


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def f32_to_i16(value: float) -> int:
    """Scale a float sample in ``[-1.0, 1.0]`` to 16 bits, clipping beyond that range."""
    if math.isnan(value):
        clipped = -1.0
    else:
        clipped = min(max(value, -1.0), 1.0)
    scaled = _to_f32(_to_f32(clipped) * float(I16_MAX))
    return int(scaled)


def i8_to_i16(value: int) -> int:
    """Scale an 8-bit sample to 16 bits."""
    return value * 256


def i24_to_i16(value: int) -> int:
    """Reduce a 24-bit sample to 16 bits, dropping the low byte."""
    return _wrap_i16(value >> 8)


def i32_to_i16(value: int) -> int:
    """Reduce a 32-bit sample to 16 bits, dropping the low two bytes."""
    return _wrap_i16(value >> 16)


def _identity(value: int) -> int:
    return value


_CONVERTERS = {
    (True, 32): f32_to_i16,
    (False, 8): i8_to_i16,
    (False, 16): _identity,
    (False, 24): i24_to_i16,
    (False, 32): i32_to_i16,
}


class WavDecoder(Source):
    """Decodes a WAV stream into 16-bit integer samples.

    Raises ``ValueError`` if the stream does not hold WAV data; the stream is
    then left where it was.
    """

    def __init__(self, data: BinaryIO) -> None:
        if not is_wave(data):
            raise ValueError("data is not a WAV stream")
        self._stream = data
        self._spec = _read_header(data)
        self._samples_read = 0
        self._convert: Optional[Callable] = _CONVERTERS.get(
            (self._spec.is_float, self._spec.bits_per_sample)
        )
        frames = self._spec.sample_rate * self._spec.channels
        self._duration = timedelta(
            microseconds=1_000_000 * self._spec.num_samples // frames
        )

    @property
    def channels(self) -> int:
        return self._spec.channels

    @property
    def sample_rate(self) -> int:
        return self._spec.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return SampleFormat.I16

    @property
    def total_duration(self) -> Optional[timedelta]:
        return self._duration

    def _decode(self, raw: bytes):
        spec = self._spec
        if spec.is_float:
            return struct.unpack("<f", raw)[0]
        if spec.bytes_per_sample == 1:
            return raw[0] - 128
        value = int.from_bytes(raw, "little", signed=True)
        return value >> (spec.bytes_per_sample * 8 - spec.bits_per_sample)

    def __next__(self) -> int:
        if self._convert is None:
            kind = "float" if self._spec.is_float else "int"
            raise ValueError(
                f"Unimplemented wav spec: {kind}, {self._spec.bits_per_sample}"
            )
        if self._samples_read >= self._spec.num_samples:
            raise StopIteration
        self._samples_read += 1
        width = self._spec.bytes_per_sample
        raw = self._stream.read(width)
        if raw is None or len(raw) < width:
            return self._convert(0.0 if self._spec.is_float else 0)
        return self._convert(self._decode(raw))

    def size_hint(self) -> SizeHint:
        """Exact number of samples left, as both bounds."""
        left = max(0, self._spec.num_samples - self._samples_read)
        return left, left

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._stream