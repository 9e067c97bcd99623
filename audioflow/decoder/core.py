"""Format detection and the decoders built on top of it."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import BinaryIO, Optional

from audioflow.decoder.wav import WavDecoder
from audioflow.samples import SampleFormat, SizeHint
from audioflow.source import Source

_END = object()


class DecoderError(Exception):
    """Raised when a decoder cannot be built for the given data."""

    def __init__(self, message: str = "Unrecognized format") -> None:
        super().__init__(message)


class Mp4Type(Enum):
    """File extensions of the MP4 container family."""

    MP4 = "mp4"
    M4A = "m4a"
    M4P = "m4p"
    M4B = "m4b"
    M4R = "m4r"
    M4V = "m4v"
    MOV = "mov"

    @classmethod
    def from_str(cls, text: str) -> "Mp4Type":
        """Parse an extension, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"{text} is not a valid mp4 extension") from None

    def __str__(self) -> str:
        return self.value


def _open_wav(data: BinaryIO) -> WavDecoder:
    try:
        return WavDecoder(data)
    except ValueError:
        raise DecoderError() from None


class Decoder(Source):
    """Source of 16-bit samples decoded from an audio stream.

    The format is detected from the data; raises ``DecoderError`` when it is
    not recognised.
    """

    def __init__(self, data: BinaryIO) -> None:
        self._impl = _open_wav(data)

    @classmethod
    def new_wav(cls, data: BinaryIO) -> "Decoder":
        """Build a decoder for WAV data."""
        return cls(data)

    @classmethod
    def new_looped(cls, data: BinaryIO) -> "LoopedDecoder":
        """Build a decoder that starts over from the beginning when it ends."""
        return LoopedDecoder(cls(data))

    @property
    def channels(self) -> int:
        return self._impl.channels

    @property
    def sample_rate(self) -> int:
        return self._impl.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return SampleFormat.I16

    @property
    def current_frame_len(self) -> Optional[int]:
        return self._impl.current_frame_len

    @property
    def total_duration(self) -> Optional[timedelta]:
        return self._impl.total_duration

    def __next__(self) -> int:
        return next(self._impl)

    def size_hint(self) -> SizeHint:
        return self._impl.size_hint()


class LoopedDecoder(Source):
    """Plays a decoded stream over and over by rewinding it when it ends.

    If the stream cannot be rewound and decoded again, the decoder ends for good.
    """

    def __init__(self, decoder: Decoder) -> None:
        self._inner: Optional[WavDecoder] = decoder._impl

    @property
    def channels(self) -> int:
        return 0 if self._inner is None else self._inner.channels

    @property
    def sample_rate(self) -> int:
        return 1 if self._inner is None else self._inner.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return SampleFormat.I16

    @property
    def current_frame_len(self) -> Optional[int]:
        return 0 if self._inner is None else self._inner.current_frame_len

    @property
    def total_duration(self) -> Optional[timedelta]:
        return None

    def __next__(self) -> int:
        if self._inner is None:
            raise StopIteration
        value = next(self._inner, _END)
        if value is not _END:
            return value
        stream = self._inner.into_inner()
        self._inner = None
        try:
            stream.seek(0)
            restarted = WavDecoder(stream)
        except (OSError, ValueError):
            raise StopIteration from None
        self._inner = restarted
        return next(restarted)

    def size_hint(self) -> SizeHint:
        if self._inner is None:
            return 0, None
        return self._inner.size_hint()[0], None