"""A source of samples held in memory."""

from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Optional

from audioflow.samples import SampleFormat, SizeHint, _size_hint
from audioflow.source import Source


class SamplesBuffer(Source):
    """A list of interleaved samples played as a source."""

    def __init__(
        self,
        channels: int,
        sample_rate: int,
        data: Iterable,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        if channels == 0:
            raise ValueError("channels must not be zero")
        if sample_rate == 0:
            raise ValueError("sample_rate must not be zero")
        samples = list(data)
        duration_ns = 1_000_000_000 * len(samples) // sample_rate // channels
        seconds, nanos = divmod(duration_ns, 1_000_000_000)
        self._duration = timedelta(seconds=seconds, microseconds=nanos / 1000)
        self._data = iter(samples)
        self._channels = channels
        self._sample_rate = sample_rate
        self._sample_format = sample_format

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._sample_format

    @property
    def total_duration(self) -> Optional[timedelta]:
        return self._duration

    def __next__(self):
        return next(self._data)

    def size_hint(self) -> SizeHint:
        """Exact number of samples left, as both bounds."""
        return _size_hint(self._data)