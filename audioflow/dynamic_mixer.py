"""Mixer that plays several sounds at the same time."""

from __future__ import annotations

import threading
from itertools import islice
from typing import Iterator, List, Optional, Tuple

from audioflow.channels import ChannelCountConverter
from audioflow.samples import DataConverter, SampleFormat, SizeHint
from audioflow.sample_rate import SampleRateConverter
from audioflow.source import Source


class _UniformSource(Source):
    """Converts a source to a fixed channel count, rate and sample format."""

    def __init__(
        self, source: Source, channels: int, sample_rate: int, sample_format: SampleFormat
    ) -> None:
        self._source = source
        self._channels = channels
        self._sample_rate = sample_rate
        self._format = sample_format
        self._bounded = False
        self._chunk = self._build()

    def _build(self) -> Iterator:
        source = self._source
        frame_len = source.current_frame_len
        self._bounded = frame_len is not None
        samples = source if frame_len is None else islice(source, frame_len)
        converted = DataConverter(samples, source.sample_format, self._format)
        resampled = SampleRateConverter(
            converted, source.sample_rate, self._sample_rate, source.channels, self._format
        )
        return ChannelCountConverter(resampled, source.channels, self._channels)

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._format

    def __next__(self):
        try:
            return next(self._chunk)
        except StopIteration:
            pass
        if not self._bounded or self._source.current_frame_len == 0:
            raise StopIteration
        self._chunk = self._build()
        return next(self._chunk)


class DynamicMixerController:
    """The input side of a mixer: sounds added here are mixed into the output."""

    def __init__(self, channels: int, sample_rate: int, sample_format: SampleFormat) -> None:
        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._lock = threading.Lock()
        self._pending: List[Source] = []
        self._has_pending = False

    def add(self, source: Source) -> None:
        """Add a source to be mixed with the ones already playing."""
        uniform = _UniformSource(source, self.channels, self.sample_rate, self.sample_format)
        with self._lock:
            self._pending.append(uniform)
            self._has_pending = True


class DynamicMixer(Source):
    """The output side of a mixer: the sum of every sound added so far."""

    def __init__(self, controller: DynamicMixerController) -> None:
        self._input = controller
        self._current: List[Source] = []
        self._sample_count = 0

    @property
    def channels(self) -> int:
        return self._input.channels

    @property
    def sample_rate(self) -> int:
        return self._input.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._input.sample_format

    def __next__(self):
        if self._input._has_pending:
            self._start_pending_sources()

        self._sample_count += 1
        total = self._sum_current_sources()
        if not self._current:
            raise StopIteration
        return total

    def size_hint(self) -> SizeHint:
        return 0, None

    def _start_pending_sources(self) -> None:
        # Sources start only on a frame boundary so channels stay aligned.
        controller = self._input
        with controller._lock:
            still_pending = []
            for source in controller._pending:
                if self._sample_count % source.channels == 0:
                    self._current.append(source)
                else:
                    still_pending.append(source)
            controller._pending = still_pending
            controller._has_pending = bool(still_pending)

    def _sum_current_sources(self):
        fmt = self._input.sample_format
        total = fmt.zero_value()
        still_current = []
        for source in self._current:
            value = next(source, None)
            if value is not None:
                total = fmt.saturating_add(total, value)
                still_current.append(source)
        self._current = still_current
        return total


def mixer(
    channels: int,
    sample_rate: int,
    sample_format: SampleFormat = SampleFormat.I16,
) -> Tuple[DynamicMixerController, DynamicMixer]:
    """Build a mixer whose output has the given channel count, rate and format."""
    controller = DynamicMixerController(channels, sample_rate, sample_format)
    return controller, DynamicMixer(controller)