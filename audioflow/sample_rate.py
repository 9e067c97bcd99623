"""Conversion between sample rates by linear interpolation."""

from __future__ import annotations

import math
from collections import deque
from itertools import islice
from typing import Iterable, Iterator, List, Optional

from audioflow.samples import SampleFormat, SizeHint, _size_hint

_END = object()


class SampleRateConverter:
    """Iterator that resamples an interleaved stream from one rate to another.

    Chunks of ``from_rate`` frames become chunks of ``to_rate`` frames (after
    reducing both by their greatest common divisor); every output frame is a
    linear interpolation between two neighbouring input frames.
    """

    def __init__(
        self,
        input: Iterable,
        from_rate: int,
        to_rate: int,
        channels: int,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        if from_rate < 1:
            raise ValueError("from_rate must be at least 1")
        if to_rate < 1:
            raise ValueError("to_rate must be at least 1")
        if channels < 1:
            raise ValueError("channels must be at least 1")

        self._input: Iterator = iter(input)
        self._format = sample_format
        self._channels = channels

        if from_rate == to_rate:
            current: List = []
            upcoming: List = []
        else:
            current = list(islice(self._input, channels))
            upcoming = list(islice(self._input, channels))

        divisor = math.gcd(from_rate, to_rate)
        self._from = from_rate // divisor
        self._to = to_rate // divisor
        self._current_frame = current
        self._next_frame = upcoming
        self._current_pos = 0
        self._next_output_pos = 0
        self._output_buffer: deque = deque()

    def __iter__(self) -> "SampleRateConverter":
        return self

    def _next_input_frame(self) -> None:
        self._current_pos += 1
        self._current_frame = self._next_frame
        self._next_frame = list(islice(self._input, self._channels))

    def __next__(self):
        if self._from == self._to:
            return next(self._input)

        if self._output_buffer:
            return self._output_buffer.popleft()

        if self._next_output_pos == self._to:
            self._next_output_pos = 0
            self._next_input_frame()
            while self._current_pos != self._from:
                self._next_input_frame()
            self._current_pos = 0
        else:
            required = (self._from * self._next_output_pos // self._to) % self._from
            while self._current_pos != required:
                self._next_input_frame()

        numerator = (self._from * self._next_output_pos) % self._to
        result = _END
        pairs = zip(self._current_frame, self._next_frame)
        for offset, (current, upcoming) in enumerate(pairs):
            sample = self._format.lerp(current, upcoming, numerator, self._to)
            if offset == 0:
                result = sample
            else:
                self._output_buffer.append(sample)

        self._next_output_pos += 1

        if result is not _END:
            return result

        # The input ran out mid-frame: flush what is left of the current frame.
        if self._current_frame:
            first, *rest = self._current_frame
            self._output_buffer = deque(rest)
            self._current_frame = []
            return first
        raise StopIteration

    def size_hint(self) -> SizeHint:
        """Bounds on the number of samples left."""
        if self._from == self._to:
            return _size_hint(self._input)

        def apply(samples: int) -> int:
            after_chunk = samples
            if self._current_pos == self._from - 1:
                after_chunk += len(self._next_frame)
            unread = max(0, self._from - (self._current_pos + 2)) * self._channels
            after_chunk = max(0, after_chunk - unread)
            after_chunk = after_chunk * self._to // self._from
            current_chunk = (self._to - self._next_output_pos) * self._channels
            return current_chunk + after_chunk + len(self._output_buffer)

        low, high = _size_hint(self._input)
        upper: Optional[int] = None if high is None else apply(high)
        return apply(low), upper

    def __len__(self) -> int:
        low, high = self.size_hint()
        if high != low:
            raise TypeError("length of the input is not known")
        return low

    def into_inner(self) -> Iterator:
        """Return the underlying iterator."""
        return self._input